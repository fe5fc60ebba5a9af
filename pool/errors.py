class PoolError(Exception):
    """Base class for prediction pool errors."""

    code = "pool_error"
    status_code = 400


class InvalidPredictionError(PoolError, ValueError):
    code = "invalid_prediction"
    status_code = 422


class InvalidResultError(PoolError, ValueError):
    code = "invalid_result"
    status_code = 422


class ResultAlreadyRecordedError(PoolError):
    code = "result_already_recorded"
    status_code = 409


class PredictionLockedError(PoolError):
    """Raised when a prediction is created or edited after the lock window opened."""

    code = "predictions_closed"
    status_code = 423

    def __init__(self, match_id=None):
        self.match_id = match_id
        super().__init__("Predictions are closed for this match")


class JokerLimitError(PoolError):
    code = "joker_limit_reached"
    status_code = 409

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Joker already used (limit {limit} per player)")


class GroupNotFoundError(PoolError):
    code = "group_not_found"
    status_code = 404


class AlreadyMemberError(PoolError):
    code = "already_member"
    status_code = 409


class GroupPermissionError(PoolError):
    code = "group_forbidden"
    status_code = 403
