import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session

from pool.config import SEED_DEMO_DATA
from pool.database import create_db_and_tables, engine
from pool.errors import PoolError
from pool.logging_config import configure_logging
from pool.services.seed import ensure_admin, seed_demo_data

logger = logging.getLogger("pool.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    configure_logging()
    # Startup: Create database tables
    create_db_and_tables()
    with Session(engine) as db:
        ensure_admin(db)
        if SEED_DEMO_DATA:
            seed_demo_data(db)
    logger.info("Prediction pool started")
    yield
    # Shutdown: cleanup if needed


# Initialize FastAPI app
app = FastAPI(
    title="World Cup Prediction Pool",
    description="Predict match scores, play your joker and climb your group's ranking",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(PoolError)
async def pool_error_handler(request: Request, exc: PoolError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "code": exc.code}
    )


# Include routers
from pool.routers import admin, api, auth, groups, leaderboard  # noqa: E402

app.include_router(auth.router, tags=["auth"])
app.include_router(api.router, tags=["api"])
app.include_router(groups.router, tags=["groups"])
app.include_router(leaderboard.router, tags=["leaderboard"])
app.include_router(admin.router, tags=["admin"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
