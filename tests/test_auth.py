from sqlmodel import select

from pool.auth import hash_password, verify_password
from pool.models import User


def test_password_hashing():
    hashed = hash_password("secret-password")

    assert hashed != "secret-password"
    assert verify_password("secret-password", hashed)
    assert not verify_password("wrong", hashed)


def test_long_passwords_are_cut_at_bcrypt_limit():
    long_password = "x" * 72
    hashed = hash_password(long_password + "tail")

    assert verify_password(long_password, hashed)
    assert not verify_password("x" * 71, hashed)


def test_register_and_me(client, session):
    response = client.post("/auth/register", json={
        "email": "Ana@Example.com",
        "password": "password123",
        "name": "Ana",
        "surname": "Silva"
    })
    assert response.status_code == 201
    assert response.json()["user"]["email"] == "ana@example.com"

    user = session.exec(select(User).where(User.email == "ana@example.com")).first()
    assert user is not None

    # Session cookie is set by the register call
    response = client.get("/auth/me")
    assert response.status_code == 200
    assert response.json()["display_name"] == "Ana Silva"


def test_register_duplicate_email(client, user):
    response = client.post("/auth/register", json={
        "email": user.email,
        "password": "password123",
        "name": "Copy"
    })
    assert response.status_code == 409


def test_register_invalid_email(client):
    response = client.post("/auth/register", json={
        "email": "invalid-email",
        "password": "password123",
        "name": "Ana"
    })
    assert response.status_code == 422


def test_login_and_logout(client, user):
    response = client.post("/auth/login", json={"email": user.email, "password": "password123"})
    assert response.status_code == 200
    assert response.json()["token"]

    assert client.get("/auth/me").status_code == 200

    client.post("/auth/logout")
    client.cookies.clear()
    assert client.get("/auth/me").status_code == 401


def test_login_invalid_credentials(client, user):
    response = client.post("/auth/login", json={"email": user.email, "password": "nope"})
    assert response.status_code == 401
