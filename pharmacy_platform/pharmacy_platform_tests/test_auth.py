import uuid
from unittest.mock import Mock

import jwt
import pytest

from pharmacy_platform.pharmacy_service.auth import AuthConfig, PasswordHasher, TokenIssuer
from pharmacy_platform.pharmacy_service.exceptions import ConflictError, NotFoundError, UnauthorizedError
from pharmacy_platform.pharmacy_service.models import User
from pharmacy_platform.pharmacy_service.repositories import SqlUserStore, UserStore
from pharmacy_platform.pharmacy_service.services.auth_service import AuthService

TEST_CONFIG = AuthConfig(secret_key="jwt_secret", password_rounds=1000)


def unique_user():
    unique = uuid.uuid4().hex[:8]
    return {
        "username": f"user_{unique}",
        "email": f"user_{unique}@example.com",
        "password": "password123",
    }


@pytest.fixture
def user_store():
    return Mock(spec=UserStore)


@pytest.fixture
def service(user_store):
    return AuthService(user_store, TEST_CONFIG)


# ---------------- Service (mocked store) ----------------

def test_register_creates_user_and_returns_token(service, user_store):
    user_store.find_by_email.return_value = None
    user_store.create.side_effect = lambda username, email, password: User(
        id="someId", username=username, email=email, password=password
    )

    token = service.register("testuser", "test@example.com", "password123")

    user_store.find_by_email.assert_called_once_with("test@example.com")
    kwargs = user_store.create.call_args.kwargs
    assert kwargs["username"] == "testuser"
    assert kwargs["email"] == "test@example.com"
    assert kwargs["password"] != "password123"
    assert service.hasher.verify("password123", kwargs["password"])

    claims = service.tokens.decode(token)
    assert claims["sub"] == "someId"
    assert claims["username"] == "testuser"
    assert "exp" in claims


def test_register_existing_email_raises_conflict(service, user_store):
    user_store.find_by_email.return_value = User(id="1", username="x", email="test@example.com", password="h")

    with pytest.raises(ConflictError):
        service.register("testuser", "test@example.com", "password123")

    user_store.create.assert_not_called()


def test_login_delegates_comparison_to_hasher(user_store):
    hasher = Mock(spec=PasswordHasher)
    hasher.verify.return_value = True
    service = AuthService(user_store, TEST_CONFIG, hasher=hasher)
    user_store.find_by_email.return_value = User(
        id="someId", username="testuser", email="test@example.com", password="hashedPassword"
    )

    token = service.login("test@example.com", "password123")

    hasher.verify.assert_called_once_with("password123", "hashedPassword")
    assert service.tokens.decode(token)["sub"] == "someId"


def test_login_unknown_email_raises_unauthorized(service, user_store):
    user_store.find_by_email.return_value = None

    with pytest.raises(UnauthorizedError):
        service.login("test@example.com", "password123")


def test_login_wrong_password_raises_unauthorized(service, user_store):
    user_store.find_by_email.return_value = User(
        id="someId", username="testuser", email="test@example.com",
        password=service.hasher.hash("password123"),
    )

    with pytest.raises(UnauthorizedError):
        service.login("test@example.com", "wrong-password")


def test_reset_password_rehashes_and_saves(service, user_store):
    user = User(id="someId", username="testuser", email="test@example.com", password="oldHash")
    user_store.find_by_email.return_value = user

    result = service.reset_password("test@example.com", "newPassword123")

    assert result == {"message": "Password successfully updated"}
    assert user.password != "oldHash"
    assert service.hasher.verify("newPassword123", user.password)
    user_store.save.assert_called_once_with(user)


def test_reset_password_unknown_email_raises_not_found(service, user_store):
    user_store.find_by_email.return_value = None

    with pytest.raises(NotFoundError, match="User not found"):
        service.reset_password("test@example.com", "newPassword123")


def test_get_user_returns_store_result(service, user_store):
    user = User(id="someId", username="testuser", email="test@example.com", password="h")
    user_store.find_by_id.return_value = user

    assert service.get_user("someId") is user
    user_store.find_by_id.assert_called_once_with("someId")


def test_get_user_absent_returns_none(service, user_store):
    user_store.find_by_id.return_value = None
    assert service.get_user("missing") is None


# ---------------- Hasher / tokens ----------------

def test_password_hasher_salts_hashes():
    hasher = PasswordHasher(rounds=1000)
    first, second = hasher.hash("secret"), hasher.hash("secret")
    assert first != second
    assert hasher.verify("secret", first)
    assert not hasher.verify("Secret", first)


def test_token_issuer_rejects_tampered_and_expired_tokens():
    issuer = TokenIssuer("jwt_secret")
    token = issuer.sign("someId")
    assert issuer.decode(token)["sub"] == "someId"

    with pytest.raises(UnauthorizedError):
        TokenIssuer("other_secret").decode(token)

    expired = TokenIssuer("jwt_secret", expire_minutes=-1).sign("someId")
    with pytest.raises(UnauthorizedError):
        issuer.decode(expired)


# ---------------- SQL store ----------------

def test_sql_user_store_rejects_duplicate_email(db_session):
    store = SqlUserStore(db_session)
    store.create(username="a", email="dup@example.com", password="h")

    with pytest.raises(ConflictError):
        store.create(username="b", email="dup@example.com", password="h")

    # session is usable after the rollback
    assert store.find_by_email("dup@example.com").username == "a"


def test_email_lookup_is_case_sensitive(db_session):
    store = SqlUserStore(db_session)
    store.create(username="a", email="Case@example.com", password="h")

    assert store.find_by_email("case@example.com") is None
    assert store.find_by_email("Case@example.com") is not None


# ---------------- HTTP routes ----------------

def test_register_and_login(client):
    user = unique_user()
    register = client.post("/auth/register", json=user)
    assert register.status_code == 200
    assert register.json()["token_type"] == "bearer"
    assert register.json()["access_token"]

    login = client.post("/auth/login", json={"email": user["email"], "password": user["password"]})
    assert login.status_code == 200
    assert "access_token" in login.json()


def test_register_duplicate_email_returns_409(client):
    user = unique_user()
    assert client.post("/auth/register", json=user).status_code == 200

    again = client.post("/auth/register", json={**user, "username": "someone_else"})
    assert again.status_code == 409
    assert again.json()["detail"] == "User with this email already exists."


def test_register_missing_fields(client):
    response = client.post("/auth/register", json={"username": "user1"})
    assert response.status_code == 422


def test_login_failures_return_401_without_token(client):
    user = unique_user()
    client.post("/auth/register", json=user)

    bad_password = client.post("/auth/login", json={"email": user["email"], "password": "wrongpassword"})
    assert bad_password.status_code == 401
    assert "access_token" not in bad_password.json()

    unknown = client.post("/auth/login", json={"email": "nobody@example.com", "password": "whatever"})
    assert unknown.status_code == 401
    assert "access_token" not in unknown.json()


def test_reset_password_then_login(client):
    user = unique_user()
    client.post("/auth/register", json=user)

    reset = client.post("/auth/reset-password", json={"email": user["email"], "newPassword": "NewPass2!"})
    assert reset.status_code == 200
    assert reset.json() == {"message": "Password successfully updated"}

    new_login = client.post("/auth/login", json={"email": user["email"], "password": "NewPass2!"})
    assert new_login.status_code == 200

    old_login = client.post("/auth/login", json={"email": user["email"], "password": user["password"]})
    assert old_login.status_code == 401


def test_reset_password_unknown_email_returns_404(client):
    response = client.post("/auth/reset-password", json={"email": "nobody@example.com", "newPassword": "x"})
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


def test_me_returns_token_owner(client):
    user = unique_user()
    token = client.post("/auth/register", json=user).json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == user["email"]
    assert me.json()["username"] == user["username"]
    assert "password" not in me.json()

    by_id = client.get(f"/auth/users/{me.json()['id']}")
    assert by_id.status_code == 200
    assert by_id.json() == me.json()


def test_me_rejects_missing_or_invalid_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"}).status_code == 401

    forged = jwt.encode({"sub": "someId"}, "wrong-secret", algorithm="HS256")
    assert client.get("/auth/me", headers={"Authorization": f"Bearer {forged}"}).status_code == 401


def test_get_unknown_user_returns_404(client):
    assert client.get("/auth/users/does-not-exist").status_code == 404
