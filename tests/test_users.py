"""Registration, login and logout flows."""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from conftest import PASSWORD, login, logout, register, upload
from imagehoster.core.security import verify_password
from imagehoster.main_config import session_config
from imagehoster.models import HttpSessionRecord, User, UserProfile

COOKIE = session_config.cookie_name


def _session_rows(db_call) -> list[HttpSessionRecord]:
    async def fn(session):
        result = await session.execute(select(HttpSessionRecord))
        return list(result.scalars().all())

    return db_call(fn)


def test_registration_form_renders(client: TestClient) -> None:
    response = client.get("/users/registration")

    assert response.status_code == status.HTTP_200_OK
    assert 'name="username"' in response.text
    assert 'name="full_name"' in response.text


def test_register_redirects_to_login_and_stores_hashed_password(
    client: TestClient, db_call
) -> None:
    response = register(client, "alice", full_name="Alice Doe", mobile_number="5550100")

    assert response.status_code == status.HTTP_303_SEE_OTHER
    assert response.headers["location"] == "/users/login"

    async def fn(session):
        result = await session.execute(select(User).where(User.username == "alice"))
        return result.unique().scalar_one()

    user = db_call(fn)
    assert user.password != PASSWORD
    assert verify_password(user.password, PASSWORD)
    assert user.profile.full_name == "Alice Doe"
    assert user.profile.mobile_number == "5550100"


def test_register_weak_password_rerenders_form(client: TestClient, db_call) -> None:
    response = register(client, "bob", password="password", full_name="Bob")

    assert response.status_code == status.HTTP_200_OK
    assert "Password must contain atleast 1 alphabet, 1 number" in response.text
    assert 'value="bob"' in response.text
    assert 'value="Bob"' in response.text
    # the rejected password is never echoed back
    assert 'value="password"' not in response.text

    async def fn(session):
        return (await session.execute(select(func.count()).select_from(User))).scalar_one()

    assert db_call(fn) == 0


def test_register_duplicate_username(client: TestClient, db_call) -> None:
    register(client, "alice")

    response = register(client, "alice", password="xyz#789")

    assert response.status_code == status.HTTP_200_OK
    assert "Username already exists" in response.text

    async def fn(session):
        return (await session.execute(select(func.count()).select_from(UserProfile))).scalar_one()

    assert db_call(fn) == 1


def test_register_and_login_with_long_password(client: TestClient) -> None:
    long_password = "a1!" + "x" * 400

    response = register(client, "carol", password=long_password)
    assert response.status_code == status.HTTP_303_SEE_OTHER

    assert login(client, "carol", password=long_password).headers["location"] == "/images"


def test_register_without_username_is_rejected(client: TestClient) -> None:
    response = client.post("/users/registration", data={"password": PASSWORD})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_login_stores_user_in_session(client: TestClient, db_call) -> None:
    register(client, "alice", full_name="Alice Doe", email_address="alice@example.com")

    response = login(client, "alice")

    assert response.status_code == status.HTTP_303_SEE_OTHER
    assert response.headers["location"] == "/images"
    assert COOKIE in response.cookies

    rows = _session_rows(db_call)
    assert len(rows) == 1
    loggeduser = rows[0].data["loggeduser"]
    assert loggeduser["username"] == "alice"
    assert loggeduser["profile"]["email_address"] == "alice@example.com"
    assert "password" not in loggeduser

    page = client.get("/images")
    assert page.status_code == status.HTTP_200_OK
    assert "Hello alice" in page.text


def test_login_with_wrong_password_shows_form(client: TestClient, db_call) -> None:
    register(client, "alice")

    response = login(client, "alice", password="wrong#1")

    assert response.status_code == status.HTTP_200_OK
    assert 'action="/users/login"' in response.text
    assert COOKIE not in response.cookies
    assert _session_rows(db_call) == []

    anonymous = client.get("/images", follow_redirects=False)
    assert anonymous.status_code == status.HTTP_303_SEE_OTHER
    assert anonymous.headers["location"] == "/users/login"


def test_login_unknown_user_shows_form(client: TestClient) -> None:
    response = login(client, "nobody")

    assert response.status_code == status.HTTP_200_OK
    assert COOKIE not in response.cookies


def test_login_again_issues_new_session(client: TestClient, db_call) -> None:
    register(client, "alice")
    first = login(client, "alice").cookies[COOKIE]

    second = login(client, "alice").cookies[COOKIE]

    assert first != second
    assert len(_session_rows(db_call)) == 1


def test_unknown_session_cookie_is_anonymous(client: TestClient) -> None:
    client.cookies.set(COOKIE, "forged-token")

    response = client.get("/images", follow_redirects=False)

    assert response.status_code == status.HTTP_303_SEE_OTHER


def test_logout_destroys_session_and_lists_images(logged_in: TestClient, db_call) -> None:
    upload(logged_in, title="Harbour")

    response = logout(logged_in)

    assert response.status_code == status.HTTP_200_OK
    assert "Harbour" in response.text
    assert 'href="/users/login"' in response.text
    assert _session_rows(db_call) == []
    assert COOKIE not in logged_in.cookies

    after = logged_in.get("/images", follow_redirects=False)
    assert after.status_code == status.HTTP_303_SEE_OTHER


def test_home_page_is_public(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == status.HTTP_200_OK
    assert "There are no images." in response.text


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "healthy", "database": "ok"}
