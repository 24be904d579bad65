import pytest

from app.core.route_guard import (
    GuardDecision, PathClass, TokenState, classify_path, decide
)


@pytest.mark.parametrize("path, expected", [
    ("/dashboard", PathClass.PROTECTED),
    ("/dashboard/profile", PathClass.PROTECTED),
    ("/complete-profile", PathClass.PROTECTED),
    ("/auth/signin", PathClass.AUTH_ONLY),
    ("/auth/signup", PathClass.AUTH_ONLY),
    ("/", PathClass.UNCLASSIFIED),
    ("/api/session", PathClass.UNCLASSIFIED),
])
def test_classify_path(path, expected):
    assert classify_path(path) == expected


@pytest.mark.parametrize("path_class, state, expected", [
    (PathClass.PROTECTED, TokenState.VALID, GuardDecision()),
    (PathClass.PROTECTED, TokenState.INVALID, GuardDecision("/auth/signin", clear_cookie=True)),
    (PathClass.PROTECTED, TokenState.ABSENT, GuardDecision("/auth/signin")),
    (PathClass.AUTH_ONLY, TokenState.VALID, GuardDecision("/dashboard")),
    (PathClass.AUTH_ONLY, TokenState.INVALID, GuardDecision()),
    (PathClass.AUTH_ONLY, TokenState.ABSENT, GuardDecision()),
    (PathClass.UNCLASSIFIED, TokenState.VALID, GuardDecision()),
    (PathClass.UNCLASSIFIED, TokenState.INVALID, GuardDecision()),
    (PathClass.UNCLASSIFIED, TokenState.ABSENT, GuardDecision()),
])
def test_decision_table(path_class, state, expected):
    assert decide(path_class, state) == expected


def test_dashboard_without_cookie_redirects_to_signin(client):
    response = client.get("/dashboard")
    assert response.status_code == 307
    assert response.headers["location"] == "/auth/signin"


def test_dashboard_with_invalid_cookie_redirects_and_clears_cookie(client):
    client.cookies.set("token", "garbage")
    response = client.get("/dashboard")
    assert response.status_code == 307
    assert response.headers["location"] == "/auth/signin"
    assert "max-age=0" in response.headers["set-cookie"].lower()


def test_dashboard_with_valid_cookie_is_served(logged_in):
    response = logged_in.get("/dashboard")
    assert response.status_code == 200
    assert response.json()["page"] == "dashboard"
    assert response.json()["user"]["email"] == "a@b.com"


def test_signin_with_valid_cookie_redirects_to_dashboard(logged_in):
    response = logged_in.get("/auth/signin")
    assert response.status_code == 307
    assert response.headers["location"] == "/dashboard"


def test_signin_with_invalid_cookie_is_served(client):
    client.cookies.set("token", "garbage")
    assert client.get("/auth/signin").status_code == 200


def test_root_without_cookie_passes_through(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_guard_does_not_consult_the_store(logged_in, fake_db):
    fake_db.tables["users"].clear()
    fake_db.fail_with = RuntimeError("store down")
    assert logged_in.get("/complete-profile").status_code == 200
