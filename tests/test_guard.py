from backend.app.core.guard import HOME_PATH, LOGIN_PATH, navigation_for, resolve_redirect
from backend.app.schemas.user import UserRole

from conftest import make_user


def test_anonymous_visitor_is_sent_to_login():
    assert resolve_redirect("/suppliers", None) == LOGIN_PATH
    assert resolve_redirect("/", None) == LOGIN_PATH


def test_anonymous_visitor_may_open_sign_in_pages():
    assert resolve_redirect("/login", None) is None
    assert resolve_redirect("/signup", None) is None


def test_signed_in_user_is_sent_home_from_sign_in_pages():
    user = make_user()
    assert resolve_redirect("/login", user) == HOME_PATH
    assert resolve_redirect("/signup", user) == HOME_PATH
    assert resolve_redirect("/reports", user) is None


def test_navigation_hides_pages_the_role_cannot_open():
    names = [item["name"] for item in navigation_for(make_user(UserRole.VIEWER))]
    assert "Settings" not in names
    assert "Suppliers" in names
    assert "Inventory" in names

    admin_names = [item["name"] for item in navigation_for(make_user(UserRole.ADMIN))]
    assert "Settings" in admin_names


def test_protected_page_redirects_to_login(client, anonymous):
    response = client.get("/suppliers", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_login_page_renders_for_anonymous_visitor(client, anonymous):
    response = client.get("/login")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "login-form" in response.text


def test_login_page_redirects_signed_in_user(client, login):
    login()
    response = client.get("/login", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_page_shows_shell_for_signed_in_user(client, login, airtable):
    login(UserRole.MANAGER)
    airtable.seed("Suppliers", {"Supplier Name": "Acme Bottles", "Status": "Active"})

    response = client.get("/suppliers")
    assert response.status_code == 200
    assert "Acme Bottles" in response.text
    assert "user-1@glampack.test" in response.text
    assert "Sign out" in response.text


def test_page_without_permission_is_forbidden(client, login):
    login(UserRole.VIEWER)
    response = client.get("/settings")
    assert response.status_code == 403
    assert "does not give you access" in response.text


def test_unknown_page_renders_error_page(client, login, airtable):
    login()
    response = client.get("/inventory/nonsense")
    assert response.status_code == 404
    assert "Something went wrong" in response.text
