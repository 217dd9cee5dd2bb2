"""
Tests for the HTTP client, run against the app through ``TestClient``.
"""

import pytest

from client.api_client import ApiClient, ApiError, SessionExpiredError


@pytest.fixture
def api(client):
    return ApiClient(http=client)


class TestApiClient:
    def test_signup_login_dashboard(self, api):
        api.signup("alice", "a@x.com", "NYC", "5551234", "Secr3t!")
        api.login("alice", "Secr3t!")
        assert api.token

        user = api.dashboard()
        assert user["username"] == "alice"
        assert "password" not in user

    def test_signup_with_picture(self, api):
        api.signup(
            "alice", "a@x.com", "NYC", "5551234", "Secr3t!",
            profile_picture=("me.gif", b"GIF89a", "image/gif"),
        )
        api.login("alice", "Secr3t!")
        assert api.dashboard()["profilePicture"].endswith("-me.gif")

    def test_api_error_carries_message(self, api):
        with pytest.raises(ApiError) as excinfo:
            api.login("nobody", "x")
        assert excinfo.value.status_code == 400
        assert excinfo.value.message == "User not found. Please register first."
        assert api.token is None

    def test_dashboard_without_login(self, api):
        with pytest.raises(SessionExpiredError):
            api.dashboard()

    def test_rejected_token_is_discarded(self, api):
        api.token = "garbage"
        with pytest.raises(SessionExpiredError) as excinfo:
            api.dashboard()
        assert excinfo.value.status_code == 403
        assert api.token is None

    def test_logout(self, api):
        api.signup("alice", "a@x.com", "NYC", "5551234", "Secr3t!")
        api.login("alice", "Secr3t!")
        api.logout()
        with pytest.raises(SessionExpiredError):
            api.dashboard()
