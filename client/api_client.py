"""
HTTP client for the auth service.

Mirrors the flow of the signup / login / dashboard views: login stores the
token, the dashboard call sends it, and a 401 / 403 discards it so the
caller goes back to logging in.

Usage::

    client = ApiClient("http://localhost:5000")
    client.signup("alice", "a@x.com", "NYC", "5551234", "Secr3t!")
    client.login("alice", "Secr3t!")
    profile = client.dashboard()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class SessionExpiredError(ApiError):
    """No usable token; the user has to log in again."""


def _message(response: httpx.Response) -> str:
    try:
        return response.json().get("message", response.text)
    except ValueError:
        return response.text


class ApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token: Optional[str] = None

    def _check(self, response: httpx.Response) -> Dict[str, Any]:
        if response.is_success:
            return response.json()
        raise ApiError(response.status_code, _message(response))

    def signup(
        self,
        username: str,
        email: str,
        city: str,
        mobile_number: str,
        password: str,
        profile_picture: Optional[Tuple[str, bytes, str]] = None,
    ) -> Dict[str, Any]:
        """Register; ``profile_picture`` is ``(filename, content, mime type)``."""
        data = {
            "username": username,
            "email": email,
            "city": city,
            "mobileNumber": mobile_number,
            "password": password,
        }
        files = {"profilePicture": profile_picture} if profile_picture else None
        return self._check(self.http.post("/signup", data=data, files=files))

    def login(self, username: str, password: str) -> Dict[str, Any]:
        body = self._check(
            self.http.post("/login", json={"username": username, "password": password})
        )
        self.token = body["token"]
        return body

    def dashboard(self) -> Dict[str, Any]:
        """Fetch the profile of the logged-in user."""
        if not self.token:
            raise SessionExpiredError(401, "Not logged in.")

        response = self.http.get(
            "/dashboard", headers={"Authorization": f"Bearer {self.token}"}
        )
        if response.status_code in (401, 403):
            logger.info("Session rejected (%d), discarding token", response.status_code)
            self.token = None
            raise SessionExpiredError(response.status_code, _message(response))
        return self._check(response)["user"]

    def logout(self) -> None:
        self.token = None

    def close(self) -> None:
        self.http.close()
