# backend/auth_client.py

import logging
from typing import Callable, List, Optional

import requests

import schemas
from config import get_settings

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

AuthListener = Callable[[str, Optional[str]], None]


class AuthError(Exception):
    pass


def error_detail(resp, default: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return default
    if isinstance(body, dict) and isinstance(body.get("detail"), str):
        return body["detail"]
    return default


class AuthClient:
    """Session holder for the store's auth endpoints.

    Listeners get ``(event, access_token)`` on sign-in, sign-out and when
    the store rejects the current token.
    """

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None, http=None):
        settings = get_settings()
        self.base_url = (base_url or settings.store_url).rstrip("/")
        self.api_key = settings.store_public_key if api_key is None else api_key
        self.http = http or requests.Session()
        self._access_token: Optional[str] = None
        self._listeners: List[AuthListener] = []

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    def get_session(self) -> Optional[str]:
        return self._access_token

    def headers(self) -> dict:
        headers = {}
        if self.api_key:
            headers["apikey"] = self.api_key
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    def _post(self, path: str, payload: dict):
        try:
            return self.http.post(f"{self.base_url}{path}", json=payload, headers=self.headers())
        except requests.RequestException as e:
            raise AuthError(str(e)) from e

    def sign_up(self, email: str, password: str) -> schemas.UserOut:
        resp = self._post("/auth/signup", {"email": email, "password": password})
        if resp.status_code >= 400:
            raise AuthError(error_detail(resp, "Sign-up failed"))
        return schemas.UserOut.model_validate(resp.json())

    def sign_in(self, email: str, password: str) -> str:
        resp = self._post("/auth/login", {"email": email, "password": password})
        if resp.status_code >= 400:
            raise AuthError(error_detail(resp, "Sign-in failed"))
        token = schemas.Token.model_validate(resp.json())
        self._access_token = token.access_token
        self._emit(SIGNED_IN)
        return token.access_token

    def sign_out(self):
        self._access_token = None
        self._emit(SIGNED_OUT)

    def get_user(self) -> Optional[schemas.UserOut]:
        """Current user, or None when signed out or the session has expired."""
        if not self._access_token:
            return None
        try:
            resp = self.http.get(f"{self.base_url}/auth/user", headers=self.headers())
        except requests.RequestException as e:
            raise AuthError(str(e)) from e

        if resp.status_code == 401:
            logger.info("Session rejected by the store, signing out")
            self.sign_out()
            return None
        if resp.status_code >= 400:
            raise AuthError(error_detail(resp, "Could not load the current user"))
        return schemas.UserOut.model_validate(resp.json())

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, event: str):
        for listener in list(self._listeners):
            listener(event, self._access_token)
