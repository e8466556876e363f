"""UAA client-credentials token source for the accumulator API."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

import requests
from pydantic import BaseModel, ValidationError

from ..errors import AuthError

logger = logging.getLogger(__name__)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = 0


class UAAAuthenticator:
    """Fetches and caches a client-credentials token.

    The token is refreshed ``refresh_margin`` seconds before it expires.
    A token without ``expires_in`` is fetched again on every call.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        uaa_addr: str,
        session: requests.Session,
        refresh_margin: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = uaa_addr.rstrip("/") + "/oauth/token"
        self._session = session
        self._refresh_margin = refresh_margin
        self._clock = clock

        self._token: Optional[str] = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    def refresh_auth_token(self) -> str:
        """Returns ``"<token_type> <access_token>"`` ready for an Authorization header.

        Raises:
            AuthError: if UAA cannot be reached or rejects the credentials
        """
        with self._lock:
            if self._token is not None and self._clock() < self._expires_at:
                return self._token

            token = self._request_token()
            self._token = f"{token.token_type} {token.access_token}"
            self._expires_at = self._clock() + max(0.0, token.expires_in - self._refresh_margin)
            logger.debug("[UAA] token refreshed expires_in=%ds", token.expires_in)
            return self._token

    def invalidate(self) -> None:
        """Forget the cached token (e.g. after a 401)."""
        with self._lock:
            self._token = None
            self._expires_at = 0.0

    def _request_token(self) -> TokenResponse:
        try:
            resp = self._session.post(
                self._token_url,
                data={"grant_type": "client_credentials", "client_id": self._client_id},
                auth=(self._client_id, self._client_secret),
                headers={"Accept": "application/json"},
            )
        except requests.RequestException as e:
            raise AuthError(f"failed to reach UAA at {self._token_url}: {e}") from e

        if resp.status_code != 200:
            raise AuthError(
                f"failed to get token, expected 200, got {resp.status_code}: {resp.text}"
            )

        try:
            return TokenResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise AuthError(f"invalid token response from UAA: {e}") from e
