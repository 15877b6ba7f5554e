"""Signed HTTP client built from service account key material."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import AsyncGenerator, Callable, Generator, Mapping, Sequence

import httpx
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

SignedClientFactory = Callable[[Mapping[str, object], Sequence[str]], httpx.AsyncClient]


class GoogleCredentialsAuth(httpx.Auth):
    """httpx auth flow that attaches an OAuth bearer token to every request.

    The token comes from a JWT assertion signed with the service account's
    private key and is refreshed whenever google-auth reports it as invalid
    (missing or about to expire). Refreshing uses google-auth's blocking
    transport, so the async flow runs it in a worker thread.
    """

    def __init__(self, credentials: service_account.Credentials) -> None:
        self._credentials = credentials
        self._lock = threading.Lock()

    def _refresh_if_needed(self) -> str:
        with self._lock:
            if not self._credentials.valid:
                self._credentials.refresh(GoogleAuthRequest())
                logger.debug(
                    "Refreshed access token for %s",
                    self._credentials.service_account_email,
                )
            return str(self._credentials.token)

    def sync_auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._refresh_if_needed()}"
        yield request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = await asyncio.to_thread(self._refresh_if_needed)
        request.headers["Authorization"] = f"Bearer {token}"
        yield request


def build_signed_client(
    info: Mapping[str, object],
    scopes: Sequence[str],
    *,
    timeout: float = 30.0,
) -> httpx.AsyncClient:
    """Return an ``AsyncClient`` whose requests carry a valid bearer token.

    Raises ``ValueError`` (or a google-auth error) when the key material cannot
    be turned into signing credentials.
    """
    credentials = service_account.Credentials.from_service_account_info(
        dict(info), scopes=list(scopes)
    )
    return httpx.AsyncClient(
        auth=GoogleCredentialsAuth(credentials),
        timeout=httpx.Timeout(timeout),
    )
