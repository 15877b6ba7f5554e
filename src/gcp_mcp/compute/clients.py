"""Compute Engine client factory."""

from __future__ import annotations

import hashlib
import json
import threading
import time
from collections import OrderedDict
from collections.abc import Callable

from google.auth.exceptions import GoogleAuthError
from google.cloud import compute_v1
from google.oauth2 import service_account

from gcp_mcp.errors import ConfigError

_CLIENT_CACHE: OrderedDict[str, tuple[compute_v1.BackendServicesClient, float]] = OrderedDict()
_CLIENT_CACHE_LOCK = threading.Lock()
_CLIENT_TTL_SECONDS = 3600  # 1 hour
_CLIENT_CACHE_MAX_SIZE = 16


def _credential_fingerprint(credentials_json: str) -> str:
    return hashlib.sha256(credentials_json.encode("utf-8")).hexdigest()


def _close_client(client: compute_v1.BackendServicesClient) -> None:
    client.transport.close()


def _get_cached_client(
    key: str,
    build_client: Callable[[], compute_v1.BackendServicesClient],
) -> compute_v1.BackendServicesClient:
    now = time.monotonic()
    with _CLIENT_CACHE_LOCK:
        cached = _CLIENT_CACHE.get(key)
        if cached is not None:
            client, created_at = cached
            if now - created_at < _CLIENT_TTL_SECONDS:
                _CLIENT_CACHE.move_to_end(key)
                return client
            del _CLIENT_CACHE[key]
            _close_client(client)
        client = build_client()
        _CLIENT_CACHE[key] = (client, now)
        while len(_CLIENT_CACHE) > _CLIENT_CACHE_MAX_SIZE:
            _, (evicted, _) = _CLIENT_CACHE.popitem(last=False)
            _close_client(evicted)
        return client


def _create_backend_services_client(credentials_json: str) -> compute_v1.BackendServicesClient:
    try:
        info = json.loads(credentials_json)
        credentials = service_account.Credentials.from_service_account_info(info)
    except (ValueError, TypeError, GoogleAuthError) as exc:
        raise ConfigError(
            "Failed to initialize Google Cloud client. Please make sure the "
            f"credentials are valid. Additional error message: {exc}"
        ) from exc
    return compute_v1.BackendServicesClient(credentials=credentials)


def get_backend_services_client(credentials_json: str) -> compute_v1.BackendServicesClient:
    """Return a cached ``BackendServicesClient`` for these credentials.

    Clients are keyed by a hash of the key file, never the key itself.
    """
    return _get_cached_client(
        _credential_fingerprint(credentials_json),
        lambda: _create_backend_services_client(credentials_json),
    )


def clear_client_cache() -> None:
    with _CLIENT_CACHE_LOCK:
        while _CLIENT_CACHE:
            _, (client, _) = _CLIENT_CACHE.popitem(last=False)
            _close_client(client)
