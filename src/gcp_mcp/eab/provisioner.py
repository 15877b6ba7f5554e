"""ACME External Account Binding provisioning against Google Public CA.

See https://cloud.google.com/certificate-manager/docs/reference/public-ca/rest/v1/projects.locations.externalAccountKeys/create

A create request posts an empty body. A rotate request posts the previous
credential (secret re-encoded as standard base64); the authority answers
with a brand-new credential and leaves the old one untouched.

Only transport failures are retried, and only when ``classify_error`` calls
them transient. A completed round trip with a non-200 status is final, even
for statuses such as 500.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
from collections.abc import Awaitable, Callable
from functools import partial

import httpx
from google.auth.exceptions import GoogleAuthError
from pydantic import ValidationError
from tenacity import RetryError

from gcp_mcp.config import EabSettings
from gcp_mcp.eab.auth import CLOUD_PLATFORM_SCOPE, SignedClientFactory, build_signed_client
from gcp_mcp.eab.models import EabCredential, ExternalAccountKey, ServiceAccountKey
from gcp_mcp.eab.retry import RetryPhase, build_retrying, classify_error
from gcp_mcp.errors import ConfigError, DecodeError, ResponseError, TransportError
from gcp_mcp.utils.time import utc_now

logger = logging.getLogger(__name__)

_API_PATH = "/v1beta1/projects/{project}/locations/global/externalAccountKeys"


def parse_service_account(service_account_json: str | bytes) -> tuple[ServiceAccountKey, dict[str, object]]:
    """Parse a service account key file into its model and raw mapping."""
    try:
        raw = json.loads(service_account_json)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"failed to unmarshal GCP credential JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("failed to unmarshal GCP credential JSON: expected an object")
    try:
        account = ServiceAccountKey.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"invalid GCP credential JSON: {exc}") from exc
    return account, raw


class EabProvisioner:
    """Requests EAB credentials from the Public CA ``externalAccountKeys`` API."""

    def __init__(
        self,
        settings: EabSettings | None = None,
        *,
        client_factory: SignedClientFactory | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self._settings = settings or EabSettings()
        self._client_factory = client_factory or partial(
            build_signed_client, timeout=self._settings.request_timeout_seconds
        )
        self._sleep = sleep

    def endpoint_for(self, project_id: str) -> str:
        return self._settings.endpoint + _API_PATH.format(project=project_id)

    async def provision(
        self,
        service_account_json: str | bytes,
        prior: EabCredential | None = None,
        *,
        deadline_seconds: float | None = None,
    ) -> EabCredential:
        """Create a credential, or rotate ``prior`` into a new one.

        Args:
            service_account_json: Service account key file contents.
            prior: Credential being replaced; ``None`` requests a fresh one.
            deadline_seconds: Optional bound on the whole call including
                backoff sleeps.

        Raises:
            ConfigError: Malformed key file or unusable signing material.
            TransportError: Permanent transport failure, retries exhausted
                (``retries_exhausted``) or the deadline passed
                (``deadline_exceeded``).
            ResponseError: The API answered with a non-200 status.
            DecodeError: The response body or its secret could not be decoded.
        """
        account, raw = parse_service_account(service_account_json)
        url = self.endpoint_for(account.project_id)
        if deadline_seconds is None:
            return await self._provision(account, raw, url, prior)
        try:
            async with asyncio.timeout(deadline_seconds):
                return await self._provision(account, raw, url, prior)
        except TimeoutError as exc:
            logger.warning("EAB request deadline exceeded: url=%s, deadline=%ss", url, deadline_seconds)
            raise TransportError(
                f"Post {url}: deadline exceeded after {deadline_seconds}s",
                code="deadline_exceeded",
            ) from exc

    async def _provision(
        self,
        account: ServiceAccountKey,
        raw: dict[str, object],
        url: str,
        prior: EabCredential | None,
    ) -> EabCredential:
        try:
            client = self._client_factory(raw, (CLOUD_PLATFORM_SCOPE,))
        except (ValueError, GoogleAuthError) as exc:
            raise ConfigError(f"failed to generate JWT config: {exc}") from exc

        body: bytes | None = None
        if prior is not None:
            body = ExternalAccountKey.for_rotation(prior).model_dump_json(by_alias=True).encode()

        logger.info(
            "Requesting EAB credential: project=%s, mode=%s",
            account.project_id,
            "rotate" if prior is not None else "create",
        )
        async with client:
            response = await self._post_with_retry(client, url, body)

        if response.status_code != httpx.codes.OK:
            logger.warning("EAB request rejected: url=%s, status=%d", url, response.status_code)
            raise ResponseError(url, response.status_code, response.text)

        credential = decode_external_account_key(response.content)
        logger.info("EAB credential issued: key_id=%s", credential.key_id)
        return credential

    async def _post_with_retry(
        self,
        client: httpx.AsyncClient,
        url: str,
        body: bytes | None,
    ) -> httpx.Response:
        retrying = build_retrying(self._settings.backoff, sleep=self._sleep)
        try:
            response = await retrying(self._post_once, client, url, body)
        except RetryError as exc:
            last = exc.last_attempt.exception()
            logger.warning(
                "EAB request phase=%s attempts=%d",
                RetryPhase.FAILED_EXHAUSTED.value,
                exc.last_attempt.attempt_number,
            )
            raise TransportError(
                f"retries exhausted after {exc.last_attempt.attempt_number} attempts: {last}",
                code="retries_exhausted",
            ) from last
        except TransportError:
            logger.warning("EAB request phase=%s", RetryPhase.FAILED_PERMANENT.value)
            raise
        logger.debug("EAB request phase=%s", RetryPhase.SUCCEEDED.value)
        return response

    async def _post_once(
        self,
        client: httpx.AsyncClient,
        url: str,
        body: bytes | None,
    ) -> httpx.Response:
        logger.debug("EAB request phase=%s url=%s", RetryPhase.ATTEMPTING.value, url)
        try:
            return await client.post(
                url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as exc:
            raise _transport_error(f"Post {url}: request timeout: {exc}") from exc
        except (httpx.RequestError, GoogleAuthError) as exc:
            raise _transport_error(f"Post {url}: {exc}") from exc


def _transport_error(message: str) -> TransportError:
    error = TransportError(message)
    logger.warning(
        "Failed to request API: error=%s, verdict=%s",
        message,
        classify_error(error).value,
    )
    return error


def decode_external_account_key(content: bytes | str) -> EabCredential:
    """Decode a successful ``externalAccountKeys`` response."""
    try:
        key = ExternalAccountKey.model_validate_json(content)
    except ValidationError as exc:
        raise DecodeError(f"failed to unmarshal EAB response: {exc}") from exc
    try:
        secret = base64.b64decode(key.b64_mac_key, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"failed to base64-decode EAB b64MacKey: {exc}") from exc
    return EabCredential(
        key_id=key.key_id,
        name=key.name,
        secret=secret,
        created_at=utc_now(),
    )
