"""Lifecycle operations for the ACME EAB credential.

Public CA offers create only. ``update`` therefore issues another create
request carrying the previous credential and replaces the local record with
the answer. ``read`` and ``delete`` have no remote counterpart: the local
record is authoritative, and discarding it does not revoke anything.
"""

from __future__ import annotations

import logging

from gcp_mcp.eab.models import EabCredential
from gcp_mcp.eab.provisioner import EabProvisioner
from gcp_mcp.errors import NotSupportedError

logger = logging.getLogger(__name__)

READ_NOT_SUPPORTED = (
    "Google Cloud does not provide an API to get an EAB credential; "
    "the locally stored credential is authoritative."
)
DELETE_NOT_SUPPORTED = (
    "Google Cloud does not provide an API to delete an EAB credential; "
    "discarding the local record does not revoke it."
)


class AcmeEabResource:
    def __init__(self, provisioner: EabProvisioner) -> None:
        self._provisioner = provisioner

    async def create(
        self,
        service_account_json: str | bytes,
        *,
        deadline_seconds: float | None = None,
    ) -> EabCredential:
        return await self._provisioner.provision(
            service_account_json, None, deadline_seconds=deadline_seconds
        )

    async def update(
        self,
        service_account_json: str | bytes,
        state: EabCredential,
        *,
        deadline_seconds: float | None = None,
    ) -> EabCredential:
        """Rotate ``state``; the returned credential replaces it."""
        return await self._provisioner.provision(
            service_account_json, state, deadline_seconds=deadline_seconds
        )

    def read(self, state: EabCredential | None = None) -> EabCredential:
        raise NotSupportedError(READ_NOT_SUPPORTED)

    def delete(self, state: EabCredential | None = None) -> None:
        logger.warning("[Warning] Delete function will do nothing: %s", DELETE_NOT_SUPPORTED)
