"""Load balancer backend service lookup by name and description tags."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError

from gcp_mcp.compute.clients import get_backend_services_client
from gcp_mcp.compute.filters import BackendServiceFilter, matches
from gcp_mcp.compute.tags import decode_tags
from gcp_mcp.errors import ApiError

logger = logging.getLogger(__name__)


class BackendServicePage(Protocol):
    @property
    def items(self) -> Sequence[Any]: ...


@dataclass(frozen=True)
class BackendServiceRecord:
    id: int
    name: str
    description: str

    @classmethod
    def from_api(cls, item: Any) -> "BackendServiceRecord":
        return cls(
            id=int(getattr(item, "id", 0) or 0),
            name=str(getattr(item, "name", "") or ""),
            description=str(getattr(item, "description", "") or ""),
        )


@dataclass(frozen=True)
class BackendServiceMatch:
    """A backend service with its decoded tags.

    ``tags`` is ``None`` when the description is empty, which keeps "no tags
    present" distinct from an empty tag set in the output.
    """

    id: int
    name: str
    tags: dict[str, str] | None

    @classmethod
    def from_record(cls, record: BackendServiceRecord) -> "BackendServiceMatch":
        tags = decode_tags(record.description) if record.description else None
        return cls(id=record.id, name=record.name, tags=tags)

    def to_item(self) -> dict[str, object]:
        return {"id": self.id, "tags": self.tags}


def scan_backend_services(
    pages: Iterable[BackendServicePage],
    flt: BackendServiceFilter,
) -> list[BackendServiceMatch]:
    """Walk every page in order and collect the services matching ``flt``.

    A malformed description raises ``FormatError`` and aborts the scan:
    filtering on a partially understood tag set would give wrong answers.
    """
    results: list[BackendServiceMatch] = []
    for page in pages:
        for item in page.items:
            candidate = BackendServiceMatch.from_record(BackendServiceRecord.from_api(item))
            if matches(candidate, flt):
                results.append(candidate)
    return results


def list_backend_services(
    project: str,
    credentials_json: str,
    flt: BackendServiceFilter,
    *,
    client_factory: Callable[[str], Any] = get_backend_services_client,
) -> list[BackendServiceMatch]:
    client = client_factory(credentials_json)
    try:
        pages = client.list(project=project).pages
        results = scan_backend_services(pages, flt)
    except (GoogleAPIError, GoogleAuthError) as exc:
        logger.warning("Failed to list backend services: project=%s, error=%s", project, exc)
        raise ApiError(
            f"[API ERROR] Failed to list load balancer backend services: {exc}"
        ) from exc
    logger.info("Backend services matched: project=%s, count=%d", project, len(results))
    return results


async def list_backend_services_async(
    project: str,
    credentials_json: str,
    flt: BackendServiceFilter,
    *,
    client_factory: Callable[[str], Any] = get_backend_services_client,
) -> list[BackendServiceMatch]:
    return await asyncio.to_thread(
        list_backend_services,
        project,
        credentials_json,
        flt,
        client_factory=client_factory,
    )
