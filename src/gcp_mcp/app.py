"""Application context assembly."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from gcp_mcp.config import Settings, load_settings
from gcp_mcp.eab.lifecycle import AcmeEabResource
from gcp_mcp.eab.provisioner import EabProvisioner


@dataclass
class AppContext:
    """Process-wide dependencies, built once at startup."""

    settings: Settings
    eab: AcmeEabResource


@lru_cache(maxsize=1)
def get_app_context() -> AppContext:
    settings = load_settings()
    provisioner = EabProvisioner(settings.eab)
    return AppContext(settings=settings, eab=AcmeEabResource(provisioner))
