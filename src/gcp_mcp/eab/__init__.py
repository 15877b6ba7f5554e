"""ACME External Account Binding provisioning."""

from gcp_mcp.eab.lifecycle import AcmeEabResource
from gcp_mcp.eab.models import EabCredential, ExternalAccountKey, ServiceAccountKey
from gcp_mcp.eab.provisioner import EabProvisioner
from gcp_mcp.eab.retry import RetryPhase, RetryVerdict, classify_error

__all__ = [
    "AcmeEabResource",
    "EabCredential",
    "EabProvisioner",
    "ExternalAccountKey",
    "RetryPhase",
    "RetryVerdict",
    "ServiceAccountKey",
    "classify_error",
]
