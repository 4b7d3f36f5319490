"""Webhook signature authentication."""

from deployer.auth.middleware import SignatureAuthMiddleware
from deployer.auth.signature import (
    SIGNATURE_HEADER,
    SIGNATURE_PREFIX,
    AuthenticatedIdentity,
    AuthenticationResult,
    ShaSignatureVerifier,
    SignatureFailure,
    compute_signature,
    signature_header,
    to_hex_string,
)

__all__ = [
    "SIGNATURE_HEADER",
    "SIGNATURE_PREFIX",
    "AuthenticatedIdentity",
    "AuthenticationResult",
    "ShaSignatureVerifier",
    "SignatureAuthMiddleware",
    "SignatureFailure",
    "compute_signature",
    "signature_header",
    "to_hex_string",
]
