"""HMAC-SHA256 signature verification for inbound deploy webhooks.

Senders sign the exact request body with a pre-shared secret and present the
result as ``X-Hub-Signature-256: sha256=<hexdigest>``. The verifier recomputes
the digest over the captured bytes and hands those same bytes back so the
downstream handler reads exactly what was authenticated.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="
SCHEME_NAME = "ShaSignature"

_MISSING_REASON = f"{SIGNATURE_HEADER} header not present or empty."
_INVALID_REASON = f"Invalid {SIGNATURE_HEADER} header value."

_DIGEST_HEX = re.compile(r"[0-9a-f]{64}")

HeaderSource = Mapping[str, str] | Iterable[tuple[str, str]]


class SignatureFailure(str, Enum):
    """Internal classification of a rejected signature."""

    MISSING = "missing"
    MALFORMED = "malformed"
    INVALID = "invalid"


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Identity attached to a request that passed signature verification.

    Carries no claims beyond the name of the scheme that authenticated it.
    """

    scheme: str = SCHEME_NAME


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of a single verification attempt."""

    identity: AuthenticatedIdentity | None = None
    failure: SignatureFailure | None = None
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.identity is not None

    @classmethod
    def success(cls, identity: AuthenticatedIdentity) -> AuthenticationResult:
        return cls(identity=identity)

    @classmethod
    def fail(cls, failure: SignatureFailure, reason: str) -> AuthenticationResult:
        return cls(failure=failure, reason=reason)


def to_hex_string(data: bytes | bytearray | Iterable[int]) -> str:
    """Encode bytes as lowercase hex, two characters per byte, no separators."""
    return "".join(f"{value:02x}" for value in bytes(data))


def _secret_bytes(secret: str | bytes) -> bytes:
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return bytes(secret)


def compute_digest(secret: str | bytes, body: bytes) -> bytes:
    """Return the raw HMAC-SHA256 digest of ``body`` keyed by ``secret``."""
    return hmac.new(_secret_bytes(secret), body, hashlib.sha256).digest()


def compute_signature(secret: str | bytes, body: bytes) -> str:
    """Compute the lowercase hex signature for a raw request body."""
    return to_hex_string(compute_digest(secret, body))


def signature_header(secret: str | bytes, body: bytes) -> str:
    """Build the full ``sha256=<hexdigest>`` header value a sender would send."""
    return f"{SIGNATURE_PREFIX}{compute_signature(secret, body)}"


def _lookup_header(headers: HeaderSource, name: str) -> str | None:
    items = headers.items() if isinstance(headers, Mapping) else headers
    target = name.lower()
    for key, value in items:
        if isinstance(key, bytes):
            key = key.decode("latin-1")
        if key.lower() == target:
            if isinstance(value, bytes):
                value = value.decode("latin-1")
            return value
    return None


class ShaSignatureVerifier:
    """Verify ``X-Hub-Signature-256`` headers against a fixed shared secret.

    Construct once at startup; instances hold only the read-only secret and
    are safe to share across concurrent requests.
    """

    def __init__(self, secret: str | bytes) -> None:
        self._secret = _secret_bytes(secret)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(secret=***)"

    def verify(
        self, headers: HeaderSource, body: bytes
    ) -> tuple[AuthenticationResult, bytes]:
        """Authenticate a request.

        Args:
            headers: Request headers as a mapping or ``(name, value)`` pairs.
                Lookup is case-insensitive.
            body: The complete raw request body.

        Returns:
            The authentication result and the body bytes that were hashed, to
            be replayed to whatever consumes the request next. The body is
            returned on every path, including rejections.
        """
        captured = bytes(body)
        return self._authenticate(headers, captured), captured

    def _authenticate(
        self, headers: HeaderSource, body: bytes
    ) -> AuthenticationResult:
        header_value = _lookup_header(headers, SIGNATURE_HEADER)
        if header_value is None or not header_value.strip():
            return AuthenticationResult.fail(SignatureFailure.MISSING, _MISSING_REASON)

        if header_value[: len(SIGNATURE_PREFIX)].lower() != SIGNATURE_PREFIX:
            return AuthenticationResult.fail(SignatureFailure.MALFORMED, _INVALID_REASON)

        claimed_hex = header_value[len(SIGNATURE_PREFIX) :]
        # Digests are lowercase hex only, matching what to_hex_string produces.
        if not _DIGEST_HEX.fullmatch(claimed_hex):
            return AuthenticationResult.fail(SignatureFailure.INVALID, _INVALID_REASON)
        claimed_digest = binascii.unhexlify(claimed_hex)

        expected_digest = compute_digest(self._secret, body)
        if hmac.compare_digest(expected_digest, claimed_digest):
            return AuthenticationResult.success(AuthenticatedIdentity())
        return AuthenticationResult.fail(SignatureFailure.INVALID, _INVALID_REASON)
