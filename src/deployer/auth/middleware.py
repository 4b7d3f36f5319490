"""ASGI middleware that guards webhook routes with signature verification."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from starlette.requests import ClientDisconnect
from starlette.responses import JSONResponse

from deployer.auth.signature import SCHEME_NAME, ShaSignatureVerifier

logger = logging.getLogger(__name__)

Scope = dict[str, Any]
Message = dict[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

DEFAULT_PUBLIC_PATHS: frozenset[str] = frozenset({"/healthz"})
IDENTITY_STATE_KEY = "identity"


class BodyTooLargeError(Exception):
    """Raised when a request body exceeds the configured limit."""


def _replay_receive(body: bytes, receive: Receive) -> Receive:
    """Return a ``receive`` that yields ``body`` once, then defers to ``receive``."""
    replayed = False

    async def replay() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


class SignatureAuthMiddleware:
    """Authenticate every non-public HTTP request before it reaches the app.

    The request body is buffered once, verified, and replayed unchanged to the
    wrapped application. Rejected requests get a generic 401 and never reach
    the application; the failure class is only logged.
    """

    def __init__(
        self,
        app: ASGIApp,
        verifier: ShaSignatureVerifier,
        max_body_bytes: int | None = None,
        public_paths: Iterable[str] = DEFAULT_PUBLIC_PATHS,
    ) -> None:
        self.app = app
        self.verifier = verifier
        self.max_body_bytes = max_body_bytes
        self.public_paths = frozenset(path.rstrip("/") or "/" for path in public_paths)

    def _is_public_path(self, path: str) -> bool:
        return (path.rstrip("/") or "/") in self.public_paths

    async def _read_body(self, receive: Receive) -> bytes:
        chunks: list[bytes] = []
        size = 0
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                raise ClientDisconnect()
            chunk = message.get("body", b"")
            size += len(chunk)
            if self.max_body_bytes is not None and size > self.max_body_bytes:
                raise BodyTooLargeError(f"Request body exceeds {self.max_body_bytes} bytes")
            chunks.append(chunk)
            if not message.get("more_body", False):
                return b"".join(chunks)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or self._is_public_path(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "")
        path = scope.get("path", "")

        try:
            body = await self._read_body(receive)
        except BodyTooLargeError as exc:
            logger.warning("Rejected %s %s: %s", method, path, exc)
            response = JSONResponse({"detail": "Webhook body too large"}, status_code=413)
            await response(scope, receive, send)
            return
        except ClientDisconnect:
            logger.info("Client disconnected while sending %s %s", method, path)
            return

        result, replay_body = self.verifier.verify(scope.get("headers", []), body)
        if not result.succeeded:
            failure = result.failure.value if result.failure else "unknown"
            logger.warning(
                "Rejected %s %s: signature %s (%s)", method, path, failure, result.reason
            )
            response = JSONResponse(
                {"detail": "Unauthenticated"},
                status_code=401,
                headers={"WWW-Authenticate": SCHEME_NAME},
            )
            await response(scope, _replay_receive(replay_body, receive), send)
            return

        logger.debug("Authenticated %s %s via %s", method, path, result.identity.scheme)
        scope.setdefault("state", {})[IDENTITY_STATE_KEY] = result.identity
        await self.app(scope, _replay_receive(replay_body, receive), send)
