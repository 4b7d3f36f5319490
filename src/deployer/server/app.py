"""FastAPI application for signed deploy webhooks."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from pydantic import ValidationError

from deployer import __version__
from deployer.auth.middleware import IDENTITY_STATE_KEY, SignatureAuthMiddleware
from deployer.auth.signature import AuthenticatedIdentity, ShaSignatureVerifier
from deployer.core.config import ServerSettings, load_server_settings
from deployer.server.schemas import DeployWebhookResponse, NodePayload

logger = logging.getLogger(__name__)


def _request_identity(request: Request) -> AuthenticatedIdentity:
    identity = getattr(request.state, IDENTITY_STATE_KEY, None)
    if not isinstance(identity, AuthenticatedIdentity):
        raise HTTPException(status_code=401, detail="Unauthenticated")
    return identity


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Create and configure the deploy webhook FastAPI app."""
    settings = settings or load_server_settings()
    if settings.webhook_secret is None:
        raise ValueError("DEPLOYER_WEBHOOK_SECRET must be set to serve webhooks")

    verifier = ShaSignatureVerifier(settings.webhook_secret)

    app = FastAPI(title="Deployer Webhook", version=__version__)
    app.add_middleware(
        SignatureAuthMiddleware,
        verifier=verifier,
        max_body_bytes=settings.webhook_max_body_bytes,
    )

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    @app.post("/webhooks/deploy", response_model=DeployWebhookResponse)
    async def deploy_webhook(request: Request) -> DeployWebhookResponse:
        """Accept a signed node announcement."""
        identity = _request_identity(request)
        body = await request.body()
        try:
            node = NodePayload.model_validate_json(body)
        except ValidationError as exc:
            errors = exc.errors(
                include_url=False, include_context=False, include_input=False
            )
            raise HTTPException(status_code=422, detail=errors) from exc

        logger.info("Accepted deploy webhook for node=%s", node.name)
        return DeployWebhookResponse(
            accepted=True,
            node=node,
            authenticated_by=identity.scheme,
        )

    return app
