import hashlib
import hmac

import structlog
from fastapi import Depends, HTTPException, Request

from src.core.config import Config, config

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature"
SIGNATURE_PREFIX = "sha1="


def is_signature_valid(body: bytes, signature_header: str | None, secret: str) -> bool:
    """
    Check a ``sha1=<hex>`` webhook signature against the raw request body.

    The hex digest is compared case-insensitively and in constant time. Any
    malformed header yields ``False``; this function never raises.
    """
    if not signature_header or not signature_header.startswith(SIGNATURE_PREFIX):
        return False

    received = signature_header[len(SIGNATURE_PREFIX) :].strip().lower()
    expected = hmac.new(secret.encode(), msg=body, digestmod=hashlib.sha1).hexdigest()

    return hmac.compare_digest(expected.encode(), received.encode())


# Dependency provider for the configuration; overridden in tests.
def get_config() -> Config:
    """Returns the shared Config instance."""
    return config


async def read_webhook_body(request: Request, app_config: Config = Depends(get_config)) -> bytes:
    """
    FastAPI dependency returning the raw delivery body.

    Raises:
        HTTPException: 500 when the GitHub App settings are incomplete,
            400 when the request carries no body.
    """
    missing = app_config.missing_github_settings()
    if missing:
        logger.error("service_not_configured", missing=missing)
        raise HTTPException(status_code=500, detail="GitHub monitor is not configured.")

    body = await request.body()
    if not body:
        logger.warning("webhook_body_empty")
        raise HTTPException(status_code=400, detail="Empty webhook payload.")

    return body


async def verify_github_signature(
    request: Request,
    body: bytes = Depends(read_webhook_body),
    app_config: Config = Depends(get_config),
) -> bool:
    """
    FastAPI dependency that verifies the GitHub webhook signature.

    Reads the ``X-Hub-Signature`` header and compares it with an HMAC-SHA1 of
    the raw request body, keyed with the configured webhook secret.

    Raises:
        HTTPException: If the signature is missing or invalid.

    Returns:
        True if the signature is valid.
    """
    signature = request.headers.get(SIGNATURE_HEADER)
    if not signature:
        logger.warning("webhook_signature_missing")
        raise HTTPException(status_code=401, detail="Missing GitHub webhook signature.")

    if not is_signature_valid(body, signature, app_config.github.webhook_secret):
        logger.error("webhook_signature_invalid")
        raise HTTPException(status_code=401, detail="Invalid GitHub webhook signature.")

    logger.debug("webhook_signature_verified")
    return True
