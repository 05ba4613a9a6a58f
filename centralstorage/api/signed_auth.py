"""
Signed Request Authentication

FastAPI dependency for storage endpoints that only accept requests signed by
a registered consumer.

Headers:
    centralstorage-key:       consumer key (looked up in the consumer registry)
    centralstorage-signature: {algorithm}:{salt}:{digest} over the query string

Every failure returns the same 401 so callers cannot tell a tampered request
from a malformed one.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, Request, status

from centralstorage.core.config import get_settings
from centralstorage.core.signing.registry import consumer_registry, load_consumers
from centralstorage.core.signing.signer import HEADER_KEY, HEADER_SIGNATURE, RequestSigner

logger = logging.getLogger(__name__)

_verifier = RequestSigner()


@dataclass
class AuthContext:
    """
    Authentication context for a verified request.

    Attributes:
        consumer_key: Key of the authenticated consumer
        signature: The verified signature token
    """
    consumer_key: str
    signature: str


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid signature",
    )


async def verify_signed_request(request: Request) -> AuthContext:
    """
    Verify a signed request.

    Checks:
    1. Key and signature headers present
    2. Consumer is known and enabled
    3. Signature matches the query parameters

    Raises:
        HTTPException: 401 if any check fails

    Example:
        @app.post("/api/v1/upload")
        async def upload(auth: AuthContext = Depends(verify_signed_request)):
            ...
    """
    key = request.headers.get(HEADER_KEY)
    signature = request.headers.get(HEADER_SIGNATURE)

    if not key or not signature:
        logger.warning(f"Unsigned request to {request.url.path}")
        raise _unauthorized()

    secret = consumer_registry.get_secret(key)
    if secret is None:
        logger.warning(f"Unknown consumer: {key}")
        raise _unauthorized()

    parameters = dict(request.query_params)
    if not _verifier.is_valid_parameters(parameters, signature, secret):
        logger.warning(f"Signature verification failed for consumer {key} on {request.url.path}")
        raise _unauthorized()

    logger.debug(f"Authenticated consumer: {key}")
    return AuthContext(consumer_key=key, signature=signature)


def init_auth_system(config_path: Optional[Path] = None) -> None:
    """
    Load the consumer registry.

    Call this during FastAPI startup.
    """
    load_consumers(config_path, filename=get_settings().consumers_file)
    logger.info("Signed auth system initialized")
