"""
Request Signer

Signs outgoing storage requests and verifies signed incoming ones.

Outbound:
    A ``nonce`` query parameter is added, the full query is signed, and two
    headers are attached:

        centralstorage-signature: sha256:<salt>:<digest>
        centralstorage-key:       <consumer key>

Inbound:
    The token's algorithm and salt are reused to recompute the signature over
    the received query with the consumer's secret. Any failure (missing
    header, malformed token, unsupported algorithm, mismatch) yields False.

The nonce is signed but never checked; there is no replay protection.
"""

import logging
import secrets
from typing import Any, Mapping, MutableMapping, Optional, Protocol

from centralstorage.core.signing.signature import (
    DEFAULT_ALGORITHM,
    TOKEN_SEPARATOR,
    compute_signature,
    generate_nonce,
)

logger = logging.getLogger(__name__)


QUERY_NONCE = "nonce"

HEADER_SIGNATURE = "centralstorage-signature"
HEADER_KEY = "centralstorage-key"


class SignableRequest(Protocol):
    """Anything with a mutable query mapping and a mutable header mapping."""
    query: MutableMapping[str, Any]
    headers: MutableMapping[str, str]


class RequestSigner:
    """
    Signs and verifies requests with a consumer key/secret pair.

    Holds no mutable state after construction; safe to share between threads.
    """

    def __init__(
        self,
        consumer_key: Optional[str] = None,
        consumer_secret: Optional[str] = None,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.algorithm = algorithm

    def sign(
        self,
        request: SignableRequest,
        key: Optional[str] = None,
        secret: Optional[str] = None,
    ) -> None:
        """
        Add a nonce to the request query and attach signature + key headers.

        Args:
            request: Request to sign in place
            key: Consumer key (default: configured consumer key)
            secret: Consumer secret (default: configured consumer secret)
        """
        key = key if key is not None else self.consumer_key
        secret = secret if secret is not None else self.consumer_secret

        request.query[QUERY_NONCE] = generate_nonce()

        signature = compute_signature(request.query, self.algorithm, secret)
        if signature is None:
            logger.error(f"Request left unsigned: algorithm {self.algorithm!r} is not supported")
            return

        request.headers[HEADER_SIGNATURE] = signature
        if key is not None:
            request.headers[HEADER_KEY] = key
        else:
            logger.warning(f"No consumer key configured; {HEADER_KEY} header omitted")

    def sign_parameters(
        self,
        parameters: Mapping[str, Any],
        secret: Optional[str] = None,
        salt: Optional[str] = None,
    ) -> Optional[str]:
        """
        Sign arbitrary parameters without a request.

        Pass a fixed ``salt`` when the token must be stable (cacheable URLs).
        """
        secret = secret if secret is not None else self.consumer_secret
        return compute_signature(parameters, self.algorithm, secret, salt)

    def is_valid(self, request: SignableRequest, key: Optional[str], secret: Optional[str]) -> bool:
        """Check the signature header of a request against its query."""
        full_signature = request.headers.get(HEADER_SIGNATURE)
        if not full_signature:
            logger.debug(f"No {HEADER_SIGNATURE} header (key={key})")
            return False

        return self.is_valid_parameters(request.query, full_signature, secret)

    def is_valid_parameters(
        self,
        parameters: Mapping[str, Any],
        provided_signature: Optional[str],
        secret: Optional[str],
    ) -> bool:
        """
        Verify a signature token against a parameter set.

        Returns:
            True only if recomputing with the token's algorithm and salt
            reproduces the token exactly
        """
        if not provided_signature:
            return False

        parts = provided_signature.split(TOKEN_SEPARATOR)
        if len(parts) != 3:
            logger.debug(f"Malformed signature token ({len(parts)} parts)")
            return False

        algorithm, salt, _digest = parts

        actual_signature = compute_signature(parameters, algorithm, secret, salt)
        if actual_signature is None:
            return False

        return secrets.compare_digest(
            provided_signature.encode("utf-8"),
            actual_signature.encode("utf-8"),
        )
