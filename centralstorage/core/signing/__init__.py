"""
Request Signing Module

Salted-hash request signing shared by the storage client and the
server-side verifier.
"""

from centralstorage.core.signing.signature import (
    ALGORITHMS,
    DEFAULT_ALGORITHM,
    build_query,
    compute_signature,
    generate_nonce,
    generate_salt,
    is_valid_algorithm,
)
from centralstorage.core.signing.signer import (
    HEADER_KEY,
    HEADER_SIGNATURE,
    QUERY_NONCE,
    RequestSigner,
)
from centralstorage.core.signing.registry import (
    Consumer,
    ConsumerRegistry,
    consumer_registry,
    load_consumers,
)

__all__ = [
    # Signature
    "ALGORITHMS",
    "DEFAULT_ALGORITHM",
    "build_query",
    "compute_signature",
    "generate_nonce",
    "generate_salt",
    "is_valid_algorithm",
    # Signer
    "HEADER_KEY",
    "HEADER_SIGNATURE",
    "QUERY_NONCE",
    "RequestSigner",
    # Registry
    "Consumer",
    "ConsumerRegistry",
    "consumer_registry",
    "load_consumers",
]
