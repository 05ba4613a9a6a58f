"""
Signature Computation

Salted hash signatures over a set of query parameters.

Canonical Form:
    The parameters, plus the reserved ``salt`` and ``secret`` entries, sorted
    by key and serialized as a form-encoded query string:

        bar=awlololo&foo=wololo&nonce=...&salt=...&secret=...

Signature Token:
    {algorithm}:{salt}:{hex digest of the canonical form}

The secret only ever appears inside the hashed canonical form; the token
itself carries the algorithm and salt so a verifier holding the same secret
can recompute it.
"""

import hashlib
import logging
import secrets
import string
from datetime import datetime
from typing import Any, Mapping, Optional
from urllib.parse import quote_plus

logger = logging.getLogger(__name__)


ALGORITHMS = frozenset({"sha256", "sha384", "sha512"})
DEFAULT_ALGORITHM = "sha256"

SALT_LENGTH = 16
SALT_ALPHABET = string.ascii_letters + string.digits

# Reserved keys mixed into every canonical form
SALT_PARAMETER = "salt"
SECRET_PARAMETER = "secret"

TOKEN_SEPARATOR = ":"
NONCE_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def is_valid_algorithm(algorithm: Any) -> bool:
    """Check if the algorithm is on the allow-list."""
    return isinstance(algorithm, str) and algorithm in ALGORITHMS


def generate_salt(length: int = SALT_LENGTH) -> str:
    """Generate a random alphanumeric salt."""
    return "".join(secrets.choice(SALT_ALPHABET) for _ in range(length))


def generate_nonce() -> str:
    """
    Current local time with microsecond precision.

    Example:
        '2026-10-18 14:03:27.518204'
    """
    return datetime.now().strftime(NONCE_FORMAT)


def _encode(value: str) -> str:
    # Form encoding: space becomes '+', only A-Za-z0-9 and -_. stay literal
    return quote_plus(value, safe="").replace("~", "%7E")


def to_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _flatten(key: str, value: Any):
    if isinstance(value, Mapping):
        items = value.items()
    elif isinstance(value, (list, tuple)):
        items = enumerate(value)
    else:
        yield key, value
        return

    for sub_key, sub_value in items:
        yield from _flatten(f"{key}[{sub_key}]", sub_value)


def build_query(parameters: Mapping[str, Any]) -> str:
    """
    Serialize parameters as a form-encoded query string, in mapping order.

    ``None`` values are skipped; booleans become "1"/"0". Nested mappings
    and lists are flattened to bracketed keys (``crop[x]=1``).

    Example:
        >>> build_query({"q": "a b", "tilde": "~"})
        'q=a+b&tilde=%7E'
    """
    pairs = []
    for key, value in parameters.items():
        for name, item in _flatten(str(key), value):
            if item is None:
                continue
            pairs.append(f"{_encode(name)}={_encode(to_query_value(item))}")
    return "&".join(pairs)


def create_canonical_string(parameters: Mapping[str, Any], secret: Optional[str], salt: str) -> str:
    """
    Build the canonical form that gets hashed.

    The caller's mapping is not modified. A caller-supplied ``salt`` or
    ``secret`` parameter is overwritten by the reserved value. A missing
    secret is left out of the form, like any other None value.
    """
    signed = dict(parameters)
    signed[SALT_PARAMETER] = salt
    signed[SECRET_PARAMETER] = secret

    ordered = {str(key): signed[key] for key in sorted(signed, key=str)}
    return build_query(ordered)


def compute_signature(
    parameters: Mapping[str, Any],
    algorithm: str,
    secret: Optional[str],
    salt: Optional[str] = None,
) -> Optional[str]:
    """
    Compute the signature token for a parameter set.

    Args:
        parameters: Query parameters to sign
        algorithm: One of sha256, sha384, sha512
        secret: Shared consumer secret
        salt: Salt to use; a random one is generated when omitted

    Returns:
        "{algorithm}:{salt}:{digest}", or None if the algorithm is not allowed
    """
    if not is_valid_algorithm(algorithm):
        logger.warning(f"Refusing to sign with unsupported algorithm: {algorithm!r}")
        return None

    if salt is None:
        salt = generate_salt()

    canonical = create_canonical_string(parameters, secret, salt)
    digest = hashlib.new(algorithm, canonical.encode("utf-8")).hexdigest()

    return TOKEN_SEPARATOR.join((algorithm, salt, digest))
