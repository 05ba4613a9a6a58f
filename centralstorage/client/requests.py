"""
Outbound storage request.

A mutable request description that the signer decorates (nonce query
parameter, signature and key headers) before the client dispatches it.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import httpx


@dataclass
class StorageRequest:
    """
    Request to the storage API, before it is sent.

    Attributes:
        method: HTTP method
        url: Absolute URL, without query string
        query: Query parameters (signed)
        headers: Case-insensitive headers
        data: Body fields; form fields for uploads, JSON otherwise
        files: Local files to upload as multipart parts
    """
    method: str
    url: str
    query: Dict[str, Any] = field(default_factory=dict)
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    data: Dict[str, Any] = field(default_factory=dict)
    files: List[Path] = field(default_factory=list)
