"""
API Client for the Central Storage Server

Uploads and deletes assets and builds the URLs end users load them from.
Every API call is signed with the consumer key/secret (see
centralstorage.core.signing).

Usage:
    from centralstorage.client import CentralStorageClient

    with CentralStorageClient.from_settings() as client:
        asset = client.store("photo.jpg", {"context": "profile"})
        print(client.get_asset_url(asset, {"width": 200}))
"""
import base64
import hashlib
import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from centralstorage.client.exceptions import StorageServerException
from centralstorage.client.requests import StorageRequest
from centralstorage.core.assets.models import Asset
from centralstorage.core.config import Settings, get_settings
from centralstorage.core.signing.signature import DEFAULT_ALGORITHM, build_query, to_query_value
from centralstorage.core.signing.signer import RequestSigner, SignableRequest

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/"

# Length of the md5-derived salt used for public proxy URLs
PUBLIC_URL_SALT_LENGTH = 10


class CentralStorageClient:
    """
    HTTP client for the central storage API.

    Owns a RequestSigner holding the consumer credentials; per-call key,
    secret and server overrides are accepted where the API allows them.
    """

    def __init__(
        self,
        server: Optional[str] = None,
        consumer_key: Optional[str] = None,
        consumer_secret: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        version: Optional[str] = "1",
        algorithm: str = DEFAULT_ALGORITHM,
        timeout: float = 30.0,
    ):
        """
        Initialize API client.

        Args:
            server: Storage API base URL
            consumer_key: Consumer key sent with every signed request
            consumer_secret: Consumer secret used for signing
            http_client: httpx client to send requests with (created if omitted)
            version: Asset version appended to URLs as _v (None to omit)
            algorithm: Signature hash algorithm
            timeout: Request timeout in seconds (only for an owned http client)
        """
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=timeout)

        self.server = server.rstrip("/") if server else server
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.version = version
        self.front: Optional[str] = None

        self.signer = RequestSigner(consumer_key, consumer_secret, algorithm)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> "CentralStorageClient":
        """Build a client from Settings (default: the environment)."""
        settings = settings or get_settings()

        client = cls(
            server=settings.server,
            consumer_key=settings.key,
            consumer_secret=settings.secret,
            http_client=http_client,
            version=settings.version,
            algorithm=settings.algorithm,
            timeout=settings.timeout,
        )
        if settings.front:
            client.set_front_url(settings.front)

        logger.info(f"CentralStorageClient initialized: {client.server}")
        return client

    def close(self) -> None:
        if self._owns_http_client:
            self.http_client.close()

    def __enter__(self) -> "CentralStorageClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # =========================================================================
    # URLs
    # =========================================================================

    def set_front_url(self, front: str) -> "CentralStorageClient":
        """Set the URL end users load assets from."""
        self.front = front.rstrip("/")
        return self

    @property
    def front_url(self) -> Optional[str]:
        """URL sent to end users: the front URL if set, else the server."""
        return self.front if self.front is not None else self.server

    def _get_url(self, path: str, server: Optional[str] = None) -> str:
        server = server or self.server
        if not server:
            raise ValueError("No central storage server configured")
        return server.rstrip("/") + API_PREFIX + path

    def _query_suffix(self, properties: Optional[Mapping[str, Any]]) -> str:
        properties = dict(properties or {})
        if self.version:
            properties["_v"] = self.version
        if not properties:
            return ""
        return "?" + build_query(properties)

    def get_asset_url(
        self,
        asset: Asset,
        properties: Optional[Mapping[str, Any]] = None,
        server: Optional[str] = None,
    ) -> str:
        """
        Return the url for an asset.

        Args:
            asset: Asset to link to
            properties: Query parameters for the asset fetch (e.g. width)
            server: Override the front URL
        """
        server = server or self.front_url
        return f"{server}/assets/{asset.key}{self._query_suffix(properties)}"

    def get_public_asset_url(
        self,
        public_url: str,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        URL that makes the storage server cache (and transform) a public resource.

        No asset is created. The proxied URL is signed with a salt derived
        from the URL itself, so the same input always yields the same link
        and server-side caching keeps working.
        """
        encoded_url = base64.b64encode(public_url.encode("utf-8")).decode("ascii")
        salt = hashlib.md5(public_url.encode("utf-8")).hexdigest()[:PUBLIC_URL_SALT_LENGTH]

        signature = self.signer.sign_parameters({"url": public_url}, self.consumer_secret, salt=salt)

        url = f"{self.front_url}/proxy/{self.consumer_key}/{encoded_url}/{signature}"
        return url + self._query_suffix(properties)

    # =========================================================================
    # Signing
    # =========================================================================

    def sign(self, request: SignableRequest, key: Optional[str] = None, secret: Optional[str] = None) -> None:
        """Sign a request in place (nonce, signature and key headers)."""
        self.signer.sign(request, key, secret)

    def sign_parameters(
        self,
        parameters: Mapping[str, Any],
        secret: Optional[str] = None,
        salt: Optional[str] = None,
    ) -> Optional[str]:
        """Signature token for arbitrary parameters (random salt unless one is given)."""
        return self.signer.sign_parameters(parameters, secret, salt=salt)

    def is_valid(self, request: SignableRequest, key: Optional[str], secret: Optional[str]) -> bool:
        """Check if a request carries a valid signature."""
        return self.signer.is_valid(request, key, secret)

    def is_valid_parameters(
        self,
        parameters: Mapping[str, Any],
        provided_signature: Optional[str],
        secret: Optional[str],
    ) -> bool:
        return self.signer.is_valid_parameters(parameters, provided_signature, secret)

    # =========================================================================
    # API calls
    # =========================================================================

    def store(
        self,
        file: Union[str, Path],
        attributes: Optional[Mapping[str, Any]] = None,
        server: Optional[str] = None,
        key: Optional[str] = None,
        secret: Optional[str] = None,
    ) -> Optional[Asset]:
        """
        Upload a file.

        Calls: POST /api/v1/upload

        Args:
            file: Path of the file to upload
            attributes: Extra attributes stored with the asset
            server: Override the storage server
            key: Override the consumer key
            secret: Override the consumer secret

        Returns:
            The stored Asset, or None if the server returned no assets

        Raises:
            StorageServerException: On transport errors, error statuses or non-JSON replies
        """
        path = Path(file)
        request = StorageRequest(
            method="POST",
            url=self._get_url("upload", server),
            data={f"attributes[{name}]": value for name, value in (attributes or {}).items()},
            files=[path],
        )
        self.sign(request, key, secret)

        body = self._dispatch(request)

        # Only one asset expected
        for data in body.get("assets") or []:
            asset = Asset.from_response(data)
            logger.info(f"Stored {path.name} as asset {asset.key}")
            return asset

        logger.warning(f"Upload of {path.name} returned no assets")
        return None

    def delete_asset(
        self,
        asset: Asset,
        properties: Optional[Mapping[str, Any]] = None,
        server: Optional[str] = None,
        key: Optional[str] = None,
        secret: Optional[str] = None,
    ) -> bool:
        """
        Remove the asset from the central server.

        Calls: DELETE /api/v1/assets/{key}

        Raises:
            StorageServerException: On transport errors, error statuses or non-JSON replies
        """
        request = StorageRequest(
            method="DELETE",
            url=self._get_url(f"assets/{asset.key}", server),
            data={"attributes": dict(properties or {})},
        )
        self.sign(request, key, secret)

        body = self._dispatch(request)
        return bool(body.get("success"))

    def _dispatch(self, request: StorageRequest) -> Dict[str, Any]:
        """Send a signed request and decode its JSON object body."""
        try:
            response = self._send(request)
        except httpx.HTTPError as e:
            if isinstance(e, httpx.HTTPStatusError):
                logger.error(f"API error {e.response.status_code}: {request.method} {request.url}")
            else:
                logger.error(f"Request error: {request.method} {request.url}: {e}")
            raise StorageServerException.make(e) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not body or not isinstance(body, dict):
            logger.error(f"Non-JSON response from {request.url}")
            raise StorageServerException.make_from_content(response.text)

        return body

    def _send(self, request: StorageRequest) -> httpx.Response:
        """Send a request; uploads go multipart, other bodies as JSON."""
        logger.debug(f"{request.method} {request.url} query={sorted(request.query)}")

        with ExitStack() as stack:
            options: Dict[str, Any] = {
                "headers": request.headers,
                # Same string forms the signature was computed over
                "params": {
                    name: to_query_value(value) for name, value in request.query.items()
                    if value is not None
                },
            }

            if request.files:
                options["data"] = {
                    name: value for name, value in request.data.items()
                    if isinstance(value, (str, int, float, bool))
                }
                options["files"] = [
                    (f"file_{counter}", (path.name, stack.enter_context(open(path, "rb"))))
                    for counter, path in enumerate(request.files, start=1)
                ]
            elif request.data:
                options["json"] = request.data

            response = self.http_client.request(request.method, request.url, **options)

        response.raise_for_status()
        return response
