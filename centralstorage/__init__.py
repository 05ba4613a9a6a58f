"""
Central Storage Client

Uploads and deletes files on a central asset-storage server and builds
signed/public asset URLs. Requests are authenticated with a salted-hash
signature over their query parameters.

Architecture:
    application → CentralStorageClient → RequestSigner → storage server API
    storage server → verify_signed_request → ConsumerRegistry
"""
from centralstorage.client import CentralStorageClient, StorageServerException
from centralstorage.core.assets.models import Asset
from centralstorage.core.signing import RequestSigner, compute_signature

__all__ = [
    'Asset',
    'CentralStorageClient',
    'RequestSigner',
    'StorageServerException',
    'compute_signature',
]
