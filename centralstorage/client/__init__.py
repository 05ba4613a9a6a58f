"""
Central Storage Client

Thin HTTP client for the central storage server. Signing lives in
centralstorage.core.signing so the server-side verifier can share it.
"""
from centralstorage.client.api_client import CentralStorageClient
from centralstorage.client.exceptions import CentralStorageException, StorageServerException
from centralstorage.client.requests import StorageRequest

__all__ = [
    'CentralStorageClient',
    'CentralStorageException',
    'StorageServerException',
    'StorageRequest',
]
