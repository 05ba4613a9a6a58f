"""
Asset Repository

Keeps local asset rows in sync with the central storage server.
Deleting an asset removes the row and the remote file in one transaction.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from centralstorage.core.assets.models import Asset, AssetRecord

if TYPE_CHECKING:
    from centralstorage.client.api_client import CentralStorageClient

logger = logging.getLogger(__name__)


class AssetRepository:
    """
    Repository for asset rows.

    Handles:
    - Saving assets returned by uploads
    - Lookup by asset key
    - URL building through the storage client
    - Local + remote deletion
    """

    def __init__(self, db: Session, client: "CentralStorageClient"):
        self.db = db
        self.client = client

    def get_record(self, asset_key: str) -> Optional[AssetRecord]:
        """Get the row for an asset key."""
        stmt = select(AssetRecord).where(AssetRecord.asset_key == asset_key)
        return self.db.execute(stmt).scalar_one_or_none()

    def get(self, asset_key: str) -> Optional[Asset]:
        """Get an asset by key."""
        record = self.get_record(asset_key)
        return record.to_asset() if record else None

    def save(self, asset: Asset) -> AssetRecord:
        """
        Insert or update the row for an asset.

        Returns:
            The persisted AssetRecord
        """
        record = self.get_record(asset.key)
        if record is None:
            record = AssetRecord()
            self.db.add(record)
        record.update_from(asset)
        self.db.commit()
        logger.info(f"Saved asset {asset.key} ({asset.mimetype})")
        return record

    def url(self, asset: Asset, parameters: Optional[Dict[str, Any]] = None) -> str:
        """Public URL for an asset."""
        return self.client.get_asset_url(asset, parameters)

    def delete(self, asset: Asset, parameters: Optional[Dict[str, Any]] = None) -> bool:
        """
        Delete the local row, then the file on the storage server.

        The row deletion is rolled back if the server call fails.

        Args:
            asset: Asset to delete
            parameters: Extra attributes sent with the delete request

        Returns:
            The server's success flag

        Raises:
            StorageServerException: If the server call fails
        """
        record = self.get_record(asset.key)
        try:
            if record is not None:
                self.db.delete(record)
                self.db.flush()

            success = self.client.delete_asset(asset, parameters)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"Delete of asset {asset.key} failed, local row restored")
            raise

        logger.info(f"Deleted asset {asset.key} (server success={success})")
        return success
