from centralstorage.core.assets.models import Asset, AssetRecord, Base
from centralstorage.core.assets.repository import AssetRepository

__all__ = ["Asset", "AssetRecord", "AssetRepository", "Base"]
