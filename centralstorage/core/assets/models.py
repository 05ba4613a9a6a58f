"""
Asset Models

Plain record of a file stored on the central storage server, plus the
SQLAlchemy table that keeps a local copy of that record.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Column, String, Integer, BigInteger, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


AUDIO_MIME_TYPES = frozenset({"audio/mp3", "audio/mpeg"})

PDF_MIME_TYPES = frozenset({
    "application/pdf",
    "application/x-pdf",
    "application/acrobat",
    "applications/vnd.pdf",
    "text/pdf",
    "text/x-pdf",
})


@dataclass
class Asset:
    """
    An asset as returned by the storage server.

    Attributes:
        key: Server-assigned asset key (used in URLs)
        name: Original file name
        type: Coarse type reported by the server ("image", "audio", ...)
        mimetype: MIME type
        size: Size in bytes
        width: Pixel width (images/video only)
        height: Pixel height (images/video only)
    """
    key: str
    name: Optional[str] = None
    type: Optional[str] = None
    mimetype: Optional[str] = None
    size: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "Asset":
        """Build an asset from one entry of the server's ``assets`` list."""
        asset = cls(
            key=data["key"],
            name=data.get("name"),
            type=data.get("type"),
            mimetype=data.get("mimetype"),
            size=data.get("size"),
        )
        if data.get("width") is not None and data.get("height") is not None:
            asset.set_dimensions(data["width"], data["height"])
        return asset

    def set_dimensions(self, width: int, height: int) -> "Asset":
        self.width = width
        self.height = height
        return self

    @property
    def dimensions(self) -> Dict[str, Optional[int]]:
        return {"width": self.width, "height": self.height}

    def is_image(self) -> bool:
        return self.type == "image"

    def is_audio(self) -> bool:
        return self.mimetype in AUDIO_MIME_TYPES

    def is_video(self) -> bool:
        if not self.mimetype:
            return False
        return self.mimetype.split("/")[0].lower() == "video"

    def is_document(self) -> bool:
        """Anything but raw binary counts as a document."""
        return self.mimetype != "application/octet-stream"

    def is_pdf(self) -> bool:
        return self.mimetype in PDF_MIME_TYPES

    def is_svg(self) -> bool:
        return self.mimetype == "image/svg+xml"


class AssetRecord(Base):
    """
    Local row for an uploaded asset.

    The file itself lives on the storage server; only its metadata is kept.
    """
    __tablename__ = "assets"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    asset_key = Column(String(255), unique=True, nullable=False, index=True)

    name = Column(String(500))
    type = Column(String(50))
    mimetype = Column(String(127))
    size = Column(BigInteger)
    width = Column(Integer)
    height = Column(Integer)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_asset(self) -> Asset:
        return Asset(
            key=self.asset_key,
            name=self.name,
            type=self.type,
            mimetype=self.mimetype,
            size=self.size,
            width=self.width,
            height=self.height,
        )

    def update_from(self, asset: Asset) -> None:
        self.asset_key = asset.key
        self.name = asset.name
        self.type = asset.type
        self.mimetype = asset.mimetype
        self.size = asset.size
        self.width = asset.width
        self.height = asset.height

    def __repr__(self):
        return f"<AssetRecord(asset_key='{self.asset_key}', mimetype='{self.mimetype}')>"
