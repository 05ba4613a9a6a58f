"""
Consumer Registry

Maps consumer keys to their shared secrets for server-side verification.
Loaded from YAML configuration.

Configuration format (config/consumers.yaml):
```yaml
consumers:
  abcdef:
    description: "Marketing site"
    secret: "bcdefhijklmn"
    enabled: true
```
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional
import yaml

from centralstorage.core.paths import get_config_path

logger = logging.getLogger(__name__)


@dataclass
class Consumer:
    """
    A configured API consumer.

    Attributes:
        key: Public consumer key (sent in centralstorage-key)
        secret: Shared signing secret
        description: Human-readable description
        enabled: Whether consumer is active
    """
    key: str
    secret: str
    description: str = ""
    enabled: bool = True

    def __repr__(self) -> str:
        return f"Consumer(key={self.key!r}, enabled={self.enabled})"


class ConsumerRegistry:
    """
    Registry of consumers allowed to sign requests.

    Thread-safe for reads (immutable after load).
    """

    def __init__(self):
        self._consumers: Dict[str, Consumer] = {}
        self._loaded = False

    def load_from_yaml(self, config_path: Path) -> None:
        """
        Load consumer configuration from YAML file.

        Args:
            config_path: Path to consumers.yaml

        Raises:
            ValueError: If an entry is invalid
        """
        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Consumers config not found: {config_path}")
            self._loaded = True
            return

        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError(f"Invalid consumers config {config_path}: expected a mapping")

        consumers_config = config.get("consumers") or {}
        if not isinstance(consumers_config, dict):
            raise ValueError(f"Invalid consumers config {config_path}: 'consumers' must be a mapping")

        for key, data in consumers_config.items():
            try:
                self.register(self._parse_consumer(str(key), data or {}))
            except Exception as e:
                logger.error(f"Failed to load consumer '{key}': {e}")
                raise ValueError(f"Invalid consumer config for '{key}': {e}") from e

        self._loaded = True
        logger.info(f"Loaded {len(self._consumers)} consumers from {config_path}")

    def _parse_consumer(self, key: str, data: dict) -> Consumer:
        """Parse a consumer configuration entry."""
        if not isinstance(data, dict):
            raise ValueError("entry must be a mapping")

        secret = data.get("secret")
        if not secret:
            raise ValueError("missing secret")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("enabled must be true or false")

        return Consumer(
            key=key,
            secret=str(secret),
            description=data.get("description", ""),
            enabled=enabled,
        )

    def register(self, consumer: Consumer) -> None:
        """Add (or replace) a consumer."""
        self._consumers[consumer.key] = consumer

    def get_consumer(self, key: Optional[str]) -> Optional[Consumer]:
        """
        Get a consumer by key.

        Returns:
            Consumer if found and enabled, None otherwise
        """
        if not key:
            return None
        consumer = self._consumers.get(key)
        if consumer and consumer.enabled:
            return consumer
        return None

    def get_secret(self, key: Optional[str]) -> Optional[str]:
        """Secret for an enabled consumer, or None."""
        consumer = self.get_consumer(key)
        return consumer.secret if consumer else None

    def list_consumers(self) -> List[str]:
        """Get list of all registered consumer keys."""
        return list(self._consumers.keys())

    def clear(self) -> None:
        self._consumers.clear()
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        """Check if registry has been loaded."""
        return self._loaded


# Global registry instance
consumer_registry = ConsumerRegistry()


def load_consumers(config_path: Optional[Path] = None, filename: str = "consumers.yaml") -> ConsumerRegistry:
    """
    Load consumers from configuration.

    Args:
        config_path: Path to consumers.yaml. If None, resolved with get_config_path().
        filename: File name to resolve when config_path is None

    Returns:
        The loaded registry
    """
    if config_path is None:
        config_path = get_config_path(filename)
        if config_path is None:
            logger.info(f"No {filename} found - signed requests cannot be verified")
            return consumer_registry

    consumer_registry.load_from_yaml(config_path)
    return consumer_registry
