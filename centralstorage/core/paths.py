"""
Centralized path configuration for centralstorage.

Supports:
- Local config: ./config/*.yaml
- External overlay: CONFIG_DIR=/path/to/private/config
- Fallback to .example.yaml when .yaml missing

Usage:
    from centralstorage.core.paths import get_config_path

    # Consumer registry for the server-side verifier
    consumers_path = get_config_path("consumers.yaml")
"""
import os
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# From centralstorage/core/paths.py -> centralstorage/core -> centralstorage -> repo root
_REPO_ROOT = Path(__file__).parent.parent.parent
_DEFAULT_CONFIG_DIR = _REPO_ROOT / "config"

CONFIG_DIR = Path(os.getenv("CONFIG_DIR", str(_DEFAULT_CONFIG_DIR)))


def get_config_path(filename: str, required: bool = False) -> Optional[Path]:
    """
    Resolve config file path with fallback logic.

    Resolution order:
    1. CONFIG_DIR / filename
    2. CONFIG_DIR / filename.example.yaml (if .yaml)
    3. Default config dir / filename
    4. Default config dir / filename.example.yaml

    Args:
        filename: Config filename (e.g., "consumers.yaml")
        required: If True, raise FileNotFoundError when not found

    Returns:
        Path to config file, or None if not found and not required

    Raises:
        FileNotFoundError: If required=True and file not found
    """
    candidates = []

    candidates.append(CONFIG_DIR / filename)
    if filename.endswith('.yaml'):
        candidates.append(CONFIG_DIR / filename.replace('.yaml', '.example.yaml'))

    if CONFIG_DIR != _DEFAULT_CONFIG_DIR:
        candidates.append(_DEFAULT_CONFIG_DIR / filename)
        if filename.endswith('.yaml'):
            candidates.append(_DEFAULT_CONFIG_DIR / filename.replace('.yaml', '.example.yaml'))

    for path in candidates:
        if path.exists():
            logger.debug(f"Config '{filename}' resolved to: {path}")
            return path

    if required:
        searched = [str(c) for c in candidates]
        raise FileNotFoundError(
            f"Required config file '{filename}' not found.\n"
            f"Searched: {searched}\n"
            f"Hint: Copy {filename.replace('.yaml', '.example.yaml')} to {filename} and customize it."
        )

    logger.debug(f"Config '{filename}' not found (optional)")
    return None
