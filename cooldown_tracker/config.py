"""Settings file I/O for TrackerConfig."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from cooldown_tracker.models import TrackerConfig

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).parent.parent / "config" / "default_config.json"


def load_config(path: Optional[Path] = None) -> TrackerConfig:
    """Load config from JSON, falling back to defaults."""
    path = Path(path) if path is not None else CONFIG_PATH
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read config {path}: {e}; using defaults")
            return TrackerConfig()
        if not isinstance(data, dict):
            logger.warning(f"Config {path} is not a JSON object; using defaults")
            return TrackerConfig()
        logger.info(f"Loaded config from {path}")
        return TrackerConfig.from_dict(data)
    logger.warning(f"Config not found at {path}, using defaults")
    return TrackerConfig()


def save_config(config: TrackerConfig, path: Optional[Path] = None) -> Path:
    """Write config (including spell cache and icon positions) as indented JSON."""
    path = Path(path) if path is not None else CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.info(f"Saved config to {path}")
    return path
