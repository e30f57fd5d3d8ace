"""TOML configuration loader for snapcatalog."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


@dataclass
class StoreConfig:
    backend: str = "json"
    path: str = "~/.config/snapcatalog"
    seed_defaults: bool = True


@dataclass
class CatalogRulesConfig:
    min_images: int = 5
    max_images: int = 10
    max_image_bytes: int = 1024 * 1024
    price_multiplier: int = 1000


@dataclass
class CameraConfig:
    index: int = 0
    save_dir: str = ""
    jpeg_quality: int = 80


@dataclass
class GeminiVisionConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class ClaudeVisionConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class VisionConfig:
    backend: str = "gemini"
    gemini: GeminiVisionConfig = field(default_factory=GeminiVisionConfig)
    claude: ClaudeVisionConfig = field(default_factory=ClaudeVisionConfig)


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class AppConfig:
    store: StoreConfig = field(default_factory=StoreConfig)
    catalog: CatalogRulesConfig = field(default_factory=CatalogRulesConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    vision: VisionConfig = field(default_factory=VisionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys and the log level can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    sto = raw.get("store", {})
    cat = raw.get("catalog", {})
    cam = raw.get("camera", {})
    vis = raw.get("vision", {})
    log = raw.get("logging", {})

    gemini_cfg = vis.get("gemini", {})
    claude_cfg = vis.get("claude", {})

    # Resolve API keys: config file → environment variable
    gemini_api_key = (
        gemini_cfg.get("api_key", "")
        or os.environ.get("GEMINI_API_KEY", "")
        or os.environ.get("API_KEY", "")
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    log_level = os.environ.get("SNAPCATALOG_LOG_LEVEL", "") or log.get(
        "level", "INFO"
    )

    return AppConfig(
        store=StoreConfig(
            backend=sto.get("backend", "json"),
            path=sto.get("path", "~/.config/snapcatalog"),
            seed_defaults=sto.get("seed_defaults", True),
        ),
        catalog=CatalogRulesConfig(
            min_images=cat.get("min_images", 5),
            max_images=cat.get("max_images", 10),
            max_image_bytes=cat.get("max_image_bytes", 1024 * 1024),
            price_multiplier=cat.get("price_multiplier", 1000),
        ),
        camera=CameraConfig(
            index=cam.get("index", 0),
            save_dir=cam.get("save_dir", ""),
            jpeg_quality=cam.get("jpeg_quality", 80),
        ),
        vision=VisionConfig(
            backend=vis.get("backend", "gemini"),
            gemini=GeminiVisionConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
            claude=ClaudeVisionConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
        logging=LoggingConfig(level=log_level.upper()),
    )
