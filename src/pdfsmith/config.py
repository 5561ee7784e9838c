"""Configuration loading and validation for pdfsmith."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from pdfsmith.compression.engine import EngineSettings
from pdfsmith.constants import (
    DEFAULT_COMPATIBILITY_LEVEL,
    DEFAULT_ENGINE_TIMEOUT,
    DEFAULT_GHOSTSCRIPT,
    DEFAULT_THUMBNAIL_SCALE,
    PAGE_SIZES,
)
from pdfsmith.exceptions import ConfigError


# ============================================================================
# Enums for constrained string values
# ============================================================================


class Quality(str, Enum):
    """Ghostscript PDFSETTINGS presets."""

    SCREEN = "screen"
    EBOOK = "ebook"
    PRINTER = "printer"
    PREPRESS = "prepress"


class Orientation(str, Enum):
    """Page orientation for named sizes."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class StartMethod(str, Enum):
    """multiprocessing start methods usable for compression workers."""

    SPAWN = "spawn"
    FORKSERVER = "forkserver"
    FORK = "fork"


def _parse_enum(enum_class: type[Enum], value: Any, field: str) -> Enum:
    """Parse a config value into an enum, raising ConfigError with the valid values."""
    try:
        return enum_class(value)
    except ValueError:
        valid = ", ".join(e.value for e in enum_class)
        raise ConfigError(
            f"Invalid value '{value}' for {field}. Valid values are: {valid}",
            context={"field": field},
        )


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping", context={"field": name})
    return section


# ============================================================================
# Config dataclasses
# ============================================================================


@dataclass
class Settings:
    """General settings."""
    ignore_encryption: bool = True
    output_dir: Path = Path("./output")


@dataclass
class EngineConfig:
    """Ghostscript compression settings."""
    ghostscript: str = DEFAULT_GHOSTSCRIPT
    compatibility_level: str = DEFAULT_COMPATIBILITY_LEVEL
    quality: Quality = Quality.EBOOK
    timeout: float | None = DEFAULT_ENGINE_TIMEOUT
    start_method: StartMethod = StartMethod.SPAWN

    def to_settings(self) -> EngineSettings:
        return EngineSettings(
            executable=self.ghostscript,
            compatibility_level=self.compatibility_level,
            timeout=self.timeout,
        )


@dataclass
class ThumbnailConfig:
    """Thumbnail rendering settings."""
    scale: float = DEFAULT_THUMBNAIL_SCALE


@dataclass
class ResizeConfig:
    """Default target for resize."""
    size: str = "A4"
    orientation: Orientation = Orientation.PORTRAIT


@dataclass
class Config:
    """Root configuration object."""
    version: int = 1
    settings: Settings = field(default_factory=Settings)
    engine: EngineConfig = field(default_factory=EngineConfig)
    thumbnails: ThumbnailConfig = field(default_factory=ThumbnailConfig)
    resize: ResizeConfig = field(default_factory=ResizeConfig)


# ============================================================================
# Parsing
# ============================================================================


def parse_engine(data: dict[str, Any]) -> EngineConfig:
    """Parse the ``engine`` section."""
    timeout = data.get("timeout", DEFAULT_ENGINE_TIMEOUT)
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid timeout '{timeout}'", context={"field": "engine.timeout"})
        if timeout <= 0:
            raise ConfigError("Timeout must be positive", context={"field": "engine.timeout"})

    return EngineConfig(
        ghostscript=str(data.get("ghostscript", DEFAULT_GHOSTSCRIPT)),
        compatibility_level=str(data.get("compatibility_level", DEFAULT_COMPATIBILITY_LEVEL)),
        quality=_parse_enum(Quality, data.get("quality", "ebook"), "engine.quality"),
        timeout=timeout,
        start_method=_parse_enum(StartMethod, data.get("start_method", "spawn"), "engine.start_method"),
    )


def parse_resize(data: dict[str, Any]) -> ResizeConfig:
    """Parse the ``resize`` section."""
    size = str(data.get("size", "A4"))
    known = {name.lower(): name for name in PAGE_SIZES}
    if size.lower() not in known:
        raise ConfigError(
            f"Unknown page size '{size}'. Valid sizes: {', '.join(PAGE_SIZES)}",
            context={"field": "resize.size"},
        )
    return ResizeConfig(
        size=known[size.lower()],
        orientation=_parse_enum(Orientation, data.get("orientation", "portrait"), "resize.orientation"),
    )


def parse_config(data: dict[str, Any]) -> Config:
    """Build a Config from an already-loaded mapping."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML dictionary")

    s = _section(data, "settings")
    settings = Settings(
        ignore_encryption=bool(s.get("ignore_encryption", True)),
        output_dir=Path(s.get("output_dir", "./output")),
    )

    t = _section(data, "thumbnails")
    try:
        scale = float(t.get("scale", DEFAULT_THUMBNAIL_SCALE))
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid thumbnail scale '{t.get('scale')}'", context={"field": "thumbnails.scale"})
    if scale <= 0:
        raise ConfigError("Thumbnail scale must be positive", context={"field": "thumbnails.scale"})

    return Config(
        version=data.get("version", 1),
        settings=settings,
        engine=parse_engine(_section(data, "engine")),
        thumbnails=ThumbnailConfig(scale=scale),
        resize=parse_resize(_section(data, "resize")),
    )


def load_config(config_path: Path) -> Config:
    """Load and validate a configuration file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", context={"file": config_path}) from e

    if data is None:
        return Config()
    return parse_config(data)
