"""Tests for pdfsmith.config module."""

from pathlib import Path

import pytest
import yaml

from pdfsmith.compression import EngineSettings
from pdfsmith.config import (
    Config,
    ConfigError,
    Orientation,
    Quality,
    StartMethod,
    load_config,
    parse_config,
    parse_engine,
    parse_resize,
)


class TestLoadConfig:
    """Test configuration file loading."""

    def test_load_full_config(self, full_config_file):
        config = load_config(full_config_file)
        assert config.version == 1
        assert config.settings.ignore_encryption is False
        assert config.settings.output_dir == Path("./results")
        assert config.engine.ghostscript == "/usr/local/bin/gs"
        assert config.engine.quality == Quality.SCREEN
        assert config.engine.start_method == StartMethod.FORKSERVER
        assert config.thumbnails.scale == 0.5
        assert config.resize.size == "Letter"
        assert config.resize.orientation == Orientation.LANDSCAPE

    def test_file_not_found(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "nonexistent.yaml")

    def test_invalid_yaml(self, temp_dir):
        bad_yaml = temp_dir / "bad.yaml"
        bad_yaml.write_text("{{invalid yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(bad_yaml)

    def test_empty_file_gives_defaults(self, temp_dir):
        empty = temp_dir / "empty.yaml"
        empty.write_text("")
        assert load_config(empty) == Config()

    def test_not_a_mapping(self, temp_dir):
        path = temp_dir / "list.yaml"
        with open(path, "w") as f:
            yaml.dump(["a", "b"], f)
        with pytest.raises(ConfigError, match="dictionary"):
            load_config(path)


class TestDefaults:
    """Test default values."""

    def test_defaults(self):
        config = parse_config({})
        assert config.settings.ignore_encryption is True
        assert config.engine.quality == Quality.EBOOK
        assert config.engine.compatibility_level == "1.5"
        assert config.engine.start_method == StartMethod.SPAWN
        assert config.thumbnails.scale == 0.4
        assert config.resize.size == "A4"
        assert config.resize.orientation == Orientation.PORTRAIT

    def test_null_section_uses_defaults(self):
        assert parse_config({"engine": None}).engine.ghostscript == "gs"


class TestParseEngine:
    """Test engine section validation."""

    def test_invalid_quality(self):
        with pytest.raises(ConfigError, match="Valid values are: screen, ebook, printer, prepress"):
            parse_engine({"quality": "maximum"})

    def test_invalid_start_method(self):
        with pytest.raises(ConfigError, match="engine.start_method"):
            parse_engine({"start_method": "thread"})

    def test_null_timeout(self):
        assert parse_engine({"timeout": None}).timeout is None

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigError, match="positive"):
            parse_engine({"timeout": 0})

    def test_non_numeric_timeout(self):
        with pytest.raises(ConfigError, match="Invalid timeout"):
            parse_engine({"timeout": "soon"})

    def test_to_settings(self):
        engine = parse_engine({"ghostscript": "gswin64c", "compatibility_level": 1.4, "timeout": 30})
        assert engine.to_settings() == EngineSettings(
            executable="gswin64c", compatibility_level="1.4", timeout=30.0
        )


class TestParseResize:
    """Test resize section validation."""

    def test_size_canonicalized(self):
        assert parse_resize({"size": "tabloid"}).size == "Tabloid"

    def test_unknown_size(self):
        with pytest.raises(ConfigError, match="Unknown page size"):
            parse_resize({"size": "B4"})

    def test_invalid_orientation(self):
        with pytest.raises(ConfigError, match="resize.orientation"):
            parse_resize({"orientation": "diagonal"})


class TestParseSections:
    """Test other section checks."""

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError, match="Section 'settings'"):
            parse_config({"settings": ["x"]})

    def test_invalid_scale(self):
        with pytest.raises(ConfigError, match="positive"):
            parse_config({"thumbnails": {"scale": -1}})

    def test_error_context(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_config({"thumbnails": {"scale": "big"}})
        assert exc_info.value.context == {"field": "thumbnails.scale"}
