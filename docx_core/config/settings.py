"""
Configuration Settings
======================

Configuration dataclasses for the PDF-to-DOCX pipeline.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict
import json
import logging

import yaml

logger = logging.getLogger(__name__)

VALID_ALIGNMENTS = ('left', 'center', 'right', 'both')
VALID_RENDERERS = ('fitz', 'inkscape')


@dataclass
class PackagingConfig:
    """Packaging-related configuration."""

    media_dir_name: str = "word/media"
    media_prefix: str = "page"
    media_padding: int = 4
    compression_level: int = 6  # ZIP compression level (0-9)
    store_incompressible: bool = True  # Store media that deflate would not shrink

    def __post_init__(self) -> None:
        if not 0 <= self.compression_level <= 9:
            raise ValueError(f"compression_level must be between 0 and 9, got {self.compression_level}")
        if self.media_padding < 1:
            raise ValueError(f"media_padding must be positive, got {self.media_padding}")


@dataclass
class LayoutConfig:
    """Page layout configuration for the generated document."""

    fit_page_to_image: bool = True  # One section per page, sized to the image
    margin_px: int = 0
    alignment: str = "left"

    def __post_init__(self) -> None:
        if self.alignment not in VALID_ALIGNMENTS:
            raise ValueError(f"alignment must be one of {VALID_ALIGNMENTS}, got {self.alignment!r}")
        if self.margin_px < 0:
            raise ValueError(f"margin_px must not be negative, got {self.margin_px}")


@dataclass
class RenderConfig:
    """Page rendering configuration."""

    renderer: str = "fitz"
    dpi: int = 150  # Raster resolution; drawing size always follows 96 DPI
    inkscape_path: str = "inkscape"
    timeout_seconds: int = 120

    def __post_init__(self) -> None:
        if self.renderer not in VALID_RENDERERS:
            raise ValueError(f"renderer must be one of {VALID_RENDERERS}, got {self.renderer!r}")
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive, got {self.dpi}")


@dataclass
class PipelineConfig:
    """
    Complete pipeline configuration.

    Contains all configuration for PDF-to-DOCX conversion:
    - Packaging options
    - Page layout
    - Page rendering

    Example:
        config = PipelineConfig()
        config.render.dpi = 200
        config.layout.margin_px = 24
        save_config(config, Path("config.yaml"))
    """

    packaging: PackagingConfig = field(default_factory=PackagingConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    # General settings
    validate_output: bool = True
    temp_dir: str = ""  # Empty means use system temp
    log_level: str = "INFO"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'packaging': asdict(self.packaging),
            'layout': asdict(self.layout),
            'render': asdict(self.render),
            'validate_output': self.validate_output,
            'temp_dir': self.temp_dir,
            'log_level': self.log_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PipelineConfig':
        """Create from dictionary."""
        config = cls()

        if 'packaging' in data:
            config.packaging = PackagingConfig(**data['packaging'])
        if 'layout' in data:
            config.layout = LayoutConfig(**data['layout'])
        if 'render' in data:
            config.render = RenderConfig(**data['render'])

        if 'validate_output' in data:
            config.validate_output = bool(data['validate_output'])
        if 'temp_dir' in data:
            config.temp_dir = data['temp_dir']
        if 'log_level' in data:
            config.log_level = data['log_level']

        return config


def load_config(config_path: Path) -> PipelineConfig:
    """
    Load configuration from file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config_path: Path to config file

    Returns:
        PipelineConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, 'r', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f) or {}
        elif suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Loaded configuration from {config_path}")
    return PipelineConfig.from_dict(data)


def save_config(config: PipelineConfig, config_path: Path) -> None:
    """
    Save configuration to file.

    Supports JSON and YAML formats based on file extension.

    Raises:
        ValueError: If file format is not supported
    """
    suffix = config_path.suffix.lower()
    data = config.to_dict()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        elif suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Saved configuration to {config_path}")


def get_default_config() -> PipelineConfig:
    """Get default configuration."""
    return PipelineConfig()
