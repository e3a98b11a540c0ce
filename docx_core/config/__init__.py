"""
Configuration Management
========================

Configuration utilities for the PDF-to-DOCX pipeline.
"""

from docx_core.config.settings import (
    PipelineConfig,
    PackagingConfig,
    LayoutConfig,
    RenderConfig,
    load_config,
    save_config,
    get_default_config,
)

__all__ = [
    "PipelineConfig",
    "PackagingConfig",
    "LayoutConfig",
    "RenderConfig",
    "load_config",
    "save_config",
    "get_default_config",
]
