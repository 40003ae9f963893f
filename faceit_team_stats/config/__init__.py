"""Configuration package."""

from .settings import PipelineOptions, Settings, get_settings

__all__ = ["PipelineOptions", "Settings", "get_settings"]
