"""Telemetry and logging utilities."""

from .logger import configure_file_logging

__all__ = ["configure_file_logging"]
