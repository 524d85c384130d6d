"""Layered configuration for Stencil."""
from __future__ import annotations

from .manager import ENV_PREFIX, ConfigManager

__all__ = ["ConfigManager", "ENV_PREFIX"]
