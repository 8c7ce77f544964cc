"""CLI package exports for top-level command entry points."""

from __future__ import annotations

from .main import HVProvisionModalCLI, main

__all__ = ['HVProvisionModalCLI', 'main']
