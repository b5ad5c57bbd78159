"""Namespace for pluggable PdfDesk tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from . import pages  # noqa: F401  # register merge, split and organize
    from . import edit  # noqa: F401
    from . import convert  # noqa: F401


__all__ = ["registry", "load_builtin_plugins"]
