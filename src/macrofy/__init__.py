"""macrofy package initialization."""
from __future__ import annotations

import importlib
import os

from .core.config import WrapperConfig
from .python.expander import expand_file, expand_source
from .runtime import actor, macrofy
from .version import __version__

__all__ = [
    "WrapperConfig",
    "__version__",
    "actor",
    "bootstrap",
    "expand_file",
    "expand_source",
    "macrofy",
]

_BOOTSTRAPPED = False


def bootstrap() -> None:
    """Initialize macrofy plugins (idempotent)."""

    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return
    _load_plugins()
    _BOOTSTRAPPED = True


def _load_plugins() -> None:
    plugin_env = os.environ.get("MACROFY_PLUGINS")
    if not plugin_env:
        return
    for item in plugin_env.split(","):
        module_name = item.strip()
        if not module_name:
            continue
        module = importlib.import_module(module_name)
        register = getattr(module, "register", None)
        if callable(register):
            register()
