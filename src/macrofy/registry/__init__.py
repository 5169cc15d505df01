"""Wrapper registry public API."""
from .loader import RegistryFile, build_registry, load_registry_file
from .registry import (
    WrapperRegistry,
    clear_registry,
    load_builtins,
    register_wrapper,
    registry,
)

__all__ = [
    "RegistryFile",
    "WrapperRegistry",
    "build_registry",
    "clear_registry",
    "load_builtins",
    "load_registry_file",
    "register_wrapper",
    "registry",
]
