import pytest

from macrofy.registry import WrapperRegistry, clear_registry, load_builtins


@pytest.fixture
def builtin_registry() -> WrapperRegistry:
    """A fresh registry holding only the built-in example wrappers."""

    registry = WrapperRegistry()
    load_builtins(registry)
    return registry


@pytest.fixture(autouse=True)
def reset_global_registry():
    clear_registry()
    yield
    clear_registry()
