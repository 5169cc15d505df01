"""Wrapper registry implementation."""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, Optional, Tuple

from macrofy.core.config import WrapperConfig


class WrapperRegistry:
    """Maps attribute names to the wrapper configs used to expand them."""

    def __init__(self, configs: Optional[Dict[str, WrapperConfig]] = None) -> None:
        self._configs: Dict[str, WrapperConfig] = dict(configs or {})

    def register(self, name: str, config: WrapperConfig) -> WrapperConfig:
        if name in self._configs:
            raise ValueError(f"Wrapper '{name}' already registered")
        self._configs[name] = config
        return config

    def update_or_register(self, name: str, config: WrapperConfig) -> WrapperConfig:
        self._configs[name] = config
        return config

    def get(self, name: str) -> WrapperConfig:
        try:
            return self._configs[name]
        except KeyError as exc:
            raise KeyError(f"Wrapper '{name}' is not registered") from exc

    def resolve(self, name: Optional[str]) -> Optional[WrapperConfig]:
        """Look up ``name`` as written, then by its last dotted component."""

        if name is None:
            return None
        if name in self._configs:
            return self._configs[name]
        return self._configs.get(name.rpartition(".")[2])

    def __contains__(self, name: str) -> bool:
        return name in self._configs

    def __iter__(self) -> Iterator[str]:
        return iter(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def names(self) -> Iterable[str]:
        return tuple(self._configs.keys())

    def items(self) -> Tuple[Tuple[str, WrapperConfig], ...]:
        return tuple(self._configs.items())

    def copy(self) -> "WrapperRegistry":
        return WrapperRegistry(self._configs)

    def clear(self) -> None:
        self._configs.clear()


registry = WrapperRegistry()


def register_wrapper(name: str, config: WrapperConfig) -> WrapperConfig:
    return registry.register(name, config)


def clear_registry() -> None:
    registry.clear()


def load_builtins(target: Optional[WrapperRegistry] = None) -> None:
    from . import builtins  # noqa: WPS433

    destination = registry if target is None else target
    for name, config in builtins.BUILTIN_WRAPPERS:
        destination.update_or_register(name, config)
