"""
ModelKit Adapters — storage backends for registered models.

Built-in adapters are listed in ``ADAPTERS`` and can be looked up or
instantiated by name:

    info = get_adapter_info("memory")
    adapter = create_adapter("memory")
    registry.set_adapter(adapter)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from ..faults import ConfigInvalidFault
from .base import Adapter
from .memory import MemoryAdapter


@dataclass(frozen=True)
class AdapterInfo:
    """Descriptor of a built-in adapter."""
    name: str
    cls: Type[Adapter]
    description: str = ""

    @property
    def path(self) -> str:
        return f"{self.cls.__module__}.{self.cls.__qualname__}"


ADAPTERS: Dict[str, AdapterInfo] = {
    "memory": AdapterInfo("memory", MemoryAdapter, "In-process dict storage"),
}


def get_adapter_info(name: str) -> Optional[AdapterInfo]:
    """Look up a built-in adapter by (case-insensitive) name."""
    return ADAPTERS.get(name.lower())


def create_adapter(name: str, **kwargs: Any) -> Adapter:
    """Instantiate a built-in adapter by name."""
    info = get_adapter_info(name)
    if info is None:
        raise ConfigInvalidFault(
            "adapter", f"unknown adapter '{name}' (known: {', '.join(sorted(ADAPTERS))})"
        )
    return info.cls(**kwargs)


__all__ = [
    "Adapter",
    "AdapterInfo",
    "ADAPTERS",
    "MemoryAdapter",
    "create_adapter",
    "get_adapter_info",
]
