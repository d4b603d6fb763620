"""Layer registry port - Lookup of layer configuration by name."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import LayerConfig


class LayerRegistryPort(Protocol):
    """Port for the read-only layer registry.

    Implementation: adapters/layers/json_registry.py

    The registry is loaded once at startup and never mutated.
    """

    def get(self, name: str) -> Optional[LayerConfig]:
        """Look up a layer.

        Args:
            name: The layer identifier (Layar layerName).

        Returns:
            The layer configuration, or None if the layer is unknown.
        """
        ...

    def names(self) -> Sequence[str]:
        """List the registered layer identifiers."""
        ...
