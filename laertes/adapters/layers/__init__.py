"""Layer registry adapters - Implementations of LayerRegistryPort.

Available implementations:
- JsonLayerRegistry: layers declared in a JSON file
"""

from .json_registry import JsonLayerRegistry

__all__ = ["JsonLayerRegistry"]
