"""Ports layer - Protocols between the core and its adapters.

The aggregator only knows HotspotSourcePort and LayerRegistryPort;
the Twitter source talks to the search API through SocialSearchPort.
"""

from .layers import LayerRegistryPort
from .social import SocialSearchPort
from .sources import HotspotSourcePort

__all__ = [
    "HotspotSourcePort",
    "LayerRegistryPort",
    "SocialSearchPort",
]
