"""Simple launcher for the Laertes getPOIs server.

Starts uvicorn on the configured host and port. The layer registry
path and credentials come from the environment (see laertes/config.py).
"""

from __future__ import annotations

import sys

import uvicorn

from laertes.adapters.layers import JsonLayerRegistry
from laertes.config import get_config
from laertes.domain.errors import ConfigurationError


def main() -> None:
    config = get_config()
    print("=== Laertes ===")
    print(f"Layers: {config.layers.path}")
    if not config.twitter.is_complete:
        print("Twitter environment variables are not set; Twitter search will not work.")

    try:
        registry = JsonLayerRegistry.from_config(config.layers)
    except ConfigurationError as e:
        print(f"Cannot start: {e}")
        sys.exit(1)
    print(f"Serving layers: {', '.join(registry.names()) or '(none)'}")

    uvicorn.run(
        "laertes.api:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
    )


if __name__ == "__main__":
    main()
