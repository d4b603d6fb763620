"""JSON file layer registry.

The registry file is a list of layer objects:

    [
      {
        "layer": "code4lib2013",
        "google_maps": ["https://example.org/points.kml"],
        "search": "#c4l13",
        "icon_url": "https://example.org/icon.png",
        "showMessage": false
      }
    ]

It is read and validated once; the resulting registry is immutable.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...config import LayersConfig, get_config
from ...domain.errors import ConfigurationError
from ...domain.models import LayerConfig

logger = logging.getLogger(__name__)


class _LayerEntry(BaseModel):
    """Schema of one layer object in the registry file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    layer: str = Field(min_length=1)
    map_sources: list[str] = Field(default_factory=list, alias="google_maps")
    search: str = ""
    icon_url: Optional[str] = None
    show_message: bool = Field(default=False, alias="showMessage")

    def to_domain(self) -> LayerConfig:
        return LayerConfig(
            name=self.layer,
            map_sources=tuple(self.map_sources),
            search=self.search,
            icon_url=self.icon_url or None,
            show_message=self.show_message,
        )


class JsonLayerRegistry:
    """Layer registry backed by a JSON document.

    Implements LayerRegistryPort. Duplicate layer names keep the first
    declaration, as a linear search over the file would.
    """

    def __init__(self, layers: Sequence[LayerConfig]) -> None:
        by_name: dict[str, LayerConfig] = {}
        for layer in layers:
            if layer.name in by_name:
                logger.warning(
                    "Duplicate layer ignored", extra={"layer": layer.name}
                )
                continue
            by_name[layer.name] = layer
        self._layers: Mapping[str, LayerConfig] = MappingProxyType(by_name)

    @classmethod
    def from_data(cls, data: Any) -> JsonLayerRegistry:
        """Build a registry from already-decoded JSON data.

        Raises:
            ConfigurationError: If the data does not match the schema.
        """
        if not isinstance(data, list):
            raise ConfigurationError(
                "Layer registry must be a JSON list of layer objects",
                setting_name="layers",
            )
        try:
            entries = [_LayerEntry.model_validate(item) for item in data]
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid layer definition", setting_name="layers", cause=e
            )
        return cls([entry.to_domain() for entry in entries])

    @classmethod
    def from_file(cls, path: Path) -> JsonLayerRegistry:
        """Load the registry from a JSON file.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid.
        """
        try:
            with Path(path).open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read layer registry {path}",
                setting_name="layers.path",
                cause=e,
            )

        registry = cls.from_data(data)
        logger.info(
            "Layer registry loaded",
            extra={"path": str(path), "layers": list(registry.names())},
        )
        return registry

    @classmethod
    def from_config(cls, config: Optional[LayersConfig] = None) -> JsonLayerRegistry:
        config = config or get_config().layers
        return cls.from_file(config.path)

    def get(self, name: str) -> Optional[LayerConfig]:
        return self._layers.get(name)

    def names(self) -> Sequence[str]:
        return tuple(self._layers)

    def __len__(self) -> int:
        return len(self._layers)
