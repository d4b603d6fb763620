"""HTTP boundary: the Layar getPOIs endpoint.

Run with:

    uvicorn --factory laertes.api:create_app --port 4567
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .container import Container, get_container
from .domain.errors import QueryValidationError
from .observability import configure_logging
from .ports.layers import LayerRegistryPort
from .services import QueryResolver, invalid_query_payload, to_layar_payload

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Build the application.

    The layer registry is loaded here, once; a missing or invalid
    registry file aborts startup with ConfigurationError.
    """
    container = container or get_container()
    configure_logging(container.config.observability)

    resolver: QueryResolver = container.resolve(QueryResolver)
    registry: LayerRegistryPort = container.resolve(LayerRegistryPort)

    app = FastAPI(title="Laertes", version="1.0")

    @app.get("/")
    def get_pois(request: Request) -> JSONResponse:
        params = dict(request.query_params)
        try:
            result = resolver.resolve(params)
        except QueryValidationError as e:
            logger.warning(
                "Invalid getPOIs request",
                extra={"parameter": e.parameter, "error": e.message},
            )
            return JSONResponse(
                invalid_query_payload(params.get("layerName", ""), e),
                status_code=400,
            )
        return JSONResponse(to_layar_payload(result))

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "layers": list(registry.names())}

    return app
