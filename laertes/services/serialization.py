# serialization.py
from __future__ import annotations

from typing import Any, Dict

from ..domain.errors import QueryValidationError
from ..domain.models import Action, AggregatedResult, PointOfInterest, StatusCode


def action_payload(action: Action) -> Dict[str, Any]:
    return {
        "uri": action.uri,
        "label": action.label,
        "contentType": action.content_type,
        "activityType": action.activity_type,
        "method": action.method,
    }


def hotspot_payload(poi: PointOfInterest) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": poi.id,
        "text": {
            "title": poi.title,
            "description": poi.description,
            "footnote": poi.footnote,
        },
        "anchor": {
            "geolocation": {
                "lat": poi.location.latitude,
                "lon": poi.location.longitude,
            }
        },
        "imageURL": poi.image_url,
        "icon": {"url": poi.icon_url, "type": poi.icon_type},
    }
    if poi.actions:
        payload["actions"] = [action_payload(a) for a in poi.actions]
    return payload


def to_layar_payload(result: AggregatedResult) -> Dict[str, Any]:
    """Render an AggregatedResult as a Layar getPOIs response body.

    showMessage is left out for unknown layers, and radius is only
    present when the request did not specify one.
    """
    payload: Dict[str, Any] = {"layer": result.layer_name}
    if result.show_message is not None:
        payload["showMessage"] = result.show_message
    payload.update(
        {
            "refreshDistance": result.refresh_distance,
            "refreshInterval": result.refresh_interval,
            "hotspots": [hotspot_payload(poi) for poi in result.hotspots],
            "errorCode": int(result.error_code),
            "errorString": result.error_string,
        }
    )
    if result.radius is not None:
        payload["radius"] = result.radius
    return payload


def invalid_query_payload(layer_name: str, error: QueryValidationError) -> Dict[str, Any]:
    return to_layar_payload(
        AggregatedResult(
            layer_name=layer_name,
            error_code=StatusCode.INVALID_QUERY,
            error_string=error.message,
        )
    )
