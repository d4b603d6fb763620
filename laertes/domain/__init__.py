"""Domain layer - Core business models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    ConfigurationError,
    CredentialsMissingError,
    LaertesError,
    QueryValidationError,
    SourceFetchError,
)
from .models import (
    Action,
    AggregatedResult,
    FailureReason,
    GeoLocation,
    LayerConfig,
    PointOfInterest,
    Query,
    RecencyFilter,
    SourceFailure,
    SourceKind,
    SourceRequest,
    SourceResult,
    StatusCode,
)

__all__ = [
    # Models
    "GeoLocation",
    "Query",
    "RecencyFilter",
    "SourceKind",
    "LayerConfig",
    "Action",
    "PointOfInterest",
    "SourceRequest",
    "SourceFailure",
    "SourceResult",
    "FailureReason",
    "AggregatedResult",
    "StatusCode",
    # Errors
    "LaertesError",
    "ConfigurationError",
    "QueryValidationError",
    "SourceFetchError",
    "CredentialsMissingError",
]
