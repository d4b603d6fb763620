"""Typed domain errors for the Laertes hotspot service.

Adapters raise these internally and convert them into SourceFailure
values at their boundary, so only QueryValidationError ever reaches
the HTTP layer.

All errors inherit from LaertesError and can optionally wrap a root
cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class LaertesError(Exception):
    """Base error for the hotspot domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ConfigurationError(LaertesError):
    """Invalid or missing configuration.

    Raised at startup when the layer registry cannot be loaded.

    Attributes:
        setting_name: Name of the problematic setting
    """

    setting_name: str = ""


@dataclass
class QueryValidationError(LaertesError):
    """An inbound request parameter is missing or malformed.

    Attributes:
        parameter: The offending request parameter (e.g. 'lat')
    """

    parameter: str = ""


@dataclass
class SourceFetchError(LaertesError):
    """Fetching or parsing an upstream source failed.

    Attributes:
        source: Name of the source adapter
        endpoint: The endpoint being fetched, if any
    """

    source: str = ""
    endpoint: Optional[str] = None


@dataclass
class CredentialsMissingError(SourceFetchError):
    """Credentials for an authenticated source are not configured.

    Attributes:
        missing: Names of the unset credentials
    """

    missing: tuple[str, ...] = ()
