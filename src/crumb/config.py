"""Toolkit configuration.

CrumbConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any


def _default_server_params() -> Mapping[str, str]:
    return MappingProxyType(
        {
            "SERVER_NAME": "localhost",
            "SERVER_PORT": "80",
            "SERVER_PROTOCOL": "HTTP/1.1",
        }
    )


@dataclass(frozen=True, slots=True)
class CrumbConfig:
    """Test toolkit configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = CrumbConfig(
            database_url="sqlite:///test.db",
            schema_file="tests/schema.sql",
            cookie_defaults={"path": "/", "http_only": True},
        )
    """

    # Database
    database_url: str = "sqlite:///:memory:"
    schema_file: str | Path | None = None
    echo: bool = False  # Log every query on the "crumb.data" logger

    # Requests: CGI-style params merged under per-request server params
    server_params: Mapping[str, str] = field(default_factory=_default_server_params)

    # Cookies: defaults template for Cookies.from_config()
    cookie_defaults: Mapping[str, Any] = field(default_factory=dict)
