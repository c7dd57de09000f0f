"""HTTP interface for PR Manager.

FastAPI adapter translating JSON requests into service façade calls and
service errors into HTTP status codes.
"""

from __future__ import annotations

from prmanager.web.app import create_app
from prmanager.web.auth import Caller, parse_authorization
from prmanager.web.errors import map_error
from prmanager.web.middleware import RequestLoggingMiddleware

__all__ = [
    "create_app",
    "Caller",
    "parse_authorization",
    "map_error",
    "RequestLoggingMiddleware",
]
