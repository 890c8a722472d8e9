"""Resend UVX MCP package.

Provides an MCP server (stdio or streamable HTTP) that sends emails via
Resend using the API key supplied with each request.
"""

from .capabilities import build_registry
from .email_tool import ResendClient
from .models import RequestMetadata, ResultEnvelope
from .registry import CapabilityKind, NotFoundError, RegistrationError, Registry, ValidationError
from .server import create_server

__all__ = [
    "CapabilityKind",
    "NotFoundError",
    "RegistrationError",
    "Registry",
    "RequestMetadata",
    "ResendClient",
    "ResultEnvelope",
    "ValidationError",
    "build_registry",
    "create_server",
]

__version__ = "0.0.1"
