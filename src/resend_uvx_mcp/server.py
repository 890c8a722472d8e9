"""
MCP server wiring: exposes a capability registry over stdio or streamable HTTP.
"""

import contextlib
import logging
from typing import Any, Dict, Iterable, List, Optional

# MCP Python SDK (low-level server)
import mcp.server.stdio
import mcp.types as types
import uvicorn
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.shared.exceptions import McpError
from starlette.applications import Starlette
from starlette.routing import Mount

from .capabilities import build_registry
from .config import SERVER_NAME, SERVER_VERSION, Settings
from .email_tool import ResendClient
from .logging_config import configure_logging
from .models import RequestMetadata, ResultEnvelope
from .registry import CapabilityKind, NotFoundError, Registry, ValidationError

logger = logging.getLogger(__name__)


def request_metadata(server: Server) -> RequestMetadata:
    """Headers of the HTTP request behind the current MCP request.

    Empty under stdio, where there is no HTTP request.
    """
    try:
        request = server.request_context.request
    except LookupError:
        return RequestMetadata()
    if request is None:
        return RequestMetadata()
    return RequestMetadata.from_pairs(request.headers.items())


def _prompt_arguments(schema: Dict[str, Any]) -> List[types.PromptArgument]:
    required = set(schema.get("required", []))
    return [
        types.PromptArgument(name=name, description=prop.get("description"), required=name in required)
        for name, prop in schema.get("properties", {}).items()
    ]


async def _invoke(
    registry: Registry,
    kind: CapabilityKind,
    name: str,
    arguments: Optional[Dict[str, Any]],
    metadata: RequestMetadata,
) -> ResultEnvelope:
    try:
        return await registry.invoke(kind, name, arguments, metadata)
    except (NotFoundError, ValidationError) as e:
        logger.info("Rejected %s call %r: %s", kind.value, name, e)
        raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(e))) from e


def create_server(registry: Registry) -> Server:
    """Bind ``registry`` to a low-level MCP server instance."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_prompts()
    async def handle_list_prompts() -> list[types.Prompt]:
        return [
            types.Prompt(
                name=c.name,
                description=c.description,
                arguments=_prompt_arguments(c.input_schema),
            )
            for c in registry.list_capabilities(CapabilityKind.PROMPT)
        ]

    @server.get_prompt()
    async def handle_get_prompt(name: str, arguments: Optional[Dict[str, str]]) -> types.GetPromptResult:
        result = await _invoke(registry, CapabilityKind.PROMPT, name, arguments, request_metadata(server))
        return types.GetPromptResult(
            description=registry.get(CapabilityKind.PROMPT, name).description,
            messages=list(result.content),
        )

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        """Advertise available tools to the client."""
        return [
            types.Tool(name=c.name, description=c.description, inputSchema=c.input_schema)
            for c in registry.list_capabilities(CapabilityKind.TOOL)
        ]

    # The registry validates arguments itself, with field-level detail.
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        """Handle tool invocations from the client."""
        result = await _invoke(registry, CapabilityKind.TOOL, name, arguments, request_metadata(server))
        return types.CallToolResult(content=list(result.content), isError=result.is_error)

    @server.list_resources()
    async def handle_list_resources() -> list[types.Resource]:
        return [
            types.Resource(uri=c.uri, name=c.name, description=c.description, mimeType=c.mime_type)
            for c in registry.list_capabilities(CapabilityKind.RESOURCE)
        ]

    @server.read_resource()
    async def handle_read_resource(uri: types.AnyUrl) -> Iterable[ReadResourceContents]:
        try:
            capability = registry.find_resource(str(uri))
        except NotFoundError as e:
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(e))) from e
        result = await _invoke(registry, CapabilityKind.RESOURCE, capability.name, None, request_metadata(server))
        return [ReadResourceContents(content=c.text, mime_type=c.mimeType) for c in result.content]

    return server


def _initialization_options(server: Server) -> InitializationOptions:
    return InitializationOptions(
        server_name=SERVER_NAME,
        server_version=SERVER_VERSION,
        capabilities=server.get_capabilities(
            notification_options=NotificationOptions(),
            experimental_capabilities={},
        ),
    )


def create_http_app(server: Server) -> Starlette:
    """Starlette app serving ``server`` statelessly at ``/mcp``."""
    session_manager = StreamableHTTPSessionManager(app=server, event_store=None, json_response=True, stateless=True)

    async def handle_streamable_http(scope, receive, send) -> None:
        await session_manager.handle_request(scope, receive, send)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        async with session_manager.run():
            yield

    return Starlette(routes=[Mount("/mcp", app=handle_streamable_http)], lifespan=lifespan)


async def run_stdio(server: Server) -> None:
    """Run the MCP server over stdio."""
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, _initialization_options(server))


async def run_http(server: Server, host: str, port: int) -> None:
    config = uvicorn.Config(create_http_app(server), host=host, port=port, log_level="warning")
    await uvicorn.Server(config).serve()


async def _run(settings: Optional[Settings] = None) -> None:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    client = ResendClient(api_url=settings.resend_api_url, timeout=settings.timeout)
    server = create_server(build_registry(client))

    if settings.transport == "http":
        logger.info("Serving %s on http://%s:%d/mcp", SERVER_NAME, settings.host, settings.port)
        await run_http(server, settings.host, settings.port)
    else:
        logger.info("Serving %s on stdio", SERVER_NAME)
        await run_stdio(server)
