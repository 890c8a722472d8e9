"""Console entrypoint for the Resend pass-through MCP server."""

import asyncio
from .server import _run


def main() -> None:
    """Start the MCP server on the transport selected by MCP_TRANSPORT."""
    asyncio.run(_run())


if __name__ == "__main__":
    main()
