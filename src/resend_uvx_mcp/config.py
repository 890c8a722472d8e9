"""Server settings read from the environment (and a local .env, if any).

The Resend API key is deliberately not a setting: callers supply it on every
request through headers.
"""

import os

from dotenv import load_dotenv

SERVER_NAME = "mcp-server-template"
SERVER_VERSION = "0.0.1"

DEFAULT_RESEND_API_URL = "https://api.resend.com/emails"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PORT = 3000


class Settings:
    def __init__(
        self,
        transport: str = "stdio",
        host: str = "127.0.0.1",
        port: int = DEFAULT_PORT,
        resend_api_url: str = DEFAULT_RESEND_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        log_level: str = "INFO",
    ) -> None:
        self.transport = transport
        self.host = host
        self.port = port
        self.resend_api_url = resend_api_url
        self.timeout = timeout
        self.log_level = log_level

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        transport = os.environ.get("MCP_TRANSPORT", "stdio").strip().lower()
        if transport not in ("stdio", "http"):
            raise RuntimeError(f"MCP_TRANSPORT must be 'stdio' or 'http', got {transport!r}")

        port_str = os.environ.get("MCP_PORT", str(DEFAULT_PORT))
        try:
            port = int(port_str)
        except ValueError:
            port = DEFAULT_PORT

        timeout_str = os.environ.get("RESEND_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(timeout_str)
        except ValueError:
            timeout = DEFAULT_TIMEOUT

        return cls(
            transport=transport,
            host=os.environ.get("MCP_HOST", "127.0.0.1"),
            port=port,
            resend_api_url=os.environ.get("RESEND_API_URL") or DEFAULT_RESEND_API_URL,
            timeout=timeout,
            log_level=os.environ.get("RESEND_MCP_LOG_LEVEL", "INFO").upper(),
        )
