"""Per-invocation values shared by the registry and capability handlers."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import mcp.types as types

HeaderValue = Union[None, str, List[str]]


class RequestMetadata:
    """Header-like bag attached to one invocation.

    Names are matched case-insensitively. A value is absent, a single string,
    or a list of strings for repeated headers.
    """

    def __init__(self, headers: Optional[Mapping[str, HeaderValue]] = None) -> None:
        self._headers: Dict[str, HeaderValue] = {}
        for name, value in (headers or {}).items():
            self._headers[name.lower()] = value

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "RequestMetadata":
        """Build from raw (name, value) pairs, folding repeats into lists."""
        grouped: Dict[str, List[str]] = {}
        for name, value in pairs:
            grouped.setdefault(name.lower(), []).append(value)
        return cls({name: values[0] if len(values) == 1 else values for name, values in grouped.items()})

    def get(self, name: str) -> HeaderValue:
        return self._headers.get(name.lower())

    def first(self, name: str) -> Optional[str]:
        """First value of ``name``, or None when the header is absent or empty."""
        value = self.get(name)
        if isinstance(value, list):
            value = value[0] if value else None
        return value or None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._headers

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        # values may hold credentials
        return f"RequestMetadata(names={sorted(self._headers)})"


@dataclass
class ResultEnvelope:
    """Uniform result of every capability invocation.

    ``content`` holds MCP blocks: ``TextContent`` for tools, ``PromptMessage``
    for prompts and ``TextResourceContents`` for resources.
    """

    content: List[Any] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "ResultEnvelope":
        return cls(content=[types.TextContent(type="text", text=text)])

    @classmethod
    def error(cls, text: str) -> "ResultEnvelope":
        return cls(content=[types.TextContent(type="text", text=text)], is_error=True)

    @property
    def first_text(self) -> Optional[str]:
        for block in self.content:
            text = getattr(block, "text", None)
            if text is not None:
                return text
            message_content = getattr(block, "content", None)
            if isinstance(message_content, types.TextContent):
                return message_content.text
        return None
