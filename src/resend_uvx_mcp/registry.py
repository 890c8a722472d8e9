"""Capability registry: a name -> handler map per capability kind."""

import enum
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Tuple, Type

import pydantic
from pydantic import BaseModel

from .models import RequestMetadata, ResultEnvelope

Handler = Callable[[Optional[BaseModel], RequestMetadata], Awaitable[ResultEnvelope]]


class CapabilityKind(str, enum.Enum):
    PROMPT = "prompt"
    TOOL = "tool"
    RESOURCE = "resource"


class RegistrationError(Exception):
    """Raised at construction time when a (kind, name) pair is registered twice."""


class NotFoundError(LookupError):
    def __init__(self, kind: CapabilityKind, name: str) -> None:
        super().__init__(f"Unknown {kind.value}: {name}")
        self.kind = kind
        self.name = name


class ValidationError(ValueError):
    """Arguments did not satisfy a capability's input contract."""

    def __init__(self, name: str, violations: List[Dict[str, str]]) -> None:
        details = "; ".join(f"{v['field']}: {v['message']}" for v in violations)
        super().__init__(f"Invalid arguments for {name}: {details}")
        self.name = name
        self.violations = violations


class Capability:
    """A registered prompt, tool or resource. Not mutated after registration."""

    __slots__ = ("kind", "name", "description", "input_model", "handler", "uri", "mime_type")

    def __init__(
        self,
        kind: CapabilityKind,
        name: str,
        description: str,
        input_model: Optional[Type[BaseModel]],
        handler: Handler,
        uri: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.description = description
        self.input_model = input_model
        self.handler = handler
        self.uri = uri
        self.mime_type = mime_type

    @property
    def input_schema(self) -> Dict[str, Any]:
        if self.input_model is None:
            return {"type": "object", "properties": {}}
        return self.input_model.model_json_schema()

    def validate(self, raw_arguments: Optional[Dict[str, Any]]) -> Optional[BaseModel]:
        if self.input_model is None:
            return None
        try:
            return self.input_model.model_validate(raw_arguments or {})
        except pydantic.ValidationError as e:
            violations = [
                {
                    "field": ".".join(str(part) for part in err["loc"]) or "<root>",
                    "message": err["msg"],
                }
                for err in e.errors()
            ]
            raise ValidationError(self.name, violations) from e


class CapabilityView:
    def __init__(self, capabilities: Dict[Tuple[CapabilityKind, str], Capability], kind: CapabilityKind) -> None:
        self._capabilities = capabilities
        self._kind = kind

    def __iter__(self) -> Iterator[Capability]:
        return (c for c in self._capabilities.values() if c.kind is self._kind)


class Registry:
    """Holds every capability of one server instance.

    Registration happens once while the server is being built; afterwards the
    registry is only read, so concurrent invocations need no locking here.
    """

    def __init__(self) -> None:
        self._capabilities: Dict[Tuple[CapabilityKind, str], Capability] = {}

    def register(
        self,
        kind: CapabilityKind,
        name: str,
        description: str,
        input_model: Optional[Type[BaseModel]],
        handler: Handler,
        *,
        uri: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> Capability:
        key = (kind, name)
        if key in self._capabilities:
            raise RegistrationError(f"{kind.value} '{name}' is already registered")
        capability = Capability(kind, name, description, input_model, handler, uri, mime_type)
        self._capabilities[key] = capability
        return capability

    def list_capabilities(self, kind: CapabilityKind) -> "CapabilityView":
        """Capabilities of ``kind`` in registration order; may be iterated repeatedly."""
        return CapabilityView(self._capabilities, kind)

    def get(self, kind: CapabilityKind, name: str) -> Capability:
        try:
            return self._capabilities[(kind, name)]
        except KeyError:
            raise NotFoundError(kind, name) from None

    def find_resource(self, uri: str) -> Capability:
        # URL parsing may add a trailing slash to the requested URI
        wanted = uri.rstrip("/")
        for capability in self.list_capabilities(CapabilityKind.RESOURCE):
            if capability.uri is not None and capability.uri.rstrip("/") == wanted:
                return capability
        raise NotFoundError(CapabilityKind.RESOURCE, uri)

    async def invoke(
        self,
        kind: CapabilityKind,
        name: str,
        raw_arguments: Optional[Dict[str, Any]] = None,
        metadata: Optional[RequestMetadata] = None,
    ) -> ResultEnvelope:
        capability = self.get(kind, name)
        arguments = capability.validate(raw_arguments)
        return await capability.handler(arguments, metadata or RequestMetadata())

    def __len__(self) -> int:
        return len(self._capabilities)
