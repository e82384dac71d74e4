"""Value types for the tool catalog."""

import copy
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class HttpVerb(str, Enum):
    """HTTP verbs the SerialMemory API routes use."""

    GET = "GET"
    POST = "POST"


class MetaTool(str, Enum):
    """Tools answered in-process instead of being forwarded.

    GET_TOOLS_IN_CATEGORY / EXECUTE_TOOL are the lazy-catalog discovery pair.
    GET_TOOLS / USE_TOOL are the older gateway pair, still dispatchable.
    """

    GET_TOOLS_IN_CATEGORY = "get_tools_in_category"
    EXECUTE_TOOL = "execute_tool"
    GET_TOOLS = "get_tools"
    USE_TOOL = "use_tool"

    @classmethod
    def lookup(cls, name: str) -> "MetaTool | None":
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class Route:
    """Backend route for a forwardable tool.

    Attributes:
        path: Path relative to ``{endpoint}/api/``
        verb: HTTP verb
    """

    path: str
    verb: HttpVerb = HttpVerb.POST


@dataclass(frozen=True)
class Category:
    """A group of tools browsable through the discovery meta-tools."""

    key: str
    title: str
    description: str


READ_ONLY = MappingProxyType({"readOnlyHint": True})
DESTRUCTIVE = MappingProxyType({"destructiveHint": True})


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool as advertised in ``tools/list``.

    The schema tables are shared by every request, so the wire form is always
    a fresh copy.
    """

    name: str
    description: str
    input_schema: Mapping[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )
    annotations: Mapping[str, bool] | None = None

    @property
    def read_only(self) -> bool:
        return bool(self.annotations and self.annotations.get("readOnlyHint"))

    @property
    def destructive(self) -> bool:
        return bool(self.annotations and self.annotations.get("destructiveHint"))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the MCP tool shape."""
        data: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
        }
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        data["inputSchema"] = copy.deepcopy(dict(self.input_schema))
        return data
