"""Name-indexed registry of MCP tools.

A tool is a data record: a name, a description, a pydantic model that
declares and validates its parameters, and an async handler that returns
display text. The registry implements the calling contract shared by
every tool: validate, run, format, and convert any failure into an error
result instead of an exception.
"""

import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Any

from mcp.types import CallToolResult, TextContent, Tool
from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from google_mcp_server.errors import DuplicateToolError

logger = logging.getLogger(__name__)

# Fields where an empty string or zero means "use the default"
DEFAULTED_WHEN_EMPTY = frozenset(
    {"calendar_id", "task_list_id", "folder_id", "index", "max_results", "insertion_index"}
)


class ToolParams(BaseModel):
    """Base class for tool parameter models.

    Python fields are snake_case; the published schema and accepted
    arguments use camelCase (``file_id`` -> ``fileId``).

    Optional identifiers and counts listed in ``DEFAULTED_WHEN_EMPTY``
    fall back to their declared default when given as ``""`` or ``0``,
    so ``{"calendarId": ""}`` behaves like omitting ``calendarId``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def empty_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name not in DEFAULTED_WHEN_EMPTY:
            return value
        if isinstance(value, bool) or value not in ("", 0):
            return value
        field = cls.model_fields[info.field_name]
        if field.is_required() or field.default is None:
            return value
        return field.default


class NoParams(ToolParams):
    """Parameters for tools that take no arguments."""


Handler = Callable[[Any], Awaitable[str]]


@dataclass(frozen=True)
class ToolDefinition:
    """A registered tool.

    Attributes:
        name: Unique tool name.
        description: Human-readable description shown to the client.
        params_model: Pydantic model used for validation and the input schema.
        handler: Coroutine function receiving the validated params.
    """

    name: str
    description: str
    params_model: type[ToolParams]
    handler: Handler

    def to_mcp_tool(self) -> Tool:
        """Build the MCP Tool definition advertised by list_tools."""
        schema = self.params_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.pop("description", None)
        schema.setdefault("properties", {})
        return Tool(name=self.name, description=self.description, inputSchema=schema)


def text_result(text: str) -> CallToolResult:
    """Successful result carrying a single text block."""
    return CallToolResult(content=[TextContent(type="text", text=text)])


def error_result(message: str) -> CallToolResult:
    """Flagged error result carrying ``Error: <message>``."""
    return CallToolResult(
        content=[TextContent(type="text", text=f"Error: {message}")],
        isError=True,
    )


def format_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as ``Invalid arguments: field: msg; ...``."""
    details = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        details.append(f"{location}: {item['msg']}")
    return "Invalid arguments: " + "; ".join(details)


class ToolRegistry:
    """Ordered collection of tools keyed by name.

    Example:
        ```python
        registry = ToolRegistry()

        class EchoParams(ToolParams):
            text: str

        @registry.tool("echo", "Echo text back", EchoParams)
        async def echo(params: EchoParams) -> str:
            return params.text

        result = await registry.call("echo", {"text": "hi"})
        ```
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def register(self, definition: ToolDefinition) -> None:
        """Add a tool.

        Raises:
            DuplicateToolError: If a tool with the same name already exists.
        """
        if definition.name in self._tools:
            raise DuplicateToolError(definition.name)
        self._tools[definition.name] = definition

    def tool(
        self,
        name: str,
        description: str,
        params: type[ToolParams] = NoParams,
    ) -> Callable[[Handler], Handler]:
        """Decorator registering an async handler as a tool."""

        def decorator(func: Handler) -> Handler:
            self.register(ToolDefinition(name, description, params, func))
            return func

        return decorator

    def list_tools(self) -> list[Tool]:
        """Return MCP Tool definitions in registration order."""
        return [definition.to_mcp_tool() for definition in self._tools.values()]

    async def call(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """Validate arguments, run the tool and wrap the outcome.

        Never raises: unknown tools, invalid arguments and handler failures
        all come back as results flagged with ``isError``.
        """
        definition = self.get(name)
        if definition is None:
            return error_result(f"Unknown tool: {name}")

        try:
            params = definition.params_model.model_validate(arguments or {})
        except ValidationError as e:
            return error_result(format_validation_error(e))

        try:
            text = await definition.handler(params)
        except Exception as e:
            logger.exception(f"Error calling tool {name}")
            return error_result(str(e) or type(e).__name__)

        return text_result(text)
