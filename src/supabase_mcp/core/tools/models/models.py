from typing import Any, Dict, List, Optional, Tuple

from mcp import types
from pydantic import BaseModel, ConfigDict, Field


class ToolParameter(BaseModel):
    """
    A single named argument of a tool's input schema.

    Attributes:
        name: The argument key as the caller sends it (snake_case).
        type: JSON schema type. ``None`` leaves the argument untyped (any JSON value).
        description: Free-text help shown to the calling agent.
        enum: Allowed values, if the argument is an enumeration.
        items: JSON schema for array elements when ``type`` is ``"array"``.
        required: Whether the argument is listed in the schema's ``required`` array.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    enum: Optional[Tuple[str, ...]] = None
    items: Optional[Dict[str, Any]] = None
    required: bool = False

    def to_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {}
        if self.type is not None:
            schema["type"] = self.type
        if self.items is not None:
            schema["items"] = self.items
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.description is not None:
            schema["description"] = self.description
        return schema


class ToolAnnotations(BaseModel):
    """
    Behavioral hints a calling agent uses to decide on confirmation and retries.

    Unset hints are omitted from the advertised tool, not sent as ``false``.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    read_only: Optional[bool] = None
    destructive: Optional[bool] = None
    idempotent: Optional[bool] = None
    open_world: Optional[bool] = None

    def to_hints(self) -> Dict[str, Any]:
        hints: Dict[str, Any] = {
            "title": self.title,
            "readOnlyHint": self.read_only,
            "destructiveHint": self.destructive,
            "idempotentHint": self.idempotent,
            "openWorldHint": self.open_world,
        }
        return {key: value for key, value in hints.items() if value is not None}


class ToolDefinition(BaseModel):
    """
    Represents one invocable operation of the catalog.

    Attributes:
        name: The unique name of the tool.
        description: A brief description of what the tool does.
        category: Catalog group the tool belongs to (e.g. ``storage``).
        parameters: Ordered argument declarations, including the cosmetic ``_fields``.
        annotations: Behavioral hints (read-only, destructive, idempotent, open-world).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    category: str
    parameters: Tuple[ToolParameter, ...] = Field(default_factory=tuple)
    annotations: ToolAnnotations

    @property
    def parameter_names(self) -> List[str]:
        return [p.name for p in self.parameters]

    @property
    def required(self) -> Tuple[str, ...]:
        """Names of the required arguments, in declaration order."""
        return tuple(p.name for p in self.parameters if p.required)

    @property
    def input_schema(self) -> Dict[str, Any]:
        """The JSON schema advertised to callers, exactly as declared."""
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.to_schema() for p in self.parameters},
        }
        if self.required:
            schema["required"] = list(self.required)
        return schema

    def to_mcp_tool(self) -> types.Tool:
        """Convert to the protocol's tool type."""
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
            annotations=types.ToolAnnotations(**self.annotations.to_hints()),
        )
