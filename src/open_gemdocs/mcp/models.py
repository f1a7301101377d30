"""MCP models — JSON-RPC 2.0 messages, tool definitions and tool results.

Implements the message format used by the Model Context Protocol for tool
discovery (``tools/list``) and execution (``tools/call``), server side.
Request ids are kept as ``Any`` so that responses echo them verbatim,
number or string.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request or notification."""

    jsonrpc: str = "2.0"
    method: str = ""
    id: Any = None
    params: dict[str, Any] | None = None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message: exactly one of ``result`` or ``error``."""

    jsonrpc: str = "2.0"
    id: Any = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _result_xor_error(self) -> JsonRpcResponse:
        if self.result is not None and self.error is not None:
            msg = "a response carries either a result or an error, not both"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: Any, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls, request_id: Any, code: int, message: str, data: Any = None
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the wire; ``id`` is always present, ``data`` only when set."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result if self.result is not None else {}
        return payload


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ToolDefinition(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")

    @model_validator(mode="after")
    def _check_schema(self) -> ToolDefinition:
        if self.input_schema.get("type") != "object":
            msg = f"{self.name}: inputSchema.type must be 'object'"
            raise ValueError(msg)
        properties = self.input_schema.get("properties", {})
        unknown = [name for name in self.input_schema.get("required", []) if name not in properties]
        if unknown:
            msg = f"{self.name}: required parameters missing from properties: {', '.join(unknown)}"
            raise ValueError(msg)
        return self

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResultEnvelope(BaseModel):
    """The uniform ``{content, isError?}`` shape of every tool call."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent] = Field(min_length=1)
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def from_text(cls, text: str) -> ToolResultEnvelope:
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, text: str) -> ToolResultEnvelope:
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(part.text for part in self.content)

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the wire; ``isError`` appears only on failure."""
        payload: dict[str, Any] = {"content": [part.model_dump() for part in self.content]}
        if self.is_error:
            payload["isError"] = True
        return payload
