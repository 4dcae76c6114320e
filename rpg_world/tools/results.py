from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import orjson

from rpg_world.domain.errors import ErrorKind, WorldError


@dataclass
class ToolResult:
    text: str
    is_error: bool = False
    kind: ErrorKind | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            payload["isError"] = True
        return payload


def tool_response(text: str) -> ToolResult:
    return ToolResult(text=text)


def json_response(value: Any, *, indent: bool = False) -> ToolResult:
    raw = orjson.dumps(value, option=orjson.OPT_INDENT_2) if indent else orjson.dumps(value)
    return ToolResult(text=raw.decode("utf-8"))


def tool_error(exc: WorldError) -> ToolResult:
    return ToolResult(text=exc.message, is_error=True, kind=exc.kind)
