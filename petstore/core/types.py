"""Type aliases for loosely typed data passed between layers."""

from typing import Any

# Any value that orjson or the XML renderer can emit
type JsonValue = (
    dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
)

# Structured fields attached to log records
type LogContext = dict[str, Any]

# Extra information carried by PetstoreError instances
type ErrorContext = dict[str, Any]
