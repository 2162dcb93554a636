"""
Field model for op-env.

This module turns the JSON document returned by the secrets-manager CLI
into a list of fields and filters out the ones that carry no value.

Expected shape:
    {"fields": [{"label": "API_KEY", "value": "abc123", ...}, ...]}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Field:
    """A single labelled secret slot on an item."""

    label: str
    value: str | None = None

    @property
    def is_present(self) -> bool:
        return self.value is not None


def present_fields(fields: Iterable[Field]) -> list[Field]:
    """Return the fields that have a value, keeping their order."""
    return [field for field in fields if field.is_present]


def parse_item(raw: bytes | str) -> list[Field]:
    """
    Deserialize an item document into fields.

    Args:
        raw: The item JSON as printed by the external tool

    Returns:
        The item's fields in the order they were returned

    Raises:
        InvalidResponse: If the document does not have the expected shape
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidResponse(f"Invalid JSON in item response: {exc}", from_exception=exc) from exc

    if not isinstance(data, dict):
        raise InvalidResponse("Item response must be a JSON object")

    records = data.get("fields")
    if not isinstance(records, list):
        raise InvalidResponse("Item response has no 'fields' list")

    return [_parse_field(index, record) for index, record in enumerate(records)]


def _parse_field(index: int, record: object) -> Field:
    if not isinstance(record, dict):
        raise InvalidResponse(f"Field #{index} is not an object")

    label = record.get("label")
    if not isinstance(label, str):
        raise InvalidResponse(f"Field #{index} has no string 'label'")

    value = record.get("value")
    if value is not None and not isinstance(value, str):
        raise InvalidResponse(f"Field '{label}' has a non-string 'value'")

    return Field(label=label, value=value)


class InvalidResponse(Exception):
    """Exception raised when the external tool's output cannot be deserialized."""

    def __init__(self, message: str, from_exception: Exception | None = None) -> None:
        self.message = message
        self.from_exception = from_exception
        super().__init__(message)
        if from_exception:
            self.__cause__ = from_exception
