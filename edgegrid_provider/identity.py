"""
Composite identifiers.

Objects that have no single natural key are identified by joining their key
parts with a colon, in an order fixed per object type, e.g.
`43253:7:AAAA_81230` for a config id, a version and a security policy id.
`CompositeKey` owns both directions of that encoding so no mapper has to split
identifiers by hand.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from edgegrid_provider.errors import ConfigurationError, DecodeError

DELIMITER = ":"

# Integer parts are written without sign, padding or separators.
INTEGER_PART = re.compile(r"^(0|[1-9][0-9]*)\Z")


@dataclass(frozen=True)
class KeyField:
    """One positional part of a composite identifier."""

    name: str
    type: type = int
    # Only trailing fields may be optional; they allow shorter, declared shapes
    # such as `config_id` next to `config_id:security_policy_id`.
    optional: bool = False


class CompositeKey:
    """
    Encodes and decodes the identifier of one object type.

    Example:
        key = CompositeKey(KeyField("config_id"), KeyField("version"),
                           KeyField("security_policy_id", str))
        key.encode({"config_id": 43253, "version": 7,
                    "security_policy_id": "AAAA_81230"})  # '43253:7:AAAA_81230'
    """

    def __init__(self, *fields: Union[KeyField, str]):
        if not fields:
            raise ValueError("a composite key needs at least one field")
        self.fields = tuple(
            f if isinstance(f, KeyField) else KeyField(f) for f in fields
        )
        seen_optional = False
        for f in self.fields:
            if seen_optional and not f.optional:
                raise ValueError(
                    f"key field '{f.name}' follows an optional field; only trailing fields may be optional"
                )
            seen_optional = seen_optional or f.optional

    @property
    def names(self):
        return [f.name for f in self.fields]

    @property
    def format(self) -> str:
        return DELIMITER.join(
            f"[{f.name}]" if f.optional else f.name for f in self.fields
        )

    @property
    def min_parts(self) -> int:
        return sum(1 for f in self.fields if not f.optional)

    def encode(self, values: Dict[str, Any]) -> str:
        """Joins the key parts in the fixed field order."""
        parts = []
        for f in self.fields:
            value = values.get(f.name)
            if value is None or value == "":
                if f.optional:
                    break
                raise ConfigurationError(
                    f.name, "required to build the object identifier"
                )
            text = str(value)
            if DELIMITER in text:
                raise ConfigurationError(
                    f.name, f"identifier parts must not contain '{DELIMITER}'"
                )
            parts.append(text)
        return DELIMITER.join(parts)

    def decode(self, identifier: str) -> Dict[str, Any]:
        """
        Splits an identifier into typed key parts.

        Raises:
            DecodeError: the identifier has the wrong number of parts or an
                integer part does not parse.
        """
        if not identifier:
            raise DecodeError(identifier or "", self.format, "identifier is empty")

        parts = identifier.split(DELIMITER)
        if not self.min_parts <= len(parts) <= len(self.fields):
            raise DecodeError(
                identifier,
                self.format,
                f"expected {self._expected_count()} parts, got {len(parts)}",
            )

        values: Dict[str, Any] = {}
        for f, raw in zip(self.fields, parts):
            if raw == "":
                raise DecodeError(identifier, self.format, f"'{f.name}' is empty")
            if f.type is int and not INTEGER_PART.match(raw):
                raise DecodeError(
                    identifier,
                    self.format,
                    f"'{f.name}' must be a non-negative integer without padding",
                )
            try:
                values[f.name] = f.type(raw)
            except (TypeError, ValueError):
                raise DecodeError(
                    identifier,
                    self.format,
                    f"'{f.name}' must be of type {f.type.__name__}",
                )
        return values

    def from_data(self, d) -> Optional[str]:
        """
        Derives the identifier from an attribute set when every required key
        part is present, or returns None.
        """
        values = {}
        for f in self.fields:
            if d.has(f.name):
                values[f.name] = d.get(f.name)
            elif not f.optional:
                return None
        return self.encode(values)

    def _expected_count(self) -> str:
        if self.min_parts == len(self.fields):
            return str(len(self.fields))
        return f"{self.min_parts} to {len(self.fields)}"

    def __repr__(self):
        return f"CompositeKey({self.format!r})"
