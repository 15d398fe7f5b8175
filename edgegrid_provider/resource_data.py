"""
The attribute state of one managed object.

`ResourceData` is the translation layer between the generic parameter map
handed over by the calling framework (the Ansible `module.params`) and the
typed, schema-checked access the mappers need. It plays the role a
framework-specific state object would: it holds the identifier and the
attribute values, validates caller input against the schema, and refuses to
store values the schema does not describe.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from edgegrid_provider.errors import (
    AttributeNotFoundError,
    ConfigurationError,
    StateSetError,
)
from edgegrid_provider.models import AttrType, Schema

def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


class ResourceData:
    """Holds the identifier and attribute values of one object."""

    def __init__(
        self, schema: Schema, values: Optional[Dict[str, Any]] = None, id: str = ""
    ):
        self.schema = schema
        self.id = id or ""
        self._values: Dict[str, Any] = {}
        for name, value in (values or {}).items():
            attribute = schema.get(name)
            # Unknown keys (auth options, `state`, ...) and computed-only values
            # never enter the attribute set.
            if attribute is None or attribute.is_computed_only or value is None:
                continue
            self._values[name] = value

    @classmethod
    def from_params(cls, schema: Schema, params: Dict[str, Any]) -> "ResourceData":
        """Builds the attribute set from Ansible module parameters."""
        return cls(schema, params, id=params.get("id") or "")

    # --- Identifier ---

    def set_id(self, value: Any) -> None:
        self.id = str(value)

    def clear_id(self) -> None:
        self.id = ""

    # --- Reading values ---

    def has(self, name: str) -> bool:
        return name in self._values

    def get(self, name: str, default: Any = None) -> Any:
        self._check_known(name)
        if name in self._values:
            return self._values[name]
        attribute = self.schema[name]
        if attribute.default is not None:
            return attribute.default
        return default

    def get_ok(self, name: str) -> Tuple[Any, bool]:
        """Returns the value and whether it is set to a non-empty value."""
        value = self.get(name)
        return value, not _is_empty(value)

    def get_int(self, name: str) -> int:
        value = self._require(name)
        if isinstance(value, bool):
            raise ConfigurationError(name, f"expected an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(name, f"expected an integer, got {value!r}")

    def get_str(self, name: str) -> str:
        value = self._require(name)
        if not isinstance(value, str):
            raise ConfigurationError(name, f"expected a string, got {value!r}")
        return value

    def get_bool(self, name: str) -> bool:
        value = self._require(name)
        if not isinstance(value, bool):
            raise ConfigurationError(name, f"expected a boolean, got {value!r}")
        return value

    def get_set(self, name: str) -> Set[Any]:
        value = self._require(name)
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise ConfigurationError(name, f"expected a set, got {value!r}")
        return set(value)

    def get_list(self, name: str) -> List[Any]:
        value = self._require(name)
        if not isinstance(value, (list, tuple)):
            raise ConfigurationError(name, f"expected a list, got {value!r}")
        return list(value)

    def get_json(self, name: str) -> Any:
        """Returns a JSON attribute decoded into Python values."""
        value = self._require(name)
        if isinstance(value, (dict, list)):
            return value
        try:
            return json.loads(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(name, f"value is not valid JSON: {e}")

    # --- Writing values ---

    def set(self, name: str, value: Any) -> None:
        """
        Stores a value in the attribute state.

        Any value the schema cannot hold is a `StateSetError`: a stale or
        half-written state is worse than failing the whole operation.
        """
        attribute = self.schema.get(name)
        if attribute is None:
            raise StateSetError(name, "attribute is not declared in the schema")
        if value is None:
            self._values.pop(name, None)
            return

        value = self._coerce(name, attribute.type, value)
        if attribute.normalize is not None:
            value = attribute.normalize(value)
        self._values[name] = value

    def set_attrs(self, values: Dict[str, Any]) -> None:
        for name, value in values.items():
            self.set(name, value)

    # --- Validation and export ---

    def validate(self) -> None:
        """
        Checks caller input against the schema before any network call.
        """
        for name, attribute in self.schema.items():
            if not attribute.is_input:
                continue
            value = self._values.get(name)
            if value is None:
                if attribute.required:
                    raise ConfigurationError(name, "required attribute is missing")
                continue
            if attribute.choices and value not in attribute.choices:
                allowed = ", ".join(str(c) for c in attribute.choices)
                raise ConfigurationError(
                    name, f"expected one of [{allowed}], got {value!r}"
                )
            if attribute.validate is not None:
                try:
                    attribute.validate(value)
                except ValueError as e:
                    raise ConfigurationError(name, str(e))

    def to_dict(self) -> Dict[str, Any]:
        """Every schema attribute with its current value (or None)."""
        result = {}
        for name, attribute in self.schema.items():
            value = self.get(name)
            if attribute.type == AttrType.SET and value is not None:
                value = sorted(value)
            result[name] = value
        return result

    def write_values(self) -> Dict[str, Any]:
        """The caller-supplied (non-computed) values, as sent upstream on write."""
        return {
            name: value
            for name, value in self._values.items()
            if self.schema[name].is_input
        }

    def copy(self) -> "ResourceData":
        clone = ResourceData(self.schema, id=self.id)
        clone._values = dict(self._values)
        return clone

    # --- Internals ---

    def _check_known(self, name: str) -> None:
        if name not in self.schema:
            raise KeyError(f"attribute '{name}' is not declared in the schema")

    def _require(self, name: str) -> Any:
        self._check_known(name)
        value = self.get(name)
        if value is None:
            raise AttributeNotFoundError(name)
        return value

    def _coerce(self, name: str, attr_type: AttrType, value: Any) -> Any:
        if attr_type == AttrType.INT:
            if isinstance(value, bool) or not isinstance(value, int):
                raise StateSetError(name, f"expected an integer, got {value!r}")
        elif attr_type == AttrType.BOOL:
            if not isinstance(value, bool):
                raise StateSetError(name, f"expected a boolean, got {value!r}")
        elif attr_type == AttrType.STRING:
            if not isinstance(value, str):
                raise StateSetError(name, f"expected a string, got {value!r}")
        elif attr_type == AttrType.LIST:
            if not isinstance(value, (list, tuple)):
                raise StateSetError(name, f"expected a list, got {value!r}")
            value = list(value)
        elif attr_type == AttrType.SET:
            if not isinstance(value, (list, tuple, set, frozenset)):
                raise StateSetError(name, f"expected a set, got {value!r}")
            value = set(value)
        elif attr_type == AttrType.JSON:
            if isinstance(value, (dict, list)):
                value = json.dumps(value, separators=(",", ":"))
            elif not isinstance(value, str):
                raise StateSetError(name, f"expected a JSON document, got {value!r}")
        elif attr_type == AttrType.DICT:
            if not isinstance(value, dict):
                raise StateSetError(name, f"expected a mapping, got {value!r}")
        return value


def changed_attributes(
    desired: ResourceData, current: ResourceData, names: Optional[Iterable[str]] = None
) -> List[str]:
    """
    Lists the caller-supplied attributes whose desired value differs from the
    current one, honoring each attribute's `equivalent` check.
    """
    changed = []
    for name in names if names is not None else desired.write_values():
        attribute = desired.schema[name]
        wanted = desired.get(name)
        actual = current.get(name)
        if wanted is None:
            continue
        if attribute.type == AttrType.SET:
            wanted = set(wanted)
            actual = set(actual) if actual is not None else set()
        if attribute.equivalent is not None and actual is not None:
            if attribute.equivalent(actual, wanted):
                continue
        elif wanted == actual:
            continue
        changed.append(name)
    return changed
