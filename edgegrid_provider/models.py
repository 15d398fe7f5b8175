"""
This module defines the attribute schema used to declare every resource and
data source of the provider.

A schema is a plain dictionary mapping an attribute name to an `Attribute`.
Using dataclasses keeps the declarations compact and readable, and gives the
runners and the module generator a single structure to translate into Ansible
`argument_spec` options and documentation.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple


class AttrType(str, Enum):
    """The value types an attribute can hold."""

    STRING = "str"
    INT = "int"
    BOOL = "bool"
    LIST = "list"
    SET = "set"
    JSON = "json"
    DICT = "dict"


# Mapping from attribute types to Ansible option types. Sets have no native
# Ansible type; they are accepted as lists and compared order-insensitively.
ATTR_TO_ANSIBLE_TYPE_MAP = {
    AttrType.STRING: "str",
    AttrType.INT: "int",
    AttrType.BOOL: "bool",
    AttrType.LIST: "list",
    AttrType.SET: "list",
    AttrType.JSON: "json",
    AttrType.DICT: "dict",
}


@dataclass(frozen=True)
class Attribute:
    """
    Declares one attribute of a managed object.

    An attribute is `required` (always sent upstream), `optional` (sent only
    when present) or `computed` (assigned by the server, never sent). The
    combination `optional` + `computed` describes a value the caller may set
    and the server fills in when the caller does not.
    """

    type: AttrType
    required: bool = False
    optional: bool = False
    computed: bool = False
    description: str = ""

    # Element type for LIST and SET attributes.
    elem: Optional[AttrType] = None

    # Allowed values.
    choices: Optional[Tuple[Any, ...]] = None

    # Default used for optional attributes the caller omitted.
    default: Any = None

    # Raises ValueError when a caller-supplied value is not acceptable.
    validate: Optional[Callable[[Any], None]] = None

    # Converts a value into the canonical form kept in state.
    normalize: Optional[Callable[[Any], Any]] = None

    # Returns True when two values should be treated as equal (no update needed).
    equivalent: Optional[Callable[[Any, Any], bool]] = None

    # Keeps the value out of logs and module output.
    no_log: bool = False

    @property
    def is_input(self) -> bool:
        """True if the caller may supply this attribute."""
        return self.required or self.optional

    @property
    def is_computed_only(self) -> bool:
        return self.computed and not self.is_input

    def to_option(self) -> Optional[Dict[str, Any]]:
        """
        Translates the attribute into an Ansible `argument_spec` option.

        Purely computed attributes are read-only to the caller and therefore
        have no option; `None` is returned for them.
        """
        if self.is_computed_only:
            return None

        option: Dict[str, Any] = {"type": ATTR_TO_ANSIBLE_TYPE_MAP[self.type]}
        if self.required:
            option["required"] = True
        if self.description:
            option["description"] = self.description
        if self.elem is not None:
            option["elements"] = ATTR_TO_ANSIBLE_TYPE_MAP[self.elem]
        if self.choices:
            option["choices"] = list(self.choices)
        if self.default is not None:
            option["default"] = self.default
        if self.no_log:
            option["no_log"] = True
        return option


# A schema maps attribute names to their declarations.
Schema = Dict[str, Attribute]


def output_text_attribute() -> Attribute:
    """The presentation-only attribute shared by objects that render a summary."""
    return Attribute(
        AttrType.STRING, computed=True, description="Text Export representation"
    )


def json_attribute(description: str = "", **kwargs) -> Attribute:
    """A required attribute carrying a caller-supplied JSON document."""
    return Attribute(
        AttrType.JSON,
        required=kwargs.pop("required", True),
        description=description,
        validate=kwargs.pop("validate", validate_json),
        equivalent=kwargs.pop("equivalent", equivalent_json),
        **kwargs,
    )


def validate_json(value: Any) -> None:
    """Accepts any well-formed JSON document."""
    if isinstance(value, (dict, list)):
        return
    try:
        json.loads(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"value is not valid JSON: {e}") from e


def equivalent_json(old: Any, new: Any) -> bool:
    """
    Two JSON documents are equivalent when they decode to the same value,
    regardless of key order or whitespace.
    """
    try:
        old_value = json.loads(old) if isinstance(old, str) else old
        new_value = json.loads(new) if isinstance(new, str) else new
    except ValueError:
        return old == new
    return old_value == new_value


def equivalent_json_ignoring(*keys: str) -> Callable[[Any, Any], bool]:
    """
    Builds an equivalence check for JSON objects that skips server-assigned
    top-level keys, such as ids echoed back by the API on read.
    """

    def _strip(value: Any) -> Any:
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                return value
        if isinstance(value, dict):
            return {k: v for k, v in value.items() if k not in keys}
        return value

    def _equivalent(old: Any, new: Any) -> bool:
        return _strip(old) == _strip(new)

    return _equivalent
