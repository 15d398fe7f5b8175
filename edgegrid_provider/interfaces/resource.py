import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from edgegrid_provider.context import ProviderContext
from edgegrid_provider.errors import ApiError, ConfigurationError, UpstreamError
from edgegrid_provider.identity import CompositeKey
from edgegrid_provider.models import Schema
from edgegrid_provider.output import render_output
from edgegrid_provider.resource_data import ResourceData, changed_attributes


class Mapper(ABC):
    """
    The abstract base class shared by every resource and data source.

    A mapper translates between an attribute set (`ResourceData`) and one
    upstream object type. Subclasses declare their identity through class
    attributes and implement the operations as plain methods:

    - `type_name`: the registry name, e.g. "appsec_penalty_box".
    - `description`: one line shown in the generated module documentation.
    - `schema`: the attribute declarations.
    - `key`: the `CompositeKey` that encodes and decodes the identifier.

    Mappers hold no state of their own between calls; everything shared lives
    in the explicit `ProviderContext`.
    """

    type_name: str = ""
    description: str = ""
    schema: Schema = {}
    key: Optional[CompositeKey] = None

    def __init__(self, context: ProviderContext):
        self.context = context
        self.logger = logging.getLogger(type(self).__module__)

    def call(self, method: Callable[..., Any], *args: Any) -> Any:
        """
        Performs one upstream call.

        Cancellation is checked first so an aborted operation never reaches
        the network. Client failures are wrapped into an `UpstreamError` that
        names the operation and this object type; nothing is retried.
        """
        operation = getattr(method, "__name__", repr(method))
        self.context.check_cancelled()
        self.logger.debug("%s: calling '%s'", self.type_name, operation)
        try:
            return method(*args)
        except ApiError as e:
            self.logger.error("%s: calling '%s': %s", self.type_name, operation, e)
            raise UpstreamError(operation, self.type_name, e) from e

    def decode_id(self, d: ResourceData) -> Dict[str, Any]:
        """Decodes the identifier held by `d` into its typed key parts."""
        if self.key is None:
            raise NotImplementedError(f"{self.type_name} declares no composite key")
        return self.key.decode(d.id)

    def render_output(self, d: ResourceData, template_key: str, data: Any) -> None:
        """
        Sets `output_text` from a named template. A failed render leaves the
        attribute unset and the operation continues.
        """
        text = render_output(template_key, data)
        if text:
            d.set("output_text", text)

    def verify_id_unchanged(self, d: ResourceData) -> None:
        """
        Rejects key attributes that disagree with the identifier already
        assigned to the object, since changing them would address another
        object instead of updating this one.
        """
        if not d.id or self.key is None:
            return
        for name, value in self.key.decode(d.id).items():
            if d.has(name) and d.get(name) != value:
                raise ConfigurationError(
                    name,
                    f"value {d.get(name)!r} differs from the value {value!r} "
                    f"held by the identifier '{d.id}'",
                )


class BaseResource(Mapper):
    """
    A managed object with the four lifecycle operations.

    Each operation is a translation step around exactly one upstream call,
    plus the documented side reads (latest version resolution, the fresh read
    before reconciling a set, the read that follows every write).
    """

    # Input attributes that cannot change once the object exists.
    immutable: tuple = ()
    # Extra lines for the description of the generated module.
    notes: tuple = ()

    @abstractmethod
    def create(self, d: ResourceData) -> None:
        """
        Writes the object, assigns `d.id` and refreshes `d` with a read.

        On failure `d.id` is left empty.
        """

    @abstractmethod
    def read(self, d: ResourceData) -> None:
        """Fills `d` from the upstream object addressed by `d.id`."""

    @abstractmethod
    def update(self, d: ResourceData) -> None:
        """Overwrites the upstream object with the full attribute set of `d`."""

    @abstractmethod
    def delete(self, d: ResourceData) -> None:
        """
        Removes the object, or resets it to its neutral state when the type
        has no true deletion, and clears `d.id` once that succeeded.
        """

    def identify(self, d: ResourceData) -> Optional[str]:
        """
        Returns the identifier of the object the inputs address, or None when
        it is only known after creation (server-assigned ids).
        """
        if self.key is None:
            return None
        return self.key.from_data(d)

    def needs_update(self, desired: ResourceData, current: ResourceData) -> bool:
        """True when a caller-supplied attribute differs from the current state."""
        changed = changed_attributes(desired, current)
        for name in self.immutable:
            if name in changed:
                raise ConfigurationError(name, "cannot be changed once the object exists")
        return bool(changed)


class BaseDataSource(Mapper):
    """A read-only lookup."""

    @abstractmethod
    def read(self, d: ResourceData) -> None:
        """Fills `d` from the upstream API and assigns `d.id`."""
