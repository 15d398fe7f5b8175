from typing import Set

from edgegrid_provider.client.appsec import (
    GetSelectedHostnamesRequest,
    Hostname,
    UpdateSelectedHostnamesRequest,
)
from edgegrid_provider.identity import CompositeKey
from edgegrid_provider.models import Attribute, AttrType
from edgegrid_provider.providers.appsec.base import (
    CONFIG_ID,
    AppSecResource,
    config_id_attribute,
)
from edgegrid_provider.reconcile import MODES, Mode, reconcile
from edgegrid_provider.resource_data import ResourceData


class SelectedHostnames(AppSecResource):
    """
    The hostnames a security configuration protects.

    The hostname list has no identity of its own: it is addressed by its
    configuration id and always read from the latest version. `mode` decides
    how the given hostnames combine with the ones already selected. There is
    no way to remove the list itself, so delete only forgets the identifier.
    """

    type_name = "appsec_selected_hostnames"
    description = "Manage the hostnames protected by a security configuration."
    key = CompositeKey(CONFIG_ID)
    schema = {
        "config_id": config_id_attribute(),
        "hostnames": Attribute(
            AttrType.SET,
            required=True,
            elem=AttrType.STRING,
            description="Hostnames to append, remove or replace, depending on `mode`.",
        ),
        "mode": Attribute(
            AttrType.STRING,
            required=True,
            choices=MODES,
            description="How `hostnames` combine with the currently selected hostnames.",
        ),
    }

    def create(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        self._write(d, config_id)
        d.set_id(self.key.encode({"config_id": config_id}))
        self.read(d)

    def read(self, d: ResourceData) -> None:
        config_id = self.decode_id(d)["config_id"]
        hostnames = self._current_hostnames(config_id)

        d.set("config_id", config_id)
        d.set("hostnames", hostnames)
        if not d.has("mode"):
            d.set("mode", Mode.REPLACE.value)

    def update(self, d: ResourceData) -> None:
        d.validate()
        self.verify_id_unchanged(d)
        config_id = self.decode_id(d)["config_id"]
        self._write(d, config_id)
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        self.decode_id(d)
        self.logger.debug(
            "%s: hostname selections cannot be removed, forgetting '%s'",
            self.type_name,
            d.id,
        )
        d.clear_id()

    def needs_update(self, desired: ResourceData, current: ResourceData) -> bool:
        """True when applying the requested mode would change the selection."""
        current_hostnames = current.get_set("hostnames") if current.has("hostnames") else set()
        target = reconcile(
            current_hostnames, desired.get_set("hostnames"), desired.get_str("mode")
        )
        return target != current_hostnames

    def _current_hostnames(self, config_id: int) -> Set[str]:
        version = self.latest_version(config_id)
        response = self.call(
            self.appsec.get_selected_hostnames,
            GetSelectedHostnamesRequest(config_id=config_id, version=version),
        )
        return {h.hostname for h in response.hostname_list}

    def _write(self, d: ResourceData, config_id: int) -> None:
        # Reconcile against a fresh read; a concurrent writer between this
        # read and the write below is not detected.
        current = self._current_hostnames(config_id)
        target = reconcile(current, d.get_set("hostnames"), d.get_str("mode"))

        request = UpdateSelectedHostnamesRequest(
            config_id=config_id,
            version=self.modifiable_version(config_id),
            hostname_list=[Hostname(hostname=h) for h in sorted(target)],
        )
        self.call(self.appsec.update_selected_hostnames, request)
