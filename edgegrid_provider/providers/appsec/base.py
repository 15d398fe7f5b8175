from typing import Optional

from edgegrid_provider.identity import KeyField
from edgegrid_provider.interfaces.resource import BaseDataSource, BaseResource
from edgegrid_provider.models import Attribute, AttrType
from edgegrid_provider.providers.appsec.versions import (
    latest_config_version,
    modifiable_config_version,
)
from edgegrid_provider.resource_data import ResourceData

CONFIG_ID = KeyField("config_id", int)
VERSION = KeyField("version", int)
POLICY_ID = KeyField("security_policy_id", str)


def config_id_attribute() -> Attribute:
    return Attribute(
        AttrType.INT, required=True, description="Unique identifier of the security configuration."
    )


def version_attribute() -> Attribute:
    return Attribute(
        AttrType.INT,
        optional=True,
        computed=True,
        description="Version of the security configuration. Defaults to a modifiable version derived from the latest one.",
    )


def policy_id_attribute() -> Attribute:
    return Attribute(
        AttrType.STRING, required=True, description="Unique identifier of the security policy."
    )


class AppSecMixin:
    """Client access and version resolution shared by the appsec mappers."""

    @property
    def appsec(self):
        return self.context.appsec

    def latest_version(self, config_id: int) -> int:
        return latest_config_version(self, config_id)

    def modifiable_version(self, config_id: int) -> int:
        return modifiable_config_version(self, config_id)

    def write_version(self, d: ResourceData, config_id: int) -> int:
        """The version a create writes to: the caller's choice, or a modifiable one."""
        if d.has("version"):
            return d.get_int("version")
        return self.modifiable_version(config_id)


class AppSecResource(AppSecMixin, BaseResource):
    def identify(self, d: ResourceData) -> Optional[str]:
        """
        Derives the identifier, addressing the latest version of the
        configuration when the caller gave no `version`.
        """
        if self.key is None or "version" not in self.key.names or d.has("version"):
            return super().identify(d)
        for f in self.key.fields:
            if f.name != "version" and not f.optional and not d.has(f.name):
                return None

        values = {
            f.name: d.get(f.name) for f in self.key.fields if d.has(f.name)
        }
        values["version"] = self.latest_version(d.get_int("config_id"))
        return self.key.encode(values)


class AppSecDataSource(AppSecMixin, BaseDataSource):
    pass
