from edgegrid_provider.client.appsec import (
    GetPragmaHeaderRequest,
    UpdatePragmaHeaderRequest,
)
from edgegrid_provider.identity import CompositeKey, KeyField
from edgegrid_provider.models import Attribute, AttrType, json_attribute
from edgegrid_provider.providers.appsec.base import (
    CONFIG_ID,
    AppSecResource,
    config_id_attribute,
)
from edgegrid_provider.resource_data import ResourceData


class AdvancedSettingsPragmaHeader(AppSecResource):
    """
    The pragma header advanced setting, either configuration-wide or for one
    security policy.

    The identifier is `config_id` for the configuration-wide setting and
    `config_id:security_policy_id` for a policy override. Delete writes an
    empty document, which restores the default behavior.
    """

    type_name = "appsec_advanced_settings_pragma_header"
    description = "Manage the pragma header advanced setting."
    key = CompositeKey(CONFIG_ID, KeyField("security_policy_id", str, optional=True))
    schema = {
        "config_id": config_id_attribute(),
        "security_policy_id": Attribute(
            AttrType.STRING,
            optional=True,
            description="Security policy to override the setting for. Omit for the configuration-wide setting.",
        ),
        "pragma_header": json_attribute("JSON description of the pragma header setting."),
    }

    def create(self, d: ResourceData) -> None:
        d.validate()
        key = {"config_id": d.get_int("config_id")}
        if d.has("security_policy_id"):
            key["security_policy_id"] = d.get_str("security_policy_id")
        self._write(key, d.get_json("pragma_header"))
        d.set_id(self.key.encode(key))
        self.read(d)

    def read(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        response = self.call(
            self.appsec.get_pragma_header,
            GetPragmaHeaderRequest(
                config_id=key["config_id"],
                version=self.latest_version(key["config_id"]),
                policy_id=key.get("security_policy_id"),
            ),
        )
        d.set_attrs(key)
        d.set("pragma_header", response.model_dump(by_alias=True, exclude_none=True))

    def update(self, d: ResourceData) -> None:
        d.validate()
        self.verify_id_unchanged(d)
        self._write(self.decode_id(d), d.get_json("pragma_header"))
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        self._write(self.decode_id(d), {})
        d.clear_id()

    def _write(self, key, payload) -> None:
        self.call(
            self.appsec.update_pragma_header,
            UpdatePragmaHeaderRequest(
                config_id=key["config_id"],
                version=self.modifiable_version(key["config_id"]),
                policy_id=key.get("security_policy_id"),
                json_payload=payload,
            ),
        )
