from edgegrid_provider.client.appsec import (
    GetRateProtectionRequest,
    UpdateRateProtectionRequest,
)
from edgegrid_provider.identity import CompositeKey
from edgegrid_provider.models import Attribute, AttrType, output_text_attribute
from edgegrid_provider.providers.appsec.base import (
    CONFIG_ID,
    POLICY_ID,
    VERSION,
    AppSecResource,
    config_id_attribute,
    policy_id_attribute,
    version_attribute,
)
from edgegrid_provider.resource_data import ResourceData


class RateProtection(AppSecResource):
    """
    Turns rate controls on or off for a security policy.

    Delete switches rate controls off; the protections document itself stays.
    """

    type_name = "appsec_rate_protection"
    description = "Enable or disable rate protection for a security policy."
    key = CompositeKey(CONFIG_ID, VERSION, POLICY_ID)
    schema = {
        "config_id": config_id_attribute(),
        "version": version_attribute(),
        "security_policy_id": policy_id_attribute(),
        "enabled": Attribute(
            AttrType.BOOL,
            required=True,
            description="Whether rate controls apply to the policy.",
        ),
        "output_text": output_text_attribute(),
    }

    def create(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        key = {
            "config_id": config_id,
            "version": self.write_version(d, config_id),
            "security_policy_id": d.get_str("security_policy_id"),
        }
        self._write(key, d.get_bool("enabled"))
        d.set_id(self.key.encode(key))
        self.read(d)

    def read(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        response = self.call(
            self.appsec.get_rate_protection,
            GetRateProtectionRequest(
                config_id=key["config_id"],
                version=key["version"],
                policy_id=key["security_policy_id"],
            ),
        )
        d.set_attrs(key)
        d.set("enabled", response.apply_rate_controls)
        self.render_output(d, "rateProtectionDS", response)

    def update(self, d: ResourceData) -> None:
        d.validate()
        self.verify_id_unchanged(d)
        self._write(self.decode_id(d), d.get_bool("enabled"))
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        self._write(self.decode_id(d), False)
        d.clear_id()

    def _write(self, key, enabled: bool) -> None:
        self.call(
            self.appsec.update_rate_protection,
            UpdateRateProtectionRequest(
                config_id=key["config_id"],
                version=key["version"],
                policy_id=key["security_policy_id"],
                apply_rate_controls=enabled,
            ),
        )
