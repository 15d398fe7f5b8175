from edgegrid_provider.client.appsec import (
    GetReputationProfileActionRequest,
    UpdateReputationProfileActionRequest,
)
from edgegrid_provider.identity import CompositeKey, KeyField
from edgegrid_provider.models import Attribute, AttrType
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

ACTIONS = ("alert", "deny", "none")


class ReputationProfileAction(AppSecResource):
    """
    The action a security policy takes for one reputation profile.

    Delete sets the action to "none".
    """

    type_name = "appsec_reputation_profile_action"
    description = "Manage the action taken by a security policy for a reputation profile."
    key = CompositeKey(
        CONFIG_ID, VERSION, POLICY_ID, KeyField("reputation_profile_id", int)
    )
    schema = {
        "config_id": config_id_attribute(),
        "version": version_attribute(),
        "security_policy_id": policy_id_attribute(),
        "reputation_profile_id": Attribute(
            AttrType.INT,
            required=True,
            description="Unique identifier of the reputation profile.",
        ),
        "action": Attribute(
            AttrType.STRING,
            required=True,
            choices=ACTIONS,
            description="Action taken when the reputation profile is triggered.",
        ),
    }

    def create(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        key = {
            "config_id": config_id,
            "version": self.write_version(d, config_id),
            "security_policy_id": d.get_str("security_policy_id"),
            "reputation_profile_id": d.get_int("reputation_profile_id"),
        }
        self._write(key, d.get_str("action"))
        d.set_id(self.key.encode(key))
        self.read(d)

    def read(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        response = self.call(
            self.appsec.get_reputation_profile_action,
            GetReputationProfileActionRequest(
                config_id=key["config_id"],
                version=key["version"],
                policy_id=key["security_policy_id"],
                reputation_profile_id=key["reputation_profile_id"],
            ),
        )
        d.set_attrs(key)
        d.set("action", response.action)

    def update(self, d: ResourceData) -> None:
        d.validate()
        self.verify_id_unchanged(d)
        self._write(self.decode_id(d), d.get_str("action"))
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        self._write(self.decode_id(d), "none")
        d.clear_id()

    def _write(self, key, action: str) -> None:
        self.call(
            self.appsec.update_reputation_profile_action,
            UpdateReputationProfileActionRequest(
                config_id=key["config_id"],
                version=key["version"],
                policy_id=key["security_policy_id"],
                reputation_profile_id=key["reputation_profile_id"],
                action=action,
            ),
        )
