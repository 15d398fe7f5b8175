from edgegrid_provider.client.appsec import GetPenaltyBoxRequest, UpdatePenaltyBoxRequest
from edgegrid_provider.identity import CompositeKey
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

PENALTY_BOX_ACTIONS = ("alert", "deny", "none")


class PenaltyBox(AppSecResource):
    """
    The penalty box settings of a security policy.

    The settings always exist, so delete resets them to the neutral payload
    (no protection, action "none").
    """

    type_name = "appsec_penalty_box"
    description = "Manage the penalty box settings of a security policy."
    key = CompositeKey(CONFIG_ID, VERSION, POLICY_ID)
    schema = {
        "config_id": config_id_attribute(),
        "version": version_attribute(),
        "security_policy_id": policy_id_attribute(),
        "penalty_box_protection": Attribute(
            AttrType.BOOL,
            required=True,
            description="Whether the penalty box is enabled for the policy.",
        ),
        "penalty_box_action": Attribute(
            AttrType.STRING,
            required=True,
            choices=PENALTY_BOX_ACTIONS,
            description="The action applied to requests from clients in the penalty box.",
        ),
    }

    def create(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        key = {
            "config_id": config_id,
            "version": self.write_version(d, config_id),
            "security_policy_id": d.get_str("security_policy_id"),
        }
        self._write(key, d.get_str("penalty_box_action"), d.get_bool("penalty_box_protection"))
        d.set_id(self.key.encode(key))
        self.read(d)

    def read(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        response = self.call(
            self.appsec.get_penalty_box,
            GetPenaltyBoxRequest(
                config_id=key["config_id"],
                version=key["version"],
                policy_id=key["security_policy_id"],
            ),
        )
        d.set_attrs(key)
        d.set("penalty_box_action", response.action)
        d.set("penalty_box_protection", response.penalty_box_protection)

    def update(self, d: ResourceData) -> None:
        d.validate()
        self.verify_id_unchanged(d)
        key = self.decode_id(d)
        self._write(key, d.get_str("penalty_box_action"), d.get_bool("penalty_box_protection"))
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        self._write(key, "none", False)
        d.clear_id()

    def _write(self, key, action: str, protection: bool) -> None:
        self.call(
            self.appsec.update_penalty_box,
            UpdatePenaltyBoxRequest(
                config_id=key["config_id"],
                version=key["version"],
                policy_id=key["security_policy_id"],
                action=action,
                penalty_box_protection=protection,
            ),
        )
