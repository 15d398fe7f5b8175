from edgegrid_provider.client.appsec import (
    GetRuleConditionExceptionRequest,
    RemoveRuleConditionExceptionRequest,
    UpdateRuleConditionExceptionRequest,
)
from edgegrid_provider.identity import CompositeKey, KeyField
from edgegrid_provider.models import (
    Attribute,
    AttrType,
    json_attribute,
    output_text_attribute,
)
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


class EvalRuleConditionException(AppSecResource):
    """Conditions and exceptions of a rule evaluated in evaluation mode."""

    type_name = "appsec_eval_rule_condition_exception"
    description = "Manage the conditions and exceptions of an evaluation rule."
    key = CompositeKey(CONFIG_ID, VERSION, POLICY_ID, KeyField("rule_id", int))
    schema = {
        "config_id": config_id_attribute(),
        "version": version_attribute(),
        "security_policy_id": policy_id_attribute(),
        "rule_id": Attribute(
            AttrType.INT, required=True, description="Unique identifier of the rule."
        ),
        "condition_exception": json_attribute(
            "JSON description of the conditions and exceptions."
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
            "rule_id": d.get_int("rule_id"),
        }
        self._write(key, d)
        d.set_id(self.key.encode(key))
        self.read(d)

    def read(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        response = self.call(
            self.appsec.get_rule_condition_exception,
            GetRuleConditionExceptionRequest(**self._request_key(key)),
        )
        d.set_attrs(key)
        d.set(
            "condition_exception",
            response.model_dump(by_alias=True, exclude_none=True),
        )
        self.render_output(d, "RuleConditionException", response)

    def update(self, d: ResourceData) -> None:
        d.validate()
        self.verify_id_unchanged(d)
        self._write(self.decode_id(d), d)
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        self.call(
            self.appsec.remove_rule_condition_exception,
            RemoveRuleConditionExceptionRequest(**self._request_key(key)),
        )
        d.clear_id()

    def _write(self, key, d: ResourceData) -> None:
        self.call(
            self.appsec.update_rule_condition_exception,
            UpdateRuleConditionExceptionRequest(
                **self._request_key(key),
                json_payload=d.get_json("condition_exception"),
            ),
        )

    @staticmethod
    def _request_key(key):
        return {
            "config_id": key["config_id"],
            "version": key["version"],
            "policy_id": key["security_policy_id"],
            "rule_id": key["rule_id"],
        }
