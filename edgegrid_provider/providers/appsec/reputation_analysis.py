from edgegrid_provider.client.appsec import (
    GetReputationAnalysisRequest,
    RemoveReputationAnalysisRequest,
    UpdateReputationAnalysisRequest,
)
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


class ReputationAnalysis(AppSecResource):
    """Whether reputation scores are forwarded to the origin for a security policy."""

    type_name = "appsec_reputation_analysis"
    description = "Manage reputation analysis header forwarding for a security policy."
    key = CompositeKey(CONFIG_ID, VERSION, POLICY_ID)
    schema = {
        "config_id": config_id_attribute(),
        "version": version_attribute(),
        "security_policy_id": policy_id_attribute(),
        "forward_to_http_header": Attribute(
            AttrType.BOOL,
            required=True,
            description="Forward the reputation score to the origin in an HTTP header.",
        ),
        "forward_shared_ip_to_http_header_siem": Attribute(
            AttrType.BOOL,
            required=True,
            description="Forward the shared-IP flag to the origin and to SIEM.",
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
        self._write(key, d)
        d.set_id(self.key.encode(key))
        self.read(d)

    def read(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        response = self.call(
            self.appsec.get_reputation_analysis,
            GetReputationAnalysisRequest(
                config_id=key["config_id"],
                version=key["version"],
                policy_id=key["security_policy_id"],
            ),
        )
        d.set_attrs(key)
        d.set("forward_to_http_header", response.forward_to_http_header)
        d.set(
            "forward_shared_ip_to_http_header_siem",
            response.forward_shared_ip_to_http_header_siem,
        )

    def update(self, d: ResourceData) -> None:
        d.validate()
        self.verify_id_unchanged(d)
        self._write(self.decode_id(d), d)
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        self.call(
            self.appsec.remove_reputation_analysis,
            RemoveReputationAnalysisRequest(
                config_id=key["config_id"],
                version=key["version"],
                policy_id=key["security_policy_id"],
            ),
        )
        d.clear_id()

    def _write(self, key, d: ResourceData) -> None:
        self.call(
            self.appsec.update_reputation_analysis,
            UpdateReputationAnalysisRequest(
                config_id=key["config_id"],
                version=key["version"],
                policy_id=key["security_policy_id"],
                forward_to_http_header=d.get_bool("forward_to_http_header"),
                forward_shared_ip_to_http_header_siem=d.get_bool(
                    "forward_shared_ip_to_http_header_siem"
                ),
            ),
        )
