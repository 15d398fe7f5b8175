from edgegrid_provider.client.appsec import (
    CreateMatchTargetRequest,
    GetMatchTargetRequest,
    RemoveMatchTargetRequest,
    UpdateMatchTargetRequest,
)
from edgegrid_provider.identity import CompositeKey, KeyField
from edgegrid_provider.models import (
    Attribute,
    AttrType,
    equivalent_json_ignoring,
    json_attribute,
)
from edgegrid_provider.providers.appsec.base import (
    CONFIG_ID,
    VERSION,
    AppSecResource,
    config_id_attribute,
    version_attribute,
)
from edgegrid_provider.resource_data import ResourceData

SERVER_KEYS = ("targetId", "configId", "configVersion", "sequence")


class MatchTarget(AppSecResource):
    """
    A match target, described by a caller-supplied JSON document.

    The target id is assigned by the API and nothing in the document is
    unique, so an existing target can only be addressed through `id`.
    """

    type_name = "appsec_match_target"
    description = "Manage a match target of a security configuration."
    notes = (
        "The match target id is assigned by the API. Pass `id` with the value "
        "returned by the first run, or every run creates another match target.",
    )
    key = CompositeKey(CONFIG_ID, VERSION, KeyField("match_target_id", int))
    schema = {
        "config_id": config_id_attribute(),
        "version": version_attribute(),
        "match_target": json_attribute(
            "JSON description of the match target.",
            equivalent=equivalent_json_ignoring(*SERVER_KEYS),
        ),
        "match_target_id": Attribute(
            AttrType.INT,
            computed=True,
            description="Unique identifier assigned to the match target.",
        ),
    }

    def create(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        version = self.write_version(d, config_id)
        response = self.call(
            self.appsec.create_match_target,
            CreateMatchTargetRequest(
                config_id=config_id,
                version=version,
                json_payload=d.get_json("match_target"),
            ),
        )
        d.set_id(
            self.key.encode(
                {
                    "config_id": config_id,
                    "version": version,
                    "match_target_id": response.target_id,
                }
            )
        )
        self.read(d)

    def read(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        response = self.call(
            self.appsec.get_match_target,
            GetMatchTargetRequest(
                config_id=key["config_id"],
                version=key["version"],
                target_id=key["match_target_id"],
            ),
        )
        d.set_attrs(key)
        d.set("match_target", response.model_dump(by_alias=True, exclude_none=True))

    def update(self, d: ResourceData) -> None:
        d.validate()
        self.verify_id_unchanged(d)
        key = self.decode_id(d)
        self.call(
            self.appsec.update_match_target,
            UpdateMatchTargetRequest(
                config_id=key["config_id"],
                version=key["version"],
                target_id=key["match_target_id"],
                json_payload=d.get_json("match_target"),
            ),
        )
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        self.call(
            self.appsec.remove_match_target,
            RemoveMatchTargetRequest(
                config_id=key["config_id"],
                version=key["version"],
                target_id=key["match_target_id"],
            ),
        )
        d.clear_id()
