from typing import Optional

from edgegrid_provider.client.appsec import (
    CreateReputationProfileRequest,
    GetReputationProfileRequest,
    GetReputationProfilesRequest,
    RemoveReputationProfileRequest,
    UpdateReputationProfileRequest,
)
from edgegrid_provider.errors import ConfigurationError
from edgegrid_provider.identity import CompositeKey, KeyField
from edgegrid_provider.models import (
    Attribute,
    AttrType,
    equivalent_json_ignoring,
    json_attribute,
)
from edgegrid_provider.providers.appsec.base import (
    CONFIG_ID,
    AppSecResource,
    config_id_attribute,
)
from edgegrid_provider.resource_data import ResourceData

# Keys the API adds to the profile document it returns.
SERVER_KEYS = ("id", "configId", "configVersion")


class ReputationProfile(AppSecResource):
    """
    A reputation profile, described by a caller-supplied JSON document.

    The profile id is assigned by the API. Without an `id`, an existing
    profile is found by the `name` of its JSON document. Reads go to the
    latest version of the configuration, writes to a modifiable one.
    """

    type_name = "appsec_reputation_profile"
    description = "Manage a reputation profile of a security configuration."
    notes = (
        "Without `id`, an existing profile is found by the `name` in its JSON "
        "description, so the name must be unique within the configuration.",
    )
    key = CompositeKey(CONFIG_ID, KeyField("reputation_profile_id", int))
    schema = {
        "config_id": config_id_attribute(),
        "reputation_profile": json_attribute(
            "JSON description of the reputation profile.",
            equivalent=equivalent_json_ignoring(*SERVER_KEYS),
        ),
        "reputation_profile_id": Attribute(
            AttrType.INT,
            computed=True,
            description="Unique identifier assigned to the reputation profile.",
        ),
    }

    def identify(self, d: ResourceData) -> Optional[str]:
        if not d.has("config_id") or not d.has("reputation_profile"):
            return None
        document = d.get_json("reputation_profile")
        name = document.get("name") if isinstance(document, dict) else None
        if not name:
            return None

        config_id = d.get_int("config_id")
        response = self.call(
            self.appsec.get_reputation_profiles,
            GetReputationProfilesRequest(
                config_id=config_id, version=self.latest_version(config_id)
            ),
        )
        matches = [p.id for p in response.reputation_profiles if p.name == name]
        if len(matches) > 1:
            raise ConfigurationError(
                "reputation_profile",
                f"name {name!r} is shared by profiles {matches}, pass `id` to pick one",
            )
        if not matches:
            return None
        return self.key.encode({"config_id": config_id, "reputation_profile_id": matches[0]})

    def create(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        response = self.call(
            self.appsec.create_reputation_profile,
            CreateReputationProfileRequest(
                config_id=config_id,
                version=self.modifiable_version(config_id),
                json_payload=d.get_json("reputation_profile"),
            ),
        )
        d.set_id(
            self.key.encode(
                {"config_id": config_id, "reputation_profile_id": response.id}
            )
        )
        self.read(d)

    def read(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        response = self.call(
            self.appsec.get_reputation_profile,
            GetReputationProfileRequest(
                config_id=key["config_id"],
                version=self.latest_version(key["config_id"]),
                reputation_profile_id=key["reputation_profile_id"],
            ),
        )
        d.set_attrs(key)
        d.set(
            "reputation_profile",
            response.model_dump(by_alias=True, exclude_none=True),
        )

    def update(self, d: ResourceData) -> None:
        d.validate()
        self.verify_id_unchanged(d)
        key = self.decode_id(d)
        self.call(
            self.appsec.update_reputation_profile,
            UpdateReputationProfileRequest(
                config_id=key["config_id"],
                version=self.modifiable_version(key["config_id"]),
                reputation_profile_id=key["reputation_profile_id"],
                json_payload=d.get_json("reputation_profile"),
            ),
        )
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        key = self.decode_id(d)
        self.call(
            self.appsec.remove_reputation_profile,
            RemoveReputationProfileRequest(
                config_id=key["config_id"],
                version=self.modifiable_version(key["config_id"]),
                reputation_profile_id=key["reputation_profile_id"],
            ),
        )
        d.clear_id()
