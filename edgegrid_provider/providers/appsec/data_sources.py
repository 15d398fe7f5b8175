"""Read-only lookups over security configurations."""

from edgegrid_provider.client.appsec import (
    GetConfigurationVersionsRequest,
    GetCustomRulesRequest,
    GetExportConfigurationRequest,
    GetSecurityPoliciesRequest,
    GetVersionNotesRequest,
)
from edgegrid_provider.models import Attribute, AttrType, output_text_attribute
from edgegrid_provider.output import render_output
from edgegrid_provider.providers.appsec.base import (
    AppSecDataSource,
    config_id_attribute,
)
from edgegrid_provider.resource_data import ResourceData


def _version_input(description: str = "") -> Attribute:
    return Attribute(
        AttrType.INT,
        optional=True,
        computed=True,
        description=description
        or "Version of the security configuration. Defaults to the latest version.",
    )


def _json_output(description: str) -> Attribute:
    return Attribute(AttrType.JSON, computed=True, description=description)


class ConfigurationVersion(AppSecDataSource):
    """The versions of a security configuration and their activation status."""

    type_name = "appsec_configuration_version"
    description = "Look up the versions of a security configuration."
    schema = {
        "config_id": config_id_attribute(),
        "version": Attribute(
            AttrType.INT,
            optional=True,
            description="Version whose activation status to report.",
        ),
        "latest_version": Attribute(
            AttrType.INT, computed=True, description="The most recently created version."
        ),
        "staging_status": Attribute(
            AttrType.STRING, computed=True, description="Staging status of `version`."
        ),
        "production_status": Attribute(
            AttrType.STRING, computed=True, description="Production status of `version`."
        ),
        "output_text": output_text_attribute(),
    }

    def read(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        response = self.call(
            self.appsec.get_configuration_versions,
            GetConfigurationVersionsRequest(config_id=config_id),
        )

        d.set("latest_version", response.last_created_version)
        version = d.get("version")
        for entry in response.version_list:
            if entry.version == version:
                d.set("staging_status", entry.staging.status)
                d.set("production_status", entry.production.status)
        self.render_output(d, "configurationVersion", response)
        d.set_id(config_id)


class SecurityPolicy(AppSecDataSource):
    """
    The security policies of a configuration version.

    `policy_id` is the policy named `name`, or the first policy when no name
    is given.
    """

    type_name = "appsec_security_policy"
    description = "Look up the security policies of a configuration version."
    schema = {
        "config_id": config_id_attribute(),
        "version": _version_input(),
        "name": Attribute(
            AttrType.STRING, optional=True, description="Name of the policy to look up."
        ),
        "policy_id": Attribute(
            AttrType.STRING, computed=True, description="Id of the matching policy."
        ),
        "policy_list": Attribute(
            AttrType.LIST,
            computed=True,
            elem=AttrType.STRING,
            description="Ids of all policies in the configuration version.",
        ),
        "output_text": output_text_attribute(),
    }

    def read(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        version = d.get("version") or self.latest_version(config_id)
        response = self.call(
            self.appsec.get_security_policies,
            GetSecurityPoliciesRequest(config_id=config_id, version=version),
        )

        d.set("version", version)
        d.set("policy_list", [p.policy_id for p in response.policies])
        name = d.get("name")
        if name:
            for policy in response.policies:
                if policy.policy_name == name:
                    d.set("policy_id", policy.policy_id)
        elif response.policies:
            d.set("policy_id", response.policies[0].policy_id)
        self.render_output(d, "securityPoliciesDS", response)
        d.set_id(f"{config_id}:{version}")


class CustomRules(AppSecDataSource):
    """The custom rules of a configuration, or one of them."""

    type_name = "appsec_custom_rules"
    description = "Look up the custom rules of a security configuration."
    schema = {
        "config_id": config_id_attribute(),
        "custom_rule_id": Attribute(
            AttrType.INT, optional=True, description="Limit the result to one rule."
        ),
        "json": _json_output("The custom rules as returned by the API."),
        "output_text": output_text_attribute(),
    }

    def read(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        response = self.call(
            self.appsec.get_custom_rules,
            GetCustomRulesRequest(config_id=config_id, id=d.get("custom_rule_id")),
        )
        d.set("json", response.model_dump(by_alias=True, exclude_none=True))
        self.render_output(d, "customRules", response)
        d.set_id(config_id)


class VersionNotes(AppSecDataSource):
    type_name = "appsec_version_notes"
    description = "Look up the notes of a configuration version."
    schema = {
        "config_id": config_id_attribute(),
        "version": _version_input(),
        "json": _json_output("The version notes as returned by the API."),
        "output_text": output_text_attribute(),
    }

    def read(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        version = d.get("version") or self.latest_version(config_id)
        response = self.call(
            self.appsec.get_version_notes,
            GetVersionNotesRequest(config_id=config_id, version=version),
        )
        d.set("version", version)
        d.set("json", response.model_dump(by_alias=True, exclude_none=True))
        self.render_output(d, "versionNotesDS", response)
        d.set_id(config_id)


class ExportConfiguration(AppSecDataSource):
    """
    A full export of a configuration version.

    `search` selects the sections rendered into `output_text`, in order;
    sections that fail to render are skipped.
    """

    type_name = "appsec_export_configuration"
    description = "Export a security configuration version."
    schema = {
        "config_id": config_id_attribute(),
        "version": _version_input(),
        "search": Attribute(
            AttrType.LIST,
            optional=True,
            elem=AttrType.STRING,
            description="Sections to render into `output_text`, e.g. selectedHosts or matchTargets.",
        ),
        "json": _json_output("The exported configuration as returned by the API."),
        "output_text": output_text_attribute(),
    }

    def read(self, d: ResourceData) -> None:
        d.validate()
        config_id = d.get_int("config_id")
        version = d.get("version") or self.latest_version(config_id)
        response = self.call(
            self.appsec.get_export_configuration,
            GetExportConfigurationRequest(config_id=config_id, version=version),
        )
        d.set("version", version)
        d.set("json", response.model_dump(by_alias=True, exclude_none=True))

        sections = [
            render_output(section, response) for section in d.get("search") or []
        ]
        output_text = "".join(sections)
        if output_text:
            d.set("output_text", output_text)
        d.set_id(response.config_id)


