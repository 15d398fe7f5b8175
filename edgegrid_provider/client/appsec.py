"""
The application-security (appsec) API: request and response models, the
client interface the mappers program against, and its HTTP implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import Field

from edgegrid_provider.client.base import ApiModel, HttpClient

BASE_PATH = "/appsec/v1/configs/{config_id}"
VERSION_PATH = BASE_PATH + "/versions/{version}"
POLICY_PATH = VERSION_PATH + "/security-policies/{policy_id}"


# --- Configurations and versions ---


class GetConfigurationRequest(ApiModel):
    config_id: int


class GetConfigurationResponse(ApiModel):
    id: int
    name: str = ""
    latest_version: int = 0
    staging_version: Optional[int] = None
    production_version: Optional[int] = None


class GetConfigurationVersionsRequest(ApiModel):
    config_id: int


class VersionStatus(ApiModel):
    status: str = "Inactive"


class ConfigurationVersion(ApiModel):
    version: int
    staging: VersionStatus = Field(default_factory=VersionStatus)
    production: VersionStatus = Field(default_factory=VersionStatus)


class GetConfigurationVersionsResponse(ApiModel):
    config_id: int
    config_name: str = ""
    last_created_version: int = 0
    staging_active_version: Optional[int] = None
    production_active_version: Optional[int] = None
    version_list: List[ConfigurationVersion] = []


class CreateConfigurationVersionCloneRequest(ApiModel):
    config_id: int
    create_from_version: int


class CreateConfigurationVersionCloneResponse(ApiModel):
    config_id: int
    version: int


class VersionRequest(ApiModel):
    """Addresses one version of a security configuration."""

    config_id: int
    version: int


class PolicyRequest(VersionRequest):
    """Addresses one security policy inside a configuration version."""

    policy_id: str


# --- Selected hostnames ---


class Hostname(ApiModel):
    hostname: str


class GetSelectedHostnamesRequest(VersionRequest):
    pass


class UpdateSelectedHostnamesRequest(VersionRequest):
    hostname_list: List[Hostname]


class SelectedHostnamesResponse(ApiModel):
    hostname_list: List[Hostname] = []


# --- Penalty box ---


class GetPenaltyBoxRequest(PolicyRequest):
    pass


class UpdatePenaltyBoxRequest(PolicyRequest):
    action: str
    penalty_box_protection: bool


class PenaltyBoxResponse(ApiModel):
    action: str = ""
    penalty_box_protection: bool = False


# --- Protections ---


class GetRateProtectionRequest(PolicyRequest):
    pass


class UpdateRateProtectionRequest(PolicyRequest):
    apply_rate_controls: bool


class ProtectionsResponse(ApiModel):
    apply_api_constraints: bool = False
    apply_application_layer_controls: bool = False
    apply_botman_controls: bool = False
    apply_network_layer_controls: bool = False
    apply_rate_controls: bool = False
    apply_reputation_controls: bool = False
    apply_slow_post_controls: bool = False


# --- Reputation analysis ---


class GetReputationAnalysisRequest(PolicyRequest):
    pass


class UpdateReputationAnalysisRequest(PolicyRequest):
    forward_to_http_header: bool = Field(alias="forwardToHTTPHeader")
    forward_shared_ip_to_http_header_siem: bool = Field(
        alias="forwardSharedIPToHttpHeaderAndSIEM"
    )


class RemoveReputationAnalysisRequest(PolicyRequest):
    pass


class ReputationAnalysisResponse(ApiModel):
    forward_to_http_header: bool = Field(default=False, alias="forwardToHTTPHeader")
    forward_shared_ip_to_http_header_siem: bool = Field(
        default=False, alias="forwardSharedIPToHttpHeaderAndSIEM"
    )


# --- Reputation profiles ---


class GetReputationProfileRequest(VersionRequest):
    reputation_profile_id: int


class CreateReputationProfileRequest(VersionRequest):
    json_payload: Dict[str, Any]


class UpdateReputationProfileRequest(VersionRequest):
    reputation_profile_id: int
    json_payload: Dict[str, Any]


class RemoveReputationProfileRequest(VersionRequest):
    reputation_profile_id: int


class ReputationProfileResponse(ApiModel):
    id: int
    name: str = ""


class GetReputationProfilesRequest(VersionRequest):
    pass


class GetReputationProfilesResponse(ApiModel):
    reputation_profiles: List[ReputationProfileResponse] = []


class GetReputationProfileActionRequest(PolicyRequest):
    reputation_profile_id: int


class UpdateReputationProfileActionRequest(PolicyRequest):
    reputation_profile_id: int
    action: str


class ReputationProfileActionResponse(ApiModel):
    action: str = ""


# --- Match targets ---


class GetMatchTargetRequest(VersionRequest):
    target_id: int


class CreateMatchTargetRequest(VersionRequest):
    json_payload: Dict[str, Any]


class UpdateMatchTargetRequest(VersionRequest):
    target_id: int
    json_payload: Dict[str, Any]


class RemoveMatchTargetRequest(VersionRequest):
    target_id: int


class MatchTargetResponse(ApiModel):
    target_id: int
    type: str = ""


# --- Advanced settings: pragma header ---


class GetPragmaHeaderRequest(VersionRequest):
    # Without a policy id the configuration-wide setting is addressed.
    policy_id: Optional[str] = None


class UpdatePragmaHeaderRequest(VersionRequest):
    policy_id: Optional[str] = None
    json_payload: Dict[str, Any]


class PragmaHeaderResponse(ApiModel):
    action: Optional[str] = None


# --- Evaluation rule condition exceptions ---


class GetRuleConditionExceptionRequest(PolicyRequest):
    rule_id: int


class UpdateRuleConditionExceptionRequest(PolicyRequest):
    rule_id: int
    json_payload: Dict[str, Any]


class RemoveRuleConditionExceptionRequest(PolicyRequest):
    rule_id: int


class RuleConditionExceptionResponse(ApiModel):
    conditions: Optional[List[Dict[str, Any]]] = None
    exception: Optional[Dict[str, Any]] = None


# --- Read-only listings ---


class GetSecurityPoliciesRequest(VersionRequest):
    pass


class SecurityPolicy(ApiModel):
    policy_id: str
    policy_name: str = ""


class GetSecurityPoliciesResponse(ApiModel):
    config_id: Optional[int] = None
    version: Optional[int] = None
    policies: List[SecurityPolicy] = []


class GetCustomRulesRequest(ApiModel):
    config_id: int
    id: Optional[int] = None


class CustomRule(ApiModel):
    id: int
    name: str = ""


class GetCustomRulesResponse(ApiModel):
    custom_rules: List[CustomRule] = []


class GetVersionNotesRequest(VersionRequest):
    pass


class VersionNotesResponse(ApiModel):
    notes: str = ""


class GetExportConfigurationRequest(VersionRequest):
    pass


class ExportNamedItem(ApiModel):
    id: Any
    name: str = ""


class ExportPolicyRef(ApiModel):
    policy_id: str


class ExportWebsiteTarget(ApiModel):
    id: int
    security_policy: ExportPolicyRef


class ExportMatchTargets(ApiModel):
    website_targets: List[ExportWebsiteTarget] = []


class ExportRule(ApiModel):
    id: int
    title: str = ""


class ExportRuleset(ApiModel):
    rules: List[ExportRule] = []


class ExportConfigurationResponse(ApiModel):
    config_id: int
    config_name: str = ""
    version: int
    selected_hosts: List[str] = []
    security_policies: List[ExportNamedItem] = []
    rate_policies: List[ExportNamedItem] = []
    match_targets: ExportMatchTargets = Field(default_factory=ExportMatchTargets)
    reputation_profiles: List[ExportNamedItem] = []
    custom_rules: List[ExportNamedItem] = []
    rulesets: List[ExportRuleset] = []


class AppSecClient(ABC):
    """The appsec operations the mappers depend on."""

    @abstractmethod
    def get_configuration(
        self, request: GetConfigurationRequest
    ) -> GetConfigurationResponse: ...

    @abstractmethod
    def get_configuration_versions(
        self, request: GetConfigurationVersionsRequest
    ) -> GetConfigurationVersionsResponse: ...

    @abstractmethod
    def create_configuration_version_clone(
        self, request: CreateConfigurationVersionCloneRequest
    ) -> CreateConfigurationVersionCloneResponse: ...

    @abstractmethod
    def get_selected_hostnames(
        self, request: GetSelectedHostnamesRequest
    ) -> SelectedHostnamesResponse: ...

    @abstractmethod
    def update_selected_hostnames(
        self, request: UpdateSelectedHostnamesRequest
    ) -> SelectedHostnamesResponse: ...

    @abstractmethod
    def get_penalty_box(self, request: GetPenaltyBoxRequest) -> PenaltyBoxResponse: ...

    @abstractmethod
    def update_penalty_box(
        self, request: UpdatePenaltyBoxRequest
    ) -> PenaltyBoxResponse: ...

    @abstractmethod
    def get_rate_protection(
        self, request: GetRateProtectionRequest
    ) -> ProtectionsResponse: ...

    @abstractmethod
    def update_rate_protection(
        self, request: UpdateRateProtectionRequest
    ) -> ProtectionsResponse: ...

    @abstractmethod
    def get_reputation_analysis(
        self, request: GetReputationAnalysisRequest
    ) -> ReputationAnalysisResponse: ...

    @abstractmethod
    def update_reputation_analysis(
        self, request: UpdateReputationAnalysisRequest
    ) -> ReputationAnalysisResponse: ...

    @abstractmethod
    def remove_reputation_analysis(
        self, request: RemoveReputationAnalysisRequest
    ) -> ReputationAnalysisResponse: ...

    @abstractmethod
    def get_reputation_profiles(
        self, request: GetReputationProfilesRequest
    ) -> GetReputationProfilesResponse: ...

    @abstractmethod
    def get_reputation_profile(
        self, request: GetReputationProfileRequest
    ) -> ReputationProfileResponse: ...

    @abstractmethod
    def create_reputation_profile(
        self, request: CreateReputationProfileRequest
    ) -> ReputationProfileResponse: ...

    @abstractmethod
    def update_reputation_profile(
        self, request: UpdateReputationProfileRequest
    ) -> ReputationProfileResponse: ...

    @abstractmethod
    def remove_reputation_profile(
        self, request: RemoveReputationProfileRequest
    ) -> None: ...

    @abstractmethod
    def get_reputation_profile_action(
        self, request: GetReputationProfileActionRequest
    ) -> ReputationProfileActionResponse: ...

    @abstractmethod
    def update_reputation_profile_action(
        self, request: UpdateReputationProfileActionRequest
    ) -> ReputationProfileActionResponse: ...

    @abstractmethod
    def get_match_target(self, request: GetMatchTargetRequest) -> MatchTargetResponse: ...

    @abstractmethod
    def create_match_target(
        self, request: CreateMatchTargetRequest
    ) -> MatchTargetResponse: ...

    @abstractmethod
    def update_match_target(
        self, request: UpdateMatchTargetRequest
    ) -> MatchTargetResponse: ...

    @abstractmethod
    def remove_match_target(self, request: RemoveMatchTargetRequest) -> None: ...

    @abstractmethod
    def get_pragma_header(
        self, request: GetPragmaHeaderRequest
    ) -> PragmaHeaderResponse: ...

    @abstractmethod
    def update_pragma_header(
        self, request: UpdatePragmaHeaderRequest
    ) -> PragmaHeaderResponse: ...

    @abstractmethod
    def get_rule_condition_exception(
        self, request: GetRuleConditionExceptionRequest
    ) -> RuleConditionExceptionResponse: ...

    @abstractmethod
    def update_rule_condition_exception(
        self, request: UpdateRuleConditionExceptionRequest
    ) -> RuleConditionExceptionResponse: ...

    @abstractmethod
    def remove_rule_condition_exception(
        self, request: RemoveRuleConditionExceptionRequest
    ) -> None: ...

    @abstractmethod
    def get_security_policies(
        self, request: GetSecurityPoliciesRequest
    ) -> GetSecurityPoliciesResponse: ...

    @abstractmethod
    def get_custom_rules(self, request: GetCustomRulesRequest) -> GetCustomRulesResponse: ...

    @abstractmethod
    def get_version_notes(self, request: GetVersionNotesRequest) -> VersionNotesResponse: ...

    @abstractmethod
    def get_export_configuration(
        self, request: GetExportConfigurationRequest
    ) -> ExportConfigurationResponse: ...


def _path_params(request: ApiModel) -> Dict[str, Any]:
    return request.model_dump()


def _policy_or_version_path(request, suffix: str) -> str:
    if request.policy_id is None:
        return VERSION_PATH + suffix
    return POLICY_PATH + suffix


class AppSecHttpClient(HttpClient, AppSecClient):
    """`AppSecClient` over the appsec REST API."""

    _PATH_FIELDS = {"config_id", "version", "policy_id"}

    def get_configuration(self, request):
        return self._get(BASE_PATH, GetConfigurationResponse, _path_params(request))

    def get_configuration_versions(self, request):
        return self._get(
            BASE_PATH + "/versions",
            GetConfigurationVersionsResponse,
            _path_params(request),
        )

    def create_configuration_version_clone(self, request):
        return self._write(
            "POST",
            BASE_PATH + "/versions",
            CreateConfigurationVersionCloneResponse,
            data=request.to_body(exclude={"config_id"}),
            path_params=_path_params(request),
        )

    def get_selected_hostnames(self, request):
        return self._get(
            VERSION_PATH + "/selected-hostnames",
            SelectedHostnamesResponse,
            _path_params(request),
        )

    def update_selected_hostnames(self, request):
        return self._write(
            "PUT",
            VERSION_PATH + "/selected-hostnames",
            SelectedHostnamesResponse,
            data=request.to_body(exclude=self._PATH_FIELDS),
            path_params=_path_params(request),
        )

    def get_penalty_box(self, request):
        return self._get(
            POLICY_PATH + "/penalty-box", PenaltyBoxResponse, _path_params(request)
        )

    def update_penalty_box(self, request):
        return self._write(
            "PUT",
            POLICY_PATH + "/penalty-box",
            PenaltyBoxResponse,
            data=request.to_body(exclude=self._PATH_FIELDS),
            path_params=_path_params(request),
        )

    def get_rate_protection(self, request):
        return self._get(
            POLICY_PATH + "/protections", ProtectionsResponse, _path_params(request)
        )

    def update_rate_protection(self, request):
        return self._write(
            "PUT",
            POLICY_PATH + "/protections",
            ProtectionsResponse,
            data=request.to_body(exclude=self._PATH_FIELDS),
            path_params=_path_params(request),
        )

    def get_reputation_analysis(self, request):
        return self._get(
            POLICY_PATH + "/reputation-analysis",
            ReputationAnalysisResponse,
            _path_params(request),
        )

    def update_reputation_analysis(self, request):
        return self._write(
            "PUT",
            POLICY_PATH + "/reputation-analysis",
            ReputationAnalysisResponse,
            data=request.to_body(exclude=self._PATH_FIELDS),
            path_params=_path_params(request),
        )

    def remove_reputation_analysis(self, request):
        return self._write(
            "DELETE",
            POLICY_PATH + "/reputation-analysis",
            ReputationAnalysisResponse,
            path_params=_path_params(request),
        )

    def get_reputation_profiles(self, request):
        return self._get(
            VERSION_PATH + "/reputation-profiles",
            GetReputationProfilesResponse,
            _path_params(request),
        )

    def get_reputation_profile(self, request):
        return self._get(
            VERSION_PATH + "/reputation-profiles/{reputation_profile_id}",
            ReputationProfileResponse,
            _path_params(request),
        )

    def create_reputation_profile(self, request):
        return self._write(
            "POST",
            VERSION_PATH + "/reputation-profiles",
            ReputationProfileResponse,
            data=request.json_payload,
            path_params=_path_params(request),
        )

    def update_reputation_profile(self, request):
        return self._write(
            "PUT",
            VERSION_PATH + "/reputation-profiles/{reputation_profile_id}",
            ReputationProfileResponse,
            data=request.json_payload,
            path_params=_path_params(request),
        )

    def remove_reputation_profile(self, request):
        return self._write(
            "DELETE",
            VERSION_PATH + "/reputation-profiles/{reputation_profile_id}",
            None,
            path_params=_path_params(request),
        )

    def get_reputation_profile_action(self, request):
        return self._get(
            POLICY_PATH + "/reputation-profiles/{reputation_profile_id}",
            ReputationProfileActionResponse,
            _path_params(request),
        )

    def update_reputation_profile_action(self, request):
        return self._write(
            "PUT",
            POLICY_PATH + "/reputation-profiles/{reputation_profile_id}",
            ReputationProfileActionResponse,
            data=request.to_body(
                exclude=self._PATH_FIELDS | {"reputation_profile_id"}
            ),
            path_params=_path_params(request),
        )

    def get_match_target(self, request):
        return self._get(
            VERSION_PATH + "/match-targets/{target_id}",
            MatchTargetResponse,
            _path_params(request),
        )

    def create_match_target(self, request):
        return self._write(
            "POST",
            VERSION_PATH + "/match-targets",
            MatchTargetResponse,
            data=request.json_payload,
            path_params=_path_params(request),
        )

    def update_match_target(self, request):
        return self._write(
            "PUT",
            VERSION_PATH + "/match-targets/{target_id}",
            MatchTargetResponse,
            data=request.json_payload,
            path_params=_path_params(request),
        )

    def remove_match_target(self, request):
        return self._write(
            "DELETE",
            VERSION_PATH + "/match-targets/{target_id}",
            None,
            path_params=_path_params(request),
        )

    def get_pragma_header(self, request):
        return self._get(
            _policy_or_version_path(request, "/advanced-settings/pragma-header"),
            PragmaHeaderResponse,
            _path_params(request),
        )

    def update_pragma_header(self, request):
        return self._write(
            "PUT",
            _policy_or_version_path(request, "/advanced-settings/pragma-header"),
            PragmaHeaderResponse,
            data=request.json_payload,
            path_params=_path_params(request),
        )

    def get_rule_condition_exception(self, request):
        return self._get(
            POLICY_PATH + "/eval-rules/{rule_id}/condition-exception",
            RuleConditionExceptionResponse,
            _path_params(request),
        )

    def update_rule_condition_exception(self, request):
        return self._write(
            "PUT",
            POLICY_PATH + "/eval-rules/{rule_id}/condition-exception",
            RuleConditionExceptionResponse,
            data=request.json_payload,
            path_params=_path_params(request),
        )

    def remove_rule_condition_exception(self, request):
        return self._write(
            "DELETE",
            POLICY_PATH + "/eval-rules/{rule_id}/condition-exception",
            None,
            path_params=_path_params(request),
        )

    def get_security_policies(self, request):
        return self._get(
            VERSION_PATH + "/security-policies",
            GetSecurityPoliciesResponse,
            _path_params(request),
        )

    def get_custom_rules(self, request):
        response = self._get(
            BASE_PATH + "/custom-rules", GetCustomRulesResponse, _path_params(request)
        )
        if request.id is not None:
            response.custom_rules = [
                r for r in response.custom_rules if r.id == request.id
            ]
        return response

    def get_version_notes(self, request):
        return self._get(
            VERSION_PATH + "/version-notes",
            VersionNotesResponse,
            _path_params(request),
        )

    def get_export_configuration(self, request):
        return self._get(
            "/appsec/v1/export/configs/{config_id}/versions/{version}",
            ExportConfigurationResponse,
            _path_params(request),
        )
