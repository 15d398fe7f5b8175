"""The property manager API (PAPI), limited to property version hostnames."""

from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import Field

from edgegrid_provider.client.base import ApiModel, HttpClient

BASE_PATH = "/papi/v1/properties/{property_id}"


class GetLatestVersionRequest(ApiModel):
    property_id: str
    contract_id: str
    group_id: str


class PropertyVersion(ApiModel):
    property_version: int
    staging_status: str = ""
    production_status: str = ""


class PropertyVersionItems(ApiModel):
    items: List[PropertyVersion] = []


class GetLatestVersionResponse(ApiModel):
    property_id: str
    contract_id: str
    group_id: str
    versions: PropertyVersionItems = Field(default_factory=PropertyVersionItems)

    @property
    def version(self) -> PropertyVersion:
        return self.versions.items[0]


class GetPropertyVersionHostnamesRequest(ApiModel):
    property_id: str
    property_version: int
    contract_id: str
    group_id: str
    include_cert_status: bool = False


class CertStatusItem(ApiModel):
    status: str = ""


class ValidationCname(ApiModel):
    hostname: str = ""
    target: str = ""


class CertStatus(ApiModel):
    validation_cname: ValidationCname = Field(default_factory=ValidationCname)
    staging: List[CertStatusItem] = []
    production: List[CertStatusItem] = []


class PropertyHostname(ApiModel):
    cname_type: str = ""
    edge_hostname_id: str = ""
    cname_from: str = ""
    cname_to: str = ""
    cert_provisioning_type: str = ""
    cert_status: Optional[CertStatus] = None


class HostnameItems(ApiModel):
    items: List[PropertyHostname] = []


class GetPropertyVersionHostnamesResponse(ApiModel):
    property_id: str = ""
    property_version: int = 0
    hostnames: HostnameItems = Field(default_factory=HostnameItems)


class PapiClient(ABC):
    @abstractmethod
    def get_latest_version(
        self, request: GetLatestVersionRequest
    ) -> GetLatestVersionResponse: ...

    @abstractmethod
    def get_property_version_hostnames(
        self, request: GetPropertyVersionHostnamesRequest
    ) -> GetPropertyVersionHostnamesResponse: ...


class PapiHttpClient(HttpClient, PapiClient):
    """`PapiClient` over the property manager REST API."""

    def get_latest_version(self, request):
        return self._get(
            BASE_PATH + "/versions/latest",
            GetLatestVersionResponse,
            path_params={"property_id": request.property_id},
            query_params={
                "contractId": request.contract_id,
                "groupId": request.group_id,
            },
        )

    def get_property_version_hostnames(self, request):
        return self._get(
            BASE_PATH + "/versions/{property_version}/hostnames",
            GetPropertyVersionHostnamesResponse,
            path_params={
                "property_id": request.property_id,
                "property_version": request.property_version,
            },
            query_params={
                "contractId": request.contract_id,
                "groupId": request.group_id,
                "includeCertStatus": request.include_cert_status,
            },
        )
