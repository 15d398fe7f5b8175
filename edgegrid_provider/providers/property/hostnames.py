from typing import Any, Dict

from edgegrid_provider.client.papi import (
    GetLatestVersionRequest,
    GetPropertyVersionHostnamesRequest,
    PropertyHostname,
)
from edgegrid_provider.helpers import (
    CONTRACT_PREFIX,
    GROUP_PREFIX,
    PROPERTY_PREFIX,
    add_prefix,
)
from edgegrid_provider.interfaces.resource import BaseDataSource
from edgegrid_provider.models import Attribute, AttrType
from edgegrid_provider.resource_data import ResourceData


def _not_blank(value: str) -> None:
    if not value.strip():
        raise ValueError("must not be blank")


def flatten_hostname(hostname: PropertyHostname) -> Dict[str, Any]:
    item = {
        "cname_type": hostname.cname_type,
        "edge_hostname_id": hostname.edge_hostname_id,
        "cname_from": hostname.cname_from,
        "cname_to": hostname.cname_to,
        "cert_provisioning_type": hostname.cert_provisioning_type,
        "cert_status": [],
    }
    status = hostname.cert_status
    if status is not None:
        item["cert_status"] = [
            {
                "hostname": status.validation_cname.hostname,
                "target": status.validation_cname.target,
                "staging_status": status.staging[0].status if status.staging else "",
                "production_status": status.production[0].status
                if status.production
                else "",
            }
        ]
    return item


class PropertyHostnames(BaseDataSource):
    """
    The hostnames of the latest version of a property.

    Ids may be given with or without their `grp_`, `ctr_` and `prp_`
    prefixes.
    """

    type_name = "property_hostnames"
    description = "List the hostnames of the latest version of a property."
    schema = {
        "group_id": Attribute(AttrType.STRING, required=True, validate=_not_blank),
        "contract_id": Attribute(AttrType.STRING, required=True, validate=_not_blank),
        "property_id": Attribute(
            AttrType.STRING,
            required=True,
            validate=_not_blank,
            normalize=lambda v: add_prefix(v, PROPERTY_PREFIX),
        ),
        "version": Attribute(
            AttrType.INT,
            computed=True,
            description="The latest version of the property, which is always the one read.",
        ),
        "hostnames": Attribute(
            AttrType.LIST,
            computed=True,
            elem=AttrType.DICT,
            description="List of hostnames.",
        ),
    }

    def read(self, d: ResourceData) -> None:
        d.validate()
        group_id = add_prefix(d.get_str("group_id"), GROUP_PREFIX)
        contract_id = add_prefix(d.get_str("contract_id"), CONTRACT_PREFIX)
        property_id = add_prefix(d.get_str("property_id"), PROPERTY_PREFIX)

        latest = self.call(
            self.context.papi.get_latest_version,
            GetLatestVersionRequest(
                property_id=property_id, contract_id=contract_id, group_id=group_id
            ),
        )
        version = latest.version.property_version
        d.set("version", version)

        self.logger.debug("fetching property hostnames")
        response = self.call(
            self.context.papi.get_property_version_hostnames,
            GetPropertyVersionHostnamesRequest(
                property_id=property_id,
                property_version=version,
                contract_id=latest.contract_id,
                group_id=latest.group_id,
                include_cert_status=True,
            ),
        )
        d.set("property_id", property_id)
        d.set("hostnames", [flatten_hostname(h) for h in response.hostnames.items])
        d.set_id(f"{property_id}{version}")
