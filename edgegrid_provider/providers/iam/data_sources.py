"""Read-only lookups over the IAM API."""

from typing import Any, Dict, List

from edgegrid_provider.client.iam import (
    Group,
    ListGroupsRequest,
    ListRolesRequest,
    ListStatesRequest,
    Role,
)
from edgegrid_provider.interfaces.resource import BaseDataSource
from edgegrid_provider.models import Attribute, AttrType
from edgegrid_provider.resource_data import ResourceData

# Sub-groups deeper than this are not reported.
GROUPS_NESTING_DEPTH = 50


class IAMDataSource(BaseDataSource):
    @property
    def iam(self):
        return self.context.iam


class Countries(IAMDataSource):
    type_name = "iam_countries"
    description = "List all the possible countries that Akamai supports."
    schema = {
        "countries": Attribute(
            AttrType.SET,
            computed=True,
            elem=AttrType.STRING,
            description="Supported countries.",
        ),
    }

    def read(self, d: ResourceData) -> None:
        self.logger.debug("Fetching supported countries")
        countries = self.call(self.iam.supported_countries)
        d.set("countries", countries)
        d.set_id("countries")


class States(IAMDataSource):
    type_name = "iam_states"
    description = "List the states or provinces of a country."
    schema = {
        "country": Attribute(
            AttrType.STRING, required=True, description="Country to list the states of."
        ),
        "states": Attribute(
            AttrType.LIST,
            computed=True,
            elem=AttrType.STRING,
            description="States of the country.",
        ),
    }

    def read(self, d: ResourceData) -> None:
        d.validate()
        country = d.get_str("country")
        states = self.call(self.iam.list_states, ListStatesRequest(country=country))
        d.set("states", states)
        d.set_id(country)


def flatten_role(role: Role) -> Dict[str, Any]:
    return {
        "role_id": role.role_id,
        "name": role.role_name,
        "description": role.role_description,
        "type": role.role_type,
        "time_created": role.created_date,
        "time_modified": role.modified_date,
        "created_by": role.created_by,
        "modified_by": role.modified_by,
    }


class Roles(IAMDataSource):
    type_name = "iam_roles"
    description = "List roles, optionally those that apply to one group."
    schema = {
        "group_id": Attribute(
            AttrType.INT, optional=True, description="Only list roles granted on this group."
        ),
        "roles": Attribute(
            AttrType.LIST,
            computed=True,
            elem=AttrType.DICT,
            description="The roles, each with its id, name, description and audit fields.",
        ),
    }

    def read(self, d: ResourceData) -> None:
        d.validate()
        roles = self.call(
            self.iam.list_roles, ListRolesRequest(group_id=d.get("group_id"))
        )
        d.set("roles", [flatten_role(r) for r in roles])
        d.set_id("iam_roles")


def flatten_groups(groups: List[Group], depth: int = 1) -> List[Dict[str, Any]]:
    """Converts groups to nested dictionaries, down to `GROUPS_NESTING_DEPTH` levels."""
    flattened = []
    for group in groups:
        item = {
            "group_id": group.group_id,
            "name": group.group_name,
            "parent_group_id": group.parent_group_id,
            "time_created": group.created_date,
            "time_modified": group.modified_date,
            "created_by": group.created_by,
            "modified_by": group.modified_by,
            "sub_groups": [],
        }
        if group.sub_groups and depth < GROUPS_NESTING_DEPTH:
            item["sub_groups"] = flatten_groups(group.sub_groups, depth + 1)
        flattened.append(item)
    return flattened


class Groups(IAMDataSource):
    type_name = "iam_groups"
    description = "List the groups of the account, with their sub-groups."
    schema = {
        "groups": Attribute(
            AttrType.LIST,
            computed=True,
            elem=AttrType.DICT,
            description="Top-level groups; each carries its `sub_groups`.",
        ),
    }

    def read(self, d: ResourceData) -> None:
        groups = self.call(self.iam.list_groups, ListGroupsRequest())
        d.set("groups", flatten_groups(groups))
        d.set_id("iam_groups")
