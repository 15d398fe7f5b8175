"""The identity and access management (IAM) API."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import Field, TypeAdapter, ValidationError

from edgegrid_provider.client.base import ApiModel, HttpClient
from edgegrid_provider.errors import ApiError

USER_ADMIN_PATH = "/identity-management/v2/user-admin"


class AuthGrant(ApiModel):
    """A role granted to a user on a group, optionally inherited by sub-groups."""

    group_id: int
    group_name: Optional[str] = None
    role_id: Optional[int] = None
    role_name: Optional[str] = None
    is_blocked: bool = False
    sub_groups: List["AuthGrant"] = []


class UserBasicInfo(ApiModel):
    first_name: str
    last_name: str
    user_name: str = ""
    email: str
    phone: str = ""
    time_zone: str = ""
    job_title: str = ""
    tfa_enabled: bool = False
    secondary_email: str = ""
    mobile_phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    contact_type: str = ""
    preferred_language: str = ""
    session_timeout: Optional[int] = Field(default=None, alias="sessionTimeOut")


class User(UserBasicInfo):
    identity_id: str = Field(alias="uiIdentityId")
    is_locked: bool = False
    last_login_date: str = ""
    password_expiry_date: str = ""
    tfa_configured: bool = False
    email_update_pending: bool = False
    auth_grants: List[AuthGrant] = []


def _empty_notifications() -> Dict[str, Any]:
    return {"options": {"proactive": [], "upgrade": []}}


class CreateUserRequest(ApiModel):
    user: UserBasicInfo
    auth_grants: List[AuthGrant]
    send_email: bool = True
    notifications: Dict[str, Any] = Field(default_factory=_empty_notifications)


class GetUserRequest(ApiModel):
    identity_id: str
    actions: bool = False
    auth_grants: bool = True
    notifications: bool = False


class UpdateUserInfoRequest(ApiModel):
    identity_id: str
    user: UserBasicInfo


class UpdateUserAuthGrantsRequest(ApiModel):
    identity_id: str
    auth_grants: List[AuthGrant]


class RemoveUserRequest(ApiModel):
    identity_id: str


class ListStatesRequest(ApiModel):
    country: str


class ListRolesRequest(ApiModel):
    group_id: Optional[int] = None
    actions: bool = False
    users: bool = False
    ignore_context: bool = False


class Role(ApiModel):
    role_id: int
    role_name: str
    role_description: str = ""
    role_type: str = ""
    created_by: str = ""
    created_date: str = ""
    modified_by: str = ""
    modified_date: str = ""


class ListGroupsRequest(ApiModel):
    actions: bool = False


class Group(ApiModel):
    group_id: int
    group_name: str
    parent_group_id: Optional[int] = None
    created_by: str = ""
    created_date: str = ""
    modified_by: str = ""
    modified_date: str = ""
    sub_groups: List["Group"] = []


class IAMClient(ABC):
    """The IAM operations the mappers depend on."""

    @abstractmethod
    def create_user(self, request: CreateUserRequest) -> User: ...

    @abstractmethod
    def get_user(self, request: GetUserRequest) -> User: ...

    @abstractmethod
    def update_user_info(self, request: UpdateUserInfoRequest) -> UserBasicInfo: ...

    @abstractmethod
    def update_user_auth_grants(
        self, request: UpdateUserAuthGrantsRequest
    ) -> List[AuthGrant]: ...

    @abstractmethod
    def remove_user(self, request: RemoveUserRequest) -> None: ...

    @abstractmethod
    def supported_countries(self) -> List[str]: ...

    @abstractmethod
    def list_states(self, request: ListStatesRequest) -> List[str]: ...

    @abstractmethod
    def list_roles(self, request: ListRolesRequest) -> List[Role]: ...

    @abstractmethod
    def list_groups(self, request: ListGroupsRequest) -> List[Group]: ...


def _parse_list(item_type, body) -> List[Any]:
    try:
        return TypeAdapter(List[item_type]).validate_python(body or [])
    except ValidationError as e:
        raise ApiError(f"unexpected list of {item_type.__name__}: {e}")


class IAMHttpClient(HttpClient, IAMClient):
    """`IAMClient` over the IAM user-administration REST API."""

    def create_user(self, request):
        body = request.user.to_body()
        body["authGrants"] = [g.to_body() for g in request.auth_grants]
        body["notifications"] = request.notifications
        return self._write(
            "POST",
            USER_ADMIN_PATH + "/ui-identities",
            User,
            data=body,
            query_params={"sendEmail": request.send_email},
        )

    def get_user(self, request):
        return self._get(
            USER_ADMIN_PATH + "/ui-identities/{identity_id}",
            User,
            path_params={"identity_id": request.identity_id},
            query_params={
                "actions": request.actions,
                "authGrants": request.auth_grants,
                "notifications": request.notifications,
            },
        )

    def update_user_info(self, request):
        return self._write(
            "PUT",
            USER_ADMIN_PATH + "/ui-identities/{identity_id}/basic-info",
            UserBasicInfo,
            data=request.user.to_body(),
            path_params={"identity_id": request.identity_id},
        )

    def update_user_auth_grants(self, request):
        body = self.session.send_request(
            "PUT",
            USER_ADMIN_PATH + "/ui-identities/{identity_id}/auth-grants",
            data=[g.to_body() for g in request.auth_grants],
            path_params={"identity_id": request.identity_id},
        )
        return _parse_list(AuthGrant, body)

    def remove_user(self, request):
        self.session.send_request(
            "DELETE",
            USER_ADMIN_PATH + "/ui-identities/{identity_id}",
            path_params={"identity_id": request.identity_id},
        )

    def supported_countries(self):
        body = self.session.send_request(
            "GET", USER_ADMIN_PATH + "/common/countries"
        )
        return _parse_list(str, body)

    def list_states(self, request):
        body = self.session.send_request(
            "GET",
            USER_ADMIN_PATH + "/common/countries/{country}/states",
            path_params={"country": request.country},
        )
        return _parse_list(str, body)

    def list_roles(self, request):
        body = self.session.send_request(
            "GET",
            USER_ADMIN_PATH + "/roles",
            query_params={
                "groupId": request.group_id,
                "actions": request.actions,
                "users": request.users,
                "ignoreContext": request.ignore_context,
            },
        )
        return _parse_list(Role, body)

    def list_groups(self, request):
        body = self.session.send_request(
            "GET",
            USER_ADMIN_PATH + "/groups",
            query_params={"actions": request.actions},
        )
        return _parse_list(Group, body)
