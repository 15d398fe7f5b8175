import json
import re
from typing import Any, List

from pydantic import TypeAdapter, ValidationError

from edgegrid_provider.client.iam import (
    AuthGrant,
    CreateUserRequest,
    GetUserRequest,
    RemoveUserRequest,
    UpdateUserAuthGrantsRequest,
    UpdateUserInfoRequest,
    UserBasicInfo,
)
from edgegrid_provider.errors import ConfigurationError, UpstreamError
from edgegrid_provider.helpers import (
    canonical_phone,
    equivalent_phone,
    validate_phone,
)
from edgegrid_provider.identity import CompositeKey, KeyField
from edgegrid_provider.interfaces.resource import BaseResource
from edgegrid_provider.models import Attribute, AttrType
from edgegrid_provider.resource_data import ResourceData, changed_attributes

_AUTH_GRANTS = TypeAdapter(List[AuthGrant])

# Attributes sent through the basic-info endpoint on update.
BASIC_INFO_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "time_zone",
    "job_title",
    "enable_tfa",
    "secondary_email",
    "mobile_phone",
    "address",
    "city",
    "state",
    "zip_code",
    "country",
    "contact_type",
    "preferred_language",
    "session_timeout",
)

# Patterns in an API error and the data source that lists valid values.
ERROR_ADVICE = (
    (
        re.compile(r"\b(preferredLanguage|[pP]referred [lL]anguage)\b"),
        'Tip: Use the "iam_supported_langs" data source to get possible values for "preferred_language"',
    ),
    (
        re.compile(r"\b(contactType|[cC]ontact [tT]ype)\b"),
        'Tip: Use the "iam_contact_types" data source to get possible values for "contact_type"',
    ),
    (
        re.compile(r"\b[cC]ountry\b"),
        'Tip: Use the "iam_countries" data source to get possible values for "country"',
    ),
    (
        re.compile(r"\b(sessionTimeOut|[sS]ession [tT]ime ?[oO]ut)\b"),
        'Tip: Use the "iam_timeout_policies" data source to get possible values for "session_timeout"',
    ),
    (
        re.compile(r"\b[sS]tate\b"),
        'Tip: Use the "iam_states" data source to get possible values for "state"',
    ),
)


def error_advice(error: Exception) -> str:
    """Returns a hint for the first known field an API error complains about."""
    text = str(error)
    for pattern, advice in ERROR_ADVICE:
        if pattern.search(text):
            return advice
    return ""


def parse_auth_grants(value: Any) -> List[AuthGrant]:
    if isinstance(value, str):
        value = json.loads(value)
    return _AUTH_GRANTS.validate_python(value)


def validate_auth_grants(value: Any) -> None:
    try:
        grants = parse_auth_grants(value)
    except (ValueError, ValidationError) as e:
        raise ValueError(f"auth_grants_json is not valid: {e}") from e
    if not grants:
        raise ValueError("auth_grants_json must contain at least one entry")


def canonical_auth_grants(value: Any) -> str:
    """Re-encodes auth grants so equal grants always have the same text."""
    grants = parse_auth_grants(value)
    return json.dumps(
        [g.model_dump(by_alias=True, exclude_none=True) for g in grants],
        separators=(",", ":"),
    )


def equivalent_auth_grants(old: Any, new: Any) -> bool:
    try:
        return canonical_auth_grants(old) == canonical_auth_grants(new)
    except (ValueError, ValidationError):
        return old == new


def _lower(value: str) -> str:
    return value.lower()


def _equivalent_email(old: str, new: str) -> bool:
    return old.lower() == new.lower()


def _string(description: str, **kwargs) -> Attribute:
    return Attribute(AttrType.STRING, description=description, **kwargs)


class User(BaseResource):
    """
    A user of the account, with basic information and role grants.

    The email address cannot change once the user exists. Updates go through
    two endpoints, one for basic information and one for auth grants, and
    each is only called when its attributes changed.
    """

    type_name = "iam_user"
    description = "Manage a user in your account."
    key = CompositeKey(KeyField("identity_id", str))
    immutable = ("email",)
    schema = {
        # Inputs - required
        "first_name": _string("The user's first name.", required=True),
        "last_name": _string("The user's surname.", required=True),
        "email": _string(
            "The user's email address.",
            required=True,
            normalize=_lower,
            equivalent=_equivalent_email,
        ),
        "country": _string("As part of the user's location, the country.", required=True),
        "phone": _string(
            "The user's main phone number, in the form (###) ###-####.",
            required=True,
            validate=validate_phone,
            normalize=canonical_phone,
            equivalent=equivalent_phone,
        ),
        "enable_tfa": Attribute(
            AttrType.BOOL,
            required=True,
            description="Whether two-factor authentication is enabled.",
        ),
        "auth_grants_json": Attribute(
            AttrType.JSON,
            required=True,
            description="A user's per-group role assignments, in JSON form.",
            validate=validate_auth_grants,
            normalize=canonical_auth_grants,
            equivalent=equivalent_auth_grants,
        ),
        # Inputs - optional
        "contact_type": _string("The contact type of the user.", optional=True, computed=True),
        "job_title": _string("The user's position at the company.", optional=True),
        "time_zone": _string("The user's time zone.", optional=True, computed=True),
        "secondary_email": _string(
            "The user's secondary email address.",
            optional=True,
            normalize=_lower,
            equivalent=_equivalent_email,
        ),
        "mobile_phone": _string(
            "The user's mobile phone number, in the form (###) ###-####.",
            optional=True,
            validate=validate_phone,
            normalize=canonical_phone,
            equivalent=equivalent_phone,
        ),
        "address": _string("The user's street address.", optional=True, computed=True),
        "city": _string("The user's city.", optional=True),
        "state": _string("The user's state.", optional=True),
        "zip_code": _string("The user's five-digit ZIP code.", optional=True),
        "preferred_language": _string(
            "The user's language.", optional=True, computed=True
        ),
        "session_timeout": Attribute(
            AttrType.INT,
            optional=True,
            computed=True,
            description="The number of seconds it takes for the user's session to time out.",
        ),
        # Purely computed
        "user_name": _string("A user's username.", computed=True),
        "is_locked": Attribute(
            AttrType.BOOL, computed=True, description="Whether the user is locked out."
        ),
        "last_login": _string("The last time the user logged in.", computed=True),
        "password_expired_after": _string(
            "The date the user's password expires.", computed=True
        ),
        "tfa_configured": Attribute(
            AttrType.BOOL,
            computed=True,
            description="Whether two-factor authentication is configured.",
        ),
        "email_update_pending": Attribute(
            AttrType.BOOL,
            computed=True,
            description="Whether a change of the email address awaits confirmation.",
        ),
    }

    @property
    def iam(self):
        return self.context.iam

    def create(self, d: ResourceData) -> None:
        d.validate()
        request = CreateUserRequest(
            user=self._basic_info(d),
            auth_grants=parse_auth_grants(d.get("auth_grants_json")),
            send_email=True,
        )
        user = self._call_with_advice(self.iam.create_user, request)
        d.set_id(user.identity_id)
        self.read(d)

    def read(self, d: ResourceData) -> None:
        identity_id = self.decode_id(d)["identity_id"]
        user = self.call(
            self.iam.get_user, GetUserRequest(identity_id=identity_id, auth_grants=True)
        )

        grants = None
        if user.auth_grants:
            grants = [g.model_dump(by_alias=True, exclude_none=True) for g in user.auth_grants]

        d.set_attrs(
            {
                "first_name": user.first_name,
                "last_name": user.last_name,
                "user_name": user.user_name,
                "email": user.email,
                "phone": user.phone,
                "time_zone": user.time_zone,
                "job_title": user.job_title,
                "enable_tfa": user.tfa_enabled,
                "secondary_email": user.secondary_email,
                "mobile_phone": user.mobile_phone,
                "address": user.address,
                "city": user.city,
                "state": user.state,
                "zip_code": user.zip_code,
                "country": user.country,
                "contact_type": user.contact_type,
                "preferred_language": user.preferred_language,
                "is_locked": user.is_locked,
                "last_login": user.last_login_date,
                "password_expired_after": user.password_expiry_date,
                "tfa_configured": user.tfa_configured,
                "email_update_pending": user.email_update_pending,
                "session_timeout": user.session_timeout or 0,
                "auth_grants_json": grants,
            }
        )

    def update(self, d: ResourceData) -> None:
        d.validate()
        identity_id = self.decode_id(d)["identity_id"]

        current = ResourceData(self.schema, id=d.id)
        self.read(current)
        changed = changed_attributes(d, current)
        if "email" in changed:
            raise ConfigurationError("email", "cannot change email address")

        needs_read = False
        if any(name in changed for name in BASIC_INFO_FIELDS):
            request = UpdateUserInfoRequest(
                identity_id=identity_id,
                user=self._basic_info(d, user_name=current.get("user_name") or ""),
            )
            self._call_with_advice(self.iam.update_user_info, request)
            needs_read = True

        if "auth_grants_json" in changed:
            request = UpdateUserAuthGrantsRequest(
                identity_id=identity_id,
                auth_grants=parse_auth_grants(d.get("auth_grants_json")),
            )
            self.call(self.iam.update_user_auth_grants, request)
            needs_read = True

        if needs_read:
            self.read(d)

    def delete(self, d: ResourceData) -> None:
        identity_id = self.decode_id(d)["identity_id"]
        self.call(self.iam.remove_user, RemoveUserRequest(identity_id=identity_id))
        d.clear_id()

    def _basic_info(self, d: ResourceData, user_name: str = "") -> UserBasicInfo:
        def text(name):
            return d.get(name) or ""

        return UserBasicInfo(
            first_name=d.get_str("first_name"),
            last_name=d.get_str("last_name"),
            user_name=user_name,
            email=d.get_str("email").lower(),
            phone=canonical_phone(text("phone")),
            time_zone=text("time_zone"),
            job_title=text("job_title"),
            tfa_enabled=d.get_bool("enable_tfa"),
            secondary_email=text("secondary_email").lower(),
            mobile_phone=canonical_phone(text("mobile_phone")),
            address=text("address"),
            city=text("city"),
            state=text("state"),
            zip_code=text("zip_code"),
            country=text("country"),
            contact_type=text("contact_type"),
            preferred_language=text("preferred_language"),
            session_timeout=d.get("session_timeout") or None,
        )

    def _call_with_advice(self, method, request):
        try:
            return self.call(method, request)
        except UpstreamError as e:
            advice = error_advice(e.cause)
            if not advice:
                raise
            raise UpstreamError(e.operation, e.resource_type, e.cause, advice) from e.cause
