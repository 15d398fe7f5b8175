"""Shared helper functions and constants."""

import re
import sys

AUTH_OPTIONS = {
    "access_token": {
        "description": "An access token for the EdgeGrid APIs.",
        "required": True,
        "type": "str",
        "no_log": True,  # Sensitive information, do not log
    },
    "api_url": {
        "description": "Fully qualified base URL of the EdgeGrid API host.",
        "required": True,
        "type": "str",
    },
    "account_switch_key": {
        "description": "Account to act on when the credentials can manage several accounts.",
        "type": "str",
    },
    "timeout": {
        "description": "Timeout in seconds for each API request.",
        "default": 30,
        "type": "int",
    },
    "validate_certs": {
        "description": "Whether to validate the TLS certificate of the API host.",
        "default": True,
        "type": "bool",
    },
}

AUTH_FIXTURE = {
    "access_token": "akab-0123456789abcdef-0123456789abcdef",
    "api_url": "https://akab-host.luna.akamaiapis.net",
    "account_switch_key": None,
    "timeout": 30,
    "validate_certs": True,
}

STATE_OPTIONS = {
    "state": {
        "description": "Should the resource be present or absent.",
        "choices": ["present", "absent"],
        "default": "present",
        "type": "str",
    },
    "id": {
        "description": "Identifier of an existing object, e.g. `43253:7:AAAA_81230`. Derived from the key attributes when omitted.",
        "type": "str",
    },
}

# Prefixes the property API expects on its resource ids.
GROUP_PREFIX = "grp_"
CONTRACT_PREFIX = "ctr_"
PROPERTY_PREFIX = "prp_"

PHONE_PATTERN = re.compile(r"^\(\d{3}\) \d{3}-\d{4}$")


def add_prefix(value: str, prefix: str) -> str:
    """Prepends `prefix` to an id unless it is already there."""
    if value.startswith(prefix):
        return value
    return prefix + value


def phone_digits(value: str) -> str:
    return re.sub(r"[^0-9]+", "", value or "")


def canonical_phone(value: str) -> str:
    """
    Formats a phone number as `(NNN) NNN-NNNN` from its first ten digits.

    Values with fewer than ten digits are returned unchanged.
    """
    digits = phone_digits(value)
    if len(digits) < 10:
        return value
    return f"({digits[0:3]}) {digits[3:6]}-{digits[6:10]}"


def validate_phone(value: str) -> None:
    if value and not PHONE_PATTERN.match(value):
        raise ValueError("Phone number must be in the form: (###) ###-####")


def equivalent_phone(old: str, new: str) -> bool:
    return phone_digits(old) == phone_digits(new)


class ValidationErrorCollector:
    """A simple class to collect and report validation errors."""

    def __init__(self):
        self.errors = []

    def add_error(self, message: str):
        self.errors.append(message)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def report(self):
        """Prints all collected errors to stderr and exits if any exist."""
        if self.has_errors:
            print(
                "\nGeneration failed with the following configuration errors:",
                file=sys.stderr,
            )
            for i, error in enumerate(self.errors, 1):
                print(f"  {i}. {error}", file=sys.stderr)
            sys.exit(1)
