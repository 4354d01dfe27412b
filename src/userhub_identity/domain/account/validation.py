"""Registration input validation.

Fields are checked in a fixed order (name, userName, gender, email, phone,
password) and the first failing rule's message is returned. The messages
are shown to users verbatim.
"""

import re
from typing import Optional

from userhub_auth import PasswordPolicy
from userhub_identity.domain.account.value_objects import Gender, NewAccountRequest

PHONE_LENGTH = 10

NAME_RE = re.compile(r"^[ a-zA-Z]+$")
USER_NAME_RE = re.compile(r"^[a-zA-Z0-9.\-\s]*$")
EMAIL_RE = re.compile(
    r'''^(([^<>(){}~`|/%*?$'=^&#\[\]\\.,;:!\s@"]+(\.[^-<>()\[\]\\.,!;:\s@"]+)*)|(".+"))'''
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}])"
    r"|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)
DIGITS_RE = re.compile(r"^[0-9]+$")


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_name(name: Optional[str]) -> str:
    if _blank(name):
        return "Name can't be blank"
    if not NAME_RE.match(name):
        return "Name can only contain alphabets"
    return ""


def validate_user_name(user_name: Optional[str]) -> str:
    if _blank(user_name):
        return "UserName can't be blank"
    if not USER_NAME_RE.match(user_name):
        return "UserName can only contain alphabets, numbers and special characters(-.)"
    return ""


def validate_gender(gender: Optional[str]) -> str:
    if _blank(gender):
        return "Gender can't be blank"
    if gender not in Gender.values():
        return "please select valid gender"
    return ""


def validate_email(email: Optional[str]) -> str:
    if _blank(email):
        return "email can't be blank"
    if not EMAIL_RE.match(email):
        return "Invalid email address"
    return ""


def validate_phone(phone: Optional[str]) -> str:
    if _blank(phone):
        return "Phone number can't be blank"
    if len(phone.strip()) != PHONE_LENGTH:
        return f"Phone number must be at least {PHONE_LENGTH} characters"
    if not DIGITS_RE.match(phone.strip()):
        return "Phone number must be digits"
    return ""


def validate_new_account(request: NewAccountRequest, policy: PasswordPolicy) -> str:
    """Return the first violation message for a registration, or ``""``."""
    for message in (
        validate_name(request.name),
        validate_user_name(request.user_name),
        validate_gender(request.gender),
        validate_email(request.email),
        validate_phone(request.phone),
    ):
        if message:
            return message
    return policy.validate(request.password)
