"""Built-in validation rules.

Every rule here is a stateless predicate ``(value, *args) -> bool`` that
returns False (never raises) for values of the wrong type. Rules are listed
in :data:`BUILTIN_RULES`, an explicit name-to-function table that the
built-in registry instantiates lazily.

Note that emptiness is handled by the orchestrator: apart from ``required``,
rules only ever see non-empty values during ``verify()``.
"""

from __future__ import annotations

import ipaddress
import json
import mimetypes
import re
import unicodedata
from collections.abc import Mapping, Sized
from datetime import date as date_type
from datetime import datetime
from os import PathLike
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urlsplit

from ..traverser import is_empty
from .domains import DISPOSABLE_EMAIL_DOMAINS, DISPOSABLE_URL_DOMAINS
from .metadata import RULE_INFO_ATTR, rule

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_INT_RE = re.compile(r"^[+-]?\d+$")
_EMAIL_RE = re.compile(
    r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@([A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}$"
)
_HOST_LABEL_RE = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?$")
_SPECIAL_RE = re.compile(r"[^\w\s]")


def _as_number(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and _NUMERIC_RE.match(value):
        number = float(value)
        return int(number) if number.is_integer() and _INT_RE.match(value.strip()) else number
    return None


def _is_record(value: Any) -> bool:
    return (
        hasattr(value, "__dict__")
        and not isinstance(value, type)
        and not callable(value)
    )


def _length(value: Any) -> int:
    if isinstance(value, Sized):
        return len(value)
    return len(str(value))


def _strict_in(value: Any, options: Any) -> bool:
    return any(type(value) is type(option) and value == option for option in options)


# -- Core -------------------------------------------------------------------


@rule(
    "required",
    description="Validates that a field is not empty. False, 0 and '0' count as present.",
    category="Core",
    examples=['validator.field("name").required()'],
)
def required(value: Any) -> bool:
    return not is_empty(value)


# -- Type -------------------------------------------------------------------


@rule(
    "string",
    description="Validates that a value is a string",
    category="Type",
    examples=['validator.field("name").string()'],
)
def string(value: Any) -> bool:
    return isinstance(value, str)


@rule(
    "int",
    description="Validates that a value is an integer. In strict mode (default), only true integers are accepted",
    category="Type",
    examples=['validator.field("age").int()', 'validator.field("age").int(False)'],
    params={"strict": "Strict mode: True for integers only"},
    param_examples={"strict": True},
)
def int_(value: Any, strict: bool = True) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return not strict and isinstance(value, str) and bool(_INT_RE.match(value))


@rule(
    "numeric",
    description="Validates that a value is numeric (a number or a numeric string)",
    category="Type",
    examples=['validator.field("price").numeric()'],
)
def numeric(value: Any) -> bool:
    return _as_number(value) is not None


@rule(
    "boolean",
    description="Validates that a value is a boolean. In strict mode (default), only True/False are accepted",
    category="Type",
    examples=['validator.field("active").boolean()'],
    params={"strict": "Strict mode: True for booleans only"},
    param_examples={"strict": True},
)
def boolean(value: Any, strict: bool = True) -> bool:
    if isinstance(value, bool):
        return True
    return not strict and _strict_in(value, (1, 0, "1", "0"))


@rule(
    "array",
    description="Validates that a value is a list or tuple",
    category="Type",
    examples=['validator.field("tags").array()'],
)
def array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


@rule(
    "object",
    description="Validates that a value is a mapping or an attribute record",
    category="Type",
    examples=['validator.field("user").object()'],
)
def object_(value: Any) -> bool:
    return isinstance(value, Mapping) or _is_record(value)


@rule(
    "json",
    description="Validates that a string is valid JSON",
    category="Type",
    examples=['validator.field("payload").json()'],
)
def json_(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        json.loads(value)
    except ValueError:
        return False
    return True


# -- String -----------------------------------------------------------------


@rule(
    "email",
    description="Validates that a value is a valid email address",
    category="String",
    examples=['validator.field("email").email()'],
)
def email(value: Any) -> bool:
    return isinstance(value, str) and len(value) <= 254 and bool(_EMAIL_RE.match(value))


@rule(
    "url",
    description="Validates that a value is a valid URL with configurable schemes and TLD requirement",
    category="String",
    examples=[
        'validator.field("website").url()',
        'validator.field("api").url(["http", "https", "ws", "wss"])',
        'validator.field("intranet").url(["http"], require_tld=False)',
    ],
    params={
        "schemes": "Allowed URL schemes",
        "require_tld": "Require a top-level domain (.com, .org, ...)",
    },
    param_examples={"schemes": ["http", "https"], "require_tld": True},
)
def url(value: Any, schemes: list[str] | tuple[str, ...] = ("http", "https"), require_tld: bool = True) -> bool:
    if not isinstance(value, str) or not value or any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
        host = parts.hostname
        parts.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError:
        return False

    if parts.scheme.lower() not in {scheme.lower() for scheme in schemes}:
        return False
    if not host:
        return False

    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        address = None
    if address is not None:
        return True

    labels = host.split(".")
    if not all(_HOST_LABEL_RE.match(label) for label in labels):
        return False
    return not require_tld or len(labels) > 1


@rule(
    "ip_address",
    description="Validates that a value is a valid IP address (IPv4 or IPv6)",
    category="String",
    examples=['validator.field("ip").ip_address()'],
)
def ip_address(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


@rule(
    "alphanumeric",
    description="Validates that a value contains only ASCII letters and digits",
    category="String",
    examples=['validator.field("username").alphanumeric()'],
)
def alphanumeric(value: Any) -> bool:
    return isinstance(value, str) and value.isascii() and value.isalnum()


@rule(
    "not_alphanumeric",
    description="Validates that a value contains no letters, digits or combining marks",
    category="String",
    examples=['validator.field("separator").not_alphanumeric()'],
)
def not_alphanumeric(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return not any(
        ch.isalnum() or unicodedata.category(ch).startswith("M") for ch in value
    )


@rule(
    "contains_lower",
    description="Validates that a string contains at least one lowercase letter",
    category="String",
    examples=['validator.field("password").contains_lower()'],
)
def contains_lower(value: Any) -> bool:
    return isinstance(value, str) and any(ch.islower() for ch in value)


@rule(
    "contains_upper",
    description="Validates that a string contains at least one uppercase letter",
    category="String",
    examples=['validator.field("password").contains_upper()'],
)
def contains_upper(value: Any) -> bool:
    return isinstance(value, str) and any(ch.isupper() for ch in value)


@rule(
    "contains_number",
    description="Validates that a string contains at least one digit",
    category="String",
    examples=['validator.field("password").contains_number()'],
)
def contains_number(value: Any) -> bool:
    return isinstance(value, str) and any(ch.isdigit() for ch in value)


@rule(
    "contains_special_character",
    description="Validates that a string contains at least one special character",
    category="String",
    examples=['validator.field("password").contains_special_character()'],
)
def contains_special_character(value: Any) -> bool:
    return isinstance(value, str) and _SPECIAL_RE.search(value) is not None


@rule(
    "min_length",
    description="Validates that a string (or collection) has a minimum length",
    category="String",
    examples=['validator.field("password").min_length(8)'],
    params={"min": "Minimum length required"},
    param_examples={"min": 8},
)
def min_length(value: Any, min: int) -> bool:
    return _length(value) >= min


@rule(
    "max_length",
    description="Validates that a string (or collection) does not exceed a maximum length",
    category="String",
    examples=['validator.field("username").max_length(20)'],
    params={"max": "Maximum length allowed"},
    param_examples={"max": 20},
)
def max_length(value: Any, max: int) -> bool:
    return _length(value) <= max


@rule(
    "regex",
    description="Validates that a value matches a regular expression pattern. Invalid patterns fail the rule",
    category="String",
    examples=['validator.field("code").regex(r"^[A-Z]+$")'],
    params={"pattern": "Regular expression pattern"},
    param_examples={"pattern": r"^[A-Z]+$"},
)
def regex(value: Any, pattern: str | re.Pattern) -> bool:
    if not isinstance(value, str):
        return False
    try:
        return re.search(pattern, value) is not None
    except re.error:
        return False


@rule(
    "disposable_email",
    description="Validates that an email is not from a disposable domain; the domain list can be overridden",
    category="String",
    examples=[
        'validator.field("email").disposable_email()',
        'validator.field("email").disposable_email(["@mytempdomain"])',
    ],
    params={"disposables": "Disposable domain patterns"},
    param_examples={"disposables": []},
)
def disposable_email(value: Any, disposables: list[str] | tuple[str, ...] = ()) -> bool:
    if not isinstance(value, str) or "@" not in value:
        return False
    domain = value.split("@", 1)[1]
    if not domain:
        return False
    for disposable in disposables or DISPOSABLE_EMAIL_DOMAINS:
        pattern = disposable.lstrip("@")
        if domain.startswith(pattern) or f".{pattern}" in domain:
            return False
    return True


@rule(
    "disposable_url_domain",
    description="Validates that a URL is not hosted on a disposable domain (shorteners, temporary hosting, tunnels)",
    category="String",
    examples=[
        'validator.field("website").disposable_url_domain()',
        'validator.field("website").disposable_url_domain(["bit.ly", "tinyurl.com"])',
    ],
    params={"disposables": "Disposable domain patterns"},
    param_examples={"disposables": []},
)
def disposable_url_domain(value: Any, disposables: list[str] | tuple[str, ...] = ()) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        host = urlsplit(value).hostname
    except ValueError:
        return False
    if not host:
        return False
    host = host.lower()
    for disposable in disposables or DISPOSABLE_URL_DOMAINS:
        domain = disposable.lstrip(".").lower()
        if host == domain or host.endswith(f".{domain}"):
            return False
    return True


# -- Numeric ----------------------------------------------------------------


def _comparable(*values: Any) -> tuple | None:
    # Dates compare with dates; everything else must be numeric (numeric strings included)
    if all(isinstance(item, (datetime, date_type)) for item in values):
        return values
    numbers = tuple(_as_number(item) for item in values)
    if any(number is None for number in numbers):
        return None
    return numbers


@rule(
    "between",
    description="Validates that a value is between two inclusive bounds. Supports numbers and dates",
    category="Numeric",
    examples=['validator.field("age").between(18, 65)'],
    params={"min": "Minimum value (inclusive)", "max": "Maximum value (inclusive)"},
    param_examples={"min": 18, "max": 65},
)
def between(value: Any, min: Any, max: Any) -> bool:
    ordered = _comparable(value, min, max)
    if ordered is None:
        return False
    number, low, high = ordered
    try:
        return bool(low <= number <= high)
    except TypeError:
        return False


@rule(
    "greater_than",
    description="Validates that a value is greater than a specified limit",
    category="Numeric",
    examples=['validator.field("age").greater_than(18)'],
    params={"min": "Value must be greater than this"},
    param_examples={"min": 18},
)
def greater_than(value: Any, min: Any) -> bool:
    ordered = _comparable(value, min)
    if ordered is None:
        return False
    try:
        return bool(ordered[0] > ordered[1])
    except TypeError:
        return False


@rule(
    "lower_than",
    description="Validates that a value is less than a specified limit",
    category="Numeric",
    examples=['validator.field("age").lower_than(65)'],
    params={"max": "Value must be less than this"},
    param_examples={"max": 65},
)
def lower_than(value: Any, max: Any) -> bool:
    ordered = _comparable(value, max)
    if ordered is None:
        return False
    try:
        return bool(ordered[0] < ordered[1])
    except TypeError:
        return False


# -- Comparison -------------------------------------------------------------


@rule(
    "in",
    description="Validates that a value is in an allowed list, or is a key of an allowed mapping",
    category="Comparison",
    examples=['validator.field("status").in_(["active", "pending"])'],
    params={"allowed": "Allowed values"},
    param_examples={"allowed": ["active", "pending"]},
)
def in_(value: Any, allowed: Any) -> bool:
    if isinstance(allowed, Mapping):
        try:
            return value in allowed
        except TypeError:
            # unhashable values are never keys
            return False
    if isinstance(allowed, (list, tuple, set, frozenset)):
        return _strict_in(value, allowed)
    return False


@rule(
    "not_in",
    description="Validates that a value is not in a forbidden list, nor a key of a forbidden mapping",
    category="Comparison",
    examples=['validator.field("username").not_in(["admin", "root"])'],
    params={"forbidden": "Forbidden values"},
    param_examples={"forbidden": ["admin", "root"]},
)
def not_in(value: Any, forbidden: Any) -> bool:
    if isinstance(forbidden, Mapping):
        try:
            return value not in forbidden
        except TypeError:
            return True
    if isinstance(forbidden, (list, tuple, set, frozenset)):
        return not _strict_in(value, forbidden)
    return True


# -- Date -------------------------------------------------------------------


@rule(
    "date",
    description="Validates that a value is a date in the given strftime format. Performs strict round-trip validation",
    category="Date",
    examples=['validator.field("birthday").date()', 'validator.field("ts").date("%d/%m/%Y")'],
    params={"format": "strftime date format"},
    param_examples={"format": "%Y-%m-%d"},
)
def date(value: Any, format: str = "%Y-%m-%d") -> bool:
    if isinstance(value, (datetime, date_type)):
        return True
    if not isinstance(value, str):
        return False
    try:
        parsed = datetime.strptime(value, format)
    except ValueError:
        return False
    return parsed.strftime(format) == value


# -- File -------------------------------------------------------------------


@rule(
    "file_exists",
    description="Validates that a regular file exists at the given path",
    category="File",
    examples=['validator.field("avatar").file_exists()'],
)
def file_exists(value: Any) -> bool:
    if not isinstance(value, (str, PathLike)):
        return False
    return Path(value).is_file()


@rule(
    "file_mime",
    description="Validates that a file has an allowed MIME type (guessed from its name)",
    category="File",
    examples=['validator.field("avatar").file_mime("image/jpeg")'],
    params={"mime": "Allowed MIME type or types"},
    param_examples={"mime": "image/jpeg"},
)
def file_mime(value: Any, mime: str | list[str] | tuple[str, ...]) -> bool:
    if not file_exists(value):
        return False
    detected, _ = mimetypes.guess_type(str(value))
    if isinstance(mime, str):
        return detected == mime
    return detected in mime


def _build_table(*predicates: Callable[..., bool]) -> dict[str, Callable[..., bool]]:
    return {getattr(predicate, RULE_INFO_ATTR).name: predicate for predicate in predicates}


BUILTIN_RULES: dict[str, Callable[..., bool]] = _build_table(
    required,
    string, int_, numeric, boolean, array, object_, json_,
    email, url, ip_address, alphanumeric, not_alphanumeric,
    contains_lower, contains_upper, contains_number, contains_special_character,
    min_length, max_length, regex, disposable_email, disposable_url_domain,
    between, greater_than, lower_than,
    in_, not_in,
    date,
    file_exists, file_mime,
)

CORE_RULES: tuple[str, ...] = ("required", "string", "int", "array", "object")
