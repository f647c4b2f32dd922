"""Parsing of per-field ``config`` annotation strings."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidTagFormatError

__all__ = [
    "TAG_SEPARATOR",
    "DirectiveSet",
    "parse_tag",
]

TAG_SEPARATOR = ","

ENV_DIRECTIVE = "env"
FLAG_DIRECTIVE = "flag"
DEFAULT_DIRECTIVE = "default"

# Accepted forms per directive family, quoted back in error messages.
_FORMS = {
    ENV_DIRECTIVE: "either `env` or `env=ENV_KEY` is valid",
    FLAG_DIRECTIVE: "either `flag` or `flag=flag-key` is valid",
    DEFAULT_DIRECTIVE: "either `default` or `default=value` is valid",
}


@dataclass(slots=True)
class DirectiveSet:
    """Directives declared on a single field.

    Explicit values are ``None`` when the bare form was used (or the family
    was absent); they are never empty strings.
    """

    has_env: bool = False
    env: str | None = None
    has_flag: bool = False
    flag: str | None = None
    has_default: bool = False
    default: str | None = None


def _explicit_value(family: str, token: str, field_name: str) -> str | None:
    prefix = f"{family}="
    if not token.startswith(prefix):
        return None
    value = token[len(prefix):]
    if not value:
        location = f" on field {field_name!r}" if field_name else ""
        raise InvalidTagFormatError(
            f"invalid tag format{location}, {_FORMS[family]}",
            details={"field": field_name, "directive": family, "token": token},
        )
    return value


def parse_tag(raw: str | None, *, field_name: str = "") -> DirectiveSet:
    """Parse a comma-separated directive string.

    Tokens are matched by prefix in the order ``env``, ``flag``, ``default``;
    anything else is ignored. When a family repeats, the last explicit value
    wins and a later bare token keeps the earlier explicit value.
    """

    directives = DirectiveSet()
    if not raw:
        return directives

    for token in raw.split(TAG_SEPARATOR):
        token = token.strip()
        if token.startswith(ENV_DIRECTIVE):
            directives.has_env = True
            value = _explicit_value(ENV_DIRECTIVE, token, field_name)
            if value is not None:
                directives.env = value
        elif token.startswith(FLAG_DIRECTIVE):
            directives.has_flag = True
            value = _explicit_value(FLAG_DIRECTIVE, token, field_name)
            if value is not None:
                directives.flag = value
        elif token.startswith(DEFAULT_DIRECTIVE):
            directives.has_default = True
            value = _explicit_value(DEFAULT_DIRECTIVE, token, field_name)
            if value is not None:
                directives.default = value
    return directives
