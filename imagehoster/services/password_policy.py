"""Password strength policy applied at registration."""

import re

MIN_PASSWORD_LENGTH = 3

# Any character except a line terminator (\n, \r, NEL, LINE SEPARATOR, PARAGRAPH SEPARATOR).
_ANY = r"[^\n\r\x85\u2028\u2029]"

# At least one ASCII letter, one digit and one character that is neither, in any order.
PASSWORD_PATTERN = re.compile(
    rf"((?={_ANY}*[a-zA-Z])(?={_ANY}*[0-9])(?={_ANY}*[^a-zA-Z0-9]){_ANY}*)"
)

PASSWORD_TYPE_ERROR = "Password must contain atleast 1 alphabet, 1 number & 1 special character"


def is_valid_password(password: str | None) -> bool:
    """Return True when ``password`` meets the strength policy.

    Empty or short passwords fail before the pattern is tried. The pattern
    must match the whole string, and none of its wildcards match a line
    terminator, so any password containing one is rejected.
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return False
    return PASSWORD_PATTERN.fullmatch(password) is not None
