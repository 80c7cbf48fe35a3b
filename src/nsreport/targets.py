import re

import dns.exception
import dns.name


class InvalidTarget(ValueError):
    """Base error for invalid user input targets."""


class InvalidDomain(InvalidTarget):
    """Raised when a target is not a valid zone name."""


# Hostname-style labels; leading underscore allowed for service zones.
_LABEL = re.compile(r"^_?[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


# Trim whitespace, drop the trailing dot, lower-case.
def normalize_target(raw: str) -> str:
    return (raw or "").strip().rstrip(".").lower()


def require_domain(raw: str) -> str:
    """
    Normalise user input and check it is a syntactically valid zone name.

    Only the format is checked, not existence. IDN input is converted to its
    A-label form so it can be put on the wire.
    """
    s = normalize_target(raw)
    if not s or any(c.isspace() for c in s):
        raise InvalidDomain("Invalid domain format")

    try:
        name = dns.name.from_unicode(s)
    except (dns.exception.DNSException, UnicodeError) as e:
        raise InvalidDomain(f"Invalid domain format: {e}") from e

    labels = [label.decode("ascii") for label in name.labels if label]
    if len(labels) < 2:
        raise InvalidDomain("A registered domain needs at least two labels")
    if not all(_LABEL.match(label) for label in labels):
        raise InvalidDomain("Invalid domain format")

    return ".".join(labels)
