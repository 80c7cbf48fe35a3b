from __future__ import annotations

from typing import Any

import dns.rcode
import dns.rdatatype


class ResolutionError(Exception):
    """Base error for a single question that did not produce usable records."""


class TransportError(ResolutionError):
    """The server could not be reached, timed out, or sent something unusable."""

    def __init__(self, server: str, cause: Any) -> None:
        self.server = server
        self.cause = cause
        super().__init__(f"transport failure talking to {server}: {type(cause).__name__}: {cause}")


class InvalidQuestion(ResolutionError):
    """The question name cannot be encoded as a DNS name (label too long, empty label...)."""

    def __init__(self, name: str, cause: Any) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"invalid query name {name!r}: {cause}")


class ServerRejected(ResolutionError):
    """The server answered with a response code other than NOERROR."""

    def __init__(self, rcode: int) -> None:
        self.rcode = rcode
        super().__init__(f"failure: {dns.rcode.to_text(rcode)}")


class NoRecords(ResolutionError):
    """The exchange succeeded but the answer held no records of the requested type."""

    def __init__(self, rdtype: int) -> None:
        self.rdtype = rdtype
        super().__init__(f"no records for {dns.rdatatype.to_text(rdtype)}")


class NoNameservers(ResolutionError):
    """The domain has no resolvable NS RRset."""

    def __init__(self, domain: str, cause: Any = None) -> None:
        self.domain = domain
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"no NS found for {domain}{detail}")


class OwnershipLookupError(Exception):
    """IP ownership (ASN/country/org) could not be determined for an address."""
