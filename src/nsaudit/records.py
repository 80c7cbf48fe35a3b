"""
Helpers for pulling typed records out of dnspython answer sections.

Everything here is pure: no I/O, input order is always preserved.
"""

from __future__ import annotations

import ipaddress
from typing import Iterable, List, Optional, Set, Tuple

import dns.message
import dns.rdatatype

from .models import Address, Record


def records_of(message: Optional[dns.message.Message]) -> List[Record]:
    """Flatten the answer section of a message into Records, in wire order."""
    if message is None:
        return []
    out: List[Record] = []
    for rrset in message.answer:
        owner = rrset.name.to_text()
        for rdata in rrset:
            out.append(Record(name=owner, ttl=rrset.ttl, rdata=rdata))
    return out


def filter_by_type(records: Iterable[Record], *rdtypes: int) -> List[Record]:
    wanted = set(rdtypes)
    return [r for r in records if r.rdtype in wanted]


def filter_message(message: Optional[dns.message.Message], *rdtypes: int) -> List[Record]:
    return filter_by_type(records_of(message), *rdtypes)


def addresses_of(records: Iterable[Record]) -> List[Address]:
    """
    Decode A/AAAA records into ip addresses.

    Any other record kind is skipped; a mixed answer (CNAME chain + A) is a
    normal thing to scan for addresses.
    """
    out: List[Address] = []
    for r in records:
        if r.rdtype == dns.rdatatype.A:
            out.append(ipaddress.IPv4Address(r.rdata.address))
        elif r.rdtype == dns.rdatatype.AAAA:
            out.append(ipaddress.IPv6Address(r.rdata.address))
    return out


def targets_of(records: Iterable[Record]) -> List[str]:
    """NS targets as absolute name text."""
    return [r.rdata.target.to_text() for r in records if r.rdtype == dns.rdatatype.NS]


def merge_rrsets(*record_lists: Iterable[Record]) -> List[Record]:
    """Union of several record lists, first occurrence wins, TTL ignored."""
    seen: Set[Tuple[str, int, str]] = set()
    out: List[Record] = []
    for records in record_lists:
        for r in records:
            key = (r.name.lower(), int(r.rdtype), r.rdata.to_text().lower())
            if key in seen:
                continue
            seen.add(key)
            out.append(r)
    return out
