from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import dns.message
import dns.rdata
import dns.rdataclass
import dns.rdatatype

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class Question:
    name: str
    rdtype: dns.rdatatype.RdataType
    rdclass: dns.rdataclass.RdataClass = dns.rdataclass.IN


@dataclass(frozen=True)
class Record:
    """One answer-section resource record as handed back by dnspython."""

    name: str
    ttl: int
    rdata: dns.rdata.Rdata

    @property
    def rdtype(self) -> dns.rdatatype.RdataType:
        return self.rdata.rdtype


@dataclass(frozen=True)
class QueryOutcome:
    response: dns.message.Message
    records: Tuple[Record, ...]
    server: str
    rtt: float  # seconds


@dataclass(frozen=True)
class OwnershipInfo:
    country: Optional[str] = None
    asn: Optional[int] = None
    organization: Optional[str] = None
    prefix: Optional[str] = None


@dataclass(frozen=True)
class NameserverInfo:
    """
    One delegated nameserver and the addresses it resolved to.

    `ownership` is keyed by the address text; addresses whose ownership lookup
    failed (or was never attempted) have no entry.
    """

    name: str
    addresses: Tuple[Address, ...] = ()
    ownership: Mapping[str, OwnershipInfo] = field(default_factory=dict)

    @property
    def ipv4(self) -> List[ipaddress.IPv4Address]:
        return [a for a in self.addresses if isinstance(a, ipaddress.IPv4Address)]

    @property
    def ipv6(self) -> List[ipaddress.IPv6Address]:
        return [a for a in self.addresses if isinstance(a, ipaddress.IPv6Address)]

    def with_ownership(self, ownership: Mapping[str, OwnershipInfo]) -> "NameserverInfo":
        return replace(self, ownership=dict(ownership))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "addresses": [str(a) for a in self.addresses],
            "ownership": {ip: info.__dict__ for ip, info in self.ownership.items()},
        }


@dataclass
class Finding:
    zone: str
    issue: str
    severity: str = "info"  # high | medium | low | info
    server: Optional[str] = None
    detail: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    _PREFIX = {"high": "ERR", "medium": "WARN", "low": "WARN", "info": "INFO"}

    def line(self) -> str:
        text = f"{self._PREFIX.get(self.severity, 'INFO')} : {self.issue}"
        if self.server:
            text += f" [{self.server}]"
        if self.detail:
            text += f": {self.detail}"
        return text


@dataclass
class AuditReport:
    """
    Result of auditing one zone's delegation.

    Findings are append-only: checks call add(), nothing ever removes one.
    """

    zone: str
    resolver: str = ""
    parent: str = ""
    overall: str = "unknown"  # ok | warning | broken | unknown
    nameservers: List[NameserverInfo] = field(default_factory=list)
    observations: Dict[str, Any] = field(default_factory=dict)
    findings: List[Finding] = field(default_factory=list)

    def add(self, finding: Finding) -> None:
        self.findings.append(finding)

    def lines(self) -> List[str]:
        return [f.line() for f in self.findings]

    @property
    def addresses(self) -> List[Address]:
        return [a for ns in self.nameservers for a in ns.addresses]

    def finalize_overall(self) -> None:
        severities = {f.severity for f in self.findings}
        if "high" in severities:
            self.overall = "broken"
        elif "medium" in severities or "low" in severities:
            self.overall = "warning"
        else:
            self.overall = "ok"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "zone": self.zone,
            "resolver": self.resolver,
            "parent": self.parent,
            "overall": self.overall,
            "nameservers": [ns.to_dict() for ns in self.nameservers],
            "observations": self.observations,
            "findings": [f.__dict__ for f in self.findings],
        }
