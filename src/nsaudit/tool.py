from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

import dns.rdatatype

from .classify import classify_failure
from .config import AuditConfig
from .discovery import NameserverDiscovery
from .errors import NoNameservers, OwnershipLookupError, ResolutionError
from .ipinfo import CymruOwnershipLookup
from .models import AuditReport, Finding, NameserverInfo, OwnershipInfo, Record
from .names import fqdn, parent_of
from .query import QueryExecutor, RRsetResolver
from .records import merge_rrsets, targets_of
from .topology import ipv4_only, is_private, same_subnet

logger = logging.getLogger(__name__)

AUTHORITATIVE_PORT = 53


class NSAuditTool:
    """
    Delegation / nameserver redundancy audit for a single zone.

    Design goals:
      - one configured resolver for discovery, queried directly
      - best effort: sub-query failures become findings, never exceptions
      - sequential: NS sets are small, latency grows linearly with them
      - bounded: network steps stop once config.deadline has passed
    """

    def __init__(
        self,
        config: Optional[AuditConfig] = None,
        executor: Optional[QueryExecutor] = None,
        ownership: Optional[CymruOwnershipLookup] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or AuditConfig()
        self.executor = executor or QueryExecutor(timeout=self.config.timeout, port=self.config.port)
        self.resolver = RRsetResolver(self.executor)
        # nameservers are asked directly, on the standard port, whatever port the resolver uses
        self.probe_resolver = RRsetResolver(self.executor.with_port(AUTHORITATIVE_PORT))
        self.discovery = NameserverDiscovery(self.resolver, self.config.resolver)
        self.ownership = ownership or CymruOwnershipLookup(
            self.resolver, self.config.resolver, cache_ttl=self.config.cache_ttl
        )
        self._clock = clock

    # ----------------------------
    # Public entrypoint
    # ----------------------------

    def check_zone(self, zone: str) -> AuditReport:
        z = (zone or "").strip().rstrip(".").lower()
        name = fqdn(z)

        out = AuditReport(zone=z, resolver=self.config.resolver, parent=parent_of(name))
        started = time.perf_counter()
        expires = self._clock() + self.config.deadline if self.config.deadline > 0 else None

        # 1) Delegation NS set and nameserver addresses
        try:
            nameservers = self.discovery.discover(name)
        except NoNameservers as e:
            logger.info("no nameservers for %s: %s", name, e)
            out.add(
                Finding(
                    zone=z,
                    issue="NO_NAMESERVERS",
                    severity="high",
                    server=self.config.resolver,
                    detail=f"No NS records could be resolved for {name}: {e.cause or e}",
                    data={"qname": name, "error": str(e.cause or e)},
                )
            )
            return self._finish(out, started)

        # 2) Ownership enrichment (best effort)
        if self.config.enrich:
            nameservers = [ns if self._out_of_time(out, expires, "enrichment") else self._enrich(ns) for ns in nameservers]
        out.nameservers = nameservers

        # 3) Topology (no network traffic, always runs)
        self._check_addresses(out)
        self._check_topology(out)

        # 4) Direct probes of every nameserver address
        if self.config.probe:
            self._probe_authoritative(out, name, expires)

        return self._finish(out, started)

    def _finish(self, out: AuditReport, started: float) -> AuditReport:
        out.finalize_overall()
        out.observations["timing_ms"] = int((time.perf_counter() - started) * 1000)
        return out

    def _out_of_time(self, out: AuditReport, expires: Optional[float], step: str) -> bool:
        if expires is None or self._clock() < expires:
            return False
        if "deadline_skipped" not in out.observations:
            out.observations["deadline_skipped"] = step
            logger.warning("scan of %s hit its %ss deadline; skipping %s", out.zone, self.config.deadline, step)
            out.add(
                Finding(
                    zone=out.zone,
                    issue="SCAN_DEADLINE",
                    severity="medium",
                    detail=f"Scan deadline of {self.config.deadline:g}s reached; {step} and later steps were cut short.",
                    data={"deadline": self.config.deadline, "skipped": step},
                )
            )
        return True

    # ----------------------------
    # Enrichment
    # ----------------------------

    def _enrich(self, ns: NameserverInfo) -> NameserverInfo:
        owned: Dict[str, OwnershipInfo] = {}
        for addr in ns.addresses:
            try:
                owned[str(addr)] = self.ownership.lookup(addr)
            except OwnershipLookupError as e:
                logger.warning("ownership lookup failed for %s (%s): %s", ns.name, addr, e)
        return ns.with_ownership(owned)

    # ----------------------------
    # Checks
    # ----------------------------

    def _check_addresses(self, out: AuditReport) -> None:
        for ns in out.nameservers:
            if not ns.addresses:
                out.add(
                    Finding(
                        zone=out.zone,
                        issue="NS_NO_ADDRESS",
                        severity="medium",
                        server=ns.name,
                        detail=f"Nameserver {ns.name} did not resolve to any A/AAAA address.",
                        data={"nameserver": ns.name},
                    )
                )
            for addr in ns.addresses:
                if is_private(addr):
                    out.add(
                        Finding(
                            zone=out.zone,
                            issue="PRIVATE_ADDRESS",
                            severity="high",
                            server=ns.name,
                            detail=f"Nameserver {ns.name} publishes RFC 1918 address {addr}.",
                            data={"nameserver": ns.name, "address": str(addr)},
                        )
                    )

    def _check_topology(self, out: AuditReport) -> None:
        if len(out.nameservers) < 2:
            out.add(
                Finding(
                    zone=out.zone,
                    issue="SINGLE_NAMESERVER",
                    severity="high",
                    detail=f"Only {len(out.nameservers)} nameserver is delegated; there is no redundancy.",
                    data={"nameservers": [ns.name for ns in out.nameservers]},
                )
            )
            return

        v4 = ipv4_only(out.addresses)
        out.observations["ipv4_addresses"] = [str(a) for a in v4]
        if len(v4) >= 2 and same_subnet(v4):
            out.add(
                Finding(
                    zone=out.zone,
                    issue="SAME_SUBNET",
                    severity="high",
                    detail="All nameserver IPv4 addresses are in the same /24.",
                    data={"addresses": [str(a) for a in v4]},
                )
            )

        owners = [ns.ownership.get(str(a)) for ns in out.nameservers for a in ns.addresses]
        asns = sorted({o.asn for o in owners if o is not None and o.asn is not None})
        out.observations["asns"] = asns
        # only conclusive when every address was attributed
        fully_known = bool(owners) and all(o is not None and o.asn is not None for o in owners)
        if fully_known and len(asns) == 1:
            out.add(
                Finding(
                    zone=out.zone,
                    issue="SINGLE_ASN",
                    severity="low",
                    detail=f"All nameserver addresses are announced by AS{asns[0]}.",
                    data={"asn": asns[0]},
                )
            )

    # ----------------------------
    # Direct probing
    # ----------------------------

    def _probe_authoritative(self, out: AuditReport, name: str, expires: Optional[float] = None) -> None:
        delegation = sorted(ns.name.lower() for ns in out.nameservers)
        probes: List[Dict[str, object]] = []
        served_all: List[Record] = []

        for ns, addr in [(ns, a) for ns in out.nameservers for a in ns.addresses]:
            if self._out_of_time(out, expires, "probes"):
                break
            ip = str(addr)
            soa, soa_err = self._ask(name, dns.rdatatype.SOA, ip)
            soa_failed = classify_failure(out, "SOA", ns.name, ip, out.zone, soa_err, soa)

            served, ns_err = self._ask(name, dns.rdatatype.NS, ip)
            ns_failed = classify_failure(out, "NS", ns.name, ip, out.zone, ns_err, served)
            served_all = merge_rrsets(served_all, served)

            child = sorted(t.lower() for t in targets_of(served))
            probes.append({"ns": ns.name, "ip": ip, "soa_ok": not soa_failed, "ns_ok": not ns_failed, "child_ns": child})

            if not ns_failed and child != delegation:
                out.add(
                    Finding(
                        zone=out.zone,
                        issue="NS_INCONSISTENT",
                        severity="low",
                        server=f"{ns.name} ({ip})",
                        detail="Nameserver serves an NS RRset that differs from the delegation.",
                        data={"delegation": delegation, "served": child},
                    )
                )

        out.observations["probes"] = probes
        # union of every NS name any nameserver served, first seen first
        out.observations["served_ns"] = [t.lower() for t in targets_of(served_all)]

    def _ask(self, name: str, rdtype: int, server: str) -> Tuple[List[Record], Optional[ResolutionError]]:
        try:
            records, _ = self.probe_resolver.resolve_rrset(name, rdtype, server)
        except ResolutionError as e:
            return [], e
        return records, None
