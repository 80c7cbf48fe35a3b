from __future__ import annotations

import logging
from typing import List

import dns.rdatatype

from .errors import NoNameservers, ResolutionError
from .models import Address, NameserverInfo
from .query import RRsetResolver
from .records import addresses_of, targets_of

logger = logging.getLogger(__name__)


class NameserverDiscovery:
    """
    Find a domain's NS set and the addresses behind each nameserver name.

    Every lookup goes to the one configured server, one at a time.
    """

    def __init__(self, resolver: RRsetResolver, server: str) -> None:
        self.resolver = resolver
        self.server = server

    def discover(self, domain: str) -> List[NameserverInfo]:
        try:
            rrset, _ = self.resolver.resolve_rrset(domain, dns.rdatatype.NS, self.server)
        except ResolutionError as e:
            raise NoNameservers(domain, e) from e

        out: List[NameserverInfo] = []
        for ns in targets_of(rrset):
            addresses: List[Address] = []
            addresses.extend(self._addresses(ns, dns.rdatatype.A))
            addresses.extend(self._addresses(ns, dns.rdatatype.AAAA))
            out.append(NameserverInfo(name=ns, addresses=tuple(addresses)))

        if not out:
            raise NoNameservers(domain)
        return out

    def _addresses(self, host: str, rdtype: dns.rdatatype.RdataType) -> List[Address]:
        try:
            rrset, _ = self.resolver.resolve_rrset(host, rdtype, self.server)
        except ResolutionError as e:
            logger.debug("no %s for nameserver %s: %s", dns.rdatatype.to_text(rdtype), host, e)
            return []
        return addresses_of(rrset)
