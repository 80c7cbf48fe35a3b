"""IP ownership lookups (country / ASN / organization) via Team Cymru's DNS interface."""

from __future__ import annotations

import ipaddress
import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

import dns.rdatatype

from .errors import OwnershipLookupError, ResolutionError
from .models import Address, OwnershipInfo
from .query import RRsetResolver

logger = logging.getLogger(__name__)

ORIGIN_ZONE = "origin.asn.cymru.com"
ORIGIN6_ZONE = "origin6.asn.cymru.com"
ASN_ZONE = "asn.cymru.com"

# Overridden by AuditConfig.cache_ttl (NSAUDIT_CACHE_TTL)
DEFAULT_CACHE_TTL_SECONDS = 3600.0


def origin_qname(address: Address) -> str:
    if address.version == 4:
        return ".".join(reversed(str(address).split("."))) + f".{ORIGIN_ZONE}."
    nibbles = address.exploded.replace(":", "")
    return ".".join(reversed(nibbles)) + f".{ORIGIN6_ZONE}."


def _fields(txt: str) -> List[str]:
    return [p.strip() for p in txt.replace('"', "").split("|")]


class CymruOwnershipLookup:
    """
    Resolve ownership for an address with two TXT lookups:

      <reversed ip>.origin.asn.cymru.com  -> "ASN | prefix | CC | registry | allocated"
      AS<asn>.asn.cymru.com               -> "ASN | CC | registry | allocated | AS name"

    Results are cached per address for `cache_ttl` seconds.
    """

    def __init__(
        self,
        resolver: RRsetResolver,
        server: str,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.resolver = resolver
        self.server = server
        self.cache_ttl = cache_ttl
        self._clock = clock
        self._cache: Dict[str, Tuple[float, OwnershipInfo]] = {}

    def lookup(self, address: Address) -> OwnershipInfo:
        address = ipaddress.ip_address(address)
        key = str(address)
        cached = self._cache_get(key)
        if cached is not None:
            return cached

        origin = self._txt(origin_qname(address))
        if len(origin) < 3:
            raise OwnershipLookupError(f"unexpected origin answer for {key}: {origin!r}")
        try:
            # multi-origin prefixes list several ASNs; the first one is used
            asn = int(origin[0].split()[0])
        except (ValueError, IndexError) as e:
            raise OwnershipLookupError(f"bad ASN in origin answer for {key}: {origin!r}") from e

        info = OwnershipInfo(
            country=origin[2] or None,
            asn=asn,
            organization=self._organization(asn),
            prefix=origin[1] or None,
        )
        self._cache[key] = (self._clock(), info)
        return info

    def _cache_get(self, key: str) -> Optional[OwnershipInfo]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        stored, info = entry
        if self._clock() - stored > self.cache_ttl:
            del self._cache[key]
            logger.debug("ownership cache expired for %s", key)
            return None
        return info

    def _organization(self, asn: int) -> Optional[str]:
        try:
            parts = self._txt(f"AS{asn}.{ASN_ZONE}.")
        except OwnershipLookupError as e:
            logger.debug("no AS name for AS%s: %s", asn, e)
            return None
        return parts[4] if len(parts) >= 5 and parts[4] else None

    def _txt(self, qname: str) -> List[str]:
        try:
            rrset, _ = self.resolver.resolve_rrset(qname, dns.rdatatype.TXT, self.server)
        except ResolutionError as e:
            raise OwnershipLookupError(f"{qname}: {e}") from e
        txt = b"".join(rrset[0].rdata.strings).decode("utf-8", errors="replace")
        return _fields(txt)
