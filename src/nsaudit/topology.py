"""
Network-topology heuristics over the addresses a delegation publishes.

Only IPv4 is considered for subnet clustering; IPv6 addresses are ignored
by same_subnet().
"""

from __future__ import annotations

import ipaddress
from typing import Iterable, List

from .models import Address

RFC1918_NETWORKS = (
    ipaddress.IPv4Network("10.0.0.0/8"),
    ipaddress.IPv4Network("172.16.0.0/12"),
    ipaddress.IPv4Network("192.168.0.0/16"),
)

CLUSTER_PREFIXLEN = 24


def is_private(address: Address) -> bool:
    if not isinstance(address, ipaddress.IPv4Address):
        return False
    return any(address in net for net in RFC1918_NETWORKS)


def ipv4_only(addresses: Iterable[Address]) -> List[ipaddress.IPv4Address]:
    return [a for a in addresses if isinstance(a, ipaddress.IPv4Address)]


def same_subnet(addresses: Iterable[Address]) -> bool:
    """
    True when every IPv4 address sits inside every address's /24.

    Empty and single-address inputs are vacuously True; callers decide whether
    the set is large enough to mean anything.
    """
    v4 = ipv4_only(addresses)
    nets = [ipaddress.IPv4Network(f"{a}/{CLUSTER_PREFIXLEN}", strict=False) for a in v4]
    return all(a in net for net in nets for a in v4)
