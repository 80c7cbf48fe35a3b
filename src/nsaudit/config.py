from __future__ import annotations

import os
import socket
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_RESOLVER = "8.8.8.8"


def _flag(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


def resolve_server(host: str) -> str:
    """dnspython wants an IP; resolve hostnames like "resolver" once up front."""
    try:
        return socket.gethostbyname(host)
    except OSError:
        return host  # already an IP, or unresolvable; let the query report it


@dataclass
class AuditConfig:
    resolver: str = DEFAULT_RESOLVER
    port: int = 53  # resolver port; nameservers are always probed on 53
    timeout: float = 2.0  # per query
    deadline: float = 60.0  # whole scan of one zone; 0 disables it
    enrich: bool = True
    probe: bool = True
    cache_ttl: float = 3600.0  # ownership lookups
    log_level: str = "info"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AuditConfig":
        env = os.environ if environ is None else environ
        return cls(
            resolver=resolve_server(env.get("NSAUDIT_RESOLVER", DEFAULT_RESOLVER)),
            port=int(env.get("NSAUDIT_PORT", "53")),
            timeout=float(env.get("NSAUDIT_TIMEOUT", "2.0")),
            deadline=float(env.get("NSAUDIT_DEADLINE", "60")),
            enrich=_flag(env.get("NSAUDIT_ENRICH", "1")),
            probe=_flag(env.get("NSAUDIT_PROBE", "1")),
            cache_ttl=float(env.get("NSAUDIT_CACHE_TTL", "3600")),
            log_level=env.get("NSAUDIT_LOG_LEVEL", "info"),
        )
