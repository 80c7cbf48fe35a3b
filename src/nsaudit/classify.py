from __future__ import annotations

import logging
from typing import Optional, Sequence

import dns.rcode

from .errors import NoRecords, ServerRejected
from .models import AuditReport, Finding

logger = logging.getLogger(__name__)

# Substrings of error text that mark an expected outcome of a best-effort scan.
BENIGN_MARKERS = ("NXDOMAIN", "no records for")


def is_benign(error: BaseException) -> bool:
    if isinstance(error, NoRecords):
        return True
    if isinstance(error, ServerRejected) and error.rcode == dns.rcode.NXDOMAIN:
        return True
    text = str(error)
    return any(marker in text for marker in BENIGN_MARKERS)


def classify_failure(
    report: AuditReport,
    check: str,
    server: str,
    address: str,
    domain: str,
    error: Optional[BaseException],
    records: Sequence[object],
) -> bool:
    """
    Decide whether one check against one server failed.

    Unexpected errors are reported as a CHECK_FAILED finding. NXDOMAIN and
    empty answers count as failures but are not reported.
    """
    if error is not None:
        if not is_benign(error):
            report.add(
                Finding(
                    zone=domain,
                    issue="CHECK_FAILED",
                    severity="high",
                    server=f"{server} ({address})",
                    detail=f"{check} failed on {server} ({address}) for {domain}: {error}",
                    data={"check": check, "server": server, "address": address, "error": str(error)},
                )
            )
        return True

    if not records:
        logger.debug("%s on %s (%s) for %s returned no records", check, server, address, domain)
        return True

    return False
