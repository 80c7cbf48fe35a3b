"""
Nameserver delegation / redundancy audit.

Discovers a zone's nameservers through one configured resolver, resolves
them to addresses, and flags single points of failure (one nameserver, one
/24, one ASN) and RFC 1918 addresses published for public nameservers.

Public entrypoint: NSAuditTool
"""

from .tool import NSAuditTool

__version__ = "0.1.0"

__all__ = ["NSAuditTool", "__version__"]
