from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import dns.exception
import dns.message
import dns.rcode
import dns.rdatatype
import dns.rrset
import pytest

from nsaudit.config import AuditConfig
from nsaudit.query import QueryExecutor

RESOLVER = "192.0.2.53"


def _key(qname: str, qtype: str) -> Tuple[str, str]:
    qname = qname.lower()
    return (qname if qname.endswith(".") else qname + ".", qtype.upper())


class FakeDNS:
    """
    Stand-in for the wire transport, answering from rules:

      dns_.answer("example.com", "NS", "ns1.example.com.", "ns2.example.com.")
      dns_.rcode("example.com", "SOA", dns.rcode.REFUSED, server="203.0.113.1")
      dns_.fail("ns2.example.com", "A", dns.exception.Timeout())

    A rule bound to a server wins over a server-less one. Questions with no
    rule time out, like a server that never answers.
    """

    def __init__(self) -> None:
        self.rules: Dict[Tuple[Optional[str], str, str], Tuple[str, Any]] = {}
        self.calls: List[Tuple[str, str, str, dns.message.Message]] = []
        self.destinations: List[Tuple[str, int]] = []

    def answer(self, qname: str, qtype: str, *rdatas: str, server: Optional[str] = None, extra: Tuple = ()) -> None:
        self.rules[(server, *_key(qname, qtype))] = ("answer", (rdatas, extra))

    def rcode(self, qname: str, qtype: str, rcode: int, server: Optional[str] = None) -> None:
        self.rules[(server, *_key(qname, qtype))] = ("rcode", rcode)

    def fail(self, qname: str, qtype: str, exc: BaseException, server: Optional[str] = None) -> None:
        self.rules[(server, *_key(qname, qtype))] = ("fail", exc)

    def __call__(self, message: dns.message.Message, server: str, *, timeout: float, port: int = 53) -> dns.message.Message:
        q = message.question[0]
        qname, qtype = _key(q.name.to_text(), dns.rdatatype.to_text(q.rdtype))
        self.calls.append((server, qname, qtype, message))
        self.destinations.append((server, port))

        rule = self.rules.get((server, qname, qtype)) or self.rules.get((None, qname, qtype))
        if rule is None:
            raise dns.exception.Timeout()

        kind, value = rule
        if kind == "fail":
            raise value

        response = dns.message.make_response(message)
        if kind == "rcode":
            response.set_rcode(value)
            return response

        rdatas, extra = value
        for name, rtype, texts in extra:
            response.answer.append(dns.rrset.from_text(name, 300, "IN", rtype, *texts))
        if rdatas:
            response.answer.append(dns.rrset.from_text(qname, 300, "IN", qtype, *rdatas))
        return response


@pytest.fixture
def fake_dns() -> FakeDNS:
    return FakeDNS()


@pytest.fixture
def executor(fake_dns: FakeDNS) -> QueryExecutor:
    return QueryExecutor(timeout=1.0, transport=fake_dns)


@pytest.fixture
def config() -> AuditConfig:
    return AuditConfig(resolver=RESOLVER, timeout=1.0, enrich=False, probe=False)
