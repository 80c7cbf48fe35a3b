from __future__ import annotations

import dns.exception
import dns.flags
import dns.name
import dns.rcode
import dns.rdataclass
import dns.rdatatype
import pytest

from conftest import RESOLVER
from nsaudit.errors import InvalidQuestion, NoRecords, ServerRejected, TransportError
from nsaudit.models import Question
from nsaudit.query import SECURE_PAYLOAD, QueryExecutor, RRsetResolver, build_query


def test_build_query_plain():
    m = build_query(Question("example.com.", dns.rdatatype.NS))
    assert len(m.question) == 1
    q = m.question[0]
    assert q.name.to_text() == "example.com."
    assert q.rdtype == dns.rdatatype.NS
    assert q.rdclass == dns.rdataclass.IN
    assert m.flags & dns.flags.RD
    assert m.flags & dns.flags.CD
    assert m.edns < 0


def test_build_query_secure_advertises_edns_and_clears_cd():
    m = build_query(Question("example.com.", dns.rdatatype.SOA), secure=True)
    assert m.flags & dns.flags.RD
    assert not m.flags & dns.flags.CD
    assert m.edns == 0
    assert m.payload == SECURE_PAYLOAD
    assert m.ednsflags & dns.flags.DO


def test_build_query_ids_vary():
    ids = {build_query(Question("example.com.", dns.rdatatype.A)).id for _ in range(20)}
    assert len(ids) > 1


def test_executor_returns_outcome(fake_dns, executor):
    fake_dns.answer("example.com", "A", "192.0.2.1")
    out = executor.query(Question("example.com.", dns.rdatatype.A), RESOLVER)
    assert out.server == RESOLVER
    assert out.rtt >= 0
    assert [r.rdata.address for r in out.records] == ["192.0.2.1"]
    assert fake_dns.calls[0][0] == RESOLVER


def test_executor_refused_is_server_rejected(fake_dns, executor):
    fake_dns.rcode("example.com", "NS", dns.rcode.REFUSED)
    with pytest.raises(ServerRejected) as exc_info:
        executor.query(Question("example.com.", dns.rdatatype.NS), RESOLVER)
    assert exc_info.value.rcode == dns.rcode.REFUSED
    assert "REFUSED" in str(exc_info.value)


def test_executor_timeout_is_transport_error(fake_dns, executor):
    fake_dns.fail("example.com", "NS", dns.exception.Timeout())
    with pytest.raises(TransportError) as exc_info:
        executor.query(Question("example.com.", dns.rdatatype.NS), RESOLVER)
    assert exc_info.value.server == RESOLVER


def test_executor_socket_error_is_transport_error(fake_dns, executor):
    fake_dns.fail("example.com", "NS", ConnectionRefusedError("connection refused"))
    with pytest.raises(TransportError):
        executor.query(Question("example.com.", dns.rdatatype.NS), RESOLVER)


def test_executor_passes_timeout_and_port():
    seen = {}

    def transport(message, server, *, timeout, port):
        seen.update(server=server, timeout=timeout, port=port)
        raise dns.exception.Timeout()

    ex = QueryExecutor(timeout=3.5, port=5353, transport=transport)
    with pytest.raises(TransportError):
        ex.query(Question("example.com.", dns.rdatatype.A), "198.51.100.1")
    assert seen == {"server": "198.51.100.1", "timeout": 3.5, "port": 5353}


def test_resolve_rrset_filters_to_requested_type(fake_dns, executor):
    fake_dns.answer(
        "www.example.com", "A", "192.0.2.80",
        extra=(("www.example.com.", "CNAME", ["web.example.com."]),),
    )
    records, rtt = RRsetResolver(executor).resolve_rrset("www.example.com", dns.rdatatype.A, RESOLVER)
    assert [r.rdata.address for r in records] == ["192.0.2.80"]
    assert rtt >= 0


def test_resolve_rrset_empty_answer_is_no_records(fake_dns, executor):
    fake_dns.answer(
        "alias.example.com", "A",
        extra=(("alias.example.com.", "CNAME", ["elsewhere.example.net."]),),
    )
    with pytest.raises(NoRecords) as exc_info:
        RRsetResolver(executor).resolve_rrset("alias.example.com", dns.rdatatype.A, RESOLVER)
    assert exc_info.value.rdtype == dns.rdatatype.A


def test_resolve_rrset_refused_never_silently_empty(fake_dns, executor):
    fake_dns.rcode("example.com", "NS", dns.rcode.REFUSED)
    with pytest.raises(ServerRejected):
        RRsetResolver(executor).resolve_rrset("example.com", dns.rdatatype.NS, RESOLVER)


def test_resolve_rrset_secure_sends_edns(fake_dns, executor):
    fake_dns.answer("example.com", "SOA", "ns1.example.com. hostmaster.example.com. 1 7200 900 1209600 300")
    RRsetResolver(executor).resolve_rrset("example.com", dns.rdatatype.SOA, RESOLVER, secure=True)
    sent = fake_dns.calls[-1][3]
    assert sent.edns == 0
    assert sent.payload == SECURE_PAYLOAD


def test_unencodable_name_is_invalid_question(fake_dns, executor):
    with pytest.raises(InvalidQuestion) as exc_info:
        executor.query(Question("x" * 64 + ".example.com.", dns.rdatatype.A), RESOLVER)
    assert isinstance(exc_info.value.cause, dns.name.LabelTooLong)
    assert fake_dns.calls == []


def test_with_port_keeps_transport_and_timeout(fake_dns):
    resolver_side = QueryExecutor(timeout=1.5, port=5353, transport=fake_dns)
    direct = resolver_side.with_port(53)
    fake_dns.answer("example.com", "A", "192.0.2.1")

    direct.query(Question("example.com.", dns.rdatatype.A), "192.0.2.1")

    assert (direct.port, direct.timeout) == (53, 1.5)
    assert resolver_side.port == 5353
    assert fake_dns.destinations == [("192.0.2.1", 53)]
