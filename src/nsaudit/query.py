from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Tuple

import dns.exception
import dns.flags
import dns.message
import dns.query
import dns.rcode
import dns.rdatatype

from .errors import InvalidQuestion, NoRecords, ServerRejected, TransportError
from .models import Question, QueryOutcome, Record
from .records import filter_message, records_of

logger = logging.getLogger(__name__)

SECURE_PAYLOAD = 4096

# (message, server, timeout, port) -> response
Transport = Callable[..., dns.message.Message]


def udp_with_tcp_fallback(
    message: dns.message.Message,
    server: str,
    *,
    timeout: float,
    port: int = 53,
) -> dns.message.Message:
    """Send over UDP, retrying over TCP when the reply comes back truncated."""
    response, _used_tcp = dns.query.udp_with_fallback(message, server, timeout=timeout, port=port)
    return response


def build_query(question: Question, secure: bool = False) -> dns.message.Message:
    """
    Build a recursive query carrying exactly one question.

    Plain queries set CD so a validating forwarder still hands back data for
    broken zones. Secure queries clear CD and advertise EDNS0 with DO and a
    4096 byte payload.
    """
    m = dns.message.make_query(question.name, question.rdtype, question.rdclass)
    m.flags |= dns.flags.RD
    if secure:
        m.flags &= ~dns.flags.CD
        m.use_edns(edns=0, ednsflags=dns.flags.DO, payload=SECURE_PAYLOAD)
    else:
        m.flags |= dns.flags.CD
    return m


class QueryExecutor:
    """Sends one question to one server and classifies the reply by rcode."""

    def __init__(
        self,
        timeout: float = 2.0,
        port: int = 53,
        transport: Optional[Transport] = None,
    ) -> None:
        self.timeout = float(timeout)
        self.port = int(port)
        self._transport = transport or udp_with_tcp_fallback

    def with_port(self, port: int) -> "QueryExecutor":
        """Same transport and timeout, different destination port."""
        return QueryExecutor(timeout=self.timeout, port=port, transport=self._transport)

    def query(self, question: Question, server: str, secure: bool = False) -> QueryOutcome:
        try:
            m = build_query(question, secure=secure)
        except dns.exception.DNSException as e:
            raise InvalidQuestion(question.name, e) from e

        started = time.perf_counter()
        try:
            response = self._transport(m, server, timeout=self.timeout, port=self.port)
        except (dns.exception.DNSException, OSError, ValueError) as e:
            logger.debug("query %s/%s to %s:%s failed: %s", question.name, question.rdtype, server, self.port, e)
            raise TransportError(server, e) from e
        rtt = time.perf_counter() - started

        rcode = response.rcode()
        if rcode != dns.rcode.NOERROR:
            raise ServerRejected(rcode)

        return QueryOutcome(response=response, records=tuple(records_of(response)), server=server, rtt=rtt)


class RRsetResolver:
    """Ask one question, get back the records of that type, or an error."""

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor

    def resolve_rrset(
        self,
        name: str,
        rdtype: int,
        server: str,
        secure: bool = False,
    ) -> Tuple[List[Record], float]:
        rdtype = dns.rdatatype.RdataType.make(rdtype)
        outcome = self.executor.query(Question(name=name, rdtype=rdtype), server, secure=secure)
        rrset = filter_message(outcome.response, rdtype)
        if not rrset:
            raise NoRecords(rdtype)
        return rrset, outcome.rtt
