"""
Command-line interface for the nameserver audit.

Mirrors the flow of the web app:
  1) validate + normalize each zone (require_domain)
  2) run the audit
  3) assemble a JSON-safe response with Assemble.build()
"""

import argparse
import json
from typing import Any, Dict, List

from nsaudit import NSAuditTool, __version__
from nsaudit.config import AuditConfig, resolve_server
from nsaudit.logging_config import init_logging
from nsreport.assembler import Assemble
from nsreport.targets import InvalidDomain, require_domain


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    env = AuditConfig.from_env()
    p = argparse.ArgumentParser(description="Nameserver delegation / redundancy audit")
    p.add_argument("zones", nargs="+", help="Domain/zone names (e.g., example.com)")
    p.add_argument("-s", "--server", default=env.resolver, help=f"Resolver used for discovery (default: {env.resolver})")
    p.add_argument("--port", type=int, default=env.port, help="Resolver port (default: %(default)s)")
    p.add_argument("--timeout", type=float, default=env.timeout, help="Per-query timeout in seconds (default: %(default)s)")
    p.add_argument("--deadline", type=float, default=env.deadline, help="Overall scan deadline per zone in seconds, 0 for none (default: %(default)s)")
    p.add_argument("--json", dest="as_json", action="store_true", help="Output JSON")
    p.add_argument("--no-enrich", action="store_true", help="Skip ASN/country/org lookups")
    p.add_argument("--no-probe", action="store_true", help="Skip direct SOA/NS queries to each nameserver")
    p.add_argument("--log-level", default=env.log_level, help="debug, info, warn, error (default: %(default)s)")
    p.add_argument("--version", action="version", version=f"nsaudit {__version__}")
    return p.parse_args(argv)


def validate_zones(raw_zones: List[str]) -> List[str]:
    """
    Validate + normalize all zones before doing any network work.

    Raises:
        SystemExit(2): if any zone is invalid.
    """
    normalized: List[str] = []
    errors: List[str] = []

    for z in raw_zones:
        try:
            normalized.append(require_domain(z))
        except InvalidDomain as e:
            errors.append(f"{z}: {e}")

    if errors:
        for e in errors:
            print(f"Invalid input: {e}")
        raise SystemExit(2)

    return normalized


def print_human(zone_response: Dict[str, Any]) -> None:
    target = zone_response.get("target", "")
    summary = zone_response.get("summary") or {}
    report = (zone_response.get("checks") or {}).get("delegation") or {}

    print(f"\n== {target} == (parent {report.get('parent', '?')}, resolver {report.get('resolver', '?')})")
    for ns in report.get("nameservers") or []:
        addrs = []
        for ip in ns.get("addresses") or []:
            info = (ns.get("ownership") or {}).get(ip)
            if info and info.get("asn") is not None:
                addrs.append(f"{ip} [AS{info['asn']} {info.get('country') or '??'} {info.get('organization') or ''}]".rstrip())
            else:
                addrs.append(ip)
        print(f"  NS {ns.get('name')}: {', '.join(addrs) or '(no address)'}")

    print(
        f"Overall: {report.get('overall', 'unknown')} | "
        f"Issues: {summary.get('issues', 0)} | "
        f"High: {summary.get('high', 0)} | "
        f"Medium: {summary.get('medium', 0)} | "
        f"Low: {summary.get('low', 0)} | "
        f"Score: {summary.get('score', 0)}"
    )

    findings = zone_response.get("findings") or []
    if not findings:
        print("No findings.")
        return

    for f in findings:
        line = f"- [{f.get('severity', 'unknown')}] {f.get('issue', '')}"
        if f.get("server"):
            line += f" {f['server']}"
        if f.get("detail"):
            line += f": {f['detail']}"
        print(line)
        if f.get("recommendation"):
            print(f"    Recommendation: {f['recommendation']}")


def main(argv: List[str] | None = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    args = parse_args(argv)
    init_logging({"level": args.log_level})

    zones = validate_zones(args.zones)

    config = AuditConfig(
        resolver=resolve_server(args.server),
        port=args.port,
        timeout=args.timeout,
        deadline=args.deadline,
        enrich=not args.no_enrich,
        probe=not args.no_probe,
        log_level=args.log_level,
    )
    tool = NSAuditTool(config)
    assembler = Assemble()

    results: List[Dict[str, Any]] = []
    for zone in zones:
        report = tool.check_zone(zone)
        results.append(
            assembler.build(
                target=zone,
                checks={"delegation": report},
                meta={"version": __version__, "source": "cli"},
            )
        )

    if args.as_json:
        print(json.dumps({"targets": zones, "results": results}, indent=2))
    else:
        for r in results:
            print_human(r)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
