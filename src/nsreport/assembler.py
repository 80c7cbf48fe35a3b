from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder

from .recommendations import Recommendations

SEVERITY_PENALTY = {"high": 25, "medium": 10, "low": 5}


class Assemble:
    """
    Shapes audit results into one JSON-safe response.

    The audit tool only detects; this class adds what a reader needs on top:
    a flat findings list tagged with the producing check, a recommendation per
    finding, and a severity summary.
    """

    def build(
        self,
        target: str,
        checks: Dict[str, Any],
        meta: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Args:
            target: Zone that was audited (already validated/normalized).
            checks: check name -> result object (anything with to_dict(), or plain data).
            meta: Optional metadata (version, source...).
        """
        checks_json = {name: self._to_json(value) for name, value in checks.items()}
        findings = self._collect_findings(checks_json)
        for f in findings:
            f["recommendation"] = Recommendations.recommend(f.get("issue") or "")

        return jsonable_encoder(
            {
                "target": target,
                "findings": findings,
                "summary": self.summarize(findings),
                "meta": meta or {},
                "checks": checks_json,
            }
        )

    def _to_json(self, obj: Any) -> Any:
        if hasattr(obj, "to_dict"):
            return jsonable_encoder(obj.to_dict())
        return jsonable_encoder(obj)

    def _collect_findings(self, checks_json: Dict[str, Any]) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for check_name, result in checks_json.items():
            findings = result.get("findings") if isinstance(result, dict) else None
            for f in findings or []:
                if isinstance(f, dict):
                    out.append({**f, "check": f.get("check", check_name)})
        return out

    def summarize(self, findings: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Counts per severity and a 0..100 score (100 = nothing found)."""
        counts = {"high": 0, "medium": 0, "low": 0, "info": 0, "unknown": 0}
        for f in findings:
            sev = f.get("severity")
            sev = sev.lower() if isinstance(sev, str) else "unknown"
            counts[sev] = counts.get(sev, 0) + 1

        penalty = sum(SEVERITY_PENALTY.get(sev, 0) * n for sev, n in counts.items())
        score = max(0, min(100, 100 - penalty))
        return {"issues": sum(counts.values()), **counts, "score": score}
