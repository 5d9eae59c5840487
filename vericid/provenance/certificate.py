"""Provenance certificates - JSON and Markdown exports of an aggregation."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from vericid.cid.encoder import CIDPair
from vericid.provenance.integrity import IntegrityVerifier
from vericid.provenance.models import AggregationResult


class ReportCertificate:
    """Render an ``AggregationResult`` for export.

    A certificate includes:
    - the searched identifiers
    - the ranked origins with explorer links
    - trust tier and failed lookups
    - SHA-256 checksum for integrity verification
    """

    def generate(
        self,
        result: AggregationResult,
        cids: CIDPair | None = None,
    ) -> dict[str, Any]:
        """Return a JSON-ready certificate with an integrity checksum."""
        certificate_data = result.to_dict()
        certificate_data["searched_cids"] = cids.to_dict() if cids else None
        certificate_data["generated_at"] = datetime.now(timezone.utc).isoformat()

        certificate_data["checksum"] = IntegrityVerifier.compute_checksum(certificate_data)
        return certificate_data

    def generate_markdown(
        self,
        result: AggregationResult,
        cids: CIDPair | None = None,
    ) -> str:
        """Return a Markdown-formatted certificate."""
        cert = self.generate(result, cids)

        lines = [
            "# Provenance Certificate",
            "",
            f"**Identifier:** `{cert['identifier']}`",
            f"**Trust tier:** {cert['trust_tier']}",
            f"**Origins found:** {cert['total_origins']}",
            f"**Last found:** {cert['last_found'] or 'never'}",
            f"**Generated:** {cert['generated_at']}",
            f"**Checksum:** `{cert['checksum']}`",
            "",
        ]

        searched = cert.get("searched_cids")
        if searched:
            lines.append("## Searched Identifiers")
            lines.append("")
            lines.append(f"- CIDv0: `{searched['v0']}`")
            lines.append(f"- CIDv1: `{searched['v1']}`")
            lines.append("")

        origins = cert.get("origins", [])
        if origins:
            lines.append("## Origins")
            lines.append("")
            for origin in origins:
                label = f"{origin['network']}: {origin['address']}"
                if origin.get("explorer_url"):
                    label = f"[{label}]({origin['explorer_url']})"
                meta = ", ".join(f"{k}={v}" for k, v in origin.get("metadata", {}).items())
                suffix = f" ({meta})" if meta else ""
                lines.append(f"- {label} - {origin['timestamp'] or 'unknown time'}{suffix}")
            lines.append("")

        failed = cert.get("failed_sources", [])
        if failed:
            lines.append("## Failed Lookups")
            lines.append("")
            if cert.get("all_sources_failed"):
                lines.append("**No source could be queried; absence of origins is not evidence.**")
                lines.append("")
            for f in failed:
                lines.append(f"- {f['source']} `{f['identifier']}`: {f['error']}")
            lines.append("")

        return "\n".join(lines)

    def verify(self, certificate: dict[str, Any]) -> bool:
        """Recompute the checksum without the stored checksum field and compare."""
        stored_checksum = certificate.get("checksum")
        if not stored_checksum:
            return False

        data_without_checksum = {
            k: v for k, v in certificate.items() if k != "checksum"
        }
        return IntegrityVerifier.verify(data_without_checksum, stored_checksum)
