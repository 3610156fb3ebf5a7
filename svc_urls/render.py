# svc_urls/render.py

import json
from typing import Any, Dict, List, Optional, Sequence

import yaml

from svc_urls.models import ResolvedService, ResolvedUrl

FORMATS = ("text", "json", "yaml")


def _url_line(kind: str, u: ResolvedUrl, indent: str = "  ") -> str:
    label = f" ({u.label})" if u.label else ""
    return f"{indent}{kind}: {u.url}{label}"


def _empty_message(namespace: str, pattern: Optional[str]) -> str:
    if pattern:
        return f"No services matched filter '{pattern}' in namespace '{namespace}'."
    return f"No services found in namespace '{namespace}'."


def render_text(namespace: str, results: Sequence[ResolvedService], pattern: Optional[str] = None) -> str:
    """
    Render resolved services as plain text, grouped namespace -> service -> pod.

    Blocks appear in resolver order:
    DNS, ClusterIP, external, headless DNS, pod endpoints.
    """
    lines: List[str] = [f"=== Namespace: {namespace} ==="]
    if pattern:
        lines.append(f"Filter: {pattern}")

    if not results:
        lines.append("")
        lines.append(_empty_message(namespace, pattern))
        return "\n".join(lines) + "\n"

    for r in results:
        svc = r.service
        lines.append("")
        lines.append(f"Service: {svc.name}")
        lines.append(f"  Type: {svc.kind}")
        lines.append(f"  Service DNS: {r.dns_name}")
        if svc.external_name:
            lines.append(f"  External name: {svc.external_name}")

        for u in r.dns_urls:
            lines.append(_url_line("DNS URL", u))
        for u in r.cluster_ip_urls:
            lines.append(_url_line("ClusterIP URL", u))

        if r.external_urls:
            lines.append("  External access:")
            for u in r.external_urls:
                lines.append(_url_line("External URL", u, indent="    "))

        if r.headless_urls:
            lines.append("  Headless DNS records:")
            for u in r.headless_urls:
                lines.append(_url_line("DNS URL", u, indent="    "))

        if r.pods:
            lines.append("  Pod endpoints:")
            for p in r.pods:
                lines.append(f"    Pod: {p.pod_name} ({p.ip})")
                for u in p.urls:
                    lines.append(_url_line("IP URL", u, indent="      "))

        if r.is_empty:
            lines.append("  (no reachable addresses)")

    return "\n".join(lines) + "\n"


def _document(namespace: str, results: Sequence[ResolvedService], pattern: Optional[str]) -> Dict[str, Any]:
    return {
        "namespace": namespace,
        "filter": pattern,
        "services": [r.summary() for r in results],
    }


def render_json(namespace: str, results: Sequence[ResolvedService], pattern: Optional[str] = None) -> str:
    return json.dumps(_document(namespace, results, pattern), indent=2) + "\n"


def render_yaml(namespace: str, results: Sequence[ResolvedService], pattern: Optional[str] = None) -> str:
    return yaml.safe_dump(_document(namespace, results, pattern), sort_keys=False, default_flow_style=False)


def render(fmt: str, namespace: str, results: Sequence[ResolvedService], pattern: Optional[str] = None) -> str:
    if fmt == "json":
        return render_json(namespace, results, pattern)
    if fmt == "yaml":
        return render_yaml(namespace, results, pattern)
    if fmt == "text":
        return render_text(namespace, results, pattern)
    raise ValueError(f"Unsupported output format '{fmt}'")
