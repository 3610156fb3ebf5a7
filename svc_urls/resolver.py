# svc_urls/resolver.py
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from svc_urls.cluster import ClusterSnapshot
from svc_urls.config import settings
from svc_urls.errors import PartialDataWarning
from svc_urls.models import (
    EndpointAddress,
    EndpointPort,
    EndpointSubset,
    Pod,
    PodEntry,
    ResolvedService,
    ResolvedUrl,
    Service,
    ServicePort,
    infer_scheme,
    usable_port,
)

logger = logging.getLogger(__name__)


def _url(host: str, port, name: Optional[str], protocol: Optional[str]) -> Optional[ResolvedUrl]:
    number = usable_port(port)
    if number is None:
        logger.debug("skipping port %r (%s) on %s: no usable port number", port, name, host)
        return None
    return ResolvedUrl(
        scheme=infer_scheme(number, name, protocol),
        host=host,
        port=number,
        label=name or "",
    )


def _urls_for(host: str, ports: Iterable[ServicePort | EndpointPort]) -> List[ResolvedUrl]:
    out = []
    for p in ports:
        u = _url(host, p.port, p.name, p.protocol)
        if u is not None:
            out.append(u)
    return out


def _ready_addresses(service: Service, subsets: Sequence[EndpointSubset]):
    """
    Yield (address, subset) pairs in API order.
    Addresses without a parseable IP are dropped with a warning.
    """
    for subset in subsets:
        for addr in subset.addresses:
            if not addr.valid_ip:
                warning = PartialDataWarning(
                    f"service {service.namespace}/{service.name}: skipping endpoint address "
                    f"with invalid IP {addr.ip!r} (target {addr.target_name or 'none'})"
                )
                logger.warning("%s", warning)
                continue
            yield addr, subset


def resolve_service(
    service: Service,
    subsets: Sequence[EndpointSubset] = (),
    pods: Sequence[Pod] = (),
    cluster_domain: str = settings.cluster_domain,
) -> ResolvedService:
    """
    Map one Service plus its endpoint subsets to every reachable URL.

    Order: service DNS, ClusterIP, external ingress, headless pod DNS,
    then one PodEntry per ready address as the API returned them.
    """
    pods_by_name: Dict[str, Pod] = {p.name: p for p in pods}
    dns_name = service.dns_name(cluster_domain)

    dns_urls = _urls_for(dns_name, service.ports)

    cluster_ip_urls: List[ResolvedUrl] = []
    if service.has_cluster_ip:
        cluster_ip_urls = _urls_for(service.cluster_ip, service.ports)

    external_urls: List[ResolvedUrl] = []
    for host in service.ingress:
        external_urls.extend(_urls_for(host, service.ports))

    headless_urls: List[ResolvedUrl] = []
    pod_entries: List[PodEntry] = []

    for addr, subset in _ready_addresses(service, subsets):
        pod = _pod_for(addr, pods_by_name)

        if service.is_headless and pod is not None:
            pod_dns = f"{pod.dashed_ip(addr.ip)}.{dns_name}"
            headless_urls.extend(_urls_for(pod_dns, subset.ports))

        pod_entries.append(PodEntry(
            pod_name=pod.name if pod is not None else settings.unknown_pod_name,
            ip=addr.ip,
            urls=_urls_for(addr.ip, subset.ports),
        ))

    return ResolvedService(
        service=service,
        dns_name=dns_name,
        dns_urls=dns_urls,
        cluster_ip_urls=cluster_ip_urls,
        external_urls=external_urls,
        headless_urls=headless_urls,
        pods=pod_entries,
    )


def _pod_for(addr: EndpointAddress, pods_by_name: Dict[str, Pod]) -> Optional[Pod]:
    name = addr.pod_ref
    if name is None:
        return None
    pod = pods_by_name.get(name)
    if pod is None:
        logger.debug("endpoint %s references pod %s which is gone", addr.ip, name)
    return pod


def resolve_all(
    snapshot: ClusterSnapshot,
    services: Optional[Sequence[Service]] = None,
    cluster_domain: str = settings.cluster_domain,
) -> List[ResolvedService]:
    """Resolve `services` (default: every service in the snapshot) in order."""
    if services is None:
        services = snapshot.services
    return [
        resolve_service(
            svc,
            snapshot.endpoints.get(svc.name, []),
            snapshot.pods,
            cluster_domain=cluster_domain,
        )
        for svc in services
    ]
