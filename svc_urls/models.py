# svc_urls/models.py
from __future__ import annotations

import ipaddress
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

HEADLESS_CLUSTER_IP = "None"


def _get(d: Optional[Dict[str, Any]], *keys: str) -> Any:
    """Walk nested dicts; missing levels (or explicit nulls) yield None."""
    cur: Any = d
    for k in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(k)
    return cur


def infer_scheme(port: Optional[int], name: Optional[str] = None, protocol: Optional[str] = None) -> str:
    """
    UDP / SCTP ports keep their protocol as scheme.
    TCP is https for 443 or an "https" port name, http otherwise.
    """
    proto = (protocol or "TCP").upper()
    if proto != "TCP":
        return proto.lower()
    if port == 443 or (name and "https" in name.lower()):
        return "https"
    return "http"


def usable_port(port: Any) -> Optional[int]:
    if isinstance(port, bool) or not isinstance(port, int):
        return None
    if 1 <= port <= 65535:
        return port
    return None


class Snapshot(BaseModel):
    """Read-only API data; nothing is mutated after it is fetched."""
    model_config = ConfigDict(frozen=True)


# --------------------------------------------------
# Cluster objects
# --------------------------------------------------

class ServicePort(Snapshot):
    name: Optional[str] = None
    port: Optional[int] = None
    protocol: str = "TCP"

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "ServicePort":
        return cls(
            name=d.get("name"),
            port=d.get("port"),
            protocol=d.get("protocol") or "TCP",
        )


class Service(Snapshot):
    name: str
    namespace: str
    type: str = "ClusterIP"
    cluster_ip: Optional[str] = None
    ports: List[ServicePort] = Field(default_factory=list)
    external_name: Optional[str] = None
    # LoadBalancer ingress points, IP or hostname
    ingress: List[str] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "Service":
        spec = item.get("spec") or {}
        ingress = []
        for ing in _get(item, "status", "loadBalancer", "ingress") or []:
            if ing.get("ip"):
                ingress.append(ing["ip"])
            if ing.get("hostname"):
                ingress.append(ing["hostname"])

        return cls(
            name=_get(item, "metadata", "name"),
            namespace=_get(item, "metadata", "namespace") or "",
            type=spec.get("type") or "ClusterIP",
            cluster_ip=spec.get("clusterIP"),
            ports=[ServicePort.from_api(p) for p in spec.get("ports") or []],
            external_name=spec.get("externalName"),
            ingress=ingress,
        )

    @property
    def is_headless(self) -> bool:
        if self.type == "ExternalName":
            return False
        return not self.cluster_ip or self.cluster_ip == HEADLESS_CLUSTER_IP

    @property
    def has_cluster_ip(self) -> bool:
        return self.type != "ExternalName" and not self.is_headless

    @property
    def kind(self) -> str:
        if self.type in ("NodePort", "LoadBalancer", "ExternalName"):
            return self.type
        return "Headless" if self.is_headless else "ClusterIP"

    def dns_name(self, domain: str = "cluster.local") -> str:
        return f"{self.name}.{self.namespace}.svc.{domain}"


class EndpointAddress(Snapshot):
    ip: str = ""
    target_kind: Optional[str] = None
    target_name: Optional[str] = None

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "EndpointAddress":
        ref = d.get("targetRef") or {}
        return cls(
            ip=d.get("ip") or "",
            target_kind=ref.get("kind"),
            target_name=ref.get("name"),
        )

    @property
    def valid_ip(self) -> bool:
        try:
            ipaddress.ip_address(self.ip)
        except ValueError:
            return False
        return True

    @property
    def pod_ref(self) -> Optional[str]:
        # targetRef without a kind is treated as a pod; that is what the
        # endpoints controller writes for selector-backed services
        if self.target_name and self.target_kind in (None, "Pod"):
            return self.target_name
        return None


class EndpointPort(Snapshot):
    name: Optional[str] = None
    port: Optional[int] = None
    protocol: str = "TCP"

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "EndpointPort":
        return cls(
            name=d.get("name"),
            port=d.get("port"),
            protocol=d.get("protocol") or "TCP",
        )


class EndpointSubset(Snapshot):
    """Ready addresses only; notReadyAddresses are not reachable."""
    addresses: List[EndpointAddress] = Field(default_factory=list)
    ports: List[EndpointPort] = Field(default_factory=list)

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "EndpointSubset":
        return cls(
            addresses=[EndpointAddress.from_api(a) for a in d.get("addresses") or []],
            ports=[EndpointPort.from_api(p) for p in d.get("ports") or []],
        )


class Pod(Snapshot):
    name: str
    namespace: str = ""
    pod_ip: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "Pod":
        return cls(
            name=_get(item, "metadata", "name"),
            namespace=_get(item, "metadata", "namespace") or "",
            pod_ip=_get(item, "status", "podIP"),
        )

    def dashed_ip(self, fallback: str = "") -> str:
        return (self.pod_ip or fallback).replace(".", "-").replace(":", "-")


# --------------------------------------------------
# Resolution output
# --------------------------------------------------

class ResolvedUrl(Snapshot):
    scheme: str
    host: str
    port: int
    label: str = ""

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}"


class PodEntry(Snapshot):
    pod_name: str
    ip: str
    urls: List[ResolvedUrl] = Field(default_factory=list)


class ResolvedService(Snapshot):
    service: Service
    dns_name: str
    dns_urls: List[ResolvedUrl] = Field(default_factory=list)
    cluster_ip_urls: List[ResolvedUrl] = Field(default_factory=list)
    external_urls: List[ResolvedUrl] = Field(default_factory=list)
    headless_urls: List[ResolvedUrl] = Field(default_factory=list)
    pods: List[PodEntry] = Field(default_factory=list)

    @property
    def urls(self) -> List[ResolvedUrl]:
        """Every URL in display order."""
        out = self.dns_urls + self.cluster_ip_urls + self.external_urls + self.headless_urls
        for p in self.pods:
            out.extend(p.urls)
        return out

    @property
    def is_empty(self) -> bool:
        return not self.urls

    def summary(self) -> Dict[str, Any]:
        return {
            "name": self.service.name,
            "type": self.service.kind,
            "dns_name": self.dns_name,
            "cluster_ip": self.service.cluster_ip if self.service.has_cluster_ip else None,
            "dns_urls": [u.url for u in self.dns_urls],
            "cluster_ip_urls": [u.url for u in self.cluster_ip_urls],
            "external_urls": [u.url for u in self.external_urls],
            "headless_urls": [u.url for u in self.headless_urls],
            "pods": [
                {"name": p.pod_name, "ip": p.ip, "urls": [u.url for u in p.urls]}
                for p in self.pods
            ],
        }
