# svc_urls/cluster.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import urllib3
from kubernetes import client
from kubernetes.client import ApiException

from svc_urls.errors import (
    ApiConnectionError,
    ApiPermissionError,
    AuthenticationError,
    ClusterError,
)
from svc_urls.k8s_client import load_api_client
from svc_urls.models import EndpointSubset, Pod, Service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterSnapshot:
    namespace: str
    services: List[Service]
    endpoints: Dict[str, List[EndpointSubset]]
    pods: List[Pod]


class ClusterReader:
    """
    Read-only Kubernetes API client scoped to list calls.
    No write methods are exposed.

    Use as a context manager; the underlying ApiClient (and its connection
    pool) is closed on exit whether or not the run failed.
    """

    def __init__(self, api_client: client.ApiClient, request_timeout: Optional[float] = None):
        self.api_client = api_client
        self.core = client.CoreV1Api(api_client)
        self.request_timeout = request_timeout

    @classmethod
    def connect(
        cls,
        kubeconfig: Optional[str] = None,
        kube_context: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ) -> "ClusterReader":
        return cls(load_api_client(kubeconfig, kube_context), request_timeout=request_timeout)

    def __enter__(self) -> "ClusterReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.api_client.close()

    # ----------------------------
    # List primitives
    # ----------------------------

    def _list(self, resource: str, fn: Callable[..., Any], namespace: str) -> List[Dict[str, Any]]:
        """Run one list call and return its items as plain JSON dicts."""
        kwargs: Dict[str, Any] = {"namespace": namespace}
        if self.request_timeout is not None:
            kwargs["_request_timeout"] = self.request_timeout

        what = f"listing {resource} in namespace '{namespace}'"
        try:
            obj = fn(**kwargs)
        except ApiException as e:
            raise _translate(what, e) from e
        except (urllib3.exceptions.HTTPError, OSError) as e:
            raise ApiConnectionError(f"{what} failed: API server unreachable ({e})") from e

        data = self.api_client.sanitize_for_serialization(obj) or {}
        items = data.get("items") or []
        logger.debug("%s returned %d item(s)", what, len(items))
        return items

    def list_services(self, namespace: str) -> List[Service]:
        items = self._list("services", self.core.list_namespaced_service, namespace)
        return [Service.from_api(i) for i in items]

    def list_endpoints(self, namespace: str) -> Dict[str, List[EndpointSubset]]:
        """Endpoint subsets keyed by service name (Endpoints share the service's name)."""
        items = self._list("endpoints", self.core.list_namespaced_endpoints, namespace)
        out: Dict[str, List[EndpointSubset]] = {}
        for ep in items:
            name = (ep.get("metadata") or {}).get("name")
            if not name:
                continue
            out[name] = [EndpointSubset.from_api(s) for s in ep.get("subsets") or []]
        return out

    def list_pods(self, namespace: str) -> List[Pod]:
        items = self._list("pods", self.core.list_namespaced_pod, namespace)
        return [Pod.from_api(i) for i in items]

    def collect(self, namespace: str) -> ClusterSnapshot:
        services = self.list_services(namespace)
        endpoints = self.list_endpoints(namespace)
        pods = self.list_pods(namespace)

        return ClusterSnapshot(
            namespace=namespace,
            services=services,
            endpoints=endpoints,
            pods=pods,
        )


def _translate(what: str, e: ApiException) -> Exception:
    reason = e.reason or "unknown reason"
    if e.status == 401:
        return AuthenticationError(f"{what} was rejected: unauthorized ({reason})")
    if e.status == 403:
        return ApiPermissionError(f"{what} was forbidden: {reason}")
    if not e.status:
        # the client reports transport failures as status 0
        return ApiConnectionError(f"{what} failed: {reason}")
    return ClusterError(f"{what} failed: HTTP {e.status} {reason}")
