"""Shared test fixtures.

Factories build dicts shaped like `kubectl get -o json` items, which is what
ClusterReader gets back from ApiClient.sanitize_for_serialization.
"""

from __future__ import annotations

from typing import Any

import pytest

from svc_urls import log
from svc_urls.models import EndpointSubset, Pod, Service


def service_item(
    name: str,
    namespace: str = "default",
    cluster_ip: str | None = "10.96.0.1",
    ports: list[dict] | None = None,
    svc_type: str = "ClusterIP",
    ingress: list[dict] | None = None,
) -> dict[str, Any]:
    spec: dict[str, Any] = {
        "type": svc_type,
        "ports": ports if ports is not None else [{"name": "http", "port": 80, "protocol": "TCP"}],
    }
    if cluster_ip is not None:
        spec["clusterIP"] = cluster_ip
    item: dict[str, Any] = {
        "metadata": {"name": name, "namespace": namespace},
        "spec": spec,
    }
    if ingress is not None:
        item["status"] = {"loadBalancer": {"ingress": ingress}}
    return item


def address(ip: str, pod: str | None = None) -> dict[str, Any]:
    d: dict[str, Any] = {"ip": ip}
    if pod:
        d["targetRef"] = {"kind": "Pod", "name": pod, "namespace": "default"}
    return d


def subset_item(addresses: list[dict], ports: list[dict] | None = None) -> dict[str, Any]:
    return {
        "addresses": addresses,
        "ports": ports if ports is not None else [{"name": "http", "port": 80, "protocol": "TCP"}],
    }


def endpoints_item(name: str, subsets: list[dict], namespace: str = "default") -> dict[str, Any]:
    return {"metadata": {"name": name, "namespace": namespace}, "subsets": subsets}


def pod_item(name: str, ip: str | None, namespace: str = "default") -> dict[str, Any]:
    item: dict[str, Any] = {"metadata": {"name": name, "namespace": namespace}, "status": {}}
    if ip is not None:
        item["status"]["podIP"] = ip
    return item


@pytest.fixture
def make_service():
    def _make(name: str, **kwargs) -> Service:
        return Service.from_api(service_item(name, **kwargs))
    return _make


@pytest.fixture
def make_subset():
    def _make(addresses: list[dict], ports: list[dict] | None = None) -> EndpointSubset:
        return EndpointSubset.from_api(subset_item(addresses, ports))
    return _make


@pytest.fixture
def make_pod():
    def _make(name: str, ip: str | None) -> Pod:
        return Pod.from_api(pod_item(name, ip))
    return _make


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the stderr handler main() installs; capsys closes its stream."""
    yield
    log.remove_handler()
