"""Tests for API snapshot models and logging setup."""

import logging

import pytest
from conftest import address, pod_item, service_item
from pydantic import ValidationError

from svc_urls import log
from svc_urls.log import remove_handler, setup_logging
from svc_urls.models import EndpointAddress, Pod, Service, infer_scheme, usable_port


class TestInferScheme:

    @pytest.mark.parametrize("port,name,protocol,expected", [
        (80, "http", "TCP", "http"),
        (8080, None, None, "http"),
        (443, None, "TCP", "https"),
        (8443, "https", "TCP", "https"),
        (9443, "web-HTTPS", "TCP", "https"),
        (53, "dns", "UDP", "udp"),
        (443, None, "UDP", "udp"),
        (3868, "diameter", "SCTP", "sctp"),
    ])
    def test_scheme(self, port, name, protocol, expected):
        assert infer_scheme(port, name, protocol) == expected


class TestUsablePort:

    @pytest.mark.parametrize("value,expected", [
        (80, 80), (65535, 65535), (0, None), (70000, None), (None, None), ("http", None), (True, None),
    ])
    def test_usable_port(self, value, expected):
        assert usable_port(value) == expected


class TestService:

    def test_from_api(self):
        svc = Service.from_api(service_item(
            "front", namespace="web", svc_type="LoadBalancer",
            ingress=[{"ip": "203.0.113.7", "hostname": "lb.example.com"}],
        ))

        assert svc.namespace == "web"
        assert svc.kind == "LoadBalancer"
        assert svc.ingress == ["203.0.113.7", "lb.example.com"]
        assert svc.dns_name() == "front.web.svc.cluster.local"
        assert svc.has_cluster_ip

    @pytest.mark.parametrize("cluster_ip", [None, "", "None"])
    def test_headless(self, cluster_ip):
        svc = Service.from_api(service_item("db", cluster_ip=cluster_ip))

        assert svc.is_headless
        assert not svc.has_cluster_ip
        assert svc.kind == "Headless"

    def test_external_name_is_not_headless(self):
        item = service_item("ext", cluster_ip=None, svc_type="ExternalName", ports=[])
        item["spec"]["externalName"] = "db.example.com"
        svc = Service.from_api(item)

        assert svc.kind == "ExternalName"
        assert not svc.is_headless
        assert not svc.has_cluster_ip
        assert svc.external_name == "db.example.com"

    def test_default_protocol(self):
        svc = Service.from_api(service_item("x", ports=[{"port": 80}]))

        assert svc.ports[0].protocol == "TCP"

    def test_snapshots_are_frozen(self):
        svc = Service.from_api(service_item("x"))

        with pytest.raises(ValidationError):
            svc.name = "y"


class TestEndpointAddress:

    def test_pod_ref(self):
        assert EndpointAddress.from_api(address("10.0.0.1", pod="p")).pod_ref == "p"
        assert EndpointAddress.from_api(address("10.0.0.1")).pod_ref is None

    def test_non_pod_target_is_not_a_pod(self):
        a = EndpointAddress.from_api({"ip": "10.0.0.1", "targetRef": {"kind": "Node", "name": "n1"}})

        assert a.pod_ref is None

    @pytest.mark.parametrize("ip,valid", [
        ("10.244.0.1", True), ("fd00::1", True), ("", False), ("10.244.0", False), ("pod-a", False),
    ])
    def test_valid_ip(self, ip, valid):
        assert EndpointAddress(ip=ip).valid_ip is valid


class TestPod:

    def test_dashed_ip(self):
        assert Pod.from_api(pod_item("p", "10.244.0.1")).dashed_ip() == "10-244-0-1"
        assert Pod.from_api(pod_item("p", None)).dashed_ip("10.1.2.3") == "10-1-2-3"
        assert Pod.from_api(pod_item("p", "fd00::1")).dashed_ip() == "fd00--1"


class TestSetupLogging:

    def test_handler_is_not_stacked(self):
        setup_logging("DEBUG")
        first = log._handler
        setup_logging("INFO")

        root = logging.getLogger()
        assert first not in root.handlers
        assert log._handler in root.handlers
        assert isinstance(log._handler, logging.StreamHandler)
        assert root.level == logging.INFO
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_remove_handler(self):
        setup_logging()
        installed = log._handler

        remove_handler()

        assert installed not in logging.getLogger().handlers
        assert log._handler is None
