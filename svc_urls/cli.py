# svc_urls/cli.py
import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from svc_urls.cluster import ClusterReader
from svc_urls.config import VERSION, Settings, settings
from svc_urls.errors import SvcUrlsError, UsageError
from svc_urls.filter import compile_pattern, select
from svc_urls.log import setup_logging
from svc_urls.render import FORMATS, render
from svc_urls.resolver import resolve_all

logger = logging.getLogger(__name__)


class ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit 1 with a single `error: ...` line, like every other fatal error."""

    def error(self, message):
        self.exit(1, f"error: {message}\n")


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="kube-svc-urls",
        description="List reachable URLs for the services and pods of a Kubernetes namespace.",
    )
    parser.add_argument("-n", "--namespace", default=settings.default_namespace,
                        help="Kubernetes namespace (default: %(default)s)")
    parser.add_argument("-k", "--kubeconfig",
                        help="Path to kubeconfig file (default: in-cluster, then ~/.kube/config)")
    parser.add_argument("--context", dest="kube_context",
                        help="kubeconfig context to use")
    parser.add_argument("-f", "--filter", dest="pattern",
                        help="Filter services by name (regex pattern)")
    parser.add_argument("-o", "--output", choices=FORMATS, default="text",
                        help="Output format (default: %(default)s)")
    parser.add_argument("--cluster-domain", default=settings.cluster_domain,
                        help="Cluster DNS domain (default: %(default)s)")
    parser.add_argument("--timeout", type=positive_float, default=settings.request_timeout,
                        help="Per-request API timeout in seconds, greater than 0")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def settings_from_args(opts: argparse.Namespace) -> Settings:
    return dataclasses.replace(
        settings,
        default_namespace=opts.namespace,
        cluster_domain=opts.cluster_domain,
        request_timeout=opts.timeout,
        log_level="DEBUG" if opts.verbose else settings.log_level,
    )


def run(opts: argparse.Namespace, cfg: Settings) -> str:
    namespace = (opts.namespace or "").strip()
    if not namespace:
        raise UsageError("namespace must not be empty")

    # fail fast: a bad pattern is reported before any API call
    pattern = compile_pattern(opts.pattern)

    with ClusterReader.connect(
        kubeconfig=opts.kubeconfig,
        kube_context=opts.kube_context,
        request_timeout=cfg.request_timeout,
    ) as reader:
        snapshot = reader.collect(namespace)

    selected = select(snapshot.services, pattern)
    logger.info("%d of %d service(s) selected", len(selected), len(snapshot.services))

    results = resolve_all(snapshot, selected, cluster_domain=cfg.cluster_domain)
    return render(opts.output, namespace, results, opts.pattern or None)


def main(argv: Optional[List[str]] = None) -> int:
    opts = build_parser().parse_args(argv)
    cfg = settings_from_args(opts)
    setup_logging(cfg.log_level, cfg.log_format)

    try:
        out = run(opts, cfg)
    except SvcUrlsError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("interrupted", file=sys.stderr)
        return 130

    sys.stdout.write(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
