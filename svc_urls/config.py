# svc_urls/config.py
from dataclasses import dataclass
from typing import Optional

VERSION = "0.1.0"


@dataclass(frozen=True)
class Settings:
    default_namespace: str = "default"
    cluster_domain: str = "cluster.local"
    log_level: str = "WARNING"
    log_format: str = "%(levelname)s %(name)s: %(message)s"
    # Seconds per API request; None keeps the kubernetes client default.
    request_timeout: Optional[float] = None
    unknown_pod_name: str = "unknown"


# module-level instance; the CLI derives per-run copies with dataclasses.replace
settings = Settings()
