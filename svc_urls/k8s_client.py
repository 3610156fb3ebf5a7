# svc_urls/k8s_client.py
import logging
import os
from typing import Optional

import yaml
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from svc_urls.errors import AuthenticationError

logger = logging.getLogger(__name__)


def load_api_client(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> client.ApiClient:
    """
    Returns an authenticated ApiClient.

    - kubeconfig given -> that file only
    - otherwise in-cluster config first, then the default kubeconfig
      (KUBECONFIG / ~/.kube/config); an explicit context skips in-cluster
    """
    if kubeconfig:
        path = os.path.expanduser(kubeconfig)
        if not os.path.isfile(path):
            raise AuthenticationError(f"kubeconfig not found: {kubeconfig}")
        return _from_kubeconfig(path, context)

    if not context:
        try:
            config.load_incluster_config()
            logger.debug("using in-cluster configuration")
            return client.ApiClient()
        except ConfigException:
            pass

    return _from_kubeconfig(None, context)


def _from_kubeconfig(path: Optional[str], context: Optional[str]) -> client.ApiClient:
    where = path or "default kubeconfig location"
    try:
        api_client = config.new_client_from_config(config_file=path, context=context)
    except ConfigException as e:
        raise AuthenticationError(f"invalid kubeconfig ({where}): {e}") from e
    except yaml.YAMLError as e:
        raise AuthenticationError(f"malformed kubeconfig ({where}): {e}") from e
    except OSError as e:
        raise AuthenticationError(f"cannot read kubeconfig ({where}): {e}") from e
    logger.debug("using kubeconfig from %s (context=%s)", where, context or "current")
    return api_client
