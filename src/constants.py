"""Constants used in the project."""

import logging
import os
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    INVALID_ARGUMENT = 3
    NOT_FOUND = 4


class RepoBackends(Enum):
    """Source-control backends for the standard library repository.

    Args:
        Enum (string): Backend names accepted in configuration.
    """

    REMOTE = "remote"
    LOCAL = "local"
    FIXTURE = "fixture"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    STD_MODULE_PATH = "std"
    GO_REPO_URL = "https://go.googlesource.com/go"
    PROXY_URL = "https://proxy.golang.org"

    REPO_BACKEND = RepoBackends.REMOTE.value
    REPO_PATH: Optional[str] = None

    GIT_BINARY = "git"
    GIT_TIMEOUT = 300  # Timeout in seconds for each git subprocess
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "STDRESOLVE_LOG_LEVEL"
    ENV_CONFIG = "STDRESOLVE_CONFIG"
    ENV_PROXY_URL = "STDRESOLVE_PROXY_URL"
    ENV_REPO_PATH = "STDRESOLVE_REPO_PATH"


# Config keys accepted from YAML, mapped to Constants attributes.
_CONFIG_KEYS = {
    "go_repo_url": "GO_REPO_URL",
    "proxy_url": "PROXY_URL",
    "repo_backend": "REPO_BACKEND",
    "repo_path": "REPO_PATH",
    "git_binary": "GIT_BINARY",
    "git_timeout": "GIT_TIMEOUT",
    "request_timeout": "REQUEST_TIMEOUT",
}


def load_yaml_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the YAML configuration file.

    The path defaults to the STDRESOLVE_CONFIG environment variable. A missing
    file yields an empty mapping.
    """
    path = path or os.environ.get(Constants.ENV_CONFIG)
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}

    import yaml  # pylint: disable=import-outside-toplevel

    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping; ignoring", path)
        return {}
    return data


def apply_config(cfg: Dict[str, Any]) -> None:
    """Apply configuration values onto Constants.

    Environment variables for the proxy URL and local repository path win over
    file values.
    """
    section = cfg.get("stdresolve", cfg)
    for key, attr in _CONFIG_KEYS.items():
        if key in section and section[key] is not None:
            current = getattr(Constants, attr)
            value = section[key]
            if isinstance(current, int) and not isinstance(current, bool):
                value = int(value)
            setattr(Constants, attr, value)

    env_proxy = os.environ.get(Constants.ENV_PROXY_URL)
    if env_proxy:
        Constants.PROXY_URL = env_proxy
    env_repo = os.environ.get(Constants.ENV_REPO_PATH)
    if env_repo:
        Constants.REPO_PATH = env_repo
        Constants.REPO_BACKEND = RepoBackends.LOCAL.value
