"""Settings read from the environment."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from localci.errors import InvalidSetting
from localci.flavors import DEFAULT_ACT_IMAGE, DEFAULT_GITLAB_IMAGE

DEFAULT_LOG_LEVEL = "WARNING"


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        raise InvalidSetting("LOCALCI_DOCKER_TIMEOUT", value, "a number of seconds") from None
    if timeout <= 0:
        raise InvalidSetting("LOCALCI_DOCKER_TIMEOUT", value, "a positive number of seconds")
    return timeout


@dataclass(frozen=True)
class Settings:
    act_image: str = DEFAULT_ACT_IMAGE
    gitlab_image: str = DEFAULT_GITLAB_IMAGE
    docker_timeout: Optional[float] = None  # None: never time out docker API calls
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``LOCALCI_*`` environment variables.

        Docker connection settings (DOCKER_HOST, DOCKER_TLS_VERIFY,
        DOCKER_CERT_PATH) are read by the docker client itself.
        """
        environ = os.environ if env is None else env
        timeout = _parse_timeout(environ.get("LOCALCI_DOCKER_TIMEOUT"))
        return cls(
            act_image=environ.get("LOCALCI_ACT_IMAGE", DEFAULT_ACT_IMAGE),
            gitlab_image=environ.get("LOCALCI_GITLAB_IMAGE", DEFAULT_GITLAB_IMAGE),
            docker_timeout=timeout,
            log_level=environ.get("LOCALCI_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )

    @property
    def log_level_number(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.WARNING
