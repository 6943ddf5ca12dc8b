"""
Configuration loading.

Client credentials and endpoints are read from environment variables.
"""

import logging
import os
from typing import Mapping, Optional

from domain.errors import ConfigurationError

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api-classifieds.ubiflow.net/api/"
DEFAULT_LOGIN_URL = "https://auth.ubiflow.net/api/login_check"

REQUIRED_VARIABLES = (
    "UBIFLOW_CLIENT_ID",
    "UBIFLOW_CLIENT_CODE",
    "UBIFLOW_CLIENT_LOGIN",
    "UBIFLOW_CLIENT_SECRET",
)


class ClientSettings:
    """Credentials and endpoints of one advertiser account."""

    def __init__(
        self,
        client_id: str,
        client_code: str,
        client_login: str,
        client_secret: str,
        api_url: str = DEFAULT_API_URL,
        login_url: str = DEFAULT_LOGIN_URL,
        http_timeout: int = 30,
        cache_dir: Optional[str] = None,
    ):
        self.client_id = client_id
        self.client_code = client_code
        self.client_login = client_login
        self.client_secret = client_secret
        self.api_url = api_url if api_url.endswith("/") else f"{api_url}/"
        self.login_url = login_url
        self.http_timeout = http_timeout
        self.cache_dir = cache_dir

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientSettings":
        """
        Build settings from environment variables.

        Variables:
        - UBIFLOW_CLIENT_ID, UBIFLOW_CLIENT_CODE, UBIFLOW_CLIENT_LOGIN,
          UBIFLOW_CLIENT_SECRET: required account credentials
        - UBIFLOW_API_URL, UBIFLOW_LOGIN_URL: endpoint overrides
        - UBIFLOW_HTTP_TIMEOUT: request timeout in seconds (default: 30)
        - UBIFLOW_CACHE_DIR: enables the on-disk cache when set

        Raises:
            ConfigurationError: If a required variable is missing or a value is invalid
        """
        env = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_VARIABLES if not env.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required settings: {', '.join(missing)}", detail=missing
            )

        timeout_value = env.get("UBIFLOW_HTTP_TIMEOUT", "30")
        try:
            http_timeout = int(timeout_value)
        except ValueError:
            raise ConfigurationError(
                f"UBIFLOW_HTTP_TIMEOUT must be an integer, got {timeout_value!r}"
            )

        settings = cls(
            client_id=env["UBIFLOW_CLIENT_ID"],
            client_code=env["UBIFLOW_CLIENT_CODE"],
            client_login=env["UBIFLOW_CLIENT_LOGIN"],
            client_secret=env["UBIFLOW_CLIENT_SECRET"],
            api_url=env.get("UBIFLOW_API_URL") or DEFAULT_API_URL,
            login_url=env.get("UBIFLOW_LOGIN_URL") or DEFAULT_LOGIN_URL,
            http_timeout=http_timeout,
            cache_dir=env.get("UBIFLOW_CACHE_DIR") or None,
        )
        logger.debug(
            "Loaded settings: client=%s, api=%s, cache_dir=%s",
            settings.client_code,
            settings.api_url,
            settings.cache_dir,
        )
        return settings

    def __repr__(self) -> str:
        return f"ClientSettings(client_code={self.client_code}, api_url={self.api_url})"
