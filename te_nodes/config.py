import os
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

load_dotenv()

DEFAULT_USER_AGENT = "te-node-describe/1.0"


def as_bool(value: Any) -> bool:
    # YAML gives real booleans, env and quoted YAML give strings
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def env_bool(key: str, default: bool=False) -> bool:
    return as_bool(os.getenv(key, str(default)))


class Settings:
    # Environment (and .env) first, settings.yaml fills whatever is unset.
    def __init__(self, settings_path: str = "settings.yaml") -> None:
        data: Dict[str, Any] = {}
        if settings_path and os.path.exists(settings_path):
            try:
                with open(settings_path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Cannot parse {settings_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{settings_path} must contain a mapping")
        self.global_cfg = data.get("global") or {}
        self.defaults = data.get("defaults") or {}

        self.api_uri = os.getenv("TE_URL") or self.global_cfg.get("api_uri")
        self.username = os.getenv("TE_USERNAME") or self.global_cfg.get("username")
        self.password = os.getenv("TE_PASSWORD")
        if os.getenv("TE_VERIFY_SSL") is not None:
            self.verify_ssl = env_bool("TE_VERIFY_SSL", True)
        else:
            self.verify_ssl = as_bool(self.global_cfg.get("verify_ssl", True))
        self.ca_bundle = os.getenv("TE_CA_BUNDLE") or self.global_cfg.get("ca_bundle")
        timeout = os.getenv("TE_TIMEOUT") or self.global_cfg.get("timeout", 30)
        try:
            self.timeout = int(timeout)
        except (TypeError, ValueError):
            raise ConfigError(f"timeout must be a whole number of seconds, got {timeout!r}") from None
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {timeout!r}")
        self.user_agent = (os.getenv("TE_USER_AGENT")
                           or self.global_cfg.get("user_agent")
                           or DEFAULT_USER_AGENT)
        self.http_proxy = os.getenv("HTTP_PROXY")
        self.https_proxy = os.getenv("HTTPS_PROXY")
        self.no_proxy = os.getenv("NO_PROXY")

    def proxies(self) -> Optional[Dict[str, str]]:
        proxies = {}
        if self.http_proxy:
            proxies["http"] = self.http_proxy
        if self.https_proxy:
            proxies["https"] = self.https_proxy
        return proxies if proxies else None

    def verify(self):
        # requests accepts either a bool or a CA bundle path
        if not self.verify_ssl:
            return False
        return self.ca_bundle or True

    def default(self, key: str, fallback: Any = None) -> Any:
        return self.defaults.get(key, fallback)
