from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type, Union

import requests
import urllib3

from .credentials import Credential
from .errors import AuthenticationError, TEError

log = logging.getLogger(__name__)


def _success(r: requests.Response) -> bool:
    return 200 <= r.status_code < 300


class TEClient:
    # Minimal client for the Tripwire Enterprise style REST API.
    # - Auth via GET /csrf-token using basic auth, cookies kept on the session.
    # - Every later call carries the CSRF header, X-Requested-With and User-Agent.
    # - No pagination, no retries, no token refresh.

    def __init__(
        self,
        base_url: str,
        credential: Credential,
        verify: Union[bool, str] = True,
        timeout: int = 30,
        proxies: Optional[Dict[str, str]] = None,
        user_agent: str = "te-node-describe/1.0",
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.credential = credential
        self.verify = verify
        self.timeout = timeout
        self.user_agent = user_agent
        self.s = session if session is not None else requests.Session()
        self.s.verify = verify
        if proxies:
            self.s.proxies.update(proxies)
        self.token_name: Optional[str] = None
        self.token_value: Optional[str] = None

        if verify is False:
            log.warning("TLS certificate verification is DISABLED for %s", self.base_url)
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def __enter__(self) -> "TEClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.s.close()

    @property
    def authenticated(self) -> bool:
        return bool(self.token_name and self.token_value)

    def authenticate(self) -> "TEClient":
        url = f"{self.base_url}/csrf-token"
        self.s.auth = (self.credential.username, self.credential.password)
        try:
            r = self.s.get(url, headers=self._base_headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise AuthenticationError(f"Cannot reach {url}: {e}") from e
        if r.status_code in (401, 403):
            raise AuthenticationError(
                f"Credentials for {self.credential.username} were rejected ({r.status_code})",
                status_code=r.status_code, body=r.text)
        if not _success(r):
            raise AuthenticationError(f"Token fetch failed {r.status_code}: {r.text}",
                                      status_code=r.status_code, body=r.text)
        try:
            data = r.json()
        except ValueError as e:
            raise AuthenticationError("Token response is not JSON", r.status_code, r.text) from e
        token_name = data.get("tokenName") if isinstance(data, dict) else None
        token_value = data.get("tokenValue") if isinstance(data, dict) else None
        if not token_name or not token_value:
            raise AuthenticationError("No tokenName/tokenValue in csrf-token response",
                                      r.status_code, r.text)
        self.token_name = token_name
        self.token_value = token_value
        log.debug("Got CSRF token %s for %s", token_name, self.credential.username)
        return self

    def _base_headers(self) -> Dict[str, str]:
        return {
            "X-Requested-With": "XMLHttpRequest",
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def _headers(self) -> Dict[str, str]:
        if not self.authenticated:
            raise AuthenticationError("Not authenticated; call authenticate() first")
        headers = self._base_headers()
        headers[self.token_name] = self.token_value
        return headers

    def _send(self, method: str, path: str, error: Type[TEError], **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        headers = self._headers()
        log.debug("%s %s", method, url)
        try:
            r = self.s.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise error(f"{method} {url} failed: {e}") from e
        if not _success(r):
            raise error(f"{method} {url} returned {r.status_code}: {r.text}",
                        status_code=r.status_code, body=r.text)
        return r

    def get(self, path: str, error: Type[TEError], params: Optional[Any] = None) -> Any:
        r = self._send("GET", path, error, params=params)
        try:
            return r.json()
        except ValueError as e:
            raise error(f"GET {path} did not return JSON", r.status_code, r.text) from e

    def put(self, path: str, json_body: Dict[str, Any], error: Type[TEError]) -> requests.Response:
        # redirects are not followed, a 3xx is a failed update
        return self._send("PUT", path, error, json=json_body, allow_redirects=False)
