"""
Credential sources.

The client only needs a resolved (username, password) pair; how it was obtained
(interactive prompt, environment / .env, or a value handed over by a caller)
is decided once at startup.
"""
import getpass
import os
from typing import Callable, NamedTuple, Optional

from .errors import ConfigError


class Credential(NamedTuple):
    username: str
    password: str


class CredentialSource:
    def resolve(self, username: Optional[str]) -> Credential:
        raise NotImplementedError


class StaticCredentialSource(CredentialSource):
    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self.password = password

    def resolve(self, username: Optional[str] = None) -> Credential:
        return Credential(username or self.username, self.password)


class EnvCredentialSource(CredentialSource):
    def __init__(self, user_var: str = "TE_USERNAME", password_var: str = "TE_PASSWORD") -> None:
        self.user_var = user_var
        self.password_var = password_var

    def resolve(self, username: Optional[str] = None) -> Credential:
        user = username or os.getenv(self.user_var)
        password = os.getenv(self.password_var)
        if not user:
            raise ConfigError(f"No username given and {self.user_var} is not set")
        if password is None:
            raise ConfigError(f"{self.password_var} is not set")
        return Credential(user, password)


class PromptCredentialSource(CredentialSource):
    def __init__(self, prompt: Callable[[str], str] = input,
                 secret_prompt: Callable[[str], str] = getpass.getpass) -> None:
        self.prompt = prompt
        self.secret_prompt = secret_prompt

    def resolve(self, username: Optional[str] = None) -> Credential:
        user = username or self.prompt("Username: ").strip()
        if not user:
            raise ConfigError("A username is required")
        password = self.secret_prompt(f"Enter the password for {user}: ")
        return Credential(user, password)


SOURCES = {
    "prompt": PromptCredentialSource,
    "env": EnvCredentialSource,
}


def get_source(name: str) -> CredentialSource:
    try:
        return SOURCES[name]()
    except KeyError:
        raise ConfigError(f"Unknown credential source '{name}'") from None
