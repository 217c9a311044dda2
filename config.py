import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_API_URL = 'https://api.github.com'
DEFAULT_COMMIT_MESSAGE = 'Update JSON via Flask App'
DEFAULT_TIMEOUT = 30.0


class ConfigError(ValueError):
    """Raised when required repository settings are missing or invalid."""


@dataclass(frozen=True)
class RepoConfig:
    """Where the records file lives and how to reach it."""
    token: str
    owner: str
    repo: str
    file_path: str
    branch: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    timeout: float = DEFAULT_TIMEOUT

    @property
    def contents_url(self) -> str:
        path = self.file_path.lstrip('/')
        return f"{self.api_url.rstrip('/')}/repos/{self.owner}/{self.repo}/contents/{path}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'RepoConfig':
        """
        Build the config from environment variables.
        Required: GITHUB_TOKEN, OWNER, REPO, FILE_PATH (VITE_ prefixed names also accepted).
        """
        env = os.environ if environ is None else environ

        def lookup(name):
            value = env.get(name) or env.get(f"VITE_{name}") or ''
            return value.strip()

        values = {
            'token': lookup('GITHUB_TOKEN'),
            'owner': lookup('OWNER'),
            'repo': lookup('REPO'),
            'file_path': lookup('FILE_PATH'),
        }
        missing = [key for key, value in values.items() if not value]
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")

        timeout_raw = env.get('REQUEST_TIMEOUT', '').strip()
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigError(f"REQUEST_TIMEOUT must be a number, got {timeout_raw!r}")
        if timeout <= 0:
            raise ConfigError('REQUEST_TIMEOUT must be positive')

        return cls(
            branch=env.get('GITHUB_BRANCH', '').strip() or None,
            api_url=env.get('GITHUB_API_URL', '').strip() or DEFAULT_API_URL,
            commit_message=env.get('COMMIT_MESSAGE', '').strip() or DEFAULT_COMMIT_MESSAGE,
            timeout=timeout,
            **values
        )
