"""Exception hierarchy shared by the fetcher, installer and updater."""

from __future__ import annotations


class SkillsError(Exception):
    """Base class for every failure the CLI reports as ``Error: <message>``."""


class InvalidSkillUrlError(SkillsError):
    """Raised when a skill URL does not have owner/repo/skill segments."""


class FetchError(SkillsError):
    """Base class for failures while fetching a URL."""


class NetworkError(FetchError):
    """Raised on transport-level failures (DNS, connect, read, timeout)."""


class HttpStatusError(FetchError):
    """Raised when a response status is neither success nor a followable redirect."""

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} for {url}")


class TooManyRedirectsError(FetchError):
    """Raised when a redirect chain is longer than the configured limit."""

    def __init__(self, url: str, max_redirects: int):
        self.url = url
        self.max_redirects = max_redirects
        super().__init__(f"Too many redirects (>{max_redirects}) starting from {url}")


class SkillInstallError(SkillsError):
    """Raised when a skill listing cannot be fetched or has the wrong shape."""


class ProvenanceError(SkillsError):
    """Raised when a skill's .source.json is missing or malformed."""


class InvalidSkillPathError(SkillsError):
    """Raised when a skill path or name would resolve outside the skills directory."""
