"""Turn a GitHub skill URL into owner/repo/skill-path components."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from tailor_skills.errors import InvalidSkillUrlError

EXPECTED_FORMAT = "https://github.com/<owner>/<repo>/<skill>"


@dataclass(frozen=True, slots=True)
class SkillReference:
    """A remote skill directory: ``skills/<skill_path>`` inside ``owner/repo``."""

    owner: str
    repo: str
    skill_path: str


def _invalid() -> InvalidSkillUrlError:
    return InvalidSkillUrlError(f"Invalid skill URL. Expected format: {EXPECTED_FORMAT}")


def parse_skill_url(url: str) -> SkillReference:
    """Split ``https://<host>/<owner>/<repo>/<skill...>`` into a SkillReference.

    Everything after the repo segment is the skill path, so nested skills
    such as ``.../tools/nested/skill`` keep their ``nested/skill`` path.
    ``.`` and ``..`` segments are resolved the way a browser resolves them
    before the segments are counted. Whether the owner or repo exist is only
    discovered when fetching.

    Raises:
        InvalidSkillUrlError: If the URL is not absolute or has fewer than
            three non-empty path segments.
    """
    parsed = urlsplit(url.strip())
    if not parsed.scheme or not parsed.netloc:
        raise _invalid()

    path = posixpath.normpath("/" + parsed.path)
    segments = [segment for segment in path.split("/") if segment]
    # percent-encoded dot segments survive normpath
    if any(unquote(segment) in {".", ".."} for segment in segments):
        raise _invalid()
    if len(segments) < 3:
        raise _invalid()

    owner, repo, *rest = segments
    return SkillReference(owner=owner, repo=repo, skill_path="/".join(rest))
