"""Install a skill directory from a GitHub repository.

A skill lives at ``skills/<skill_path>`` inside a repository. Installing it:

1. lists that directory through the GitHub contents API,
2. downloads every plain file into ``<skills_dir>/<skill_path>``, one at a
   time and in listing order,
3. writes ``.source.json`` so the skill can be updated later.

Sub-directories in the listing are not descended into. Files removed
upstream are left in place, and a download failing part way through leaves
the files fetched so far; re-running the install is the recovery path.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import httpx

from tailor_skills.config import get_api_base_url, get_skills_dir
from tailor_skills.errors import FetchError, InvalidSkillPathError, SkillInstallError
from tailor_skills.http_fetcher import fetch
from tailor_skills.provenance import ProvenanceRecord, write_provenance
from tailor_skills.url_parser import parse_skill_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemoteFileEntry:
    """One item of a GitHub contents listing."""

    name: str
    type: str
    download_url: Optional[str]

    @property
    def is_file(self) -> bool:
        return self.type == "file"


def build_listing_url(owner: str, repo: str, skill_path: str) -> str:
    return f"{get_api_base_url()}/repos/{owner}/{repo}/contents/skills/{skill_path}"


def get_install_dir(skill_path: str, skills_dir: Optional[Path] = None) -> Path:
    """Directory for ``skill_path`` under the skills root.

    Raises:
        InvalidSkillPathError: If the path resolves to the root itself or
            anywhere outside it.
    """

    base = skills_dir if skills_dir is not None else get_skills_dir()
    install_dir = base / skill_path

    root = base.resolve()
    resolved = install_dir.resolve()
    if resolved == root or not resolved.is_relative_to(root):
        raise InvalidSkillPathError(
            f'Skill path "{skill_path}" is outside the skills directory {base}'
        )
    return install_dir


def _is_plain_file_name(name: str) -> bool:
    return bool(name) and name not in {".", ".."} and "/" not in name and "\\" not in name


def _parse_listing(body: bytes) -> list[RemoteFileEntry]:
    try:
        raw: Any = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise SkillInstallError(f"Could not fetch skill from GitHub API: {e}") from e

    # The contents API answers a wrong path with a single object, not a list.
    if not isinstance(raw, list):
        raise SkillInstallError(
            "Unexpected response from GitHub API - is the skill path correct?"
        )

    entries: list[RemoteFileEntry] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        entries.append(
            RemoteFileEntry(
                name=str(item.get("name") or ""),
                type=str(item.get("type") or ""),
                download_url=item.get("download_url"),
            )
        )
    return entries


async def fetch_listing(
    owner: str,
    repo: str,
    skill_path: str,
    client: Optional[httpx.AsyncClient] = None,
) -> list[RemoteFileEntry]:
    """Return the directory listing for ``skills/<skill_path>`` in ``owner/repo``.

    Raises:
        SkillInstallError: If the request fails, the body is not JSON, or the
            JSON is not a list.
    """

    url = build_listing_url(owner, repo, skill_path)
    try:
        body = await fetch(url, client=client)
    except FetchError as e:
        raise SkillInstallError(f"Could not fetch skill from GitHub API: {e}") from e
    return _parse_listing(body)


async def install_skill(
    owner: str,
    repo: str,
    skill_path: str,
    source_url: str,
    *,
    skills_dir: Optional[Path] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Path:
    """Download a skill's files and record where they came from.

    Args:
        owner: Repository owner.
        repo: Repository name.
        skill_path: Path of the skill below the repository's ``skills/``.
        source_url: The URL the user asked for, stored verbatim.
        skills_dir: Install root. Defaults to the configured skills dir.
        client: HTTP client to reuse across requests.

    Returns:
        The install directory.

    Raises:
        InvalidSkillPathError: If ``skill_path`` escapes ``skills_dir``.
        SkillInstallError: If the listing cannot be fetched or parsed.
        FetchError: If a file download fails.
    """

    install_dir = get_install_dir(skill_path, skills_dir)

    logger.info(f'Fetching skill "{skill_path}" from {owner}/{repo}...')
    entries = await fetch_listing(owner, repo, skill_path, client=client)

    install_dir.mkdir(parents=True, exist_ok=True)

    for entry in entries:
        if not entry.is_file:
            logger.debug(f"Skipping non-file entry {entry.name!r} ({entry.type})")
            continue
        if not _is_plain_file_name(entry.name):
            logger.warning(f"Skipping entry with unsafe name: {entry.name!r}")
            continue
        if not entry.download_url:
            logger.warning(f"Skipping {entry.name!r}: listing has no download_url")
            continue

        logger.info(f"  Downloading {entry.name}...")
        data = await fetch(entry.download_url, client=client)
        (install_dir / entry.name).write_bytes(data)

    write_provenance(
        install_dir,
        ProvenanceRecord(url=source_url, owner=owner, repo=repo, skill=skill_path),
    )
    logger.info(f'Installed skill "{skill_path}" into {install_dir}')
    return install_dir


async def add_skill(
    url: str,
    *,
    skills_dir: Optional[Path] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Path:
    """Parse ``url`` and install the skill it points at."""

    ref = parse_skill_url(url)
    return await install_skill(
        ref.owner,
        ref.repo,
        ref.skill_path,
        url,
        skills_dir=skills_dir,
        client=client,
    )
