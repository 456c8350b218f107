"""Re-fetch installed skills from the source recorded in their .source.json."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import httpx

from tailor_skills.config import get_skills_dir
from tailor_skills.errors import SkillsError
from tailor_skills.installer import get_install_dir, install_skill
from tailor_skills.provenance import ProvenanceRecord, read_provenance, try_read_provenance

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpdateOutcome:
    """Result of updating one skill in a batch."""

    skill_name: str
    ok: bool
    install_dir: Optional[Path] = None
    error: Optional[str] = None


@dataclass
class UpdateSummary:
    outcomes: List[UpdateOutcome] = field(default_factory=list)

    @property
    def ok(self) -> List[str]:
        return [o.skill_name for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[str]:
        return [o.skill_name for o in self.outcomes if not o.ok]

    def add(self, outcome: UpdateOutcome) -> None:
        self.outcomes.append(outcome)


def _resolve_skills_dir(skills_dir: Optional[Path]) -> Path:
    return skills_dir if skills_dir is not None else get_skills_dir()


def find_updatable_skills(skills_dir: Optional[Path] = None) -> List[str]:
    """Names of the immediate sub-directories holding a well-formed .source.json."""

    base = _resolve_skills_dir(skills_dir)
    if not base.is_dir():
        return []
    return sorted(
        child.name
        for child in base.iterdir()
        if child.is_dir() and try_read_provenance(child) is not None
    )


def list_installed_skills(
    skills_dir: Optional[Path] = None,
) -> List[Tuple[str, Optional[ProvenanceRecord]]]:
    """Every installed skill directory with its provenance, if readable."""

    base = _resolve_skills_dir(skills_dir)
    if not base.is_dir():
        return []
    return [
        (child.name, try_read_provenance(child))
        for child in sorted(base.iterdir())
        if child.is_dir() and not child.name.startswith(".")
    ]


async def update_skill(
    skill_name: str,
    *,
    skills_dir: Optional[Path] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Path:
    """Reinstall ``skill_name`` from its recorded source.

    Raises:
        InvalidSkillPathError: If ``skill_name`` points outside the skills dir.
        ProvenanceError: If the skill has no readable .source.json.
        SkillsError: Whatever the installer raises while re-fetching.
    """

    base = _resolve_skills_dir(skills_dir)
    record = read_provenance(get_install_dir(skill_name, base), skill_name)
    logger.debug(f'Updating "{skill_name}" from {record.url}')
    return await install_skill(
        record.owner,
        record.repo,
        record.skill,
        record.url,
        skills_dir=base,
        client=client,
    )


async def update_all_skills(
    *,
    skills_dir: Optional[Path] = None,
    client: Optional[httpx.AsyncClient] = None,
    on_result: Optional[Callable[[UpdateOutcome], None]] = None,
    names: Optional[List[str]] = None,
) -> UpdateSummary:
    """Update every skill that has provenance, one after another.

    A failure is recorded in the summary and the batch moves on to the next
    skill. Directories without a well-formed .source.json are neither
    attempted nor counted. Pass ``names`` to update an already scanned list
    from :func:`find_updatable_skills` instead of scanning again.
    """

    base = _resolve_skills_dir(skills_dir)
    summary = UpdateSummary()

    if names is None:
        names = find_updatable_skills(base)

    for name in names:
        try:
            install_dir = await update_skill(name, skills_dir=base, client=client)
            outcome = UpdateOutcome(skill_name=name, ok=True, install_dir=install_dir)
        except (SkillsError, OSError) as e:
            logger.debug(f'Failed to update "{name}": {e}')
            outcome = UpdateOutcome(skill_name=name, ok=False, error=str(e))

        summary.add(outcome)
        if on_result is not None:
            on_result(outcome)

    logger.info(
        f"Batch update finished: {len(summary.ok)} updated, {len(summary.failed)} failed"
    )
    return summary
