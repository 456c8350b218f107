"""Read and write the ``.source.json`` record kept in each installed skill.

The record is ``{"url", "owner", "repo", "skill"}``. It is overwritten on
every install and update, and a skill is updatable exactly when it holds a
well-formed record.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

from tailor_skills.config import SOURCE_FILE_NAME
from tailor_skills.errors import ProvenanceError

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = ("url", "owner", "repo", "skill")


@dataclass(frozen=True, slots=True)
class ProvenanceRecord:
    url: str
    owner: str
    repo: str
    skill: str

    @classmethod
    def from_dict(cls, data: Any) -> "ProvenanceRecord":
        if not isinstance(data, dict):
            raise ValueError("source info is not a JSON object")
        missing = [
            key
            for key in _REQUIRED_KEYS
            if not isinstance(data.get(key), str) or not data.get(key)
        ]
        if missing:
            raise ValueError(f"missing keys: {', '.join(missing)}")
        return cls(**{key: data[key] for key in _REQUIRED_KEYS})

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def source_path(skill_dir: Path) -> Path:
    return skill_dir / SOURCE_FILE_NAME


def write_provenance(skill_dir: Path, record: ProvenanceRecord) -> Path:
    """Write ``record`` to the skill directory, replacing any previous one."""

    path = source_path(skill_dir)
    path.write_text(json.dumps(record.to_dict(), indent=2), encoding="utf-8")
    logger.debug(f"Wrote source info to {path}")
    return path


def read_provenance(skill_dir: Path, skill_name: Optional[str] = None) -> ProvenanceRecord:
    """Load the provenance record of an installed skill.

    Raises:
        ProvenanceError: If the file is missing, unreadable or malformed.
    """

    name = skill_name or skill_dir.name
    path = source_path(skill_dir)

    if not path.is_file():
        raise ProvenanceError(
            f'No source info found for "{name}". '
            'Re-install it with "tailor-skills add <url>" to enable updates.'
        )

    try:
        return ProvenanceRecord.from_dict(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        logger.debug(f"Rejected source info at {path}: {e}")
        raise ProvenanceError(
            f'Could not read source info for "{name}": malformed {SOURCE_FILE_NAME}'
        ) from e


def try_read_provenance(skill_dir: Path) -> Optional[ProvenanceRecord]:
    """Like :func:`read_provenance` but returns None instead of raising."""

    try:
        return read_provenance(skill_dir)
    except ProvenanceError:
        return None
