"""
Storage Service — local persistence of the analysis session.
Saves the TLA+ source and the requirement working set as one JSON file,
versioned by application version.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from tla_requirements.config import get_settings
from tla_requirements.models.schemas import Requirement

logger = logging.getLogger(__name__)


class Session(BaseModel):
    source: str = ""
    requirements: list[Requirement] = []


class StorageService:
    """Local-filesystem session store."""

    def __init__(self, base_path: str | None = None):
        self.settings = get_settings()
        self.base_path = Path(base_path or self.settings.local_storage_path)

    @property
    def session_path(self) -> Path:
        return self.base_path / f"tla-session-v{self.settings.app_version}.json"

    def save_session(self, source: str, requirements: list[Requirement]) -> str:
        """Save source + requirements and return the file path."""
        self.base_path.mkdir(parents=True, exist_ok=True)
        session = Session(source=source, requirements=requirements)
        self.session_path.write_text(session.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"[STORE] Saved {len(requirements)} requirements to {self.session_path}")
        return str(self.session_path)

    def load_session(self) -> Optional[Session]:
        """Load the saved session; None when absent or unreadable."""
        path = self.session_path
        if not path.exists():
            return None
        try:
            return Session.model_validate(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"[STORE] Ignoring unreadable session {path}: {e}")
            return None

    def clear_session(self) -> None:
        if self.session_path.exists():
            self.session_path.unlink()
            logger.info(f"[STORE] Cleared {self.session_path}")


def load_source(file_path: str) -> str:
    """Read a .tla / .txt module from disk."""
    path = Path(file_path)
    if path.suffix.lower() not in (".tla", ".txt"):
        raise ValueError("Please upload a .tla or .txt file")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError("Failed to read file") from e
