"""
Data models for the fragment engine.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from fragsh.core.helpers import _split_relative_path


class LoadState(str, Enum):
    """Per-group load state. LOADED means attempted, not all succeeded."""

    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"


class FileOutcome(str, Enum):
    """Outcome of loading a single fragment file."""

    LOADED = "loaded"
    FAILED = "failed"
    SKIPPED = "skipped"


class ModuleDescriptor(BaseModel):
    """One fragment file belonging to a group."""

    model_config = {"frozen": True}

    group: str
    dir_segments: tuple[str, ...] = ()
    file_name: str

    @classmethod
    def from_path(cls, group: str, relative: str) -> ModuleDescriptor:
        """Build a descriptor from a slash-separated relative path."""
        segments, file_name = _split_relative_path(relative)
        return cls(group=group, dir_segments=segments, file_name=file_name)

    @property
    def relative_path(self) -> str:
        return "/".join((*self.dir_segments, self.file_name))

    @property
    def stem(self) -> str:
        return Path(self.file_name).stem

    def resolve_path(self, base_dir: Path | str) -> Path:
        """Absolute path of this fragment under base_dir (symlinks resolved)."""
        base = Path(base_dir).expanduser()
        return base.joinpath(*self.dir_segments, self.file_name).resolve()


class FileLoadRecord(BaseModel):
    """Outcome of one fragment file, recorded once per session."""

    model_config = {"frozen": True}

    path: str
    outcome: FileOutcome
    module_name: Optional[str] = None
    error: Optional[str] = None


class LoadSummary(BaseModel):
    """Counters for one load_group / ensure_group call."""

    group: str
    loaded: int = 0
    failed: int = 0
    skipped: int = 0
    hooks_run: int = 0
    hooks_failed: int = 0
    records: list[FileLoadRecord] = Field(default_factory=list)

    @classmethod
    def from_records(cls, group: str, records: list[FileLoadRecord]) -> LoadSummary:
        counts = {outcome: 0 for outcome in FileOutcome}
        for record in records:
            counts[record.outcome] += 1
        return cls(
            group=group,
            loaded=counts[FileOutcome.LOADED],
            failed=counts[FileOutcome.FAILED],
            skipped=counts[FileOutcome.SKIPPED],
            records=list(records),
        )

    def loaded_paths(self) -> list[str]:
        """Paths of the records that loaded successfully, in load order."""
        return [r.path for r in self.records if r.outcome is FileOutcome.LOADED]


class ProbeResult(BaseModel):
    """Cached availability of an external binary."""

    model_config = {"frozen": True}

    name: str
    available: bool
    path: Optional[str] = None
