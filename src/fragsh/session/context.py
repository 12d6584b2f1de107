"""
Session state for the fragment engine.

All mutable engine state lives here instead of module globals, so every
shell (and every test) owns a fresh context.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fragsh.core.datamodels import FileLoadRecord, LoadState, LoadSummary, ProbeResult
from fragsh.core.exceptions import SessionStateError

# Allowed LoadState transitions within one session
_TRANSITIONS = {
    LoadState.NOT_LOADED: LoadState.LOADING,
    LoadState.LOADING: LoadState.LOADED,
}


@dataclass
class SessionContext:
    """Mutable per-session state.

    Attributes:
        load_states: group id -> LoadState (absent means NOT_LOADED)
        file_records: absolute fragment path -> FileLoadRecord
        probe_cache: binary name -> ProbeResult
        summaries: group id -> LoadSummary of its ensure_group call
        hooks_run: fragment paths whose setup hooks have run
        in_flight: fragment paths whose top-level code is executing
        executions: number of fragment files executed this session
    """

    load_states: dict[str, LoadState] = field(default_factory=dict)
    file_records: dict[str, FileLoadRecord] = field(default_factory=dict)
    probe_cache: dict[str, ProbeResult] = field(default_factory=dict)
    summaries: dict[str, LoadSummary] = field(default_factory=dict)
    hooks_run: set[str] = field(default_factory=set)
    in_flight: set[str] = field(default_factory=set)
    executions: int = 0

    def state_of(self, group_id: str) -> LoadState:
        return self.load_states.get(group_id, LoadState.NOT_LOADED)

    def advance(self, group_id: str, state: LoadState) -> None:
        """Move a group forward; states never go backward within a session."""
        current = self.state_of(group_id)
        if _TRANSITIONS.get(current) is not state:
            raise SessionStateError(
                f"Group '{group_id}' cannot move from {current.value} to {state.value}"
            )
        self.load_states[group_id] = state

    def record_file(self, record: FileLoadRecord) -> None:
        """Store the outcome for a fragment path (once per session)."""
        if record.path in self.file_records:
            raise SessionStateError(f"Fragment already recorded: {record.path}")
        self.file_records[record.path] = record

    def cache_probe(self, result: ProbeResult) -> None:
        """Store a probe result (once per name per session)."""
        if result.name in self.probe_cache:
            raise SessionStateError(f"Probe already cached: {result.name}")
        self.probe_cache[result.name] = result

    def reset(self) -> None:
        """Start a fresh session. Only called on explicit user request."""
        self.load_states.clear()
        self.file_records.clear()
        self.probe_cache.clear()
        self.summaries.clear()
        self.hooks_run.clear()
        self.in_flight.clear()
        self.executions = 0
