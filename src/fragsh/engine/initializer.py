"""
Capability initializer - loads a group at most once per session.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fragsh.core.datamodels import LoadState, LoadSummary
from fragsh.core.environment import ShellEnvironment, fragment_scope
from fragsh.engine.loader import FragmentLoader
from fragsh.logging import log_fragment_exception
from fragsh.session.context import SessionContext

logger = logging.getLogger(__name__)


class CapabilityInitializer:
    """Idempotent per-group wrapper around FragmentLoader."""

    def __init__(
        self,
        loader: FragmentLoader,
        context: SessionContext,
        environment: ShellEnvironment,
    ):
        self.loader = loader
        self.context = context
        self.environment = environment

    def ensure_group(self, group_id: str, base_dir: Path | str) -> LoadSummary | None:
        """Load a group unless it was already attempted this session.

        A group that loaded with failures still ends LOADED and is not
        retried until the session is explicitly reset.

        Args:
            group_id: Group to ensure
            base_dir: Fragments directory

        Returns:
            The group's LoadSummary, or None for a reentrant call made while
            the group is still loading.
        """
        state = self.context.state_of(group_id)
        if state is LoadState.LOADED:
            return self.context.summaries.get(group_id)
        if state is LoadState.LOADING:
            logger.debug(f"Group '{group_id}' is already loading, skipping reentrant ensure")
            return None

        self.context.advance(group_id, LoadState.LOADING)
        summary = LoadSummary(group=group_id)
        try:
            summary = self.loader.load_group(group_id, base_dir)
            summary = self._run_setup_hooks(summary)
        finally:
            self.context.advance(group_id, LoadState.LOADED)
            self.context.summaries[group_id] = summary

        if summary.failed:
            logger.debug(f"Group '{group_id}' loaded with {summary.failed} failed fragment(s)")
        return summary

    def _run_setup_hooks(self, summary: LoadSummary) -> LoadSummary:
        """Run hooks of newly loaded fragments, once per fragment per session."""
        hooks_run = hooks_failed = 0

        for path in summary.loaded_paths():
            if path in self.context.hooks_run:
                continue
            self.context.hooks_run.add(path)

            for hook in self.environment.hooks_for(path):
                hook_name = getattr(hook, "__name__", repr(hook))
                try:
                    with fragment_scope(self.environment, path):
                        hook()
                    hooks_run += 1
                except Exception as e:
                    hooks_failed += 1
                    log_fragment_exception(
                        e,
                        context=f"Setup hook '{hook_name}' failed ({path})",
                        verbose=self.loader.debug,
                        logger=logger,
                    )

        return summary.model_copy(update={"hooks_run": hooks_run, "hooks_failed": hooks_failed})
