"""
Cached availability checks for external binaries.
"""

from __future__ import annotations

import logging
import shutil
from typing import Callable, Optional

from fragsh.core.datamodels import ProbeResult
from fragsh.session.context import SessionContext

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Optional[str]]


class CachedCommandProbe:
    """Memoizes "is binary X on PATH" for the session."""

    def __init__(self, context: SessionContext, resolver: Resolver | None = None):
        self.context = context
        self.resolver = resolver or shutil.which

    def probe(self, name: str) -> ProbeResult:
        """Check a binary, resolving it only the first time per session."""
        cached = self.context.probe_cache.get(name)
        if cached is not None:
            return cached

        path = self.resolver(name)
        result = ProbeResult(name=name, available=path is not None, path=path)
        self.context.cache_probe(result)
        logger.debug(f"Probed {name}: {path or 'not found'}")
        return result

    def is_available(self, name: str) -> bool:
        return self.probe(name).available

    def path_of(self, name: str) -> str | None:
        return self.probe(name).path

    def first_available(self, *names: str) -> ProbeResult | None:
        """Probe candidates in order and return the first one found."""
        for name in names:
            result = self.probe(name)
            if result.available:
                return result
        return None
