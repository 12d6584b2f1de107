#!/usr/bin/env python3
"""
Tests for CachedCommandProbe.
"""

import pytest

from fragsh import CachedCommandProbe, SessionContext, SessionStateError

from conftest import FakeResolver


class TestCachedCommandProbe:
    """Tests for the per-session availability cache."""

    def test_resolver_called_once_per_name(self):
        resolver = FakeResolver({"git": "/usr/bin/git"})
        probe = CachedCommandProbe(SessionContext(), resolver)

        results = [probe.probe("git") for _ in range(5)]

        assert resolver.calls == ["git"]
        assert all(r.available and r.path == "/usr/bin/git" for r in results)

    def test_missing_binary_cached_too(self):
        resolver = FakeResolver()
        probe = CachedCommandProbe(SessionContext(), resolver)

        assert probe.is_available("ffmpeg") is False
        assert probe.path_of("ffmpeg") is None
        assert resolver.calls == ["ffmpeg"]

    def test_names_are_independent(self):
        resolver = FakeResolver({"git": "/usr/bin/git"})
        probe = CachedCommandProbe(SessionContext(), resolver)

        probe.probe("git")
        probe.probe("docker")

        assert resolver.calls == ["git", "docker"]
        assert probe.is_available("git") is True
        assert probe.is_available("docker") is False

    def test_first_available(self):
        resolver = FakeResolver({"vi": "/usr/bin/vi"})
        probe = CachedCommandProbe(SessionContext(), resolver)

        result = probe.first_available("nvim", "vim", "vi", "nano")

        assert result.name == "vi"
        assert resolver.calls == ["nvim", "vim", "vi"]

    def test_first_available_none(self):
        probe = CachedCommandProbe(SessionContext(), FakeResolver())
        assert probe.first_available("a", "b") is None

    def test_cache_lives_in_context(self):
        context = SessionContext()
        resolver = FakeResolver({"git": "/usr/bin/git"})
        CachedCommandProbe(context, resolver).probe("git")

        # A second probe sharing the session reuses the result
        CachedCommandProbe(context, resolver).probe("git")

        assert resolver.calls == ["git"]
        assert context.probe_cache["git"].available

    def test_reset_forgets_results(self):
        context = SessionContext()
        resolver = FakeResolver({"git": "/usr/bin/git"})
        probe = CachedCommandProbe(context, resolver)
        probe.probe("git")

        context.reset()
        probe.probe("git")

        assert resolver.calls == ["git", "git"]

    def test_defaults_to_shutil_which(self, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: f"/bin/{name}")
        probe = CachedCommandProbe(SessionContext())
        assert probe.resolver("ls") == "/bin/ls"

    def test_double_cache_write_raises(self):
        context = SessionContext()
        probe = CachedCommandProbe(context, FakeResolver())
        result = probe.probe("x")
        with pytest.raises(SessionStateError):
            context.cache_probe(result)


class TestShellProbe:
    """Probe results exposed through the shell."""

    def test_shell_probe_shares_cache_with_environment(self, make_shell):
        resolver = FakeResolver({"git": "/usr/bin/git"})
        shell = make_shell({}, resolver=resolver)

        shell.probe("git")
        shell.environment.probe.probe("git")

        assert resolver.calls == ["git"]
