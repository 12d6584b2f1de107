#!/usr/bin/env python3
"""
Tests for the fragsh CLI entry point.
"""

import json
from unittest.mock import patch

import pytest

from fragsh.cli import fragsh_cli
from fragsh.cli.fragsh_cli import build_parser, main
from fragsh.config import DEBUG_ENV_VAR, Config, ConfigManager
from fragsh.core.manifest import BUILTIN_FRAGMENTS_DIR

from conftest import counting_fragment, write_fragment


MANIFEST = """
groups:
  tools:
    description: Test tools
    modules: [tools.py, absent.py]
    commands: [hello]
  broken:
    modules: [boom.py]
    commands: [boom]
"""


@pytest.fixture
def workspace(tmp_path, fragments_dir, monkeypatch):
    """Fragments dir + manifest, with config file values ignored."""
    monkeypatch.delenv(DEBUG_ENV_VAR, raising=False)
    monkeypatch.setattr(fragsh_cli, "get_config", lambda: Config())

    write_fragment(fragments_dir, "tools.py", '''
        from fragsh import command

        @command("hello", "Say hello")
        def hello(args):
            print("hello", *args)
            return 0

        @command("status")
        def status(args):
            return int(args[0])
    ''')
    manifest = tmp_path / "manifest.yaml"
    manifest.write_text(MANIFEST)
    return ["--fragments-dir", str(fragments_dir), "--manifest", str(manifest)]


# ============================================================================
# run
# ============================================================================

class TestRunCommand:
    """Tests for `fragsh run`."""

    def test_run_loads_group(self, workspace, capsys):
        assert main([*workspace, "run", "hello", "--loud", "x"]) == 0
        assert capsys.readouterr().out == "hello --loud x\n"

    def test_run_not_found(self, workspace, capsys):
        assert main([*workspace, "run", "nope"]) == 127
        assert "nope: command not found" in capsys.readouterr().err

    def test_run_stale_mapping(self, workspace, capsys):
        assert main([*workspace, "run", "boom"]) == 127
        assert "boom: command not found" in capsys.readouterr().err

    def test_run_builtin(self, workspace, capsys):
        assert main([*workspace, "run", "which", "help"]) == 0
        assert "help: command (builtin)" in capsys.readouterr().out


# ============================================================================
# groups / commands
# ============================================================================

class TestListing:
    """Tests for `fragsh groups` and `fragsh commands`."""

    def test_groups(self, workspace, capsys):
        assert main([*workspace, "groups"]) == 0
        out = capsys.readouterr().out
        assert "tools - Test tools" in out
        assert "tools.py, absent.py" in out

    def test_groups_json(self, workspace, capsys):
        assert main([*workspace, "groups", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data[0]["group"] == "tools"
        assert data[0]["commands"] == ["hello"]

    def test_commands_json(self, workspace, capsys):
        assert main([*workspace, "commands", "--json"]) == 0
        assert json.loads(capsys.readouterr().out) == {"boom": "broken", "hello": "tools"}

    def test_bad_manifest(self, workspace, tmp_path, capsys):
        bad = tmp_path / "bad.yaml"
        bad.write_text("groups: [oops\n")
        assert main(["--manifest", str(bad), "groups"]) == 1
        assert "Invalid YAML" in capsys.readouterr().err


# ============================================================================
# probe / check
# ============================================================================

class TestProbeCommand:
    """Tests for `fragsh probe`."""

    def test_probe(self, workspace, monkeypatch, capsys):
        monkeypatch.setattr("shutil.which", lambda name: "/usr/bin/git" if name == "git" else None)

        assert main([*workspace, "probe", "git", "ffmpeg"]) == 1
        out = capsys.readouterr().out
        assert "git: /usr/bin/git" in out
        assert "ffmpeg: not found" in out

    def test_probe_all_found(self, workspace, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: f"/bin/{name}")
        assert main([*workspace, "probe", "ls"]) == 0


class TestCheckCommand:
    """Tests for `fragsh check`."""

    def test_check_reports_stale_mapping(self, workspace, capsys):
        # broken group's only fragment is missing, so 'boom' is never defined
        assert main([*workspace, "check"]) == 0
        out = capsys.readouterr().out
        assert "[warning] broken: Mapped command 'boom'" in out
        assert "[info]" not in out

    def test_check_verbose_lists_missing(self, workspace, capsys):
        main([*workspace, "check", "-v"])
        assert "[info] tools: Fragment not installed" in capsys.readouterr().out

    def test_check_failing_fragment_is_error(self, workspace, fragments_dir, capsys):
        write_fragment(fragments_dir, "boom.py", "raise RuntimeError('bad fragment')\n")

        assert main([*workspace, "check"]) == 1
        out = capsys.readouterr().out
        assert "[error] broken: Error: bad fragment" in out


# ============================================================================
# new-fragment / config
# ============================================================================

class TestNewFragmentCommand:
    """Tests for `fragsh new-fragment`."""

    def test_new_fragment(self, workspace, fragments_dir, capsys):
        assert main([*workspace, "new-fragment", "dcu", "--group", "containers",
                     "--wrap", "docker compose up"]) == 0
        assert (fragments_dir / "containers" / "dcu.py").exists()
        assert "commands: [dcu]" in capsys.readouterr().out

    def test_new_fragment_exists(self, workspace, capsys):
        main([*workspace, "new-fragment", "x", "--group", "g"])
        capsys.readouterr()

        assert main([*workspace, "new-fragment", "x", "--group", "g"]) == 1
        assert "already exists" in capsys.readouterr().err

    def test_refuses_bundled_fragments_dir(self, workspace, capsys):
        target = BUILTIN_FRAGMENTS_DIR / "scratch-group" / "x.py"

        assert main(["new-fragment", "x", "--group", "scratch-group"]) == 1
        assert "bundled fragments directory" in capsys.readouterr().err
        assert not target.exists()


class TestConfigCommand:
    """Tests for `fragsh config`."""

    @pytest.fixture
    def config_home(self, tmp_path):
        import fragsh.config.config as config_module

        config_dir = tmp_path / ".fragsh"
        config_module._manager = None
        with patch.object(ConfigManager, "CONFIG_DIR", config_dir):
            with patch.object(ConfigManager, "CONFIG_FILE", config_dir / "config.json"):
                yield config_dir
        config_module._manager = None

    def test_set_and_show(self, workspace, config_home, capsys):
        assert main([*workspace, "config", "--set", "prompt=% "]) == 0
        assert json.loads((config_home / "config.json").read_text())["prompt"] == "%"

        assert main([*workspace, "config"]) == 0
        assert "prompt" in capsys.readouterr().out

    def test_set_unknown_key(self, workspace, config_home, capsys):
        assert main([*workspace, "config", "--set", "nope=1"]) == 1
        assert "Unknown config key" in capsys.readouterr().err

    def test_set_requires_equals(self, workspace, config_home, capsys):
        assert main([*workspace, "config", "--set", "prompt"]) == 1
        assert "KEY=VALUE" in capsys.readouterr().err

    def test_unset(self, workspace, config_home, capsys):
        main([*workspace, "config", "--set", "simple=true"])
        assert main([*workspace, "config", "--unset", "simple"]) == 0
        assert "Unset simple" in capsys.readouterr().out


def test_parser_run_keeps_dash_arguments():
    args = build_parser().parse_args(["run", "gst", "--short", "-b"])
    assert args.name == "gst"
    assert args.args == ["--short", "-b"]


def test_debug_flag_wins_over_env(monkeypatch):
    monkeypatch.setattr(fragsh_cli, "get_config", lambda: Config())
    monkeypatch.setenv(DEBUG_ENV_VAR, "0")

    args = build_parser().parse_args(["--debug", "groups"])

    assert fragsh_cli._settings(args).is_debug() is True
