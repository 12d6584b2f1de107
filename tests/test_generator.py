#!/usr/bin/env python3
"""
Tests for the fragment scaffold generator.
"""

import pytest

from fragsh import FragmentCommandRegistry, FragmentShell, ModuleRegistry
from fragsh.cli.generator import generate_command_name, generate_fragment

from conftest import FakeResolver


def load_generated(fragments_dir, path, command, resolver=None):
    """Build a shell whose only group is the generated fragment."""
    relative = path.relative_to(fragments_dir).as_posix()
    return FragmentShell(
        fragments_dir,
        ModuleRegistry.from_table({"gen": [relative]}),
        FragmentCommandRegistry.from_groups({"gen": [command]}),
        resolver=resolver or FakeResolver(),
    )


class TestFragmentGenerator:
    """Tests for generate_fragment()."""

    def test_generate_basic_fragment(self, tmp_path):
        success, message, path = generate_fragment("hello", "misc", output_dir=tmp_path)

        assert success is True
        assert path == tmp_path / "misc" / "hello.py"
        content = path.read_text()
        assert '@command("hello"' in content
        assert "def hello(args)" in content

    def test_message_contains_manifest_snippet(self, tmp_path):
        success, message, path = generate_fragment("hello", "misc", output_dir=tmp_path)

        assert "misc/hello.py" in message
        assert "commands: [hello]" in message

    def test_snippet_uses_normalized_group(self, tmp_path):
        success, message, path = generate_fragment("hi", "Dev Tools", output_dir=tmp_path)

        assert path == tmp_path / "dev-tools" / "hi.py"
        assert "  dev-tools:\n" in message
        assert "- dev-tools/hi.py" in message
        assert "Dev Tools:" not in message

    def test_generate_wrapper_fragment(self, tmp_path):
        success, message, path = generate_fragment(
            "dcu", "containers", wrap_command="docker compose up", output_dir=tmp_path,
        )

        assert success is True
        content = path.read_text()
        assert "wrap_tool('dcu', 'docker', 'compose', 'up'" in content

    def test_generate_refuses_overwrite(self, tmp_path):
        generate_fragment("hello", "misc", output_dir=tmp_path)
        success, message, path = generate_fragment("hello", "misc", output_dir=tmp_path)

        assert success is False
        assert "already exists" in message
        assert path is None

    def test_generate_force_overwrite(self, tmp_path):
        generate_fragment("hello", "misc", output_dir=tmp_path)
        success, _, _ = generate_fragment("hello", "misc", output_dir=tmp_path, force=True)
        assert success is True

    def test_generate_invalid_name(self, tmp_path):
        success, message, path = generate_fragment("@#$%", "misc", output_dir=tmp_path)
        assert success is False
        assert "Invalid command name" in message

    def test_generate_invalid_group(self, tmp_path):
        success, message, _ = generate_fragment("ok", "!!!", output_dir=tmp_path)
        assert success is False
        assert "Invalid group name" in message

    def test_generate_invalid_wrap(self, tmp_path):
        success, message, _ = generate_fragment("x", "g", wrap_command='"unclosed', output_dir=tmp_path)
        assert success is False
        assert "Invalid --wrap command" in message

    def test_generate_empty_wrap(self, tmp_path):
        success, message, _ = generate_fragment("x", "g", wrap_command="   ", output_dir=tmp_path)
        assert success is False
        assert "Empty --wrap command" in message

    def test_generate_hyphenated_name(self, tmp_path):
        success, _, path = generate_fragment("to-mp4", "converters", output_dir=tmp_path)

        assert success is True
        assert path.name == "to_mp4.py"
        assert '@command("to-mp4"' in path.read_text()

    def test_generate_leading_digit(self, tmp_path):
        success, _, path = generate_fragment("2pdf", "docs", output_dir=tmp_path)

        assert success is True
        assert "def _2pdf(args)" in path.read_text()

    def test_generate_creates_directory(self, tmp_path):
        nested = tmp_path / "nested" / "path"
        success, _, path = generate_fragment("hello", "misc", output_dir=nested)

        assert success is True
        assert path.exists()


class TestGeneratedFragmentsLoad:
    """Generated files work with the loader."""

    def test_generated_fragment_is_loadable(self, tmp_path, capsys):
        _, _, path = generate_fragment("say-hi", "misc", output_dir=tmp_path)
        shell = load_generated(tmp_path, path, "say-hi")

        assert shell.run("say-hi", ["there"]) == 0
        assert "say-hi: there" in capsys.readouterr().out
        assert shell.ensure_group("gen").failed == 0

    def test_generated_wrapper_is_loadable(self, tmp_path, monkeypatch):
        _, _, path = generate_fragment("ec", "misc", wrap_command="echo -n", output_dir=tmp_path)
        runs = []

        class Done:
            returncode = 0

        monkeypatch.setattr("subprocess.run", lambda argv, **kw: runs.append(argv) or Done())
        shell = load_generated(tmp_path, path, "ec", FakeResolver({"echo": "/bin/echo"}))

        assert shell.run("ec", ["hi"]) == 0
        assert runs == [["/bin/echo", "-n", "hi"]]


@pytest.mark.parametrize("raw,expected", [
    ("Hello", "hello"),
    ("my tool", "my-tool"),
    ("to_mp3", "to_mp3"),
    ("a.b/c", "abc"),
    ("", ""),
])
def test_generate_command_name(raw, expected):
    assert generate_command_name(raw) == expected
