#!/usr/bin/env python3
"""
CLI entry point (fragsh command).
"""

from __future__ import annotations

import argparse
import json
import sys
from uuid import uuid4

from fragsh.config import DEFAULTS, Config, get_config, get_config_manager
from fragsh.core.exceptions import CommandNotFoundError, ManifestError
from fragsh.core.manifest import BUILTIN_FRAGMENTS_DIR, load_manifest
from fragsh.logging import close_session_logging, configure_console_logging, configure_session_logging

# Exit status for unresolved commands, as in POSIX shells
EXIT_NOT_FOUND = 127


def _settings(args) -> Config:
    """Config file values overridden by command-line flags."""
    overrides = {}
    if args.fragments_dir:
        overrides["fragments_dir"] = args.fragments_dir
    if args.manifest:
        overrides["manifest"] = args.manifest
    if args.debug:
        overrides["debug"] = True
    if getattr(args, "simple", False):
        overrides["simple"] = True
    config = get_config().model_copy(update=overrides)
    config._debug_flag = bool(args.debug)
    return config


def _build_shell(config: Config):
    from fragsh.cli.builtins import install_builtins
    from fragsh.engine import FragmentShell

    shell = FragmentShell.from_config(config)
    install_builtins(shell)
    return shell


def cmd_shell(args, config: Config) -> int:
    """Start the interactive shell."""
    from fragsh.cli.shell_repl import repl, simple_repl

    shell = _build_shell(config)
    if config.get("simple") or not sys.stdin.isatty():
        return simple_repl(shell, config)
    return repl(shell, config)


def cmd_run(args, config: Config) -> int:
    """Run a single command and exit with its status."""
    from fragsh.cli.shell_repl import exit_status

    shell = _build_shell(config)
    try:
        return exit_status(shell.run(args.name, args.args))
    except CommandNotFoundError as e:
        print(str(e), file=sys.stderr)
        return EXIT_NOT_FOUND


def cmd_groups(args, config: Config) -> int:
    """List groups with their modules and commands."""
    manifest = load_manifest(config.manifest_path())
    if args.as_json:
        groups = [
            {
                "group": name,
                "description": spec.description,
                "modules": spec.modules,
                "commands": spec.commands,
            }
            for name, spec in manifest.groups.items()
        ]
        print(json.dumps(groups, indent=2))
        return 0

    print("\nGroups:")
    for name, spec in manifest.groups.items():
        description = f" - {spec.description}" if spec.description else ""
        print(f"  {name}{description}")
        print(f"    modules:  {', '.join(spec.modules) or '(none)'}")
        print(f"    commands: {', '.join(spec.commands) or '(none)'}")
    print()
    return 0


def cmd_commands(args, config: Config) -> int:
    """List the command -> group mapping."""
    _, commands = load_manifest(config.manifest_path()).build_registries()
    if args.as_json:
        print(json.dumps(dict(commands.items()), indent=2))
        return 0
    for name, group in commands.items():
        print(f"  {name:<16} {group}")
    return 0


def cmd_probe(args, config: Config) -> int:
    """Check whether external binaries are installed."""
    from fragsh.engine import CachedCommandProbe
    from fragsh.session import SessionContext

    probe = CachedCommandProbe(SessionContext())
    missing = 0
    for name in args.names:
        result = probe.probe(name)
        if result.available:
            print(f"{name}: {result.path}")
        else:
            print(f"{name}: not found")
            missing += 1
    return 1 if missing else 0


def cmd_check(args, config: Config) -> int:
    """Validate the manifest against the fragments on disk."""
    from fragsh.engine import validate

    modules, commands = load_manifest(config.manifest_path()).build_registries()
    issues = validate(modules, commands, config.fragments_path())

    shown = [i for i in issues if args.verbose or i.level != "info"]
    for issue in shown:
        where = f" ({issue.path})" if issue.path else ""
        print(f"[{issue.level}] {issue.group}: {issue.message}{where}")

    errors = sum(1 for i in issues if i.level == "error")
    warnings = sum(1 for i in issues if i.level == "warning")
    print(f"\n{len(modules)} group(s) checked: {errors} error(s), {warnings} warning(s)")
    return 1 if errors else 0


def cmd_new_fragment(args, config: Config) -> int:
    """Create a new fragment scaffold."""
    from fragsh.cli.generator import generate_fragment

    output_dir = config.fragments_path()
    if output_dir.resolve() == BUILTIN_FRAGMENTS_DIR.resolve():
        print(
            "Error: refusing to write into the bundled fragments directory; "
            "pass --fragments-dir or run `fragsh config --set fragments_dir=DIR`",
            file=sys.stderr,
        )
        return 1

    success, message, path = generate_fragment(
        name=args.name,
        group=args.group,
        wrap_command=args.wrap,
        output_dir=output_dir,
        force=args.force,
    )
    if not success:
        print(f"Error: {message}", file=sys.stderr)
        return 1
    print(message)
    return 0


def cmd_config(args, config: Config) -> int:
    """Show or change settings in ~/.fragsh/config.json."""
    mgr = get_config_manager()
    try:
        if args.set:
            key, sep, value = args.set.partition("=")
            if not sep:
                print("Error: --set expects KEY=VALUE", file=sys.stderr)
                return 1
            mgr.set(key.strip(), value.strip())
            print(f"Set {key.strip()} = {mgr.get(key.strip())}")
            return 0
        if args.unset:
            mgr.unset(args.unset)
            print(f"Unset {args.unset} (default: {DEFAULTS.get(args.unset)})")
            return 0
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Config file: {mgr.CONFIG_FILE}")
    for key in Config.model_fields:
        marker = " *" if key in mgr.list_settings() else ""
        print(f"  {key:<14} {mgr.get(key)}{marker}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fragsh",
        description="Command shell that loads wrapper fragments on first use",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    fragsh                          Start the interactive shell
    fragsh run gst                  Run one command (loads its group)
    fragsh groups                   List groups, modules and commands
    fragsh check                    Validate manifest and fragments
    fragsh new-fragment dcu --group containers --wrap "docker compose up"
        """,
    )
    parser.add_argument("--fragments-dir", metavar="DIR", help="Fragments directory")
    parser.add_argument("--manifest", metavar="FILE", help="Manifest file")
    parser.add_argument(
        "--debug", action="store_true", help="Show fragment load failures (or set FRAGSH_DEBUG=1)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    shell_parser = subparsers.add_parser("shell", help="Start the interactive shell (default)")
    shell_parser.add_argument("--simple", action="store_true", help="Plain input() REPL")
    shell_parser.set_defaults(func=cmd_shell)

    run_parser = subparsers.add_parser("run", help="Run a single command")
    run_parser.add_argument("name", help="Command name")
    run_parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments, passed unchanged")
    run_parser.set_defaults(func=cmd_run)

    groups_parser = subparsers.add_parser("groups", help="List groups")
    groups_parser.add_argument("--json", action="store_true", dest="as_json", help="Output as JSON")
    groups_parser.set_defaults(func=cmd_groups)

    commands_parser = subparsers.add_parser("commands", help="List command -> group mapping")
    commands_parser.add_argument("--json", action="store_true", dest="as_json", help="Output as JSON")
    commands_parser.set_defaults(func=cmd_commands)

    probe_parser = subparsers.add_parser("probe", help="Check external binaries")
    probe_parser.add_argument("names", nargs="+", help="Binary names")
    probe_parser.set_defaults(func=cmd_probe)

    check_parser = subparsers.add_parser("check", help="Validate manifest and fragments")
    check_parser.add_argument("-v", "--verbose", action="store_true", help="Also list missing fragments")
    check_parser.set_defaults(func=cmd_check)

    new_parser = subparsers.add_parser("new-fragment", help="Create a fragment scaffold")
    new_parser.add_argument("name", help="Command name")
    new_parser.add_argument("--group", required=True, help="Group (directory) for the fragment")
    new_parser.add_argument("--wrap", metavar="COMMAND", help="External command to wrap")
    new_parser.add_argument("--force", action="store_true", help="Overwrite an existing fragment")
    new_parser.set_defaults(func=cmd_new_fragment)

    config_parser = subparsers.add_parser("config", help="Show or change settings")
    config_group = config_parser.add_mutually_exclusive_group()
    config_group.add_argument("--set", metavar="KEY=VALUE", help="Set a setting")
    config_group.add_argument("--unset", metavar="KEY", help="Reset a setting to its default")
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the fragsh CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Default to the interactive shell
    if args.command is None:
        args.command = "shell"
        args.func = cmd_shell

    config = _settings(args)
    configure_console_logging(config.is_debug())
    if config.get("session_log"):
        log_path = configure_session_logging(uuid4().hex)
        if config.is_debug():
            print(f"Session log: {log_path}", file=sys.stderr)

    try:
        return args.func(args, config)
    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        close_session_logging()


if __name__ == "__main__":
    sys.exit(main())
