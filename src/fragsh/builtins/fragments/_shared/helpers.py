"""Helpers shared by several groups."""

from fragsh import command, current_environment


@command("tool-status", "Show which external tools are installed")
def tool_status(args):
    env = current_environment()
    missing = 0
    for name in args:
        result = env.probe.probe(name)
        if result.available:
            print(f"  {name:<16} {result.path}")
        else:
            print(f"  {name:<16} (not installed)")
            missing += 1
    return 1 if missing else 0
