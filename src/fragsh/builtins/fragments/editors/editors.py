"""Editor launchers."""

import os
import sys

from fragsh import command, current_environment
from fragsh.wrappers import run_tool, wrap_tool

EDITOR_CANDIDATES = ("nvim", "vim", "nano", "vi")


@command("edit", "Open files in $EDITOR or the first editor found")
def edit(args):
    probe = current_environment().probe
    preferred = os.environ.get("EDITOR")
    candidates = (preferred, *EDITOR_CANDIDATES) if preferred else EDITOR_CANDIDATES
    found = probe.first_available(*candidates)
    if found is None:
        print("edit: no editor installed", file=sys.stderr)
        return 127
    return run_tool(found.name, *args)


wrap_tool("c", "code", description="Open in VS Code")
