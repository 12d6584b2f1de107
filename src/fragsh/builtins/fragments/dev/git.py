"""Git shortcuts."""

from fragsh import command, current_environment, setup_hook
from fragsh.wrappers import run_tool, wrap_tool

wrap_tool("gst", "git", "status", "--short", "--branch", description="git status (short)")
wrap_tool("gdiff", "git", "diff")
wrap_tool("gco", "git", "checkout")
wrap_tool("gpush", "git", "push")


@command("glog", "Compact git log (default: last 20 commits)")
def glog(args):
    if not any(a.startswith("-n") or a.isdigit() for a in args):
        args = ["-n", "20", *args]
    return run_tool("git", "log", "--oneline", "--decorate", *args)


@setup_hook
def configure_pager():
    current_environment().variables.setdefault("GIT_PAGER", "cat")
