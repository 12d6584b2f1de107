"""Markdown conversions with pandoc."""

import sys
from pathlib import Path

from fragsh import command
from fragsh.wrappers import run_tool


def _pandoc(name, args, suffix, *options):
    if not args:
        print(f"usage: {name} INPUT.md [OUTPUT] [PANDOC OPTIONS...]", file=sys.stderr)
        return 2
    source = args[0]
    target = args[1] if len(args) > 1 else str(Path(source).with_suffix(suffix))
    return run_tool("pandoc", source, "-o", target, *options, *args[2:])


@command("md2pdf", "Markdown to PDF")
def md2pdf(args):
    return _pandoc("md2pdf", args, ".pdf")


@command("md2html", "Markdown to standalone HTML")
def md2html(args):
    return _pandoc("md2html", args, ".html", "--standalone")
