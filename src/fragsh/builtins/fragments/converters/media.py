"""Audio/video conversions with ffmpeg."""

import sys
from pathlib import Path

from fragsh import command
from fragsh.wrappers import run_tool


def _convert(name, args, suffix, *options):
    if not args:
        print(f"usage: {name} INPUT [OUTPUT]", file=sys.stderr)
        return 2
    source = args[0]
    target = args[1] if len(args) > 1 else str(Path(source).with_suffix(suffix))
    return run_tool("ffmpeg", "-i", source, *options, target)


@command("to-mp3", "Extract audio as MP3")
def to_mp3(args):
    return _convert("to-mp3", args, ".mp3", "-vn", "-q:a", "2")


@command("to-gif", "Convert a video clip to GIF")
def to_gif(args):
    return _convert("to-gif", args, ".gif", "-vf", "fps=12,scale=640:-1")
