"""Build runners."""

from fragsh.wrappers import wrap_tool

wrap_tool("mk", "make")
wrap_tool("jb", "just")
