"""npm shortcuts."""

from fragsh.wrappers import wrap_tool

wrap_tool("ni", "npm", "install")
wrap_tool("nr", "npm", "run")
wrap_tool("nx", "npx")
