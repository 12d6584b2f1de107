"""pip shortcuts (always through the current interpreter's pip)."""

from fragsh.wrappers import wrap_tool

wrap_tool("pipi", "python3", "-m", "pip", "install", description="pip install")
wrap_tool("pipu", "python3", "-m", "pip", "install", "--upgrade", description="pip install --upgrade")
wrap_tool("pipl", "python3", "-m", "pip", "list", description="pip list")
