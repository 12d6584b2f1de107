"""Docker shortcuts."""

from fragsh.wrappers import wrap_tool

wrap_tool("dps", "docker", "ps")
wrap_tool("dimg", "docker", "images")
wrap_tool("dex", "docker", "exec", "-it")
wrap_tool("dlogs", "docker", "logs", "-f")
