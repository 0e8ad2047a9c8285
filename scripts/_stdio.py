from __future__ import annotations

import sys

from mcp import StdioServerParameters

# Spawn the server from the current interpreter so the scripts work inside a venv.
SERVER_PARAMS = StdioServerParameters(
    command=sys.executable,
    args=["-m", "todo_mcp"],
)
