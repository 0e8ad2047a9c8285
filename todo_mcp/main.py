"""
Main entry point for the TodoApp MCP server.

The host process spawns this and talks JSON-RPC over stdin/stdout.
"""
from __future__ import annotations

import sys

import anyio

from .config import resolve_config
from .errors import TodoServerError
from .server import serve


def main() -> None:
    """Start the TodoApp MCP server on stdio."""
    try:
        config = resolve_config()
        anyio.run(serve, config)
    except KeyboardInterrupt:
        print("\nServer shutdown requested...", file=sys.stderr)
        sys.exit(0)
    except (TodoServerError, FileNotFoundError, ValueError) as e:
        print(f"Failed to start TodoApp MCP server: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
