from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Dict

from mcp import ClientSession
from mcp.client.stdio import stdio_client
from mcp.shared.exceptions import McpError

from _stdio import SERVER_PARAMS


async def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python scripts/call_tool.py <tool_name> ['<json-args>']")
        raise SystemExit(1)

    tool_name = sys.argv[1]
    raw_args = sys.argv[2] if len(sys.argv) > 2 else "{}"

    try:
        params: Dict[str, Any] = json.loads(raw_args)
    except json.JSONDecodeError as exc:
        print("Failed to parse JSON arguments")
        print(repr(exc))
        raise SystemExit(1)

    async with stdio_client(SERVER_PARAMS) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            try:
                result = await session.call_tool(tool_name, params)
            except McpError as exc:
                print("Tool call failed:")
                print(f"[{exc.error.code}] {exc.error.message}")
                raise SystemExit(2)
            print("Tool call result:")
            for block in result.content:
                print(getattr(block, "text", block))


if __name__ == "__main__":
    asyncio.run(main())
