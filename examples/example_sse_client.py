#!/usr/bin/env python3
"""
Example SSE Client for MCP SSE Server

Opens the event stream, learns its messages endpoint from the first
event, then posts requests and reads their answers back from the stream.

Usage:
    # Terminal 1: Start the server
    python -m mcp_sse_server

    # Terminal 2: Run this client
    python examples/example_sse_client.py [http://localhost:3001]
"""

import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional

import aiohttp

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("sse_client")


class SSEMCPClient:
    """Simple SSE client for MCP SSE Server"""

    def __init__(self, base_url: str = "http://localhost:3001"):
        self.base_url = base_url.rstrip("/")
        self.session: Optional[aiohttp.ClientSession] = None
        self.stream: Optional[aiohttp.ClientResponse] = None
        self.endpoint: Optional[str] = None
        self.request_id = 0

    async def connect(self) -> None:
        """Open the event stream and read the endpoint event"""
        self.session = aiohttp.ClientSession()
        self.stream = await self.session.get(f"{self.base_url}/sse")
        event, data = await self._read_event()
        if event != "endpoint":
            raise RuntimeError(f"Expected endpoint event, got {event!r}")
        self.endpoint = f"{self.base_url}{data}"
        logger.info(f"Connected, messages endpoint: {self.endpoint}")

    async def _read_event(self):
        """Read one event, skipping keepalive comments"""
        event, data = None, []
        async for raw in self.stream.content:
            line = raw.decode("utf-8").rstrip("\n")
            if line.startswith(":"):
                continue
            if line == "":
                if event is not None:
                    return event, "\n".join(data)
                continue
            if line.startswith("event: "):
                event = line[len("event: "):]
            elif line.startswith("data: "):
                data.append(line[len("data: "):])
        raise ConnectionError("Event stream closed")

    async def request(self, method: str, params: Dict[str, Any] = None) -> Dict[str, Any]:
        """Post one request and wait for its response on the stream"""
        self.request_id += 1
        message = {"jsonrpc": "2.0", "method": method, "id": self.request_id}
        if params:
            message["params"] = params

        async with self.session.post(self.endpoint, json=message) as response:
            if response.status != 202:
                raise RuntimeError(f"{method} rejected: HTTP {response.status}")

        while True:
            _, data = await self._read_event()
            reply = json.loads(data)
            if reply.get("id") == self.request_id:
                return reply

    async def close(self) -> None:
        if self.stream:
            self.stream.close()
        if self.session:
            await self.session.close()
        logger.info("Connection closed")

    async def run(self) -> None:
        """Run example client"""
        await self.connect()

        try:
            logger.info("=== MCP SSE Client Demo ===")
            reply = await self.request("initialize", {
                "protocolVersion": "2024-11-05",
                "capabilities": {},
                "clientInfo": {"name": "sse-example-client", "version": "1.0.0"},
            })
            logger.info(f"Server: {reply['result']['serverInfo']}")

            reply = await self.request("tools/list")
            for tool in reply["result"]["tools"]:
                logger.info(f"  - {tool['name']}: {tool['description']}")

            reply = await self.request(
                "tools/call", {"name": "add", "arguments": {"a": 2, "b": 3}}
            )
            logger.info(f"add(2, 3) = {reply['result']['content'][0]['text']}")

            reply = await self.request("resources/read", {"uri": "db://users/1"})
            logger.info(f"db://users/1 = {reply['result']['contents'][0]['text']}")

            reply = await self.request("resources/read", {"uri": "db://orders/1"})
            logger.info(f"db://orders/1 -> {reply['error']['message']}")

        finally:
            await self.close()


async def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3001"
    await SSEMCPClient(base_url).run()


if __name__ == "__main__":
    asyncio.run(main())
