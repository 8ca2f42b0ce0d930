"""
MCP SSE Server Entry Point

Allows running the server directly via `python -m mcp_sse_server`.
Configures logging to stderr, loads configuration from the environment,
registers the built-in capabilities and serves until interrupted.
"""

import asyncio
import logging
import sys

from .capabilities import register_builtin_capabilities
from .core.config import ServerConfig
from .core.mcp_server import MCPServer
from .transport.sse_transport import SSEConfig, SSETransport


def setup_logging(level: str = "INFO"):
    """Configure logging to stderr"""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


async def main():
    """Main entry point"""
    logger = logging.getLogger("main")

    try:
        config = ServerConfig.from_env()
        setup_logging(config.log_level)
        logger.info(f"Configuration: {config}")

        # Create server and its capabilities
        server = MCPServer(config)
        register_builtin_capabilities(server, config)

        # Configure SSE transport
        transport = SSETransport(SSEConfig(
            host=config.host,
            port=config.port,
            keepalive_interval=config.keepalive_interval,
        ))
        server.set_transport(transport)

        # Start server
        logger.info(f"Starting MCP SSE Server on port {config.port}...")
        await server.run()

    except Exception as e:
        setup_logging()
        logger.critical(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


def run():
    """Console script entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
