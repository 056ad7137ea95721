#!/usr/bin/env python3
"""Entry point script for Spanner MCP Server."""

import sys
import subprocess
import argparse


def main():
    """Main entry point with transport selection."""
    parser = argparse.ArgumentParser(
        description="Spanner MCP Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with stdio transport (for Claude Desktop and other MCP clients)
  python run.py stdio

  # Run with SSE transport on a custom port
  python run.py sse --port 3000

  # Run against the Spanner emulator with debug logging
  SPANNER_EMULATOR_HOST=localhost:9010 LOG_LEVEL=DEBUG python run.py stdio
        """
    )

    parser.add_argument(
        "transport",
        choices=["stdio", "sse"],
        help="Transport mode: stdio for CLI, sse for HTTP streaming"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port for SSE server (default: 3000)"
    )

    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for SSE server (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--config",
        help="Path to YAML configuration file"
    )

    args = parser.parse_args()

    cmd = [sys.executable, "-m", "spanner_mcp.cli.mcp_server", "--transport", args.transport]

    if args.transport == "sse":
        cmd.extend(["--host", args.host, "--port", str(args.port)])

    if args.config:
        cmd.extend(["--config", args.config])

    # stdout belongs to the protocol in stdio mode
    print(f"Starting Spanner MCP Server ({args.transport})", file=sys.stderr)
    if args.transport == "sse":
        print(f"   Server: http://{args.host}:{args.port}/sse", file=sys.stderr)

    try:
        result = subprocess.run(cmd)
        sys.exit(result.returncode)
    except KeyboardInterrupt:
        print("\nServer stopped", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    main()
