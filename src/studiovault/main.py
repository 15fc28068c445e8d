"""Unified entry point for StudioVault.

This module starts one of the interfaces:
- REST API server (default)
- CLI interface
"""

import argparse
import sys


def main():
    """Main entry point with interface selection."""
    parser = argparse.ArgumentParser(
        description="StudioVault - Sandboxed document vault",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Interfaces:
  api         Start the REST API server (default)
  cli         Run the command line interface

Examples:
  python -m studiovault                    # Start API server
  python -m studiovault api --port 9000    # Start API on custom port
  python -m studiovault cli ls             # List the vault root
""",
    )

    parser.add_argument(
        "interface",
        nargs="?",
        default="api",
        choices=["api", "cli"],
        help="Which interface to start (default: api)",
    )

    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind API server to (default: 127.0.0.1)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for API server (default: 8430)",
    )

    argv = sys.argv[1:]

    # Everything after "cli" belongs to the CLI itself
    if argv and argv[0] == "cli":
        from studiovault.interfaces.cli.app import run_cli

        run_cli(argv[1:])
        return

    args = parser.parse_args(argv)

    if args.interface == "api":
        import uvicorn

        from studiovault.core.config import (
            STUDIOVAULT_HOST,
            STUDIOVAULT_PORT,
            setup_logging,
        )

        setup_logging()
        host = args.host or STUDIOVAULT_HOST or "127.0.0.1"
        port = args.port or STUDIOVAULT_PORT

        print(f"Starting StudioVault API server on {host}:{port}")
        uvicorn.run(
            "studiovault.api.app:app",
            host=host,
            port=port,
            reload=False,
        )

    elif args.interface == "cli":
        from studiovault.interfaces.cli.app import run_cli

        run_cli([])


if __name__ == "__main__":
    main()
