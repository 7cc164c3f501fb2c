"""Warren CLI — route introspection.

Entry point registered as ``warren`` in ``pyproject.toml``::

    [project.scripts]
    warren = "warren.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``warren`` command."""
    parser = argparse.ArgumentParser(
        prog="warren",
        description="Warren — declarative routing and dispatch for Python web apps.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- warren routes ----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from warren.cli._routes import run_routes

        run_routes(args)
