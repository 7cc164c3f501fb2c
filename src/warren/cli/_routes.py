"""``warren routes`` — list registered routes.

Prints one row per path and handler operation, with the HTTP methods
that reach it.
"""

import argparse
import sys

from warren.cli._resolve import resolve_app
from warren.errors import ConfigurationError


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for a warren app.

    Resolves ``args.app`` to an App instance, freezes it, and prints
    a table of METHOD, PATH, and HANDLER.
    """
    try:
        app = resolve_app(args.app)
        app.freeze()
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = app.routes.routes
    if not routes:
        print("No routes registered.")
        return

    # Group methods that share a path and an operation
    grouped: dict[tuple[str, str], list[str]] = {}
    for info in routes:
        grouped.setdefault((info.path, info.action.label), []).append(info.method)

    rows: list[tuple[str, str, str]] = [
        (", ".join(sorted(methods)), path, label) for (path, label), methods in grouped.items()
    ]

    max_methods = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    sep_len = max_methods + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for methods_str, path, label in rows:
        print(fmt.format(methods_str, path, label))
