"""Command line entry point.

    smartfill lookup "UA 120" 2025-03-01
    smartfill lookup "TGV 6201" tomorrow --type train
    smartfill lookup "Hotel Lutetia" --type hotel --lat 48.85 --lng 2.33
    smartfill serve --port 8000
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from .config import get_config
from .container import get_container
from .dates import normalize_travel_date
from .domain.errors import InvalidRequestError, ProviderError, SuggestionNotFoundError
from .logging_config import configure_logging
from .services import AutofillResolver


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartfill", description="Smart Fill segment autofill."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    lookup = commands.add_parser("lookup", help="Resolve one query and print it")
    lookup.add_argument("query")
    lookup.add_argument("date", nargs="?", default=None)
    lookup.add_argument("--type", default="flight", dest="segment_type")
    lookup.add_argument("--lat", default=None)
    lookup.add_argument("--lng", default=None)
    lookup.add_argument("--radius", default=None)

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    return parser


def _lookup_input(args: argparse.Namespace) -> Dict[str, Any]:
    raw: Dict[str, Any] = {"type": args.segment_type, "query": args.query}
    if args.date:
        day = normalize_travel_date(args.date)
        if day is None:
            raise InvalidRequestError(
                f"Could not read '{args.date}' as a date.", field_name="date"
            )
        raw["date"] = day
    context = {
        key: value
        for key, value in (
            ("lat", args.lat),
            ("lng", args.lng),
            ("radiusMeters", args.radius),
        )
        if value is not None
    }
    if context:
        raw["context"] = context
    return raw


def run_lookup(args: argparse.Namespace) -> int:
    resolver: AutofillResolver = get_container().resolve(AutofillResolver)

    try:
        raw = _lookup_input(args)
        result = asyncio.run(resolver.resolve(raw))
        suggestion: Optional[Dict[str, Any]] = result.suggestion.to_dict()
    except SuggestionNotFoundError:
        suggestion = None
    except InvalidRequestError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 2
    except ProviderError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps({"input": raw, "suggestion": suggestion}, indent=2))
    return 0


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from .api import create_app

    api = get_config().api
    uvicorn.run(create_app(), host=args.host or api.host, port=args.port or api.port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()
    if args.command == "serve":
        return run_serve(args)
    return run_lookup(args)


if __name__ == "__main__":
    sys.exit(main())
