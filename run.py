"""CLI entrypoint."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from indie_coffee import config
from indie_coffee.ranking import DISPLAY_ORDERS, STRATEGIES, sort_for_display
from indie_coffee.reporting import (
    ensure_dir,
    render_results,
    write_json_object,
    write_results_csv,
)
from indie_coffee.service import CoffeeSearchService, InputValidationError, SearchError


def _repo_root() -> Path:
    return Path(__file__).resolve().parent


def load_env(path: str = ".env", root_dir: Optional[Path] = None) -> None:
    """Optionally load a repo-root .env file without overriding real env vars."""
    root = Path(root_dir) if root_dir else _repo_root()
    env_path = (root / path).resolve()
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find independent coffee shops nearby")
    parser.add_argument("--lat", type=str, required=True, help="Origin latitude")
    parser.add_argument("--lng", type=str, required=True, help="Origin longitude")
    parser.add_argument(
        "--radius-m",
        type=str,
        default=None,
        help=f"Search radius in meters (default: {config.DEFAULT_RADIUS_M})",
    )
    parser.add_argument("--strategy", choices=list(STRATEGIES), default=None)
    parser.add_argument(
        "--sort",
        choices=list(DISPLAY_ORDERS),
        default=None,
        help="Re-sort the ranked list for display",
    )
    parser.add_argument(
        "--coffee-only",
        action="store_true",
        help="Also drop places whose name carries no coffee hint",
    )
    parser.add_argument("--max-pages", type=int, default=config.PLACES_MAX_PAGES)
    parser.add_argument("--config", type=str, default=None, help="Path to search_config.json")
    parser.add_argument("--json", action="store_true", help="Print the JSON payload")
    parser.add_argument("--out", type=str, default=None, help="Write results.json and results.csv here")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    args = parse_args(argv)
    config.load_search_config(args.config)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    service = CoffeeSearchService(
        api_key=os.environ.get(config.API_KEY_ENV),
        max_pages=args.max_pages,
    )
    try:
        response = service.search(
            args.lat,
            args.lng,
            radius_meters=args.radius_m,
            strategy=args.strategy,
            client_key="cli",
            require_coffee_hint=True if args.coffee_only else None,
        )
    except InputValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except SearchError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.sort:
        response.items = sort_for_display(response.items, args.sort)

    payload = response.to_dict()
    if args.out:
        ensure_dir(args.out)
        write_json_object(os.path.join(args.out, "results.json"), payload)
        write_results_csv(os.path.join(args.out, "results.csv"), response.items)

    if args.json:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(f"Radius: {response.radius_meters} m, returned: {response.returned}")
        for line in render_results(response.items):
            print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
