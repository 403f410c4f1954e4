#!/usr/bin/env python3
"""
Deep links - command-line interface.

Builds shareable app links and resolves inbound links to route intents:
- parse: Resolve a URI to route name + path/query parameters
- build: Build atlas, place, journey or generic route links
- routes: Show the route catalog
- check: Validate a route catalog file

Usage:
    deeplinks parse "https://app.local/place/abc123"
    deeplinks parse "https://app.local/atlas?trending=true" --format json
    deeplinks build atlas --query beach --radius 5.0
    deeplinks build atlas --nearby --lat 12.97 --lng 77.59
    deeplinks build place abc123
    deeplinks build journey flight_search --param from=BLR --param to=DEL
    deeplinks build route home
    deeplinks routes --format json
    deeplinks check --catalog .deeplinks/routes.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

from deeplinks import __version__
from deeplinks.commands.links import LinkCommand


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deeplinks",
        description="Build and resolve app deep links",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Resolve inbound links
  %(prog)s parse https://app.local/place/abc123
  %(prog)s parse "https://app.local/atlas?trending=true" --format json

  # Build shareable links
  %(prog)s build atlas --query beach --radius 5.0
  %(prog)s build atlas --nearby --lat 12.97 --lng 77.59
  %(prog)s build place abc123
  %(prog)s build journey flight_search --param from=BLR --param to=DEL
  %(prog)s build journey /journey/hotels --param guests=2
  %(prog)s build route trails

  # Catalog
  %(prog)s routes                       Show route catalog (YAML)
  %(prog)s routes --format json         Show route catalog (JSON)
  %(prog)s check --catalog routes.yaml  Validate a catalog file

Settings are read from .deeplinks/config.yaml in the project root:
  links:
    scheme: https
    host: app.local
    catalog: .deeplinks/routes.yaml
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Route catalog YAML (default: config or bundled catalog)"
    )
    parser.add_argument("--scheme", help="Scheme for built links (default: https)")
    parser.add_argument("--host", help="Host for built links (default: app.local)")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose (debug) logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ----- deeplinks parse URI -----
    parse_parser = subparsers.add_parser(
        "parse",
        help="Resolve a URI to a route intent",
        description="Resolve an inbound URI to route name and parameters"
    )
    parse_parser.add_argument("uri", help="URI to resolve")
    parse_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )

    # ----- deeplinks build {atlas,place,journey,route} -----
    build_parser = subparsers.add_parser(
        "build",
        help="Build a shareable link",
        description="Build a shareable link for a destination"
    )
    build_subparsers = build_parser.add_subparsers(dest="build_command", help="Link types")

    atlas_parser = build_subparsers.add_parser("atlas", help="Atlas link with search and filters")
    atlas_parser.add_argument("--query", "-q", help="Free-text search")
    atlas_parser.add_argument("--region", help="Region filter")
    atlas_parser.add_argument("--nearby", action=argparse.BooleanOptionalAction, default=None)
    atlas_parser.add_argument("--trending", action=argparse.BooleanOptionalAction, default=None)
    atlas_parser.add_argument(
        "--open-now", dest="open_now",
        action=argparse.BooleanOptionalAction, default=None
    )
    atlas_parser.add_argument("--emotion", help="Emotion filter")
    atlas_parser.add_argument("--category", help="Category filter")
    atlas_parser.add_argument("--sort", help="Sort order")
    atlas_parser.add_argument("--price", help="Price filter")
    atlas_parser.add_argument("--rating", help="Rating filter")
    atlas_parser.add_argument("--radius", dest="radius_km", type=float, help="Radius in km")
    atlas_parser.add_argument("--lat", type=float, help="Map latitude")
    atlas_parser.add_argument("--lng", type=float, help="Map longitude")
    atlas_parser.add_argument("--zoom", type=float, help="Map zoom")

    place_parser = build_subparsers.add_parser("place", help="Place detail link")
    place_parser.add_argument("id", help="Place identifier")

    journey_parser = build_subparsers.add_parser("journey", help="Journey category link")
    journey_parser.add_argument(
        "category",
        help="Category route name (flight_search) or path (/journey/flights)"
    )
    journey_parser.add_argument(
        "--param", "-p",
        action="append",
        metavar="KEY=VALUE",
        help="Query parameter (repeatable)"
    )

    route_parser = build_subparsers.add_parser("route", help="Link to any catalog route")
    route_parser.add_argument("name", help="Route name (e.g. home, trails, trip_group)")
    route_parser.add_argument(
        "--param", "-p",
        action="append",
        metavar="KEY=VALUE",
        help="Path or query parameter (repeatable)"
    )

    # ----- deeplinks routes -----
    routes_parser = subparsers.add_parser(
        "routes",
        help="Show route catalog",
        description="Print route names, path templates and parameter keys"
    )
    routes_parser.add_argument(
        "--format", "-f",
        choices=["yaml", "json"],
        default="yaml",
        help="Output format (default: yaml)"
    )

    # ----- deeplinks check -----
    check_parser = subparsers.add_parser(
        "check",
        help="Validate route catalog",
        description="Validate the configured (or --catalog) route catalog"
    )
    # SUPPRESS keeps a global --catalog given before the subcommand
    check_parser.add_argument(
        "--catalog",
        type=Path,
        default=argparse.SUPPRESS,
        help="Route catalog YAML to validate"
    )

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        return 0

    command = LinkCommand(catalog_path=args.catalog, scheme=args.scheme, host=args.host)

    if args.command == "parse":
        return command.parse(args.uri, format=args.format)

    if args.command == "build":
        if args.build_command == "atlas":
            return command.build_atlas(
                query=args.query,
                region=args.region,
                nearby=args.nearby,
                trending=args.trending,
                emotion=args.emotion,
                category=args.category,
                sort=args.sort,
                radius_km=args.radius_km,
                open_now=args.open_now,
                price=args.price,
                rating=args.rating,
                lat=args.lat,
                lng=args.lng,
                zoom=args.zoom,
            )
        if args.build_command == "place":
            return command.build_place(args.id)
        if args.build_command == "journey":
            return command.build_journey(args.category, args.param)
        if args.build_command == "route":
            return command.build_route(args.name, args.param)
        print("Error: choose a link type: atlas, place, journey, route", file=sys.stderr)
        return 1

    if args.command == "routes":
        return command.routes(format=args.format)

    if args.command == "check":
        return command.check()

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
