"""
SmartEdge Command Line Interface

Usage:
    smartedge route scene.json [options]

Examples:
    # Route every edge of a scene and print the result
    smartedge route scene.json

    # Finer grid, diagonal moves, polyline output written to a file
    smartedge route scene.json --grid-ratio 5 --diagonal --drawer polyline -o routes.json
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from ..domain.services.routing_engine import SmartEdgeRouter
from ..infrastructure.serialization import load_scene, routes_to_document, save_document
from ..shared.configuration import initialize_config
from ..shared.exceptions import ConfigurationError, RoutingError, SmartEdgeException, ValidationError
from ..shared.utils.logging_utils import setup_logging
from .curves import DRAWERS, get_drawer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartedge",
        description="Obstacle-avoiding edge routing for diagram canvases"
    )
    parser.add_argument("--config", help="Path to a JSON configuration file")
    parser.add_argument("--log-level", type=str.upper,
                        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
                        help="Override the configured log level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    route = subparsers.add_parser("route", help="Route the edges of a scene file")
    route.add_argument("scene", help="Scene JSON file (.json or .json.gz)")
    route.add_argument("--grid-ratio", type=float, help="Canvas units per grid cell")
    route.add_argument("--padding", type=float, help="Clearance around nodes")
    route.add_argument("--diagonal", action="store_true", default=None,
                       help="Allow diagonal moves")
    route.add_argument("--smoothing", choices=("compress", "line_of_sight"),
                       help="Path smoothing mode")
    route.add_argument("--drawer", choices=sorted(DRAWERS), default="smooth",
                       help="Curve drawer for routed edges")
    route.add_argument("-o", "--output", help="Write the result here instead of stdout")
    return parser


def _options_from_args(base, args):
    overrides = {
        'grid_ratio': args.grid_ratio,
        'node_padding': args.padding,
        'diagonal': args.diagonal,
        'smoothing': args.smoothing,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    return replace(base, **overrides)


def run_route(args, config) -> int:
    """Route every edge in the scene; returns the process exit code."""
    options = _options_from_args(config.get_routing_options(), args)

    router = SmartEdgeRouter(options, curve_drawer=get_drawer(args.drawer))
    scene = load_scene(args.scene)

    routes = []
    errors = []
    for edge in scene.edges:
        try:
            routes.append(router.route(edge.source, edge.target, scene.nodes, edge_id=edge.id))
        except (RoutingError, ValidationError) as e:
            errors.append({"id": edge.id, **e.to_dict()})

    document = routes_to_document(routes, options)
    document["errors"] = errors

    if args.output:
        save_document(document, args.output)
    else:
        json.dump(document, sys.stdout, indent=2)
        sys.stdout.write("\n")

    if errors:
        logger.error(f"{len(errors)} of {len(scene.edges)} edges could not be routed")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = initialize_config(args.config)
    if args.log_level:
        config.update_logging_settings(level=args.log_level)
    setup_logging(config.get_settings().logging)

    try:
        if args.command == "route":
            return run_route(args, config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except SmartEdgeException as e:
        logger.error(f"{e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
