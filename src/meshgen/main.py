"""Main entry point for meshgen."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from .core.node import SceneNode, integrate
from .generators.config import GeneratorConfig, load_config
from .generators.generator import MeshGenerator
from .loader import ShapeLoader

logger = logging.getLogger("meshgen")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="meshgen - Procedural mesh generation for primitive shapes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "definition",
        help="YAML shape definition file",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="PATH",
        help="YAML generator config (division number, normals, bounds)",
    )
    parser.add_argument(
        "-d", "--division",
        type=int,
        help="Override the division number (negative resets to the default)",
    )
    parser.add_argument(
        "--no-normals",
        action="store_true",
        help="Skip normal generation",
    )
    parser.add_argument(
        "--merge",
        action="store_true",
        help="Integrate all shapes into one mesh and report it",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Combine the config file with command line overrides."""
    config = load_config(args.config) if args.config else GeneratorConfig()
    if args.division is not None:
        config = config.with_division_number(args.division)
    if args.no_normals:
        config = replace(config, normal_generation=False)
    return config


def describe(root: SceneNode) -> list[str]:
    """One line per node with mesh statistics."""
    lines = []
    for node in root.iter_nodes():
        indent = "  " * node.depth
        mesh_info = f" ({node.mesh.vertex_count} vertices, {node.mesh.face_count} triangles)" if node.mesh else ""
        lines.append(f"{indent}- {node.name}{mesh_info}")
    return lines


def main(argv: list[str] | None = None) -> int:
    """Run the meshgen command line tool."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = build_config(args)
    loader = ShapeLoader(MeshGenerator(config))
    try:
        root = loader.load(args.definition)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    print("meshgen - Procedural mesh generation")
    print("=" * 40)
    print(f"Division number: {config.division_number}")
    for line in describe(root):
        print(line)

    if args.merge:
        merged = integrate(root)
        merged.validate()
        bounds = merged.update_bounding_box()
        print(f"\nMerged: {merged.vertex_count} vertices, {merged.face_count} triangles")
        if bounds is not None:
            print(f"Bounds: min {bounds[0].round(4).tolist()} max {bounds[1].round(4).tolist()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
