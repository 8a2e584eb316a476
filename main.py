# main.py
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Tuple
from typing import Dict as PyDict

import structlog
import yaml

from engine.renderer import TILE_SIZE, render_map_to_image, save_image
from engine.serializer import save_json
from game_rng import seed_default_rng
from mapgen.config import GenerationConfig
from mapgen.mappings import (
    PUBLIC_EDGE_COLORS,
    PUBLIC_TILE_COLORS,
    PUBLIC_TILE_TEXT,
    SECRET_EDGE_COLORS,
    SECRET_TILE_COLORS,
    SECRET_TILE_TEXT,
)
from mapgen.world.procgen import GeneratedDungeon, generate_dungeon
from utils.logging_utils import setup_logging
from utils.profiling import timed_stage

# --- Paths relative to this script's location ---
SCRIPT_DIR = Path(__file__).parent.resolve()
CONFIG_DIR = SCRIPT_DIR / "config"
CONFIG_FILE = CONFIG_DIR / "config.yaml"
# --- End Paths ---

DEFAULT_OUTPUT: PyDict[str, Any] = {
    "directory": ".",
    "secret_image": "outputSecret.png",
    "public_image": "outputPublic.png",
    "json": "output.json",
    "tile_size": TILE_SIZE,
}

log = structlog.get_logger()


# --- Config Loading Helpers ---
def load_yaml_config(config_path: Path, config_name: str) -> PyDict[str, Any]:
    """Loads a generic YAML configuration file."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        raise FileNotFoundError(
            f"{config_name} configuration file not found: {config_path}"
        )
    try:
        with config_path.open("r") as f:
            config_data = yaml.safe_load(f)
        if config_data is None:
            log.warning(f"{config_name} config file is empty.", path=str(config_path))
            return {}
        log.info(f"{config_name} config loaded", path=str(config_path))
        return config_data
    except yaml.YAMLError as e:
        log.error(
            f"Error parsing YAML for {config_name}",
            path=str(config_path),
            error=str(e),
        )
        raise


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a maze-and-rooms dungeon map with secret passages."
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_FILE,
        help="YAML file with 'generation' and 'output' sections.",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for reproducible maps."
    )
    parser.add_argument("--width", type=int, default=None, help="Map width in tiles.")
    parser.add_argument("--height", type=int, default=None, help="Map height in tiles.")
    parser.add_argument(
        "--output-dir", type=Path, default=None, help="Directory for exported files."
    )
    parser.add_argument(
        "--no-images", action="store_true", help="Only write the JSON document."
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Logging level.",
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit logs as JSON lines."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def resolve_settings(
    args: argparse.Namespace, file_config: PyDict[str, Any]
) -> Tuple[GenerationConfig, PyDict[str, Any]]:
    """Merges file settings with command line overrides."""
    generation: PyDict[str, Any] = dict(file_config.get("generation") or {})
    if args.seed is not None:
        generation["seed"] = args.seed
    if args.width is not None:
        generation["map_width"] = args.width
    if args.height is not None:
        generation["map_height"] = args.height

    output = {**DEFAULT_OUTPUT, **(file_config.get("output") or {})}
    if args.output_dir is not None:
        output["directory"] = str(args.output_dir)

    config = GenerationConfig.from_dict(generation).validate()
    log.info("Generation settings resolved", **config.to_dict())
    return config, output


def export_outputs(
    result: GeneratedDungeon, output: PyDict[str, Any], images: bool = True
) -> List[Path]:
    directory = Path(output["directory"])
    written = [save_json(result.game_map, directory / output["json"])]
    if not images:
        return written

    tile_size = int(output["tile_size"])
    views = (
        (output["secret_image"], SECRET_TILE_COLORS, SECRET_EDGE_COLORS, SECRET_TILE_TEXT),
        (output["public_image"], PUBLIC_TILE_COLORS, PUBLIC_EDGE_COLORS, PUBLIC_TILE_TEXT),
    )
    for filename, tile_colors, edge_colors, tile_text in views:
        with timed_stage(f"render_{Path(filename).stem}", result.timings):
            image = render_map_to_image(
                result.game_map, tile_colors, edge_colors, tile_text, tile_size=tile_size
            )
        written.append(save_image(image, directory / filename))
    return written


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log_level = (
        logging.DEBUG
        if args.verbose
        else getattr(logging, args.log_level.upper(), logging.INFO)
    )
    setup_logging(log_level, json_logs=args.json_logs)

    try:
        file_config = load_yaml_config(args.config, "Main")
        config, output = resolve_settings(args, file_config)
        rng = seed_default_rng(config.seed)
        result = generate_dungeon(config, rng)
        written = export_outputs(result, output, images=not args.no_images)
    except (FileNotFoundError, ValueError, yaml.YAMLError, OSError) as e:
        log.critical("Dungeon generation failed", error=str(e), error_type=type(e).__name__)
        return 1

    log.info(
        "Generation complete",
        seed=result.seed,
        files=[str(p) for p in written],
        total_ms=round(result.timings.get("generate_dungeon", 0.0), 2),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
