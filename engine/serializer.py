# engine/serializer.py
"""JSON document form of a DungeonMap: tile names by row plus a sparse edge list."""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import structlog

from mapgen.constants import (
    DIRECTION_NAMES,
    EDGE_NAMES,
    NO_EDGE,
    TILE_NAMES,
    Direction,
    EdgeType,
    TileType,
)
from mapgen.world.dungeon_map import DungeonMap

log = structlog.get_logger()

_TILES_BY_NAME = {name: tile_type for tile_type, name in TILE_NAMES.items()}
_EDGES_BY_NAME = {name: edge_type for edge_type, name in EDGE_NAMES.items()}


def map_to_dict(game_map: DungeonMap) -> Dict[str, Any]:
    """
    ``tiles`` is a list of rows (indexed by y) holding tile names, with
    ``None`` for EMPTY cells. ``edges`` lists only cells with at least one
    edge.
    """
    tiles: List[List[Optional[str]]] = [
        [TILE_NAMES.get(TileType(int(value))) for value in row]
        for row in game_map.tiles
    ]
    edges: List[Dict[str, Any]] = []
    for y, x in np.argwhere(np.any(game_map.edges != NO_EDGE, axis=2)):
        entry: Dict[str, Any] = {"x": int(x), "y": int(y)}
        for direction, edge_type in game_map.edges_at(int(x), int(y)).items():
            entry[DIRECTION_NAMES[direction]] = EDGE_NAMES[edge_type]
        edges.append(entry)
    return {
        "width": game_map.width,
        "height": game_map.height,
        "tiles": tiles,
        "edges": edges,
    }


def map_from_dict(data: Dict[str, Any]) -> DungeonMap:
    try:
        width = int(data["width"])
        height = int(data["height"])
        rows = data["tiles"]
    except (KeyError, TypeError) as e:
        log.error("Malformed map document", error=str(e))
        raise ValueError(f"Malformed map document: {e}") from e

    if len(rows) != height or any(len(row) != width for row in rows):
        log.error("Tile grid does not match dimensions", width=width, height=height)
        raise ValueError("Tile grid does not match the declared width/height.")

    game_map = DungeonMap(width, height)
    for y, row in enumerate(rows):
        for x, name in enumerate(row):
            if name is None:
                continue
            if name not in _TILES_BY_NAME:
                log.error("Unknown tile name", name=name, x=x, y=y)
                raise ValueError(f"Unknown tile name: {name!r}")
            game_map.tiles[y, x] = int(_TILES_BY_NAME[name])

    for entry in data.get("edges", []):
        x, y = int(entry["x"]), int(entry["y"])
        if not game_map.in_bounds(x, y):
            log.error("Edge outside map", x=x, y=y)
            raise ValueError(f"Edge entry outside the map: ({x}, {y})")
        for direction in Direction:
            name = entry.get(DIRECTION_NAMES[direction])
            if name is None:
                continue
            if name not in _EDGES_BY_NAME:
                log.error("Unknown edge name", name=name, x=x, y=y)
                raise ValueError(f"Unknown edge name: {name!r}")
            game_map.set_edge(x, y, direction, EdgeType(_EDGES_BY_NAME[name]))
    return game_map


def save_json(game_map: DungeonMap, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(map_to_dict(game_map), f)
    log.info("Map JSON saved", path=str(path))
    return path


def load_json(path: Union[str, Path]) -> DungeonMap:
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    game_map = map_from_dict(data)
    log.info("Map JSON loaded", path=str(path), width=game_map.width, height=game_map.height)
    return game_map


__all__ = ["map_to_dict", "map_from_dict", "save_json", "load_json"]
