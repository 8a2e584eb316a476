# mapgen/world/maze.py
from typing import List, Optional, Tuple

import structlog

from game_rng import GameRNG, resolve_rng
from mapgen.constants import TileType
from mapgen.world.corridors import carve_corridor_block
from mapgen.world.dungeon_map import DungeonMap, Point

log = structlog.get_logger()


def padded_dimensions(
    width: int, height: int, wall_step: int, corridor_step: int
) -> Tuple[int, int]:
    """Requested size rounded up to the lattice plus a corridor margin."""
    padded_width = (width // wall_step + 1) * wall_step + corridor_step
    padded_height = (height // wall_step + 1) * wall_step + corridor_step
    return padded_width, padded_height


def maze_start(corridor_step: int) -> Point:
    return Point(corridor_step // 2, corridor_step // 2)


def generate_maze(
    width: int,
    height: int,
    wall_step: int,
    corridor_step: int,
    rng: Optional[GameRNG] = None,
) -> DungeonMap:
    """
    Carves a maze with a randomized depth-first backtracker.

    Lattice points sit ``wall_step`` apart; every carve stamps a
    ``corridor_step`` square, so corridors are ``corridor_step`` thick and
    walls ``wall_step - corridor_step``. The returned map keeps its padding
    margin; crop it with ``shrink_map`` at the end of the pipeline.
    """
    if wall_step < 1 or corridor_step < 1:
        log.error(
            "Invalid maze steps", wall_step=wall_step, corridor_step=corridor_step
        )
        raise ValueError("wall_step and corridor_step must be positive.")
    rng = resolve_rng(rng)

    map_width, map_height = padded_dimensions(width, height, wall_step, corridor_step)
    game_map = DungeonMap(map_width, map_height, TileType.WALL)
    log.info(
        "Carving maze",
        requested=(width, height),
        padded=(map_width, map_height),
        wall_step=wall_step,
        corridor_step=corridor_step,
    )

    start = maze_start(corridor_step)
    carve_corridor_block(game_map, start.x, start.y, corridor_step)
    stack: List[Point] = [start]
    visited_count = 1

    while stack:
        current = stack[-1]
        neighbors = game_map.unvisited_neighbors(current.x, current.y, wall_step)
        if not neighbors:
            stack.pop()
            continue

        chosen = rng.sample_one(neighbors)
        step_x = (chosen.x > current.x) - (chosen.x < current.x)
        step_y = (chosen.y > current.y) - (chosen.y < current.y)
        for i in range(1, wall_step):
            carve_corridor_block(
                game_map, current.x + i * step_x, current.y + i * step_y, corridor_step
            )
        carve_corridor_block(game_map, chosen.x, chosen.y, corridor_step)
        stack.append(chosen)
        visited_count += 1

    log.info(
        "Maze carved",
        lattice_points=visited_count,
        corridor_tiles=game_map.count(TileType.CORRIDOR),
    )
    return game_map
