# mapgen/world/procgen.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import structlog

from game_rng import GameRNG, resolve_rng
from mapgen.config import GenerationConfig
from mapgen.constants import TileType
from mapgen.world.borders import fill_map_borders, shrink_map
from mapgen.world.clusters import connect_clusters, find_isolated_clusters
from mapgen.world.corridors import (
    generate_secret_corridors_from_room_origins,
    remove_isolated_corridors,
)
from mapgen.world.dungeon_map import DungeonMap
from mapgen.world.edges import reconcile_room_edges
from mapgen.world.features import place_ladders, place_slide_in_room, place_traps
from mapgen.world.maze import generate_maze
from mapgen.world.rooms import Room, generate_rooms_at_intersections
from utils.profiling import timed_stage

log = structlog.get_logger()


@dataclass
class GeneratedDungeon:
    """Result of one pipeline run. Room coordinates match the cropped map."""

    game_map: DungeonMap
    rooms: List[Room]
    seed: Optional[int]
    stats: Dict[str, int] = field(default_factory=dict)
    timings: Dict[str, float] = field(default_factory=dict)


def _crop_room(room: Room, margin: int, game_map: DungeonMap) -> Room:
    shifted = room.shifted(-margin, -margin)

    def inside(points):
        return [p for p in points if game_map.in_bounds(p.x, p.y)]

    shifted.tiles = inside(shifted.tiles)
    shifted.absorbed = inside(shifted.absorbed)
    shifted.doors = inside(shifted.doors)
    return shifted


def generate_dungeon(
    config: Optional[GenerationConfig] = None, rng: Optional[GameRNG] = None
) -> GeneratedDungeon:
    """
    Runs the full pipeline: maze, rooms, border fill, corridor pruning,
    cluster repair, secret passages, traps, slides, ladders and the final
    crop.

    When ``rng`` is omitted a fresh ``GameRNG`` is built from
    ``config.seed``; with no seed either, the process-wide RNG is used.
    """
    config = (config or GenerationConfig()).validate()
    if rng is None and config.seed is not None:
        rng = GameRNG(seed=config.seed)
    rng = resolve_rng(rng)

    wall_step = config.wall_step
    corridor_step = config.corridor_step
    timings: Dict[str, float] = {}
    stats: Dict[str, int] = {}
    log.info(
        "Generating dungeon",
        seed=rng.initial_seed,
        width=config.map_width,
        height=config.map_height,
        wall_step=wall_step,
        corridor_step=corridor_step,
    )

    with timed_stage("generate_dungeon", timings):
        with timed_stage("generate_maze", timings):
            game_map = generate_maze(
                config.map_width, config.map_height, wall_step, corridor_step, rng
            )

        with timed_stage("generate_rooms", timings):
            rooms = generate_rooms_at_intersections(
                game_map,
                wall_step,
                corridor_step,
                config.effective_room_max_radius,
                config.room_size,
                config.room_size_min,
                config.room_size_max,
                rng,
            )
        stats["rooms"] = len(rooms)

        with timed_stage("fill_map_borders", timings):
            fill_map_borders(game_map, corridor_step, TileType.WALL)

        with timed_stage("remove_isolated_corridors", timings):
            stats["corridor_tiles_removed"] = remove_isolated_corridors(game_map)
            reconcile_room_edges(game_map)

        with timed_stage("connect_clusters", timings):
            clusters = find_isolated_clusters(game_map)
            stats["clusters"] = len(clusters)
            stats["corridors_carved"] = connect_clusters(
                game_map, clusters, wall_step, corridor_step, rng
            )
            reconcile_room_edges(game_map)

        with timed_stage("generate_secret_corridors", timings):
            stats["secret_tiles"] = generate_secret_corridors_from_room_origins(
                game_map, wall_step
            )

        with timed_stage("place_traps", timings):
            stats["traps"] = place_traps(game_map, config.trap_percentage, rng)

        with timed_stage("add_slides", timings):
            stats["slides"] = sum(
                place_slide_in_room(game_map, room.all_tiles, rng) for room in rooms
            )

        with timed_stage("place_ladders", timings):
            stats["ladders"] = place_ladders(game_map, config.ladder_count, rng)

        with timed_stage("shrink_map", timings):
            cropped = shrink_map(game_map, corridor_step)
            rooms = [_crop_room(room, corridor_step, cropped) for room in rooms]

    log.info("Dungeon generated", seed=rng.initial_seed, **stats)
    return GeneratedDungeon(
        game_map=cropped,
        rooms=rooms,
        seed=rng.initial_seed,
        stats=stats,
        timings=timings,
    )


__all__ = ["GeneratedDungeon", "generate_dungeon"]
