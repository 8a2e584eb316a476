# mapgen/world/features.py
"""
Secondary content placed once the layout is final: pitfall traps in
corridors, slides in rooms and ladders hidden next to secret passages.
"""
import math
from typing import Iterable, List, Optional

import structlog

from game_rng import GameRNG, resolve_rng
from mapgen.constants import OPPOSITE_DIRECTION, EdgeType, TileType
from mapgen.world.dungeon_map import DungeonMap, Point
from mapgen.world.edges import direction_between

log = structlog.get_logger()

LADDER_MIN_WALL_NEIGHBORS = 3
SLIDE_MIN_WALL_NEIGHBORS = 2
# Square radius kept clear of doors and embrasures around a slide
SLIDE_EDGE_CLEARANCE = 2


def place_traps(
    game_map: DungeonMap, trap_percentage: float, rng: Optional[GameRNG] = None
) -> int:
    """
    Converts ``trap_percentage`` percent (rounded down) of eligible corridor
    tiles to TRAP_PITFALL. Corridors touching a secret corridor are never
    trapped. Returns the number of traps placed.
    """
    if not 0 <= trap_percentage <= 100:
        log.error("Invalid trap percentage", trap_percentage=trap_percentage)
        raise ValueError("trap_percentage must be between 0 and 100.")

    candidates = [
        p
        for p in game_map.tiles_of_type(TileType.CORRIDOR)
        if not game_map.is_adjacent_to_type(p.x, p.y, TileType.SECRET_CORRIDOR)
    ]
    total = math.floor(len(candidates) * trap_percentage / 100)
    if total == 0:
        log.debug("No traps to place", candidates=len(candidates))
        return 0

    rng = resolve_rng(rng)
    for x, y in rng.shuffle(candidates)[:total]:
        game_map.set_tile(x, y, TileType.TRAP_PITFALL)
    log.info("Traps placed", traps=total, candidates=len(candidates))
    return total


def ladder_candidates(game_map: DungeonMap) -> List[Point]:
    """Wall tiles beside a secret corridor and otherwise mostly enclosed by wall."""
    candidates = []
    for point in game_map.tiles_of_type(TileType.WALL):
        if not game_map.is_adjacent_to_type(point.x, point.y, TileType.SECRET_CORRIDOR):
            continue
        walls = game_map.neighbors_of_type(point.x, point.y, (TileType.WALL,))
        if len(walls) >= LADDER_MIN_WALL_NEIGHBORS:
            candidates.append(point)
    return candidates


def place_ladders(
    game_map: DungeonMap, ladder_count: int, rng: Optional[GameRNG] = None
) -> int:
    """
    Turns up to ``ladder_count`` random ladder candidates into LADDER_DOWN
    and hides a door between each ladder and its first secret-corridor
    neighbour. Returns the number of ladders placed.
    """
    if ladder_count < 0:
        log.error("Invalid ladder count", ladder_count=ladder_count)
        raise ValueError("ladder_count must not be negative.")

    candidates = ladder_candidates(game_map)
    if not candidates or ladder_count == 0:
        log.debug("No ladders to place", candidates=len(candidates))
        return 0

    rng = resolve_rng(rng)
    chosen = rng.shuffle(candidates)[:ladder_count]
    for ladder in chosen:
        game_map.set_tile(ladder.x, ladder.y, TileType.LADDER_DOWN)
        secret = game_map.neighbors_of_type(
            ladder.x, ladder.y, (TileType.SECRET_CORRIDOR,)
        )
        if not secret:
            continue
        direction = direction_between(ladder, secret[0])
        game_map.set_edge(ladder.x, ladder.y, direction, EdgeType.HIDDEN_DOOR)
        game_map.set_edge(
            secret[0].x,
            secret[0].y,
            OPPOSITE_DIRECTION[direction],
            EdgeType.HIDDEN_DOOR,
        )

    log.info("Ladders placed", ladders=len(chosen), candidates=len(candidates))
    return len(chosen)


def slide_candidates(game_map: DungeonMap, room_tiles: Iterable[Point]) -> List[Point]:
    candidates = []
    for point in room_tiles:
        x, y = point
        if game_map.get_tile(x, y) != TileType.ROOM:
            continue
        if len(game_map.neighbors_of_type(x, y, (TileType.WALL,))) < SLIDE_MIN_WALL_NEIGHBORS:
            continue
        if game_map.is_near_edge_type(
            x, y, EdgeType.REINFORCED_DOOR, SLIDE_EDGE_CLEARANCE
        ) or game_map.is_near_edge_type(x, y, EdgeType.EMBRASURE, SLIDE_EDGE_CLEARANCE):
            continue
        if game_map.is_adjacent_to_type(x, y, TileType.SECRET_CORRIDOR):
            continue
        candidates.append(point)
    return candidates


def place_slide_in_room(
    game_map: DungeonMap, room_tiles: Iterable[Point], rng: Optional[GameRNG] = None
) -> int:
    """
    Places a SLIDE on a random wall-hugging room tile and, when a second
    candidate exists, a TRAP_SLIDE decoy. Returns how many were placed.
    """
    candidates = slide_candidates(game_map, room_tiles)
    if not candidates:
        log.debug("No slide candidates in room")
        return 0

    rng = resolve_rng(rng)
    shuffled = rng.shuffle(candidates)
    game_map.set_tile(shuffled[0].x, shuffled[0].y, TileType.SLIDE)
    if len(shuffled) > 1:
        game_map.set_tile(shuffled[1].x, shuffled[1].y, TileType.TRAP_SLIDE)
        return 2
    return 1
