# mapgen/world/rooms.py
from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from game_rng import GameRNG, resolve_rng
from mapgen.constants import (
    ALL_DIRECTIONS,
    OVERRIDABLE_TILE_TYPES,
    ROOM_TILE_TYPES,
    EdgeType,
    TileType,
)
from mapgen.world.dungeon_map import DungeonMap, Point, distance
from mapgen.world.edges import (
    DOOR_SCANS,
    create_edges_between_tiles,
    find_door_candidate,
)

log = structlog.get_logger()

# Hard cap on growth iterations per room
MAX_GROWTH_ITERATIONS = 10000
# Absorbed gap tiles need at least this many room neighbours
MIN_ROOM_NEIGHBORS_TO_ABSORB = 2


@dataclass
class Room:
    """A grown room: its seed, the tiles grown from it and the gaps absorbed."""

    origin: Point
    tiles: List[Point] = field(default_factory=list)
    absorbed: List[Point] = field(default_factory=list)
    doors: List[Point] = field(default_factory=list)

    @property
    def all_tiles(self) -> List[Point]:
        return self.tiles + self.absorbed

    def shifted(self, dx: int, dy: int) -> "Room":
        def move(points: List[Point]) -> List[Point]:
            return [Point(p.x + dx, p.y + dy) for p in points]

        return Room(
            origin=Point(self.origin.x + dx, self.origin.y + dy),
            tiles=move(self.tiles),
            absorbed=move(self.absorbed),
            doors=move(self.doors),
        )


def _absorb_gaps(game_map: DungeonMap, room_tiles: List[Point]) -> List[Point]:
    """
    Turns pinholes left by random growth into room: corridors bordered only
    by room and wall, and walls bordered only by room.
    """
    absorbed: List[Point] = []
    room_or_wall = (TileType.ROOM, TileType.WALL)
    for tile in room_tiles:
        for neighbor in game_map.neighbors4(tile.x, tile.y):
            tile_type = game_map.get_tile(neighbor.x, neighbor.y)
            if tile_type == TileType.CORRIDOR:
                enclosed = game_map.all_neighbors_in(neighbor.x, neighbor.y, room_or_wall)
            elif tile_type == TileType.WALL:
                enclosed = game_map.all_neighbors_in(
                    neighbor.x, neighbor.y, (TileType.ROOM,)
                )
            else:
                continue
            if not enclosed:
                continue
            room_neighbors = game_map.neighbors_of_type(
                neighbor.x, neighbor.y, ROOM_TILE_TYPES
            )
            if len(room_neighbors) < MIN_ROOM_NEIGHBORS_TO_ABSORB:
                continue
            game_map.set_tile(neighbor.x, neighbor.y, TileType.ROOM)
            absorbed.append(neighbor)
    return absorbed


def _place_doors(game_map: DungeonMap, room: Room) -> None:
    for scan in DOOR_SCANS:
        candidate = find_door_candidate(scan, room.all_tiles, game_map, room.origin)
        if candidate is None:
            continue
        game_map.set_edge(
            candidate.x, candidate.y, scan.direction, EdgeType.REINFORCED_DOOR
        )
        room.doors.append(candidate)


def grow_room(
    game_map: DungeonMap,
    x: int,
    y: int,
    max_size: int,
    max_radius: float,
    rng: Optional[GameRNG] = None,
) -> Room:
    """
    Grows a room from ``(x, y)`` by randomized flood fill over WALL and
    CORRIDOR tiles, at most ``max_size`` tiles and ``max_radius`` from the
    seed. Gaps are absorbed, the seed becomes ROOM_ORIGIN, wall and
    embrasure edges are derived and up to one reinforced door per side is
    placed. ``max_size < 1`` leaves the map untouched.
    """
    origin = Point(x, y)
    room = Room(origin=origin)
    if max_size < 1:
        return room
    game_map.require_in_bounds(x, y)
    rng = resolve_rng(rng)

    frontier: List[Point] = [origin]
    iteration = 0
    while frontier and len(room.tiles) < max_size and iteration < MAX_GROWTH_ITERATIONS:
        iteration += 1
        current = rng.pop_random(frontier)
        if game_map.get_tile(*current) not in OVERRIDABLE_TILE_TYPES:
            continue
        if distance(current, origin) > max_radius:
            continue
        game_map.set_tile(current.x, current.y, TileType.ROOM)
        room.tiles.append(current)
        frontier.extend(
            game_map.unvisited_neighbors(
                current.x, current.y, 1, OVERRIDABLE_TILE_TYPES
            )
        )

    room.absorbed = _absorb_gaps(game_map, room.tiles)
    game_map.set_tile(x, y, TileType.ROOM_ORIGIN)

    room_types = [TileType.ROOM, TileType.ROOM_ORIGIN]
    create_edges_between_tiles(
        game_map,
        room.all_tiles,
        room_types,
        [TileType.WALL],
        EdgeType.ROOM_WALL,
        EdgeType.ROOM_WALL,
        ALL_DIRECTIONS,
    )
    create_edges_between_tiles(
        game_map,
        room.all_tiles,
        room_types,
        [TileType.CORRIDOR],
        EdgeType.EMBRASURE,
        EdgeType.EMBRASURE,
        ALL_DIRECTIONS,
    )
    _place_doors(game_map, room)

    log.debug(
        "Room grown",
        origin=tuple(origin),
        size=len(room.tiles),
        absorbed=len(room.absorbed),
        doors=len(room.doors),
        iterations=iteration,
    )
    return room


def possible_intersections(game_map: DungeonMap, wall_step: int) -> List[Point]:
    """Lattice points ``wall_step`` apart, row-major."""
    return [
        Point(x, y)
        for y in range(0, game_map.height - 1, wall_step)
        for x in range(0, game_map.width - 1, wall_step)
    ]


def is_within_distance_from_border(
    game_map: DungeonMap, point: Point, margin: int
) -> bool:
    max_x = game_map.width - 1
    max_y = game_map.height - 1
    return (
        point.x <= margin
        or point.y <= margin
        or point.x >= max_x - margin
        or point.y >= max_y - margin
    )


def generate_rooms_at_intersections(
    game_map: DungeonMap,
    wall_step: int,
    corridor_step: int,
    room_max_radius: float,
    room_size: float,
    room_size_min: float,
    room_size_max: float,
    rng: Optional[GameRNG] = None,
) -> List[Room]:
    """
    Visits lattice intersections in random order and grows a room at each
    one that is clear of the border and of earlier room origins.
    """
    rng = resolve_rng(rng)
    border_margin = wall_step + corridor_step
    min_origin_distance = 2 * wall_step + corridor_step - 1

    intersections = rng.shuffle(possible_intersections(game_map, wall_step))
    rooms: List[Room] = []
    skipped = 0
    while intersections:
        intersection = intersections.pop()
        if is_within_distance_from_border(game_map, intersection, border_margin):
            skipped += 1
            continue
        nearest_origin = game_map.find_nearest_tile(
            intersection.x, intersection.y, TileType.ROOM_ORIGIN
        )
        if (
            nearest_origin is not None
            and distance(intersection, nearest_origin) <= min_origin_distance
        ):
            skipped += 1
            continue
        size = int(round(room_size * rng.uniform(room_size_min, room_size_max)))
        room = grow_room(
            game_map, intersection.x, intersection.y, size, room_max_radius, rng
        )
        if size >= 1:
            rooms.append(room)

    log.info("Rooms generated", rooms=len(rooms), skipped_intersections=skipped)
    return rooms
