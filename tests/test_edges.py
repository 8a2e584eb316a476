import pytest

from mapgen.constants import (
    ALL_DIRECTIONS,
    HORIZONTAL_DIRECTIONS,
    Direction,
    EdgeType,
    TileType,
)
from mapgen.world.dungeon_map import DungeonMap, Point
from mapgen.world.edges import (
    DOOR_SCANS,
    create_edges_between_tiles,
    direction_between,
    find_door_candidate,
    reconcile_room_edges,
)


def _room_strip() -> DungeonMap:
    """3x1 room in the middle of a 5x3 wall map, corridor to its right."""
    game_map = DungeonMap(5, 3, TileType.WALL)
    game_map.fill_rect(1, 1, 2, 1, TileType.ROOM)
    game_map.set_tile(3, 1, TileType.CORRIDOR)
    return game_map


def test_direction_between():
    origin = Point(5, 5)
    assert direction_between(origin, Point(5, 4)) == Direction.TOP
    assert direction_between(origin, Point(6, 5)) == Direction.RIGHT
    assert direction_between(origin, Point(5, 6)) == Direction.BOTTOM
    assert direction_between(origin, Point(4, 5)) == Direction.LEFT
    with pytest.raises(ValueError):
        direction_between(origin, Point(6, 6))
    with pytest.raises(ValueError):
        direction_between(origin, origin)


def test_inner_edges_only_on_matching_sides():
    game_map = _room_strip()
    tiles = [Point(1, 1), Point(2, 1)]
    create_edges_between_tiles(
        game_map,
        tiles,
        [TileType.ROOM],
        [TileType.CORRIDOR],
        EdgeType.EMBRASURE,
        EdgeType.EMBRASURE,
        ALL_DIRECTIONS,
    )
    assert game_map.edges_at(2, 1) == {Direction.RIGHT: EdgeType.EMBRASURE}
    assert game_map.edges_at(1, 1) == {}
    assert game_map.edges_at(3, 1) == {}


def test_outer_edges_set_on_facing_side():
    game_map = _room_strip()
    create_edges_between_tiles(
        game_map,
        [Point(2, 1)],
        [TileType.ROOM],
        [TileType.CORRIDOR],
        EdgeType.HIDDEN_DOOR,
        EdgeType.DOOR,
        ALL_DIRECTIONS,
        set_inner=False,
        set_outer=True,
    )
    assert game_map.edges_at(2, 1) == {}
    assert game_map.edges_at(3, 1) == {Direction.LEFT: EdgeType.DOOR}


def test_direction_subset_is_respected():
    game_map = _room_strip()
    create_edges_between_tiles(
        game_map,
        [Point(1, 1), Point(2, 1)],
        [TileType.ROOM],
        [TileType.WALL],
        EdgeType.ROOM_WALL,
        EdgeType.ROOM_WALL,
        HORIZONTAL_DIRECTIONS,
    )
    assert game_map.edges_at(1, 1) == {Direction.LEFT: EdgeType.ROOM_WALL}
    assert game_map.edges_at(2, 1) == {}


def test_edge_classification_is_idempotent():
    game_map = _room_strip()
    args = (
        [Point(1, 1), Point(2, 1)],
        [TileType.ROOM],
        [TileType.WALL],
        EdgeType.ROOM_WALL,
        EdgeType.ROOM_WALL,
        ALL_DIRECTIONS,
    )
    create_edges_between_tiles(game_map, *args)
    once = game_map.edges.copy()
    create_edges_between_tiles(game_map, *args)
    assert (game_map.edges == once).all()


def test_find_door_candidate_picks_outermost_tile():
    game_map = DungeonMap(7, 7, TileType.WALL)
    game_map.fill_rect(1, 1, 3, 3, TileType.ROOM)
    game_map.set_tile(2, 2, TileType.ROOM_ORIGIN)
    game_map.fill_rect(4, 1, 1, 3, TileType.CORRIDOR)
    room_tiles = [Point(x, y) for y in range(1, 4) for x in range(1, 4)]
    create_edges_between_tiles(
        game_map,
        room_tiles,
        [TileType.ROOM, TileType.ROOM_ORIGIN],
        [TileType.CORRIDOR],
        EdgeType.EMBRASURE,
        EdgeType.EMBRASURE,
        ALL_DIRECTIONS,
    )
    scans = {scan.direction: scan for scan in DOOR_SCANS}
    # Ties on x keep the first tile in scan order
    assert find_door_candidate(
        scans[Direction.RIGHT], room_tiles, game_map, Point(2, 2)
    ) == Point(3, 1)
    assert find_door_candidate(
        scans[Direction.LEFT], room_tiles, game_map, Point(2, 2)
    ) is None


def test_reconcile_room_edges_follows_neighbor_changes():
    game_map = _room_strip()
    game_map.set_edge(2, 1, Direction.RIGHT, EdgeType.ROOM_WALL)
    game_map.set_edge(1, 1, Direction.LEFT, EdgeType.EMBRASURE)
    game_map.set_edge(1, 1, Direction.TOP, EdgeType.REINFORCED_DOOR)
    changed = reconcile_room_edges(game_map)
    assert changed == 2
    assert game_map.get_edge(2, 1, Direction.RIGHT) == EdgeType.EMBRASURE
    assert game_map.get_edge(1, 1, Direction.LEFT) == EdgeType.ROOM_WALL
    assert game_map.get_edge(1, 1, Direction.TOP) == EdgeType.REINFORCED_DOOR
