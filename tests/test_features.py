import pytest

from game_rng import GameRNG
from mapgen.constants import Direction, EdgeType, TileType
from mapgen.world.dungeon_map import DungeonMap, Point
from mapgen.world.edges import direction_between
from mapgen.world.features import (
    ladder_candidates,
    place_ladders,
    place_slide_in_room,
    place_traps,
)


def _corridor_map() -> DungeonMap:
    """Two corridor rows, the lower one touching a secret corridor tile."""
    game_map = DungeonMap(10, 7, TileType.WALL)
    game_map.fill_rect(0, 1, 10, 1, TileType.CORRIDOR)
    game_map.fill_rect(0, 4, 10, 1, TileType.CORRIDOR)
    game_map.set_tile(5, 5, TileType.SECRET_CORRIDOR)
    return game_map


def _secret_column_map() -> DungeonMap:
    game_map = DungeonMap(9, 9, TileType.WALL)
    game_map.fill_rect(4, 2, 1, 5, TileType.SECRET_CORRIDOR)
    return game_map


def _square_room_map():
    game_map = DungeonMap(12, 12, TileType.WALL)
    game_map.fill_rect(3, 3, 5, 5, TileType.ROOM)
    game_map.set_tile(5, 5, TileType.ROOM_ORIGIN)
    tiles = [Point(x, y) for y in range(3, 8) for x in range(3, 8)]
    return game_map, tiles


def test_zero_percent_traps_leave_map_unchanged():
    game_map = _corridor_map()
    before = game_map.copy()
    assert place_traps(game_map, 0, GameRNG(seed=1)) == 0
    assert game_map == before


def test_full_percent_traps_every_eligible_corridor():
    game_map = _corridor_map()
    placed = place_traps(game_map, 100, GameRNG(seed=1))
    assert placed == 19
    assert game_map.tiles_of_type(TileType.CORRIDOR) == [Point(5, 4)]
    assert game_map.count(TileType.TRAP_PITFALL) == 19


def test_trap_count_rounds_down():
    game_map = _corridor_map()
    assert place_traps(game_map, 10, GameRNG(seed=2)) == 1
    assert game_map.count(TileType.TRAP_PITFALL) == 1


def test_invalid_trap_percentage():
    with pytest.raises(ValueError):
        place_traps(_corridor_map(), 101, GameRNG(seed=1))
    with pytest.raises(ValueError):
        place_traps(_corridor_map(), -1, GameRNG(seed=1))


def test_ladder_candidates_are_deep_in_rock():
    game_map = _secret_column_map()
    candidates = ladder_candidates(game_map)
    assert len(candidates) == 12
    assert Point(4, 1) in candidates and Point(3, 4) in candidates
    assert Point(2, 4) not in candidates


def test_place_ladders_adds_hidden_door_towards_secret_corridor():
    game_map = _secret_column_map()
    placed = place_ladders(game_map, 3, GameRNG(seed=5))
    assert placed == 3
    ladders = game_map.tiles_of_type(TileType.LADDER_DOWN)
    assert len(ladders) == 3
    for ladder in ladders:
        secret = game_map.neighbors_of_type(
            ladder.x, ladder.y, (TileType.SECRET_CORRIDOR,)
        )[0]
        direction = direction_between(ladder, secret)
        assert game_map.get_edge(ladder.x, ladder.y, direction) == EdgeType.HIDDEN_DOOR


def test_place_ladders_caps_at_candidate_count():
    game_map = _secret_column_map()
    assert place_ladders(game_map, 50, GameRNG(seed=5)) == 12
    assert place_ladders(DungeonMap(4, 4, TileType.WALL), 5, GameRNG(seed=5)) == 0
    with pytest.raises(ValueError):
        place_ladders(game_map, -1, GameRNG(seed=5))


def test_slide_and_decoy_land_on_room_corners():
    game_map, tiles = _square_room_map()
    placed = place_slide_in_room(game_map, tiles, GameRNG(seed=3))
    assert placed == 2
    corners = {Point(3, 3), Point(7, 3), Point(3, 7), Point(7, 7)}
    slides = game_map.tiles_of_type(TileType.SLIDE)
    decoys = game_map.tiles_of_type(TileType.TRAP_SLIDE)
    assert len(slides) == 1 and len(decoys) == 1
    assert set(slides + decoys) <= corners
    assert game_map.get_tile(5, 5) == TileType.ROOM_ORIGIN


def test_slides_keep_clear_of_doors():
    game_map, tiles = _square_room_map()
    game_map.set_edge(3, 5, Direction.LEFT, EdgeType.REINFORCED_DOOR)
    game_map.set_edge(7, 7, Direction.RIGHT, EdgeType.EMBRASURE)
    assert place_slide_in_room(game_map, tiles, GameRNG(seed=3)) == 1
    assert game_map.tiles_of_type(TileType.SLIDE) == [Point(7, 3)]
    assert game_map.count(TileType.TRAP_SLIDE) == 0


def test_slide_without_candidates_is_noop():
    game_map = DungeonMap(5, 5, TileType.ROOM)
    before = game_map.copy()
    tiles = [Point(x, y) for y in range(5) for x in range(5)]
    assert place_slide_in_room(game_map, tiles, GameRNG(seed=1)) == 0
    assert game_map == before
