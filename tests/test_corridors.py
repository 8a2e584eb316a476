from game_rng import GameRNG
from mapgen.constants import Direction, EdgeType, TileType
from mapgen.world.corridors import (
    carve_corridor_block,
    construct_corridor,
    create_secret_corridors,
    generate_secret_corridors_from_room_origins,
    remove_isolated_corridors,
)
from mapgen.world.dungeon_map import DungeonMap, Point


def test_carve_corridor_block_is_centred():
    game_map = DungeonMap(6, 6, TileType.WALL)
    carve_corridor_block(game_map, 3, 3, 2)
    assert sorted(game_map.tiles_of_type(TileType.CORRIDOR)) == [
        Point(2, 2),
        Point(2, 3),
        Point(3, 2),
        Point(3, 3),
    ]


def test_construct_corridor_only_replaces_walls():
    game_map = DungeonMap(12, 12, TileType.WALL)
    game_map.set_tile(5, 2, TileType.ROOM)
    game_map.set_tile(2, 5, TileType.ROOM)
    construct_corridor(game_map, Point(2, 2), Point(8, 8), 1, GameRNG(seed=4))
    assert game_map.get_tile(5, 2) == TileType.ROOM
    assert game_map.get_tile(2, 5) == TileType.ROOM
    assert game_map.get_tile(8, 8) == TileType.CORRIDOR
    assert game_map.get_tile(2, 2) == TileType.CORRIDOR


def test_construct_corridor_both_orders_reach_end():
    orders = set()
    for seed in range(20):
        game_map = DungeonMap(12, 12, TileType.WALL)
        construct_corridor(game_map, Point(2, 2), Point(8, 8), 1, GameRNG(seed=seed))
        # Width 1 L-shape: two legs of 7 tiles sharing the corner
        assert game_map.count(TileType.CORRIDOR) == 13
        orders.add(game_map.get_tile(8, 2) == TileType.CORRIDOR)
    assert orders == {True, False}


def test_remove_isolated_corridors_keeps_reachable_and_rooms():
    game_map = DungeonMap(12, 5, TileType.WALL)
    game_map.set_tile(1, 2, TileType.ROOM_ORIGIN)
    game_map.fill_rect(2, 2, 3, 1, TileType.CORRIDOR)
    game_map.fill_rect(7, 2, 3, 1, TileType.CORRIDOR)
    game_map.set_tile(11, 0, TileType.ROOM)

    removed = remove_isolated_corridors(game_map)

    assert removed == 3
    assert game_map.count(TileType.CORRIDOR) == 3
    assert game_map.get_tile(8, 2) == TileType.WALL
    assert game_map.get_tile(11, 0) == TileType.ROOM


def test_remove_isolated_corridors_without_rooms_clears_all():
    game_map = DungeonMap(5, 5, TileType.WALL)
    game_map.fill_rect(0, 2, 5, 1, TileType.CORRIDOR)
    assert remove_isolated_corridors(game_map) == 5
    assert game_map.count(TileType.CORRIDOR) == 0


def test_horizontal_secret_corridor_gets_side_doors():
    game_map = DungeonMap(12, 5, TileType.WALL)
    game_map.set_tile(2, 2, TileType.ROOM_ORIGIN)
    game_map.set_tile(7, 2, TileType.CORRIDOR)

    created = create_secret_corridors(game_map, Point(2, 2), [Point(7, 2)])

    assert created == [Point(3, 2), Point(4, 2), Point(5, 2), Point(6, 2)]
    assert game_map.get_tile(2, 2) == TileType.ROOM_ORIGIN
    assert game_map.get_edge(3, 2, Direction.LEFT) == EdgeType.HIDDEN_DOOR
    assert game_map.get_edge(2, 2, Direction.RIGHT) == EdgeType.HIDDEN_DOOR
    assert game_map.get_edge(6, 2, Direction.RIGHT) == EdgeType.HIDDEN_DOOR
    assert game_map.get_edge(7, 2, Direction.LEFT) == EdgeType.HIDDEN_DOOR
    assert game_map.get_edge(4, 2, Direction.TOP) is None


def test_vertical_secret_corridor_going_up():
    game_map = DungeonMap(5, 10, TileType.WALL)
    game_map.set_tile(2, 7, TileType.ROOM_ORIGIN)
    game_map.fill_rect(0, 3, 5, 1, TileType.CORRIDOR)

    created = create_secret_corridors(game_map, Point(2, 7), [Point(2, 3)])

    assert sorted(created) == [Point(2, 4), Point(2, 5), Point(2, 6)]
    assert game_map.get_edge(2, 4, Direction.TOP) == EdgeType.HIDDEN_DOOR
    assert game_map.get_edge(2, 6, Direction.BOTTOM) == EdgeType.HIDDEN_DOOR
    # Neighbouring corridor tiles on the long axis never get doors
    assert game_map.get_edge(1, 3, Direction.RIGHT) is None
    assert game_map.get_edge(2, 5, Direction.LEFT) is None


def test_generate_secret_corridors_from_room_origins():
    game_map = DungeonMap(17, 17, TileType.WALL)
    game_map.set_tile(8, 8, TileType.ROOM_ORIGIN)
    game_map.set_tile(8, 0, TileType.CORRIDOR)

    carved = generate_secret_corridors_from_room_origins(game_map, 8)

    # North target is already carved; each other strip stops short of its target
    assert carved == 3 * 7
    assert game_map.get_tile(8, 4) == TileType.WALL
    assert game_map.get_tile(15, 8) == TileType.SECRET_CORRIDOR
    assert game_map.get_tile(16, 8) == TileType.WALL
    assert game_map.get_tile(1, 8) == TileType.SECRET_CORRIDOR
    assert game_map.get_tile(8, 15) == TileType.SECRET_CORRIDOR
    assert game_map.get_tile(8, 8) == TileType.ROOM_ORIGIN


class _FixedDrawRNG(GameRNG):
    def __init__(self, value: float) -> None:
        super().__init__(seed=0)
        self.value = value

    def get_float(self, a: float = 0.0, b: float = 1.0) -> float:
        return a + (b - a) * self.value


def test_construct_corridor_order_follows_coin_flip():
    heads = DungeonMap(12, 12, TileType.WALL)
    construct_corridor(heads, Point(2, 2), Point(8, 8), 1, _FixedDrawRNG(0.0))
    assert heads.get_tile(8, 2) == TileType.CORRIDOR
    assert heads.get_tile(2, 8) == TileType.WALL

    tails = DungeonMap(12, 12, TileType.WALL)
    construct_corridor(tails, Point(2, 2), Point(8, 8), 1, _FixedDrawRNG(0.9))
    assert tails.get_tile(2, 8) == TileType.CORRIDOR
    assert tails.get_tile(8, 2) == TileType.WALL
