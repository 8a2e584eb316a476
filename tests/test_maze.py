from collections import deque

import pytest

from game_rng import GameRNG
from mapgen.constants import TileType
from mapgen.world.dungeon_map import DungeonMap, Point
from mapgen.world.maze import generate_maze, maze_start, padded_dimensions


def _reachable(game_map: DungeonMap, start: Point, tile_type: TileType) -> set:
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for neighbor in game_map.neighbors_of_type(x, y, (tile_type,)):
            if neighbor not in seen:
                seen.add(neighbor)
                queue.append(neighbor)
    return seen


def test_padded_dimensions():
    assert padded_dimensions(20, 20, 4, 2) == (26, 26)
    assert padded_dimensions(100, 100, 8, 2) == (106, 106)
    assert maze_start(2) == Point(1, 1)


def test_maze_is_reproducible_for_a_seed():
    first = generate_maze(20, 20, 4, 2, GameRNG(seed=12345))
    second = generate_maze(20, 20, 4, 2, GameRNG(seed=12345))
    assert (first.width, first.height) == (26, 26)
    assert first == second
    assert not first.edges.any()


def test_maze_corridors_form_one_component():
    game_map = generate_maze(20, 20, 4, 2, GameRNG(seed=12345))
    corridors = set(game_map.tiles_of_type(TileType.CORRIDOR))
    start = maze_start(2)
    assert start in corridors
    assert _reachable(game_map, start, TileType.CORRIDOR) == corridors
    assert game_map.count(TileType.WALL) + len(corridors) == 26 * 26


def test_maze_visits_every_lattice_point():
    game_map = generate_maze(20, 20, 4, 2, GameRNG(seed=8))
    for y in range(1, 26, 4):
        for x in range(1, 26, 4):
            assert game_map.get_tile(x, y) == TileType.CORRIDOR


def test_different_seeds_differ():
    first = generate_maze(40, 40, 4, 2, GameRNG(seed=1))
    second = generate_maze(40, 40, 4, 2, GameRNG(seed=2))
    assert first != second


def test_invalid_steps_raise():
    with pytest.raises(ValueError):
        generate_maze(20, 20, 0, 2, GameRNG(seed=1))
    with pytest.raises(ValueError):
        generate_maze(20, 20, 4, 0, GameRNG(seed=1))


class _FirstChoiceRNG(GameRNG):
    """Every draw is 0.0, so each pick takes the first candidate."""

    def __init__(self) -> None:
        super().__init__(seed=0)

    def get_float(self, a: float = 0.0, b: float = 1.0) -> float:
        return a


def _as_rows(game_map: DungeonMap) -> list:
    return [
        "".join(
            "." if game_map.get_tile(x, y) == TileType.CORRIDOR else "#"
            for x in range(game_map.width)
        )
        for y in range(game_map.height)
    ]


# Lattice from (1, 1) every 4 cells; first-choice picks run north, east,
# south, west, so the carve is a serpentine through the columns.
FIRST_CHOICE_MAZE_26 = (
    [".........................."] * 2
    + ["########################.."] * 2
    + ["......##......##......##.."] * 2
    + ["..##..##..##..##..##..##.."] * 18
    + ["..##......##......##......"] * 2
)


def test_maze_layout_for_fixed_draws():
    game_map = generate_maze(20, 20, 4, 2, _FirstChoiceRNG())
    assert _as_rows(game_map) == FIRST_CHOICE_MAZE_26


@pytest.mark.parametrize(
    "wall_step, corridor_step", [(4, 2), (8, 2), (7, 3), (5, 1)]
)
def test_maze_is_a_spanning_tree(wall_step, corridor_step):
    for seed in range(5):
        game_map = generate_maze(20, 20, wall_step, corridor_step, GameRNG(seed=seed))
        start = maze_start(corridor_step)
        lattice_points = len(range(start.x, game_map.width, wall_step)) * len(
            range(start.y, game_map.height, wall_step)
        )
        # One block per lattice point plus one link per tree edge
        link_tiles = (wall_step - corridor_step) * corridor_step
        assert game_map.count(TileType.CORRIDOR) == (
            lattice_points * corridor_step**2 + (lattice_points - 1) * link_tiles
        )
