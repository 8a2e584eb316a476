# mapgen/world/clusters.py
from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog

from game_rng import GameRNG, resolve_rng
from mapgen.constants import TRAVERSABLE_TILE_TYPES
from mapgen.world.corridors import construct_corridor
from mapgen.world.dungeon_map import DungeonMap, Point, distance

log = structlog.get_logger()

Cluster = List[Point]


def _traversable_mask(game_map: DungeonMap) -> np.ndarray:
    return np.isin(game_map.tiles, [int(t) for t in TRAVERSABLE_TILE_TYPES])


def find_isolated_clusters(game_map: DungeonMap) -> List[Cluster]:
    """
    Splits corridor, room and room-origin tiles into 4-connected components.

    Discovery is row-major, so clusters come back ordered by their first
    tile in scan order. Uses an explicit stack.
    """
    traversable = _traversable_mask(game_map)
    visited = np.zeros_like(traversable, dtype=bool)
    clusters: List[Cluster] = []

    for start_y, start_x in np.argwhere(traversable):
        if visited[start_y, start_x]:
            continue
        cluster: Cluster = []
        stack = [(int(start_x), int(start_y))]
        visited[start_y, start_x] = True
        while stack:
            x, y = stack.pop()
            cluster.append(Point(x, y))
            for neighbor in game_map.neighbors4(x, y):
                if visited[neighbor.y, neighbor.x] or not traversable[neighbor.y, neighbor.x]:
                    continue
                visited[neighbor.y, neighbor.x] = True
                stack.append((neighbor.x, neighbor.y))
        clusters.append(cluster)

    log.info("Clusters found", clusters=len(clusters))
    return clusters


def intersections_in_cluster(
    game_map: DungeonMap, cluster: Sequence[Point], wall_step: int, corridor_step: int
) -> List[Point]:
    """
    Lattice points of ``cluster`` usable as corridor endpoints.

    The lattice starts at ``wall_step + corridor_step // 2`` on both axes.
    A cluster that touches no lattice point (hand-made maps, stray
    fragments) offers all of its tiles instead so it can still be joined.
    """
    members = set(cluster)
    traversable = _traversable_mask(game_map)
    offset = corridor_step // 2
    first = wall_step + offset
    points = [
        Point(x, y)
        for y in range(first, game_map.height - offset, wall_step)
        for x in range(first, game_map.width - offset, wall_step)
        if Point(x, y) in members and traversable[y, x]
    ]
    if points:
        return points
    return [p for p in cluster if traversable[p.y, p.x]]


def _nearest_pair(
    current: Sequence[Point], candidates: Sequence[Sequence[Point]]
) -> Optional[Tuple[int, Point, Point]]:
    best: Optional[Tuple[int, Point, Point]] = None
    min_distance = float("inf")
    for index in range(1, len(candidates)):
        for start in current:
            for end in candidates[index]:
                d = distance(start, end)
                if d < min_distance:
                    min_distance = d
                    best = (index, start, end)
    return best


def connect_clusters(
    game_map: DungeonMap,
    clusters: Sequence[Cluster],
    wall_step: int,
    corridor_step: int,
    rng: Optional[GameRNG] = None,
) -> int:
    """
    Joins all clusters into one by carving L-shaped corridors.

    Greedy: the first cluster in the list is linked to whichever other
    cluster holds the closest endpoint, then dropped from the list. Every
    round removes one cluster, so ``len(clusters) - 1`` corridors are
    carved. Returns that count.
    """
    rng = resolve_rng(rng)
    candidates = [
        intersections_in_cluster(game_map, cluster, wall_step, corridor_step)
        for cluster in clusters
    ]
    carved = 0
    while len(candidates) > 1:
        pair = _nearest_pair(candidates[0], candidates)
        if pair is None:
            log.error("Cluster has no connection endpoints", remaining=len(candidates))
            raise ValueError("Cannot connect a cluster without traversable tiles.")
        nearest_index, start, end = pair
        construct_corridor(game_map, start, end, corridor_step, rng)
        carved += 1
        log.debug(
            "Clusters joined",
            start=tuple(start),
            end=tuple(end),
            nearest_index=nearest_index,
            remaining=len(candidates) - 1,
        )
        candidates.pop(0)

    log.info("Clusters connected", corridors=carved)
    return carved
