# mapgen/world/borders.py
import structlog

from mapgen.constants import TileType
from mapgen.world.dungeon_map import DungeonMap

log = structlog.get_logger()


def fill_map_borders(
    game_map: DungeonMap, corridor_step: int, tile_type: TileType = TileType.WALL
) -> DungeonMap:
    """Sets a ``corridor_step`` wide ring around the map to ``tile_type``."""
    if corridor_step <= 0:
        return game_map
    band = min(corridor_step, game_map.width, game_map.height)
    value = int(tile_type)
    game_map.tiles[:band, :] = value
    game_map.tiles[-band:, :] = value
    game_map.tiles[:, :band] = value
    game_map.tiles[:, -band:] = value
    log.debug("Map borders filled", width=band, tile_type=tile_type.name)
    return game_map


def shrink_map(game_map: DungeonMap, corridor_step: int) -> DungeonMap:
    """Crops the padding margin added by the maze carver."""
    shrunk = game_map.shrink(corridor_step)
    log.info(
        "Map cropped",
        before=(game_map.width, game_map.height),
        after=(shrunk.width, shrunk.height),
    )
    return shrunk
