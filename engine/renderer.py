# engine/renderer.py
"""
Rasterizes a DungeonMap to a PIL Image.

Tile colours are expanded with a numpy lookup table, edges are painted as
thin bars on the inner side of their cell and optional glyphs are drawn
centred on top.
"""
from pathlib import Path
from typing import Mapping, Optional, Tuple, Union

import numpy as np
import structlog
from PIL import Image, ImageDraw, ImageFont

from mapgen.constants import Direction, EdgeType, NO_EDGE, TileType
from mapgen.world.dungeon_map import DungeonMap

log = structlog.get_logger()

TILE_SIZE = 16
BORDER_WIDTH = 2
TEXT_COLOR = (0, 0, 0)

Color = Tuple[int, int, int]


def _tile_lookup(
    game_map: DungeonMap, tile_colors: Mapping[TileType, Color]
) -> np.ndarray:
    lut = np.zeros((256, 3), dtype=np.uint8)
    lut[int(TileType.EMPTY)] = (255, 255, 255)
    for tile_type, color in tile_colors.items():
        lut[int(tile_type)] = color
    present = {int(v) for v in np.unique(game_map.tiles)}
    missing = sorted(
        TileType(v).name
        for v in present
        if v != int(TileType.EMPTY) and TileType(v) not in tile_colors
    )
    if missing:
        log.error("Tile colors missing", tile_types=missing)
        raise ValueError(f"No color for tile types: {', '.join(missing)}")
    return lut


def _check_edge_colors(
    game_map: DungeonMap, edge_colors: Mapping[EdgeType, Optional[Color]]
) -> None:
    present = {int(v) for v in np.unique(game_map.edges)} - {NO_EDGE}
    missing = sorted(
        EdgeType(v).name for v in present if EdgeType(v) not in edge_colors
    )
    if missing:
        log.error("Edge colors missing", edge_types=missing)
        raise ValueError(f"No color for edge types: {', '.join(missing)}")


def _edge_bar(
    direction: Direction, px: int, py: int, tile_size: int, border_width: int
) -> Tuple[slice, slice]:
    """Pixel slices (rows, cols) of the bar for one cell side."""
    if direction == Direction.TOP:
        return slice(py, py + border_width), slice(px, px + tile_size)
    if direction == Direction.RIGHT:
        return (
            slice(py, py + tile_size),
            slice(px + tile_size - border_width, px + tile_size),
        )
    if direction == Direction.BOTTOM:
        return (
            slice(py + tile_size - border_width, py + tile_size),
            slice(px, px + tile_size),
        )
    return slice(py, py + tile_size), slice(px, px + border_width)


def render_map_to_image(
    game_map: DungeonMap,
    tile_colors: Mapping[TileType, Color],
    edge_colors: Mapping[EdgeType, Optional[Color]],
    tile_text: Optional[Mapping[TileType, str]] = None,
    tile_size: int = TILE_SIZE,
    border_width: int = BORDER_WIDTH,
) -> Image.Image:
    """
    Render ``game_map`` at ``tile_size`` pixels per cell.

    Every tile and edge type present on the map needs an entry in the colour
    tables (EMPTY falls back to white). An edge mapped to ``None`` is not
    drawn.
    """
    if tile_size <= 0 or not 0 <= border_width <= tile_size:
        log.error(
            "Invalid render sizes", tile_size=tile_size, border_width=border_width
        )
        raise ValueError("tile_size must be positive and border_width within it.")

    lut = _tile_lookup(game_map, tile_colors)
    _check_edge_colors(game_map, edge_colors)

    cell_rgb = lut[game_map.tiles]
    pixels = np.repeat(np.repeat(cell_rgb, tile_size, axis=0), tile_size, axis=1)

    edges_drawn = 0
    if border_width > 0:
        for direction in Direction:
            layer = game_map.edges[:, :, int(direction)]
            for y, x in np.argwhere(layer != NO_EDGE):
                color = edge_colors[EdgeType(int(layer[y, x]))]
                if color is None:
                    continue
                rows, cols = _edge_bar(
                    direction, int(x) * tile_size, int(y) * tile_size, tile_size, border_width
                )
                pixels[rows, cols] = color
                edges_drawn += 1

    image = Image.fromarray(pixels)

    glyphs = 0
    if tile_text:
        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default()
        for tile_type, text in tile_text.items():
            if not text:
                continue
            left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
            offset_x = (tile_size - (right - left)) / 2 - left
            offset_y = (tile_size - (bottom - top)) / 2 - top
            for y, x in np.argwhere(game_map.tiles == int(tile_type)):
                draw.text(
                    (int(x) * tile_size + offset_x, int(y) * tile_size + offset_y),
                    text,
                    fill=TEXT_COLOR,
                    font=font,
                )
                glyphs += 1

    log.debug(
        "Map rendered",
        size=image.size,
        edges_drawn=edges_drawn,
        glyphs=glyphs,
    )
    return image


def save_image(image: Image.Image, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path)
    log.info("Image saved", path=str(path), size=image.size)
    return path


__all__ = ["render_map_to_image", "save_image", "TILE_SIZE", "BORDER_WIDTH"]
