"""
Ball colors.

MASTER_PALETTE lists the colors in the order a level unlocks them: a level
with color_count=4 plays with the first four. Named palettes (--palette)
swap in different colors for testing readability.
"""

from typing import Iterator, List, Optional

from models import RGB

MASTER_PALETTE: List[RGB] = [
    (255, 99, 71),    # tomato
    (144, 238, 144),  # light green
    (173, 216, 230),  # light blue
    (255, 215, 0),    # gold
    (218, 112, 214),  # orchid
    (255, 165, 0),    # orange
]

MIN_COLOR_COUNT = 2
MAX_COLOR_COUNT = len(MASTER_PALETTE)
DEFAULT_COLOR_COUNT = 3

TEST_PALETTES = {
    'full': list(MASTER_PALETTE),
    'bw': [(40, 40, 40), (255, 255, 255)],
    'warm': [(255, 0, 0), (255, 128, 0), (255, 255, 0), (255, 200, 150)],
    'cool': [(0, 0, 255), (0, 255, 255), (128, 0, 255), (200, 200, 255)],
    'high_contrast': [
        (255, 0, 0), (0, 255, 0), (0, 0, 255),
        (255, 255, 0), (255, 0, 255), (0, 255, 255),
    ],
}


def get_palette_names() -> List[str]:
    return list(TEST_PALETTES)


def clamp_color_count(count: Optional[int]) -> int:
    """Requested color count forced into [MIN_COLOR_COUNT, MAX_COLOR_COUNT].

    None means the default of three colors.
    """
    if count is None:
        return DEFAULT_COLOR_COUNT
    return max(MIN_COLOR_COUNT, min(int(count), MAX_COLOR_COUNT))


class GamePalette:
    """The colors a game draws balls from.

    A known palette_name wins over explicit colors; with neither, the
    master palette is used. The colors list is always a private copy.
    """

    def __init__(self, colors: Optional[List[RGB]] = None, palette_name: Optional[str] = None):
        if palette_name in TEST_PALETTES:
            self.name, self.colors = palette_name, list(TEST_PALETTES[palette_name])
        elif colors:
            self.name, self.colors = 'custom', list(colors)
        else:
            self.name, self.colors = 'full', list(MASTER_PALETTE)

    def ball_colors(self, count: Optional[int] = None) -> List[RGB]:
        """Leading `count` colors, at least two and at most all of them."""
        if count is None:
            return list(self.colors)
        return self.colors[:max(MIN_COLOR_COUNT, min(int(count), len(self.colors)))]

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[RGB]:
        return iter(self.colors)
