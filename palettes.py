"""Node colour palettes for Neuron Graph.

Each palette lists node colours in colour-index order. Tiers use up to four
colours; palettes carry six so custom tier tables can go higher. Any prefix
stays easy to tell apart.
"""

import random
from collections import OrderedDict

PALETTES: OrderedDict[str, list[tuple[int, int, int]]] = OrderedDict()

PALETTES["Classic"] = [
    (51, 153, 255),    # Blue
    (255, 77, 77),     # Red
    (77, 255, 102),    # Green
    (255, 230, 51),    # Yellow
    (170, 100, 230),   # Purple
    (255, 150, 40),    # Orange
]

PALETTES["Pastel"] = [
    (167, 199, 231),   # Pastel periwinkle
    (255, 179, 186),   # Pastel pink
    (186, 255, 201),   # Pastel green
    (255, 255, 186),   # Pastel yellow
    (218, 186, 255),   # Pastel purple
    (255, 223, 186),   # Pastel orange
]

PALETTES["Jewel"] = [
    (15, 82, 186),     # Sapphire
    (224, 17, 95),     # Ruby
    (80, 200, 120),    # Emerald
    (255, 191, 0),     # Amber/Topaz
    (153, 102, 204),   # Amethyst
    (0, 168, 164),     # Teal jade
]

PALETTES["Neon"] = [
    (0, 255, 255),     # Cyan
    (255, 0, 255),     # Magenta
    (0, 255, 0),       # Green
    (255, 255, 0),     # Yellow
    (128, 0, 255),     # Violet
    (255, 128, 0),     # Neon orange
]

PALETTE_NAMES: list[str] = list(PALETTES.keys())


def get_palette(name: str, num_colors: int) -> list[tuple[int, int, int]]:
    """Return the first num_colors colors from the named palette.

    Args:
        name: Palette name, or "Random" to pick one at random.
        num_colors: How many colors to return.

    Returns:
        List of RGB tuples of length num_colors.

    Raises:
        ValueError: If name is not recognized, or the palette is too short.
    """
    if name == "Random":
        name = random.choice(PALETTE_NAMES)

    if name not in PALETTES:
        raise ValueError(f"Unknown palette: {name!r}. Available: {PALETTE_NAMES}")

    colors = PALETTES[name]
    if num_colors > len(colors):
        raise ValueError(f"Palette {name!r} has {len(colors)} colors, {num_colors} requested")
    return colors[:num_colors]
