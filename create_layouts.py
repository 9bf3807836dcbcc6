"""Export the built-in layout library as JSON assets."""

import sys
from pathlib import Path

from layout_loader import LayoutStore


def create_layouts(output_dir: Path) -> list[Path]:
    """Write every built-in layout to output_dir/<tier>/NN_<name>.json.

    Args:
        output_dir: Root directory of the layout assets.

    Returns:
        Paths of the written files.
    """
    store = LayoutStore.default()
    paths = store.export(output_dir)

    print(f"Created {len(paths)} layouts in {output_dir}")
    for tier in store.tiers():
        names = ", ".join(handle.name for handle in store.pool(tier))
        print(f"  {tier}: {names}")
    return paths


if __name__ == "__main__":
    output = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent / "layouts"
    create_layouts(output)
