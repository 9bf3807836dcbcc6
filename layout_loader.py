"""Layout asset loading for Neuron Graph.

Loads layout assets (one layout.json per variant) and groups them into the
per-tier pools the difficulty resolver draws from.
"""

import json
import logging
from pathlib import Path
from typing import Iterable

from graph_layout import GraphLayout, LayoutHandle, LayoutValidationError

logger = logging.getLogger(__name__)

LAYOUT_VERSION = 1


def layout_from_dict(data: dict, source: str = "<memory>") -> GraphLayout:
    """Build a layout from its JSON representation.

    Args:
        data: Dictionary containing:
            - version: format version
            - name, variant_id: identification
            - node_count: optional expected node count
            - connections_layer: container name for drawn connections or null
            - nodes: list of {"id": int, "position": [x, y], "neighbors": [...]}
        source: Where the data came from, for error messages.

    Returns:
        GraphLayout. Structural problems (dangling references, isolated
        nodes) are kept as authored for validate_layout to report.

    Raises:
        LayoutValidationError: If the document itself is unreadable, or
            only some nodes have a position.
    """
    if not isinstance(data, dict):
        raise LayoutValidationError(f"{source}: layout must be a JSON object")

    version = data.get("version", 0)
    if version != LAYOUT_VERSION:
        raise LayoutValidationError(f"{source}: unsupported layout version {version}")

    try:
        nodes = sorted(data["nodes"], key=lambda n: n["id"])
        node_ids = tuple(int(n["id"]) for n in nodes)
        neighbors = tuple(
            tuple(None if ref is None else int(ref) for ref in n.get("neighbors", []))
            for n in nodes
        )
        placed = [n for n in nodes if "position" in n]
        positions = tuple((float(n["position"][0]), float(n["position"][1])) for n in placed)
    except (KeyError, TypeError, ValueError, IndexError) as e:
        raise LayoutValidationError(f"{source}: malformed layout data ({e})") from e

    # Positions are matched to nodes by index, so they are all-or-nothing
    if placed and len(placed) != len(nodes):
        raise LayoutValidationError(
            f"{source}: {len(placed)} of {len(nodes)} nodes have a position; give all or none"
        )

    return GraphLayout(
        name=data.get("name", Path(source).stem),
        node_ids=node_ids,
        neighbors=neighbors,
        positions=positions,
        variant_id=int(data.get("variant_id", 1)),
        expected_node_count=data.get("node_count"),
        connections_layer=data.get("connections_layer"),
    )


def layout_to_dict(layout: GraphLayout) -> dict:
    """Inverse of layout_from_dict."""
    nodes = []
    for index, node_id in enumerate(layout.node_ids):
        entry: dict = {"id": node_id, "neighbors": list(layout.neighbors[index])}
        if index < len(layout.positions):
            entry["position"] = [round(c, 4) for c in layout.positions[index]]
        nodes.append(entry)

    return {
        "version": LAYOUT_VERSION,
        "name": layout.name,
        "variant_id": layout.variant_id,
        "node_count": layout.node_count,
        "connections_layer": layout.connections_layer,
        "nodes": nodes,
    }


def load_layout_json(path: Path) -> GraphLayout:
    """Load a layout from a JSON file.

    Args:
        path: Path to the layout file.

    Returns:
        The authored layout.

    Raises:
        LayoutValidationError: If the file is missing, not JSON or malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise LayoutValidationError(f"{path}: cannot read layout ({e})") from e

    return layout_from_dict(data, source=str(path))


def save_layout_json(layout: GraphLayout, path: Path) -> None:
    """Write a layout to a JSON file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(layout_to_dict(layout), f, indent=2)


class LayoutStore:
    """Per-tier pools of layout handles.

    The store only references layouts; puzzles acquire and release them
    through the handles.
    """

    def __init__(self, pools: dict[str, Iterable[LayoutHandle]] | None = None) -> None:
        """Initialize store.

        Args:
            pools: Tier name -> layout handles.
        """
        self._pools: dict[str, tuple[LayoutHandle, ...]] = {
            tier: tuple(handles) for tier, handles in (pools or {}).items()
        }

    @classmethod
    def from_layouts(cls, pools: dict[str, Iterable[GraphLayout]], resident: bool = False) -> "LayoutStore":
        """Wrap plain layouts in handles."""
        return cls({
            tier: [LayoutHandle(layout, resident=resident) for layout in layouts]
            for tier, layouts in pools.items()
        })

    @classmethod
    def default(cls) -> "LayoutStore":
        """Store backed by the built-in layout library."""
        from layout_library import DEFAULT_LAYOUT_POOLS

        return cls.from_layouts(DEFAULT_LAYOUT_POOLS, resident=True)

    @classmethod
    def from_directory(cls, root: Path) -> "LayoutStore":
        """Load every <root>/<tier>/*.json file as a template handle.

        Unreadable files are logged and skipped so that one bad asset does
        not take down its whole tier; the validator still rejects layouts
        that loaded but are structurally broken.

        Args:
            root: Directory with one subdirectory per tier.

        Returns:
            LayoutStore with pools ordered by file name.
        """
        pools: dict[str, list[LayoutHandle]] = {}
        if not root.is_dir():
            logger.error("Layout directory not found: %s", root)
            return cls()

        for tier_dir in sorted(p for p in root.iterdir() if p.is_dir()):
            handles: list[LayoutHandle] = []
            for path in sorted(tier_dir.glob("*.json")):
                try:
                    layout = load_layout_json(path)
                except LayoutValidationError as e:
                    logger.error("Skipping layout asset: %s", e)
                    continue
                handles.append(LayoutHandle(layout, resident=False, source=str(path)))
            pools[tier_dir.name] = handles
            logger.info("Loaded %d layouts for tier %s", len(handles), tier_dir.name)

        return cls(pools)

    def pool(self, tier: str) -> tuple[LayoutHandle, ...]:
        """Layout handles for a tier; empty if the tier was never authored."""
        return self._pools.get(tier, ())

    def tiers(self) -> list[str]:
        return list(self._pools.keys())

    def export(self, root: Path) -> list[Path]:
        """Write every layout in the store to <root>/<tier>/<name>.json.

        Returns:
            Paths written.
        """
        written: list[Path] = []
        for tier, handles in self._pools.items():
            for index, handle in enumerate(handles, start=1):
                path = root / tier / f"{index:02d}_{handle.name}.json"
                save_layout_json(handle.layout, path)
                written.append(path)
        return written
