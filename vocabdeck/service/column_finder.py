from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Iterable, List, MutableMapping, Optional, Sequence

from vocabdeck.models.columns import COLUMN_HIERARCHY, ColumnGroup, ColumnLeaf, ColumnNode


@dataclass(frozen=True)
class NodeView:
    """How one finder node should be shown at one level."""
    id: str
    label: str
    level: int
    is_group: bool
    column_id: Optional[str]
    available: bool
    visible: Optional[bool]
    selected: bool
    multi_select: bool = False
    options: List[Any] = field(default_factory=list)


def _find(items: Sequence[ColumnNode], node_id: str) -> Optional[ColumnNode]:
    for node in items:
        if node.id == node_id:
            return node
    return None


class ColumnFinder:
    """Drill-down navigator over the column hierarchy.

    ``visibility`` is the table's live column visibility map; its keys are the
    columns that exist. Nodes bound to any other column are shown as
    unavailable and get no toggle.
    """

    def __init__(
        self,
        visibility: MutableMapping[str, bool],
        hierarchy: Iterable[ColumnNode] = COLUMN_HIERARCHY,
        options_for: Optional[Callable[[str], List[Any]]] = None,
    ):
        self.visibility = visibility
        self.hierarchy: tuple[ColumnNode, ...] = tuple(hierarchy)
        self.options_for = options_for
        self.path: List[str] = []

    def levels(self) -> List[List[ColumnNode]]:
        out: List[List[ColumnNode]] = [list(self.hierarchy)]
        items: Sequence[ColumnNode] = self.hierarchy
        for node_id in self.path:
            node = _find(items, node_id)
            if isinstance(node, ColumnGroup) and node.children:
                items = node.children
                out.append(list(items))
            else:
                break
        return out

    def select(self, level: int, node_id: str) -> bool:
        """Pick ``node_id`` at ``level``, dropping any deeper selection."""
        levels = self.levels()
        if level < 0 or level >= len(levels):
            return False
        if _find(levels[level], node_id) is None:
            return False
        self.path = self.path[:level] + [node_id]
        return True

    def select_path(self, path: Iterable[str]) -> bool:
        """Replace the whole path; stops at the first id that is not reachable."""
        self.path = []
        for level, node_id in enumerate(path):
            if not self.select(level, node_id):
                return False
        return True

    def is_available(self, node: ColumnNode) -> bool:
        return node.column_id is not None and node.column_id in self.visibility

    def toggle_visibility(self, column_id: str, visible: bool) -> bool:
        if column_id not in self.visibility:
            return False
        self.visibility[column_id] = bool(visible)
        return True

    def _view(self, node: ColumnNode, level: int) -> NodeView:
        available = self.is_available(node)
        multi_select = isinstance(node, ColumnLeaf) and node.multi_select
        options: List[Any] = []
        if available and multi_select and self.options_for is not None:
            options = self.options_for(node.column_id)
        return NodeView(
            id=node.id,
            label=node.label,
            level=level,
            is_group=isinstance(node, ColumnGroup),
            column_id=node.column_id,
            available=available,
            visible=self.visibility[node.column_id] if available else None,
            selected=level < len(self.path) and self.path[level] == node.id,
            multi_select=multi_select,
            options=options,
        )

    def describe(self) -> List[List[dict[str, Any]]]:
        return [
            [asdict(self._view(node, level)) for node in items]
            for level, items in enumerate(self.levels())
        ]
