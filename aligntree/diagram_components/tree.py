import itertools
from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, Iterator, List, Mapping, Optional, Tuple, TypeVar

from ..errors import TreeStructureError

T = TypeVar("T")

_ids = itertools.count(1)


def _next_id() -> int:
    return next(_ids)


class TreeNode(Generic[T]):
    """A value with an ordered list of child trees.

    Every node receives an integer id from a process-wide counter when it is
    created, so no two nodes alive in the process share an id. A node can be
    attached to one parent only, which rules out shared subtrees and cycles.
    """

    __slots__ = ("_value", "_children", "_id", "_attached")

    def __init__(self, value: T, children: Iterable["TreeNode[T]"] = ()) -> None:
        self._value = value
        self._id = _next_id()
        self._attached = False
        self._children: List["TreeNode[T]"] = []
        self._attach_all(list(children))

    @staticmethod
    def _check_child(child: "TreeNode[T]") -> None:
        if not isinstance(child, TreeNode):
            raise TreeStructureError(
                f"Children must be TreeNode instances, got {type(child).__name__}."
            )
        if child._attached:
            raise TreeStructureError(
                f"Node {child._id} ({child._value!r}) already belongs to another parent."
            )

    def _attach_all(self, children: List["TreeNode[T]"]) -> None:
        # nothing is marked attached until every child has passed the checks
        seen = set()
        for child in children:
            self._check_child(child)
            if child._id in seen:
                raise TreeStructureError(f"Node {child._id} ({child._value!r}) is listed twice.")
            seen.add(child._id)
        for child in children:
            child._attached = True
            self._children.append(child)

    @property
    def value(self) -> T:
        return self._value

    @property
    def children(self) -> Tuple["TreeNode[T]", ...]:
        return tuple(self._children)

    @property
    def id(self) -> int:
        return self._id

    @property
    def is_leaf(self) -> bool:
        return not self._children

    def add(self, value: T, children: Iterable["TreeNode[T]"] = ()) -> "TreeNode[T]":
        child = TreeNode(value, children)
        self._attach_all([child])
        return child

    def walk(self) -> Iterator["TreeNode[T]"]:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())

    def __repr__(self) -> str:
        return f"TreeNode({self._value!r}, id={self._id}, children={len(self._children)})"

    @classmethod
    def from_dict(cls, payload: Any) -> "TreeNode[Any]":
        if not isinstance(payload, Mapping):
            return cls(payload)
        if "value" not in payload:
            raise TreeStructureError("Tree payload must include 'value'.")
        children_payload = payload.get("children") or []
        if isinstance(children_payload, (str, bytes, Mapping)) or not isinstance(children_payload, Iterable):
            raise TreeStructureError("Tree payload 'children' must be a list.")
        children = [cls.from_dict(child) for child in children_payload]
        return cls(payload["value"], children)


@dataclass(frozen=True)
class ArenaEntry:
    index: int
    node: TreeNode
    parent: Optional[int]
    children: Tuple[int, ...]
    depth: int


class TreeArena:
    """Flat pre-order view of a tree with parent and child links as indices."""

    def __init__(self, entries: List[ArenaEntry]) -> None:
        self.entries = entries
        self._by_id: Dict[int, int] = {entry.node.id: entry.index for entry in entries}

    @classmethod
    def from_tree(cls, root: TreeNode) -> "TreeArena":
        entries: List[ArenaEntry] = []

        def visit(node: TreeNode, parent: Optional[int], depth: int) -> int:
            index = len(entries)
            entries.append(ArenaEntry(index, node, parent, (), depth))
            child_indices = tuple(visit(child, index, depth + 1) for child in node.children)
            entries[index] = ArenaEntry(index, node, parent, child_indices, depth)
            return index

        visit(root, None, 0)
        return cls(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> ArenaEntry:
        return self.entries[index]

    def index_of(self, node_id: int) -> int:
        return self._by_id[node_id]

    def edges(self) -> List[Tuple[int, int]]:
        return [(entry.parent, entry.index) for entry in self.entries if entry.parent is not None]

    def descendants(self, index: int) -> List[int]:
        result: List[int] = []
        pending = list(self.entries[index].children)
        while pending:
            current = pending.pop(0)
            result.append(current)
            pending.extend(self.entries[current].children)
        return result

    def depth(self) -> int:
        return max(entry.depth for entry in self.entries) + 1
