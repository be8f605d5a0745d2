"""Canonical result tree folded from repeated spec executions.

The driver executes a spec declaration once per leaf path and passes every
`SpecRun` it visits to `ResultCollector.update`. Runs with equal paths denote
the same logical spec; the collector keeps exactly one `SpecResult` per
distinct path and merges the failure messages of all runs into it.

Sibling order is not stored. It is computed when the tree is traversed:

- roots are ordered by name;
- children are ordered by declaration order, i.e. by their sibling index.

The collector performs no locking and never rejects input. Runs whose paths
collide because the driver built siblings against distinct parent instances
corrupt the tree silently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple

from nestspec.logging import get_logger
from nestspec.results.merge import merge_errors
from nestspec.spec_run import SpecPath, SpecRun

logger = get_logger(__name__)


class ResultVisitor(Protocol):
    """Receiver of a pre-order walk over the canonical tree.

    `visit_spec` is called once per spec, parents before children, siblings in
    report order. `visit_end` is called once after the last spec.
    """

    def visit_spec(self, depth: int, name: str, errors: List[str]) -> None: ...

    def visit_end(self, total_specs: int, total_failures: int) -> None: ...


@dataclass(eq=False)
class SpecResult:
    """Accumulated outcome of one logical spec across all executions.

    Attributes:
        name: Name from the first run seen at this path.
        path: Identity key. Never reassigned after creation.
        first_seen: Collector-wide creation counter value.
        parent: Back reference to the enclosing spec; None for roots.
        errors: Unique failure messages in first-seen order.
        named: False for a placeholder created from a descendant's path
            before any run for this path arrived.
    """

    name: str
    path: SpecPath
    first_seen: int
    parent: Optional[SpecResult] = field(default=None, repr=False)
    errors: List[str] = field(default_factory=list)
    named: bool = True
    _children: Dict[SpecPath, SpecResult] = field(default_factory=dict, repr=False)

    @property
    def depth(self) -> int:
        """Nesting level; roots are at depth 0."""
        return len(self.path) - 1

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    @property
    def declaration_order(self) -> Tuple[Any, int]:
        """Sort key among siblings: sibling index, then first-seen order."""
        return (self.path[-1], self.first_seen)

    @property
    def children(self) -> List[SpecResult]:
        """Direct children in declaration order."""
        return sorted(self._children.values(), key=lambda c: c.declaration_order)

    def add_child(self, child: SpecResult) -> None:
        """Register `child` under this spec; repeated registration is a no-op."""
        if child.path not in self._children:
            self._children[child.path] = child
            child.parent = self

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-safe dict of this spec and its subtree in report order."""
        return {
            "name": self.name,
            "path": list(self.path),
            "errors": list(self.errors),
            "children": [child.to_dict() for child in self.children],
        }


class ResultCollector:
    """Owns the canonical tree and folds executed runs into it."""

    def __init__(self) -> None:
        self._nodes: Dict[SpecPath, SpecResult] = {}
        self._roots: Dict[SpecPath, SpecResult] = {}
        self._created = 0

    def update(self, run: SpecRun) -> None:
        """Fold one executed run into the canonical tree.

        Missing ancestors are created first, named after the run's parent
        chain where it covers them. The run's failure messages are merged
        into the canonical spec without duplicates.

        Args:
            run: The run to fold in. Only its path, name, parent chain and
                errors are read; the collector keeps no reference to it.
        """
        parent: Optional[SpecResult] = None
        for path, name in self._ancestors(run):
            ancestor = self._lookup_or_create(path, name)
            if parent is not None:
                parent.add_child(ancestor)
            parent = ancestor

        node = self._lookup_or_create(run.path, run.name)
        if parent is not None:
            parent.add_child(node)

        added = merge_errors(node.errors, run.errors)
        if added:
            logger.debug(
                "Merged %d new error(s) into %r at %s (%d total)",
                len(added),
                node.name,
                node.path,
                len(node.errors),
            )

    @staticmethod
    def _ancestors(run: SpecRun) -> List[Tuple[SpecPath, Optional[str]]]:
        """Return (path, name) pairs for the run's ancestors, root first.

        Names come from the run's parent chain. A root's path holds its name,
        so only inner ancestors the chain does not cover get None.
        """
        names: Dict[SpecPath, str] = {}
        ancestor = run.parent
        while ancestor is not None:
            names.setdefault(ancestor.path, ancestor.name)
            ancestor = ancestor.parent

        lineage: List[Tuple[SpecPath, Optional[str]]] = []
        for end in range(1, len(run.path)):
            path = run.path[:end]
            name = names.get(path)
            if name is None and end == 1:
                name = str(path[0])
            lineage.append((path, name))
        return lineage

    def _lookup_or_create(self, path: SpecPath, name: Optional[str]) -> SpecResult:
        node = self._nodes.get(path)
        if node is None:
            node = SpecResult(
                name=name if name is not None else "",
                path=path,
                first_seen=self._created,
                named=name is not None,
            )
            self._created += 1
            self._nodes[path] = node
            if len(path) == 1:
                self._roots[path] = node
            logger.debug("Created spec %r at %s", node.name, path)
            return node

        if name is None:
            return node
        if not node.named:
            node.name = name
            node.named = True
        elif node.name != name:
            logger.warning(
                "Spec at %s reported as %r but was first seen as %r; keeping %r",
                path,
                name,
                node.name,
                node.name,
            )
        return node

    def roots(self) -> List[SpecResult]:
        """Root specs ordered by name."""
        return sorted(self._roots.values(), key=lambda r: (r.name, r.first_seen))

    def get(self, path: SpecPath) -> Optional[SpecResult]:
        """Return the canonical spec at `path`, if it was ever observed."""
        return self._nodes.get(tuple(path))

    def walk(self) -> Iterator[SpecResult]:
        """Yield every spec in report order (pre-order)."""
        stack = list(reversed(self.roots()))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def visit(self, visitor: ResultVisitor) -> None:
        """Walk the tree in report order, then report the totals.

        Args:
            visitor: Receives one `visit_spec` call per spec and a final
                `visit_end(total_specs, total_failures)`.
        """
        total_specs = 0
        total_failures = 0
        for node in self.walk():
            total_specs += 1
            if node.failed:
                total_failures += 1
            visitor.visit_spec(node.depth, node.name, list(node.errors))
        visitor.visit_end(total_specs, total_failures)

    @property
    def total_specs(self) -> int:
        return len(self._nodes)

    @property
    def total_failures(self) -> int:
        return sum(1 for node in self._nodes.values() if node.failed)

    def __len__(self) -> int:
        return len(self._nodes)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-safe export of the tree and its totals.

        Shape: ``{"specs": [...], "summary": {"specs": n, "failures": f}}``,
        with specs and their children in report order.
        """
        return {
            "specs": [root.to_dict() for root in self.roots()],
            "summary": {
                "specs": self.total_specs,
                "failures": self.total_failures,
            },
        }
