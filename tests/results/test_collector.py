from __future__ import annotations

import logging

from nestspec.results.collector import ResultCollector
from nestspec.spec_run import SpecRun


class _RecordingVisitor:
    def __init__(self) -> None:
        self.specs: list[tuple[int, str, list[str]]] = []
        self.end: tuple[int, int] | None = None

    def visit_spec(self, depth: int, name: str, errors: list[str]) -> None:
        self.specs.append((depth, name, errors))

    def visit_end(self, total_specs: int, total_failures: int) -> None:
        self.end = (total_specs, total_failures)


def test_empty_collector_visits_only_end(results: ResultCollector) -> None:
    visitor = _RecordingVisitor()
    results.visit(visitor)
    assert visitor.specs == []
    assert visitor.end == (0, 0)
    assert len(results) == 0
    assert results.roots() == []


def test_roots_sorted_by_name_regardless_of_update_order(
    results: ResultCollector,
) -> None:
    for name in ("RootSpec2", "RootSpec1", "RootSpec3"):
        results.update(SpecRun(name))

    assert [r.name for r in results.roots()] == ["RootSpec1", "RootSpec2", "RootSpec3"]
    assert all(r.parent is None for r in results.roots())


def test_children_sorted_by_declaration_order(results: ResultCollector) -> None:
    root = SpecRun("RootSpec")
    one = SpecRun("one", parent=root)
    two = SpecRun("two", parent=root)
    three = SpecRun("three", parent=root)

    for run in (root, one, root, three, root, two):
        results.update(run)

    canonical_root = results.get(("RootSpec",))
    assert canonical_root is not None
    assert [c.name for c in canonical_root.children] == ["one", "two", "three"]
    # First-seen order differs from declaration order
    assert [c.first_seen for c in canonical_root.children] == [1, 3, 2]


def test_one_canonical_node_per_path(results: ResultCollector) -> None:
    for _ in range(3):
        root = SpecRun("RootSpec")
        results.update(root)
        results.update(SpecRun("Child A", parent=root))

    assert len(results) == 2
    assert results.total_specs == 2
    canonical_root = results.get(("RootSpec",))
    assert canonical_root is not None
    assert len(canonical_root.children) == 1


def test_descendant_before_ancestor_creates_ancestors(
    results: ResultCollector,
) -> None:
    root = SpecRun("RootSpec")
    child = SpecRun("Child A", parent=root)
    grandchild = SpecRun("Child AA", parent=child)

    results.update(grandchild)
    assert results.total_specs == 3
    node = results.get(("RootSpec", 0))
    assert node is not None and node.name == "Child A"

    results.update(child)
    results.update(root)
    assert results.total_specs == 3

    leaf = results.get(("RootSpec", 0, 0))
    assert leaf is not None
    assert leaf.parent is node
    assert node.parent is results.get(("RootSpec",))
    assert leaf.depth == 2


def test_ancestors_get_lower_first_seen_than_descendant(
    results: ResultCollector,
) -> None:
    root = SpecRun("RootSpec")
    results.update(SpecRun("Child A", parent=root))

    canonical_root = results.get(("RootSpec",))
    child = results.get(("RootSpec", 0))
    assert canonical_root is not None and child is not None
    assert canonical_root.first_seen < child.first_seen


def test_explicit_path_without_parent_creates_placeholder(
    results: ResultCollector,
) -> None:
    results.update(SpecRun("Child AA", path=("RootSpec", 0, 0)))

    root = results.get(("RootSpec",))
    middle = results.get(("RootSpec", 0))
    assert root is not None and root.name == "RootSpec" and root.named
    assert middle is not None and middle.name == "" and not middle.named

    results.update(SpecRun("Child A", path=("RootSpec", 0)))
    assert middle.name == "Child A"
    assert middle.named


def test_first_name_wins_and_conflict_is_logged(
    results: ResultCollector, caplog
) -> None:
    caplog.set_level(logging.WARNING, logger="nestspec")
    results.update(SpecRun("first", path=("RootSpec", 0)))
    results.update(SpecRun("second", path=("RootSpec", 0)))

    node = results.get(("RootSpec", 0))
    assert node is not None and node.name == "first"
    assert any(
        r.levelno == logging.WARNING and "second" in r.getMessage()
        for r in caplog.records
    )


def test_errors_merged_across_updates(results: ResultCollector) -> None:
    results.update(SpecRun("RootSpec", errors=["x", "y"]))
    results.update(SpecRun("RootSpec", errors=["x", "y"]))
    node = results.get(("RootSpec",))
    assert node is not None
    assert node.errors == ["x", "y"]

    results.update(SpecRun("RootSpec", errors=["z"]))
    assert node.errors == ["x", "y", "z"]
    assert node.failed
    assert results.total_failures == 1


def test_visit_is_preorder_with_depths_and_counts(results: ResultCollector) -> None:
    root = SpecRun("RootSpec")
    a = SpecRun("Child A", parent=root)
    b = SpecRun("Child B", parent=root, errors=["boom"])
    aa = SpecRun("Child AA", parent=a)
    for run in (b, aa, a, root):
        results.update(run)
    results.update(SpecRun("Another", errors=["bad"]))

    visitor = _RecordingVisitor()
    results.visit(visitor)

    assert visitor.specs == [
        (0, "Another", ["bad"]),
        (0, "RootSpec", []),
        (1, "Child A", []),
        (2, "Child AA", []),
        (1, "Child B", ["boom"]),
    ]
    assert visitor.end == (5, 2)
    assert [n.name for n in results.walk()] == [s[1] for s in visitor.specs]


def test_visit_passes_copies_of_errors(results: ResultCollector) -> None:
    results.update(SpecRun("RootSpec", errors=["x"]))
    visitor = _RecordingVisitor()
    results.visit(visitor)
    visitor.specs[0][2].append("mutated")

    node = results.get(("RootSpec",))
    assert node is not None and node.errors == ["x"]


def test_collector_keeps_no_reference_to_runs(results: ResultCollector) -> None:
    run = SpecRun("RootSpec", errors=["x"])
    results.update(run)
    run.add_error("after update")

    node = results.get(("RootSpec",))
    assert node is not None and node.errors == ["x"]


def test_to_dict_shape_follows_report_order(results: ResultCollector) -> None:
    root = SpecRun("RootSpec")
    results.update(SpecRun("one", parent=root, path=("RootSpec", 1)))
    results.update(SpecRun("zero", parent=root, path=("RootSpec", 0), errors=["e"]))

    doc = results.to_dict()
    assert doc["summary"] == {"specs": 3, "failures": 1}
    (spec,) = doc["specs"]
    assert spec["name"] == "RootSpec"
    assert spec["path"] == ["RootSpec"]
    assert [c["name"] for c in spec["children"]] == ["zero", "one"]
    assert spec["children"][0]["errors"] == ["e"]
    assert spec["children"][1]["path"] == ["RootSpec", 1]
