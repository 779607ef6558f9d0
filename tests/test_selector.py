import pytest

from disktop.arena import Arena
from disktop.models import Node, TopFile
from disktop.selector import directory_path, top_k


def build(entries):
    """entries: list of (name, is_dir, size, parent_name); root is implicit."""
    arena = Arena()
    index = {"": arena.push(Node(name="root", path="/root", is_dir=True))}
    for name, is_dir, size, parent in entries:
        index[name] = arena.push(Node(name=name.rsplit("/", 1)[-1], path=name,
                                      is_dir=is_dir, size=size), index[parent])
    return arena, index


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

def test_single_file_in_root():
    arena, _ = build([("a.txt", False, 100, "")])
    assert top_k(arena, 5) == [("", "a.txt", 100)]


def test_largest_in_subdirectory():
    arena, _ = build([
        ("dir1", True, 0, ""),
        ("dir1/big.bin", False, 1000, "dir1"),
        ("small.txt", False, 10, ""),
    ])
    assert top_k(arena, 1) == [("dir1/", "big.bin", 1000)]


def test_empty_arena_has_no_files():
    arena, _ = build([])
    assert len(arena) == 1
    assert top_k(arena, 3) == []


def test_directories_only():
    arena, _ = build([("a", True, 0, ""), ("a/b", True, 0, "a")])
    assert top_k(arena, 10) == []


# ---------------------------------------------------------------------------
# Bounds and ordering
# ---------------------------------------------------------------------------

class TestRanking:

    def setup_method(self):
        self.arena, self.index = build([
            ("x", True, 0, ""),
            ("x/y", True, 0, "x"),
            ("f1", False, 50, ""),
            ("x/f2", False, 700, "x"),
            ("x/y/f3", False, 300, "x/y"),
            ("x/y/f4", False, 50, "x/y"),
            ("f5", False, 0, ""),
            ("x/f6", False, 900, "x"),
        ])

    def test_k_zero(self):
        assert top_k(self.arena, 0) == []

    def test_negative_k(self):
        with pytest.raises(ValueError):
            top_k(self.arena, -1)

    def test_descending(self):
        sizes = [t.size for t in top_k(self.arena, 4)]
        assert sizes == [900, 700, 300, 50]

    def test_k_larger_than_file_count_returns_every_file_once(self):
        res = top_k(self.arena, 100)
        assert len(res) == 6
        assert sorted(t.relpath for t in res) == sorted(
            ["f1", "x/f2", "x/y/f3", "x/y/f4", "f5", "x/f6"])

    def test_ties_keep_scan_order(self):
        res = top_k(self.arena, 6)
        assert [t.relpath for t in res[-3:]] == ["f1", "x/y/f4", "f5"]

    def test_tie_at_boundary_keeps_earlier(self):
        res = top_k(self.arena, 4)
        assert res[-1] == TopFile("", "f1", 50)

    def test_nested_directory_path(self):
        assert directory_path(self.arena, self.index["x/y/f3"]) == "x/y/"
        assert directory_path(self.arena, self.index["f1"]) == ""

    def test_result_is_named_tuple(self):
        top = top_k(self.arena, 1)[0]
        assert top.directory == "x/"
        assert top.name == "f6"
        assert top.size == 900
        assert top.relpath == "x/f6"
