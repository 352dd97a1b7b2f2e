"""Tests for DirectoryNode: ordering, validation, hashing and canonical form."""

from __future__ import annotations

import copy
import dataclasses
import hashlib
import itertools
import pickle
from concurrent.futures import ThreadPoolExecutor

import pytest

from merkletrie_core.fsnoder import (
    DirectoryNode,
    DuplicateChildNameError,
    EmptyChildNameError,
    FileNode,
    NoderError,
    new_directory_node,
)
from merkletrie_core.interfaces import Noder


def _empty_dir_hash() -> bytes:
    return hashlib.blake2b(b"dir ", digest_size=8).digest()


# ── Construction & ordering ─────────────────────────────────────────


def test_children_sorted_regardless_of_input_order():
    """Children come back in ascending name order."""
    names = ["delta", "alpha", "charlie", "bravo"]
    node = new_directory_node("root", [FileNode(n, n) for n in names])
    assert [c.name for c in node.children()] == sorted(names)


def test_children_sorted_for_every_permutation():
    leaves = [FileNode("c", "3"), FileNode("a", "1"), FileNode("b", "2")]
    for perm in itertools.permutations(leaves):
        node = new_directory_node("d", list(perm))
        assert [c.name for c in node.children()] == ["a", "b", "c"]


def test_sorting_is_ordinal_not_case_insensitive():
    """Upper-case letters sort before lower-case ones (code point order)."""
    node = new_directory_node("", [FileNode("b", ""), FileNode("B", ""), FileNode("a", "")])
    assert [c.name for c in node.children()] == ["B", "a", "b"]


def test_sorting_follows_encoded_bytes():
    """Undecodable file-system bytes (0x80) sort before UTF-8 "é" (0xc3 0xa9)."""
    node = new_directory_node("", [FileNode("\u00e9", ""), FileNode("\udc80", "")])
    assert [c.name for c in node.children()] == ["\udc80", "\u00e9"]


def test_constructor_and_factory_agree(leaf_a, leaf_b):
    assert DirectoryNode("x", [leaf_b, leaf_a]) == new_directory_node("x", [leaf_a, leaf_b])


def test_caller_list_not_mutated(leaf_a, leaf_b):
    """The input sequence keeps its original order and is not retained."""
    given = [leaf_b, leaf_a]
    node = new_directory_node("root", given)
    assert given == [leaf_b, leaf_a]

    given.append(FileNode("c", "3"))
    assert node.child_count() == 2


def test_accepts_any_iterable(leaf_a, leaf_b):
    node = new_directory_node("root", (c for c in [leaf_b, leaf_a]))
    assert [c.name for c in node.children()] == ["a", "b"]


def test_root_may_have_empty_name(leaf_a):
    node = new_directory_node("", [leaf_a])
    assert node.name == ""
    assert str(node) == "(a<1>)"


def test_no_children_defaults_to_empty():
    node = DirectoryNode("empty")
    assert node.children() == []
    assert node.child_count() == 0


# ── Validation ──────────────────────────────────────────────────────


def test_rejects_empty_child_name():
    """A nameless directory child is refused."""
    with pytest.raises(EmptyChildNameError) as exc_info:
        new_directory_node("root", [FileNode("a", "1"), DirectoryNode("")])
    assert exc_info.value.parent == "root"


def test_rejects_duplicate_names():
    with pytest.raises(DuplicateChildNameError) as exc_info:
        new_directory_node("root", [FileNode("a", "1"), FileNode("a", "2")])
    assert exc_info.value.child == "a"
    assert exc_info.value.parent == "root"


def test_duplicates_detected_when_not_adjacent_in_input():
    children = [FileNode("a", "1"), FileNode("b", "2"), DirectoryNode("a")]
    with pytest.raises(DuplicateChildNameError):
        new_directory_node("root", children)


def test_empty_name_checked_before_duplicates():
    """Two nameless children report the empty name, not the duplicate."""
    with pytest.raises(EmptyChildNameError):
        new_directory_node("root", [DirectoryNode(""), DirectoryNode("")])


def test_construction_errors_are_value_errors():
    with pytest.raises(ValueError):
        new_directory_node("root", [FileNode("a", "1"), FileNode("a", "1")])
    assert issubclass(EmptyChildNameError, NoderError)
    assert issubclass(DuplicateChildNameError, NoderError)


# ── Immutability ────────────────────────────────────────────────────


def test_mutating_returned_children_has_no_effect(leaf_a, leaf_b):
    node = new_directory_node("root", [leaf_a, leaf_b])
    children = node.children()
    children.reverse()
    children.append(FileNode("z", "26"))
    children[0] = FileNode("q", "")

    assert [c.name for c in node.children()] == ["a", "b"]
    assert node.child_count() == 2


def test_children_returns_fresh_list(leaf_a):
    node = new_directory_node("root", [leaf_a])
    assert node.children() is not node.children()


def test_attributes_cannot_be_reassigned(leaf_a):
    node = new_directory_node("root", [leaf_a])
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.name = "other"


# ── Hash ────────────────────────────────────────────────────────────


def test_empty_directory_hash_is_digest_of_tag():
    node = new_directory_node("anything", [])
    assert node.hash() == _empty_dir_hash()
    assert len(node.hash()) == 8


def test_hash_algorithm_shape(leaf_a, leaf_b):
    """Tag, then name, space and child hash for each sorted child."""
    h = hashlib.blake2b(digest_size=8)
    h.update(b"dir ")
    for leaf in (leaf_a, leaf_b):
        h.update(leaf.name.encode())
        h.update(b" ")
        h.update(leaf.hash())
    node = new_directory_node("root", [leaf_b, leaf_a])
    assert node.hash() == h.digest()


def test_hash_independent_of_input_order():
    leaves = [FileNode("x", "1"), FileNode("y", "2"), DirectoryNode("z")]
    hashes = {
        new_directory_node("d", list(perm)).hash()
        for perm in itertools.permutations(leaves)
    }
    assert len(hashes) == 1


def test_hash_changes_with_child_name(leaf_a):
    base = new_directory_node("d", [leaf_a])
    renamed = new_directory_node("d", [FileNode("other", leaf_a.contents)])
    assert base.hash() != renamed.hash()


def test_hash_changes_with_child_hash():
    base = new_directory_node("d", [FileNode("a", "1")])
    changed = new_directory_node("d", [FileNode("a", "2")])
    assert base.hash() != changed.hash()


def test_hash_changes_when_child_added_or_removed(leaf_a, leaf_b):
    one = new_directory_node("d", [leaf_a])
    two = new_directory_node("d", [leaf_a, leaf_b])
    none = new_directory_node("d", [])
    assert len({one.hash(), two.hash(), none.hash()}) == 3


def test_hash_changes_with_grandchild():
    inner_1 = new_directory_node("inner", [FileNode("f", "1")])
    inner_2 = new_directory_node("inner", [FileNode("f", "2")])
    assert (
        new_directory_node("d", [inner_1]).hash()
        != new_directory_node("d", [inner_2]).hash()
    )


def test_hash_ignores_own_name(leaf_a, leaf_b):
    """Same children, different names: same hash, different string."""
    left = new_directory_node("left", [leaf_a, leaf_b])
    right = new_directory_node("right", [leaf_a, leaf_b])
    assert left.hash() == right.hash()
    assert str(left) != str(right)


def test_hash_is_memoized(leaf_a):
    node = new_directory_node("d", [leaf_a])
    assert node.hash() is node.hash()


def test_concurrent_first_hash_converges():
    """Racing first calls all observe one stored value."""
    leaves = [FileNode(f"f{i:03d}", str(i)) for i in range(200)]
    node = new_directory_node("d", leaves)
    expected = new_directory_node("d", leaves).hash()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: node.hash(), range(64)))

    assert all(r == expected for r in results)
    assert len({id(r) for r in results}) == 1


def test_hash_accepts_names_that_are_not_valid_utf8():
    escaped = new_directory_node("d", [FileNode("caf\udce9", "1")])
    lone = new_directory_node("d", [FileNode("\ud800", "1")])
    assert len(escaped.hash()) == 8
    assert len(lone.hash()) == 8
    assert escaped.hash() != new_directory_node("d", [FileNode("caf\u00e9", "1")]).hash()


def test_hash_and_string_of_deeply_nested_tree():
    depth = 3000
    node = DirectoryNode("leaf")
    for _ in range(depth):
        node = DirectoryNode("d", [node])
    root = new_directory_node("", [node])

    assert len(root.hash()) == 8
    assert str(root) == "(" + "d(" * depth + "leaf()" + ")" * depth + ")"


def test_deep_hash_matches_shallow_computation():
    """Iterative hashing agrees with hashing each level on the way up."""
    chain = [DirectoryNode("leaf")]
    for i in range(50):
        chain.append(DirectoryNode(f"d{i}", [chain[-1]]))
    expected = [n.hash() for n in chain][-1]
    fresh = DirectoryNode("leaf")
    for i in range(50):
        fresh = DirectoryNode(f"d{i}", [fresh])
    assert fresh.hash() == expected


# ── Accessors ───────────────────────────────────────────────────────


def test_is_directory():
    assert new_directory_node("d", []).is_directory() is True


def test_satisfies_noder_protocol(sample_tree):
    assert isinstance(sample_tree, Noder)


def test_nested_directory_counts(sample_tree):
    assert sample_tree.child_count() == 2
    src = sample_tree.children()[1]
    assert src.name == "src"
    assert src.child_count() == 2


# ── Canonical string ────────────────────────────────────────────────


def test_string_with_empty_directory_children():
    """Children given as b, a render sorted."""
    node = new_directory_node("root", [DirectoryNode("b"), DirectoryNode("a")])
    assert [c.name for c in node.children()] == ["a", "b"]
    assert str(node) == "root(a() b())"


def test_string_with_file_children(leaf_a, leaf_b):
    node = new_directory_node("root", [leaf_b, leaf_a])
    assert str(node) == "root(a<1> b<2>)"


def test_string_of_empty_directory():
    assert str(new_directory_node("docs", [])) == "docs()"


def test_string_nested(sample_tree):
    assert str(sample_tree) == "root(README<doc> src(main<x> util<y>))"


def test_string_independent_of_input_order():
    a = new_directory_node("r", [DirectoryNode("x", [FileNode("k", "v")]), FileNode("m", "")])
    b = new_directory_node("r", [FileNode("m", ""), DirectoryNode("x", [FileNode("k", "v")])])
    assert str(a) == str(b)


# ── Example scenarios ───────────────────────────────────────────────


def test_scenario_input_order_does_not_change_hash():
    first = new_directory_node("root", [DirectoryNode("b"), DirectoryNode("a")])
    second = new_directory_node("root", [DirectoryNode("a"), DirectoryNode("b")])
    assert first.hash() == second.hash()
    assert first == second


def test_scenario_empty_name_among_children():
    with pytest.raises(EmptyChildNameError):
        new_directory_node("root", [DirectoryNode("a"), DirectoryNode("")])


def test_scenario_duplicate_names_with_distinct_hashes():
    with pytest.raises(DuplicateChildNameError):
        new_directory_node("root", [FileNode("a", "1"), FileNode("a", "2")])


# ── Equality ────────────────────────────────────────────────────────


def test_equal_nodes_are_interchangeable_as_keys(leaf_a, leaf_b):
    one = new_directory_node("d", [leaf_a, leaf_b])
    two = new_directory_node("d", [leaf_b, leaf_a])
    assert {one: "x"}[two] == "x"


def test_repr_omits_cache():
    node = new_directory_node("d", [])
    node.hash()
    assert "_hash" not in repr(node)
    assert "_lock" not in repr(node)


# ── Copying & pickling ──────────────────────────────────────────────


def test_pickle_round_trip(sample_tree):
    sample_tree.hash()
    restored = pickle.loads(pickle.dumps(sample_tree))
    assert restored == sample_tree
    assert restored.hash() == sample_tree.hash()
    assert str(restored) == str(sample_tree)


def test_deepcopy_and_copy(sample_tree):
    for clone in (copy.deepcopy(sample_tree), copy.copy(sample_tree)):
        assert clone == sample_tree
        assert clone.hash() == sample_tree.hash()


def test_unpickled_node_has_its_own_lock(leaf_a):
    node = new_directory_node("d", [leaf_a])
    restored = pickle.loads(pickle.dumps(node))
    assert restored._lock is not node._lock
