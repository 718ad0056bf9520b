"""Unit tests for the navigation tree builder.

The builder only ever sees a flat list of slugged directories, so these tests
check that the rebuilt hierarchy is balanced, contains exactly the input
directories plus their intermediate ancestors, keeps sibling subtrees apart,
and that per-page active marking never leaks into the shared tree.
"""

from __future__ import annotations

import msgspec.json as msgspec_json
import pytest

from dirsite.navigation import NavNode, NavTreeBuilder

DIRECTORY_LISTS = [
    [],
    [""],
    ["", "docs"],
    ["a/b/c"],
    ["a", "a-b", "a/c", "a/c/d", "b"],
    ["zeta", "alpha/one", "alpha", "alpha/two/three", "mid/x/y"],
    ["ab", "a", "a/b", "abc/d"],
]


def _ancestors(directory: str) -> set[str]:
    parts = [part for part in directory.split("/") if part]
    return {"/".join(parts[:depth]) for depth in range(1, len(parts) + 1)}


@pytest.mark.parametrize("directories", DIRECTORY_LISTS)
def test_open_and_close_events_balance(directories: list[str]) -> None:
    """Every opened node is closed exactly once."""
    tree = NavTreeBuilder().build(directories)
    assert tree.opened == tree.closed
    assert tree.opened == sum(1 for _node in tree.root.walk())


@pytest.mark.parametrize("directories", DIRECTORY_LISTS)
def test_preorder_walk_reconstructs_directories(directories: list[str]) -> None:
    """Pre-order paths are the inputs plus intermediate ancestors, each once."""
    tree = NavTreeBuilder().build(directories)
    walked = [node.path for node in tree.root.walk()][1:]
    expected: set[str] = set()
    for directory in directories:
        expected |= _ancestors(directory)
    assert len(walked) == len(set(walked)), f"duplicate nodes in {walked!r}"
    assert {path.lstrip("/") for path in walked if path} == expected


def test_children_are_immediate_descendants() -> None:
    """Each child's path extends its parent's path by exactly one segment."""
    tree = NavTreeBuilder().build(["a", "a-b", "a/c", "a/c/d", "b"])

    def _check(node: NavNode, parent_depth: int) -> None:
        for child in node.children:
            assert child.path is not None
            assert child.path.count("/") == parent_depth + 1
            if node.path:
                assert child.path.startswith(f"{node.path}/")
            _check(child, parent_depth + 1)

    _check(tree.root, 0)


def test_sibling_with_shared_prefix_is_not_nested() -> None:
    """``a-b`` and ``ab`` are siblings of ``a``, never its children."""
    tree = NavTreeBuilder().build(["a", "a-b", "a/c", "ab"])
    top = [child.path for child in tree.root.children]
    assert top == ["/a", "/a-b", "/ab"]
    nested = [child.path for child in tree.root.children[0].children]
    assert nested == ["/a/c"]


def test_intermediate_directories_are_opened() -> None:
    """Directories holding only subdirectories still get a node."""
    tree = NavTreeBuilder().build(["guides/install/linux"])
    guides = tree.root.children[0]
    assert (guides.name, guides.path) == ("Guides", "/guides")
    install = guides.children[0]
    assert (install.name, install.path) == ("Install", "/guides/install")
    assert install.children[0].path == "/guides/install/linux"


def test_declared_titles_override_prettified_names() -> None:
    """Index titles win; otherwise the slug is prettified."""
    titles = {"": "Welcome", "docs": "Documentation"}
    tree = NavTreeBuilder(titles.get).build(["", "docs", "getting-started"])
    assert tree.root.name == "Welcome"
    assert [child.name for child in tree.root.children] == [
        "Documentation",
        "Getting Started",
    ]


def test_root_defaults_to_home() -> None:
    """The root node is named ``Home`` without a declared title."""
    tree = NavTreeBuilder(lambda _directory: None).build(["docs"])
    assert tree.root.name == "Home"
    assert tree.root.path is None


def test_mark_active_flags_only_the_matching_node() -> None:
    """Exactly one node is active and the shared tree stays unmarked."""
    tree = NavTreeBuilder().build(["a", "a/b", "a/b/c", "d"])
    local = tree.root.mark_active("/a/b")
    active = [node for node in local.walk() if node.active]
    assert [node.path for node in active] == ["/a/b"]
    assert not any(node.active for node in tree.root.walk())


def test_mark_active_for_root_page_flags_nothing() -> None:
    """The root page has no path, so no node is active."""
    tree = NavTreeBuilder().build(["", "docs"])
    local = tree.root.mark_active(None)
    assert not any(node.active for node in local.walk())


def test_document_serialisation_shape() -> None:
    """The listing document holds the root directory block and a report."""
    tree = NavTreeBuilder({"": "Home"}.get).build(["", "docs"])
    document = msgspec_json.decode(tree.dumps().encode("utf-8"))
    assert document == [
        {
            "type": "directory",
            "name": "Home",
            "contents": [
                {
                    "type": "directory",
                    "name": "Docs",
                    "path": "/docs",
                    "contents": [],
                }
            ],
        },
        {"type": "report", "directories": 1},
    ]


def test_active_flag_is_serialised_for_local_copies() -> None:
    """Only the page-local document carries the active marker."""
    tree = NavTreeBuilder().build(["docs"])
    local = tree.root.mark_active("/docs")
    shared_doc = tree.to_document()
    local_doc = tree.to_document(local)
    assert "active" not in shared_doc[0]["contents"][0]
    assert local_doc[0]["contents"][0]["active"] is True
