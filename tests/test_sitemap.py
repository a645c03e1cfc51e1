# File: tests/test_sitemap.py
import pytest

from site_mapper.crawler.sitemap import SiteMap, URLNode
from site_mapper.exceptions import InvalidNodeError, StructuralError

ROOT = URLNode("http://a.com/", 0)


def node(path: str, depth: int) -> URLNode:
    return URLNode(f"http://a.com{path}", depth)


@pytest.fixture()
def site_map() -> SiteMap:
    sm = SiteMap(ROOT, max_depth=2)
    sm.add_child(ROOT, node("/a", 1))
    sm.add_child(ROOT, node("/b", 1))
    sm.add_child(node("/a", 1), node("/a/1", 2))
    return sm


def test_new_site_map_has_only_root():
    sm = SiteMap(ROOT, max_depth=3)
    assert len(sm) == 1
    assert sm.root == ROOT
    assert sm.parent(ROOT) is None
    assert sm.children(ROOT) == []


def test_add_child_links_parent_and_child(site_map):
    assert len(site_map) == 4
    assert site_map.children(ROOT) == [node("/a", 1), node("/b", 1)]
    assert site_map.parent(node("/a/1", 2)) == node("/a", 1)
    assert node("/b", 1) in site_map
    assert "http://a.com/a/1" in site_map
    assert site_map.get("http://a.com/b") == node("/b", 1)
    assert site_map.get("http://a.com/missing") is None


def test_depth_and_hostname_lookup(site_map):
    child = node("/a/1", 2)
    assert site_map.depth(child) == 2
    assert site_map.hostname(child) == "a.com"
    assert child.hostname == "a.com"


def test_depth_beyond_max_is_rejected(site_map):
    with pytest.raises(InvalidNodeError):
        site_map.add_child(node("/a/1", 2), node("/a/1/x", 3))
    assert "http://a.com/a/1/x" not in site_map


def test_max_depth_zero_allows_only_root():
    sm = SiteMap(ROOT, max_depth=0)
    with pytest.raises(InvalidNodeError):
        sm.add_child(ROOT, node("/a", 1))
    assert len(sm) == 1


def test_duplicate_anywhere_in_tree_is_rejected(site_map):
    # same url under a different parent
    with pytest.raises(InvalidNodeError) as excinfo:
        site_map.add_child(node("/b", 1), node("/a/1", 2))
    assert excinfo.value.url == "http://a.com/a/1"
    # link back to the root
    with pytest.raises(InvalidNodeError):
        site_map.add_child(node("/a", 1), URLNode(ROOT.url, 2))
    assert site_map.parent(node("/a/1", 2)) == node("/a", 1)
    assert len(site_map) == 4


def test_unknown_parent_is_structural_error(site_map):
    with pytest.raises(StructuralError):
        site_map.add_child(node("/ghost", 1), node("/ghost/x", 2))


def test_parent_with_wrong_depth_is_not_a_member(site_map):
    with pytest.raises(StructuralError):
        site_map.add_child(node("/a", 0), node("/new", 1))


def test_child_depth_must_follow_parent(site_map):
    with pytest.raises(StructuralError):
        site_map.add_child(ROOT, node("/skip", 2))


def test_structural_error_is_not_invalid_node_error():
    assert not issubclass(StructuralError, InvalidNodeError)


def test_walk_is_pre_order(site_map):
    assert [n.url for n in site_map.walk()] == [
        "http://a.com/",
        "http://a.com/a",
        "http://a.com/a/1",
        "http://a.com/b",
    ]
    assert list(site_map) == list(site_map.walk())


def test_levels_is_breadth_first(site_map):
    depths = [n.depth for n in site_map.levels()]
    assert depths == sorted(depths)
    assert [n.url for n in site_map.levels()][-1] == "http://a.com/a/1"


def test_every_node_is_one_deeper_than_its_parent(site_map):
    for n in site_map.walk():
        parent = site_map.parent(n)
        if parent is None:
            assert n == site_map.root
        else:
            assert n.depth == parent.depth + 1
        assert n.depth <= site_map.max_depth


def test_to_dict_exports_nested_tree(site_map):
    tree = site_map.to_dict()
    assert tree["url"] == "http://a.com/"
    assert tree["depth"] == 0
    assert [c["url"] for c in tree["children"]] == ["http://a.com/a", "http://a.com/b"]
    assert tree["children"][0]["children"][0] == {
        "url": "http://a.com/a/1",
        "depth": 2,
        "children": [],
    }


def chain(length: int) -> SiteMap:
    sm = SiteMap(ROOT, max_depth=length)
    parent = ROOT
    for depth in range(1, length + 1):
        child = node(f"/p{depth}", depth)
        sm.add_child(parent, child)
        parent = child
    return sm


def test_to_dict_handles_deep_chains():
    tree = chain(2000).to_dict()
    depth = 0
    while tree["children"]:
        assert len(tree["children"]) == 1
        tree = tree["children"][0]
        depth += 1
    assert depth == 2000
    assert tree == {"url": "http://a.com/p2000", "depth": 2000, "children": []}


def test_lookup_of_foreign_node_fails(site_map):
    with pytest.raises(StructuralError):
        site_map.children(node("/ghost", 1))


@pytest.mark.parametrize("root,max_depth", [(ROOT, -1), (node("/", 1), 2)])
def test_invalid_construction(root, max_depth):
    with pytest.raises(ValueError):
        SiteMap(root, max_depth)
