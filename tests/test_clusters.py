from selectolax.lexbor import LexborHTMLParser

from autoconfig.clusters import (
    find_clusters,
    find_shared_root_selector,
    pull_back_root_selector,
    shorten_root_selector,
)
from autoconfig.locations import FieldLocation
from autoconfig.paths import Node, TreePath


def _loc(*nodes, **kwargs):
    return FieldLocation(path=TreePath(tuple(nodes)), **kwargs)


BODY = Node("body")
LIST = Node("ul", ("events",))
ITEM = Node("li", ("item",))


def test_shared_root_at_divergence():
    locations = [
        _loc(BODY, LIST, ITEM, Node("a"), attr="href"),
        _loc(BODY, LIST, ITEM, Node("span", ("title",))),
    ]
    assert str(find_shared_root_selector(locations)) == "body > ul.events > li.item"


def test_shared_root_is_strict_prefix():
    locations = [
        _loc(BODY, LIST, ITEM, Node("a")),
        _loc(BODY, LIST, ITEM, Node("a"), attr="href"),
    ]
    assert str(find_shared_root_selector(locations)) == "body > ul.events > li.item"

    single = [_loc(BODY, LIST, ITEM)]
    assert str(find_shared_root_selector(single)) == "body > ul.events"


def test_shared_root_stops_at_shortest_path():
    locations = [
        _loc(BODY, LIST, ITEM, Node("div"), Node("a")),
        _loc(BODY, LIST, ITEM, Node("h2")),
    ]
    assert str(find_shared_root_selector(locations)) == "body > ul.events > li.item"


def test_shared_root_empty():
    assert len(find_shared_root_selector([])) == 0


def test_shorten_root_selector():
    p = TreePath((BODY, Node("div", ("a", "b")), Node("ul", ("c",)), Node("li")))
    assert str(shorten_root_selector(p)) == "div.a.b > ul.c > li"

    p = TreePath((BODY, Node("div", ("a", "b", "c", "d")), Node("li", ("x",))))
    assert str(shorten_root_selector(p)) == "div.a.b.c.d > li.x"

    p = TreePath((BODY, Node("ul"), Node("li", ("x",))))
    assert shorten_root_selector(p) == p


def test_find_clusters():
    root = TreePath((BODY, Node("div", ("day",))))
    event = Node("div", ("event",))
    locations = [
        _loc(BODY, Node("div", ("day",)), Node("h2")),
        _loc(BODY, Node("div", ("day",)), event, Node("a"), attr="href"),
        _loc(BODY, Node("div", ("day",)), event, Node("span")),
        _loc(BODY, Node("div", ("day",)), Node("footer"), Node("p")),
    ]
    clusters = find_clusters(locations, root)
    assert sorted(clusters) == [
        "body > div.day > div.event",
        "body > div.day > footer",
    ]
    assert len(clusters["body > div.day > div.event"]) == 2
    assert len(clusters["body > div.day > footer"]) == 1


def test_find_clusters_nothing_below_root():
    root = TreePath((BODY, LIST, ITEM))
    locations = [_loc(BODY, LIST, ITEM, Node("a")), _loc(BODY, LIST, ITEM, Node("span"))]
    assert find_clusters(locations, root) == {}


def _items_html(inner, n=5):
    items = "".join(f'<div class="item">{inner}</div>' for _ in range(n))
    return LexborHTMLParser(f'<html><body><main><div class="wrap">{items}</div></main></body></html>')


def test_pull_back_to_repeating_element():
    tree = _items_html("<span>a</span><span>b</span>")
    wrap, item = Node("div", ("wrap",)), Node("div", ("item",))
    root = TreePath((BODY, Node("main"), wrap, item, Node("span")))
    assert str(pull_back_root_selector(root, tree, 5)) == "body > main > div.wrap > div.item"
    assert pull_back_root_selector(root.prefix(4), tree, 5) == root.prefix(4)


def test_pull_back_prefers_div():
    tree = _items_html("<ul><li>a</li><li>b</li></ul>")
    root = TreePath((BODY, Node("main"), Node("div", ("wrap",)), Node("div", ("item",)), Node("ul"), Node("li")))
    assert str(pull_back_root_selector(root, tree, 5)) == "body > main > div.wrap > div.item"
    # without the div preference the list itself would be picked
    assert str(pull_back_root_selector(root, tree, 5, min_len=5)) == "body > main > div.wrap > div.item > ul"


def test_pull_back_keeps_root_when_counts_do_not_divide():
    tree = _items_html("<span>a</span>")
    root = TreePath((BODY, Node("main"), Node("div", ("wrap",))))
    assert pull_back_root_selector(root, tree, 5) == root
    assert len(pull_back_root_selector(TreePath(), tree, 5)) == 0


def test_pull_back_respects_min_len():
    tree = _items_html("<span>a</span><span>b</span>")
    root = TreePath((BODY, Node("main"), Node("div", ("wrap",)), Node("div", ("item",)), Node("span")))
    assert pull_back_root_selector(root, tree, 5, min_len=5) == root
