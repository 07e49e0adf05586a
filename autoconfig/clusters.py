"""
Root selector discovery and clustering of field locations below a root.
"""

import logging
from typing import Dict, List

from .locations import FieldLocation
from .paths import TreePath

logger = logging.getLogger(__name__)

SHORTEN_CLASS_THRESHOLD = 3
# Roots this short are never preferred for ending in a div.
DIV_PREFERENCE_MIN_LEN = 3


def find_shared_root_selector(locations: List[FieldLocation]) -> TreePath:
    """
    Find the longest path prefix shared by all locations, stopping before the
    last node of the shortest path so the root is always a strict prefix. This
    divergence point is the item boundary.
    """
    if not locations:
        return TreePath()
    i = 0
    while True:
        reference = None
        for j, lp in enumerate(locations):
            if len(lp.path) <= i + 1:
                return lp.path.prefix(i)
            if j == 0:
                reference = lp.path[i]
            elif lp.path[i] != reference:
                logger.debug("paths diverge at %d: %s", i, lp.path)
                return lp.path.prefix(i)
        i += 1


def shorten_root_selector(p: TreePath) -> TreePath:
    """
    Keep only as many trailing nodes of p as are needed to collect at least
    SHORTEN_CLASS_THRESHOLD classes.
    """
    total = 0
    for i in range(len(p) - 1, -1, -1):
        total += len(p[i].classes)
        if total >= SHORTEN_CLASS_THRESHOLD:
            return p[i:]
    return p


def find_clusters(locations: List[FieldLocation], root: TreePath) -> Dict[str, List[FieldLocation]]:
    """
    Group locations by their path one node beyond root. Locations that end at
    that node have nothing left to group below it and are left out.
    """
    clusters: Dict[str, List[FieldLocation]] = {}
    new_len = len(root) + 1
    for lp in locations:
        if len(lp.path) <= new_len:
            continue
        key = str(lp.path.prefix(new_len))
        clusters.setdefault(key, []).append(lp)
    for key, members in clusters.items():
        logger.debug("cluster %s: %d locations", key, len(members))
    return clusters


def pull_back_root_selector(root: TreePath, tree, count: int, min_len: int = 1) -> TreePath:
    """
    Move the root towards <body> until it matches exactly count elements of
    the parsed document tree. A div with the right number of matches wins
    over deeper containers that are not divs. Never returns a path shorter
    than min_len.
    """
    if not len(root):
        return root

    for n in range(len(root), max(min_len, DIV_PREFERENCE_MIN_LEN + 1) - 1, -1):
        candidate = root.prefix(n)
        if candidate.last().tag_name == 'div' and _match_count(tree, candidate) == count:
            logger.debug("pulled root back to div %s (%d matches)", candidate, count)
            return candidate

    ret = prev = root
    while True:
        matches = _match_count(tree, ret)
        if matches == count:
            return ret
        if matches % count:
            return prev
        if len(ret) <= max(min_len, 1):
            return ret
        prev = ret
        ret = ret.prefix(len(ret) - 1)


def _match_count(tree, p: TreePath) -> int:
    return len(tree.css(str(p)))
