"""
Field locations and the merge engine that squashes the raw, highly repetitive
locations found by the analyzer into a few canonical ones.
"""

import colorsys
import logging
from dataclasses import dataclass, field
from typing import List

from .paths import Node, TreePath

logger = logging.getLogger(__name__)

# Below this minimum occurrence the last path node always keeps its nth-child
# pseudo class when stripping.
STRIP_OFFSET_THRESHOLD = 6


@dataclass
class FieldLocation:
    """A candidate extraction point: a path plus attribute or text child index."""
    path: TreePath
    attr: str = ""
    text_index: int = 0
    count: int = 1
    examples: List[str] = field(default_factory=list)
    strip_index: int = 0
    name: str = ""
    selected: bool = False
    color: str = ""
    distance: float = 0.0

    def debug_string(self) -> str:
        return (
            f"count={self.count} name={self.name!r} attr={self.attr!r} "
            f"text_index={self.text_index} strip_index={self.strip_index} "
            f"path={self.path} examples={self.examples[:3]!r}"
        )


def strip_offset(min_occ: int, threshold: int = STRIP_OFFSET_THRESHOLD) -> int:
    """Distance from the end of the path at which stripping starts."""
    # Arbitrary, and probably not always right: some pages need 1, others 2.
    return 2 if min_occ < threshold else 1


def strip_nth_child(lp: FieldLocation, min_occ: int, threshold: int = STRIP_OFFSET_THRESHOLD) -> None:
    """
    Strip nth-child pseudo classes with an index of at least min_occ from the
    path of lp, walking from the end. Every node before the innermost stripped
    position is cleared as well, and that position is kept as lp.strip_index
    so merging can ignore diverging pseudo classes up to it.

    Without this step the repeated items of a list would all carry a different
    nth-child and no common root path could be found.
    """
    i_strip = 0
    path = lp.path
    for i in range(len(path) - strip_offset(min_occ, threshold), -1, -1):
        n = path[i]
        if i < i_strip:
            path = path.replace_node(i, n.without_pseudo_classes())
        elif n.pseudo_classes and n.nth_child >= min_occ:
            path = path.replace_node(i, n.without_pseudo_classes())
            i_strip = i
            lp.strip_index = i_strip
    lp.path = path


def merge_location(old: FieldLocation, new: FieldLocation) -> bool:
    """
    Merge new into old if both describe the same field. Returns True on a
    merge, in which case old gets the narrowed path, the incremented count and
    the examples of new appended.
    """
    if old.text_index != new.text_index:
        return False
    if old.attr != new.attr:
        return False
    if len(old.path) != len(new.path):
        return False

    nodes = []
    for i, on in enumerate(old.path):
        nn = new.path[i]
        if on.tag_name != nn.tag_name:
            return False

        # Up to the strip index sibling instances may differ in nth-child.
        pseudo_classes = nn.pseudo_classes if i > old.strip_index else ()
        # nth-child is the only pseudo class, so this check is enough for now.
        if len(on.pseudo_classes) != len(pseudo_classes):
            return False
        if len(on.pseudo_classes) == 1 and on.pseudo_classes[0] != pseudo_classes[0]:
            return False

        if not on.classes and not nn.classes:
            nodes.append(Node(on.tag_name, (), on.pseudo_classes))
            continue

        other = set(nn.classes)
        overlap = tuple(cl for cl in on.classes if cl in other)
        # Nodes with classes need at least one class in common.
        if not overlap:
            return False
        nodes.append(Node(on.tag_name, overlap, on.pseudo_classes))

    old.path = TreePath(tuple(nodes))
    old.count += 1
    old.examples.extend(new.examples)
    return True


def squash_locations(locations: List[FieldLocation], min_occ: int) -> List[FieldLocation]:
    """
    Fold structurally equivalent locations into one. Locations are processed
    from last to first so later, usually more complete, ones become merge
    targets.
    """
    squashed: List[FieldLocation] = []
    for lp in reversed(locations):
        strip_nth_child(lp, min_occ)
        for sp in squashed:
            if merge_location(sp, lp):
                break
        else:
            squashed.append(lp)
    return squashed


def filter_below_min_count(locations: List[FieldLocation], min_count: int) -> List[FieldLocation]:
    kept = []
    for lp in locations:
        if lp.count < min_count:
            logger.debug("dropping %s, count below %d", lp.path, min_count)
            continue
        kept.append(lp)
    return kept


def filter_static_fields(locations: List[FieldLocation]) -> List[FieldLocation]:
    """Keep only locations whose examples are not all the same."""
    kept = []
    for lp in locations:
        if any(ex != lp.examples[0] for ex in lp.examples):
            kept.append(lp)
        else:
            logger.debug("dropping static %s: %r", lp.path, lp.examples[0])
    return kept


def assign_colors(locations: List[FieldLocation]) -> None:
    """
    Give every location a display color. Consecutive locations get a hue
    proportional to their cumulative path distance, so structurally close
    fields get similar colors.
    """
    if not locations:
        return
    for i, lp in enumerate(locations):
        if i == 0:
            lp.distance = 0.0
        else:
            prev = locations[i - 1]
            lp.distance = prev.distance + prev.path.distance(lp.path)

    max_dist = locations[-1].distance * 1.2
    for lp in locations:
        h = lp.distance / max_dist if max_dist else 0.0
        r, g, b = colorsys.hsv_to_rgb(h, 0.73, 0.96)
        lp.color = f"#{int(r * 255):02x}{int(g * 255):02x}{int(b * 255):02x}"
