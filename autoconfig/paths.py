"""
Tree path model: the position of a node in the HTML tree as a list of
tag descriptors, rendered in the selector dialect the item parser replays.
"""

from dataclasses import dataclass, field, replace
from typing import Iterator, List, Tuple, Union
import re


NTH_CHILD_RE = re.compile(r'^nth-child\((\d+)\)$')


def _escape_class(cl: str) -> str:
    """
    Escape a class name so it survives as a compound selector token, following
    the rules of CSS.escape(): ASCII characters other than letters, digits,
    '-' and '_' get a backslash, a digit at the start (or after a leading '-')
    becomes a hex escape. Tailwind classes like 'md:w-[200px]' or 'w-1/2'
    therefore stay usable.
    """
    # https://drafts.csswg.org/cssom/#serialize-an-identifier
    if cl == '-':
        return '\\-'
    out = []
    for i, ch in enumerate(cl):
        if ch.isascii() and ch.isdigit() and (i == 0 or (i == 1 and cl[0] == '-')):
            out.append(f'\\3{ch} ')
        elif ch.isascii() and not (ch.isalnum() or ch in '-_'):
            out.append('\\' + ch)
        else:
            out.append(ch)
    return ''.join(out)


@dataclass(frozen=True)
class Node:
    """One element at a tree position: tag name, classes and pseudo classes."""
    tag_name: str
    classes: Tuple[str, ...] = ()
    pseudo_classes: Tuple[str, ...] = ()

    def __str__(self) -> str:
        r = self.tag_name
        for cl in self.classes:
            r += f'.{_escape_class(cl)}'
        if self.pseudo_classes:
            r += ':' + ':'.join(self.pseudo_classes)
        return r

    def __eq__(self, other) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return (
            self.tag_name == other.tag_name
            and set(self.classes) == set(other.classes)
            and self.pseudo_classes == other.pseudo_classes
        )

    def __hash__(self) -> int:
        return hash((self.tag_name, frozenset(self.classes), self.pseudo_classes))

    @property
    def nth_child(self) -> int:
        """The index of the nth-child pseudo class, or 0 if there is none."""
        if not self.pseudo_classes:
            return 0
        m = NTH_CHILD_RE.match(self.pseudo_classes[0])
        return int(m.group(1)) if m else 0

    def without_pseudo_classes(self) -> 'Node':
        return replace(self, pseudo_classes=())


@dataclass(frozen=True)
class TreePath:
    """
    A list of nodes starting at <body> and going down the html tree to a
    specific node. Paths are immutable; every change produces a new path, so
    no two field locations ever share path storage.
    """
    nodes: Tuple[Node, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __getitem__(self, key: Union[int, slice]):
        if isinstance(key, slice):
            return TreePath(self.nodes[key])
        return self.nodes[key]

    def __str__(self) -> str:
        return ' > '.join(str(n) for n in self.nodes)

    def string(self) -> str:
        return str(self)

    def last(self) -> Node:
        return self.nodes[-1]

    def append(self, node: Node) -> 'TreePath':
        return TreePath(self.nodes + (node,))

    def prefix(self, n: int) -> 'TreePath':
        return TreePath(self.nodes[:n])

    def replace_node(self, i: int, node: Node) -> 'TreePath':
        nodes = list(self.nodes)
        nodes[i] = node
        return TreePath(tuple(nodes))

    def is_prefix_of(self, other: 'TreePath') -> bool:
        if len(self) > len(other):
            return False
        return all(a == b for a, b in zip(self.nodes, other.nodes))

    def distance(self, other: 'TreePath') -> float:
        """Levenshtein distance between the string forms of two paths."""
        return float(levenshtein(str(self), str(other)))


def levenshtein(a: str, b: str) -> int:
    """Character-level edit distance, two-row dynamic programming."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a

    previous: List[int] = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]
