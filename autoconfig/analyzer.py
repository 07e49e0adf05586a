"""
Single pass tree walker over the token stream of an HTML document. Records a
field location for every text node and every interesting attribute inside
<body>, together with the nth-child disambiguation of repeated siblings.
"""

import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple

from .locations import FieldLocation
from .paths import Node, TreePath

ALLOWED_ATTRS = {
    'a': {'href'},
    'img': {'src'},
}

# Elements without content. The tokenizer reports them as start tags. They
# count as children and siblings like any other element, matching the child
# numbering of the item parser and of CSS :nth-child.
VOID_TAGS = {
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input', 'link',
    'meta', 'param', 'source', 'track', 'wbr',
}

# Text inside these is never a field.
SKIP_TEXT_TAGS = {'script', 'style', 'noscript'}

SPACES_RE = re.compile(r'\s+')


@dataclass
class ChildCounter:
    """Per-path state: number of child nodes seen and the sibling elements."""
    count: int = 0
    siblings: List[Node] = field(default_factory=list)


class Analyzer(HTMLParser):
    """Walks the tokens of an HTML document and collects raw field locations."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.locations: List[FieldLocation] = []
        self.path = TreePath()
        self.in_body = False
        self.done = False
        self._counters: Dict[str, ChildCounter] = {}

    def analyze(self, html: str) -> List[FieldLocation]:
        self.feed(html)
        self.close()
        return self.locations

    def _counter(self, p: str) -> ChildCounter:
        c = self._counters.get(p)
        if c is None:
            c = self._counters[p] = ChildCounter()
        return c

    def handle_data(self, data: str):
        if not self.in_body or self.done:
            return
        p = str(self.path)
        counter = self._counter(p)
        text = data.strip()
        if text and not (len(self.path) and self.path.last().tag_name in SKIP_TEXT_TAGS):
            self.locations.append(FieldLocation(
                path=self.path,
                text_index=counter.count,
                examples=[text],
            ))
        counter.count += 1

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]):
        if self.done:
            return
        if tag in VOID_TAGS:
            self.handle_startendtag(tag, attrs)
            return
        if tag == 'body':
            self.in_body = not self.in_body
        if not self.in_body:
            return

        p = str(self.path)
        counter = self._counter(p)
        values, classes, pseudo_classes = tag_metadata(tag, attrs, counter.siblings)
        counter.count += 1
        counter.siblings.append(Node(tag, classes))

        self.path = self.path.append(Node(tag, classes, pseudo_classes))
        self._counters[str(self.path)] = ChildCounter()

        for key, value in values.items():
            self.locations.append(FieldLocation(
                path=self.path,
                attr=key,
                examples=[value],
            ))

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]):
        if not self.in_body or self.done:
            return

        counter = self._counter(str(self.path))
        values, classes, pseudo_classes = tag_metadata(tag, attrs, counter.siblings)
        counter.count += 1
        counter.siblings.append(Node(tag, classes))
        if not values:
            return

        # The element never becomes the current node, so its path is transient.
        path = self.path.append(Node(tag, classes, pseudo_classes))
        for key, value in values.items():
            self.locations.append(FieldLocation(
                path=path,
                attr=key,
                examples=[value],
            ))

    def handle_endtag(self, tag: str):
        if not self.in_body or self.done or tag in VOID_TAGS:
            return

        # Pop until the matching element is found, tolerating unbalanced markup.
        while len(self.path):
            matched = self.path.last().tag_name == tag
            self._counters.pop(str(self.path), None)
            self.path = self.path.prefix(len(self.path) - 1)
            if matched:
                break

        if tag == 'body':
            self.in_body = False
            self.done = True


def tag_metadata(
    tag: str,
    attrs: List[Tuple[str, Optional[str]]],
    siblings: List[Node]
) -> Tuple[Dict[str, str], Tuple[str, ...], Tuple[str, ...]]:
    """
    Return the allowed attribute values, the classes and the pseudo classes
    (only nth-child for now) of an element.
    """
    values: Dict[str, str] = {}
    classes: Tuple[str, ...] = ()
    if tag != 'body':
        allowed = ALLOWED_ATTRS.get(tag, set())
        for key, value in attrs:
            value = (value or '').strip()
            if key == 'class' and value:
                # Classes containing dots can't be expressed in a path string.
                classes = tuple(
                    cl for cl in SPACES_RE.split(value)
                    if cl and '.' not in cl
                )
            if key in allowed:
                values[key] = value

    pseudo_classes: Tuple[str, ...] = ()
    # Only disambiguate when an earlier sibling has the same tag and classes.
    for sibling in siblings:
        if sibling.tag_name == tag and set(sibling.classes) == set(classes):
            pseudo_classes = (f'nth-child({len(siblings) + 1})',)
            break
    return values, classes, pseudo_classes


def analyze(html: str) -> List[FieldLocation]:
    """Return the raw field locations of an HTML document in discovery order."""
    return Analyzer().analyze(html)
