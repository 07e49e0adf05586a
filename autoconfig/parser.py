from typing import List, Dict, Any
from urllib.parse import urljoin
from selectolax.lexbor import LexborHTMLParser
from .models import ElementLocation, ScraperConfig, OutputRecord

URL_FIELD_SUFFIX = "__url"
TEXT_NODE_TAG = "-text"


class ItemParser:
    """Replays a generated config against HTML and extracts the items."""

    def __init__(self, config: ScraperConfig, base_url: str = ""):
        self.config = config
        self.base_url = base_url or config.url

    def parse_page(self, html: str) -> List[OutputRecord]:
        """Extract all records from a single page."""
        tree = LexborHTMLParser(html)
        records = []

        if self.config.item:
            items = tree.css(self.config.item)
        else:
            items = [tree.body] if tree.body is not None else []

        for item in items:
            record_data = self._extract_from_element(item)
            if record_data:
                records.append(OutputRecord(data=record_data))

        return records

    def _extract_from_element(self, element) -> Dict[str, Any]:
        """Extract all fields from a single item element."""
        data = {}

        for field in self.config.fields:
            if field.type == "date":
                parts = [self._extract_location(element, c.location) for c in field.components]
                data[field.name] = " ".join(p for p in parts if p)
            elif field.type == "url":
                loc = field.locations[0]
                if not loc.attr:
                    loc = loc.model_copy(update={"attr": "href"})
                value = self._extract_location(element, loc)
                data[field.name] = value
                if value and self.base_url:
                    data[field.name + URL_FIELD_SUFFIX] = urljoin(self.base_url, value)
            else:
                parts = [self._extract_location(element, loc) for loc in field.locations]
                data[field.name] = " ".join(p for p in parts if p)

        return data if any(data.values()) else {}

    def _extract_location(self, element, loc: ElementLocation) -> str:
        """Extract a single string: an attribute or the n-th child text node."""
        target = element.css_first(loc.selector) if loc.selector else element

        if target is None:
            return ""

        if loc.attr:
            return (target.attributes.get(loc.attr) or "").strip()

        index = 0
        for child in target.iter(include_text=True):
            tag = child.tag or ""
            # Comments are not counted by the analyzer either.
            if tag != TEXT_NODE_TAG and not tag[:1].isalpha():
                continue
            if index == loc.child_index:
                if tag == TEXT_NODE_TAG:
                    return child.text(deep=True).strip()
                return ""
            index += 1

        return ""
