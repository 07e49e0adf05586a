import asyncio
import logging
from typing import Callable, Dict, List, Optional
from selectolax.lexbor import LexborHTMLParser
from .analyzer import analyze
from .clusters import (
    find_clusters,
    find_shared_root_selector,
    pull_back_root_selector,
    shorten_root_selector,
)
from .dates import DateGuesser
from .errors import CandidateValidationError, InputError, NoFieldsFoundError, NoFieldsSelectedError
from .fetcher import Fetcher, fetcher_for_url, normalize_html, write_html
from .fields import process_fields, set_field_names
from .labeler import Labeler
from .locations import (
    FieldLocation,
    assign_colors,
    filter_below_min_count,
    filter_static_fields,
    squash_locations,
)
from .models import ConfigCandidate, ConfigOptions, ScraperConfig
from .parser import ItemParser

logger = logging.getLogger(__name__)

FieldSelector = Callable[[List[FieldLocation]], List[FieldLocation]]


class ConfigGenerator:
    """Discovers repeated items on a page and generates candidate configs."""

    def __init__(
        self,
        options: ConfigOptions,
        labeler: Optional[Labeler] = None,
        date_guesser: Optional[DateGuesser] = None,
        field_selector: Optional[FieldSelector] = None,
        fetcher: Optional[Fetcher] = None
    ):
        self.options = options
        self.labeler = labeler
        self.date_guesser = date_guesser
        self.field_selector = field_selector
        self.fetcher = fetcher

    async def configs_for_url(self) -> Dict[str, ConfigCandidate]:
        """Fetch the input URL and generate configs for every minimum occurrence."""
        url = self.options.input_url
        if not url:
            raise InputError("URL field cannot be empty")

        fetcher = self.fetcher or fetcher_for_url(url)
        res = await fetcher.fetch(url)
        logger.info("fetched %s (%d, %s)", res.url, res.status_code, res.content_type)
        # Labeling talks to a remote API synchronously, keep it off the event loop.
        return await asyncio.to_thread(self.configs_for_html, res.html)

    def configs_for_html(self, html: str) -> Dict[str, ConfigCandidate]:
        """Generate configs from raw HTML for every minimum occurrence."""
        html = normalize_html(html)
        if self.options.html_output_dir:
            write_html(html, self.options.html_output_dir, self.options.input_url)

        tree = LexborHTMLParser(html)
        results: Dict[str, ConfigCandidate] = {}
        found = False
        for min_occ in self.options.min_occurrences:
            locations = self.analyze(html, min_occ)
            if not locations:
                logger.info("no fields found for minimum occurrence %d", min_occ)
                continue
            found = True
            self.expand(f"{min_occ:02d}-a", html, tree, locations, results)

        if not found:
            raise NoFieldsFoundError(self.options.input_url, self.options.min_occurrences)
        return results

    def analyze(self, html: str, min_occ: int) -> List[FieldLocation]:
        """Walk, squash, filter and name the field locations of normalized HTML."""
        locations = analyze(html)
        _log_locations("raw", locations)

        locations = squash_locations(locations, min_occ)
        _log_locations("squashed", locations)

        locations = filter_below_min_count(locations, min_occ)
        _log_locations("filtered min count", locations)

        if self.options.only_varying:
            locations = filter_static_fields(locations)
            _log_locations("filtered static", locations)

        if not locations:
            return []

        locations = set_field_names(locations, self.labeler)

        if self.field_selector is None:
            return locations

        assign_colors(locations)
        selected = self.field_selector(locations)
        for lp in selected:
            lp.selected = True
        if not selected:
            raise NoFieldsSelectedError(self.options.input_url)
        return selected

    def expand(
        self,
        candidate_id: str,
        html: str,
        tree: LexborHTMLParser,
        locations: List[FieldLocation],
        results: Dict[str, ConfigCandidate],
        min_root_len: int = 1
    ) -> None:
        """
        Build and validate the config rooted at the shared root of locations,
        then recurse into every cluster one node deeper. Child ids append a
        branch suffix per cluster in sorted cluster order.

        The shared root is pulled back until it matches as many elements as
        the most frequent location occurs, but never above min_root_len nodes,
        so every level of recursion ends up strictly deeper than its parent.
        """
        root = find_shared_root_selector(locations)
        count = max(lp.count for lp in locations)
        root = pull_back_root_selector(root, tree, count, min_root_len)
        item = shorten_root_selector(root) if self.options.shorten_root else root
        logger.debug("config %s: root selector %s", candidate_id, root)

        config = ScraperConfig(
            name=self.options.input_url,
            url=self.options.input_url,
            item=str(item),
            fields=process_fields(locations, root, self.date_guesser),
        )

        valid = True
        try:
            records = ItemParser(config, self.options.input_url).parse_page(html)
        except Exception as e:
            if self.options.abort_on_validation_error:
                raise CandidateValidationError(candidate_id, config.item, e) from e
            logger.warning("skipping config %s, validation failed: %s", candidate_id, e)
            valid = False

        if valid:
            candidate = ConfigCandidate(id=candidate_id, config=config, records=records)
            logger.debug(
                "config %s produced %d items with %d fields",
                candidate_id, len(candidate.records), candidate.total_fields
            )
            if self.options.url_required and not config.subpage_url_fields():
                logger.warning("config %s has no subpage URL field, not adding it", candidate_id)
            else:
                results[candidate_id] = candidate

        clusters = find_clusters(locations, root)
        for i, key in enumerate(sorted(clusters)):
            self.expand(
                candidate_id + branch_suffix(i), html, tree, clusters[key], results, len(root) + 1
            )


def branch_suffix(i: int) -> str:
    """
    Suffix of the i-th child candidate: a to y, then za to zy, zza and so
    on. No suffix is a prefix of another and they sort in cluster order.
    """
    return 'z' * (i // 25) + chr(ord('a') + i % 25)


def _log_locations(phase: str, locations: List[FieldLocation]) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    for i, lp in enumerate(locations):
        logger.debug("%s %d: %s", phase, i, lp.debug_string())
