"""
Naming of field locations and their conversion into config fields.
"""

import hashlib
import logging
from datetime import datetime
from typing import Dict, List, Optional

from .dates import DateGuesser, SimpleDateGuesser
from .labeler import Labeler
from .locations import FieldLocation
from .models import CoveredDateParts, DateComponent, ElementLocation, Field
from .paths import TreePath

logger = logging.getLogger(__name__)

DATE_COMPONENT_PREFIX = "date-component"


def set_field_names(locations: List[FieldLocation], labeler: Optional[Labeler] = None) -> List[FieldLocation]:
    """
    Name every location. Without a labeler names are derived from the path
    hash and the locations are sorted by them, giving stable field names.
    """
    if labeler is None:
        for lp in locations:
            digest = hashlib.md5(str(lp.path).encode('utf-8')).hexdigest()
            lp.name = f"field-{digest}-{lp.attr}-{lp.text_index}"
        return sorted(locations, key=lambda lp: lp.name)

    seen: Dict[str, int] = {}
    for lp in locations:
        label = labeler.predict_label(lp.examples)
        if label.startswith(DATE_COMPONENT_PREFIX):
            lp.name = label
            continue
        n = seen.get(label, 0)
        seen[label] = n + 1
        lp.name = label if n == 0 else f"{label}-{n}"
    return locations


def field_type(lp: FieldLocation) -> str:
    if lp.name.startswith(DATE_COMPONENT_PREFIX):
        return "date"
    if lp.attr in ('href', 'src'):
        return "url"
    return "text"


def process_fields(
    locations: List[FieldLocation],
    root: TreePath,
    date_guesser: Optional[DateGuesser] = None
) -> List[Field]:
    """
    Turn root-relative locations into fields. All date component locations
    are merged into a single date field; the first detected language wins.
    """
    date_guesser = date_guesser or SimpleDateGuesser()
    date_field = Field(
        name="date",
        type="date",
        date_location=datetime.now().astimezone().tzname() or "",
    )
    fields: List[Field] = []

    for lp in locations:
        loc = ElementLocation(
            selector=str(lp.path[len(root):]),
            child_index=lp.text_index,
            attr=lp.attr,
        )
        ftype = field_type(lp)

        if ftype == "date":
            covers = CoveredDateParts.from_name(lp.name)
            layout, lang = date_guesser.guess(lp.examples, covers)
            date_field.components.append(DateComponent(
                covers=covers,
                location=loc,
                layout=[layout],
            ))
            if not date_field.date_language:
                date_field.date_language = lang
            continue

        fields.append(Field(
            name=lp.name,
            type=ftype,
            locations=[loc],
            can_be_empty=True,
        ))

    if date_field.components:
        fields.append(date_field)
    logger.debug("processed %d locations into %d fields", len(locations), len(fields))
    return fields
