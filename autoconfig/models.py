from typing import Dict, List, Optional, Any
from pathlib import Path
from pydantic import BaseModel, Field as PydanticField, field_validator


class ConfigOptions(BaseModel):
    """Options for one config generation run."""
    input_url: str = ""
    only_varying: bool = PydanticField(
        False,
        description="Drop fields whose examples are all identical"
    )
    url_required: bool = PydanticField(
        False,
        description="Reject configs without a link to a subpage"
    )
    min_occurrences: List[int] = PydanticField(
        default_factory=lambda: [5, 10, 20],
        description="Minimum number of occurrences of a field, one run per value"
    )
    shorten_root: bool = False
    abort_on_validation_error: bool = True
    html_output_dir: Optional[Path] = None

    @field_validator('min_occurrences')
    @classmethod
    def validate_min_occurrences(cls, v):
        if not v:
            raise ValueError("At least one minimum occurrence must be specified")
        if any(m < 1 for m in v):
            raise ValueError("Minimum occurrences must be positive")
        return v


class ElementLocation(BaseModel):
    """Where to find a field value relative to an item element."""
    selector: str = ""
    child_index: int = 0
    attr: str = ""


class CoveredDateParts(BaseModel):
    day: bool = False
    month: bool = False
    year: bool = False
    time: bool = False

    @classmethod
    def from_name(cls, name: str) -> 'CoveredDateParts':
        return cls(
            day='day' in name,
            month='month' in name,
            year='year' in name,
            time='time' in name,
        )


class DateComponent(BaseModel):
    """One piece of a date spread over several elements."""
    covers: CoveredDateParts
    location: ElementLocation
    layout: List[str] = PydanticField(default_factory=list)


class Field(BaseModel):
    """A dynamic field of an item: text, url or date."""
    name: str
    type: str = "text"
    locations: List[ElementLocation] = PydanticField(default_factory=list)
    can_be_empty: bool = True
    components: List[DateComponent] = PydanticField(default_factory=list)
    date_location: str = ""
    date_language: str = ""


class ScraperConfig(BaseModel):
    """A declarative config the item parser replays against a page."""
    name: str = ""
    url: str = ""
    item: str
    fields: List[Field] = PydanticField(default_factory=list)

    def subpage_url_fields(self) -> List[Field]:
        return [
            f for f in self.fields
            if f.type == "url" and f.locations and f.locations[0].attr == "href"
        ]


class OutputRecord(BaseModel):
    """A single extracted item."""
    data: Dict[str, Any]


class ConfigCandidate(BaseModel):
    """A generated config together with the items it extracted."""
    id: str
    config: ScraperConfig
    records: List[OutputRecord]

    @property
    def total_fields(self) -> int:
        return sum(
            1 for r in self.records for v in r.data.values() if v not in (None, "")
        )

    @property
    def as_dicts(self) -> List[Dict[str, Any]]:
        return [r.data for r in self.records]
