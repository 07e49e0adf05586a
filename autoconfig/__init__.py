"""
Automatic scraper config generation from the repeated structure of HTML pages.
"""

from .models import (
    ConfigCandidate,
    ConfigOptions,
    DateComponent,
    ElementLocation,
    Field,
    OutputRecord,
    ScraperConfig,
)
from .paths import Node, TreePath
from .locations import FieldLocation, squash_locations
from .analyzer import Analyzer, analyze
from .clusters import find_clusters, find_shared_root_selector, shorten_root_selector
from .parser import ItemParser
from .core import ConfigGenerator
from .errors import (
    AutoconfigError,
    CandidateValidationError,
    InputError,
    LabelerError,
    NoFieldsFoundError,
    NoFieldsSelectedError,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigCandidate",
    "ConfigOptions",
    "DateComponent",
    "ElementLocation",
    "Field",
    "OutputRecord",
    "ScraperConfig",
    "Node",
    "TreePath",
    "FieldLocation",
    "squash_locations",
    "Analyzer",
    "analyze",
    "find_clusters",
    "find_shared_root_selector",
    "shorten_root_selector",
    "ItemParser",
    "ConfigGenerator",
    "AutoconfigError",
    "CandidateValidationError",
    "InputError",
    "LabelerError",
    "NoFieldsFoundError",
    "NoFieldsSelectedError",
]
