from typing import List, Optional


class AutoconfigError(Exception):
    """Base class for all config generation errors."""


class InputError(AutoconfigError):
    """The page could not be fetched or read."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        if url:
            message = f"{message} (url: {url})"
        super().__init__(message)


class NoFieldsFoundError(AutoconfigError):
    """No field location survived filtering for any minimum occurrence."""

    def __init__(self, url: str, min_occurrences: List[int]):
        self.url = url
        self.min_occurrences = min_occurrences
        super().__init__(
            f"no fields found on {url or '<html>'} for minimum occurrences {min_occurrences}"
        )


class NoFieldsSelectedError(AutoconfigError):
    """The field selection step returned no fields."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"no fields selected for {url or '<html>'}")


class CandidateValidationError(AutoconfigError):
    """The item parser failed on a generated config."""

    def __init__(self, candidate_id: str, item_selector: str, cause: Exception):
        self.candidate_id = candidate_id
        self.item_selector = item_selector
        super().__init__(
            f"validating config {candidate_id} with item selector {item_selector!r} failed: {cause}"
        )


class LabelerError(AutoconfigError):
    """The labeler could not name a field."""

    def __init__(self, message: str, examples: List[str]):
        self.examples = examples
        preview = ", ".join(repr(e) for e in examples[:3])
        super().__init__(f"{message} (examples: {preview})")
