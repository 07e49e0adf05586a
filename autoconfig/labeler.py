import json
import os
import time
from typing import List, Optional, Protocol
import httpx
from dotenv import load_dotenv
from .errors import LabelerError

load_dotenv()

LABELS = [
    "title",
    "description",
    "url",
    "location",
    "price",
    "comment",
    "date-component-day",
    "date-component-month",
    "date-component-year",
    "date-component-time",
    "date-component-day-month",
    "date-component-month-year",
    "date-component-day-month-year",
    "date-component-day-month-time",
    "date-component-day-month-year-time",
]


class Labeler(Protocol):
    def predict_label(self, examples: List[str]) -> str:
        """Return a field name for the example values of one field."""
        ...


class LLMFieldLabeler:
    """Uses an OpenAI chat model to name a field from its example values."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        max_examples: int = 10,
        client: Optional[httpx.Client] = None
    ):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")
        self.base_url = "https://api.openai.com/v1/chat/completions"
        self.model = model
        self.max_examples = max_examples
        self.client = client or httpx.Client(timeout=60.0)
        self._owns_client = client is None

    def close(self) -> None:
        """Close the HTTP client unless it was passed in by the caller."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "LLMFieldLabeler":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def predict_label(self, examples: List[str]) -> str:
        """Ask the model for one of LABELS, retrying on rate limits."""
        max_retries = 5
        base_delay = 2

        for attempt in range(max_retries):
            try:
                response = self.client.post(
                    self.base_url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json"
                    },
                    json={
                        "model": self.model,
                        "messages": [
                            {
                                "role": "system",
                                "content": "You classify values scraped from repeated items of a web page. "
                                           "Answer with a JSON object {\"label\": ...} using exactly one of the "
                                           "allowed labels."
                            },
                            {
                                "role": "user",
                                "content": self._build_prompt(examples)
                            }
                        ],
                        "temperature": 0,
                        "response_format": {"type": "json_object"}
                    }
                )
                response.raise_for_status()
                break
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 429 and attempt < max_retries - 1:
                    time.sleep(base_delay * (2 ** attempt))
                    continue
                raise LabelerError(f"labeling request failed: {e}", examples) from e
            except httpx.HTTPError as e:
                raise LabelerError(f"labeling request failed: {e}", examples) from e

        try:
            content = response.json()["choices"][0]["message"]["content"]
            label = json.loads(content)["label"]
        except (KeyError, IndexError, ValueError) as e:
            raise LabelerError(f"unexpected labeling response: {e}", examples) from e
        if label not in LABELS:
            raise LabelerError(f"unknown label {label!r}", examples)
        return label

    def _build_prompt(self, examples: List[str]) -> str:
        values = "\n".join(f"- {ex[:120]}" for ex in examples[:self.max_examples])
        labels = ", ".join(LABELS)
        return f"""VALUES:
{values}

ALLOWED LABELS: {labels}

Date parts spread over several elements use the date-component-* labels, naming
exactly the parts (day, month, year, time) the values contain."""
