"""
Pulls the recipe array out of free-form oracle text.

The candidate is the span from the first "[" to the last "]", inclusive.
This is not a balanced-bracket matcher and can over-capture trailing text.
"""

import json
import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from ..models.recipe import RecipeRecord

log = logging.getLogger(__name__)


class ExtractionError(Exception):
    """Oracle text could not be turned into recipes. Never retried."""

    kind = "extraction_failed"

    def __init__(self, message: str, raw: str, array_string: Optional[str] = None):
        super().__init__(message)
        self.raw = raw
        self.array_string = array_string

    def to_payload(self) -> dict:
        return {
            "error": "Parsing failed",
            "kind": self.kind,
            "raw": self.raw,
            "arrayString": self.array_string,
        }


class NoArrayDelimitersFound(ExtractionError):
    kind = "no_array_delimiters"


class MalformedJson(ExtractionError):
    kind = "malformed_json"


class SchemaViolation(ExtractionError):
    kind = "schema_violation"

    def __init__(self, message: str, raw: str, array_string: str, details: List[str]):
        super().__init__(message, raw, array_string)
        self.details = details

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["details"] = self.details
        return payload


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


class ResponseExtractor:
    open_token = "["
    close_token = "]"

    @classmethod
    def locate(cls, raw: str) -> Optional[str]:
        """Return the outermost bracketed span of ``raw``, or None."""
        first = raw.find(cls.open_token)
        last = raw.rfind(cls.close_token)
        if first == -1 or last == -1 or last < first:
            return None
        return raw[first:last + 1]

    @classmethod
    def extract(cls, raw: str, validate: bool = False) -> List[Any]:
        array_string = cls.locate(raw)
        if array_string is None:
            raise NoArrayDelimitersFound("No JSON array found in oracle reply", raw)

        try:
            parsed = json.loads(array_string, parse_constant=_reject_constant)
        except ValueError as e:
            raise MalformedJson(f"Invalid JSON array: {e}", raw, array_string) from e

        if not validate:
            return parsed
        return cls._validate(parsed, raw, array_string)

    @classmethod
    def _validate(cls, parsed: List[Any], raw: str, array_string: str) -> List[RecipeRecord]:
        records: List[RecipeRecord] = []
        details: List[str] = []
        seen_ids = set()

        for position, item in enumerate(parsed):
            try:
                record = RecipeRecord.model_validate(item, strict=True)
            except ValidationError as e:
                for err in e.errors():
                    loc = ".".join(str(part) for part in err["loc"]) or "<record>"
                    details.append(f"[{position}] {loc}: {err['msg']}")
                continue
            if record.id in seen_ids:
                details.append(f"[{position}] id: duplicate id {record.id}")
            seen_ids.add(record.id)
            records.append(record)

        if details:
            log.warning(f"Oracle reply violates recipe schema: {len(details)} problem(s)")
            raise SchemaViolation("Recipes do not match schema", raw, array_string, details)
        return records
