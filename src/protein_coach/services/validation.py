"""Narrowing of raw model text into a validated meal estimate."""

import json

from pydantic import ValidationError

from protein_coach.domain.estimate import MealEstimate
from protein_coach.errors import InvalidProteinEstimate, MalformedModelOutput


def parse_model_output(raw_text: str) -> MealEstimate:
    """Parse the model's JSON text and validate it into a ``MealEstimate``.

    Raises ``MalformedModelOutput`` when the text is not a JSON object, including
    integer literals too long to decode, and ``InvalidProteinEstimate`` when
    the protein estimate cannot be trusted.
    Every other field is coerced to a safe default instead of failing.
    """
    text = (raw_text or "").strip()
    try:
        parsed = json.loads(text)
    except ValueError as exc:
        raise MalformedModelOutput(raw_text) from exc
    if not isinstance(parsed, dict):
        raise MalformedModelOutput(raw_text)

    try:
        return MealEstimate.model_validate(parsed)
    except ValidationError as exc:
        raise InvalidProteinEstimate(parsed.get("protein_grams"), raw_text) from exc
