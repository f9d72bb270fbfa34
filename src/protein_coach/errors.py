"""Error taxonomy for the meal analysis pipeline."""


class MealPipelineError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500


class BadRequest(MealPipelineError):
    """Required input is missing or unparseable."""

    status_code = 400


class StorageError(MealPipelineError):
    """Signed URL creation, upload or image fetch failed."""


class InferenceError(MealPipelineError):
    """The inference call failed or returned a non-success status."""


class MalformedModelOutput(MealPipelineError):
    """The model response could not be parsed as a JSON object."""

    def __init__(self, raw_text: str) -> None:
        super().__init__(f'Model did not return valid JSON: "{raw_text}"')
        self.raw_text = raw_text


class InvalidProteinEstimate(MealPipelineError):
    """The protein estimate is non-numeric or outside the allowed range."""

    def __init__(self, value: object, raw_text: str | None = None) -> None:
        super().__init__(f"Bad protein_grams from model: {value!r}")
        self.value = value
        self.raw_text = raw_text


class PersistenceError(MealPipelineError):
    """A datastore insert, select or upsert failed."""
