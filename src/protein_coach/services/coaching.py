"""Coaching scenario rules and deterministic fallback coaching."""

import logging
import math

from protein_coach.domain.coaching import (
    Coaching,
    CoachingFocus,
    CoachingScenario,
    CoachingText,
)
from protein_coach.domain.estimate import (
    COACHING_MAX_CHARS,
    MealEstimate,
    clamp_text,
    round_half_up,
)
from protein_coach.domain.meals import Confidence, MealType

_logger = logging.getLogger(__name__)

LOW_PROTEIN_THRESHOLD_G = 20
HIGH_PROTEIN_THRESHOLD_G = 35

NEXT_TIME_PREFIX = "next time,"

_LOW_PROTEIN_BY_MEAL_TYPE: dict[MealType, tuple[CoachingScenario, CoachingFocus]] = {
    MealType.BREAKFAST: (CoachingScenario.LOW_PROTEIN_BREAKFAST, CoachingFocus.PROTEIN),
    MealType.LUNCH: (CoachingScenario.LOW_PROTEIN_LUNCH, CoachingFocus.PROTEIN),
    MealType.DINNER: (CoachingScenario.LOW_PROTEIN_DINNER, CoachingFocus.PROTEIN),
    MealType.SNACK: (CoachingScenario.LOW_PROTEIN_SNACK, CoachingFocus.SNACK),
}

_FALLBACK_TEXT: dict[CoachingScenario, CoachingText] = {
    CoachingScenario.LOW_PROTEIN_BREAKFAST: CoachingText(
        five_min_fix=(
            "Add a quick protein side like Greek yoghurt, eggs, "
            "or a protein milk/latte."
        ),
        next_time_tweak=(
            "Next time, start breakfast with a protein base "
            "(eggs, yoghurt bowl, or a shake) then add carbs."
        ),
        reason="Breakfast looks low on protein, so a simple add-on helps immediately.",
    ),
    CoachingScenario.LOW_PROTEIN_LUNCH: CoachingText(
        five_min_fix=(
            "Add a quick protein side like tinned tuna/salmon, leftover chicken, "
            "or a tub of Greek yoghurt."
        ),
        next_time_tweak=(
            "Next time, add one planned protein item to this lunch "
            "(chicken, tuna, eggs, or tofu)."
        ),
        reason="Lunch looks low on protein; a fast add-on is the quickest win.",
    ),
    CoachingScenario.LOW_PROTEIN_DINNER: CoachingText(
        five_min_fix=(
            "Add a protein anchor now: extra meat/fish, eggs, tofu, "
            "or a quick yoghurt-based side."
        ),
        next_time_tweak=(
            "Next time, add one planned protein portion to this dinner "
            "so it lands stronger."
        ),
        reason="Dinner looks low on protein; anchoring the meal makes it simple.",
    ),
    CoachingScenario.LOW_PROTEIN_SNACK: CoachingText(
        five_min_fix=(
            "Swap or add a protein snack: yoghurt, cheese, boiled eggs, "
            "jerky, or a shake."
        ),
        next_time_tweak=(
            "Next time, keep one grab-and-go protein snack stocked "
            "so it’s effortless."
        ),
        reason="Snack looks low on protein; a quick swap improves satiety fast.",
    ),
    CoachingScenario.MEDIUM_PROTEIN: CoachingText(
        five_min_fix=(
            "Add a small protein top-up now: yoghurt, a slice of cheese, "
            "an egg, or tinned fish."
        ),
        next_time_tweak=(
            "Next time, add one planned protein item so you don’t have to "
            "‘fix it’ later."
        ),
        reason="Protein is mid-range; one small add-on usually gets it over the line.",
    ),
}

_DEFAULT_FALLBACK = CoachingText(
    five_min_fix=(
        "Add something protein-y now if you can: yoghurt, eggs, tinned fish, "
        "leftover meat, or a shake."
    ),
    next_time_tweak=(
        "Next time, add one planned protein item to this meal so it’s more filling."
    ),
    reason="The meal is unclear, so the safest coaching is a simple protein add-on.",
)


def classify_scenario(
    protein_grams: float | None,
    confidence: Confidence,
    meal_type: MealType | None,
) -> tuple[CoachingScenario, CoachingFocus]:
    """Map an estimate to a coaching scenario and focus."""
    if (
        confidence == Confidence.LOW
        or protein_grams is None
        or not math.isfinite(protein_grams)
    ):
        return CoachingScenario.UNKNOWN_MEAL, CoachingFocus.PROTEIN

    if protein_grams >= HIGH_PROTEIN_THRESHOLD_G:
        return CoachingScenario.HIGH_PROTEIN, CoachingFocus.PROTEIN
    if protein_grams >= LOW_PROTEIN_THRESHOLD_G:
        return CoachingScenario.MEDIUM_PROTEIN, CoachingFocus.PROTEIN

    if meal_type is not None and meal_type in _LOW_PROTEIN_BY_MEAL_TYPE:
        return _LOW_PROTEIN_BY_MEAL_TYPE[meal_type]
    return CoachingScenario.UNKNOWN_MEAL, CoachingFocus.PROTEIN


def fallback_coaching(scenario: str, protein_grams: float) -> CoachingText:
    """Return canned coaching for a scenario; never fails."""
    if scenario == CoachingScenario.HIGH_PROTEIN:
        grams = round_half_up(protein_grams) if math.isfinite(protein_grams) else 0
        return CoachingText(
            five_min_fix=(
                "Nice — this is already protein-forward. If you’re still hungry, "
                "add fruit or veg on the side."
            ),
            next_time_tweak=(
                "Next time, keep the same protein portion and add one veg/plant "
                "side you enjoy."
            ),
            reason=(
                f"Protein is already strong (~{grams}g), so the win is consistency."
            ),
        )
    return _FALLBACK_TEXT.get(scenario, _DEFAULT_FALLBACK)


def model_coaching_acceptable(estimate: MealEstimate) -> bool:
    """Return True when the model's coaching meets the structural contract."""
    draft = estimate.coaching
    return (
        estimate.confidence != Confidence.LOW
        and bool(draft.five_min_fix)
        and bool(draft.next_time_tweak)
        and bool(draft.reason)
        and draft.next_time_tweak.lower().startswith(NEXT_TIME_PREFIX)
    )


def choose_coaching(
    estimate: MealEstimate,
    meal_type: MealType | None,
    *,
    allow_model_coaching: bool = True,
) -> Coaching:
    """Classify the meal and pick model or fallback coaching text."""
    scenario, focus = classify_scenario(
        estimate.protein_grams, estimate.confidence, meal_type
    )
    from_model = allow_model_coaching and model_coaching_acceptable(estimate)
    if from_model:
        draft = estimate.coaching
        text = CoachingText(
            five_min_fix=draft.five_min_fix,
            next_time_tweak=draft.next_time_tweak,
            reason=draft.reason,
        )
    else:
        text = fallback_coaching(scenario, estimate.protein_grams)
    _logger.info(
        "Coaching chosen: scenario=%s focus=%s source=%s",
        scenario,
        focus,
        "model" if from_model else "fallback",
    )
    return Coaching(
        scenario_id=scenario,
        focus=focus,
        five_min_fix=clamp_text(text.five_min_fix, COACHING_MAX_CHARS),
        next_time_tweak=clamp_text(text.next_time_tweak, COACHING_MAX_CHARS),
        reason=clamp_text(text.reason, COACHING_MAX_CHARS),
        from_model=from_model,
    )
