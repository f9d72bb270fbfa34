"""Tests for coaching classification and fallbacks."""

import pytest

from protein_coach.domain.coaching import CoachingFocus, CoachingScenario
from protein_coach.domain.estimate import MealEstimate
from protein_coach.domain.meals import Confidence, MealType
from protein_coach.services.coaching import (
    choose_coaching,
    classify_scenario,
    fallback_coaching,
    model_coaching_acceptable,
)
from tests.conftest import model_output


@pytest.mark.parametrize(
    ("grams", "confidence", "meal_type", "expected"),
    [
        (
            10,
            Confidence.HIGH,
            MealType.SNACK,
            (CoachingScenario.LOW_PROTEIN_SNACK, CoachingFocus.SNACK),
        ),
        (
            19,
            Confidence.MEDIUM,
            MealType.BREAKFAST,
            (CoachingScenario.LOW_PROTEIN_BREAKFAST, CoachingFocus.PROTEIN),
        ),
        (
            5,
            Confidence.MEDIUM,
            MealType.LUNCH,
            (CoachingScenario.LOW_PROTEIN_LUNCH, CoachingFocus.PROTEIN),
        ),
        (
            0,
            Confidence.HIGH,
            MealType.DINNER,
            (CoachingScenario.LOW_PROTEIN_DINNER, CoachingFocus.PROTEIN),
        ),
        (
            25,
            Confidence.MEDIUM,
            MealType.LUNCH,
            (CoachingScenario.MEDIUM_PROTEIN, CoachingFocus.PROTEIN),
        ),
        (
            20,
            Confidence.HIGH,
            None,
            (CoachingScenario.MEDIUM_PROTEIN, CoachingFocus.PROTEIN),
        ),
        (
            35,
            Confidence.HIGH,
            MealType.SNACK,
            (CoachingScenario.HIGH_PROTEIN, CoachingFocus.PROTEIN),
        ),
        (
            40,
            Confidence.HIGH,
            MealType.DINNER,
            (CoachingScenario.HIGH_PROTEIN, CoachingFocus.PROTEIN),
        ),
        (
            40,
            Confidence.LOW,
            MealType.DINNER,
            (CoachingScenario.UNKNOWN_MEAL, CoachingFocus.PROTEIN),
        ),
        (
            12,
            Confidence.HIGH,
            None,
            (CoachingScenario.UNKNOWN_MEAL, CoachingFocus.PROTEIN),
        ),
        (
            None,
            Confidence.HIGH,
            MealType.LUNCH,
            (CoachingScenario.UNKNOWN_MEAL, CoachingFocus.PROTEIN),
        ),
        (
            float("nan"),
            Confidence.HIGH,
            MealType.LUNCH,
            (CoachingScenario.UNKNOWN_MEAL, CoachingFocus.PROTEIN),
        ),
    ],
)
def test_classify_scenario(
    grams: float | None,
    confidence: Confidence,
    meal_type: MealType | None,
    expected: tuple[CoachingScenario, CoachingFocus],
) -> None:
    assert classify_scenario(grams, confidence, meal_type) == expected


@pytest.mark.parametrize("scenario", [*CoachingScenario, "SOMETHING_NEW", ""])
def test_fallback_coaching_is_never_empty(scenario: str) -> None:
    text = fallback_coaching(scenario, 22)

    assert text.five_min_fix
    assert text.next_time_tweak.startswith("Next time,")
    assert text.reason


def test_high_protein_fallback_mentions_rounded_grams() -> None:
    text = fallback_coaching(CoachingScenario.HIGH_PROTEIN, 41.5)

    assert "~42g" in text.reason


def test_unknown_tag_uses_unclear_meal_text() -> None:
    unknown = fallback_coaching("SOMETHING_NEW", 10)
    unclear = fallback_coaching(CoachingScenario.UNKNOWN_MEAL, 10)

    assert unknown == unclear
    assert "unclear" in unknown.reason


def test_model_coaching_is_accepted_when_well_formed() -> None:
    estimate = MealEstimate.model_validate(model_output())

    coaching = choose_coaching(estimate, MealType.BREAKFAST)

    assert coaching.from_model is True
    assert coaching.scenario_id == CoachingScenario.MEDIUM_PROTEIN
    assert coaching.five_min_fix.startswith("Add a handful")
    assert coaching.next_time_tweak.startswith("Next time,")


def test_low_confidence_uses_fallback_even_with_model_text() -> None:
    estimate = MealEstimate.model_validate(
        model_output(confidence="low", protein_grams=40)
    )

    coaching = choose_coaching(estimate, MealType.DINNER)

    assert coaching.from_model is False
    assert coaching.scenario_id == CoachingScenario.UNKNOWN_MEAL
    expected = fallback_coaching(CoachingScenario.UNKNOWN_MEAL, 40)
    assert coaching.reason == expected.reason


def test_tweak_without_next_time_prefix_is_rejected() -> None:
    estimate = MealEstimate.model_validate(
        model_output(
            protein_grams=12,
            coaching={
                "five_min_fix": "Add a boiled egg.",
                "next_time_tweak": "Use seeded bread instead.",
                "reason": "Bread dominates.",
            },
        )
    )

    coaching = choose_coaching(estimate, MealType.SNACK)

    assert model_coaching_acceptable(estimate) is False
    assert coaching.scenario_id == CoachingScenario.LOW_PROTEIN_SNACK
    assert coaching.focus == CoachingFocus.SNACK
    assert coaching.five_min_fix.startswith("Swap or add a protein snack")


def test_prefix_check_is_case_insensitive() -> None:
    estimate = MealEstimate.model_validate(
        model_output(
            coaching={
                "five_min_fix": "Add cheese.",
                "next_time_tweak": "NEXT TIME, add chickpeas to the salad.",
                "reason": "Salad is light on protein.",
            }
        )
    )

    assert model_coaching_acceptable(estimate) is True


def test_missing_reason_is_rejected() -> None:
    estimate = MealEstimate.model_validate(
        model_output(
            coaching={
                "five_min_fix": "Add cheese.",
                "next_time_tweak": "Next time, add chickpeas.",
            }
        )
    )

    assert model_coaching_acceptable(estimate) is False


def test_model_coaching_can_be_disabled() -> None:
    estimate = MealEstimate.model_validate(model_output(protein_grams=50))

    coaching = choose_coaching(estimate, MealType.LUNCH, allow_model_coaching=False)

    assert coaching.from_model is False
    assert coaching.scenario_id == CoachingScenario.HIGH_PROTEIN
    assert "~50g" in coaching.reason


def test_chosen_coaching_fits_display_limit() -> None:
    for scenario in CoachingScenario:
        text = fallback_coaching(scenario, 500)
        assert len(text.five_min_fix) <= 220
        assert len(text.next_time_tweak) <= 220
        assert len(text.reason) <= 220
