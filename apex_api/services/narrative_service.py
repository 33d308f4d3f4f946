"""Rule tables that turn a scored profile into display text.

Every table is an ordered list of ``(predicate, template)`` pairs. ``first_match``
returns the first template whose predicate holds, ``all_matches`` returns every
one in table order. Templates are ``str.format`` strings rendered against a
small context built from the profile.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from apex_api.models.schemas import InsurancePlan, UserProfile

Rule = tuple[Callable[[Any], bool], str]

LOW_EXERCISE_LEVELS = {"Never", "Rarely"}


def first_match(rules: Iterable[Rule], subject: Any) -> Optional[str]:
    for predicate, template in rules:
        if predicate(subject):
            return template
    return None


def all_matches(rules: Iterable[Rule], subject: Any) -> list[str]:
    return [template for predicate, template in rules if predicate(subject)]


# ---------------------------------------------------------------------------
# Per-plan reasoning
# ---------------------------------------------------------------------------

# Subject: (match_score, profile, plan)
REASONING_HEADLINES: list[Rule] = [
    (lambda s: s[0] > 85, "Excellent match for your profile"),
    (lambda s: s[0] > 75, "Strong fit for your needs"),
    (lambda s: True, "Good coverage option"),
]

REASONING_FRAGMENTS: list[Rule] = [
    (lambda s: s[1].age < 35 and s[2].type == "Health", "great value at your age"),
    (
        lambda s: s[1].lifestyle == "Active" and s[2].type in {"Sports", "Travel"},
        "perfect for your active lifestyle",
    ),
    (lambda s: s[1].smoking_status == "No", "non-smoker benefits"),
    (lambda s: s[2].base_price < s[1].budget * 0.3, "highly affordable"),
]


def build_reasoning(match_score: int, profile: UserProfile, plan: InsurancePlan) -> str:
    subject = (match_score, profile, plan)
    parts = [first_match(REASONING_HEADLINES, subject) or ""]
    parts.extend(all_matches(REASONING_FRAGMENTS, subject))
    return ", ".join(parts)


# ---------------------------------------------------------------------------
# Bundle narrative
# ---------------------------------------------------------------------------

# Subject: (profile, risk_value)
ANALYSIS_SMOKING: list[Rule] = [
    (
        lambda s: s[0].smoking_status == "No",
        "your non-smoking status provides excellent rate advantages",
    ),
    (lambda s: True, "smoking is factored into your premiums"),
]

ANALYSIS_EXERCISE: list[Rule] = [
    (
        lambda s: s[0].exercise_frequency == "Often",
        "active lifestyle qualifies for wellness incentives",
    ),
]

ANALYSIS_RISK_TIERS: list[Rule] = [
    (lambda s: s[1] < 40, "you have a favorable risk profile with maximum savings potential"),
    (lambda s: s[1] < 65, "we've balanced comprehensive coverage with competitive pricing"),
    (lambda s: True, "we recommend comprehensive coverage with preventive care focus"),
]

RISK_FACTOR_RULES: list[Rule] = [
    (lambda s: s[0].age > 45, "Age-related health considerations"),
    (lambda s: s[0].smoking_status == "Yes", "Smoking: Significant premium impact"),
    (lambda s: s[0].lifestyle == "Sedentary", "Sedentary lifestyle impacts"),
    (lambda s: s[0].exercise_frequency in LOW_EXERCISE_LEVELS, "Limited physical activity"),
    (lambda s: bool(s[0].dna_risks), "Genetic predispositions: {dna_preview}"),
    (lambda s: bool(s[0].family_history), "Family medical history considerations"),
    (
        lambda s: s[0].has_car and not s[0].has_car_insurance,
        "⚠️ Uninsured vehicle - immediate coverage needed",
    ),
]
DEFAULT_RISK_FACTOR = "Standard risk profile"

SAVINGS_TIP_RULES: list[Rule] = [
    (
        lambda s: s[0].smoking_status == "Yes",
        "💰 Quit smoking to save 30-50% on health and life insurance",
    ),
    (lambda s: s[1] > 50, "Regular health screenings can help reduce long-term insurance costs"),
    (
        lambda s: s[0].lifestyle != "Active",
        "Increasing physical activity can lead to better rates and overall health",
    ),
    (
        lambda s: s[0].exercise_frequency in LOW_EXERCISE_LEVELS,
        "Exercise 3-4 times per week to potentially qualify for wellness discounts",
    ),
    (lambda s: len(set(s[0].selected_types)) >= 3, "📦 Bundle multiple insurance types to save 15-25%"),
    (
        lambda s: s[0].travel_frequency == "6+",
        "✈️ Annual travel insurance saves 40-60% vs per-trip coverage",
    ),
]
GENERIC_SAVINGS_TIPS = [
    "Bundling multiple insurance types can save 10-15%",
    "Annual payment plans often offer 5-8% savings vs monthly payments",
]


def _context(profile: UserProfile) -> dict[str, Any]:
    return {
        "dna_preview": ", ".join(profile.dna_risks[:2]),
    }


def overall_analysis(profile: UserProfile, risk_value: int) -> str:
    subject = (profile, risk_value)
    parts = [f"Based on your {profile.age}-year profile"]
    parts.append(first_match(ANALYSIS_SMOKING, subject) or "")
    parts.extend(all_matches(ANALYSIS_EXERCISE, subject))
    parts.append(first_match(ANALYSIS_RISK_TIERS, subject) or "")
    return ". ".join(parts) + "."


def risk_factors(profile: UserProfile, risk_value: int) -> list[str]:
    context = _context(profile)
    factors = [t.format(**context) for t in all_matches(RISK_FACTOR_RULES, (profile, risk_value))]
    return factors or [DEFAULT_RISK_FACTOR]


def savings_tips(profile: UserProfile, risk_value: int) -> list[str]:
    tips = all_matches(SAVINGS_TIP_RULES, (profile, risk_value))
    return tips + list(GENERIC_SAVINGS_TIPS)
