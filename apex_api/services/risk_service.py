from __future__ import annotations

from apex_api.models.schemas import UserProfile

MAX_RISK_SCORE = 100

# (exclusive upper age bound, points); first match wins.
AGE_BANDS: list[tuple[int, int]] = [(30, 20), (45, 35), (60, 55)]
OLDEST_AGE_POINTS = 70

LIFESTYLE_POINTS: dict[str, int] = {"Sedentary": 20, "Moderate": 10, "Active": 5}
LOW_EXERCISE_LEVELS = {"Never", "Rarely"}
LOW_EXERCISE_POINTS = 15
SMOKER_POINTS = 25
DNA_RISK_POINTS = 5
FAMILY_HISTORY_POINTS = 8


def _age_points(age: int) -> int:
    for upper_bound, points in AGE_BANDS:
        if age < upper_bound:
            return points
    return OLDEST_AGE_POINTS


def compute_risk(profile: UserProfile) -> int:
    """Reduce a profile to a single 0-100 risk value by additive points."""
    risk = _age_points(profile.age)
    risk += LIFESTYLE_POINTS.get(profile.lifestyle, 0)
    if profile.exercise_frequency in LOW_EXERCISE_LEVELS:
        risk += LOW_EXERCISE_POINTS
    if profile.smoking_status == "Yes":
        risk += SMOKER_POINTS
    risk += len(profile.dna_risks) * DNA_RISK_POINTS
    risk += len(profile.family_history) * FAMILY_HISTORY_POINTS
    return min(risk, MAX_RISK_SCORE)
