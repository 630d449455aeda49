"""Activity vocabulary.

Declarative lookup tables only. Extend the vocabulary here; the matching
code in :mod:`fitmemory.extraction` never needs to change. All triggers are
lower-case and matched as substrings of the lower-cased text.
"""

from __future__ import annotations

import re

# ── workout types: label → trigger phrases ──────────────────────────

WORKOUT_TYPES: dict[str, tuple[str, ...]] = {
    "leg day": ("leg day",),
    "arm day": ("arm day",),
    "push day": ("push day",),
    "pull day": ("pull day",),
    "chest day": ("chest day",),
    "back day": ("back day",),
    "upper body": ("upper body",),
    "lower body": ("lower body",),
    "full body": ("full body",),
    "cardio": ("cardio", "treadmill", "elliptical"),
    "hiit": ("hiit",),
    "crossfit": ("crossfit",),
    "powerlifting": ("powerlifting",),
    "bodybuilding": ("bodybuilding",),
}

# ── muscle groups: label → trigger substrings ───────────────────────

MUSCLE_GROUPS: dict[str, tuple[str, ...]] = {
    "chest": ("chest", "pecs", "pectorals", "bench"),
    "back": ("back", "lats", "latissimus", "rows", "pullups", "deadlift"),
    "shoulders": ("shoulders", "delts", "deltoids", "press", "raise"),
    "arms": ("arms", "biceps", "triceps", "curls", "extensions"),
    "legs": ("legs", "quads", "hamstrings", "calves", "squats", "lunges"),
    "core": ("core", "abs", "abdominals", "planks", "crunches"),
    "glutes": ("glutes", "butt", "hip thrusts", "bridges"),
}

# ── exercises ───────────────────────────────────────────────────────

# Multi-word names are matched before single words so "leg press" is kept
# whole; the single word "press" is still reported alongside it.
COMPOUND_EXERCISES: tuple[str, ...] = (
    "bench press",
    "leg press",
    "incline press",
    "decline press",
    "overhead press",
    "shoulder press",
    "barbell row",
    "dumbbell row",
    "lat pulldown",
    "pull down",
    "hip thrust",
)

EXERCISE_NAMES: tuple[str, ...] = (
    "bench",
    "squat",
    "deadlift",
    "curl",
    "press",
    "row",
    "raise",
    "extension",
    "fly",
    "dip",
    "pullup",
    "pushup",
    "plank",
    "lunge",
    "crunch",
)

QUANTITY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b\d+\s*(?:reps?|repetitions?)\b", re.IGNORECASE),
    re.compile(r"\b\d+\s*sets?\b", re.IGNORECASE),
    re.compile(r"\b\d+(?:\.\d+)?\s*(?:lbs?|pounds?|kgs?|kilograms?)\b", re.IGNORECASE),
    re.compile(r"\b\d+\s*[x×]\s*\d+\b", re.IGNORECASE),    # 4x8 sets-by-reps
)

# ── activity detection ──────────────────────────────────────────────

GENERAL_KEYWORDS: tuple[str, ...] = (
    "workout", "exercise", "training", "gym", "fitness", "lift", "lifting",
    "rep", "reps", "set", "sets", "weight", "weights", "cardio", "strength",
)

EQUIPMENT_KEYWORDS: tuple[str, ...] = (
    "dumbbell", "barbell", "kettlebell", "machine", "cable", "treadmill",
    "bike", "elliptical", "smith machine",
)

MUSCLE_KEYWORDS: tuple[str, ...] = (
    "chest", "back", "shoulders", "arms", "legs", "core", "abs", "glutes",
    "biceps", "triceps", "quads", "hamstrings", "calves", "lats", "delts",
)


def _activity_keywords() -> tuple[str, ...]:
    words: list[str] = [*GENERAL_KEYWORDS, *EQUIPMENT_KEYWORDS, *MUSCLE_KEYWORDS]
    for triggers in (*WORKOUT_TYPES.values(), *MUSCLE_GROUPS.values()):
        words.extend(triggers)
    words.extend(COMPOUND_EXERCISES)
    words.extend(EXERCISE_NAMES)
    return tuple(dict.fromkeys(words))


# Every substring that marks text as activity-bearing.
ACTIVITY_KEYWORDS: tuple[str, ...] = _activity_keywords()
