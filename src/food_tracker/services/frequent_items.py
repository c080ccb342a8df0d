"""Frequent item suggestions built by clustering similar food entries.

Entries are grouped in a single greedy pass. Each entry joins the first cluster
whose seed entry has a similar name (Jaccard index over word tokens) and
similar calories and protein. Clusters are compared against their seed only,
never against a running average, so the output depends on input order but is
fully deterministic.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date

from food_tracker.domain.entries import FrequentItemCluster, NutritionRecord
from food_tracker.errors import ValidationError

STOP_WORDS: frozenset[str] = frozenset(
    {"a", "an", "the", "of", "with", "and", "or", "in", "on", "at", "to", "for"}
)
MIN_WORD_LENGTH = 3
NUTRITION_TOLERANCE = 0.15
DEFAULT_MIN_OCCURRENCES = 2
DEFAULT_MAX_ITEMS = 8
DEFAULT_SIMILARITY_THRESHOLD = 0.6


def tokenize(name: str, stop_words: Iterable[str] = STOP_WORDS) -> frozenset[str]:
    """Return the set of significant lowercase words in a food name."""
    excluded = set(stop_words)
    return frozenset(
        word
        for word in name.lower().split()
        if word not in excluded and len(word) >= MIN_WORD_LENGTH
    )


def name_similarity(
    first: str, second: str, stop_words: Iterable[str] = STOP_WORDS
) -> float:
    """Return the Jaccard index of two names' word sets."""
    words_first = tokenize(first, stop_words)
    words_second = tokenize(second, stop_words)
    union = words_first | words_second
    if not union:
        return 0.0
    return len(words_first & words_second) / len(union)


def nutritionally_similar(
    entry: NutritionRecord,
    representative: NutritionRecord,
    tolerance: float = NUTRITION_TOLERANCE,
) -> bool:
    """Return True when calories and protein are both within tolerance.

    Calories are compared relative to the larger of the two values; protein
    relative to the candidate entry's protein, floored at one gram. Two
    zero-calorie entries have no meaningful ratio and are never similar.
    """
    calorie_base = max(entry.calories, representative.calories)
    if calorie_base == 0:
        return False
    calorie_diff = abs(entry.calories - representative.calories) / calorie_base
    protein_diff = abs(entry.protein - representative.protein) / max(
        entry.protein, 1
    )
    return calorie_diff < tolerance and protein_diff < tolerance


@dataclass
class _Cluster:
    seed: NutritionRecord
    members: list[NutritionRecord] = field(default_factory=list)

    def finalize(self) -> FrequentItemCluster:
        count = len(self.members)
        return FrequentItemCluster(
            representative_name=self.seed.name,
            average_calories=round_half_up(
                sum(member.calories for member in self.members) / count
            ),
            average_protein=round_half_up(
                sum(member.protein for member in self.members) / count
            ),
            occurrence_count=count,
            image_ref=self.seed.image_ref,
            note=self.seed.note,
        )


def get_frequent_items(  # noqa: PLR0913
    entries: list[NutritionRecord],
    min_occurrences: int = DEFAULT_MIN_OCCURRENCES,
    max_items: int = DEFAULT_MAX_ITEMS,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    *,
    stop_words: Iterable[str] = STOP_WORDS,
    nutrition_tolerance: float = NUTRITION_TOLERANCE,
) -> list[FrequentItemCluster]:
    """Cluster repeated entries and return the most frequent ones."""
    if not 0 < similarity_threshold <= 1:
        raise ValidationError(
            f"similarity_threshold must be in (0, 1], got {similarity_threshold}"
        )
    if min_occurrences < 1:
        raise ValidationError(f"min_occurrences must be >= 1, got {min_occurrences}")
    if max_items < 0:
        raise ValidationError(f"max_items must be >= 0, got {max_items}")

    excluded = frozenset(stop_words)
    clusters: list[_Cluster] = []
    for entry in entries:
        for cluster in clusters:
            if name_similarity(
                entry.name, cluster.seed.name, excluded
            ) >= similarity_threshold and nutritionally_similar(
                entry, cluster.seed, nutrition_tolerance
            ):
                cluster.members.append(entry)
                break
        else:
            clusters.append(_Cluster(seed=entry, members=[entry]))

    frequent = [
        cluster.finalize()
        for cluster in clusters
        if len(cluster.members) >= min_occurrences
    ]
    frequent.sort(key=lambda item: item.occurrence_count, reverse=True)
    return frequent[:max_items]


def flatten_entries(
    entries_by_date: Mapping[date, list[NutritionRecord]],
) -> list[NutritionRecord]:
    """Flatten a date-keyed mapping of entries, preserving mapping order."""
    return [entry for day_entries in entries_by_date.values() for entry in day_entries]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (30.5 -> 31)."""
    return math.floor(value + 0.5)
