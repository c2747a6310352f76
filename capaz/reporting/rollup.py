"""Pure aggregations over current-assessment responses.

Nothing here touches the database; callers pass responses and the skill
catalog in. "No data" is always distinct from "rated zero".
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from capaz.models import CapabilityResponse

# Rendered as an empty cell in the team matrix
NOT_RATED = None


@dataclass(slots=True)
class AssessmentSummary:
    """Headline numbers for one user's current assessment."""

    assessed_count: int
    catalog_size: int
    completion_percent: int
    average_level: float | None

    def to_dict(self) -> dict:
        return {
            "assessedCount": self.assessed_count,
            "catalogSize": self.catalog_size,
            "completionPercent": self.completion_percent,
            "averageLevel": self.average_level,
        }


@dataclass(slots=True)
class MatrixRow:
    """One user's row in the team matrix: skill id -> level or NOT_RATED."""

    user: dict
    levels: dict[str, int | None] = field(default_factory=dict)


def category_rollup(
    responses: Iterable[CapabilityResponse],
    skill_to_category: Mapping[str, str],
) -> dict[str, float]:
    """Mean proficiency per category, rounded to 2 decimals.

    Categories without a single rated skill are omitted rather than reported
    as 0. Responses whose skill is missing from ``skill_to_category`` are
    ignored.

    Example:
        X rated 2, 4, 4 and Y rated 5 -> ``{"X": 3.33, "Y": 5.0}``
    """
    levels: dict[str, list[int]] = defaultdict(list)
    for response in responses:
        category_id = skill_to_category.get(response.skill_id)
        if category_id is None:
            continue
        levels[category_id].append(response.level)

    return {
        category_id: round(sum(values) / len(values), 2)
        for category_id, values in levels.items()
        if values
    }


def summarize(responses: Iterable[CapabilityResponse], catalog_size: int) -> AssessmentSummary:
    responses = list(responses)
    assessed = len({r.skill_id for r in responses})

    if catalog_size > 0:
        completion = round(min(assessed, catalog_size) * 100 / catalog_size)
    else:
        completion = 0

    average = round(sum(r.level for r in responses) / len(responses), 2) if responses else None

    return AssessmentSummary(
        assessed_count=assessed,
        catalog_size=catalog_size,
        completion_percent=completion,
        average_level=average,
    )


def build_matrix_row(user: dict, responses: Iterable[CapabilityResponse], skill_ids: Iterable[str]) -> MatrixRow:
    """Levels for every catalog skill; unrated skills map to NOT_RATED."""
    rated = {r.skill_id: r.level for r in responses}
    return MatrixRow(
        user=user,
        levels={skill_id: rated.get(skill_id, NOT_RATED) for skill_id in skill_ids},
    )
