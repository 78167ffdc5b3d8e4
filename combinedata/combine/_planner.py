"""
Compatibility checks and offset planning for combination.

Validates:
- Input count (at least MIN_COMBINE_INPUTS)
- Dimension count (all inputs match the first input)

Only the number of dimensions is compared. Dimension names and payload
element types are assumed to be shared and are not checked.
"""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from combinedata._constants import MIN_COMBINE_INPUTS, POINT_TYPE
from combinedata._logging import get_logger
from combinedata.dataset import PointDataset

logger = get_logger(__name__)


class CombinePlan(BaseModel):
    """
    Outcome of planning a combination.

    Accepted plans carry the shared dimension count and one start offset
    per input. Rejected plans carry only the reason.
    """

    datasets: list[PointDataset]
    num_dimensions: int | None = None
    offsets: list[int] = []
    point_counts: list[int] = []
    reason: str | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @property
    def accepted(self) -> bool:
        return self.reason is None

    @property
    def total_points(self) -> int:
        return sum(self.point_counts)

    @property
    def buffer_size(self) -> int:
        return self.total_points * (self.num_dimensions or 0)


def plan_combination(datasets: Sequence[PointDataset]) -> CombinePlan:
    """
    Check inputs and compute each input's start offset in combined space.

    Never raises for incompatible inputs; returns a rejected plan instead.
    """
    datasets = list(datasets)

    if len(datasets) < MIN_COMBINE_INPUTS:
        return _reject(
            datasets,
            f"Select at least {MIN_COMBINE_INPUTS} datasets to combine, "
            f"got {len(datasets)}",
        )

    num_dimensions = datasets[0].num_dimensions
    mismatched = [
        (i, ds) for i, ds in enumerate(datasets) if ds.num_dimensions != num_dimensions
    ]
    if mismatched:
        details = "\n".join(
            f"  Dataset {i}: {ds.num_dimensions} dimensions ({ds.name})"
            for i, ds in mismatched
        )
        return _reject(
            datasets,
            f"All datasets need the same number of dimensions.\n"
            f"Dataset 0 ({datasets[0].name}) has {num_dimensions}, but:\n"
            f"{details}",
        )

    offsets, point_counts = compute_offsets([ds.num_points for ds in datasets])

    logger.debug(f"Planned {len(datasets)} inputs, offsets={offsets}")

    return CombinePlan(
        datasets=datasets,
        num_dimensions=num_dimensions,
        offsets=offsets,
        point_counts=point_counts,
    )


def compute_offsets(point_counts: Sequence[int]) -> tuple[list[int], list[int]]:
    """
    Start offset of each input in combined index space.

    offsets[0] == 0 and offsets[i] == offsets[i - 1] + point_counts[i - 1].
    The grand total is not appended: len(offsets) == len(point_counts).
    """
    offsets: list[int] = []
    running_total = 0
    for count in point_counts:
        offsets.append(running_total)
        running_total += int(count)
    return offsets, [int(c) for c in point_counts]


def can_combine(datasets: Sequence[PointDataset]) -> bool:
    """
    Whether datasets are eligible to be offered for combination.

    Requires at least two datasets, all of point type. Dimension counts are
    checked later, when combining.
    """
    return len(datasets) >= MIN_COMBINE_INPUTS and all(
        ds.data_type == POINT_TYPE for ds in datasets
    )


def _reject(datasets: list[PointDataset], reason: str) -> CombinePlan:
    return CombinePlan(datasets=datasets, reason=reason)
