"""
Main combination orchestrator.

Coordinates the 3-phase combine process:
1. Planning: Check input count and dimensions, compute offsets
2. Construction: Concatenate payloads, then create the combined dataset
   and register linked data in both directions
3. Publication: Set properties, payload and dimension names, notify sink
"""

from collections.abc import Sequence

from combinedata._config import get_default_name
from combinedata._constants import (
    COMBINED_DATASET_IDS_KEY,
    COMBINED_DATASET_OFFSETS_KEY,
    POINT_TYPE,
)
from combinedata._exceptions import CombineError, CombineRejectedError
from combinedata._logging import dataset_label, get_logger
from combinedata.combine._link_builder import LinkBuilder
from combinedata.combine._planner import plan_combination
from combinedata.dataset import PointDataset
from combinedata.repository import DataChangedSink, DatasetRepository

logger = get_logger(__name__)


def combine(
    datasets: Sequence[PointDataset],
    repository: DatasetRepository,
    sink: DataChangedSink | None = None,
    name: str | None = None,
    strict: bool = False,
) -> PointDataset | None:
    """
    Combine point datasets into one new dataset.

    Payloads are concatenated in input order. Every input gets a forward
    map (combined -> input) and a reverse map (input -> combined), and a
    hook that unlinks it from the combined dataset when it is removed.

    The combined dataset carries two properties:
        "Combined Dataset IDs":     source IDs in input order
        "Combined Dataset Offsets": first combined index of each input

    Args:
        datasets: Point datasets to combine (order is significant)
        repository: Creates the combined dataset
        sink: Receives one data-changed notification. Defaults to the
            repository when it implements notify_dataset_data_changed.
        name: Combined dataset name (default from get_default_name())
        strict: Raise CombineRejectedError instead of returning None when
            inputs are rejected

    Returns:
        The combined dataset, or None if the inputs were rejected
        (fewer than two datasets or mismatched dimension counts).
        Rejection has no side effects.

    Raises:
        CombineRejectedError: If strict and inputs are rejected
        CombineError: If no data-changed sink is available
        MemoryError: If the combined buffer cannot be allocated
    """
    plan = plan_combination(datasets)

    if not plan.accepted:
        logger.info(f"Not combining: {plan.reason}")
        if strict:
            raise CombineRejectedError(plan.reason)
        return None

    if sink is None:
        if not hasattr(repository, "notify_dataset_data_changed"):
            raise CombineError(
                "No data-changed sink: pass sink= or use a repository "
                "that implements notify_dataset_data_changed()"
            )
        sink = repository  # type: ignore[assignment]

    logger.info(f"Combining {len(plan.datasets)} datasets...")

    builder = LinkBuilder(plan)
    buffer = builder.concatenate_payloads()

    combined = repository.create_dataset(name or get_default_name(), POINT_TYPE)
    builder.link(combined)

    # Publish
    combined.set_property(
        COMBINED_DATASET_IDS_KEY, [ds.id for ds in plan.datasets]
    )
    combined.set_property(COMBINED_DATASET_OFFSETS_KEY, list(plan.offsets))
    combined.set_data(buffer, plan.num_dimensions, copy=False)
    combined.set_dimension_names(plan.datasets[0].dimension_names)
    sink.notify_dataset_data_changed(combined)

    logger.info(
        f"Combined {len(plan.datasets)} datasets into {dataset_label(combined)} "
        f"({plan.total_points:,} points, {plan.num_dimensions} dimensions)"
    )
    return combined
