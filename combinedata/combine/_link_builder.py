"""
Payload concatenation and linked-data construction.

LinkBuilder turns an accepted CombinePlan into:
- One contiguous payload buffer (inputs appended in order, values untouched)
- Two SelectionMaps per input:
    forward  (combined -> input):  offset_i + p -> {p}
    reverse  (input -> combined):  p -> {offset_i + p}
- One deletion hook per input that drops the combined -> input link when
  the input is removed

Hooks are grouped in a CombinationHandle so they can be revoked together
if the combined dataset goes away first.
"""

import numpy as np

from combinedata._logging import dataset_label, get_logger
from combinedata._signal import Subscription
from combinedata.combine._planner import CombinePlan
from combinedata.dataset import PointDataset
from combinedata.selection import SelectionMap

logger = get_logger(__name__)


class CombinationHandle:
    """
    Deletion hooks of one combination.

    Tracks, per input, the subscription on that input's
    about_to_be_removed signal. release() revokes all of them and drops
    the reverse links the inputs still hold to the combined dataset.
    """

    def __init__(self, combined: PointDataset):
        self.combined = combined
        self._hooks: dict[str, tuple[PointDataset, Subscription]] = {}
        self._released = False

    def __len__(self) -> int:
        return len(self._hooks)

    @property
    def released(self) -> bool:
        return self._released

    @property
    def source_ids(self) -> list[str]:
        """IDs of inputs whose deletion hook is still connected."""
        return list(self._hooks)

    def watch(self, source: PointDataset) -> None:
        """
        Connect the deletion hook for source.

        A source listed more than once in the inputs is watched once;
        its links are keyed by dataset ID, so one hook unlinks it.
        """
        if self._released or source.id in self._hooks:
            return

        combined = self.combined

        def _on_source_removed(_dataset: PointDataset) -> None:
            if combined.remove_linked_dataset(source):
                logger.debug(
                    f"Input {dataset_label(source)} removed, "
                    f"unlinked from {dataset_label(combined)}"
                )
            self._hooks.pop(source.id, None)

        subscription = source.about_to_be_removed.connect(_on_source_removed)
        self._hooks[source.id] = (source, subscription)

    def release(self, _dataset: PointDataset | None = None) -> None:
        """
        Revoke every deletion hook and drop input -> combined links.

        Idempotent. Connected to the combined dataset's own
        about_to_be_removed signal.
        """
        if self._released:
            return
        self._released = True

        for source, subscription in self._hooks.values():
            subscription.disconnect()
            source.remove_linked_dataset(self.combined)

        logger.debug(
            f"Released {len(self._hooks)} deletion hook(s) of "
            f"{dataset_label(self.combined)}"
        )
        self._hooks.clear()


class LinkBuilder:
    """
    Builds payload and linked data for an accepted plan.

    Usage:
        builder = LinkBuilder(plan)
        buffer = builder.concatenate_payloads()   # no side effects
        handle = builder.link(combined)           # registers maps + hooks
    """

    def __init__(self, plan: CombinePlan):
        if not plan.accepted:
            raise ValueError(f"Cannot build from a rejected plan: {plan.reason}")
        self.plan = plan

    def concatenate_payloads(self) -> np.ndarray:
        """
        Copy every input payload, in order, into one flat buffer.

        Buffer element type follows the first input. Allocation failure
        (MemoryError) propagates to the caller.
        """
        plan = self.plan
        num_dimensions = plan.num_dimensions or 0
        dtype = plan.datasets[0].dtype

        buffer = np.empty(plan.buffer_size, dtype=dtype)

        for dataset, offset, count in zip(
            plan.datasets, plan.offsets, plan.point_counts
        ):
            start = offset * num_dimensions
            end = start + count * num_dimensions

            def _copy(values: np.ndarray, start=start, end=end) -> None:
                buffer[start:end] = values

            dataset.visit_from_begin_to_end(_copy)

        logger.debug(
            f"Concatenated {len(plan.datasets)} payloads into "
            f"{buffer.size:,} values ({dtype})"
        )
        return buffer

    def link(self, combined: PointDataset) -> CombinationHandle:
        """Register forward/reverse maps and deletion hooks for every input."""
        handle = CombinationHandle(combined)

        for dataset, offset, count in zip(
            self.plan.datasets, self.plan.offsets, self.plan.point_counts
        ):
            self._link_input(combined, dataset, offset, count)
            handle.watch(dataset)

        combined.about_to_be_removed.connect(handle.release)
        return handle

    def _link_input(
        self, combined: PointDataset, dataset: PointDataset, offset: int, count: int
    ) -> None:
        forward = SelectionMap.offset(count, source_start=offset, target_start=0)
        reverse = SelectionMap.offset(count, source_start=0, target_start=offset)

        combined.add_linked_data(dataset, forward)
        dataset.add_linked_data(combined, reverse)

        logger.debug(
            f"  Linked {dataset_label(dataset)}: {count} points at offset {offset}"
        )
