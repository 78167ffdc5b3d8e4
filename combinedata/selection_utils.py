"""
Selection helpers over combined datasets and their linked data.

Functions:
    combined_dataset_ids(combined)       -> list[str]
    combined_dataset_offsets(combined)   -> list[int]
    locate_source(combined, index)       -> (source_id, local_index)
    translate_selection(source, target, indices) -> np.ndarray
    split_selection(combined, indices)   -> {source_id: np.ndarray}
"""

import numpy as np

from combinedata._constants import (
    COMBINED_DATASET_IDS_KEY,
    COMBINED_DATASET_OFFSETS_KEY,
)
from combinedata._exceptions import CombineError, CombineSelectionError
from combinedata.dataset import PointDataset


def combined_dataset_ids(combined: PointDataset) -> list[str]:
    """Source dataset IDs of a combined dataset, in input order."""
    return list(_require_property(combined, COMBINED_DATASET_IDS_KEY))


def combined_dataset_offsets(combined: PointDataset) -> list[int]:
    """Start offsets of a combined dataset's sources, in input order."""
    return [int(o) for o in _require_property(combined, COMBINED_DATASET_OFFSETS_KEY)]


def locate_source(combined: PointDataset, index: int) -> tuple[str, int]:
    """
    Resolve a combined point index to its source dataset and local index.

    Uses the offsets property, so it still works after a source dataset
    was removed and its link dropped.

    Raises:
        IndexError: If index is outside the combined dataset
        CombineError: If combined is not a combined dataset
    """
    ids = combined_dataset_ids(combined)
    offsets = np.asarray(combined_dataset_offsets(combined), dtype=np.int64)

    if not 0 <= index < combined.num_points:
        raise IndexError(
            f"Point {index} out of range [0, {combined.num_points})"
        )

    # Rightmost offset <= index; skips empty sources sharing that offset
    position = int(np.searchsorted(offsets, index, side="right")) - 1
    return ids[position], int(index - offsets[position])


def translate_selection(
    source: PointDataset, target: "PointDataset | str", indices
) -> np.ndarray:
    """
    Translate selected point indices of source into target's index space.

    Raises:
        CombineSelectionError: If source holds no link to target
    """
    linked = source.get_linked_data(target)
    if linked is None:
        target_name = target if isinstance(target, str) else target.name
        raise CombineSelectionError(
            f"Dataset '{source.name}' has no linked data for '{target_name}'"
        )
    return linked.mapping.translate(indices)


def split_selection(combined: PointDataset, indices) -> dict[str, np.ndarray]:
    """
    Split a combined-space selection into per-source selections.

    Only datasets listed in the "Combined Dataset IDs" property that are
    still linked to combined are included, in input order. Other links
    combined holds (e.g. to a later combination it was an input of) are
    not sources. Sources whose range is not touched by the selection map
    to empty arrays.

    Raises:
        CombineError: If combined is not a combined dataset
    """
    parts: dict[str, np.ndarray] = {}
    for source_id in combined_dataset_ids(combined):
        linked = combined.get_linked_data(source_id)
        if linked is not None:
            parts[source_id] = linked.mapping.translate(indices)
    return parts


def _require_property(combined: PointDataset, key: str):
    if not combined.has_property(key):
        raise CombineError(
            f"Dataset '{combined.name}' is not a combined dataset "
            f"(missing property '{key}')"
        )
    return combined.get_property(key)
