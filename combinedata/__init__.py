import importlib.metadata as _metadata

from combinedata._exceptions import (
    CombineError,
    CombinePayloadError,
    CombineRejectedError,
    CombineRepositoryError,
    CombineSelectionError,
)
from combinedata._logging import set_verbosity
from combinedata.combine import can_combine, combine
from combinedata.dataset import LinkedData, PointDataset
from combinedata.repository import DataEvents, InMemoryRepository
from combinedata.selection import SelectionMap
from combinedata.selection_utils import (
    combined_dataset_ids,
    combined_dataset_offsets,
    locate_source,
    split_selection,
    translate_selection,
)

__version__ = _metadata.version("combinedata")


def verbose(level=True):
    """
    Enable/disable verbose logging for combinedata operations.

    Args:
        level: Logging level to enable:
            - True or "info": Show INFO and above (default)
            - "debug": Show DEBUG and above (very detailed)
            - False: Disable all logging

    Example:
        >>> import combinedata
        >>>
        >>> # Show why a combination was skipped
        >>> combinedata.verbose()
        >>>
        >>> # Trace offsets and per-input linking
        >>> combinedata.verbose("debug")
        >>>
        >>> # Disable logging
        >>> combinedata.verbose(False)

    Raises:
        ValueError: If level is not one of the values above
    """
    set_verbosity(level)


__all__ = [
    "CombineError",
    "CombinePayloadError",
    "CombineRejectedError",
    "CombineRepositoryError",
    "CombineSelectionError",
    "DataEvents",
    "InMemoryRepository",
    "LinkedData",
    "PointDataset",
    "SelectionMap",
    "can_combine",
    "combine",
    "combined_dataset_ids",
    "combined_dataset_offsets",
    "locate_source",
    "split_selection",
    "translate_selection",
    "verbose",
]
