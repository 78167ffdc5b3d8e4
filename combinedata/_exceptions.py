"""
Exception hierarchy for combinedata.

All combinedata-specific exceptions inherit from CombineError.

Rejections of a combination (too few inputs, mismatched dimension counts)
are NOT exceptions by default: combine() logs them and returns None.
CombineRejectedError only surfaces when the caller opts in with strict=True.

Usage:
    from combinedata._exceptions import CombineError, CombineRejectedError

    try:
        combined = combinedata.combine(datasets, repo, strict=True)
    except CombineRejectedError as e:
        show_message(e.reason)
"""


class CombineError(Exception):
    """Base exception for all combinedata errors."""

    pass


class CombineRejectedError(CombineError):
    """
    Inputs cannot be combined (strict mode only).

    Raised when:
    - Fewer than two datasets are supplied
    - Datasets report different numbers of dimensions

    Examples:
        - "Select at least two datasets to combine, got 1"
        - "All datasets need the same number of dimensions: ..."
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class CombinePayloadError(CombineError):
    """
    Invalid point payload.

    Raised when:
    - Buffer size is not a multiple of the number of dimensions
    - Buffer is not numeric
    - Dimension name count differs from the number of dimensions

    Examples:
        - "Buffer of 7 values cannot be split into points of 2 dimensions"
        - "Expected 3 dimension names, got 2"
    """

    pass


class CombineSelectionError(CombineError):
    """
    Invalid selection map.

    Raised when:
    - Source and target index arrays differ in length
    - Indices are negative or not integral

    Examples:
        - "Selection map needs one target per source, got 4 sources and 3 targets"
    """

    pass


class CombineRepositoryError(CombineError):
    """
    Dataset repository error.

    Raised when:
    - A dataset ID is unknown
    - A dataset of an unsupported data type is requested
    - A dataset is removed twice

    Examples:
        - "Dataset 'a1b2' not found"
        - "Unsupported data type: 'Images'. Supported: ['Points']"
    """

    pass
