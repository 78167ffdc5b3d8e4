"""
SelectionMap - index correspondence between two datasets.

Maps a single point index in a "from" dataset to a set of point indices in a
"to" dataset. Used as linked data: a selection made in one dataset is
translated through the map into the corresponding selection in the other.

Storage is compressed (CSR-like), so maps over millions of points stay cheap:
    _sources: sorted unique "from" indices            (uint32, length K)
    _indptr:  target range boundaries per source      (int64,  length K + 1)
    _targets: concatenated "to" indices               (uint32)

Targets of _sources[k] are _targets[_indptr[k]:_indptr[k + 1]].

Examples:
    # combined index 5 + p -> local index p, for 3 points
    forward = SelectionMap.offset(3, source_start=5, target_start=0)
    forward[6]                       # {1}
    forward.translate([5, 7, 100])   # array([0, 2]); unmapped 100 is dropped
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

import numpy as np
import pyarrow as pa

from combinedata._constants import INDEX_DTYPE
from combinedata._exceptions import CombineSelectionError


class SelectionMap:
    """
    One-to-many index map between two datasets' point index spaces.

    Immutable after construction. Build with from_pairs(), from_dict()
    or offset(); the plain constructor creates an empty map.
    """

    __slots__ = ("_sources", "_indptr", "_targets")

    def __init__(self) -> None:
        self._sources = np.empty(0, dtype=INDEX_DTYPE)
        self._indptr = np.zeros(1, dtype=np.int64)
        self._targets = np.empty(0, dtype=INDEX_DTYPE)

    @classmethod
    def from_pairs(cls, sources, targets) -> SelectionMap:
        """
        Build from parallel arrays: sources[k] maps to targets[k].

        Repeated sources accumulate several targets (one-to-many).
        Duplicate (source, target) pairs are collapsed.
        """
        src = _as_index_array(sources, "sources")
        dst = _as_index_array(targets, "targets")

        if src.shape != dst.shape:
            raise CombineSelectionError(
                f"Selection map needs one target per source, "
                f"got {src.size} sources and {dst.size} targets"
            )

        # Sort by source, then target; drop duplicate pairs
        order = np.lexsort((dst, src))
        src, dst = src[order], dst[order]
        if src.size > 1:
            keep = np.ones(src.size, dtype=bool)
            keep[1:] = (src[1:] != src[:-1]) | (dst[1:] != dst[:-1])
            src, dst = src[keep], dst[keep]

        unique_sources, counts = np.unique(src, return_counts=True)

        selection_map = cls()
        selection_map._sources = unique_sources.astype(INDEX_DTYPE, copy=False)
        selection_map._indptr = np.concatenate(
            ([0], np.cumsum(counts, dtype=np.int64))
        )
        selection_map._targets = dst.astype(INDEX_DTYPE, copy=False)
        return selection_map

    @classmethod
    def from_dict(cls, mapping: Mapping[int, Iterable[int]]) -> SelectionMap:
        """Build from {source: iterable of targets}."""
        sources: list[int] = []
        targets: list[int] = []
        for source, source_targets in mapping.items():
            for target in source_targets:
                sources.append(source)
                targets.append(target)
        return cls.from_pairs(sources, targets)

    @classmethod
    def offset(
        cls, num_points: int, source_start: int = 0, target_start: int = 0
    ) -> SelectionMap:
        """
        Contiguous one-to-one map: source_start + p -> {target_start + p}.

        Covers p in [0, num_points). This is the shape of every map built
        when point datasets are combined.
        """
        if num_points < 0 or source_start < 0 or target_start < 0:
            raise CombineSelectionError(
                f"Offset map arguments must be non-negative, got "
                f"num_points={num_points}, source_start={source_start}, "
                f"target_start={target_start}"
            )

        local = np.arange(num_points, dtype=np.int64)
        selection_map = cls()
        selection_map._sources = (local + source_start).astype(INDEX_DTYPE)
        selection_map._indptr = np.arange(num_points + 1, dtype=np.int64)
        selection_map._targets = (local + target_start).astype(INDEX_DTYPE)
        return selection_map

    def __len__(self) -> int:
        """Number of mapped source indices."""
        return int(self._sources.size)

    def __contains__(self, index) -> bool:
        return self._position(index) is not None

    def __getitem__(self, index: int) -> set[int]:
        position = self._position(index)
        if position is None:
            raise KeyError(index)
        start, end = self._indptr[position], self._indptr[position + 1]
        return {int(t) for t in self._targets[start:end]}

    def __iter__(self) -> Iterator[int]:
        return (int(s) for s in self._sources)

    def __repr__(self) -> str:
        return f"SelectionMap(sources={len(self)}, targets={self._targets.size})"

    def get(self, index: int, default=None):
        try:
            return self[index]
        except KeyError:
            return default

    def items(self) -> Iterator[tuple[int, set[int]]]:
        for position, source in enumerate(self._sources):
            start, end = self._indptr[position], self._indptr[position + 1]
            yield int(source), {int(t) for t in self._targets[start:end]}

    def to_dict(self) -> dict[int, set[int]]:
        return dict(self.items())

    @property
    def sources(self) -> np.ndarray:
        """Sorted mapped source indices (read-only view)."""
        view = self._sources.view()
        view.flags.writeable = False
        return view

    @property
    def is_one_to_one(self) -> bool:
        """True if every source maps to exactly one target."""
        return bool(self._targets.size == self._sources.size)

    def translate(self, indices) -> np.ndarray:
        """
        Translate a selection of source indices into target indices.

        Indices without an entry are ignored. Returns sorted unique
        target indices (uint32).
        """
        query = np.asarray(indices).ravel()
        if query.size == 0 or self._sources.size == 0:
            return np.empty(0, dtype=INDEX_DTYPE)

        query = _as_index_array(query, "indices")
        positions = np.searchsorted(self._sources, query)
        in_range = positions < self._sources.size
        positions = positions[in_range]
        positions = positions[self._sources[positions] == query[in_range]]

        if self.is_one_to_one:
            return np.unique(self._targets[positions])

        starts = self._indptr[positions]
        lengths = self._indptr[positions + 1] - starts
        total = int(lengths.sum())
        output_starts = np.cumsum(lengths) - lengths
        gather = (
            np.arange(total, dtype=np.int64)
            - np.repeat(output_starts, lengths)
            + np.repeat(starts, lengths)
        )
        return np.unique(self._targets[gather])

    def to_arrow(self) -> pa.Table:
        """
        Export as PyArrow Table.

        Columns:
            source:  uint32
            targets: large_list<uint32> (int64 offsets)
        """
        targets = pa.LargeListArray.from_arrays(
            pa.array(self._indptr, type=pa.int64()),
            pa.array(self._targets, type=pa.uint32()),
        )
        return pa.table(
            {"source": pa.array(self._sources, type=pa.uint32()), "targets": targets}
        )

    def _position(self, index) -> int | None:
        try:
            key = int(index)
        except (TypeError, ValueError):
            return None
        if key < 0:
            return None
        position = int(np.searchsorted(self._sources, key))
        if position < self._sources.size and int(self._sources[position]) == key:
            return position
        return None


def _as_index_array(values, label: str) -> np.ndarray:
    """Validate and convert values to a flat int64 index array."""
    array = np.asarray(values)
    if array.size == 0:
        return np.empty(0, dtype=np.int64)

    if not np.issubdtype(array.dtype, np.integer):
        raise CombineSelectionError(
            f"Selection {label} must be integer indices, got dtype {array.dtype}"
        )

    array = array.ravel().astype(np.int64, copy=False)
    if array.min() < 0:
        raise CombineSelectionError(
            f"Selection {label} must be non-negative, got minimum {array.min()}"
        )
    return array
