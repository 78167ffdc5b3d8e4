"""
PointDataset - in-memory point dataset with linked data.

Holds a contiguous (num_points, num_dimensions) numeric payload, dimension
names, free-form properties, and linked data (SelectionMaps to other datasets).

Lifecycle:
    Each dataset exposes an about_to_be_removed Signal. The owning repository
    emits it exactly once, right before the dataset is dropped, so observers
    can detach links that point at it.
"""

import uuid
from typing import Any, Callable

import numpy as np
import pyarrow as pa
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from combinedata._constants import (
    DEFAULT_DIMENSION_PREFIX,
    DEFAULT_PAYLOAD_DTYPE,
    POINT_TYPE,
)
from combinedata._exceptions import CombinePayloadError
from combinedata._logging import dataset_label, get_logger
from combinedata._signal import Signal
from combinedata.selection import SelectionMap

logger = get_logger(__name__)


def _new_dataset_id() -> str:
    return uuid.uuid4().hex


def default_dimension_names(num_dimensions: int) -> list[str]:
    return [f"{DEFAULT_DIMENSION_PREFIX} {i}" for i in range(num_dimensions)]


class PointDataset(BaseModel):
    """
    Point dataset handle.

    Public attributes:
        id, name, data_type, properties

    Private attributes:
        _data, _dimension_names, _linked_data, _about_to_be_removed, _removed

    Examples:
        ds = PointDataset(name="cells")
        ds.set_data(np.zeros((100, 3), dtype=np.float32), num_dimensions=3)
        ds.set_dimension_names(["x", "y", "z"])
        ds.num_points      # 100
    """

    id: str = Field(default_factory=_new_dataset_id)
    name: str
    data_type: str = POINT_TYPE
    properties: dict[str, Any] = Field(default_factory=dict)

    _data: np.ndarray = PrivateAttr(
        default_factory=lambda: np.empty((0, 0), dtype=DEFAULT_PAYLOAD_DTYPE)
    )
    _dimension_names: list[str] = PrivateAttr(default_factory=list)
    _linked_data: dict[str, "LinkedData"] = PrivateAttr(default_factory=dict)
    _about_to_be_removed: Signal = PrivateAttr(
        default_factory=lambda: Signal("about_to_be_removed")
    )
    _removed: bool = PrivateAttr(default=False)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Datasets are handles: identity, not value, decides equality
    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (
            f"PointDataset(name={self.name!r}, id={self.id!r}, "
            f"points={self.num_points}, dimensions={self.num_dimensions}, "
            f"linked={len(self._linked_data)})"
        )

    # Payload (read)

    @property
    def num_points(self) -> int:
        return int(self._data.shape[0])

    @property
    def num_dimensions(self) -> int:
        return int(self._data.shape[1])

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def dimension_names(self) -> list[str]:
        return list(self._dimension_names)

    @property
    def data(self) -> np.ndarray:
        """Read-only (num_points, num_dimensions) view of the payload."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def visit_from_begin_to_end(self, visitor: Callable[[np.ndarray], Any]) -> Any:
        """
        Call visitor with the whole payload as one flat, point-major,
        read-only array of num_points * num_dimensions values.

        Returns whatever the visitor returns.
        """
        flat = self._data.reshape(-1)
        flat.flags.writeable = False
        return visitor(flat)

    # Payload (write)

    def set_data(self, buffer, num_dimensions: int, copy: bool = True) -> None:
        """
        Replace the payload.

        Args:
            buffer: Numeric array-like, flat point-major or already 2D
            num_dimensions: Values per point
            copy: Copy buffer (default), so later changes by the caller do
                not reach the dataset. With False, a C-contiguous ndarray is
                adopted as-is; pass False only for buffers nobody else holds.

        Raises:
            CombinePayloadError: If buffer is not numeric or its size is not
                a multiple of num_dimensions
        """
        array = np.asarray(buffer)
        if array.size == 0 and array.dtype == np.float64 and not isinstance(
            buffer, np.ndarray
        ):
            # Plain empty list/tuple: keep the default payload type
            array = array.astype(DEFAULT_PAYLOAD_DTYPE)

        if not (
            np.issubdtype(array.dtype, np.integer)
            or np.issubdtype(array.dtype, np.floating)
        ):
            raise CombinePayloadError(
                f"Point payload must be numeric, got dtype {array.dtype}"
            )

        if num_dimensions < 0:
            raise CombinePayloadError(
                f"Number of dimensions must be non-negative, got {num_dimensions}"
            )

        if num_dimensions == 0:
            if array.size:
                raise CombinePayloadError(
                    f"Buffer of {array.size} values needs at least one dimension"
                )
            num_points = 0
        elif array.size % num_dimensions:
            raise CombinePayloadError(
                f"Buffer of {array.size} values cannot be split into points "
                f"of {num_dimensions} dimensions"
            )
        else:
            num_points = array.size // num_dimensions

        previous_dimensions = self.num_dimensions
        payload = array.reshape(num_points, num_dimensions)
        if copy:
            self._data = np.array(payload, order="C", copy=True)
        else:
            self._data = np.ascontiguousarray(payload)

        if num_dimensions != previous_dimensions or len(
            self._dimension_names
        ) != num_dimensions:
            self._dimension_names = default_dimension_names(num_dimensions)

        logger.debug(
            f"Set payload on {dataset_label(self)}: {num_points} points x "
            f"{num_dimensions} dimensions ({self._data.dtype})"
        )

    def set_dimension_names(self, names: list[str]) -> None:
        names = [str(n) for n in names]
        if len(names) != self.num_dimensions:
            raise CombinePayloadError(
                f"Expected {self.num_dimensions} dimension names, got {len(names)}"
            )
        self._dimension_names = names

    # Properties

    def set_property(self, key: str, value: Any) -> None:
        self.properties[key] = value

    def get_property(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    def has_property(self, key: str) -> bool:
        return key in self.properties

    # Linked data

    @property
    def linked_data(self) -> list["LinkedData"]:
        return list(self._linked_data.values())

    def get_linked_data(self, target: "PointDataset | str") -> "LinkedData | None":
        return self._linked_data.get(_dataset_id(target))

    def add_linked_data(self, target: "PointDataset", mapping: SelectionMap) -> None:
        """
        Register mapping from this dataset's indices to target's indices.

        Replaces an existing link to the same target.
        """
        if target.id in self._linked_data:
            logger.debug(
                f"Replacing link {dataset_label(self)} -> {dataset_label(target)}"
            )

        self._linked_data[target.id] = LinkedData(
            source_id=self.id, target=target, mapping=mapping
        )

    def remove_linked_dataset(self, target: "PointDataset | str") -> bool:
        """
        Drop the link to target.

        Returns:
            True if a link was removed, False if none existed
        """
        removed = self._linked_data.pop(_dataset_id(target), None)
        if removed is None:
            return False
        logger.debug(
            f"Removed link {dataset_label(self)} -> {dataset_label(removed.target)}"
        )
        return True

    # Lifecycle

    @property
    def about_to_be_removed(self) -> Signal:
        return self._about_to_be_removed

    @property
    def is_removed(self) -> bool:
        return self._removed

    def _mark_removed(self) -> None:
        """Emit about_to_be_removed once, then detach every observer."""
        if self._removed:
            return
        self._removed = True
        self._about_to_be_removed.emit(self)
        self._about_to_be_removed.disconnect_all()

    # Export

    def to_arrow(self) -> pa.Table:
        """Export payload as PyArrow Table, one column per dimension."""
        columns = [pa.array(self._data[:, i]) for i in range(self.num_dimensions)]
        return pa.Table.from_arrays(columns, names=self.dimension_names)


class LinkedData(BaseModel):
    """
    Registered SelectionMap from one dataset to another.

    source_id's point indices are the map's keys; target's point
    indices are its values.
    """

    source_id: str
    target: PointDataset
    mapping: SelectionMap

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @property
    def target_id(self) -> str:
        return self.target.id

    def __repr__(self) -> str:
        return (
            f"LinkedData(source_id={self.source_id!r}, "
            f"target_id={self.target_id!r}, mapping={self.mapping!r})"
        )


def _dataset_id(dataset: "PointDataset | str") -> str:
    return dataset if isinstance(dataset, str) else dataset.id


PointDataset.model_rebuild()
