"""
Dataset repository and data-change notification.

combine() depends only on two small protocols:
    DatasetRepository: creates new, empty point datasets
    DataChangedSink:   is told once when a dataset's payload is final

InMemoryRepository and DataEvents are ready-made implementations for hosts
that do not bring their own store or event bus.
"""

from collections.abc import Iterator
from typing import Callable, Protocol

from combinedata._constants import POINT_TYPE, SUPPORTED_DATA_TYPES
from combinedata._exceptions import CombineRepositoryError
from combinedata._logging import dataset_label, get_logger
from combinedata._signal import Signal, Subscription
from combinedata.dataset import PointDataset

logger = get_logger(__name__)


class DatasetRepository(Protocol):
    """Protocol for anything that can allocate point datasets."""

    def create_dataset(self, name: str, data_type: str = POINT_TYPE) -> PointDataset:
        """Create and register an empty dataset."""
        ...


class DataChangedSink(Protocol):
    """Protocol for data-changed notification receivers."""

    def notify_dataset_data_changed(self, dataset: PointDataset) -> None:
        """Announce that dataset's payload and properties are final."""
        ...


class DataEvents:
    """
    Data-changed event bus.

    Example:
        events = DataEvents()
        events.on_data_changed(lambda ds: redraw(ds))
        events.notify_dataset_data_changed(dataset)
    """

    def __init__(self):
        self._data_changed = Signal("dataset_data_changed")

    def on_data_changed(self, handler: Callable[[PointDataset], None]) -> Subscription:
        return self._data_changed.connect(handler)

    def notify_dataset_data_changed(self, dataset: PointDataset) -> None:
        logger.debug(f"Data changed: {dataset_label(dataset)}")
        self._data_changed.emit(dataset)


class InMemoryRepository:
    """
    Dict-backed dataset store.

    Datasets keep insertion order. remove() emits the dataset's
    about_to_be_removed signal exactly once before dropping it.

    Examples:
        repo = InMemoryRepository()
        ds = repo.create_dataset("cells")
        repo.get(ds.id) is ds      # True
        repo.remove(ds)
    """

    def __init__(self, events: DataEvents | None = None):
        self._datasets: dict[str, PointDataset] = {}
        self.events = events if events is not None else DataEvents()

    def __len__(self) -> int:
        return len(self._datasets)

    def __iter__(self) -> Iterator[PointDataset]:
        return iter(list(self._datasets.values()))

    def __contains__(self, dataset: "PointDataset | str") -> bool:
        key = dataset if isinstance(dataset, str) else dataset.id
        return key in self._datasets

    def create_dataset(self, name: str, data_type: str = POINT_TYPE) -> PointDataset:
        """
        Create and register an empty dataset.

        Raises:
            CombineRepositoryError: If data_type is not supported
        """
        if data_type not in SUPPORTED_DATA_TYPES:
            raise CombineRepositoryError(
                f"Unsupported data type: '{data_type}'. "
                f"Supported: {sorted(SUPPORTED_DATA_TYPES)}"
            )

        dataset = PointDataset(name=name, data_type=data_type)
        self._datasets[dataset.id] = dataset
        logger.debug(f"Created dataset {dataset_label(dataset)}")
        return dataset

    def add(self, dataset: PointDataset) -> PointDataset:
        """Register an externally built dataset."""
        if dataset.is_removed:
            raise CombineRepositoryError(
                f"Dataset '{dataset.name}' ({dataset.id}) was already removed"
            )
        self._datasets[dataset.id] = dataset
        return dataset

    def get(self, dataset_id: str) -> PointDataset:
        try:
            return self._datasets[dataset_id]
        except KeyError:
            raise CombineRepositoryError(f"Dataset '{dataset_id}' not found") from None

    def remove(self, dataset: "PointDataset | str") -> None:
        """
        Remove dataset, notifying its observers first.

        Removing a dataset that is unknown or already removed is a no-op.
        """
        key = dataset if isinstance(dataset, str) else dataset.id
        target = self._datasets.get(key)
        if target is None:
            logger.debug(f"Dataset '{key}' not in repository, nothing to remove")
            return

        logger.debug(f"Removing dataset {dataset_label(target)}")
        target._mark_removed()
        del self._datasets[key]

    def notify_dataset_data_changed(self, dataset: PointDataset) -> None:
        self.events.notify_dataset_data_changed(dataset)
