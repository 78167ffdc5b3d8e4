"""Unit tests for PointDataset and LinkedData."""

import numpy as np
import pyarrow as pa
import pytest

from combinedata._exceptions import CombinePayloadError
from combinedata.dataset import PointDataset
from combinedata.selection import SelectionMap


class TestPayload:

    def test_new_dataset_is_empty(self):
        ds = PointDataset(name="empty")
        assert ds.num_points == 0
        assert ds.num_dimensions == 0
        assert ds.dimension_names == []
        assert ds.data_type == "Points"

    def test_set_flat_data(self):
        ds = PointDataset(name="a")
        ds.set_data([1, 2, 3, 4, 5, 6], num_dimensions=3)
        assert ds.num_points == 2
        assert ds.num_dimensions == 3
        np.testing.assert_array_equal(ds.data, [[1, 2, 3], [4, 5, 6]])

    def test_set_data_keeps_dtype(self):
        ds = PointDataset(name="a")
        ds.set_data(np.zeros(4, dtype=np.float64), 2)
        assert ds.dtype == np.float64

    def test_caller_changes_do_not_leak_in(self):
        source = np.array([1, 2, 3, 4], dtype=np.float32)
        ds = PointDataset(name="a")
        ds.set_data(source, 2)

        source[0] = 99.0

        assert ds.data[0, 0] == 1.0
        assert not np.shares_memory(ds.data, source)

    def test_copy_false_adopts_buffer(self):
        buffer = np.arange(4, dtype=np.float32)
        ds = PointDataset(name="a")
        ds.set_data(buffer, 2, copy=False)
        assert np.shares_memory(ds.data, buffer)

    def test_empty_list_uses_default_dtype(self):
        ds = PointDataset(name="a")
        ds.set_data([], 2)
        assert ds.num_points == 0
        assert ds.num_dimensions == 2
        assert ds.dtype == np.float32

    def test_uneven_buffer_raises(self):
        ds = PointDataset(name="a")
        with pytest.raises(CombinePayloadError, match="cannot be split"):
            ds.set_data([1, 2, 3], 2)

    def test_non_numeric_buffer_raises(self):
        ds = PointDataset(name="a")
        with pytest.raises(CombinePayloadError, match="numeric"):
            ds.set_data(["a", "b"], 1)

    def test_values_without_dimensions_raise(self):
        ds = PointDataset(name="a")
        with pytest.raises(CombinePayloadError, match="at least one dimension"):
            ds.set_data([1.0], 0)

    def test_data_view_is_read_only(self):
        ds = PointDataset(name="a")
        ds.set_data([1.0, 2.0], 2)
        with pytest.raises(ValueError):
            ds.data[0, 0] = 5.0

    def test_visit_passes_flat_point_major_payload(self):
        ds = PointDataset(name="a")
        ds.set_data(np.array([[1, 2], [3, 4]], dtype=np.float32), 2)
        seen = ds.visit_from_begin_to_end(lambda values: values.tolist())
        assert seen == [1.0, 2.0, 3.0, 4.0]

    def test_visit_payload_is_read_only(self):
        ds = PointDataset(name="a")
        ds.set_data([1.0, 2.0], 2)

        def _mutate(values):
            values[0] = 9.0

        with pytest.raises(ValueError):
            ds.visit_from_begin_to_end(_mutate)


class TestDimensionNames:

    def test_default_names_generated(self):
        ds = PointDataset(name="a")
        ds.set_data(np.zeros(6), 3)
        assert ds.dimension_names == ["Dim 0", "Dim 1", "Dim 2"]

    def test_set_names(self):
        ds = PointDataset(name="a")
        ds.set_data(np.zeros(4), 2)
        ds.set_dimension_names(["x", "y"])
        assert ds.dimension_names == ["x", "y"]

    def test_names_survive_same_width_payload(self):
        ds = PointDataset(name="a")
        ds.set_data(np.zeros(4), 2)
        ds.set_dimension_names(["x", "y"])
        ds.set_data(np.ones(6), 2)
        assert ds.dimension_names == ["x", "y"]

    def test_wrong_name_count_raises(self):
        ds = PointDataset(name="a")
        ds.set_data(np.zeros(4), 2)
        with pytest.raises(CombinePayloadError, match="Expected 2 dimension names"):
            ds.set_dimension_names(["x"])


class TestProperties:

    def test_set_and_get(self):
        ds = PointDataset(name="a")
        ds.set_property("k", [1, 2])
        assert ds.has_property("k")
        assert ds.get_property("k") == [1, 2]
        assert ds.get_property("missing", "d") == "d"


class TestLinkedData:

    def test_add_and_get(self):
        a, b = PointDataset(name="a"), PointDataset(name="b")
        sm = SelectionMap.offset(2)
        a.add_linked_data(b, sm)

        linked = a.get_linked_data(b)
        assert linked.source_id == a.id
        assert linked.target is b
        assert linked.target_id == b.id
        assert linked.mapping is sm
        assert b.get_linked_data(a) is None

    def test_add_replaces_existing_link(self):
        a, b = PointDataset(name="a"), PointDataset(name="b")
        a.add_linked_data(b, SelectionMap.offset(1))
        replacement = SelectionMap.offset(2)
        a.add_linked_data(b, replacement)
        assert len(a.linked_data) == 1
        assert a.get_linked_data(b.id).mapping is replacement

    def test_remove_is_idempotent(self):
        a, b = PointDataset(name="a"), PointDataset(name="b")
        a.add_linked_data(b, SelectionMap.offset(1))
        assert a.remove_linked_dataset(b) is True
        assert a.remove_linked_dataset(b) is False
        assert a.linked_data == []


class TestIdentity:

    def test_datasets_compare_by_identity(self):
        a = PointDataset(name="same", id="x")
        b = PointDataset(name="same", id="x")
        assert a == a
        assert a != b

    def test_ids_are_unique(self):
        assert PointDataset(name="a").id != PointDataset(name="a").id


class TestLifecycle:

    def test_mark_removed_emits_once(self):
        ds = PointDataset(name="a")
        calls = []
        ds.about_to_be_removed.connect(calls.append)

        ds._mark_removed()
        ds._mark_removed()

        assert calls == [ds]
        assert ds.is_removed
        assert len(ds.about_to_be_removed) == 0


class TestArrowExport:

    def test_columns_follow_dimension_names(self):
        ds = PointDataset(name="a")
        ds.set_data(np.array([1, 2, 3, 4], dtype=np.float32), 2)
        ds.set_dimension_names(["x", "y"])

        table = ds.to_arrow()

        assert table.column_names == ["x", "y"]
        assert table.column("x").to_pylist() == [1.0, 3.0]
        assert table.schema.field("y").type == pa.float32()
