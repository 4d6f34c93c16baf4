import pytest

from meshkit.halfedge_ds import HalfedgeDS


def test_tables_have_requested_sizes_and_are_undefined():
    ds = HalfedgeDS(4, 7)
    for table in (ds.opposite, ds.next_edge, ds.prev_edge, ds.target, ds.face):
        assert table == [None] * 7
    assert ds.vertex_edge == [None] * 4
    assert ds.face_edge is None


def test_face_table_allocated_when_faces_given():
    ds = HalfedgeDS(3, 6, 2)
    assert ds.face_edge == [None, None]
    assert ds.n_faces == 2


@pytest.mark.parametrize("sizes", [(-1, 3), (3, -1), (3, 3, -2)])
def test_negative_sizes_rejected(sizes):
    with pytest.raises(ValueError):
        HalfedgeDS(*sizes)


def test_describe_shows_undefined_as_minus_one():
    ds = HalfedgeDS(1, 2)
    assert ds.describe().splitlines() == ["he0: \t-1\t-1\t-1\t-1", "he1: \t-1\t-1\t-1\t-1"]


def test_describe_lists_faces():
    ds = HalfedgeDS(3, 3, 1)
    for e in range(3):
        ds.next_edge[e] = (e + 1) % 3
        ds.target[e] = (e + 1) % 3
        ds.face[e] = 0
    ds.face_edge[0] = 0
    lines = ds.describe().splitlines()
    assert lines[0] == "he0: \t-1\t1\t1\t0"
    assert lines[3] == "face list: 1"
    assert lines[4] == "f0: \tincident edge: e0\t v0, v1, v2"


def test_describe_without_faces_has_no_face_list():
    ds = HalfedgeDS(2, 1)
    assert "face list" not in ds.describe()