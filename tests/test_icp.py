import numpy as np
import pytest
from scipy.spatial.distance import pdist

from meshkit.icp import (
    KnnStrategy,
    nearest_neighbour,
    nearest_neighbour_point_to_plane,
    rigid_align,
)
from meshkit.transform import rotate_with_quaternion


@pytest.fixture
def cloud():
    return np.random.default_rng(7).uniform(-1.0, 1.0, size=(60, 3))


@pytest.mark.parametrize("strategy", list(KnnStrategy))
def test_nearest_of_shuffled_copy_is_self(cloud, strategy):
    target = cloud[np.random.default_rng(3).permutation(len(cloud))]
    assert np.array_equal(nearest_neighbour(cloud, target, strategy), cloud)


def test_strategies_agree(cloud):
    source = np.random.default_rng(11).uniform(-1.0, 1.0, size=(25, 3))
    octree = nearest_neighbour(source, cloud, KnnStrategy.OCTREE)
    brute = nearest_neighbour(source, cloud, KnnStrategy.BRUTEFORCE)
    assert np.array_equal(octree, brute)


def test_matches_come_from_target(cloud):
    source = np.random.default_rng(5).uniform(-1.0, 1.0, size=(10, 3))
    matches = nearest_neighbour(source, cloud)
    assert all(any(np.array_equal(m, t) for t in cloud) for m in matches)


def test_empty_target_raises(cloud):
    with pytest.raises(ValueError):
        nearest_neighbour(cloud, np.empty((0, 3)))


def test_point_to_plane_matches_nearest(cloud):
    source = np.random.default_rng(13).uniform(-1.0, 1.0, size=(15, 3))
    matches, normals = nearest_neighbour_point_to_plane(source, cloud)
    assert np.array_equal(matches, nearest_neighbour(source, cloud))
    assert np.allclose(np.linalg.norm(normals, axis=1), 1.0)


def test_point_to_plane_normals_of_plane():
    rng = np.random.default_rng(17)
    plane = np.column_stack([rng.uniform(-1, 1, 80), rng.uniform(-1, 1, 80), np.zeros(80)])
    _, normals = nearest_neighbour_point_to_plane(plane[:10], plane)
    assert np.allclose(np.abs(normals[:, 2]), 1.0)


def test_rigid_align_recovers_motion(cloud):
    moved = rotate_with_quaternion(cloud, [1.0, 2.1, 0.1], 3.14 / 3) + np.array([1.7, 1.0, 14.6])
    aligned = rigid_align(cloud, moved)
    assert np.allclose(aligned, moved, atol=1e-9)


def test_rigid_align_identity(cloud):
    assert np.allclose(rigid_align(cloud, cloud), cloud)


def test_rigid_align_mirror_stays_rigid(cloud):
    mirrored = cloud * np.array([-1.0, 1.0, 1.0])
    aligned = rigid_align(cloud, mirrored)
    assert np.allclose(pdist(aligned), pdist(cloud))
    assert np.allclose(aligned.mean(axis=0), mirrored.mean(axis=0))


def test_rigid_align_shape_mismatch(cloud):
    with pytest.raises(ValueError):
        rigid_align(cloud, cloud[:-1])


def test_rejects_two_dimensional_points():
    with pytest.raises(ValueError):
        nearest_neighbour(np.zeros((3, 2)), np.zeros((3, 2)))