import math

import numpy as np
import pytest

from meshkit.transform import Transform, rotate_with_quaternion


@pytest.fixture
def points():
    return np.array(
        [
            [0.0, 4.0, 0.0],
            [1.0, -2.0, 3.5],
            [0.25, 0.5, -1.0],
        ]
    )


def test_default_is_identity(points):
    assert np.array_equal(Transform().matrix, np.eye(4))
    assert np.array_equal(Transform().apply(points), points)


def test_uniform_scale_multiplies_vertices(points):
    expected = 3 * points[0]
    t = Transform()
    t.uniform_scale(3.0)
    transformed = t.apply(points)
    assert np.array_equal(transformed[0], expected)


def test_composition_of_uniform_scales_commutes():
    t1 = Transform()
    t2 = Transform()
    t1.uniform_scale(3.0)
    t2.uniform_scale(2.0)
    assert np.array_equal((t1 * t2).matrix, (t2 * t1).matrix)
    assert np.array_equal((t1 * t2).matrix, t1.compose(t2).matrix)
    assert np.array_equal(t1.matrix @ t2.matrix, (t1 * t2.matrix).matrix)
    assert np.array_equal(t1.matrix @ t2.matrix, t1.compose(t2.matrix).matrix)


def test_scale_then_translate(points):
    t = Transform()
    t.uniform_scale(3.0)
    scaled = t.apply(points)
    t2 = Transform()
    t2.translate([1.7, 1.0, 14.6])
    moved = t2.apply(scaled)
    assert moved[0] == pytest.approx([1.7, 13.0, 14.6], abs=1e-4)


def test_non_uniform_scale(points):
    t = Transform().scale(2.0, 3.0, 4.0)
    result = t.apply(points)
    assert np.allclose(result, points * np.array([2.0, 3.0, 4.0]))


def test_rotate_around_axis_preserves_axis_coordinate(points):
    for axis in range(3):
        t = Transform().rotate_around_axis(0.7, axis)
        result = t.apply(points)
        assert np.allclose(result[:, axis], points[:, axis])
        assert np.allclose(np.linalg.norm(result, axis=1), np.linalg.norm(points, axis=1))


def test_rotate_around_invalid_axis():
    with pytest.raises(ValueError):
        Transform().rotate_around_axis(0.5, 3)


def test_equality_is_approximate():
    assert Transform() == Transform(np.eye(4) + 1e-15)
    assert not Transform() == Transform().uniform_scale(2.0)


def test_multiply_by_unsupported_type():
    with pytest.raises(TypeError):
        Transform() * "matrix"


def test_wrong_matrix_shape():
    with pytest.raises(ValueError):
        Transform(np.eye(3))


def test_quaternion_rotation_preserves_lengths(points):
    rotated = rotate_with_quaternion(points, [1.0, 2.1, 0.1], 3.14 / 3)
    assert np.allclose(np.linalg.norm(rotated, axis=1), np.linalg.norm(points, axis=1))
    assert not np.allclose(rotated, points)


def test_quaternion_rotation_matches_matrix_rotation(points):
    theta = 1.1
    rotated = rotate_with_quaternion(points, [0.0, 0.0, 5.0], theta)
    expected = Transform().rotate_around_axis(theta, 2).apply(points)
    assert np.allclose(rotated, expected)


def test_quaternion_rotation_fixes_axis():
    axis = np.array([1.0, 2.1, 0.1])
    on_axis = np.array([axis * 2.0])
    rotated = rotate_with_quaternion(on_axis, axis, 3.14 / 3)
    assert np.allclose(rotated, on_axis)


def test_quaternion_full_turn_is_identity(points):
    rotated = rotate_with_quaternion(points, [0.3, -1.0, 0.4], 2 * math.pi)
    assert np.allclose(rotated, points)


def test_apply_rejects_bad_shape():
    with pytest.raises(ValueError):
        Transform().apply(np.zeros((3, 2)))