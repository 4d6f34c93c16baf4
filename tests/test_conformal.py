import numpy as np
import pytest

from meshkit.conformal import ConformalParametrization, boundary_loop, cotangent_matrix


def grid(k, side):
    h = side / (k - 1)
    vertices = np.array([[c * h, r * h, 0.0] for r in range(k) for c in range(k)])
    faces = []
    for r in range(k - 1):
        for c in range(k - 1):
            i = r * k + c
            faces.append([i, i + 1, i + k + 1])
            faces.append([i, i + k + 1, i + k])
    return vertices, np.array(faces)


TETRA_V = np.array(
    [[1.0, 1.0, 1.0], [1.0, -1.0, -1.0], [-1.0, 1.0, -1.0], [-1.0, -1.0, 1.0]]
)
TETRA_F = np.array([[0, 1, 2], [0, 3, 1], [0, 2, 3], [1, 3, 2]])


def test_boundary_loop_of_grid():
    k = 5
    vertices, faces = grid(k, 1.0)
    loop = boundary_loop(faces)
    assert len(loop) == 4 * (k - 1)
    assert len(set(loop.tolist())) == len(loop)
    assert loop[0] == 0
    xs, ys = vertices[loop, 0], vertices[loop, 1]
    assert np.all((np.isclose(xs, 0) | np.isclose(xs, 1)) | (np.isclose(ys, 0) | np.isclose(ys, 1)))
    directed = {(a, b) for row in faces.tolist() for a, b in zip(row, row[1:] + row[:1])}
    pairs = zip(loop.tolist(), np.roll(loop, -1).tolist())
    assert all(pair in directed for pair in pairs)


def test_boundary_loop_closed_mesh_is_empty():
    assert boundary_loop(TETRA_F).size == 0


def test_cotangent_matrix_right_triangle():
    vertices = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    expected = np.array([[-1.0, 0.5, 0.5], [0.5, -0.5, 0.0], [0.5, 0.0, -0.5]])
    assert np.allclose(cotangent_matrix(vertices, [[0, 1, 2]]).toarray(), expected)


def test_cotangent_matrix_invariants():
    vertices, faces = grid(4, 2.0)
    dense = cotangent_matrix(vertices, faces).toarray()
    assert np.allclose(dense, dense.T)
    assert np.allclose(dense.sum(axis=1), 0.0)


def test_size_check():
    vertices, faces = grid(4, 1.0)
    n = len(vertices)
    param = ConformalParametrization(vertices, faces)
    param.build_parametrizations()
    assert param.dirichlet.shape == (2 * n, 2 * n)
    assert param.area.shape == (2 * n, 2 * n)
    assert param.conformal_energy.shape == (2 * n, 2 * n)


def test_area_of_square_parametrization():
    side = 1.68
    vertices, faces = grid(6, side)
    param = ConformalParametrization(vertices, faces)
    area = param.compute_area()
    flattened = np.concatenate([vertices[:, 0], vertices[:, 1]])
    assert flattened @ (area @ flattened) == pytest.approx(side * side)


def test_dirichlet_is_block_diagonal():
    vertices, faces = grid(4, 1.0)
    n = len(vertices)
    param = ConformalParametrization(vertices, faces)
    dense = param.compute_dirichlet().toarray()
    cot = cotangent_matrix(vertices, faces).toarray()
    assert np.allclose(dense[:n, :n], cot)
    assert np.allclose(dense[n:, n:], cot)
    assert np.allclose(dense[:n, n:], 0.0)
    assert np.allclose(dense[n:, :n], 0.0)


def test_conformal_energy_is_difference():
    vertices, faces = grid(4, 1.0)
    param = ConformalParametrization(vertices, faces)
    energy = param.compute_conformal_energy().toarray()
    assert np.allclose(energy, param.dirichlet.toarray() - param.area.toarray())


def test_fixed_vertices_on_boundary():
    vertices, faces = grid(5, 1.0)
    param = ConformalParametrization(vertices, faces)
    loop = param.boundary
    assert param.fixed_vertices.tolist() == [loop[0], loop[len(loop) // 2]]


def test_spectral_parametrization_is_normalised():
    vertices, faces = grid(5, 1.0)
    uv = ConformalParametrization(vertices, faces).build_parametrizations()
    assert uv.shape == (len(vertices), 2)
    assert np.all(np.isfinite(uv))
    assert np.allclose(uv.min(axis=0), 0.0)
    assert np.allclose(uv.max(axis=0), 1.0)


def test_spectral_parametrization_is_deterministic():
    vertices, faces = grid(4, 1.0)
    first = ConformalParametrization(vertices, faces).build_parametrizations()
    second = ConformalParametrization(vertices, faces).build_parametrizations()
    assert np.allclose(first, second)


def test_closed_mesh_rejected():
    with pytest.raises(ValueError):
        ConformalParametrization(TETRA_V, TETRA_F)


def test_bad_faces_rejected():
    vertices, _ = grid(3, 1.0)
    with pytest.raises(ValueError):
        ConformalParametrization(vertices, [[0, 1]])