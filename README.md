# meshkit

A small geometry-processing library built on NumPy and SciPy. Points,
vertices and faces are plain NumPy arrays: vertices are `(n, 3)` floats,
triangle faces are `(m, 3)` integer indices.

## Modules

- `meshkit.transform`: `Transform`, a 4×4 homogeneous matrix with
  `uniform_scale`, `scale`, `translate` and `rotate_around_axis` (each
  replaces the matrix and returns the transform), composition with `*` or
  `compose`, approximate equality with `==`, and `apply(points)` which returns
  the transformed points. `rotate_with_quaternion(points, axis, theta)` rotates
  points about an axis with a unit quaternion.
- `meshkit.interpolation`: `LinearInterpolation`, `LagrangeInterpolation`
  (one polynomial through all samples) and `CubicInterpolation` (piecewise
  cubic with matching first and second derivatives, plus `tangent(i, x)`).
  Each is built from an `(n, 2)` array of samples and evaluated by calling it
  with `t`. Beyond the last sample the last y value is returned; before the
  first, `0.0`.
- `meshkit.curve_utils`: `build_linspace(points, resolution)` samples the
  x range of the points evenly, `translate_points(points, offset)` shifts
  rows, and `CurveNetwork` collects polylines (`points`, `edges`, `colors`)
  through `add_curve(curve, color)`.
- `meshkit.bezier`: `de_casteljau`, `de_casteljau_intermediate`,
  `intermediate_points`, `plot_curve`, `subdivide`, `subdivision_plot`,
  `compute_tangent`, `compute_normal` (second derivative) and
  `loop_of_vertices`, which returns a closed ring of points around the curve,
  orthogonal to its tangent.
- `meshkit.halfedge_ds` and `meshkit.halfedge_builder`: `HalfedgeDS` holds
  half-edge tables (`opposite`, `next_edge`, `prev_edge`, `target`, `face`,
  `vertex_edge`, and `face_edge` when faces are stored), with `None` for an
  undefined reference and `describe()` returning them as text.
  `build_halfedges(n_vertices, faces, with_faces=False)` fills one from a
  triangle list, boundary half-edges included; `next_boundary_halfedge`
  walks a boundary cycle.
- `meshkit.mesh_parts` and `meshkit.mesh`: `Vertex`, `HalfEdge` and
  `PrimalFace` objects linked into a `Mesh`. `Mesh` offers `face_normals`,
  `face_normals_hed`, `vertex_normals`, `vertex_normals_hed` (negated),
  `gaussian_curvature`, `count_boundaries` and `vertex_degree_statistics`,
  which returns the degree distribution and a list of inconsistent vertices.
- `meshkit.laplacian`: `LaplacianMesh`, a `Mesh` carrying the cotangent
  matrix `L`, the lumped area matrix `A`, `Ainv` and `Delta = Ainv @ L`, with
  `initial_heat()` (the x coordinates) and `heat_step_explicit` /
  `heat_step_implicit`, which return the new heat vector.
- `meshkit.icp`: `nearest_neighbour(source, target, strategy)` with
  `KnnStrategy.OCTREE` (tree search) or `KnnStrategy.BRUTEFORCE`,
  `nearest_neighbour_point_to_plane` (returns matched points and PCA normals
  of the target) and `rigid_align(source, target)` for corresponding points.
- `meshkit.conformal`: `boundary_loop(faces)`, `cotangent_matrix(vertices,
  faces)` and `ConformalParametrization`, which builds the Dirichlet, area and
  conformal energy matrices and computes a spectral conformal map of a mesh
  with a boundary, scaled into the unit square.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Transforms:

```python
import numpy as np
from meshkit.transform import Transform, rotate_with_quaternion

t = Transform()
t.uniform_scale(3.0)
points = t.apply(np.array([[1.0, 0.0, 0.0]]))   # [[3., 0., 0.]]

rotated = rotate_with_quaternion(points, [0.0, 0.0, 1.0], np.pi / 2)
```

Interpolation:

```python
import numpy as np
from meshkit.interpolation import CubicInterpolation
from meshkit.curve_utils import build_linspace

pts = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 0.0], [3.0, 1.0]])
spline = CubicInterpolation(pts)
xs = build_linspace(pts, 50)
ys = [spline(x) for x in xs]
```

Bezier curves:

```python
import numpy as np
from meshkit import bezier

control = np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 0.0], [3.0, 2.0, 0.0], [4.0, 0.0, 0.0]])
point = bezier.de_casteljau(control, 0.5)
polyline = bezier.plot_curve(control, 100)
left, right = bezier.subdivide(control, 0.5)
```

Meshes, Laplacians and heat flow:

```python
from meshkit.mesh import Mesh
from meshkit.laplacian import LaplacianMesh

mesh = Mesh(vertices, faces)
normals = mesh.vertex_normals()
curvature = mesh.gaussian_curvature()

lap = LaplacianMesh(vertices, faces)
u = lap.initial_heat()
u = lap.heat_step_implicit(u, 0.01)
```

Rigid registration:

```python
from meshkit.icp import KnnStrategy, nearest_neighbour, rigid_align

matched = nearest_neighbour(source, target, KnnStrategy.OCTREE)
aligned = rigid_align(source, matched)
```

Conformal parametrization:

```python
from meshkit.conformal import ConformalParametrization

param = ConformalParametrization(vertices, faces)
uv = param.build_parametrizations()   # also kept as param.uv
```

## What it does not do

meshkit is a library only. It has no command-line program and no viewer or
interactive window. It does not read or write mesh or point files (OFF, OBJ,
PLY or any other format): load your data into NumPy arrays yourself and pass
them in.