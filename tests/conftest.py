"""Fixtures shared by the Hephaistos tests."""

from numpy import linspace, meshgrid, stack, flatnonzero, abs as np_abs
import pytest

from Hephaistos.Mesh.domain import Domain
from Hephaistos.Mesh.boundary_planes import planes_from_dict
from Hephaistos.utils.default_parameters import default_tension_parameters


class GridLocator:
    """Vertex dofs of a structured box, numbered node * 3 + axis."""

    def __init__(self, domain, planes, tol=1e-12):
        axes = [linspace(0., L, n + 1) for L, n in zip(domain.extents, domain.counts)]
        self.points = stack(meshgrid(*axes, indexing="ij"), axis=-1).reshape(-1, 3)
        self.planes = {plane.tag: plane for plane in planes}
        self.tol = tol
        self.calls = []

    def nodes(self, tag):
        plane = self.planes[tag]
        return flatnonzero(np_abs(self.points[:, plane.axis] - plane.position) <= self.tol)

    def locate(self, tag, axis):
        self.calls.append((tag, axis))
        nodes = self.nodes(tag)
        return 3 * nodes + axis, self.points[nodes].T


@pytest.fixture
def tension():
    return default_tension_parameters()


@pytest.fixture
def tension_locator(tension):
    domain = Domain.from_refinement(tension["extents"], 0, multipliers=tension["multipliers"])
    return GridLocator(domain, planes_from_dict(tension["boundaries"]))


@pytest.fixture
def write_raster(tmp_path):
    """Write a grain raster; grain_of maps a voxel index to its grain id."""
    def _write(num_pts, grain_of, header="ix iy iz grainID", name="grainID.txt"):
        path = tmp_path / name
        lines = [header] if header is not None else []
        for ix in range(num_pts[0]):
            for iy in range(num_pts[1]):
                for iz in range(num_pts[2]):
                    lines.append(f"{ix} {iy} {iz} {grain_of(ix, iy, iz)}")
        path.write_text("\n".join(lines) + "\n")
        return str(path)
    return _write


@pytest.fixture
def write_orientations(tmp_path):
    """Write an orientation table from a {grain_id: (a1, a2, a3)} mapping."""
    def _write(table, name="orientations.txt"):
        path = tmp_path / name
        path.write_text("".join(f"{gid} {a[0]} {a[1]} {a[2]}\n" for gid, a in table.items()))
        return str(path)
    return _write
