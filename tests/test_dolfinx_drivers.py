"""Tests of the drivers on dolfinx meshes."""

import pytest

pytest.importorskip("dolfinx")

from mpi4py.MPI import COMM_WORLD
from numpy import isclose
from numpy.testing import assert_allclose

from Hephaistos.Mesh.domain_builder import DomainBuilder
from Hephaistos.Mesh.boundary_classifier import BoundaryClassifier
from Hephaistos.Mesh.boundary_planes import planes_from_dict
from Hephaistos.VariationalFormulation.continuum_plasticity import ContinuumPlasticity
from Hephaistos.VariationalFormulation.crystal_plasticity import CrystalPlasticity
from Hephaistos.Solve.Solve import Solve
from Hephaistos.Solve.elastic_increment_solver import ElasticIncrementSolver
from Hephaistos.utils.errors import ConfigurationError, DataError

serial = pytest.mark.skipif(COMM_WORLD.Get_size() > 1, reason="serial only")


@pytest.fixture(autouse=True)
def in_tmp_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


@serial
def test_tension_bar_mesh(tmp_path, tension):
    image = tmp_path / "bar.eps"
    builder = DomainBuilder(tension["extents"], 0, multipliers=tension["multipliers"],
                            image_file=str(image))
    mesh = builder.build()
    assert mesh.topology.index_map(3).size_global == 5
    assert image.exists()
    facet_tag = BoundaryClassifier(mesh, planes_from_dict(tension["boundaries"])).classify()
    assert [len(facet_tag.find(tag)) for tag in (1, 2, 3, 4)] == [1, 1, 5, 5]


@serial
def test_image_failure_keeps_mesh(tmp_path, monkeypatch, tension):
    def broken_backend(*args):
        raise RuntimeError("no renderer")
    monkeypatch.setattr("Hephaistos.Mesh.domain_builder.write_mesh_projection", broken_backend)
    builder = DomainBuilder(tension["extents"], 0, multipliers=tension["multipliers"],
                            image_file=str(tmp_path / "bar.eps"))
    assert builder.build().topology.index_map(3).size_global == 5


@serial
def test_no_image_above_threshold(tmp_path):
    image = tmp_path / "big.eps"
    DomainBuilder((1., 1., 1.), 1, image_threshold=8, image_file=str(image)).build()
    assert not image.exists()


@serial
def test_tension_constraints():
    problem = ContinuumPlasticity({"mesh": {"refinement_factor": 0}})
    assert problem.properties.tau_y == 250.
    bcs = problem.apply_dirichlet_bcs(0, 0)
    assert len(bcs) == 4
    dofs, values = problem.constraints.component(0)
    assert isclose(values, 0.05).sum() == 4
    problem.apply_dirichlet_bcs(0, 1)
    assert_allclose(problem.constraints.values, 0.)


def test_rule_on_unmarked_tag():
    with pytest.raises(ConfigurationError, match="tag 9"):
        ContinuumPlasticity({"mesh": {"refinement_factor": 0},
                             "boundary_conditions": [{"component": "Ux", "tag": 9}]})


def test_missing_material():
    with pytest.raises(ConfigurationError):
        ContinuumPlasticity({"material": {"lame_lambda": 1.}})


@serial
def test_elastic_tension_reaches_target():
    problem = ContinuumPlasticity({"mesh": {"refinement_factor": 0}, "total_increments": 4})
    solver = ElasticIncrementSolver(problem)
    counts = Solve(problem, solver).solve()
    assert len(counts) == 4
    assert all(n <= 3 for n in counts)
    u_x = problem.u.x.array.reshape(-1, 3)[:, 0]
    assert u_x.max() == pytest.approx(0.5)
    assert u_x.min() == pytest.approx(0., abs=1e-12)


def voxel_octant(ix, iy, iz):
    return 1 + (ix >= 1) + 2 * (iy >= 1) + 4 * (iz >= 1)


@pytest.fixture
def shear_dic(write_raster, write_orientations):
    table = {gid: (0.05 * gid, 0., -0.02 * gid) for gid in range(1, 9)}
    return {"orientations": {"grain_id_file": write_raster((3, 3, 3), voxel_octant),
                             "orientation_file": write_orientations(table)},
            "mesh": {"refinement_factor": 0}}


@serial
def test_shear_grains(shear_dic):
    problem = CrystalPlasticity(shear_dic)
    assert problem.mesh.topology.index_map(3).size_global == 8
    assert problem.grains.grains() == list(range(1, 9))
    assert problem.grains.rotation.x.array.size == 8 * 9
    assert sorted(problem.grains.cell_tags.values.tolist()) == list(range(1, 9))
    problem.apply_dirichlet_bcs(0, 0)
    dofs, values = problem.constraints.component(0)
    # Top face vertices of a 2 x 2 x 2 mesh are sheared
    assert isclose(values, 0.0005).sum() == 9


def test_shear_orientations_loaded_before_mesh(tmp_path, shear_dic):
    bad = tmp_path / "bad.txt"
    bad.write_text("header\n0 0 0 1\n")
    shear_dic["orientations"]["grain_id_file"] = str(bad)
    with pytest.raises(DataError):
        CrystalPlasticity(shear_dic)


def test_shear_requires_files():
    with pytest.raises(ConfigurationError, match="grain_id_file"):
        CrystalPlasticity({})
