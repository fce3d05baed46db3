"""Tests of the voxelized orientation field."""

from numpy import array, eye
from numpy.testing import assert_allclose, assert_array_equal
import pytest
from scipy.spatial.transform import Rotation

from Hephaistos.Microstructure.orientation_field import OrientationField, voxel_stencil
from Hephaistos.utils.errors import ConfigurationError, DataError, OutOfDomainError

TABLE = {gid: (0.1 * gid, -0.05 * gid, 0.02 * gid) for gid in range(1, 9)}


def octant(ix, iy, iz):
    return 1 + ix + 2 * iy + 4 * iz


@pytest.fixture
def cube(write_raster, write_orientations):
    """Unit cube sampled by 2 x 2 x 2 voxels, one grain per voxel."""
    def _field(**kwargs):
        return OrientationField.from_domain(write_raster((2, 2, 2), octant), 1,
                                            write_orientations(TABLE), (1., 1., 1.),
                                            (2, 2, 2), **kwargs)
    return _field


def test_stencil():
    assert voxel_stencil((1., 1., 1.), (2, 2, 2)) == (1., 1., 1.)
    assert voxel_stencil((2., 1., 4.), (3, 5, 3)) == (1., 0.25, 2.)
    with pytest.raises(ConfigurationError):
        voxel_stencil((1., 1., 1.), (1, 2, 2))


def test_point_maps_to_floor_voxel(cube):
    field = cube()
    assert field.voxel_index((0.6, 0.6, 0.6)) == (0, 0, 0)
    assert field.grain_id_at((0.6, 0.6, 0.6)) == 1
    assert_allclose(field.orientation_at((0.6, 0.6, 0.6)), TABLE[1])


def test_voxel_boundaries_are_deterministic(cube):
    field = cube()
    point = (1., 0.5, 0.)
    assert field.voxel_index(point) == (1, 0, 0)
    assert all(field.grain_id_at(point) == octant(1, 0, 0) for _ in range(3))


def test_domain_faces_and_outside_points_are_clamped(cube):
    field = cube()
    assert field.voxel_index((1., 1., 1.)) == (1, 1, 1)
    assert field.voxel_index((2.5, -1e-14, 1. + 1e-12)) == (1, 0, 1)


def test_reject_policy(cube):
    field = cube(out_of_bounds="raise")
    assert field.voxel_index((1. + 1e-12, -1e-12, 0.5)) == (1, 0, 0)
    with pytest.raises(OutOfDomainError):
        field.voxel_index((1.5, 0.5, 0.5))
    with pytest.raises(OutOfDomainError):
        field.grain_ids_at([[0.5, 0.5, 0.5], [0.5, -0.1, 0.5]])


def test_vectorised_lookup(cube):
    field = cube()
    points = array([[0.2, 0.2, 0.2], [1., 0., 0.], [0., 1., 1.]])
    assert_array_equal(field.grain_ids_at(points), [1, 2, 7])


def test_orientation_is_a_copy(cube):
    field = cube()
    orientation = field.orientation_at((0.2, 0.2, 0.2))
    orientation[:] = 0.
    assert_allclose(field.orientation_at((0.2, 0.2, 0.2)), TABLE[1])
    with pytest.raises(ValueError):
        field.grain_ids[0, 0, 0] = 5


def test_rodrigues_rotation(write_raster, write_orientations):
    # tan(pi / 8) about z is a rotation of pi / 4
    r = 0.41421356237309503
    field = OrientationField(write_raster((2, 2, 2), lambda *_: 3), 1,
                             write_orientations({3: (0., 0., r)}), (2, 2, 2), (1., 1., 1.))
    expected = Rotation.from_euler("z", 45, degrees=True).as_matrix()
    assert_allclose(field.rotation_at((0.5, 0.5, 0.5)), expected, atol=1e-12)


def test_euler_rotation(write_raster, write_orientations):
    field = OrientationField(write_raster((2, 2, 2), lambda *_: 1), 1,
                             write_orientations({1: (90., 0., 0.)}), (2, 2, 2), (1., 1., 1.),
                             representation="euler_degrees")
    R = field.rotation_at((0., 0., 0.))
    assert_allclose(R @ [1., 0., 0.], [0., 1., 0.], atol=1e-12)
    identity = OrientationField(write_raster((2, 2, 2), lambda *_: 1, name="g.txt"), 1,
                                write_orientations({1: (0., 0., 0.)}, name="o.txt"),
                                (2, 2, 2), (1., 1., 1.), representation="euler")
    assert_allclose(identity.rotation_of(1), eye(3), atol=1e-12)


def test_header_lines(write_raster, write_orientations):
    raster = write_raster((2, 2, 2), octant, header="# voxels\n# ix iy iz gid")
    field = OrientationField(raster, 2, write_orientations(TABLE), (2, 2, 2), (1., 1., 1.))
    assert field.grain_id_at((0.5, 0.5, 1.5)) == 5


def test_missing_voxel_rows(tmp_path, write_orientations):
    raster = tmp_path / "short.txt"
    raster.write_text("header\n0 0 0 1\n1 0 0 1\n")
    with pytest.raises(DataError, match="voxel rows"):
        OrientationField(str(raster), 1, write_orientations(TABLE), (2, 2, 2), (1., 1., 1.))


def test_duplicated_voxels(tmp_path, write_orientations):
    raster = tmp_path / "dup.txt"
    raster.write_text("header\n" + "0 0 0 1\n" * 8)
    with pytest.raises(DataError, match="duplicated voxels"):
        OrientationField(str(raster), 1, write_orientations(TABLE), (2, 2, 2), (1., 1., 1.))


def test_non_numeric_rows(tmp_path, write_orientations):
    raster = tmp_path / "text.txt"
    raster.write_text("0 0 0 one\n")
    with pytest.raises(DataError):
        OrientationField(str(raster), 0, write_orientations(TABLE), (1, 1, 1), (1., 1., 1.))


def test_wrong_header_count(write_raster, write_orientations):
    # The header row is then parsed as data
    with pytest.raises(DataError):
        OrientationField(write_raster((2, 2, 2), octant), 0, write_orientations(TABLE),
                         (2, 2, 2), (1., 1., 1.))


def test_grain_without_orientation(write_raster, write_orientations):
    table = {gid: a for gid, a in TABLE.items() if gid != 4}
    with pytest.raises(DataError, match=r"\[4\]"):
        OrientationField(write_raster((2, 2, 2), octant), 1, write_orientations(table),
                         (2, 2, 2), (1., 1., 1.))


def test_duplicated_grain_ids(tmp_path, write_raster):
    table = tmp_path / "orientations.txt"
    table.write_text("1 0 0 0\n1 0.1 0 0\n")
    with pytest.raises(DataError, match="duplicated grain ids"):
        OrientationField(write_raster((2, 2, 2), lambda *_: 1), 1, str(table),
                         (2, 2, 2), (1., 1., 1.))


def test_missing_file(tmp_path, write_orientations):
    with pytest.raises(ConfigurationError):
        OrientationField(str(tmp_path / "absent.txt"), 1, write_orientations(TABLE),
                         (2, 2, 2), (1., 1., 1.))


@pytest.mark.parametrize("kwargs", [{"representation": "quaternion"},
                                    {"out_of_bounds": "wrap"}])
def test_invalid_options(write_raster, write_orientations, kwargs):
    with pytest.raises(ConfigurationError):
        OrientationField(write_raster((2, 2, 2), octant), 1, write_orientations(TABLE),
                         (2, 2, 2), (1., 1., 1.), **kwargs)


@pytest.mark.parametrize("grain_id", [0, 99])
def test_unknown_grain(cube, grain_id):
    field = cube()
    assert_allclose(field.rotation_of(8) @ field.rotation_of(8).T, eye(3), atol=1e-12)
    with pytest.raises(KeyError):
        field.rotation_of(grain_id)
    with pytest.raises(KeyError):
        field.orientation_of(grain_id)
