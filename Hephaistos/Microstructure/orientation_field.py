# Copyright 2025 CEA
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
Orientation Field Module
========================

This module loads a voxelized polycrystal and answers orientation queries.

Two files describe the microstructure:

- the grain id raster: after a given number of header lines, one row per
  voxel "ix iy iz grain_id" where (ix, iy, iz) are the voxel indices;
- the orientation table: one row per grain "grain_id a1 a2 a3" where
  (a1, a2, a3) is the crystallographic orientation of the grain, either a
  Rodrigues-Frank vector or Bunge Euler angles.

Both files are read eagerly when the field is created, so that malformed data
is reported before any solve step. Once loaded, the field is read-only.

A physical point p is mapped to the voxel floor(p / stencil) along each axis,
where the stencil (size of one voxel) is extent / (num_pts - 1). Indices are
clamped to the raster. With the "raise" policy, points further than
tol * stencil outside the domain are rejected instead.

Key components:
- voxel_stencil: voxel size from the domain extents and voxel counts
- OrientationField: grain raster, orientation table and lookups
"""

from numpy import (asarray, loadtxt, floor, clip, rint, prod, full,
                   unique, searchsorted, ravel_multi_index, int64, arctan,
                   errstate, where)
from numpy.linalg import norm
from scipy.spatial.transform import Rotation

from ..utils.errors import ConfigurationError, DataError, OutOfDomainError
from ..utils.mpi import print

REPRESENTATIONS = ("rodrigues", "euler", "euler_degrees")
POLICIES = ("clamp", "raise")


def voxel_stencil(extents, num_pts):
    """
    Compute the size of one voxel along each axis.

    Parameters
    ----------
    extents : sequence of float Size of the domain along each axis
    num_pts : sequence of int Number of voxels along each axis

    Returns
    -------
    tuple of float extent / (num_pts - 1) along each axis
    """
    if len(extents) != len(num_pts):
        raise ConfigurationError("Extents and voxel counts must have the same dimension")
    for n in num_pts:
        if int(n) != n or n < 2:
            raise ConfigurationError(f"Voxel counts must be integers >= 2, got {tuple(num_pts)}")
    for L in extents:
        if not L > 0:
            raise ConfigurationError(f"Domain extents must be positive, got {tuple(extents)}")
    return tuple(float(L) / (int(n) - 1) for L, n in zip(extents, num_pts))


def _load_table(file_name, header_lines, n_columns, description):
    try:
        data = loadtxt(file_name, skiprows=header_lines, ndmin=2, dtype=float)
    except OSError as err:
        raise ConfigurationError(f"Cannot read {description} file {file_name}: {err}") from err
    except ValueError as err:
        raise DataError(f"Malformed {description} file {file_name}: {err}") from err
    if data.size > 0 and data.shape[1] != n_columns:
        raise DataError(f"Malformed {description} file {file_name}: expected {n_columns} "
                        f"columns per row, found {data.shape[1]}")
    return data


def rotation_from_orientation(orientation, representation):
    """
    Convert an orientation triplet into a rotation.

    Parameters
    ----------
    orientation : array_like (3,) or (n, 3) Orientation triplets
    representation : str "rodrigues", "euler" (Bunge, radians) or "euler_degrees"

    Returns
    -------
    scipy.spatial.transform.Rotation
    """
    orientation = asarray(orientation, dtype=float)
    if representation == "rodrigues":
        # r = tan(theta / 2) n
        r_norm = norm(orientation, axis=-1, keepdims=True)
        with errstate(invalid="ignore", divide="ignore"):
            rotvec = where(r_norm > 0, 2 * arctan(r_norm) * orientation / r_norm, 0.)
        return Rotation.from_rotvec(rotvec)
    elif representation == "euler":
        return Rotation.from_euler("ZXZ", orientation)
    elif representation == "euler_degrees":
        return Rotation.from_euler("ZXZ", orientation, degrees=True)
    raise ConfigurationError(f"Unknown orientation representation: {representation}")


class OrientationField:
    """
    Voxelized grain map and per-grain crystallographic orientations.

    Attributes
    ----------
    num_pts : tuple of int Number of voxels along each axis
    stencil : numpy.ndarray Size of one voxel along each axis
    extents : numpy.ndarray Size of the voxelized domain along each axis
    grain_ids : numpy.ndarray Grain id of each voxel, shape num_pts
    representation : str Representation of the orientation triplets
    out_of_bounds : str "clamp" or "raise"
    tol : float Tolerance, in voxels, of the "raise" policy
    """
    def __init__(self, grain_id_file, header_lines, orientation_file, num_pts,
                 stencil, representation="rodrigues", out_of_bounds="clamp",
                 tol=1e-8):
        """
        Load the grain raster and the orientation table.

        Parameters
        ----------
        grain_id_file : str Path to the grain id raster
        header_lines : int Number of header lines of the raster
        orientation_file : str Path to the orientation table
        num_pts : sequence of int Number of voxels along each axis
        stencil : sequence of float Size of one voxel along each axis
        representation : str, optional Representation of the orientations
        out_of_bounds : str, optional Policy for points outside the domain
        tol : float, optional Tolerance of the "raise" policy, in voxels
        """
        if representation not in REPRESENTATIONS:
            raise ConfigurationError(f"Unknown orientation representation: {representation}")
        if out_of_bounds not in POLICIES:
            raise ConfigurationError(f"Unknown out of bounds policy: {out_of_bounds}")
        if int(header_lines) != header_lines or header_lines < 0:
            raise ConfigurationError(f"Header line count must be a non-negative integer, got {header_lines}")
        if len(num_pts) != len(stencil):
            raise ConfigurationError("Voxel counts and stencil must have the same dimension")
        for n in num_pts:
            if int(n) != n or n < 1:
                raise ConfigurationError(f"Voxel counts must be positive integers, got {tuple(num_pts)}")
        for h in stencil:
            if not h > 0:
                raise ConfigurationError(f"Voxel stencil must be positive, got {tuple(stencil)}")
        self.num_pts = tuple(int(n) for n in num_pts)
        self.stencil = asarray(stencil, dtype=float)
        self.extents = self.stencil * (asarray(self.num_pts) - 1)
        self.representation = representation
        self.out_of_bounds = out_of_bounds
        self.tol = tol

        self.grain_ids = self._load_grain_ids(grain_id_file, int(header_lines))
        self._ids, self._orientations = self._load_orientations(orientation_file)
        self._check_grains_have_orientation()
        self._rotations = rotation_from_orientation(self._orientations, representation).as_matrix()
        for array in (self.grain_ids, self._ids, self._orientations, self._rotations):
            array.flags.writeable = False
        print(f"Loaded {self.grain_ids.size} voxels and {len(self._ids)} grain orientations")

    @classmethod
    def from_domain(cls, grain_id_file, header_lines, orientation_file, extents,
                    num_pts, **kwargs):
        """
        Create the field with the stencil derived from the domain extents.

        Parameters
        ----------
        extents : sequence of float Size of the domain along each axis
        num_pts : sequence of int Number of voxels along each axis
        Other parameters : see OrientationField
        """
        stencil = voxel_stencil(extents, num_pts)
        return cls(grain_id_file, header_lines, orientation_file, num_pts,
                   stencil, **kwargs)

    def _load_grain_ids(self, file_name, header_lines):
        dim = len(self.num_pts)
        data = _load_table(file_name, header_lines, dim + 1, "grain id")
        n_voxels = int(prod(self.num_pts))
        if data.shape[0] != n_voxels:
            raise DataError(f"Malformed grain id file {file_name}: expected {n_voxels} "
                            f"voxel rows, found {data.shape[0]}")
        if not (data == rint(data)).all():
            raise DataError(f"Malformed grain id file {file_name}: non integer entries")
        data = data.astype(int64)
        index = data[:, :dim]
        if (index < 0).any() or (index >= asarray(self.num_pts)).any():
            raise DataError(f"Malformed grain id file {file_name}: voxel index out of range")
        flat = ravel_multi_index(tuple(index.T), self.num_pts)
        if len(unique(flat)) != n_voxels:
            raise DataError(f"Malformed grain id file {file_name}: duplicated voxels")
        grain_ids = full(self.num_pts, -1, dtype=int64)
        grain_ids[tuple(index.T)] = data[:, dim]
        return grain_ids

    def _load_orientations(self, file_name):
        data = _load_table(file_name, 0, 4, "orientation")
        if data.shape[0] == 0:
            raise DataError(f"Malformed orientation file {file_name}: no orientation")
        ids = data[:, 0]
        if not (ids == rint(ids)).all():
            raise DataError(f"Malformed orientation file {file_name}: non integer grain ids")
        ids = ids.astype(int64)
        if len(unique(ids)) != len(ids):
            raise DataError(f"Malformed orientation file {file_name}: duplicated grain ids")
        order = ids.argsort()
        return ids[order], data[order, 1:].copy()

    def _check_grains_have_orientation(self):
        missing = set(unique(self.grain_ids).tolist()) - set(self._ids.tolist())
        if missing:
            raise DataError(f"Grains without orientation: {sorted(missing)}")

    def voxel_indices(self, points):
        """
        Map physical points to voxel indices.

        Parameters
        ----------
        points : array_like (n, dim) Physical points

        Returns
        -------
        numpy.ndarray (n, dim) Voxel index of each point
        """
        dim = len(self.num_pts)
        points = asarray(points, dtype=float).reshape(-1, dim)
        if self.out_of_bounds == "raise":
            band = self.tol * self.stencil
            outside = ((points < -band) | (points > self.extents + band)).any(axis=1)
            if outside.any():
                raise OutOfDomainError(f"Point {points[outside][0].tolist()} lies outside "
                                       f"the voxelized domain [0, {self.extents.tolist()}]")
        raw = floor(points / self.stencil).astype(int64)
        return clip(raw, 0, asarray(self.num_pts) - 1)

    def voxel_index(self, point):
        """
        Map a physical point to its voxel index.

        Parameters
        ----------
        point : array_like (dim,) Physical point

        Returns
        -------
        tuple of int Voxel index
        """
        return tuple(int(i) for i in self.voxel_indices(point)[0])

    def grain_ids_at(self, points):
        """
        Return the grain id of the voxel containing each point.

        Parameters
        ----------
        points : array_like (n, dim) Physical points

        Returns
        -------
        numpy.ndarray (n,) Grain ids
        """
        index = self.voxel_indices(points)
        return self.grain_ids[tuple(index.T)]

    def grain_id_at(self, point):
        return int(self.grain_ids_at(point)[0])

    def _table_rows(self, grain_ids):
        return searchsorted(self._ids, grain_ids)

    def _table_row(self, grain_id):
        row = self._table_rows(grain_id)
        if row == len(self._ids) or self._ids[row] != grain_id:
            raise KeyError(grain_id)
        return row

    def orientation_of(self, grain_id):
        """
        Return the orientation triplet of a grain.

        Parameters
        ----------
        grain_id : int Grain identifier
        """
        return self._orientations[self._table_row(grain_id)].copy()

    def orientation_at(self, point):
        """
        Return the orientation of the grain occupying the voxel of a point.

        Parameters
        ----------
        point : array_like (dim,) Physical point

        Returns
        -------
        numpy.ndarray (3,) Orientation triplet of the grain
        """
        return self.orientation_of(self.grain_id_at(point))

    def rotations_at(self, points):
        """
        Return the rotation matrices of the grains occupying the voxels of points.

        Parameters
        ----------
        points : array_like (n, dim) Physical points

        Returns
        -------
        numpy.ndarray (n, 3, 3) Rotation matrices
        """
        return self._rotations[self._table_rows(self.grain_ids_at(points))].copy()

    def rotation_at(self, point):
        return self.rotations_at(point)[0]

    def rotation_of(self, grain_id):
        return self._rotations[self._table_row(grain_id)].copy()

