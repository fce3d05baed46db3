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
Grain Mapping Module
====================

Transfer of a voxelized orientation field onto the cells of a dolfinx mesh.

Each cell takes the grain of the voxel containing its midpoint. The mapping
exposes the grain id of every local cell, cell tags grouping the cells of
each grain, and a piecewise constant rotation tensor for the crystal
constitutive model.
"""

from dolfinx.fem import functionspace, Function
from dolfinx.mesh import compute_midpoints, meshtags
from dolfinx import default_scalar_type
from numpy import arange, int32


class GrainMapping:
    """
    Grain ids and crystal rotations of the mesh cells.

    Attributes
    ----------
    mesh : dolfinx.mesh.Mesh Computational mesh
    field : OrientationField Voxelized orientation field
    grain_ids : numpy.ndarray Grain id of each local cell (owned then ghost)
    cell_tags : dolfinx.mesh.MeshTags Cells tagged by grain id
    rotation : dolfinx.fem.Function DG0 (3, 3) rotation tensor
    """
    def __init__(self, mesh, field):
        self.mesh = mesh
        self.field = field
        tdim = mesh.topology.dim
        cell_map = mesh.topology.index_map(tdim)
        self.cells = arange(cell_map.size_local + cell_map.num_ghosts, dtype=int32)
        midpoints = compute_midpoints(mesh, tdim, self.cells)
        self.grain_ids = field.grain_ids_at(midpoints[:, :len(field.num_pts)])
        self.cell_tags = meshtags(mesh, tdim, self.cells, self.grain_ids.astype(int32))
        self.rotation = self._rotation_function(midpoints[:, :len(field.num_pts)])

    def _rotation_function(self, midpoints):
        Q = functionspace(self.mesh, ("DG", 0, (3, 3)))
        R = Function(Q, name="Rotation")
        rotations = self.field.rotations_at(midpoints).astype(default_scalar_type)
        R.x.array.reshape(-1, 9)[self.cells] = rotations.reshape(-1, 9)
        R.x.scatter_forward()
        return R

    def grains(self):
        """Distinct grain ids present on this process."""
        return sorted(set(self.grain_ids.tolist()))
