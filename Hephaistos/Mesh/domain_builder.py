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
Domain Builder Module
=====================

This module generates the structured hexahedral mesh of the simulated box.

The DomainBuilder class wraps dolfinx box generation: it validates the
extents and refinement parameters, creates the mesh distributed over the
communicator and, for small serial runs, writes an image of the mesh to help
debugging a problem setup.
"""

from dolfinx.mesh import create_box, CellType, entities_to_geometry
from mpi4py.MPI import COMM_WORLD
from numpy import arange, int32

from .domain import Domain
from .mesh_output import write_mesh_projection
from ..utils.default_parameters import default_mesh_parameters
from ..utils.mpi import print, is_serial


class DomainBuilder:
    """
    Builder of the structured box mesh.

    Attributes
    ----------
    domain : Domain Extents and per-axis element counts
    comm : mpi4py.MPI.Comm Communicator over which the mesh is distributed
    image_threshold : int Cell count under which a mesh image is written
    image_file : str Name of the mesh image
    """
    def __init__(self, extents, refinement_factor=None, base_count=None,
                 multipliers=None, comm=COMM_WORLD, **kwargs):
        """
        Initialize the builder.

        Parameters
        ----------
        extents : sequence of float Physical size of the box along each axis
        refinement_factor : int, optional Uniform refinement levels
        base_count : int, optional Elements per axis before refinement
        multipliers : sequence of int, optional Axis-specific multipliers
        comm : mpi4py.MPI.Comm, optional Communicator, COMM_WORLD by default
        **kwargs : image_threshold and image_file overrides
        """
        param = default_mesh_parameters()
        if refinement_factor is None:
            refinement_factor = param["refinement_factor"]
        if base_count is None:
            base_count = param["base_count"]
        self.domain = Domain.from_refinement(extents, refinement_factor,
                                             base_count, multipliers)
        self.comm = comm
        self.image_threshold = kwargs.get("image_threshold", param["image_threshold"])
        self.image_file = kwargs.get("image_file", param["image_file"])

    def build(self):
        """
        Generate the hexahedral mesh of the box.

        Returns
        -------
        dolfinx.mesh.Mesh Distributed box mesh
        """
        print("generating problem mesh")
        mesh = create_box(self.comm, [self.domain.lower, self.domain.upper],
                          list(self.domain.counts), cell_type=CellType.hexahedron)
        tdim = mesh.topology.dim
        n_cells = mesh.topology.index_map(tdim).size_global
        if n_cells < self.image_threshold and is_serial(self.comm):
            self.write_image(mesh)
        return mesh

    def write_image(self, mesh):
        """
        Write a projection of the mesh on the x-y plane.

        Failing to write the image only prints a warning, the mesh is
        still usable.

        Parameters
        ----------
        mesh : dolfinx.mesh.Mesh Mesh to draw
        """
        mesh.topology.create_connectivity(1, 0)
        n_edges = mesh.topology.index_map(1).size_local
        edges = entities_to_geometry(mesh, 1, arange(n_edges, dtype=int32))
        try:
            write_mesh_projection(mesh.geometry.x, edges, self.image_file)
        except (OSError, ValueError, RuntimeError) as err:
            print(f"Warning: mesh image could not be written ({err})")
            return
        print(f"writing mesh image to {self.image_file}")
