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
Problem Base Module
===================

This module provides the foundation shared by the incremental boundary-value
problems.

The IncrementalProblem class strings together the driver components in the
order they depend on each other: the box mesh is generated, its boundary
facets are tagged, the displacement space is created and the Dirichlet rules
are compiled into a constraint builder. The nonlinear solver then asks the
problem for the boundary conditions of every (increment, iteration) pair.

Key components:
- merge_parameters: user dictionary completed with the default parameters
- IncrementalProblem: base framework of the simulation drivers
"""

from copy import deepcopy

from mpi4py.MPI import COMM_WORLD
from dolfinx.fem import functionspace, Function

from .dolfinx_constraints import DofLocator, to_dirichletbc
from .incremental_constraints import rules_from_config, IncrementalConstraintBuilder
from ..Mesh.domain_builder import DomainBuilder
from ..Mesh.boundary_classifier import BoundaryClassifier
from ..Mesh.boundary_planes import planes_from_dict, boundary_tolerance
from ..utils.default_parameters import default_parameters
from ..utils.errors import ConfigurationError
from ..utils.mpi import print


def merge_parameters(simulation_dic, defaults=None):
    """
    Complete a simulation dictionary with the default parameters.

    Top-level keys of the user dictionary replace the defaults, except the
    "fem", "mesh" and "Newton" sub-dictionaries which are updated key by key.

    Parameters
    ----------
    simulation_dic : dict User parameters
    defaults : dict, optional Problem specific defaults

    Returns
    -------
    dict Completed copy of the parameters
    """
    param = default_parameters()
    if defaults is not None:
        param.update(deepcopy(defaults))
    for key, value in simulation_dic.items():
        if key in ("fem", "mesh", "Newton"):
            param[key].update(value)
        else:
            param[key] = deepcopy(value)
    return param


class IncrementalProblem:
    """
    Base class of the incremental boundary-value problems.

    Attributes
    ----------
    parameters : dict Completed simulation parameters
    extents : tuple of float Size of the box along each axis
    dim : int Dimension of the problem
    total_increments : int Planned number of load increments
    mesh : dolfinx.mesh.Mesh Computational mesh
    facet_tag : dolfinx.mesh.MeshTags Tags of the boundary facets
    V : dolfinx.fem.FunctionSpace Vector displacement space
    u : dolfinx.fem.Function Accumulated displacement
    rules : list of DirichletRule Boundary conditions in order of precedence
    constraints : ConstraintSet Constraints of the last built iteration
    """
    def __init__(self, simulation_dic, defaults=None):
        """
        Initialize the problem.

        Parameters
        ----------
        simulation_dic : dict
            - extents : tuple of float Size of the box
            - multipliers : tuple of int, optional Axis-specific multipliers
            - total_increments : int Planned number of load increments
            - boundaries : dict Tags, coordinate and positions of the planes
            - boundary_conditions : list of dict Dirichlet rules
            - fem, mesh, Newton : dict, optional Default overrides
        defaults : dict, optional Problem specific defaults
        """
        self.parameters = merge_parameters(simulation_dic, defaults)
        for key in ("extents", "total_increments", "boundaries", "boundary_conditions"):
            if key not in self.parameters:
                raise ConfigurationError(f"Missing simulation parameter: {key}")
        self._init_mpi()
        self.extents = tuple(float(L) for L in self.parameters["extents"])
        self.dim = len(self.extents)
        total_increments = self.parameters["total_increments"]
        if int(total_increments) != total_increments or total_increments < 1:
            raise ConfigurationError(f"Total number of increments must be a positive integer, got {total_increments}")
        self.total_increments = int(total_increments)

        self.set_before_mesh()
        self.mesh = self.create_mesh()
        self.facet_tag = self.mark_boundaries()
        self.set_function_space()
        self._init_boundary_conditions()
        self.constraints = None
        self.set_after_mesh()

    def _init_mpi(self):
        """
        Initialize MPI configuration for parallel computation.
        """
        if COMM_WORLD.Get_size() > 1:
            print("Parallel computation")
            self.mpi_bool = True
        else:
            print("Serial computation")
            self.mpi_bool = False

    def set_before_mesh(self):
        """Hook for the data that must be loaded before the mesh is built."""
        pass

    def set_after_mesh(self):
        """Hook for the data defined on the mesh."""
        pass

    def create_mesh(self):
        """
        Generate the box mesh.

        Returns
        -------
        dolfinx.mesh.Mesh Distributed box mesh
        """
        mesh_param = self.parameters["mesh"]
        builder = DomainBuilder(self.extents,
                                refinement_factor=mesh_param["refinement_factor"],
                                base_count=self.parameters.get("base_count", mesh_param["base_count"]),
                                multipliers=self.parameters.get("multipliers"),
                                image_threshold=mesh_param["image_threshold"],
                                image_file=mesh_param["image_file"])
        self.domain = builder.domain
        print(f"Number of elements per axis: {self.domain.counts}")
        return builder.build()

    def mark_boundaries(self):
        """
        Tag the boundary facets lying on the configured planes.

        Returns
        -------
        dolfinx.mesh.MeshTags Facet tags
        """
        self.planes = planes_from_dict(self.parameters["boundaries"])
        tol = boundary_tolerance(self.extents, self.parameters["mesh"]["boundary_rtol"])
        return BoundaryClassifier(self.mesh, self.planes, tol).classify()

    def set_function_space(self):
        """
        Create the vector Lagrange displacement space and the displacement.
        """
        degree = self.parameters["fem"]["u_degree"]
        self.V = functionspace(self.mesh, ("Lagrange", degree, (self.dim,)))
        self.u = Function(self.V, name="Displacement")

    def _init_boundary_conditions(self):
        marked = {plane.tag for plane in self.planes}
        self.rules = rules_from_config(self.parameters["boundary_conditions"],
                                       self.dim, self.total_increments, marked)
        locator = DofLocator(self.V, self.facet_tag)
        self.constraint_builder = IncrementalConstraintBuilder(self.rules, locator, self.dim)

    def apply_dirichlet_bcs(self, increment, iteration):
        """
        Build the boundary conditions of an iteration.

        The constraint set is rebuilt from scratch and kept in the
        constraints attribute until the next call.

        Parameters
        ----------
        increment : int Load increment index
        iteration : int Nonlinear iteration index within the increment

        Returns
        -------
        list of dolfinx.fem.DirichletBC Boundary conditions on the correction
        """
        self.constraints = self.constraint_builder.build(increment, iteration)
        return to_dirichletbc(self.constraints, self.V)
