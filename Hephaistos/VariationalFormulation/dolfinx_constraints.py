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
Dolfinx Constraints Module
==========================

Bridge between constraint sets and dolfinx.

DofLocator finds the degrees of freedom of one displacement component on the
facets of a boundary tag. to_dirichletbc converts a closed ConstraintSet into
the list of dolfinx DirichletBC objects used to assemble the linear system of
the iteration.
"""

from dolfinx.fem import locate_dofs_topological, dirichletbc
from petsc4py.PETSc import ScalarType
from numpy import int32


class DofLocator:
    """
    Location of boundary degrees of freedom in a vector function space.

    Attributes
    ----------
    V : dolfinx.fem.FunctionSpace Vector displacement space
    facet_tag : dolfinx.mesh.MeshTags Tags of the boundary facets
    bs : int Block size of the space (number of components)
    """
    def __init__(self, V, facet_tag):
        """
        Initialize the locator.

        Parameters
        ----------
        V : dolfinx.fem.FunctionSpace Vector displacement space
        facet_tag : dolfinx.mesh.MeshTags Tags identifying boundary regions
        """
        self.V = V
        self.facet_tag = facet_tag
        self.bs = V.dofmap.index_map_bs
        self.coordinates = V.tabulate_dof_coordinates()

    def locate(self, tag, axis):
        """
        Locate the dofs of a component on the facets of a tag.

        Parameters
        ----------
        tag : int Tag of the boundary region
        axis : int Displacement component

        Returns
        -------
        tuple (dofs, x)
            dofs : numpy.ndarray Indices of the dofs in the unrolled space
            x : numpy.ndarray (3, n) Coordinates of the dofs
        """
        facets = self.facet_tag.find(tag)
        dofs = locate_dofs_topological(self.V.sub(axis), self.facet_tag.dim, facets)
        return dofs, self.coordinates[dofs // self.bs].T


def to_dirichletbc(constraints, V):
    """
    Convert a closed constraint set into dolfinx boundary conditions.

    One DirichletBC is created per displacement component and prescribed
    value.

    Parameters
    ----------
    constraints : ConstraintSet Closed constraints of the iteration
    V : dolfinx.fem.FunctionSpace Vector displacement space

    Returns
    -------
    list of dolfinx.fem.DirichletBC
    """
    bcs = []
    for axis, value, dofs in constraints.groups():
        bcs.append(dirichletbc(ScalarType(value), dofs.astype(int32), V.sub(axis)))
    return bcs
