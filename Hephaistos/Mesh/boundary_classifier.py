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
Boundary Classifier Module
==========================

This module tags the boundary facets of a dolfinx mesh.

Every exterior facet owned by the calling process is visited once, its
midpoint is compared against the configured planes and the resulting tags
are stored in a MeshTags object. The tags are the only vocabulary used
later on to select the faces receiving a Dirichlet condition.
"""

from dolfinx.mesh import exterior_facet_indices, compute_midpoints, meshtags
from numpy import int32

from .boundary_planes import classify_centroids, UNTAGGED


class BoundaryClassifier:
    """
    Tagging of the boundary facets of a mesh.

    Attributes
    ----------
    mesh : dolfinx.mesh.Mesh Mesh whose boundary is tagged
    planes : list of BoundaryPlane Planes in order of precedence
    tol : float Absolute tolerance on the distance to a plane
    fdim : int Dimension of facets
    """
    def __init__(self, mesh, planes, tol=0.):
        """
        Initialize the classifier.

        Parameters
        ----------
        mesh : dolfinx.mesh.Mesh Mesh whose boundary is tagged
        planes : list of BoundaryPlane Planes in order of precedence
        tol : float, optional Absolute tolerance, exact comparison by default
        """
        self.mesh = mesh
        self.planes = planes
        self.tol = tol
        self.fdim = mesh.topology.dim - 1

    def owned_boundary_facets(self):
        """
        Return the exterior facets owned by this process.

        Returns
        -------
        numpy.ndarray Local indices of the owned exterior facets
        """
        topology = self.mesh.topology
        topology.create_connectivity(self.fdim, topology.dim)
        facets = exterior_facet_indices(topology)
        n_owned = topology.index_map(self.fdim).size_local
        return facets[facets < n_owned].astype(int32)

    def classify(self):
        """
        Tag the boundary facets.

        Returns
        -------
        dolfinx.mesh.MeshTags Tags of the facets lying on a configured plane
        """
        facets = self.owned_boundary_facets()
        centroids = compute_midpoints(self.mesh, self.fdim, facets)
        tags = classify_centroids(centroids, self.planes, self.tol)
        tagged = tags != UNTAGGED
        return meshtags(self.mesh, self.fdim, facets[tagged], tags[tagged])
