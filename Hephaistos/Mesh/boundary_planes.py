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
Boundary Planes Module
======================

Geometric classification of boundary faces.

A boundary face is tagged with the integer associated with the axis-aligned
plane its centroid lies on. Planes are checked in the order they are given
and the first match wins, so that a face carries at most one tag. Faces
matching no plane keep the tag 0 (untagged) and receive no Dirichlet
condition.

Key components:
- BoundaryPlane: tag, axis and position of a plane
- planes_from_dict: planes from the {"tags", "coordinate", "positions"} dictionary
- classify_centroids: tag of each face from its centroid
"""

from dataclasses import dataclass
from numpy import asarray, zeros, int32, abs as np_abs
from ..utils.errors import ConfigurationError

UNTAGGED = 0

COORDINATE_INDEX = {"x": 0, "y": 1, "z": 2}


@dataclass(frozen=True)
class BoundaryPlane:
    """
    Axis-aligned plane carrying a boundary tag.

    Attributes
    ----------
    tag : int Tag given to the faces lying on the plane (> 0)
    axis : int Index of the coordinate normal to the plane
    position : float Coordinate of the plane along its axis
    """
    tag: int
    axis: int
    position: float

    def __post_init__(self):
        if self.tag <= UNTAGGED:
            raise ConfigurationError(f"Boundary tags must be positive integers, got {self.tag}")
        if self.axis not in (0, 1, 2):
            raise ConfigurationError(f"Invalid plane axis: {self.axis}")


def index_coord(coord):
    """
    Return the index corresponding to the spatial variable.

    Parameters
    ----------
    coord : str Coordinate name: "x", "y" or "z"

    Returns
    -------
    int Index of the coordinate

    Raises
    ------
    ConfigurationError If an invalid coordinate is provided
    """
    try:
        return COORDINATE_INDEX[coord]
    except KeyError:
        raise ConfigurationError(f"Invalid coordinate: {coord}") from None


def planes_from_dict(dictionnaire):
    """
    Create boundary planes from a marking dictionary.

    Parameters
    ----------
    dictionnaire : dict
        - tags : list of int Tags of the boundary regions
        - coordinate : list of str Coordinate normal to each plane
        - positions : list of float Position of each plane

    Returns
    -------
    list of BoundaryPlane Planes in the order of the dictionary
    """
    tags = dictionnaire["tags"]
    coords = dictionnaire["coordinate"]
    positions = dictionnaire["positions"]
    if not len(tags) == len(coords) == len(positions):
        raise ConfigurationError("tags, coordinate and positions must have the same length")
    if len(set(tags)) != len(tags):
        raise ConfigurationError(f"Boundary tags must be unique, got {tags}")
    return [BoundaryPlane(int(tag), index_coord(coord), float(pos))
            for tag, coord, pos in zip(tags, coords, positions)]


def boundary_tolerance(extents, rtol):
    """
    Absolute tolerance on the centroid comparison.

    Parameters
    ----------
    extents : sequence of float Size of the domain along each axis
    rtol : float Tolerance relative to the largest extent, 0 for exact equality
    """
    return rtol * max(extents)


def classify_centroids(centroids, planes, tol=0.):
    """
    Tag boundary faces from their centroids.

    Parameters
    ----------
    centroids : numpy.ndarray (n_faces, 3) Face centroids
    planes : list of BoundaryPlane Planes in order of precedence
    tol : float Absolute tolerance on the distance to a plane

    Returns
    -------
    numpy.ndarray (n_faces,) Tag of each face, UNTAGGED when no plane matches
    """
    centroids = asarray(centroids, dtype=float).reshape(-1, 3)
    tags = zeros(len(centroids), dtype=int32)
    for plane in planes:
        on_plane = np_abs(centroids[:, plane.axis] - plane.position) <= tol
        tags[on_plane & (tags == UNTAGGED)] = plane.tag
    return tags
