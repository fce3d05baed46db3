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
Mesh image output.

Draws the edges of a mesh projected on a coordinate plane. Used to inspect
small meshes while setting up a problem.
"""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from numpy import asarray, stack


def projected_segments(points, edges, axes=(0, 1)):
    """
    Project mesh edges on a coordinate plane.

    Parameters
    ----------
    points : numpy.ndarray (n_points, gdim) Vertex coordinates
    edges : numpy.ndarray (n_edges, 2) Vertex indices of each edge
    axes : tuple of int Coordinates kept by the projection

    Returns
    -------
    numpy.ndarray (n_edges, 2, 2) Segment end points in the projection plane
    """
    points = asarray(points)
    edges = asarray(edges)
    plane = points[:, list(axes)]
    return stack((plane[edges[:, 0]], plane[edges[:, 1]]), axis=1)


def write_mesh_projection(points, edges, filename, axes=(0, 1)):
    """
    Write an image of the mesh edges projected on a coordinate plane.

    The output format follows the file extension (eps, png, pdf, svg).

    Parameters
    ----------
    points, edges, axes : see projected_segments
    filename : str Output file
    """
    segments = projected_segments(points, edges, axes)
    fig, ax = plt.subplots()
    ax.add_collection(LineCollection(segments, colors="black", linewidths=0.5))
    ax.autoscale()
    ax.set_aspect("equal")
    labels = "xyz"
    ax.set_xlabel(labels[axes[0]])
    ax.set_ylabel(labels[axes[1]])
    fig.savefig(filename)
    plt.close(fig)
