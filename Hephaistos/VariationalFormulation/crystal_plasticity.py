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
Crystal Plasticity Module
=========================

Simple shear of a voxelized bcc polycrystal.

The grain raster and the grain orientations are read before the mesh is
built, so that malformed microstructure files stop the run before any
expensive step. Once the mesh exists, every cell receives the grain of the
voxel containing its midpoint.

The boundary conditions follow the sequential face predicates of simple
shear: the lateral faces hold their y and z components, the bottom face is
clamped and the top face holds y and z while being sheared along x. On edges
and corners shared by several faces, the rule listed last wins.
"""

from .Problem import IncrementalProblem
from ..Microstructure.orientation_field import OrientationField
from ..Microstructure.grain_mapping import GrainMapping
from ..utils.default_parameters import default_shear_parameters
from ..utils.errors import ConfigurationError


class CrystalPlasticity(IncrementalProblem):
    """
    Simple shear boundary-value problem of a polycrystal.

    Attributes
    ----------
    orientation_field : OrientationField Voxelized grain orientations
    grains : GrainMapping Grains and rotations of the mesh cells
    """
    def __init__(self, simulation_dic=None):
        """
        Initialize the problem.

        Parameters
        ----------
        simulation_dic : dict, optional
            Overrides of the default shear parameters, see
            default_shear_parameters. The "orientations" dictionary must
            provide the grain_id_file and orientation_file paths.
        """
        super().__init__(simulation_dic or {}, defaults=default_shear_parameters())

    def set_before_mesh(self):
        orientations = default_shear_parameters()["orientations"]
        orientations.update(self.parameters.get("orientations", {}))
        for key in ("grain_id_file", "orientation_file"):
            if key not in orientations:
                raise ConfigurationError(f"Missing orientation parameter: {key}")
        kwargs = {key: orientations[key] for key in ("representation", "out_of_bounds", "tol")
                  if key in orientations}
        self.orientation_field = OrientationField.from_domain(orientations["grain_id_file"],
                                                              orientations["header_lines"],
                                                              orientations["orientation_file"],
                                                              self.extents,
                                                              orientations["num_pts"],
                                                              **kwargs)

    def set_after_mesh(self):
        self.grains = GrainMapping(self.mesh, self.orientation_field)

    def orientation_at(self, point):
        """
        Orientation of the grain occupying the voxel of a point.

        Parameters
        ----------
        point : array_like (3,) Physical point
        """
        return self.orientation_field.orientation_at(point)
