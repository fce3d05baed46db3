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
from .Mesh.domain import Domain, subdivision_counts
from .Mesh.boundary_planes import BoundaryPlane, planes_from_dict, classify_centroids

from .VariationalFormulation.boundary_values import (ZeroDisplacement, ConstantDisplacement,
                                                     IncrementalDisplacement)
from .VariationalFormulation.constraint_set import ConstraintSet
from .VariationalFormulation.incremental_constraints import (DirichletRule, rules_from_config,
                                                             IncrementalConstraintBuilder)

from .ConstitutiveLaw.material_properties import MaterialProperties, inject_material_parameters

from .Microstructure.orientation_field import OrientationField, voxel_stencil

from .utils.default_parameters import default_tension_parameters, default_shear_parameters
from .utils.exit_handling import run_main

__version__ = "0.1.0"
