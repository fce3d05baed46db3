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
Continuum Plasticity Module
===========================

Simple tension of an elastoplastic bar.

The 5 x 1 x 1 bar is meshed five times finer along its length. Its front face
(x = 5) is pulled along x by the same displacement increment at every load
step while the back (x = 0), left (y = 0) and bottom (z = 0) faces are held on
their normal component. The material constants of the continuum plasticity
model are injected before the first step.
"""

from .Problem import IncrementalProblem
from ..ConstitutiveLaw.material_properties import inject_material_parameters
from ..utils.default_parameters import default_tension_parameters
from ..utils.errors import ConfigurationError


class ContinuumPlasticity(IncrementalProblem):
    """
    Simple tension boundary-value problem.

    Attributes
    ----------
    properties : MaterialProperties Injected material constants
    """
    def __init__(self, simulation_dic=None):
        """
        Initialize the problem.

        Parameters
        ----------
        simulation_dic : dict, optional
            Overrides of the default tension parameters, see
            default_tension_parameters. The "material" entry is mandatory
            when it is overridden.
        """
        super().__init__(simulation_dic or {}, defaults=default_tension_parameters())

    def set_before_mesh(self):
        if "material" not in self.parameters:
            raise ConfigurationError("Missing simulation parameter: material")
        inject_material_parameters(self, self.parameters["material"])
