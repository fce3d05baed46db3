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
Default Parameters Module
=======================

This module provides default parameters for the drivers, including finite
elements, mesh generation, nonlinear iterations and the two reference
boundary-value problems.

Key components:
- Finite element discretization parameters
- Mesh generation and boundary marking parameters
- Nonlinear iteration parameters
- Continuum plasticity simple tension problem
- Crystal plasticity (bcc) simple shear problem

These parameters establish reasonable defaults for simulations and can be
modified by the user to customize the behavior of specific simulations.
"""


def default_parameters():
    """
    Create a complete dictionary of default parameters.

    Returns
    -------
    dict Nested dictionary of default parameters for all subsystems
    """
    return {"fem": default_fem_parameters(),
            "mesh": default_mesh_parameters(),
            "Newton": default_Newton_parameters()}


def default_fem_degree():
    """
    Get the default interpolation degree for the displacement field.

    Returns
    -------
    int Default polynomial degree (1)
    """
    return 1


def default_fem_parameters():
    """
    Get default parameters for finite element discretization.

    Returns
    -------
    dict Dictionary containing FEM parameters
    """
    fem = {}
    fem.update({"u_degree": default_fem_degree()})
    return fem


def default_mesh_parameters():
    """
    Get default parameters for mesh generation and boundary marking.

    The boundary tolerance is relative to the largest extent of the domain.
    Setting it to 0 reproduces an exact comparison of face centroids against
    the domain bounds, which is only safe for exactly subdivided boxes.

    Returns
    -------
    dict Dictionary containing mesh parameters
    """
    mesh = {}
    mesh.update({"refinement_factor": 0})
    mesh.update({"base_count": 1})
    # Mesh image only for small serial runs
    mesh.update({"image_threshold": 1000})
    mesh.update({"image_file": "mesh.eps"})
    mesh.update({"boundary_rtol": 1e-10})
    return mesh


def default_Newton_parameters():
    """
    Get default parameters for the nonlinear iterations of one increment.

    Returns
    -------
    dict Dictionary containing iteration parameters
    """
    newton = {}
    newton.update({"max_iterations": 25})
    newton.update({"relative_tolerance": 1e-8})
    newton.update({"absolute_tolerance": 1e-10})
    return newton


def default_tension_parameters():
    """
    Get default parameters of the continuum plasticity simple tension problem.

    A 5 x 1 x 1 bar, five times finer along x, pulled along x on its front
    face while the back, left and bottom faces are held on their normal
    component.

    Returns
    -------
    dict Dictionary describing the boundary-value problem
    """
    x_max = 5.
    tension = {}
    tension.update({"extents": (x_max, 1., 1.)})
    tension.update({"multipliers": (5, 1, 1)})
    tension.update({"total_increments": 10})
    tension.update({"boundaries": {"tags": [1, 2, 3, 4],
                                   "coordinate": ["x", "x", "y", "z"],
                                   "positions": [0., x_max, 0., 0.]}})
    # Loaded face first
    tension.update({"boundary_conditions": [
        {"component": "Ux", "tag": 2, "value": {"type": "increment", "amplitude": 0.5}},
        {"component": "Ux", "tag": 1},
        {"component": "Uy", "tag": 3},
        {"component": "Uz", "tag": 4}]})
    tension.update({"material": {"lame_lambda": 1.1538e5,
                                 "lame_mu": 7.6923e4,
                                 "yield_stress": 250.,
                                 "strain_hardening": 1000.,
                                 "strain_energy_function": "quadlog",
                                 "yield_function": "von_mises"}})
    return tension


def default_shear_parameters():
    """
    Get default parameters of the bcc crystal plasticity simple shear problem.

    The top face is displaced along x by a fixed amount per increment, the
    bottom face is clamped and the lateral faces are held on their y and z
    components. Rules are listed in the order of precedence: a later rule
    overrides an earlier one on shared degrees of freedom.

    Returns
    -------
    dict Dictionary describing the boundary-value problem
    """
    span_x, span_y, span_z = 1., 1., 1.
    total_increments = 10
    shear = {}
    shear.update({"extents": (span_x, span_y, span_z)})
    shear.update({"multipliers": (1, 1, 1)})
    shear.update({"base_count": 2})
    shear.update({"total_increments": total_increments})
    shear.update({"boundaries": {"tags": [1, 2, 3, 4, 5, 6],
                                 "coordinate": ["x", "x", "y", "y", "z", "z"],
                                 "positions": [0., span_x, 0., span_y, 0., span_z]}})
    shear.update({"boundary_conditions": [
        {"component": ["Uy", "Uz"], "tag": 1},
        {"component": ["Uy", "Uz"], "tag": 2},
        {"component": ["Uy", "Uz"], "tag": 3},
        {"component": ["Uy", "Uz"], "tag": 4},
        {"component": "U", "tag": 5},
        {"component": ["Uy", "Uz"], "tag": 6},
        {"component": "Ux", "tag": 6, "value": {"type": "increment",
                                                "amplitude": 0.0005 * total_increments}}]})
    shear.update({"orientations": {"num_pts": (3, 3, 3),
                                   "header_lines": 1,
                                   "representation": "rodrigues",
                                   "out_of_bounds": "clamp"}})
    return shear
