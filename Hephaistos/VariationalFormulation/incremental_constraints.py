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
Incremental Constraints Module
==============================

This module builds the Dirichlet constraints of every nonlinear iteration of
an incremental (rate-form) boundary-value problem.

Boundary conditions are described by DirichletRule records: a boundary tag,
the displacement components it fixes and the displacement increment applied
during one load increment. A single loop turns the rules into a
ConstraintSet:

- on the first iteration of an increment, each rule interpolates its value
  function, so the loaded faces receive the increment of the step;
- on the following iterations of the same increment, every rule interpolates
  the zero function: the Newton corrections must not add displacement on
  top of what was imposed on the first iteration.

The set is rebuilt from scratch at every call and depends only on the
(increment, iteration) pair, never on state left by a previous call.

Key components:
- DirichletRule: tag -> fixed components, value function
- rules_from_config: rules from a list of boundary condition dictionaries
- IncrementalConstraintBuilder: ConstraintSet of an (increment, iteration) pair
"""

from dataclasses import dataclass
from numbers import Number

from .boundary_values import (BoundaryValueFunction, ZeroDisplacement,
                              ConstantDisplacement, IncrementalDisplacement,
                              evaluate_boundary_values)
from .constraint_set import ConstraintSet
from ..utils.errors import ConfigurationError

COMPONENT_MAPPINGS = {
    2: {'Ux': 0, 'Uy': 1},
    3: {'Ux': 0, 'Uy': 1, 'Uz': 2}
    }


@dataclass(frozen=True)
class DirichletRule:
    """
    Dirichlet condition attached to a boundary tag.

    Attributes
    ----------
    tag : int Tag of the constrained faces
    components : tuple of int Displacement components fixed on these faces
    value : BoundaryValueFunction Increment imposed on the first iteration
    """
    tag: int
    components: tuple
    value: BoundaryValueFunction

    def increment_value(self, iteration):
        """
        Return the function interpolated at a given iteration.

        Parameters
        ----------
        iteration : int Nonlinear iteration index within the increment
        """
        if iteration == 0:
            return self.value
        return ZeroDisplacement(self.value.dim)


def component_indices(component, dim):
    """
    Convert component names into displacement component indices.

    Parameters
    ----------
    component : str or list of str "Ux", "Uy", "Uz", or "U" for all of them
    dim : int Problem dimension

    Returns
    -------
    tuple of int Sorted component indices
    """
    if dim not in COMPONENT_MAPPINGS:
        raise ConfigurationError(f"Unsupported dimension: {dim}")
    mapping = COMPONENT_MAPPINGS[dim]
    names = [component] if isinstance(component, str) else list(component)
    indices = set()
    for name in names:
        if name == "U":
            indices.update(range(dim))
        elif name in mapping:
            indices.add(mapping[name])
        else:
            raise ConfigurationError(f"Component '{name}' not supported for dimension {dim}")
    if not indices:
        raise ConfigurationError("A boundary condition must fix at least one component")
    return tuple(sorted(indices))


def boundary_value_from_config(value, components, dim, total_increments):
    """
    Create the boundary value function of a rule.

    Parameters
    ----------
    value : None, float, dict or BoundaryValueFunction
        - None: no displacement increment
        - float: increment applied on each fixed component at every increment
        - {"type": "increment", "amplitude": total}: total displacement of each
          fixed component spread over the increments
        - BoundaryValueFunction: used as is
    components : tuple of int Fixed components
    dim : int Problem dimension
    total_increments : int Total planned number of increments

    Returns
    -------
    BoundaryValueFunction
    """
    if value is None:
        return ZeroDisplacement(dim)
    if isinstance(value, BoundaryValueFunction):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"Unsupported boundary value: {value!r}")
    if isinstance(value, Number):
        delta = float(value)
    elif isinstance(value, dict):
        if value.get("type") != "increment":
            raise ConfigurationError(f"Unknown boundary value type: {value.get('type')}")
        if "amplitude" not in value:
            raise ConfigurationError("An incremental boundary value needs an 'amplitude'")
        if int(total_increments) != total_increments or total_increments < 1:
            raise ConfigurationError(f"Total number of increments must be a positive integer, got {total_increments}")
        delta = float(value["amplitude"]) / total_increments
    else:
        raise ConfigurationError(f"Unsupported boundary value: {value!r}")
    if len(components) == 1:
        return IncrementalDisplacement(dim, components[0], delta)
    increments = [delta if i in components else 0. for i in range(dim)]
    return ConstantDisplacement(increments)


def rules_from_config(boundary_conditions, dim, total_increments, tags=None):
    """
    Create Dirichlet rules from boundary condition dictionaries.

    Parameters
    ----------
    boundary_conditions : list of dict
        Each dictionary holds a "component", a "tag" and an optional "value",
        see component_indices and boundary_value_from_config.
    dim : int Problem dimension
    total_increments : int Total planned number of increments
    tags : set of int, optional Tags of the marked boundary regions

    Returns
    -------
    list of DirichletRule Rules in order of precedence
    """
    rules = []
    for bc_config in boundary_conditions:
        for key in ("component", "tag"):
            if key not in bc_config:
                raise ConfigurationError(f"Boundary condition {bc_config} has no '{key}'")
        if tags is not None and bc_config["tag"] not in tags:
            raise ConfigurationError(f"Boundary condition on tag {bc_config['tag']} but only "
                                     f"tags {sorted(tags)} are marked")
        components = component_indices(bc_config["component"], dim)
        value = boundary_value_from_config(bc_config.get("value"), components,
                                           dim, total_increments)
        if value.dim != dim:
            raise ConfigurationError(f"Boundary value of tag {bc_config['tag']} has "
                                     f"{value.dim} components, expected {dim}")
        rules.append(DirichletRule(int(bc_config["tag"]), components, value))
    return rules


class IncrementalConstraintBuilder:
    """
    Builder of the Dirichlet constraints of each nonlinear iteration.

    Attributes
    ----------
    rules : list of DirichletRule Rules in order of precedence
    locator : object
        Provides locate(tag, axis) -> (dofs, x) giving the degrees of freedom
        of one displacement component on the faces of a tag, and the
        coordinates x (3, n) of these dofs.
    dim : int Number of displacement components
    """
    def __init__(self, rules, locator, dim=3):
        self.rules = list(rules)
        self.locator = locator
        self.dim = dim

    def build(self, increment, iteration):
        """
        Build the closed constraint set of an iteration.

        Parameters
        ----------
        increment : int Load increment index (>= 0)
        iteration : int Nonlinear iteration index within the increment (>= 0)

        Returns
        -------
        ConstraintSet Closed constraints of the iteration
        """
        if increment < 0 or iteration < 0:
            raise ValueError(f"Increment and iteration indices must be non-negative, "
                             f"got ({increment}, {iteration})")
        constraints = ConstraintSet(increment, iteration)
        for rule in self.rules:
            function = rule.increment_value(iteration)
            for axis in rule.components:
                dofs, x = self.locator.locate(rule.tag, axis)
                values = evaluate_boundary_values(function, x, self.dim)
                constraints.add(axis, dofs, values[axis])
        return constraints.close()
