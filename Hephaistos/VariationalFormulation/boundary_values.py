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
Boundary Values Module
======================

Vector-valued functions giving the displacement imposed on a boundary during
one load increment.

Functions follow the dolfinx interpolation convention: they receive the
coordinates of n points as an array of shape (3, n) and return an array of
shape (dim, n). The values are displacement increments: the accumulated
displacement is owned by the solver and never re-imposed here.

Key components:
- BoundaryValueFunction: base class, checks the output dimension
- ZeroDisplacement: holds the constrained components at their current position
- ConstantDisplacement: same increment at every point
- IncrementalDisplacement: fixed increment along one axis, zero on the others
"""

from numpy import asarray, zeros, tile
from ..utils.errors import ConfigurationError, DataError, DimensionMismatchError


class BoundaryValueFunction:
    """
    Base class for boundary displacement increments.

    Attributes
    ----------
    dim : int Number of displacement components
    """
    def __init__(self, dim):
        self.dim = dim

    def __call__(self, x):
        """
        Evaluate the displacement increment.

        Parameters
        ----------
        x : numpy.ndarray (3, n) Coordinates of the evaluation points

        Returns
        -------
        numpy.ndarray (dim, n) Displacement increment at each point
        """
        raise NotImplementedError


class ZeroDisplacement(BoundaryValueFunction):
    """No further displacement on the constrained components."""

    def __call__(self, x):
        return zeros((self.dim, asarray(x).shape[1]))


class ConstantDisplacement(BoundaryValueFunction):
    """
    Uniform displacement increment.

    Parameters
    ----------
    values : sequence of float Increment of each component
    """
    def __init__(self, values):
        self.values = asarray(values, dtype=float).reshape(-1)
        super().__init__(len(self.values))

    def __call__(self, x):
        return tile(self.values[:, None], (1, asarray(x).shape[1]))


class IncrementalDisplacement(BoundaryValueFunction):
    """
    Fixed displacement increment along one axis.

    The value along the loading axis is the increment delta, the other
    components are zero.

    Attributes
    ----------
    axis : int Loading axis
    delta : float Displacement imposed per increment
    """
    def __init__(self, dim, axis, delta):
        super().__init__(dim)
        if axis not in range(dim):
            raise ConfigurationError(f"Loading axis {axis} out of range for dimension {dim}")
        self.axis = axis
        self.delta = float(delta)

    @classmethod
    def from_total(cls, dim, axis, total, increments):
        """
        Spread a total displacement evenly over the load increments.

        Parameters
        ----------
        dim : int Number of displacement components
        axis : int Loading axis
        total : float Total target displacement
        increments : int Total planned number of increments
        """
        if int(increments) != increments or increments < 1:
            raise ConfigurationError(f"Total number of increments must be a positive integer, got {increments}")
        return cls(dim, axis, total / increments)

    def __call__(self, x):
        values = zeros((self.dim, asarray(x).shape[1]))
        values[self.axis] = self.delta
        return values


def evaluate_boundary_values(function, x, dim):
    """
    Evaluate a boundary value function and check its output dimension.

    Parameters
    ----------
    function : callable Boundary value function
    x : numpy.ndarray (3, n) Evaluation points
    dim : int Expected number of components

    Returns
    -------
    numpy.ndarray (dim, n) Values at the points

    Raises
    ------
    DimensionMismatchError If the function does not return dim components
    """
    x = asarray(x, dtype=float)
    values = asarray(function(x), dtype=float)
    if values.ndim != 2 or values.shape[0] != dim:
        found = values.shape[0] if values.ndim > 0 else 1
        raise DimensionMismatchError(found, dim)
    if values.shape[1] != x.shape[1]:
        raise DataError(f"Boundary value function returned {values.shape[1]} values "
                        f"for {x.shape[1]} points")
    return values
