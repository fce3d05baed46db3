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
Domain Module
=============

Geometry of the simulated box: physical extents and the number of elements
along each axis.

The element count along each axis is base_count * 2**refinement_factor,
multiplied by an optional axis-specific factor used to refine elongated
specimens along their long axis.

Key components:
- subdivision_counts: per-axis element counts from a refinement factor
- Domain: axis-aligned box [0, extents] with its subdivision
"""

from dataclasses import dataclass
from numpy import prod, zeros, asarray
from ..utils.errors import ConfigurationError


def subdivision_counts(refinement_factor, dim=3, base_count=1, multipliers=None):
    """
    Compute the number of elements along each axis.

    Parameters
    ----------
    refinement_factor : int Number of uniform refinement levels (>= 0)
    dim : int Spatial dimension
    base_count : int Number of elements per axis before refinement
    multipliers : sequence of int, optional Axis-specific multipliers

    Returns
    -------
    tuple of int Element count along each axis

    Raises
    ------
    ConfigurationError If a count, multiplier or the refinement factor is invalid
    """
    if int(refinement_factor) != refinement_factor or refinement_factor < 0:
        raise ConfigurationError(f"Refinement factor must be a non-negative integer, got {refinement_factor}")
    if int(base_count) != base_count or base_count < 1:
        raise ConfigurationError(f"Base element count must be a positive integer, got {base_count}")
    if multipliers is None:
        multipliers = (1,) * dim
    if len(multipliers) != dim:
        raise ConfigurationError(f"Expected {dim} multipliers, got {len(multipliers)}")
    for m in multipliers:
        if int(m) != m or m < 1:
            raise ConfigurationError(f"Element multipliers must be positive integers, got {multipliers}")
    count = int(base_count) * 2 ** int(refinement_factor)
    return tuple(count * int(m) for m in multipliers)


@dataclass(frozen=True)
class Domain:
    """
    Axis-aligned box [0, extents] and its subdivision.

    Attributes
    ----------
    extents : tuple of float Physical size along each axis
    counts : tuple of int Number of elements along each axis
    """
    extents: tuple
    counts: tuple

    def __post_init__(self):
        if len(self.extents) != len(self.counts):
            raise ConfigurationError("Extents and element counts must have the same dimension")
        for L in self.extents:
            if not L > 0:
                raise ConfigurationError(f"Domain extents must be positive, got {self.extents}")
        for n in self.counts:
            if n < 1:
                raise ConfigurationError(f"Element counts must be positive, got {self.counts}")

    @property
    def dim(self):
        return len(self.extents)

    @property
    def lower(self):
        return zeros(self.dim)

    @property
    def upper(self):
        return asarray(self.extents, dtype=float)

    @property
    def n_cells(self):
        return int(prod(self.counts))

    @property
    def element_size(self):
        """Size of one element along each axis."""
        return self.upper / asarray(self.counts)

    @classmethod
    def from_refinement(cls, extents, refinement_factor=0, base_count=1, multipliers=None):
        """
        Build the domain from its extents and refinement parameters.

        Parameters
        ----------
        extents : sequence of float Physical size along each axis
        refinement_factor, base_count, multipliers : see subdivision_counts
        """
        extents = tuple(float(L) for L in extents)
        counts = subdivision_counts(refinement_factor, len(extents), base_count, multipliers)
        return cls(extents, counts)
