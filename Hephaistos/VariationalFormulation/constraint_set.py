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
Constraint Set Module
=====================

Dirichlet constraints of one nonlinear iteration: the constrained degrees of
freedom, the displacement component each one carries and its prescribed
value.

A set is filled rule after rule and then closed. Closing merges the entries:
a degree of freedom constrained by several rules (edges and corners shared by
two tagged faces) keeps the value of the rule added last. A closed set is
read-only and is handed as a whole to the solver of the iteration that built
it.
"""

from numpy import (asarray, concatenate, unique, full, int64, float64, empty,
                   array_equal, broadcast_to, searchsorted)


class ConstraintSet:
    """
    Closed mapping from constrained degree of freedom to prescribed value.

    Attributes
    ----------
    increment : int Load increment the set was built for
    iteration : int Nonlinear iteration the set was built for
    closed : bool True once the entries have been merged
    """
    def __init__(self, increment, iteration):
        self.increment = increment
        self.iteration = iteration
        self.closed = False
        self._entries = []
        self._dofs = empty(0, dtype=int64)
        self._axes = empty(0, dtype=int64)
        self._values = empty(0, dtype=float64)

    def add(self, axis, dofs, values):
        """
        Constrain degrees of freedom of one displacement component.

        Parameters
        ----------
        axis : int Displacement component carried by the dofs
        dofs : array_like of int Degree of freedom indices
        values : float or array_like Prescribed value of each dof
        """
        if self.closed:
            raise RuntimeError("Cannot add constraints to a closed constraint set")
        dofs = asarray(dofs, dtype=int64).reshape(-1)
        values = broadcast_to(asarray(values, dtype=float64), dofs.shape)
        self._entries.append((full(dofs.shape, axis, dtype=int64), dofs, values.copy()))

    def close(self):
        """
        Merge the entries, later ones overriding earlier ones on shared dofs.

        Returns
        -------
        ConstraintSet self
        """
        if self.closed:
            return self
        if self._entries:
            axes, dofs, values = (concatenate(part) for part in zip(*self._entries))
            # Index of the last occurrence of each dof
            reversed_dofs = dofs[::-1]
            self._dofs, first_in_reversed = unique(reversed_dofs, return_index=True)
            last = len(dofs) - 1 - first_in_reversed
            self._axes = axes[last]
            self._values = values[last]
        self._entries = []
        self.closed = True
        return self

    def _check_closed(self):
        if not self.closed:
            raise RuntimeError("Constraint set must be closed before being read")

    @property
    def dofs(self):
        """Sorted constrained degrees of freedom."""
        self._check_closed()
        return self._dofs

    @property
    def axes(self):
        self._check_closed()
        return self._axes

    @property
    def values(self):
        self._check_closed()
        return self._values

    def __len__(self):
        return len(self.dofs)

    def __contains__(self, dof):
        i = searchsorted(self.dofs, dof)
        return i < len(self._dofs) and self._dofs[i] == dof

    def __getitem__(self, dof):
        i = searchsorted(self.dofs, dof)
        if i == len(self._dofs) or self._dofs[i] != dof:
            raise KeyError(dof)
        return float(self._values[i])

    def as_dict(self):
        """
        Return the constraints as a plain dictionary.

        Returns
        -------
        dict dof -> prescribed value
        """
        return {int(d): float(v) for d, v in zip(self.dofs, self.values)}

    def component(self, axis):
        """
        Return the constraints carried by one displacement component.

        Parameters
        ----------
        axis : int Displacement component

        Returns
        -------
        tuple (dofs, values) of the component
        """
        mask = self.axes == axis
        return self._dofs[mask], self._values[mask]

    def groups(self):
        """
        Group the constraints by component and value.

        Yields
        ------
        tuple (axis, value, dofs) with dofs sharing the same component and value
        """
        for axis in unique(self.axes):
            dofs, values = self.component(axis)
            distinct, inverse = unique(values, return_inverse=True)
            for i, value in enumerate(distinct):
                yield int(axis), float(value), dofs[inverse == i]

    def __eq__(self, other):
        if not isinstance(other, ConstraintSet):
            return NotImplemented
        return (array_equal(self.dofs, other.dofs)
                and array_equal(self.axes, other.axes)
                and array_equal(self.values, other.values))

    def __repr__(self):
        state = f"{len(self._dofs)} dofs" if self.closed else "open"
        return f"ConstraintSet(increment={self.increment}, iteration={self.iteration}, {state})"
