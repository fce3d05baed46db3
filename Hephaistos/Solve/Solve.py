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
Load Stepping Module
====================

This module provides the Solve class that drives the load increments of an
incremental boundary-value problem.

Every increment is a sequence of nonlinear iterations. Each iteration asks
the problem for the boundary conditions of the (increment, iteration) pair,
then hands them to the nonlinear solver which performs one correction and
reports whether the increment has converged. Boundary conditions of an
iteration are always built before the solver assembles its system.

Key components:
- Solve: increment loop, iteration guard and output hooks
"""

from tqdm import tqdm

from ..utils.default_parameters import default_Newton_parameters
from ..utils.errors import ConfigurationError, IterationError
from ..utils.mpi import print


class Solve:
    """
    Main load stepping loop.

    Attributes
    ----------
    pb : IncrementalProblem Problem providing apply_dirichlet_bcs
    solver : object
        Nonlinear solver providing iterate(bcs, increment, iteration), which
        performs one correction and returns True once the increment has
        converged.
    max_iterations : int Largest number of iterations of one increment
    iteration_counts : list of int Iterations needed by each converged increment
    """
    def __init__(self, problem, solver, dictionnaire=None):
        """
        Initialize the load stepping.

        Parameters
        ----------
        problem : IncrementalProblem Problem to solve
        solver : object Nonlinear solver, see the class attributes
        dictionnaire : dict, optional Overrides of the Newton parameters
        """
        self.pb = problem
        self.solver = solver
        param = default_Newton_parameters()
        param.update(dictionnaire or {})
        max_iterations = param["max_iterations"]
        if int(max_iterations) != max_iterations or max_iterations < 1:
            raise ConfigurationError(f"Maximum number of iterations must be a positive integer, got {max_iterations}")
        self.max_iterations = int(max_iterations)
        self.iteration_counts = []

    def solve_increment(self, increment):
        """
        Iterate until the solver converges on one increment.

        Parameters
        ----------
        increment : int Load increment index

        Returns
        -------
        int Number of iterations performed
        """
        for iteration in range(self.max_iterations):
            bcs = self.pb.apply_dirichlet_bcs(increment, iteration)
            if self.solver.iterate(bcs, increment, iteration):
                return iteration + 1
        raise IterationError(f"Increment {increment} did not converge in "
                             f"{self.max_iterations} iterations")

    def solve(self):
        """
        Execute the increment loop.

        Returns
        -------
        list of int Number of iterations of each increment
        """
        num_increments = self.pb.total_increments
        with tqdm(total=num_increments, desc="Progression", unit="increment") as pbar:
            for increment in range(num_increments):
                niter = self.solve_increment(increment)
                self.iteration_counts.append(niter)
                print(f"Increment {increment} converged in {niter} iterations")
                self.query_output(self.pb, increment)
                pbar.update(1)
        self.final_output(self.pb)
        return self.iteration_counts

    def query_output(self, problem, increment):
        """
        User-defined outputs after each converged increment.

        Parameters
        ----------
        problem : IncrementalProblem The problem being solved
        increment : int Index of the converged increment
        """
        pass

    def final_output(self, problem):
        """
        User-defined outputs after the last increment.

        Parameters
        ----------
        problem : IncrementalProblem The problem being solved
        """
        pass
