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
Elastic Increment Solver Module
===============================

Reference nonlinear solver of the drivers: a rate-form, small-strain,
isotropic linear elastic correction.

At every iteration the correction du solves

    a(du, v) = -a(u, v)    for all v

with the boundary conditions of the iteration imposed on du, and the
accumulated displacement is updated u = u + du. The prescribed increments
enter through the boundary conditions of the first iteration of each
increment only. The increment has converged once a later iteration produces
a negligible correction.
"""

from dolfinx.fem import Function, Constant
from dolfinx.fem.petsc import LinearProblem
from petsc4py.PETSc import ScalarType
from ufl import TrialFunction, TestFunction, inner, sym, grad, tr, Identity, dx

from ..utils.default_parameters import default_Newton_parameters
from ..utils.errors import ConfigurationError


class ElasticIncrementSolver:
    """
    Small-strain linear elastic correction of the accumulated displacement.

    Attributes
    ----------
    pb : IncrementalProblem Problem providing V and u
    du : dolfinx.fem.Function Correction of the last iteration
    correction_norms : list of float Norm of each correction of the increment
    """
    def __init__(self, problem, dictionnaire=None, lame_lambda=None, mu=None):
        """
        Initialize the solver.

        The Lamé moduli default to the material properties injected in the
        problem.

        Parameters
        ----------
        problem : IncrementalProblem Problem to solve
        dictionnaire : dict, optional Overrides of the Newton parameters
        lame_lambda, mu : float, optional Lamé moduli
        """
        self.pb = problem
        param = default_Newton_parameters()
        param.update(dictionnaire or {})
        self.rtol = param["relative_tolerance"]
        self.atol = param["absolute_tolerance"]
        properties = getattr(problem, "properties", None)
        if lame_lambda is None or mu is None:
            if properties is None:
                raise ConfigurationError("Lame moduli are required when the problem has no material properties")
            lame_lambda, mu = properties.lame_lambda, properties.mu
        self.lame_lambda = Constant(problem.mesh, ScalarType(lame_lambda))
        self.mu = Constant(problem.mesh, ScalarType(mu))
        self.du = Function(problem.V, name="Correction")
        self.correction_norms = []
        self.set_form()

    def eps(self, v):
        return sym(grad(v))

    def sigma(self, v):
        return self.lame_lambda * tr(self.eps(v)) * Identity(len(v)) + 2 * self.mu * self.eps(v)

    def set_form(self):
        trial, test = TrialFunction(self.pb.V), TestFunction(self.pb.V)
        a = inner(self.sigma(trial), self.eps(test)) * dx
        L = -inner(self.sigma(self.pb.u), self.eps(test)) * dx
        self.tangent_problem = LinearProblem(a, L, bcs=[], u=self.du,
                                             petsc_options={"ksp_type": "preonly",
                                                            "pc_type": "lu"})

    def iterate(self, bcs, increment, iteration):
        """
        Perform one correction.

        Parameters
        ----------
        bcs : list of dolfinx.fem.DirichletBC Conditions on the correction
        increment : int Load increment index
        iteration : int Nonlinear iteration index within the increment

        Returns
        -------
        bool True when the increment has converged
        """
        if iteration == 0:
            self.correction_norms = []
        # LinearProblem.solve reassembles A and b with the current bcs
        self.tangent_problem.bcs = bcs
        self.tangent_problem.solve()
        self.pb.u.x.petsc_vec.axpy(1, self.du.x.petsc_vec)
        self.pb.u.x.scatter_forward()
        du_norm = self.du.x.petsc_vec.norm()
        self.correction_norms.append(du_norm)
        if iteration == 0:
            return False
        return du_norm <= max(self.atol, self.rtol * self.correction_norms[0])
