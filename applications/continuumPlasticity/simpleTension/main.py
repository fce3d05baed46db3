"""
Simple tension of an elastoplastic bar.

Run with
    python main.py
or in parallel with
    mpirun -n 4 python main.py
"""
import sys
from mpi4py.MPI import MAX

from Hephaistos.VariationalFormulation.continuum_plasticity import ContinuumPlasticity
from Hephaistos.Solve.Solve import Solve
from Hephaistos.Solve.elastic_increment_solver import ElasticIncrementSolver
from Hephaistos.utils.exit_handling import run_main
from Hephaistos.utils.mpi import print

from parameters import simulation_dic, solver_dic


class TensionSolve(Solve):
    def query_output(self, problem, increment):
        u_x = problem.u.x.array.reshape(-1, problem.dim)[:, 0]
        u_max = problem.mesh.comm.allreduce(u_x.max(), op=MAX)
        print(f"Elongation after increment {increment}: {u_max}")


def main():
    problem = ContinuumPlasticity(simulation_dic)
    solver = ElasticIncrementSolver(problem, solver_dic)
    TensionSolve(problem, solver, solver_dic).solve()


if __name__ == "__main__":
    sys.exit(run_main(main))
