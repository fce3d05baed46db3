"""
Simple shear of a voxelized bcc polycrystal.

Run with
    python main.py
or in parallel with
    mpirun -n 4 python main.py
"""
import sys

from Hephaistos.VariationalFormulation.crystal_plasticity import CrystalPlasticity
from Hephaistos.Solve.Solve import Solve
from Hephaistos.Solve.elastic_increment_solver import ElasticIncrementSolver
from Hephaistos.utils.exit_handling import run_main
from Hephaistos.utils.mpi import print

from parameters import simulation_dic, solver_dic, lame_lambda, mu


def main():
    problem = CrystalPlasticity(simulation_dic)
    print(f"Grains on the mesh: {problem.grains.grains()}")
    solver = ElasticIncrementSolver(problem, solver_dic, lame_lambda=lame_lambda, mu=mu)
    Solve(problem, solver, solver_dic).solve()


if __name__ == "__main__":
    sys.exit(run_main(main))
