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
MPI Helpers Module
==================

Small helpers for running the drivers under MPI: a rank-0 print and
queries on the size of the communicator.
"""

import builtins
from mpi4py import MPI


def print(*args, **kwargs):
    """
    Override Python's print function to display output only once in MPI environments.

    Parameters
    ----------
    *args : tuple Arguments to pass to the original print function
    **kwargs : dict Keyword arguments to pass to the original print function
    """
    if MPI.COMM_WORLD.Get_rank() == 0:
        builtins.print(*args, **kwargs)


def is_serial(comm=MPI.COMM_WORLD):
    """
    Return True when the communicator holds a single process.

    Parameters
    ----------
    comm : mpi4py.MPI.Comm Communicator to query, COMM_WORLD by default
    """
    return comm.Get_size() == 1
