"""
Parameters of the simple shear of a voxelized bcc polycrystal.

Unspecified entries take the values of default_shear_parameters.
"""
from os.path import dirname, join

data_dir = dirname(__file__)

###### Loading ######
total_increments = 10
shear_increment = 0.0005

###### Microstructure ######
orientations = {"grain_id_file": join(data_dir, "grainID.txt"),
                "header_lines": 1,
                "orientation_file": join(data_dir, "orientations.txt"),
                "num_pts": (3, 3, 3),
                "representation": "rodrigues",
                "out_of_bounds": "clamp"}

simulation_dic = {"extents": (1., 1., 1.),
                  "total_increments": total_increments,
                  "boundary_conditions": [
                      {"component": ["Uy", "Uz"], "tag": 1},
                      {"component": ["Uy", "Uz"], "tag": 2},
                      {"component": ["Uy", "Uz"], "tag": 3},
                      {"component": ["Uy", "Uz"], "tag": 4},
                      {"component": "U", "tag": 5},
                      {"component": ["Uy", "Uz"], "tag": 6},
                      {"component": "Ux", "tag": 6, "value": shear_increment}],
                  "orientations": orientations,
                  "mesh": {"refinement_factor": 1}}

###### Isotropic estimate of the bcc iron elastic moduli ######
lame_lambda = 1.2e5
mu = 8.0e4

solver_dic = {"max_iterations": 25}
