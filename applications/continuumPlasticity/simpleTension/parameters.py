"""
Parameters of the simple tension of an elastoplastic bar.

Unspecified entries take the values of default_tension_parameters.
"""

###### Material ######
material = {"lame_lambda": 1.1538e5,
            "lame_mu": 7.6923e4,
            "yield_stress": 250.,
            "strain_hardening": 1000.,
            "strain_energy_function": "quadlog",
            "yield_function": "von_mises"}

###### Loading ######
total_increments = 10
total_displacement = 0.5

simulation_dic = {"total_increments": total_increments,
                  "boundary_conditions": [
                      {"component": "Ux", "tag": 2,
                       "value": {"type": "increment", "amplitude": total_displacement}},
                      {"component": "Ux", "tag": 1},
                      {"component": "Uy", "tag": 3},
                      {"component": "Uz", "tag": 4}],
                  "material": material,
                  "mesh": {"refinement_factor": 1}}

solver_dic = {"max_iterations": 25,
              "relative_tolerance": 1e-8,
              "absolute_tolerance": 1e-10}
