"""
Setup file for the Hephaistos package

@author: Paul Bouteiller, CEA DAM/DIF
@email: paul.bouteiller@ecea.fr
"""

from setuptools import setup, find_namespace_packages
import os

# Création automatique du pyproject.toml s'il n'existe pas
if not os.path.exists('pyproject.toml'):
    with open('pyproject.toml', 'w') as f:
        f.write('[build-system]\nrequires = ["setuptools"]\nbuild-backend = "setuptools.build_meta"')


setup(name="Hephaistos",
      description="Incremental boundary-value drivers for elastoplastic and crystal plasticity simulations.",
      version = '0.1.0',
      author="Bouteiller Paul",
      author_email="paul.bouteiller@cea.fr",
      packages = find_namespace_packages(include=["Hephaistos", "Hephaistos.*"]),
      install_requires=["fenics-dolfinx>=0.9,<0.10",
                        "fenics-ufl",
                        "mpi4py",
                        "petsc4py",
                        "numpy",
                        "scipy",
                        "matplotlib",
                        "tqdm"],
      extras_require={"test": ["pytest"]},
)
