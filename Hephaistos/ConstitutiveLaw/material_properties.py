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
Material Properties Module
==========================

Material constants handed to the continuum plasticity constitutive model.

The record holds the two Lamé moduli of isotropic linear elasticity, the
yield stress, the hardening modulus and the names selecting the strain
energy density and the yield function of the model. It is populated once
before the first solve step and never modified afterwards; the constitutive
model evolves its own internal variables, not these constants.
"""

from dataclasses import dataclass, fields
from numbers import Real

from ..utils.errors import ConfigurationError
from ..utils.mpi import print

# Record field -> configuration key
PARAMETER_KEYS = {"lame_lambda": "lame_lambda",
                  "mu": "lame_mu",
                  "tau_y": "yield_stress",
                  "K": "strain_hardening",
                  "strain_energy_model": "strain_energy_function",
                  "yield_model": "yield_function"}


@dataclass(frozen=True)
class MaterialProperties:
    """
    Elastoplastic material constants.

    Attributes
    ----------
    lame_lambda : float First Lamé modulus
    mu : float Shear modulus
    tau_y : float Yield stress
    K : float Hardening modulus
    strain_energy_model : str Name of the strain energy density
    yield_model : str Name of the yield function
    """
    lame_lambda: float
    mu: float
    tau_y: float
    K: float
    strain_energy_model: str
    yield_model: str

    @classmethod
    def from_dict(cls, dictionnaire):
        """
        Read the constants from a configuration dictionary.

        Parameters
        ----------
        dictionnaire : dict
            - lame_lambda, lame_mu : float Lamé moduli
            - yield_stress : float Yield stress
            - strain_hardening : float Hardening modulus
            - strain_energy_function : str Strain energy density name
            - yield_function : str Yield function name
        """
        values = {}
        for field in fields(cls):
            key = PARAMETER_KEYS[field.name]
            if key not in dictionnaire:
                raise ConfigurationError(f"Missing material parameter: {key}")
            value = dictionnaire[key]
            if field.type is float:
                if not isinstance(value, Real) or isinstance(value, bool):
                    raise ConfigurationError(f"Material parameter {key} must be a number, got {value!r}")
                value = float(value)
            elif not isinstance(value, str):
                raise ConfigurationError(f"Material parameter {key} must be a string, got {value!r}")
            values[field.name] = value
        return cls(**values)


def inject_material_parameters(model, dictionnaire):
    """
    Populate the parameter record of a constitutive model.

    Parameters
    ----------
    model : object Constitutive model, receives a `properties` attribute
    dictionnaire : dict Material parameters, see MaterialProperties.from_dict

    Returns
    -------
    MaterialProperties The injected record
    """
    properties = MaterialProperties.from_dict(dictionnaire)
    model.properties = properties
    print(f"Lame moduli: {properties.lame_lambda}, {properties.mu}")
    print(f"Yield stress: {properties.tau_y}, hardening modulus: {properties.K}")
    print(f"Strain energy model: {properties.strain_energy_model}, yield model: {properties.yield_model}")
    return properties
