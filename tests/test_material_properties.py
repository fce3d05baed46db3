"""Tests of the material parameter injection."""

from dataclasses import FrozenInstanceError

import pytest

from Hephaistos.ConstitutiveLaw.material_properties import (MaterialProperties,
                                                            inject_material_parameters)
from Hephaistos.utils.errors import ConfigurationError


class Model:
    pass


def test_injection(tension):
    model = Model()
    properties = inject_material_parameters(model, tension["material"])
    assert model.properties is properties
    assert properties.lame_lambda == pytest.approx(1.1538e5)
    assert properties.mu == pytest.approx(7.6923e4)
    assert properties.tau_y == 250.
    assert properties.K == 1000.
    assert properties.strain_energy_model == "quadlog"
    assert properties.yield_model == "von_mises"


def test_integers_become_floats(tension):
    material = dict(tension["material"], yield_stress=300)
    properties = MaterialProperties.from_dict(material)
    assert isinstance(properties.tau_y, float)


def test_record_is_immutable(tension):
    properties = MaterialProperties.from_dict(tension["material"])
    with pytest.raises(FrozenInstanceError):
        properties.tau_y = 0.


def test_missing_parameter(tension):
    material = dict(tension["material"])
    del material["strain_hardening"]
    with pytest.raises(ConfigurationError, match="strain_hardening"):
        inject_material_parameters(Model(), material)


@pytest.mark.parametrize("key, value", [
    ("lame_mu", "7e4"),
    ("yield_stress", True),
    ("yield_function", 2),
])
def test_wrong_types(tension, key, value):
    material = dict(tension["material"], **{key: value})
    with pytest.raises(ConfigurationError):
        MaterialProperties.from_dict(material)
