"""Tests of the incremental Dirichlet constraints."""

from numpy import zeros
from numpy.testing import assert_allclose
import pytest

from Hephaistos.Mesh.domain import Domain
from Hephaistos.Mesh.boundary_planes import planes_from_dict
from Hephaistos.VariationalFormulation.boundary_values import BoundaryValueFunction
from Hephaistos.VariationalFormulation.incremental_constraints import (DirichletRule,
                                                                       IncrementalConstraintBuilder,
                                                                       component_indices,
                                                                       rules_from_config)
from Hephaistos.utils.default_parameters import default_shear_parameters
from Hephaistos.utils.errors import ConfigurationError, DimensionMismatchError

from conftest import GridLocator


@pytest.fixture
def tension_builder(tension, tension_locator):
    rules = rules_from_config(tension["boundary_conditions"], 3, tension["total_increments"])
    return IncrementalConstraintBuilder(rules, tension_locator, 3)


def loaded_values(constraints, locator, tag=2):
    nodes = locator.nodes(tag)
    return [[constraints[3 * n + axis] if 3 * n + axis in constraints else None
             for n in nodes] for axis in range(3)]


def test_first_iteration_applies_increment(tension_builder, tension_locator):
    constraints = tension_builder.build(0, 0)
    values = loaded_values(constraints, tension_locator)
    assert_allclose(values[0], 0.05)
    # The loaded face only fixes Ux, apart from its edges with y=0 and z=0
    for n, uy in zip(tension_locator.nodes(2), values[1]):
        on_y0 = tension_locator.points[n, 1] == 0.
        assert (uy == 0.) if on_y0 else (uy is None)


def test_corrective_iteration_is_zero(tension_builder, tension_locator):
    constraints = tension_builder.build(0, 1)
    assert_allclose(loaded_values(constraints, tension_locator)[0], 0.)
    assert_allclose(constraints.values, 0.)
    assert set(constraints.dofs) == set(tension_builder.build(0, 0).dofs)


def test_masks(tension_builder, tension_locator):
    constraints = tension_builder.build(3, 0)
    for tag, axis in ((1, 0), (3, 1), (4, 2)):
        for n in tension_locator.nodes(tag):
            assert constraints[3 * n + axis] == 0.
    # Back face nodes away from y=0 and z=0 keep Uy and Uz free
    back = [n for n in tension_locator.nodes(1)
            if tension_locator.points[n, 1] > 0 and tension_locator.points[n, 2] > 0]
    assert back
    for n in back:
        assert 3 * n + 1 not in constraints and 3 * n + 2 not in constraints


def test_rebuild_is_idempotent(tension_builder):
    assert tension_builder.build(4, 0) == tension_builder.build(4, 0)
    assert tension_builder.build(4, 1) == tension_builder.build(4, 1)
    # Every increment applies the same delta
    assert tension_builder.build(1, 0) == tension_builder.build(7, 0)


def test_negative_indices(tension_builder):
    with pytest.raises(ValueError):
        tension_builder.build(-1, 0)
    with pytest.raises(ValueError):
        tension_builder.build(0, -1)


def test_shear_later_rules_override():
    shear = default_shear_parameters()
    domain = Domain.from_refinement(shear["extents"], 0, shear["base_count"])
    locator = GridLocator(domain, planes_from_dict(shear["boundaries"]))
    rules = rules_from_config(shear["boundary_conditions"], 3, shear["total_increments"])
    constraints = IncrementalConstraintBuilder(rules, locator, 3).build(0, 0)
    top = locator.nodes(6)
    bottom = locator.nodes(5)
    for n in top:
        assert constraints[3 * n] == pytest.approx(0.0005)
        assert constraints[3 * n + 1] == 0.
        assert constraints[3 * n + 2] == 0.
    for n in bottom:
        assert all(constraints[3 * n + axis] == 0. for axis in range(3))
    # Interior of the lateral face x=0 keeps Ux free
    x0 = [n for n in locator.nodes(1) if 0. < locator.points[n, 2] < 1.]
    assert x0
    assert all(3 * n not in constraints for n in x0)


def test_rule_order_decides_shared_dofs(tension_locator):
    rules = [DirichletRule(2, (0,), _Constant(1.)), DirichletRule(3, (0,), _Constant(2.))]
    constraints = IncrementalConstraintBuilder(rules, tension_locator).build(0, 0)
    shared = set(tension_locator.nodes(2)) & set(tension_locator.nodes(3))
    assert shared
    assert all(constraints[3 * n] == 2. for n in shared)


class _Constant(BoundaryValueFunction):
    def __init__(self, value):
        super().__init__(3)
        self.value = value

    def __call__(self, x):
        values = zeros((3, x.shape[1]))
        values[0] = self.value
        return values


class _Truncated(BoundaryValueFunction):
    def __call__(self, x):
        return zeros((2, x.shape[1]))


def test_dimension_mismatch_fails_fast(tension_locator):
    rules = [DirichletRule(2, (0,), _Truncated(3))]
    builder = IncrementalConstraintBuilder(rules, tension_locator)
    with pytest.raises(DimensionMismatchError):
        builder.build(0, 0)
    # Corrective iterations interpolate zero and never call the faulty function
    assert len(builder.build(0, 1)) == len(tension_locator.nodes(2))


def test_component_indices():
    assert component_indices("Ux", 3) == (0,)
    assert component_indices(["Uz", "Uy"], 3) == (1, 2)
    assert component_indices("U", 3) == (0, 1, 2)
    with pytest.raises(ConfigurationError):
        component_indices("Uz", 2)
    with pytest.raises(ConfigurationError):
        component_indices([], 3)


def test_rules_from_config():
    rules = rules_from_config([{"component": "Ux", "tag": 2,
                                "value": {"type": "increment", "amplitude": 0.5}},
                               {"component": ["Uy", "Uz"], "tag": 6, "value": 1e-3},
                               {"component": "Uy", "tag": 3}], 3, 10)
    assert [(r.tag, r.components) for r in rules] == [(2, (0,)), (6, (1, 2)), (3, (1,))]
    assert rules[0].value.delta == pytest.approx(0.05)
    x = zeros((3, 1))
    assert_allclose(rules[1].value(x)[:, 0], [0., 1e-3, 1e-3])
    assert_allclose(rules[2].value(x), 0.)


@pytest.mark.parametrize("value", [{"type": "rampe"}, {"type": "increment"}, "0.1", True])
def test_invalid_values(value):
    with pytest.raises(ConfigurationError):
        rules_from_config([{"component": "Ux", "tag": 1, "value": value}], 3, 10)


@pytest.mark.parametrize("bc", [{"tag": 1, "value": 0.}, {"component": "Ux", "value": 0.}])
def test_incomplete_rule(bc):
    with pytest.raises(ConfigurationError, match="has no"):
        rules_from_config([bc], 3, 10)


def test_rule_on_unmarked_tag(tension):
    tags = {int(tag) for tag in tension["boundaries"]["tags"]}
    rules = rules_from_config(tension["boundary_conditions"], 3, 10, tags)
    assert len(rules) == len(tension["boundary_conditions"])
    with pytest.raises(ConfigurationError, match="tag 9"):
        rules_from_config([{"component": "Ux", "tag": 9}], 3, 10, tags)
