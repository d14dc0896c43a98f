import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from evm_stepper.core.errors import OutOfGas
from evm_stepper.core.gas import Gas, GasCost


def test_cost_table_values():
    """The fee schedule must match exactly."""
    assert GasCost.ZERO == 0
    assert GasCost.QUICK == 2
    assert GasCost.FASTEST == 3
    assert GasCost.FAST == 5
    assert GasCost.MID == 8
    assert GasCost.SLOW == 10
    assert GasCost.SHA3 == 30
    assert GasCost.COPY == 3
    assert GasCost.COPY_SHA3 == 6
    assert GasCost.WARM_ACCESS == 100
    assert GasCost.COLD_SLOAD == 2100
    assert GasCost.SSTORE_SENTRY == 2300
    assert GasCost.SSTORE_SET == 20000
    assert GasCost.SSTORE_RESET == 2900
    assert GasCost.SSTORE_CLEARS_SCHEDULE == 4800
    assert GasCost.MEMORY_EXPANSION_QUAD_DENOMINATOR == 512
    assert GasCost.MEMORY_EXPANSION_LINEAR_COEFF == 3
    assert GasCost.EXP_BYTE_TIMES == 50


def test_new_meter():
    gas = Gas(1000)
    assert gas.limit == 1000
    assert gas.used == 0
    assert gas.left() == 1000


def test_enough_is_read_only():
    gas = Gas(10)
    assert gas.enough(10)
    assert not gas.enough(11)
    assert gas.used == 0


def test_use_gas_exact_limit():
    gas = Gas(10)
    gas.use_gas(10)
    assert gas.left() == 0
    with pytest.raises(OutOfGas):
        gas.use_gas(1)
    gas.use_gas(0)


def test_out_of_gas_leaves_usage_unchanged():
    gas = Gas(100)
    gas.use_gas(60)
    with pytest.raises(OutOfGas) as excinfo:
        gas.use_gas(41)
    assert excinfo.value.cost == 41
    assert excinfo.value.left == 40
    assert gas.used == 60


def test_invalid_construction():
    with pytest.raises(ValueError):
        Gas(-1)
    with pytest.raises(ValueError):
        Gas(10, used=11)


@settings(max_examples=200, deadline=None)
@given(
    limit=st.integers(min_value=0, max_value=10**9),
    costs=st.lists(st.integers(min_value=0, max_value=10**6), max_size=50),
)
def test_used_is_sum_of_successful_charges(limit, costs):
    """Usage only grows by successful charges and never passes the limit."""
    gas = Gas(limit)
    charged = 0
    for cost in costs:
        before = gas.used
        if cost > gas.left():
            with pytest.raises(OutOfGas):
                gas.use_gas(cost)
            assert gas.used == before
        else:
            gas.use_gas(cost)
            charged += cost
        assert gas.used <= gas.limit
    assert gas.used == charged
