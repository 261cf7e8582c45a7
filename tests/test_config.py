from __future__ import annotations

import pytest

from gpsofs.pso.config import PSOConfig, parse_range
from gpsofs.pso.errors import InvalidConfiguration
from gpsofs.pso.geometric_pso import GeometricPSO


def test_defaults_are_valid() -> None:
    cfg = PSOConfig().validate()
    assert cfg.population_size == 20
    assert cfg.iterations == 20
    assert cfg.mutation_probability == 0.01
    assert cfg.weights == (0.33, 0.33, 0.34)
    assert cfg.seed == 1
    assert cfg.effective_report_frequency == 20


@pytest.mark.parametrize(
    "kwargs",
    [
        {"inertia_weight": 0.3, "social_weight": 0.3, "individual_weight": 0.3},
        {"population_size": 0},
        {"mutation_probability": 1.5},
        {"mutation_probability": -0.1},
        {"iterations": 0},
        {"report_frequency": 0},
        {"n_jobs": 0},
        {"inertia_weight": -0.5, "social_weight": 0.5, "individual_weight": 1.0},
    ],
)
def test_engine_rejects_invalid_configuration(kwargs) -> None:
    with pytest.raises(InvalidConfiguration):
        GeometricPSO(PSOConfig(**kwargs))


def test_invalid_configuration_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="sum must be equal to 1"):
        PSOConfig(inertia_weight=0.2).validate()


def test_config_is_immutable() -> None:
    cfg = PSOConfig()
    with pytest.raises(AttributeError):
        cfg.seed = 5  # type: ignore[misc]


def test_parse_range() -> None:
    assert parse_range("1,3,5-7", 10) == [0, 2, 4, 5, 6]
    assert parse_range("first-2,last", 10) == [0, 1, 9]
    assert parse_range(" 3 , 3 ", 4) == [2]


@pytest.mark.parametrize("spec", ["0", "11", "a", "1,,2", "5-3"])
def test_parse_range_rejects(spec: str) -> None:
    with pytest.raises(InvalidConfiguration):
        parse_range(spec, 10)


def test_start_set_as_sequence() -> None:
    cfg = PSOConfig(start_set=(1, 3))
    assert cfg.start_set_spec() == "1,3"
    assert cfg.resolve_start_set(5) == [0, 2]
    assert PSOConfig().resolve_start_set(5) is None
    assert cfg.to_dict()["start_set"] == "1,3"
