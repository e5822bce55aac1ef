import sys
from pathlib import Path

import pytest

# Add the ``coaster_ride`` directory to the import path for test execution.
sys.path.append(str(Path(__file__).resolve().parents[1] / "coaster_ride"))

from ride_config import RideConfig


def test_default_ride_tuning() -> None:
    cfg = RideConfig()
    assert cfg.gravity == 9.8
    assert cfg.chain_lift_speed == 0.9
    assert cfg.min_speed == 1.0
    assert cfg.camera_height == 1.5
    assert cfg.look_at_height_ratio == 0.8
    assert cfg.look_ahead == 0.03
    assert cfg.smoothing_factor == 0.25
    assert cfg.smoothing_rate is None
    assert cfg.fallback_peak == 0.2
    assert cfg.reset_height_each_lap is False


def test_from_params_ignores_unknown_keys() -> None:
    cfg = RideConfig.from_params(
        {"gravity": 9.81, "speed_scale": 2.0, "looped": True, "reset_height_each_lap": 1.0}
    )
    assert cfg.gravity == 9.81
    assert cfg.reset_height_each_lap is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"gravity": 0.0},
        {"min_speed": -1.0},
        {"smoothing_factor": 0.0},
        {"smoothing_factor": 1.5},
        {"smoothing_rate": -2.0},
        {"max_delta_time": 0.0},
        {"look_ahead": 1.0},
        {"peak_scan_step": 0.0},
    ],
)
def test_invalid_values_raise(kwargs) -> None:
    with pytest.raises(ValueError):
        RideConfig(**kwargs)


def test_from_params_none_disables_limits() -> None:
    cfg = RideConfig.from_params({"max_delta_time": None, "smoothing_rate": None})
    assert cfg.max_delta_time is None
    assert cfg.smoothing_rate is None


def test_from_params_rejects_none_for_required_values() -> None:
    with pytest.raises(ValueError, match="gravity"):
        RideConfig.from_params({"gravity": None})
