"""Tests for splitter configuration."""

from __future__ import annotations

import pytest

from modbatch.composer.policy import GapAwareSplitPolicy, MaxQuantitySplitPolicy
from modbatch.composer.requests import RequestKind
from modbatch.config import SplitterConfig
from modbatch.exceptions import ConfigurationError


class TestSplitterConfig:
    """Tests for SplitterConfig dataclass."""

    def test_defaults(self) -> None:
        """Test protocol defaults."""
        config = SplitterConfig()

        assert config.max_registers_per_request == 124
        assert config.max_coils_per_request == 2048
        assert config.max_gap is None
        config.validate()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_registers_per_request": 0},
            {"max_registers_per_request": 126},
            {"max_coils_per_request": 0},
            {"max_coils_per_request": 2049},
            {"max_gap": -1},
        ],
    )
    def test_validate_rejects(self, kwargs: dict[str, int]) -> None:
        """Test out of range limits raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            SplitterConfig(**kwargs).validate()

    def test_max_quantity_for(self) -> None:
        """Test per-kind limits."""
        config = SplitterConfig(max_registers_per_request=60, max_coils_per_request=800)

        assert config.max_quantity_for(RequestKind.READ_HOLDING_REGISTERS) == 60
        assert config.max_quantity_for(RequestKind.READ_INPUT_REGISTERS) == 60
        assert config.max_quantity_for(RequestKind.READ_COILS) == 800
        assert config.max_quantity_for(RequestKind.READ_DISCRETE_INPUTS) == 800

    def test_policy_for_without_gap(self) -> None:
        """Test the gap-agnostic policy is used by default."""
        policy = SplitterConfig().policy_for(RequestKind.READ_COILS)

        assert policy == MaxQuantitySplitPolicy(2048)

    def test_policy_for_with_gap(self) -> None:
        """Test max_gap selects the gap-aware policy."""
        policy = SplitterConfig(max_gap=3).policy_for(RequestKind.READ_INPUT_REGISTERS)

        assert policy == GapAwareSplitPolicy(124, max_gap=3)

    def test_dict_round_trip(self) -> None:
        """Test to_dict/from_dict round trip."""
        config = SplitterConfig(max_registers_per_request=100, max_gap=5)

        assert config.to_dict() == {
            "max_registers_per_request": 100,
            "max_coils_per_request": 2048,
            "max_gap": 5,
        }
        assert SplitterConfig.from_dict(config.to_dict()) == config

    def test_from_dict_defaults(self) -> None:
        """Test missing keys fall back to defaults."""
        assert SplitterConfig.from_dict({}) == SplitterConfig()

    def test_from_dict_invalid_value(self) -> None:
        """Test non-integer values raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Invalid splitter configuration"):
            SplitterConfig.from_dict({"max_registers_per_request": "many"})

    def test_from_dict_out_of_range(self) -> None:
        """Test from_dict validates."""
        with pytest.raises(ConfigurationError, match="max_coils_per_request"):
            SplitterConfig.from_dict({"max_coils_per_request": 5000})
