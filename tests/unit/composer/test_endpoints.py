"""Tests for endpoint path parsing and grouping."""

from __future__ import annotations

import pytest

from modbatch.composer.endpoints import (
    EndpointKey,
    endpoint_path,
    group_by_endpoint,
    parse_endpoint_path,
)
from modbatch.exceptions import ConfigurationError, MalformedEndpointPathError


class TestParseEndpointPath:
    """Tests for parse_endpoint_path."""

    def test_parses_uri_and_unit_id(self) -> None:
        """Test a well-formed path is split at the separator."""
        key = parse_endpoint_path("tcp://192.168.1.100:502||unitId=17")

        assert key == EndpointKey("tcp://192.168.1.100:502", 17)
        assert key.uri == "tcp://192.168.1.100:502"
        assert key.unit_id == 17

    def test_unit_id_zero(self) -> None:
        """Test unit id 0 (broadcast/gateway) is accepted."""
        assert parse_endpoint_path("tcp://h:502||unitId=0").unit_id == 0

    def test_missing_separator(self) -> None:
        """Test a path without separator names the offending path."""
        with pytest.raises(MalformedEndpointPathError) as exc_info:
            parse_endpoint_path("tcp://192.168.1.100:502")

        assert exc_info.value.path == "tcp://192.168.1.100:502"
        assert isinstance(exc_info.value, ConfigurationError)

    @pytest.mark.parametrize("unit_id", ["", "abc", "-1", "1.5"])
    def test_invalid_unit_id(self, unit_id: str) -> None:
        """Test non-numeric or negative unit ids raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="invalid unit id"):
            parse_endpoint_path(f"tcp://h:502||unitId={unit_id}")

    def test_round_trip_with_endpoint_path(self) -> None:
        """Test endpoint_path builds what parse_endpoint_path reads."""
        key = EndpointKey("rtu:///dev/ttyUSB0", 3)

        assert key.path == "rtu:///dev/ttyUSB0||unitId=3"
        assert parse_endpoint_path(key.path) == key


class TestEndpointPath:
    """Tests for endpoint_path."""

    def test_negative_unit_id(self) -> None:
        """Test a negative unit id is rejected."""
        with pytest.raises(ConfigurationError, match="non-negative"):
            endpoint_path("tcp://h:502", -1)

    def test_uri_with_separator(self) -> None:
        """Test a URI already containing the separator is rejected."""
        with pytest.raises(ConfigurationError, match="must not contain"):
            endpoint_path("tcp://h:502||unitId=1", 1)


class TestGroupByEndpoint:
    """Tests for group_by_endpoint."""

    def test_preserves_input_order(self) -> None:
        """Test groups come out in mapping insertion order."""
        groups = list(
            group_by_endpoint(
                {
                    "b||unitId=2": (3, 4),
                    "a||unitId=1": [1],
                }
            )
        )

        assert groups == [
            (EndpointKey("b", 2), [3, 4]),
            (EndpointKey("a", 1), [1]),
        ]

    def test_malformed_entry_raises(self) -> None:
        """Test a bad key raises when its entry is reached."""
        groups = group_by_endpoint({"a||unitId=1": [1], "broken": [2]})

        assert next(groups) == (EndpointKey("a", 1), [1])
        with pytest.raises(MalformedEndpointPathError):
            next(groups)
