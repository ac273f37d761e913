"""Protocol constants shared by the address splitter and builders."""

from __future__ import annotations

# Separator between the endpoint URI and the unit id in an endpoint path,
# e.g. "tcp://192.168.1.100:502||unitId=1"
UNIT_ID_SEPARATOR = "||unitId="

# FC3/FC4 responses carry at most 125 registers; one is kept in reserve
# for gateways that reject a full 125 register frame.
MAX_REGISTERS_PER_MODBUS_REQUEST = 124

# FC1/FC2 responses have a 1 byte count field: 256 * 8 coils
MAX_COILS_PER_MODBUS_REQUEST = 2048

# Registers are 16 bits wide
REGISTER_BIT_COUNT = 16

__all__ = [
    "MAX_COILS_PER_MODBUS_REQUEST",
    "MAX_REGISTERS_PER_MODBUS_REQUEST",
    "REGISTER_BIT_COUNT",
    "UNIT_ID_SEPARATOR",
]
