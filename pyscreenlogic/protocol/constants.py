"""Protocol constants for ScreenLogic gateways."""

from enum import IntEnum

# UDP port the gateway answers discovery broadcasts on
DISCOVERY_PORT = 1444

# Default TCP port of the gateway when the host is given explicitly
GATEWAY_PORT = 80

# Literal preamble written before any framed traffic
CONNECT_PREAMBLE = b"CONNECTSERVERHOST\r\n\r\n"

# Sequence number of the first frame of a session
INITIAL_SEQUENCE = 2

# Controller readiness codes reported in the pool status
STATUS_READY = 1
STATUS_SYNC = 2
STATUS_SERVICE_MODE = 3


class BodyOfWater(IntEnum):
    POOL = 0
    SPA = 1


class HeatMode(IntEnum):
    OFF = 0
    SOLAR_ONLY = 1
    SOLAR_PREFERRED = 2
    ON = 3
    UNCHANGED = 4  # write only, leaves the current mode in place


class TemperatureUnit(IntEnum):
    CELSIUS = 0
    FAHRENHEIT = 1


# Equipment flag bits from the controller configuration
EQUIPMENT_SOLAR = 0x1
EQUIPMENT_SOLAR_AS_HEAT_PUMP = 0x2
EQUIPMENT_CHLORINATOR = 0x4
EQUIPMENT_COOLING = 0x800
EQUIPMENT_INTELLICHEM = 0x8000
