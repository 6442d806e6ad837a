import logging
from typing import Tuple

from pyscreenlogic.exceptions import BadParameterError, LoginFailedError, MalformedPacketError

log = logging.getLogger(__name__)

# Type codes
LOGIN_FAILED_CODE = 13
CHALLENGE_CODE = 14
CHALLENGE_RESPONSE_CODE = CHALLENGE_CODE + 1
LOGIN_CODE = 27
LOGIN_RESPONSE_CODE = LOGIN_CODE + 1
BAD_PARAMETER_CODE = 31
VERSION_CODE = 8120
VERSION_RESPONSE_CODE = VERSION_CODE + 1
WEATHER_FORECAST_CHANGED_CODE = 9806
HISTORY_DATA_CODE = 12502
POOL_STATUS_CODE = 12526
POOL_STATUS_RESPONSE_CODE = POOL_STATUS_CODE + 1
SET_HEAT_POINT_CODE = 12528
SET_HEAT_POINT_RESPONSE_CODE = SET_HEAT_POINT_CODE + 1
CONTROLLER_CONFIG_CODE = 12532
CONTROLLER_CONFIG_RESPONSE_CODE = CONTROLLER_CONFIG_CODE + 1
HISTORY_CODE = 12534
HISTORY_RESPONSE_CODE = HISTORY_CODE + 1
SET_HEAT_MODE_CODE = 12538
SET_HEAT_MODE_RESPONSE_CODE = SET_HEAT_MODE_CODE + 1

# Codes the gateway answers with in place of the requested response
ERROR_CODES = (LOGIN_FAILED_CODE, BAD_PARAMETER_CODE)


class ScreenLogicMessage:
    """Base class for requests sent to the gateway."""

    TYPE_CODE = 0

    def encode_body(self) -> bytes:
        return b''

    def encode(self) -> Tuple[int, bytes]:
        return self.TYPE_CODE, self.encode_body()


class ScreenLogicResponse(ScreenLogicMessage):
    """
    Base class for responses read from the gateway.

    Responses encode as well, the tests build gateway traffic with them.
    """

    TYPE_CODE = 0

    @classmethod
    def accepts(cls, type_code: int) -> bool:
        return type_code == cls.TYPE_CODE or type_code in ERROR_CODES

    @classmethod
    def check_header(cls, header):
        if header.type_code == cls.TYPE_CODE:
            return
        if header.type_code == LOGIN_FAILED_CODE:
            raise LoginFailedError("Gateway rejected the login")
        if header.type_code == BAD_PARAMETER_CODE:
            raise BadParameterError(f"Gateway rejected the parameters sent for {cls.__name__}")
        raise MalformedPacketError(
            f"{cls.__name__} expected type {cls.TYPE_CODE}, got {header.type_code}")

    @classmethod
    def decode(cls, header, body: bytes):
        cls.check_header(header)
        return cls()
