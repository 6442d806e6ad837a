import logging
from dataclasses import dataclass

from pyscreenlogic.protocol.codec import Encoder
from .screenlogic_message import (SET_HEAT_MODE_CODE, SET_HEAT_MODE_RESPONSE_CODE, SET_HEAT_POINT_CODE,
                                  SET_HEAT_POINT_RESPONSE_CODE, ScreenLogicMessage, ScreenLogicResponse)

log = logging.getLogger(__name__)


@dataclass
class SetHeatPointRequest(ScreenLogicMessage):
    """Set the heater set-point of a body of water, in the controller's unit"""
    TYPE_CODE = SET_HEAT_POINT_CODE

    controller_index: int = 0
    body_type: int = 0
    temperature: int = 0

    def encode_body(self):
        encoder = Encoder()
        encoder.write_uint32(self.controller_index)
        encoder.write_uint32(self.body_type)
        encoder.write_uint32(self.temperature)
        return encoder.getvalue()


class SetHeatPointResponse(ScreenLogicResponse):
    TYPE_CODE = SET_HEAT_POINT_RESPONSE_CODE


@dataclass
class SetHeatModeRequest(ScreenLogicMessage):
    TYPE_CODE = SET_HEAT_MODE_CODE

    controller_index: int = 0
    body_type: int = 0
    mode: int = 0

    def encode_body(self):
        encoder = Encoder()
        encoder.write_uint32(self.controller_index)
        encoder.write_uint32(self.body_type)
        encoder.write_uint32(self.mode)
        return encoder.getvalue()


class SetHeatModeResponse(ScreenLogicResponse):
    TYPE_CODE = SET_HEAT_MODE_RESPONSE_CODE
