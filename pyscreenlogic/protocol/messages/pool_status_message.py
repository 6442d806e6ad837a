import logging
from dataclasses import dataclass, field
from typing import List

from pyscreenlogic.exceptions import MalformedPacketError
from pyscreenlogic.protocol.codec import Decoder, Encoder
from pyscreenlogic.protocol.constants import BodyOfWater
from .screenlogic_message import (POOL_STATUS_CODE, POOL_STATUS_RESPONSE_CODE, ScreenLogicMessage,
                                  ScreenLogicResponse)

log = logging.getLogger(__name__)

# A controller reports at most a pool and a spa
MAX_BODY_COUNT = len(BodyOfWater)


@dataclass
class PoolStatusRequest(ScreenLogicMessage):
    TYPE_CODE = POOL_STATUS_CODE

    # Meaning unknown, always sent as 0
    unknown_field: int = 0

    def encode_body(self):
        encoder = Encoder()
        encoder.write_uint32(self.unknown_field)
        return encoder.getvalue()


@dataclass
class BodyOfWaterStatus:
    body_type: int = 0
    current_temp: int = 0
    heater_status: int = 0
    heat_set_point: int = 0
    cool_set_point: int = 0
    heat_mode: int = 0

    @classmethod
    def read(cls, decoder: Decoder) -> 'BodyOfWaterStatus':
        return cls(*(decoder.read_uint32() for _ in range(6)))

    def write(self, encoder: Encoder):
        for val in (self.body_type, self.current_temp, self.heater_status, self.heat_set_point,
                    self.cool_set_point, self.heat_mode):
            encoder.write_uint32(val)


@dataclass
class CircuitStatus:
    circuit_id: int = 0
    valve_state: int = 0
    color_set: int = 0
    color_position: int = 0
    color_stagger: int = 0
    delay: int = 0

    @classmethod
    def read(cls, decoder: Decoder) -> 'CircuitStatus':
        return cls(
            circuit_id=decoder.read_uint32(),
            valve_state=decoder.read_uint32(),
            color_set=decoder.read_uint8(),
            color_position=decoder.read_uint8(),
            color_stagger=decoder.read_uint8(),
            delay=decoder.read_uint8(),
        )

    def write(self, encoder: Encoder):
        encoder.write_uint32(self.circuit_id)
        encoder.write_uint32(self.valve_state)
        encoder.write_uint8(self.color_set)
        encoder.write_uint8(self.color_position)
        encoder.write_uint8(self.color_stagger)
        encoder.write_uint8(self.delay)


@dataclass
class Chemistry:
    ph: float = 0.0
    orp: float = 0.0
    saturation: float = 0.0
    salt_ppm: int = 0
    ph_tank_level: int = 0
    orp_tank_level: int = 0
    alarms: int = 0

    @classmethod
    def read(cls, decoder: Decoder) -> 'Chemistry':
        # pH, ORP and saturation are sent in hundredths
        return cls(
            ph=decoder.read_uint32() / 100,
            orp=decoder.read_uint32() / 100,
            saturation=decoder.read_uint32() / 100,
            salt_ppm=decoder.read_uint32(),
            ph_tank_level=decoder.read_uint32(),
            orp_tank_level=decoder.read_uint32(),
            alarms=decoder.read_uint32(),
        )

    def write(self, encoder: Encoder):
        for val in (self.ph, self.orp, self.saturation):
            encoder.write_uint32(round(val * 100))
        for val in (self.salt_ppm, self.ph_tank_level, self.orp_tank_level, self.alarms):
            encoder.write_uint32(val)


@dataclass
class PoolStatusResponse(ScreenLogicResponse):
    TYPE_CODE = POOL_STATUS_RESPONSE_CODE

    ok: int = 0
    freeze_mode: int = 0
    remotes: int = 0
    pool_delay: int = 0
    spa_delay: int = 0
    cleaner_delay: int = 0
    unknown: bytes = bytes(3)
    air_temp: int = 0
    bodies: List[BodyOfWaterStatus] = field(default_factory=list)
    circuits: List[CircuitStatus] = field(default_factory=list)
    chemistry: Chemistry = field(default_factory=Chemistry)

    @classmethod
    def decode(cls, header, body):
        cls.check_header(header)
        decoder = Decoder(body)
        status = cls()
        status.ok = decoder.read_uint32()
        status.freeze_mode = decoder.read_uint8()
        status.remotes = decoder.read_uint8()
        status.pool_delay = decoder.read_uint8()
        status.spa_delay = decoder.read_uint8()
        status.cleaner_delay = decoder.read_uint8()
        status.unknown = decoder.copy_bytes(3)
        status.air_temp = decoder.read_uint32()

        body_count = decoder.read_uint32()
        if body_count > MAX_BODY_COUNT:
            raise MalformedPacketError(f"Pool status reports {body_count} bodies of water, "
                                       f"at most {MAX_BODY_COUNT} are supported")
        status.bodies = [BodyOfWaterStatus.read(decoder) for _ in range(body_count)]
        seen = set()
        for water in status.bodies:
            if water.body_type not in tuple(BodyOfWater) or water.body_type in seen:
                raise MalformedPacketError(f"Unexpected body of water type {water.body_type}")
            seen.add(water.body_type)

        status.circuits = decoder.read_list(lambda: CircuitStatus.read(decoder))
        status.chemistry = Chemistry.read(decoder)
        return status

    def encode_body(self):
        encoder = Encoder()
        encoder.write_uint32(self.ok)
        for val in (self.freeze_mode, self.remotes, self.pool_delay, self.spa_delay, self.cleaner_delay):
            encoder.write_uint8(val)
        encoder.write_bytes(self.unknown)
        encoder.write_uint32(self.air_temp)
        encoder.write_uint32(len(self.bodies))
        for water in self.bodies:
            water.write(encoder)
        encoder.write_uint32(len(self.circuits))
        for circuit in self.circuits:
            circuit.write(encoder)
        self.chemistry.write(encoder)
        return encoder.getvalue()
