import logging
from dataclasses import dataclass, field
from typing import List

from pyscreenlogic.exceptions import MalformedPacketError
from pyscreenlogic.protocol.codec import Decoder, Encoder
from .screenlogic_message import (CONTROLLER_CONFIG_CODE, CONTROLLER_CONFIG_RESPONSE_CODE,
                                  ScreenLogicMessage, ScreenLogicResponse)

log = logging.getLogger(__name__)

# Other clients hard code the pump table to 8 entries as well
PUMP_COUNT = 8


@dataclass
class ControllerConfigurationRequest(ScreenLogicMessage):
    TYPE_CODE = CONTROLLER_CONFIG_CODE

    # Meaning unknown, always sent as 0
    unknown_field_1: int = 0
    unknown_field_2: int = 0

    def encode_body(self):
        encoder = Encoder()
        encoder.write_uint32(self.unknown_field_1)
        encoder.write_uint32(self.unknown_field_2)
        return encoder.getvalue()


@dataclass
class SetPointRange:
    min: int = 0
    max: int = 0


@dataclass
class ControllerCircuit:
    circuit_id: int = 0
    name: str = ""
    name_index: int = 0
    function: int = 0
    interface: int = 0
    flags: int = 0
    color_set: int = 0
    color_position: int = 0
    color_stagger: int = 0
    device_id: int = 0
    default_runtime: int = 0

    @classmethod
    def read(cls, decoder: Decoder) -> 'ControllerCircuit':
        circuit = cls(
            circuit_id=decoder.read_uint32(),
            name=decoder.read_string(),
            name_index=decoder.read_uint8(),
            function=decoder.read_uint8(),
            interface=decoder.read_uint8(),
            flags=decoder.read_uint8(),
            color_set=decoder.read_uint8(),
            color_position=decoder.read_uint8(),
            color_stagger=decoder.read_uint8(),
            device_id=decoder.read_uint8(),
            default_runtime=decoder.read_uint16(),
        )
        # 2 bytes of unknown meaning
        decoder.read_uint16()
        return circuit

    def write(self, encoder: Encoder):
        encoder.write_uint32(self.circuit_id)
        encoder.write_string(self.name)
        for val in (self.name_index, self.function, self.interface, self.flags, self.color_set,
                    self.color_position, self.color_stagger, self.device_id):
            encoder.write_uint8(val)
        encoder.write_uint16(self.default_runtime)
        encoder.write_uint16(0)


@dataclass
class CircuitColor:
    name: str = ""
    red: int = 0
    green: int = 0
    blue: int = 0

    @classmethod
    def read(cls, decoder: Decoder) -> 'CircuitColor':
        return cls(
            name=decoder.read_string(),
            red=decoder.read_uint32(),
            green=decoder.read_uint32(),
            blue=decoder.read_uint32(),
        )

    def write(self, encoder: Encoder):
        encoder.write_string(self.name)
        encoder.write_uint32(self.red)
        encoder.write_uint32(self.green)
        encoder.write_uint32(self.blue)


@dataclass
class ControllerConfigurationResponse(ScreenLogicResponse):
    TYPE_CODE = CONTROLLER_CONFIG_RESPONSE_CODE

    controller_id: int = 0
    pool_set_point_range: SetPointRange = field(default_factory=SetPointRange)
    spa_set_point_range: SetPointRange = field(default_factory=SetPointRange)
    is_celsius: bool = False
    controller_type: int = 0
    hardware_type: int = 0
    controller_buffer: int = 0
    equipment_flags: int = 0
    default_circuit_name: str = ""
    circuits: List[ControllerCircuit] = field(default_factory=list)
    colors: List[CircuitColor] = field(default_factory=list)
    pumps: List[int] = field(default_factory=lambda: [0] * PUMP_COUNT)
    interface_tab_flags: int = 0
    show_alarms: bool = False

    @classmethod
    def decode(cls, header, body):
        cls.check_header(header)
        decoder = Decoder(body)
        config = cls()
        config.controller_id = decoder.read_uint32()
        config.pool_set_point_range = SetPointRange(decoder.read_uint8(), decoder.read_uint8())
        config.spa_set_point_range = SetPointRange(decoder.read_uint8(), decoder.read_uint8())
        config.is_celsius = decoder.read_bool()
        config.controller_type = decoder.read_uint8()
        config.hardware_type = decoder.read_uint8()
        config.controller_buffer = decoder.read_uint8()
        config.equipment_flags = decoder.read_uint32()
        config.default_circuit_name = decoder.read_string()
        config.circuits = decoder.read_list(lambda: ControllerCircuit.read(decoder))
        config.colors = decoder.read_list(lambda: CircuitColor.read(decoder))
        config.pumps = [decoder.read_uint8() for _ in range(PUMP_COUNT)]
        config.interface_tab_flags = decoder.read_uint32()
        config.show_alarms = decoder.read_bool()
        log.debug(f"Controller configuration: {len(config.circuits)} circuits, "
                  f"{len(config.colors)} colors, celsius={config.is_celsius}")
        return config

    def encode_body(self):
        if len(self.pumps) != PUMP_COUNT:
            raise MalformedPacketError(f"Pump table must have {PUMP_COUNT} entries")
        encoder = Encoder()
        encoder.write_uint32(self.controller_id)
        encoder.write_uint8(self.pool_set_point_range.min)
        encoder.write_uint8(self.pool_set_point_range.max)
        encoder.write_uint8(self.spa_set_point_range.min)
        encoder.write_uint8(self.spa_set_point_range.max)
        encoder.write_bool(self.is_celsius)
        encoder.write_uint8(self.controller_type)
        encoder.write_uint8(self.hardware_type)
        encoder.write_uint8(self.controller_buffer)
        encoder.write_uint32(self.equipment_flags)
        encoder.write_string(self.default_circuit_name)
        encoder.write_uint32(len(self.circuits))
        for circuit in self.circuits:
            circuit.write(encoder)
        encoder.write_uint32(len(self.colors))
        for color in self.colors:
            color.write(encoder)
        for pump in self.pumps:
            encoder.write_uint8(pump)
        encoder.write_uint32(self.interface_tab_flags)
        encoder.write_bool(self.show_alarms)
        return encoder.getvalue()
