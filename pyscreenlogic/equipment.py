# pyScreenLogic - Equipment Views
# -*- coding: utf-8 -*-
"""
 Controller configuration and pool status views

 Each view holds the decoded wire payload and layers derived accessors on
 top of it. Views are replaced wholesale on every fetch.

 Functions
    convert_temp(value, from_unit, to_unit)     # Integer temperature conversion
"""
import logging
from typing import Optional, Tuple

from pyscreenlogic.protocol.constants import (EQUIPMENT_CHLORINATOR, EQUIPMENT_COOLING,
                                              EQUIPMENT_INTELLICHEM, EQUIPMENT_SOLAR,
                                              EQUIPMENT_SOLAR_AS_HEAT_PUMP, STATUS_READY,
                                              STATUS_SERVICE_MODE, STATUS_SYNC, BodyOfWater,
                                              HeatMode, TemperatureUnit)
from pyscreenlogic.protocol.messages import (BodyOfWaterStatus, ControllerConfigurationResponse,
                                             PoolStatusResponse, SetPointRange)

log = logging.getLogger(__name__)


def fahrenheit_to_celsius(fahrenheit: int) -> int:
    return (fahrenheit - 32) * 5 // 9


def celsius_to_fahrenheit(celsius: int) -> int:
    return celsius * 9 // 5 + 32


def convert_temp(value: int, from_unit: TemperatureUnit, to_unit: TemperatureUnit) -> int:
    """
    Convert a temperature between units using whole degrees, the way the
    controller does.
    """
    if from_unit == to_unit:
        return value
    if to_unit == TemperatureUnit.CELSIUS:
        return fahrenheit_to_celsius(value)
    return celsius_to_fahrenheit(value)


class ControllerConfiguration:
    def __init__(self, payload: ControllerConfigurationResponse):
        self.payload = payload

    def __repr__(self):
        return f"ControllerConfiguration({self.payload!r})"

    @property
    def temperature_unit(self) -> TemperatureUnit:
        return TemperatureUnit.CELSIUS if self.payload.is_celsius else TemperatureUnit.FAHRENHEIT

    @property
    def is_celsius(self) -> bool:
        return self.payload.is_celsius

    @property
    def controller_type(self) -> int:
        return self.payload.controller_type

    @property
    def hardware_type(self) -> int:
        return self.payload.hardware_type

    @property
    def circuits(self):
        return self.payload.circuits

    @property
    def colors(self):
        return self.payload.colors

    def set_point_range(self, body: BodyOfWater) -> SetPointRange:
        if BodyOfWater(body) == BodyOfWater.SPA:
            return self.payload.spa_set_point_range
        return self.payload.pool_set_point_range

    def _has_equipment(self, flag: int) -> bool:
        return (self.payload.equipment_flags & flag) != 0

    def has_solar(self) -> bool:
        return self._has_equipment(EQUIPMENT_SOLAR)

    def has_solar_as_heat_pump(self) -> bool:
        return self._has_equipment(EQUIPMENT_SOLAR_AS_HEAT_PUMP)

    def has_chlorinator(self) -> bool:
        return self._has_equipment(EQUIPMENT_CHLORINATOR)

    def has_cooling(self) -> bool:
        return self._has_equipment(EQUIPMENT_COOLING)

    def has_intellichem(self) -> bool:
        return self._has_equipment(EQUIPMENT_INTELLICHEM)

    def is_easy_touch(self) -> bool:
        return self.controller_type in (13, 14)

    def is_intelli_touch(self) -> bool:
        return self.controller_type not in (10, 13, 14)

    def is_easy_touch_lite(self) -> bool:
        return self.controller_type == 13 and (self.hardware_type & 0x4) != 0

    def is_dual_body(self) -> bool:
        return self.controller_type == 5

    def is_chem2(self) -> bool:
        return self.controller_type == 252 and self.hardware_type == 2


class PoolStatus:
    def __init__(self, payload: PoolStatusResponse):
        self.payload = payload

    def __repr__(self):
        return f"PoolStatus({self.payload!r})"

    @property
    def air_temp(self) -> int:
        return self.payload.air_temp

    @property
    def chemistry(self):
        return self.payload.chemistry

    @property
    def circuits(self):
        return self.payload.circuits

    def is_ready(self) -> bool:
        return self.payload.ok == STATUS_READY

    def is_syncing(self) -> bool:
        return self.payload.ok == STATUS_SYNC

    def is_in_service_mode(self) -> bool:
        return self.payload.ok == STATUS_SERVICE_MODE

    def body(self, body: BodyOfWater) -> Optional[BodyOfWaterStatus]:
        """Status record of a body of water, None if the controller does not report it"""
        for water in self.payload.bodies:
            if water.body_type == body:
                return water
        return None

    @property
    def pool(self) -> Optional[BodyOfWaterStatus]:
        return self.body(BodyOfWater.POOL)

    @property
    def spa(self) -> Optional[BodyOfWaterStatus]:
        return self.body(BodyOfWater.SPA)

    def heat_mode(self, body: BodyOfWater) -> Optional[HeatMode]:
        water = self.body(body)
        if water is None:
            return None
        try:
            return HeatMode(water.heat_mode)
        except ValueError:
            log.debug(f"Unknown heat mode {water.heat_mode} for {BodyOfWater(body).name}")
            return None


def set_point_bounds(config: ControllerConfiguration, body: BodyOfWater,
                     unit: TemperatureUnit) -> Tuple[int, int]:
    limits = config.set_point_range(body)
    return (convert_temp(limits.min, config.temperature_unit, unit),
            convert_temp(limits.max, config.temperature_unit, unit))
