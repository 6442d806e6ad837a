# pyScreenLogic Module
# -*- coding: utf-8 -*-
"""
 Python module to interface with Pentair ScreenLogic pool and spa gateways

 For more information see README.md

 Features
    * Discovers the ScreenLogic gateway on the local network (UDP broadcast)
    * Speaks the gateway's binary TCP protocol (challenge, login, requests)
    * Will cache controller configuration and pool status for 60s to limit calls to the gateway
    * Serializes all gateway traffic, one request on the wire at a time
    * Will reconnect and retry once when the connection drops

 Classes
    ScreenLogic(client_name, host, port, password, cacheexpire, timeout, lock_timeout,
        reconnect_retries, discovery_timeout, discovery_port, controller_index)

 Parameters
    client_name = "pyscreenlogic"  # Name the client logs in with
    host = None                    # Gateway IP address (discovered if None)
    port = 80                      # Gateway TCP port when host is given
    password = ""                  # Gateway password (not supported, must be empty)
    cacheexpire = 60               # Seconds to cache configuration and status
    timeout = None                 # Socket timeout in seconds (None blocks)
    lock_timeout = None            # Seconds to wait for the gateway lock (None blocks)
    reconnect_retries = 1          # Reconnect attempts per call on network errors
    discovery_timeout = 5          # Seconds to wait for a discovery answer
    discovery_port = 1444          # UDP discovery port
    controller_index = 0           # Controller addressed by set commands

 Functions
    connect()                          # Discover (if needed), connect and login
    close()                            # Close the gateway connection
    is_connected()                     # Returns True if the gateway answers
    gateway_name()                     # Gateway name as announced by discovery
    gateway_version()                  # Gateway firmware version
    controller_config(force)           # ControllerConfiguration (cached, force bypasses)
    pool_status(force)                 # PoolStatus (cached, force bypasses)
    history(start, end)                # Outside and pool water temperature history
    temperature_unit()                 # Controller's configured TemperatureUnit
    air_temp(unit)                     # Ambient air temperature
    current_temp(body, unit)           # Current water temperature of a body of water
    heater_active(body)                # True if the heat mode is ON
    current_heating_state(body)        # "HEATING" or "INACTIVE"
    target_heating_state(body)         # "HEAT" or "AUTO"
    heating_threshold_temp(body, unit) # Heat set-point
    set_heating_threshold_temp(body, temperature, unit)   # Set heat set-point (range checked)
    set_point_range(body, unit)        # Allowed set-point range (min, max)
    set_temperature(body, temperature) # Set heat set-point in controller units
    set_heat_mode(body, mode)          # Set HeatMode
    pool_temp(unit), spa_temp(unit), pool_heater_active(), spa_heater_active(), ...
                                       # Pool and spa aliases of the calls above

 Requirements
    This module requires python-dotenv and python-dateutil for the command line tool.
"""
import logging
import sys
import threading
from datetime import datetime
from typing import Optional, Tuple

version_tuple = (0, 1, 0)
version = __version__ = '%d.%d.%d' % version_tuple
__author__ = 'pyscreenlogic'

from pyscreenlogic.decorators import invalidates_cache, uses_api_lock, uses_cache, uses_reconnect
from pyscreenlogic.discovery import GatewayIdentity, discover_gateway
from pyscreenlogic.equipment import ControllerConfiguration, PoolStatus, convert_temp, set_point_bounds
from pyscreenlogic.exceptions import PasswordEncryptionNotImplementedError, PyScreenLogicException
from pyscreenlogic.gateway import DEFAULT_CLIENT_NAME, Gateway
from pyscreenlogic.protocol.constants import (DISCOVERY_PORT, GATEWAY_PORT, BodyOfWater, HeatMode,
                                              TemperatureUnit)
from pyscreenlogic.protocol.messages import HistoryDataResponse

log = logging.getLogger(__name__)
log.debug('%s version %s', __name__, __version__)
log.debug('Python %s on %s', sys.version, sys.platform)

# Heating states reported to consumers
HEATING = "HEATING"
INACTIVE = "INACTIVE"
HEAT = "HEAT"
AUTO = "AUTO"

GATEWAY_NAME_PREFIX = "Pentair: "
DISPLAY_NAME_PREFIX = "ScreenLogic-"


def set_debug(toggle=True, color=True):
    """Enable verbose logging"""
    if toggle:
        if color:
            logging.basicConfig(format='\x1b[31;1m%(levelname)s:%(message)s\x1b[0m', level=logging.DEBUG)
        else:
            logging.basicConfig(format='%(levelname)s:%(message)s', level=logging.DEBUG)
        log.setLevel(logging.DEBUG)
        log.debug("%s [%s]\n" % (__name__, __version__))
    else:
        log.setLevel(logging.NOTSET)


def display_name(gateway_name: str) -> str:
    """
    Name safe for home automation bridges: "Pentair: 00-11-22" becomes
    "ScreenLogic-00-11-22".
    """
    return gateway_name.replace(GATEWAY_NAME_PREFIX, DISPLAY_NAME_PREFIX, 1)


# pylint: disable=too-many-public-methods
class ScreenLogic(object):
    def __init__(self, client_name=DEFAULT_CLIENT_NAME, host=None, port=GATEWAY_PORT, password="",
                 cacheexpire=60, timeout=None, lock_timeout=None, reconnect_retries=1,
                 discovery_timeout=5, discovery_port=DISCOVERY_PORT, controller_index=0):
        """
        Represents a Pentair ScreenLogic gateway.

        Args:
            client_name       = Name the client logs in with
            host              = Gateway IP address, discovered on the local network if None
            port              = Gateway TCP port (only used with host)
            password          = Gateway password, password protected login is not implemented
            cacheexpire       = Seconds to expire cached configuration and status
            timeout           = Seconds for socket operations (None blocks)
            lock_timeout      = Seconds to wait for another caller's request to finish (None blocks)
            reconnect_retries = Reconnect attempts per call after a network error
            discovery_timeout = Seconds to wait for a discovery answer
            discovery_port    = UDP discovery port
            controller_index  = Controller addressed by set commands
        """
        if password:
            raise PasswordEncryptionNotImplementedError(
                "Password protected gateways are not supported: password encryption is not implemented")

        # Attributes
        self.client_name = client_name
        self.host = host
        self.port = port
        self.password = password
        self.timeout = timeout
        self.lock_timeout = lock_timeout
        self.reconnect_retries = reconnect_retries
        self.discovery_timeout = discovery_timeout
        self.discovery_port = discovery_port
        self.controller_index = controller_index
        self.cache = {}  # holds the cached responses
        self.cacheexpiry = {}  # holds the expiry instant of each cached response
        self.cacheexpire = cacheexpire  # seconds to expire cache
        self.api_lock = threading.Lock()  # one request on the wire at a time
        self.gateway: Optional[Gateway] = None

        # Connect to gateway
        self.connect()

    def connect(self):
        """
        Locate the gateway (unless host was given), connect and login.

        Errors propagate: OSError for network failures, PyScreenLogicException
        subclasses for protocol and login failures.
        """
        if self.host:
            identity = GatewayIdentity(address=self.host, port=self.port)
        else:
            log.debug("No host given - discovering gateway")
            identity = discover_gateway(timeout=self.discovery_timeout, port=self.discovery_port)
        gateway = Gateway(identity, client_name=self.client_name, password=self.password, timeout=self.timeout)
        gateway.open()
        self.gateway = gateway
        log.debug(f"Connected to {gateway}")

    def close(self):
        if self.gateway is not None:
            self.gateway.close()
        self.cache = {}
        self.cacheexpiry = {}

    def is_connected(self):
        """
        Return True if the gateway answers a status request
        """
        # noinspection PyBroadException
        try:
            return self.pool_status(force=True) is not None
        except Exception as exc:
            log.debug(f"Gateway not connected: {exc}")
            return False

    # Gateway requests

    @uses_api_lock
    @uses_cache('controller_config')
    @uses_reconnect
    def controller_config(self, force=False) -> ControllerConfiguration:
        # pylint: disable=unused-argument
        log.debug("Get controller configuration from gateway")
        return self.gateway.controller_config()

    @uses_api_lock
    @uses_cache('pool_status')
    @uses_reconnect
    def pool_status(self, force=False) -> PoolStatus:
        # pylint: disable=unused-argument
        log.debug("Get pool status from gateway")
        return self.gateway.pool_status()

    @uses_api_lock
    @uses_cache('version')
    @uses_reconnect
    def gateway_version(self, force=False) -> str:
        # pylint: disable=unused-argument
        return self.gateway.version()

    @uses_api_lock
    @uses_reconnect
    def history(self, start: datetime, end: datetime) -> HistoryDataResponse:
        return self.gateway.history(start, end, self.controller_index)

    @uses_api_lock
    @invalidates_cache('pool_status')
    @uses_reconnect
    def set_temperature(self, body: BodyOfWater, temperature: int):
        """
        Set the heat set-point of a body of water

        Args:
            body        = BodyOfWater.POOL or BodyOfWater.SPA
            temperature = Set-point in the controller's configured unit
        """
        self.gateway.set_temperature(self.controller_index, BodyOfWater(body), temperature)

    @uses_api_lock
    @invalidates_cache('pool_status')
    @uses_reconnect
    def set_heat_mode(self, body: BodyOfWater, mode: HeatMode):
        self.gateway.set_heat_mode(self.controller_index, BodyOfWater(body), HeatMode(mode))

    # Consumer accessors

    def gateway_name(self) -> str:
        """Gateway name exactly as announced by the gateway"""
        if self.gateway is None:
            return self.host or ""
        return self.gateway.name

    def temperature_unit(self) -> TemperatureUnit:
        return self.controller_config().temperature_unit

    def convert_temp(self, value: int, unit=TemperatureUnit.CELSIUS) -> int:
        """Convert a temperature reported by the controller to the requested unit"""
        return convert_temp(value, self.temperature_unit(), unit)

    def _body_status(self, body):
        water = self.pool_status().body(body)
        if water is None:
            log.debug(f"Controller does not report a {BodyOfWater(body).name.lower()}")
        return water

    def air_temp(self, unit=TemperatureUnit.CELSIUS) -> int:
        return self.convert_temp(self.pool_status().air_temp, unit)

    def current_temp(self, body: BodyOfWater, unit=TemperatureUnit.CELSIUS) -> Optional[int]:
        water = self._body_status(body)
        if water is None:
            return None
        return self.convert_temp(water.current_temp, unit)

    def heater_active(self, body: BodyOfWater) -> Optional[bool]:
        water = self._body_status(body)
        if water is None:
            return None
        return water.heat_mode == HeatMode.ON

    def current_heating_state(self, body: BodyOfWater) -> Optional[str]:
        water = self._body_status(body)
        if water is None:
            return None
        return HEATING if water.heater_status == 1 else INACTIVE

    def target_heating_state(self, body: BodyOfWater) -> Optional[str]:
        water = self._body_status(body)
        if water is None:
            return None
        if water.heat_mode in (HeatMode.ON, HeatMode.SOLAR_ONLY, HeatMode.SOLAR_PREFERRED):
            return HEAT
        return AUTO

    def heating_threshold_temp(self, body: BodyOfWater, unit=TemperatureUnit.CELSIUS) -> Optional[int]:
        water = self._body_status(body)
        if water is None:
            return None
        return self.convert_temp(water.heat_set_point, unit)

    def set_point_range(self, body: BodyOfWater, unit=TemperatureUnit.CELSIUS) -> Tuple[int, int]:
        return set_point_bounds(self.controller_config(), body, unit)

    def set_heating_threshold_temp(self, body: BodyOfWater, temperature: int, unit=TemperatureUnit.CELSIUS):
        """
        Set the heat set-point of a body of water

        Args:
            body        = BodyOfWater.POOL or BodyOfWater.SPA
            temperature = Set-point in the given unit
            unit        = TemperatureUnit of temperature
        """
        config = self.controller_config()
        value = convert_temp(int(temperature), unit, config.temperature_unit)
        limits = config.set_point_range(body)
        if not limits.min <= value <= limits.max:
            raise ValueError(f"Set-point {temperature} is outside the allowed range for the "
                             f"{BodyOfWater(body).name.lower()} {set_point_bounds(config, body, unit)}")
        self.set_temperature(body, value)

    # Pool and spa aliases

    def pool_temp(self, unit=TemperatureUnit.CELSIUS):
        return self.current_temp(BodyOfWater.POOL, unit)

    def spa_temp(self, unit=TemperatureUnit.CELSIUS):
        return self.current_temp(BodyOfWater.SPA, unit)

    def pool_heater_active(self):
        return self.heater_active(BodyOfWater.POOL)

    def spa_heater_active(self):
        return self.heater_active(BodyOfWater.SPA)

    def pool_current_heating_state(self):
        return self.current_heating_state(BodyOfWater.POOL)

    def spa_current_heating_state(self):
        return self.current_heating_state(BodyOfWater.SPA)

    def pool_target_heating_state(self):
        return self.target_heating_state(BodyOfWater.POOL)

    def spa_target_heating_state(self):
        return self.target_heating_state(BodyOfWater.SPA)

    def pool_heating_threshold_temp(self, unit=TemperatureUnit.CELSIUS):
        return self.heating_threshold_temp(BodyOfWater.POOL, unit)

    def spa_heating_threshold_temp(self, unit=TemperatureUnit.CELSIUS):
        return self.heating_threshold_temp(BodyOfWater.SPA, unit)

    def set_pool_heating_threshold_temp(self, temperature, unit=TemperatureUnit.CELSIUS):
        return self.set_heating_threshold_temp(BodyOfWater.POOL, temperature, unit)

    def set_spa_heating_threshold_temp(self, temperature, unit=TemperatureUnit.CELSIUS):
        return self.set_heating_threshold_temp(BodyOfWater.SPA, temperature, unit)


__all__ = [
        "AUTO",
        "BodyOfWater",
        "ControllerConfiguration",
        "Gateway",
        "GatewayIdentity",
        "HEAT",
        "HEATING",
        "HeatMode",
        "INACTIVE",
        "PoolStatus",
        "PyScreenLogicException",
        "ScreenLogic",
        "TemperatureUnit",
        "discover_gateway",
        "display_name",
        "set_debug",
    ]
