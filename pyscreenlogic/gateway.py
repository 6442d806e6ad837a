# pyScreenLogic - Gateway Session Class
# -*- coding: utf-8 -*-
"""
 ScreenLogic Gateway Session

 One TCP session with a ScreenLogic gateway. The session moves through
 UNCONNECTED -> CONNECTED (preamble and challenge done) -> AUTHENTICATED
 (login accepted) and then answers one blocking request/response call per
 message type. A Gateway is not thread safe, use ScreenLogic for shared access.

 Class:
    Gateway(identity, client_name, password, timeout, initial_sequence, pid)

 Functions:
    connect()                   - Open the TCP connection and run the challenge
    login(client_name)          - Authenticate the session
    open()                      - connect() followed by login()
    reconnect()                 - Close and reopen the session with the same identity
    close()                     - Close the TCP connection
    version()                   - Firmware version string
    controller_config()         - ControllerConfiguration
    pool_status()               - PoolStatus
    set_temperature(controller_index, body, temperature)   - Set a heater set-point
    set_heat_mode(controller_index, body, mode)            - Set a heat mode
    history(start, end, controller_index)                  - Temperature history
    add_out_of_band_handler(fn) - Receive packets the gateway pushes unasked
"""
import dataclasses
import logging
import socket
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from pyscreenlogic.decorators import uses_login_required
from pyscreenlogic.discovery import GatewayIdentity
from pyscreenlogic.equipment import ControllerConfiguration, PoolStatus
from pyscreenlogic.exceptions import GatewayNotConnectedError
from pyscreenlogic.protocol.constants import CONNECT_PREAMBLE, INITIAL_SEQUENCE, BodyOfWater, HeatMode
from pyscreenlogic.protocol.framing import PacketHeader, PacketReader, PacketWriter
from pyscreenlogic.protocol.messages import (ChallengeRequest, ChallengeResponse,
                                             ControllerConfigurationRequest,
                                             ControllerConfigurationResponse, HistoryDataResponse,
                                             HistoryRequest, HistoryResponse, LoginRequest, LoginResponse,
                                             PoolStatusRequest, PoolStatusResponse, SetHeatModeRequest,
                                             SetHeatModeResponse, SetHeatPointRequest, SetHeatPointResponse,
                                             VersionRequest, VersionResponse)
from pyscreenlogic.protocol.messages.screenlogic_message import WEATHER_FORECAST_CHANGED_CODE

log = logging.getLogger(__name__)

DEFAULT_CLIENT_NAME = "pyscreenlogic"


class GatewayState(Enum):
    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    AUTHENTICATED = "authenticated"


class Gateway:
    def __init__(self, identity: GatewayIdentity, client_name: str = DEFAULT_CLIENT_NAME, password: str = "",
                 timeout: Optional[float] = None, initial_sequence: int = INITIAL_SEQUENCE, pid: int = 2) -> None:
        self.identity = identity
        self.client_name = client_name
        self.password = password
        self.timeout = timeout
        self.initial_sequence = initial_sequence
        self.pid = pid
        self.state = GatewayState.UNCONNECTED
        self.sock = None
        self.stream = None
        self.reader: Optional[PacketReader] = None
        self.writer: Optional[PacketWriter] = None
        self.out_of_band_handlers: List[Callable[[PacketHeader, bytes], None]] = []

    def __repr__(self):
        return f"Gateway({self.identity.name!r}, {self.identity.address}:{self.identity.port}, {self.state.value})"

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def mac_address(self) -> Optional[str]:
        return self.identity.mac_address

    def is_authenticated(self) -> bool:
        return self.state == GatewayState.AUTHENTICATED

    def add_out_of_band_handler(self, handler: Callable[[PacketHeader, bytes], None]):
        self.out_of_band_handlers.append(handler)

    def handle_out_of_band(self, header: PacketHeader, body: bytes):
        if header.type_code == WEATHER_FORECAST_CHANGED_CODE:
            log.debug("Gateway reports a weather forecast change")
        else:
            log.debug(f"Ignoring unsolicited packet type {header.type_code} ({header.length} bytes)")
        for handler in self.out_of_band_handlers:
            handler(header, body)

    # Session lifecycle

    def connect(self):
        """Open the TCP connection, send the preamble and read the gateway MAC address"""
        self.close()
        address = (self.identity.address, self.identity.port)
        log.debug(f"Connecting to gateway at {address[0]}:{address[1]}")
        self.sock = socket.create_connection(address, timeout=self.timeout)
        self.stream = self.sock.makefile('rb')
        self.reader = PacketReader(self.stream, self.handle_out_of_band)
        self.writer = PacketWriter(self.sock, self.initial_sequence)

        # Not a framed packet, goes straight to the socket
        self.sock.sendall(CONNECT_PREAMBLE)

        challenge = self._request(ChallengeRequest(), ChallengeResponse)
        self.identity = dataclasses.replace(self.identity, mac_address=challenge.mac_address)
        self.state = GatewayState.CONNECTED
        log.debug(f"Connected to gateway {self.identity.name} ({challenge.mac_address})")

    def login(self, client_name: Optional[str] = None):
        if self.state == GatewayState.UNCONNECTED:
            raise GatewayNotConnectedError("Gateway must be connected before login")
        if client_name is not None:
            self.client_name = client_name
        req = LoginRequest(client_name=self.client_name, password=self.password, pid=self.pid)
        self._request(req, LoginResponse)
        self.state = GatewayState.AUTHENTICATED
        log.debug(f"Logged in to gateway as {self.client_name}")

    def open(self):
        self.connect()
        self.login()

    def reconnect(self):
        log.debug(f"Reconnecting to gateway {self.identity.name}")
        self.close()
        self.open()

    def close(self):
        if self.stream is not None:
            try:
                self.stream.close()
            except OSError as exc:
                log.debug(f"Error closing gateway stream: {exc}")
        if self.sock is not None:
            try:
                self.sock.close()
            except OSError as exc:
                log.debug(f"Error closing gateway socket: {exc}")
        self.sock = self.stream = self.reader = self.writer = None
        self.state = GatewayState.UNCONNECTED

    def _request(self, request, response_cls):
        self.writer.write_packet(request)
        return self.reader.read_packet(response_cls)

    # Requests

    @uses_login_required
    def version(self) -> str:
        return self._request(VersionRequest(), VersionResponse).version

    @uses_login_required
    def controller_config(self) -> ControllerConfiguration:
        payload = self._request(ControllerConfigurationRequest(), ControllerConfigurationResponse)
        return ControllerConfiguration(payload)

    @uses_login_required
    def pool_status(self) -> PoolStatus:
        return PoolStatus(self._request(PoolStatusRequest(), PoolStatusResponse))

    @uses_login_required
    def set_temperature(self, controller_index: int, body: BodyOfWater, temperature: int):
        req = SetHeatPointRequest(controller_index=controller_index, body_type=int(body),
                                  temperature=int(temperature))
        self._request(req, SetHeatPointResponse)
        log.debug(f"Set {BodyOfWater(body).name} heat point to {temperature}")

    @uses_login_required
    def set_heat_mode(self, controller_index: int, body: BodyOfWater, mode: HeatMode):
        req = SetHeatModeRequest(controller_index=controller_index, body_type=int(body), mode=int(mode))
        self._request(req, SetHeatModeResponse)
        log.debug(f"Set {BodyOfWater(body).name} heat mode to {HeatMode(mode).name}")

    @uses_login_required
    def history(self, start: datetime, end: datetime, controller_index: int = 0) -> HistoryDataResponse:
        """Temperature history between start and end, the data arrives after the acknowledgement"""
        self._request(HistoryRequest(start=start, end=end, controller_index=controller_index), HistoryResponse)
        return self.reader.read_packet(HistoryDataResponse)
