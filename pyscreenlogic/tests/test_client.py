import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from pyscreenlogic import (AUTO, HEAT, HEATING, INACTIVE, BodyOfWater, HeatMode, ScreenLogic, TemperatureUnit,
                           display_name)
from pyscreenlogic.equipment import ControllerConfiguration, PoolStatus
from pyscreenlogic.exceptions import (GatewayReconnectError, GatewayUnavailableError, MalformedPacketError,
                                      PasswordEncryptionNotImplementedError, TruncatedPacketError)
from pyscreenlogic.protocol.messages import (BodyOfWaterStatus, ControllerConfigurationResponse,
                                             PoolStatusResponse, SetPointRange)


def make_config(is_celsius=False):
    return ControllerConfiguration(ControllerConfigurationResponse(
        pool_set_point_range=SetPointRange(40, 104),
        spa_set_point_range=SetPointRange(40, 104),
        is_celsius=is_celsius,
    ))


def make_status(bodies=None, air_temp=68):
    if bodies is None:
        bodies = [BodyOfWaterStatus(0, 80, 1, 84, 0, HeatMode.ON),
                  BodyOfWaterStatus(1, 98, 0, 102, 0, HeatMode.OFF)]
    return PoolStatus(PoolStatusResponse(ok=1, air_temp=air_temp, bodies=bodies))


@pytest.fixture(name="sl")
def fixture_screenlogic():
    # Instantiate ScreenLogic without a network and give it a mock gateway
    with patch.object(ScreenLogic, "connect"):
        inst = ScreenLogic(host="192.168.1.50")
    inst.gateway = MagicMock()
    inst.gateway.name = "Pentair: 00-11-22"
    inst.gateway.is_authenticated.return_value = True
    inst.gateway.controller_config.return_value = make_config()
    inst.gateway.pool_status.return_value = make_status()
    return inst


def test_password_not_supported():
    with pytest.raises(PasswordEncryptionNotImplementedError):
        ScreenLogic(host="192.168.1.50", password="secret")


def test_connect_with_host():
    with patch("pyscreenlogic.Gateway") as gateway_cls, patch("pyscreenlogic.discover_gateway") as discover:
        sl = ScreenLogic(host="192.168.1.50", port=8080, client_name="tester", timeout=3)
    discover.assert_not_called()
    identity = gateway_cls.call_args[0][0]
    assert (identity.address, identity.port) == ("192.168.1.50", 8080)
    assert gateway_cls.call_args[1]["client_name"] == "tester"
    gateway_cls.return_value.open.assert_called_once()
    assert sl.gateway is gateway_cls.return_value


def test_connect_discovers_without_host():
    with patch("pyscreenlogic.Gateway") as gateway_cls, patch("pyscreenlogic.discover_gateway") as discover:
        ScreenLogic(discovery_timeout=2)
    discover.assert_called_once_with(timeout=2, port=1444)
    assert gateway_cls.call_args[0][0] is discover.return_value


def test_gateway_name_is_raw(sl):
    assert sl.gateway_name() == "Pentair: 00-11-22"
    assert display_name(sl.gateway_name()) == "ScreenLogic-00-11-22"


def test_pool_status_cached(sl):
    first = sl.pool_status()
    second = sl.pool_status()
    assert first is second
    assert sl.gateway.pool_status.call_count == 1


def test_force_bypasses_cache(sl):
    sl.pool_status()
    sl.pool_status(force=True)
    assert sl.gateway.pool_status.call_count == 2


def test_cache_expires(sl):
    sl.cacheexpire = 0
    sl.pool_status()
    sl.pool_status()
    assert sl.gateway.pool_status.call_count == 2


def test_concurrent_cold_reads_single_request(sl):
    def slow_status():
        time.sleep(0.1)
        return make_status()
    sl.gateway.pool_status.side_effect = slow_status

    results = []
    threads = [threading.Thread(target=lambda: results.append(sl.pool_status())) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sl.gateway.pool_status.call_count == 1
    assert results[0] is results[1]


def test_lock_timeout(sl):
    sl.lock_timeout = 0.1
    sl.api_lock.acquire()
    try:
        with pytest.raises(TimeoutError):
            sl.pool_status()
    finally:
        sl.api_lock.release()


def test_retry_after_reconnect(sl):
    status = make_status()
    sl.gateway.pool_status.side_effect = [ConnectionResetError("reset"), status]
    assert sl.pool_status() is status
    assert sl.gateway.reconnect.call_count == 1


def test_two_failures_are_fatal(sl):
    sl.gateway.pool_status.side_effect = [ConnectionResetError("reset"), BrokenPipeError("pipe")]
    with pytest.raises(GatewayUnavailableError) as exc:
        sl.pool_status()
    assert isinstance(exc.value.__cause__, BrokenPipeError)
    assert sl.gateway.reconnect.call_count == 1


def test_no_retry_budget(sl):
    sl.reconnect_retries = 0
    sl.gateway.pool_status.side_effect = ConnectionResetError("reset")
    with pytest.raises(GatewayUnavailableError):
        sl.pool_status()
    sl.gateway.reconnect.assert_not_called()


def test_reconnect_failure(sl):
    sl.gateway.pool_status.side_effect = ConnectionResetError("reset")
    sl.gateway.reconnect.side_effect = ConnectionRefusedError("refused")
    with pytest.raises(GatewayReconnectError):
        sl.pool_status()


def test_recovers_after_failed_reconnect(sl):
    status = make_status()
    sl.gateway.pool_status.side_effect = [ConnectionResetError("reset"), status]
    sl.gateway.reconnect.side_effect = ConnectionRefusedError("refused")
    with pytest.raises(GatewayReconnectError):
        sl.pool_status()

    # failed reconnect left the session closed, gateway is back now
    sl.gateway.is_authenticated.return_value = False
    sl.gateway.reconnect.side_effect = None
    assert sl.pool_status() is status
    assert sl.gateway.reconnect.call_count == 2


def test_closed_session_without_retry_budget(sl):
    sl.reconnect_retries = 0
    sl.gateway.is_authenticated.return_value = False
    with pytest.raises(GatewayUnavailableError):
        sl.pool_status()
    sl.gateway.reconnect.assert_not_called()
    sl.gateway.pool_status.assert_not_called()


@pytest.mark.parametrize("error", [TruncatedPacketError("short"), MalformedPacketError("bad")])
def test_protocol_errors_not_retried(sl, error):
    sl.gateway.pool_status.side_effect = error
    with pytest.raises(type(error)):
        sl.pool_status()
    sl.gateway.reconnect.assert_not_called()


def test_fahrenheit_controller_converts(sl):
    assert sl.temperature_unit() == TemperatureUnit.FAHRENHEIT
    assert sl.pool_temp() == 26
    assert sl.pool_temp(TemperatureUnit.FAHRENHEIT) == 80
    assert sl.air_temp() == 20


def test_celsius_controller_passes_through(sl):
    sl.gateway.controller_config.return_value = make_config(is_celsius=True)
    sl.gateway.pool_status.return_value = make_status(
        bodies=[BodyOfWaterStatus(0, 26, 0, 28, 0, HeatMode.OFF)], air_temp=20)
    assert sl.pool_temp() == 26
    assert sl.air_temp(TemperatureUnit.CELSIUS) == 20
    assert sl.pool_heating_threshold_temp() == 28


def test_heating_states(sl):
    assert sl.pool_heater_active() is True
    assert sl.spa_heater_active() is False
    assert sl.pool_current_heating_state() == HEATING
    assert sl.spa_current_heating_state() == INACTIVE
    assert sl.pool_target_heating_state() == HEAT
    assert sl.spa_target_heating_state() == AUTO


def test_missing_body_reads_none(sl):
    sl.gateway.pool_status.return_value = make_status(bodies=[BodyOfWaterStatus(0, 80, 0, 84, 0, 0)])
    assert sl.spa_temp() is None
    assert sl.spa_heater_active() is None
    assert sl.spa_heating_threshold_temp() is None
    assert sl.pool_temp(TemperatureUnit.FAHRENHEIT) == 80


def test_set_point_range(sl):
    assert sl.set_point_range(BodyOfWater.POOL, TemperatureUnit.FAHRENHEIT) == (40, 104)
    assert sl.set_point_range(BodyOfWater.POOL) == (4, 40)


def test_set_heating_threshold_converts_to_controller_unit(sl):
    sl.set_spa_heating_threshold_temp(38)
    sl.gateway.set_temperature.assert_called_once_with(0, BodyOfWater.SPA, 100)


def test_set_heating_threshold_out_of_range(sl):
    with pytest.raises(ValueError):
        sl.set_pool_heating_threshold_temp(110, TemperatureUnit.FAHRENHEIT)
    sl.gateway.set_temperature.assert_not_called()


def test_write_invalidates_status(sl):
    sl.pool_status()
    sl.set_temperature(BodyOfWater.POOL, 86)
    sl.pool_status()
    assert sl.gateway.pool_status.call_count == 2
    sl.gateway.set_temperature.assert_called_once_with(0, BodyOfWater.POOL, 86)


def test_failed_write_still_invalidates(sl):
    sl.pool_status()
    sl.gateway.set_heat_mode.side_effect = MalformedPacketError("bad")
    with pytest.raises(MalformedPacketError):
        sl.set_heat_mode(BodyOfWater.SPA, HeatMode.ON)
    sl.pool_status()
    assert sl.gateway.pool_status.call_count == 2


def test_write_retries_after_reconnect(sl):
    sl.gateway.set_heat_mode.side_effect = [BrokenPipeError("pipe"), None]
    sl.set_heat_mode(BodyOfWater.SPA, HeatMode.ON)
    assert sl.gateway.set_heat_mode.call_count == 2
    assert sl.gateway.reconnect.call_count == 1


def test_config_not_invalidated_by_write(sl):
    sl.controller_config()
    sl.set_temperature(BodyOfWater.POOL, 86)
    sl.controller_config()
    assert sl.gateway.controller_config.call_count == 1


def test_gateway_version_cached(sl):
    sl.gateway.version.return_value = "POOL: 5.2 Build 736.0 Rel"
    assert sl.gateway_version() == "POOL: 5.2 Build 736.0 Rel"
    sl.gateway_version()
    assert sl.gateway.version.call_count == 1


def test_history_not_cached(sl):
    sl.history("start", "end")
    sl.history("start", "end")
    assert sl.gateway.history.call_count == 2
    sl.gateway.history.assert_called_with("start", "end", 0)


def test_is_connected(sl):
    assert sl.is_connected() is True
    sl.gateway.pool_status.side_effect = ConnectionResetError("reset")
    sl.gateway.reconnect.side_effect = ConnectionRefusedError("refused")
    assert sl.is_connected() is False


def test_is_connected_asks_gateway(sl):
    sl.pool_status()
    assert sl.is_connected() is True
    assert sl.gateway.pool_status.call_count == 2


def test_close(sl):
    sl.pool_status()
    gateway = sl.gateway
    sl.close()
    gateway.close.assert_called_once()
    assert sl.cache == {}
