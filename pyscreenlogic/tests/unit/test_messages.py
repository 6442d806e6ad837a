from datetime import datetime

import pytest

from pyscreenlogic.exceptions import (MalformedPacketError, PasswordEncryptionNotImplementedError,
                                      TruncatedPacketError)
from pyscreenlogic.protocol.codec import Decoder, Encoder
from pyscreenlogic.protocol.framing import PacketHeader
from pyscreenlogic.protocol.messages import (BodyOfWaterStatus, Chemistry, CircuitColor, CircuitStatus,
                                             ControllerCircuit, ControllerConfigurationResponse,
                                             HistoryDataResponse, HistoryEvent, HistoryRequest, LoginRequest,
                                             PoolStatusResponse, SetHeatModeRequest, SetHeatPointRequest,
                                             SetPointRange, VersionResponse)


def header_for(message):
    code, body = message.encode()
    return PacketHeader(0, code, len(body)), body


def sample_status(**kwargs):
    fields = dict(
        ok=1,
        freeze_mode=0,
        remotes=1,
        pool_delay=0,
        spa_delay=0,
        cleaner_delay=0,
        air_temp=72,
        bodies=[BodyOfWaterStatus(0, 80, 1, 84, 0, 3), BodyOfWaterStatus(1, 98, 0, 102, 0, 0)],
        circuits=[CircuitStatus(500, 1, 2, 3, 4, 5)],
        chemistry=Chemistry(ph=7.45, orp=650.0, saturation=0.12, salt_ppm=3200),
    )
    fields.update(kwargs)
    return PoolStatusResponse(**fields)


def test_login_request_layout():
    code, body = LoginRequest(client_name="abc").encode()
    assert code == 27
    dec = Decoder(body)
    assert dec.read_uint32() == 348
    assert dec.read_uint32() == 0
    assert dec.read_string() == "abc"
    assert dec.read_uint32() == 16
    assert dec.copy_bytes(16) == bytes(16)
    assert dec.read_uint32() == 2
    assert dec.remaining() == 0


def test_login_request_with_password():
    with pytest.raises(PasswordEncryptionNotImplementedError):
        LoginRequest(client_name="abc", password="secret").encode()
    assert issubclass(PasswordEncryptionNotImplementedError, NotImplementedError)


def test_set_heat_requests():
    code, body = SetHeatPointRequest(controller_index=0, body_type=1, temperature=102).encode()
    assert code == 12528
    assert body == b"\x00\x00\x00\x00\x01\x00\x00\x00\x66\x00\x00\x00"
    code, body = SetHeatModeRequest(controller_index=0, body_type=0, mode=3).encode()
    assert code == 12538
    assert body == b"\x00\x00\x00\x00\x00\x00\x00\x00\x03\x00\x00\x00"


def test_history_request_layout():
    code, body = HistoryRequest(start=datetime(2024, 1, 1), end=datetime(2024, 1, 2)).encode()
    assert code == 12534
    dec = Decoder(body)
    assert dec.read_uint32() == 0
    assert dec.read_datetime() == datetime(2024, 1, 1)
    assert dec.read_datetime() == datetime(2024, 1, 2)
    assert dec.read_uint32() == 0
    assert dec.remaining() == 0


def test_version_response_skips_trailing_fields():
    header, body = header_for(VersionResponse("POOL: 5.2 Build 736.0 Rel"))
    assert len(body) == 4 + 28 + 24
    assert VersionResponse.decode(header, body).version == "POOL: 5.2 Build 736.0 Rel"


def test_pool_status_decode():
    header, body = header_for(sample_status())
    status = PoolStatusResponse.decode(header, body)
    assert status == sample_status()
    assert status.chemistry.ph == pytest.approx(7.45)
    assert status.bodies[1].current_temp == 98


def test_pool_status_without_bodies():
    header, body = header_for(sample_status(bodies=[]))
    assert PoolStatusResponse.decode(header, body).bodies == []


def test_pool_status_one_byte_short():
    header, body = header_for(sample_status())
    with pytest.raises(TruncatedPacketError):
        PoolStatusResponse.decode(header, body[:-1])


def test_pool_status_too_many_bodies():
    bodies = [BodyOfWaterStatus(0), BodyOfWaterStatus(1), BodyOfWaterStatus(1)]
    header, body = header_for(sample_status(bodies=bodies))
    with pytest.raises(MalformedPacketError):
        PoolStatusResponse.decode(header, body)


@pytest.mark.parametrize("body_types", [[2], [0, 0]])
def test_pool_status_rejects_unknown_or_repeated_body(body_types):
    bodies = [BodyOfWaterStatus(body_type) for body_type in body_types]
    header, body = header_for(sample_status(bodies=bodies))
    with pytest.raises(MalformedPacketError):
        PoolStatusResponse.decode(header, body)


def test_pool_status_wrong_type_code():
    _, body = header_for(sample_status())
    with pytest.raises(MalformedPacketError):
        PoolStatusResponse.decode(PacketHeader(0, 12533, len(body)), body)


def test_controller_config_decode():
    config = ControllerConfigurationResponse(
        controller_id=100,
        pool_set_point_range=SetPointRange(40, 104),
        spa_set_point_range=SetPointRange(40, 104),
        is_celsius=False,
        controller_type=1,
        hardware_type=0,
        equipment_flags=0x8005,
        default_circuit_name="Water Features",
        circuits=[ControllerCircuit(500, "Spa", 71, 1, 1), ControllerCircuit(505, "Pool", 60, 2, 0)],
        colors=[CircuitColor("White", 255, 255, 255)],
        pumps=[1, 0, 0, 0, 0, 0, 0, 0],
        interface_tab_flags=127,
        show_alarms=True,
    )
    header, body = header_for(config)
    assert ControllerConfigurationResponse.decode(header, body) == config


def test_controller_config_one_byte_short():
    header, body = header_for(ControllerConfigurationResponse(circuits=[ControllerCircuit(500, "Spa")]))
    with pytest.raises(TruncatedPacketError):
        ControllerConfigurationResponse.decode(header, body[:-1])


def test_history_data_skips_unknown_lists():
    enc = Encoder()
    events = [HistoryEvent(datetime(2024, 1, 1, 12), 70), HistoryEvent(datetime(2024, 1, 1, 13), 71)]
    for values in (events, events[:1]):
        enc.write_uint32(len(values))
        for event in values:
            event.write(enc)
    for _ in range(3):
        enc.write_uint32(1)
        enc.write_datetime(datetime(2024, 1, 1))
        enc.write_uint32(9)
    enc.write_uint32(2)
    for _ in range(4):
        enc.write_datetime(datetime(2024, 1, 1))
    for _ in range(3):
        enc.write_uint32(0)
    body = enc.getvalue()

    data = HistoryDataResponse.decode(PacketHeader(0, 12502, len(body)), body)
    assert data.outside_temps == events
    assert data.pool_water_temps == events[:1]

    with pytest.raises(TruncatedPacketError):
        HistoryDataResponse.decode(PacketHeader(0, 12502, len(body) - 1), body[:-1])


def history_body(outside_timestamp=None):
    enc = Encoder()
    enc.write_uint32(1)
    if outside_timestamp is None:
        enc.write_bytes(bytes(16))
    else:
        enc.write_datetime(outside_timestamp)
    enc.write_uint32(70)
    enc.write_uint32(0)
    # unknown lists and timestamp pairs hold zero-filled timestamps
    for _ in range(3):
        enc.write_uint32(1)
        enc.write_bytes(bytes(16))
        enc.write_uint32(9)
    enc.write_uint32(1)
    enc.write_bytes(bytes(32))
    for _ in range(3):
        enc.write_uint32(2)
        enc.write_bytes(bytes(20) * 2)
    return enc.getvalue()


def test_history_data_zero_timestamps_in_unknown_lists():
    body = history_body(datetime(2024, 1, 1, 12))
    data = HistoryDataResponse.decode(PacketHeader(0, 12502, len(body)), body)
    assert data.outside_temps == [HistoryEvent(datetime(2024, 1, 1, 12), 70)]
    assert data.pool_water_temps == []


def test_history_data_zero_timestamp_in_event_is_malformed():
    body = history_body()
    with pytest.raises(MalformedPacketError):
        HistoryDataResponse.decode(PacketHeader(0, 12502, len(body)), body)
