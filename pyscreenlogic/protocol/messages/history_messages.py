import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from pyscreenlogic.protocol.codec import DATETIME, Decoder, Encoder
from .screenlogic_message import (HISTORY_CODE, HISTORY_DATA_CODE, HISTORY_RESPONSE_CODE,
                                  ScreenLogicMessage, ScreenLogicResponse)

log = logging.getLogger(__name__)

# Count-prefixed (datetime, u32) lists of unknown meaning that follow the pool
# water temperatures, before and after the list of timestamp pairs
UNKNOWN_SAMPLE_LISTS_BEFORE_PAIRS = 3
UNKNOWN_SAMPLE_LISTS_AFTER_PAIRS = 3


@dataclass
class HistoryRequest(ScreenLogicMessage):
    TYPE_CODE = HISTORY_CODE

    start: datetime = None
    end: datetime = None
    controller_index: int = 0
    sender_id: int = 0  # unused by the gateway

    def encode_body(self):
        encoder = Encoder()
        encoder.write_uint32(self.controller_index)
        encoder.write_datetime(self.start)
        encoder.write_datetime(self.end)
        encoder.write_uint32(self.sender_id)
        return encoder.getvalue()


class HistoryResponse(ScreenLogicResponse):
    """Acknowledges a history request, the data follows in its own packet"""
    TYPE_CODE = HISTORY_RESPONSE_CODE


@dataclass
class HistoryEvent:
    timestamp: datetime
    temperature: int

    @classmethod
    def read(cls, decoder: Decoder) -> 'HistoryEvent':
        return cls(decoder.read_datetime(), decoder.read_uint32())

    def write(self, encoder: Encoder):
        encoder.write_datetime(self.timestamp)
        encoder.write_uint32(self.temperature)


def _skip_timestamp(decoder: Decoder):
    decoder.copy_bytes(DATETIME.size)


def _skip_samples(decoder: Decoder):
    decoder.skip_records(lambda: _skip_timestamp(decoder), decoder.read_uint32)


@dataclass
class HistoryDataResponse(ScreenLogicResponse):
    TYPE_CODE = HISTORY_DATA_CODE

    outside_temps: List[HistoryEvent] = field(default_factory=list)
    pool_water_temps: List[HistoryEvent] = field(default_factory=list)

    @classmethod
    def decode(cls, header, body):
        cls.check_header(header)
        decoder = Decoder(body)
        data = cls()
        data.outside_temps = decoder.read_list(lambda: HistoryEvent.read(decoder))
        data.pool_water_temps = decoder.read_list(lambda: HistoryEvent.read(decoder))

        for _ in range(UNKNOWN_SAMPLE_LISTS_BEFORE_PAIRS):
            _skip_samples(decoder)

        # Timestamps only, one count for two runs of timestamps
        count = decoder.read_uint32()
        for _ in range(count * 2):
            _skip_timestamp(decoder)

        for _ in range(UNKNOWN_SAMPLE_LISTS_AFTER_PAIRS):
            _skip_samples(decoder)

        log.debug(f"History: {len(data.outside_temps)} outside, "
                  f"{len(data.pool_water_temps)} pool water samples")
        return data

    def encode_body(self):
        encoder = Encoder()
        for events in (self.outside_temps, self.pool_water_temps):
            encoder.write_uint32(len(events))
            for event in events:
                event.write(encoder)
        # Empty trailing lists
        for _ in range(UNKNOWN_SAMPLE_LISTS_BEFORE_PAIRS + 1 + UNKNOWN_SAMPLE_LISTS_AFTER_PAIRS):
            encoder.write_uint32(0)
        return encoder.getvalue()
