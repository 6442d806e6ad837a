from .codec import Decoder, Encoder
from .framing import PacketHeader, PacketReader, PacketWriter

__all__ = [
        "Decoder",
        "Encoder",
        "PacketHeader",
        "PacketReader",
        "PacketWriter",
    ]
