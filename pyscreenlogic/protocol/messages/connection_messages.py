import logging
from dataclasses import dataclass

from pyscreenlogic.exceptions import PasswordEncryptionNotImplementedError
from pyscreenlogic.protocol.codec import Decoder, Encoder
from .screenlogic_message import (CHALLENGE_CODE, CHALLENGE_RESPONSE_CODE, LOGIN_CODE,
                                  LOGIN_RESPONSE_CODE, VERSION_CODE, VERSION_RESPONSE_CODE,
                                  ScreenLogicMessage, ScreenLogicResponse)

log = logging.getLogger(__name__)

# Local connections send an all-zero password of this length
EMPTY_PASSWORD_LENGTH = 16
VERSION_UNKNOWN_FIELDS = 6


class ChallengeRequest(ScreenLogicMessage):
    TYPE_CODE = CHALLENGE_CODE


@dataclass
class ChallengeResponse(ScreenLogicResponse):
    TYPE_CODE = CHALLENGE_RESPONSE_CODE

    mac_address: str = ""

    @classmethod
    def decode(cls, header, body):
        cls.check_header(header)
        return cls(mac_address=Decoder(body).read_string())

    def encode_body(self):
        encoder = Encoder()
        encoder.write_string(self.mac_address)
        return encoder.getvalue()


@dataclass
class LoginRequest(ScreenLogicMessage):
    """
    Login request

    The schema and connection type values are the ones other open source
    clients send for a local connection.
    """
    TYPE_CODE = LOGIN_CODE

    client_name: str = ""
    password: str = ""
    schema: int = 348
    connection_type: int = 0
    pid: int = 2

    def encode_body(self):
        if self.password:
            raise PasswordEncryptionNotImplementedError(
                "Password protected login requires password encryption, which is not implemented")
        encoder = Encoder()
        encoder.write_uint32(self.schema)
        encoder.write_uint32(self.connection_type)
        encoder.write_string(self.client_name)
        encoder.write_string(bytes(EMPTY_PASSWORD_LENGTH))
        encoder.write_uint32(self.pid)
        return encoder.getvalue()


@dataclass
class LoginResponse(ScreenLogicResponse):
    TYPE_CODE = LOGIN_RESPONSE_CODE

    # 16 bytes of unknown meaning
    ack: bytes = b''

    @classmethod
    def decode(cls, header, body):
        cls.check_header(header)
        return cls(ack=bytes(body))

    def encode_body(self):
        return self.ack


class VersionRequest(ScreenLogicMessage):
    TYPE_CODE = VERSION_CODE


@dataclass
class VersionResponse(ScreenLogicResponse):
    TYPE_CODE = VERSION_RESPONSE_CODE

    version: str = ""

    @classmethod
    def decode(cls, header, body):
        cls.check_header(header)
        decoder = Decoder(body)
        version = decoder.read_string()
        for _ in range(VERSION_UNKNOWN_FIELDS):
            decoder.read_uint32()
        return cls(version=version)

    def encode_body(self):
        encoder = Encoder()
        encoder.write_string(self.version)
        for _ in range(VERSION_UNKNOWN_FIELDS):
            encoder.write_uint32(0)
        return encoder.getvalue()
