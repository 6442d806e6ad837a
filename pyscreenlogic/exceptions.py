class PyScreenLogicException(Exception):
    pass


class TruncatedPacketError(PyScreenLogicException):
    """A field or frame claimed more bytes than were available."""
    pass


class MalformedPacketError(PyScreenLogicException):
    """A frame did not carry the type code or layout the reader expected."""
    pass


class UnexpectedPacketError(MalformedPacketError):
    def __init__(self, type_code: int, expected: int = None):
        self.type_code = type_code
        self.expected = expected
        msg = f"Unexpected packet type {type_code}"
        if expected is not None:
            msg += f" (expected {expected})"
        super().__init__(msg)


class BadParameterError(MalformedPacketError):
    """The gateway rejected the parameters of the last request."""
    pass


class LoginFailedError(PyScreenLogicException):
    pass


class PasswordEncryptionNotImplementedError(PyScreenLogicException, NotImplementedError):
    pass


class GatewayNotConnectedError(PyScreenLogicException):
    pass


class GatewayConnectionClosedError(PyScreenLogicException, ConnectionError):
    """The gateway closed the TCP stream at a frame boundary."""
    pass


class GatewayReconnectError(PyScreenLogicException):
    pass


class GatewayUnavailableError(PyScreenLogicException):
    """Network failures persisted after every reconnect attempt was used."""
    pass
