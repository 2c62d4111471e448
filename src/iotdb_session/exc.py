import json


DEFAULT_ERROR_MESSAGE = "Unknown error"


### PEP-249 style ###
# https://peps.python.org/pep-0249/#exceptions
class Error(Exception):
    """Base class for all errors raised by a Session.
    `message`: A short user-friendly error message
    `context`: Optional extra context about the error. MUST be JSON serializable
    """

    def __init__(self, message=None, context=None, *args, **kwargs):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.context = context or {}

    def __str__(self):
        return self.message

    def message_with_context(self):
        return self.message + ": " + json.dumps(self.context, default=str)


class InterfaceError(Error):
    pass


class DatabaseError(Error):
    pass


class OperationalError(DatabaseError):
    pass


class DataError(DatabaseError):
    pass


### Custom error classes ###
class SessionNotOpenError(InterfaceError):
    """Thrown when an operation is issued on a session that has not been opened"""


class SessionClosedError(SessionNotOpenError):
    """Thrown when an operation is issued on a session that has been closed.
    A closed session never reopens; build a new Session from the same Config instead.
    """


class RequestError(OperationalError):
    """Thrown if the connection failed or a request could not be written or read.
    Its context will have the following keys:
    "method": The RPC method name that failed
    "session-id": The session id the request was issued for (if available)
    "original-exception": The Python level original exception
    """


class ProtocolVersionMismatchError(OperationalError):
    """Thrown if the server announces a different protocol version than the one requested.
    Its context will have the following keys:
    "client-protocol-version": The version sent in the open session request
    "server-protocol-version": The version announced by the server
    """


class ServerOperationError(DatabaseError):
    """Thrown if the server answered with a non-success status code, for example for
    bad SQL, a missing storage group or a duplicate time series.
    Its context will have the following keys:
    "status-code": The status code returned by the server
    "method": The RPC method name (if available)
    """

    def __init__(self, message=None, context=None, *args, **kwargs):
        super().__init__(message or DEFAULT_ERROR_MESSAGE, context, *args, **kwargs)

    @property
    def status_code(self):
        return self.context.get("status-code")


class DecodeError(DataError):
    """Thrown if a query result payload is structurally inconsistent, e.g. a value buffer
    ends in the middle of a non-null cell
    """


class UnknownVariantError(DecodeError):
    """Thrown if an integer (or name) does not map to a known DataType, Encoding or
    Compressor
    """

    def __init__(self, kind, code):
        super().__init__(
            "Unknown {} code: {!r}".format(kind, code), {"kind": kind, "code": code}
        )
        self.kind = kind
        self.code = code
