# printing/errors.py
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNSUPPORTED_CONNECTION = "unsupported_connection"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


class PrintError(Exception):
    """Base de todos los errores de impresión; cada uno lleva su ErrorKind."""
    kind = ErrorKind.TRANSPORT


class ValidationError(PrintError):
    kind = ErrorKind.VALIDATION


class UnsupportedConnectionError(PrintError):
    kind = ErrorKind.UNSUPPORTED_CONNECTION


class TransportError(PrintError):
    kind = ErrorKind.TRANSPORT


class PrinterTimeoutError(TransportError):
    kind = ErrorKind.TIMEOUT
