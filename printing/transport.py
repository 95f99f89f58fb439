# printing/transport.py
import logging

from escpos.exceptions import Error as EscposError
from escpos.printer import Network, Serial, Usb

from config import (
    PRINTER_ALLOWED_CONNECTIONS, PRINTER_TIMEOUT, SERIAL_BAUD, USB_IN_EP, USB_OUT_EP,
)
from .errors import PrinterTimeoutError, TransportError, UnsupportedConnectionError
from .models import ConnectionType, PrinterTarget

log = logging.getLogger(__name__)


def resolve_connection(target: PrinterTarget, allowed=None) -> ConnectionType:
    """Tipo de conexión válido y habilitado en este entorno, o UnsupportedConnectionError."""
    try:
        conn_type = ConnectionType(target.connection_type)
    except ValueError:
        raise UnsupportedConnectionError(
            f"Unsupported connection type: {target.connection_type!r}"
        ) from None
    allowed = PRINTER_ALLOWED_CONNECTIONS if allowed is None else allowed
    if conn_type.value not in allowed:
        raise UnsupportedConnectionError(
            f"Connection type '{conn_type.value}' is not available in this environment "
            f"(allowed: {', '.join(allowed) or 'none'})"
        )
    return conn_type


def open_printer(target: PrinterTarget, conn_type: ConnectionType, timeout: float = PRINTER_TIMEOUT):
    """Crea el conector de python-escpos; el dispositivo se abre después con open()."""
    if conn_type is ConnectionType.NETWORK:
        return Network(target.host, port=target.port, timeout=timeout)
    if conn_type is ConnectionType.USB:
        vendor, product = target.usb_ids
        return Usb(vendor, product, timeout=int(timeout * 1000), in_ep=USB_IN_EP, out_ep=USB_OUT_EP)
    if conn_type is ConnectionType.SERIAL:
        return Serial(devfile=target.serial_device, baudrate=SERIAL_BAUD, timeout=timeout)
    raise UnsupportedConnectionError(f"Unsupported connection type: {conn_type!r}")


def _timed_out(exc: BaseException) -> bool:
    # python-escpos envuelve el OSError original en DeviceNotFoundError
    seen = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, TimeoutError):
            return True
        seen.add(id(exc))
        exc = exc.__cause__ or exc.__context__
    return False


def deliver(target: PrinterTarget, payload: bytes, timeout: float = PRINTER_TIMEOUT, allowed=None) -> None:
    """Abre, escribe el buffer completo y cierra. Sin reintentos.

    Que el transporte acepte los bytes y se cierre la conexión cuenta como
    impresión exitosa; la impresora no confirma nada.
    """
    conn_type = resolve_connection(target, allowed)
    p = open_printer(target, conn_type, timeout)
    where = target.describe()
    try:
        try:
            p.open()
            log.debug("Connected to printer %s", where)
            # python-escpos 3.x no expone un método público para bytes crudos
            p._raw(payload)
        finally:
            p.close()
            log.debug("Printer connection closed %s", where)
    except (EscposError, OSError) as exc:
        if _timed_out(exc):
            raise PrinterTimeoutError(f"Printer connection timeout ({where})") from exc
        raise TransportError(f"Printer connection failed ({where}): {exc}") from exc
    log.info("Sent %d bytes to printer %s", len(payload), where)
