# services/print_service.py
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from config import PRINTER_CONNECTION, PRINTER_TIMEOUT, RECEIPT_ENCODING
from printing.errors import ErrorKind, PrintError, ValidationError
from printing.escpos_print import serialize
from printing.models import Order, PrinterTarget
from printing.receipt import format_receipt
from printing.transport import deliver, resolve_connection

log = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Receipt printed successfully!"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class PrintResult:
    success: bool
    timestamp: str
    order_no: str | None = None
    error_kind: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def ok(cls, order_no: str) -> "PrintResult":
        return cls(success=True, timestamp=_now(), order_no=order_no, message=SUCCESS_MESSAGE)

    @classmethod
    def failed(cls, err: Exception) -> "PrintResult":
        if isinstance(err, PrintError):
            return cls(success=False, timestamp=_now(), error_kind=err.kind, message=str(err))
        return cls(success=False, timestamp=_now(), error_kind=ErrorKind.INTERNAL,
                   message=f"Unexpected error: {type(err).__name__}")

    def to_response(self) -> dict:
        if self.success:
            return {
                "success": True,
                "message": self.message,
                "orderNo": self.order_no,
                "timestamp": self.timestamp,
            }
        return {
            "success": False,
            "error": self.message,
            "kind": self.error_kind.value if self.error_kind else None,
            "timestamp": self.timestamp,
        }


def print_receipt(
    order: Order,
    target: PrinterTarget,
    timeout: float = PRINTER_TIMEOUT,
    allowed=None,
    encoding: str = RECEIPT_ENCODING,
    **receipt_options,
) -> PrintResult:
    """
    validar conexión -> formatear -> entregar.
    Cualquier fallo corta la secuencia; nunca se envía un ticket parcial.
    receipt_options: institution, location, footer, paid_marker, feed_lines, cut
    """
    try:
        resolve_connection(target, allowed)
        receipt = format_receipt(order, **receipt_options)
        payload = serialize(receipt, encoding=encoding)
        log.info("Processing print request: order=%s items=%d printer=%s",
                 order.order_no, len(order.items), target.describe())
        deliver(target, payload, timeout=timeout, allowed=allowed)
    except PrintError as err:
        log.error("Print failed [%s] order=%s: %s", err.kind.value, order.order_no or "-", err)
        return PrintResult.failed(err)
    except Exception as err:
        log.exception("Unexpected print failure order=%s", order.order_no or "-")
        return PrintResult.failed(err)
    return PrintResult.ok(order.order_no)


def print_from_request(data, **options) -> PrintResult:
    """
    data: {items: [{name, qty, price}], orderNo, dateTime,
           printerIP?, printerPort?, connectionType?, devicePath?}
    """
    try:
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON data")
        # El tipo de conexión se revisa antes que cualquier otro campo
        resolve_connection(
            PrinterTarget(connection_type=str(data.get("connectionType") or PRINTER_CONNECTION).strip().lower()),
            options.get("allowed"),
        )
        target = PrinterTarget.from_payload(data)
        order = Order.from_payload(data)
    except PrintError as err:
        log.error("Rejected print request [%s]: %s", err.kind.value, err)
        return PrintResult.failed(err)
    except Exception as err:
        log.exception("Unexpected error parsing print request")
        return PrintResult.failed(err)
    return print_receipt(order, target, **options)
