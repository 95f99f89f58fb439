# printing/models.py
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from config import (
    PRINTER_CONNECTION, PRINTER_IP, PRINTER_PORT, SERIAL_DEVICE,
    USB_PRODUCT_ID, USB_VENDOR_ID,
)
from .errors import ValidationError

MAX_DIGITS = 10


class ConnectionType(str, Enum):
    NETWORK = "network"
    USB = "usb"
    SERIAL = "serial"


def to_decimal(value, field_name: str) -> Decimal:
    """Acepta números JSON o cadenas numéricas ("2", "10.50")."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    try:
        d = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"Invalid {field_name}: {value!r}") from None
    if not d.is_finite():
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    # Ninguna cifra de ticket llega a 10 dígitos enteros (columna de importe: 10)
    if d and not -MAX_DIGITS <= d.adjusted() < MAX_DIGITS:
        raise ValidationError(f"{field_name} out of range: {value!r}")
    return d


@dataclass(frozen=True)
class LineItem:
    name: str
    quantity: Decimal
    unit_price: Decimal

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValidationError(f"Quantity must be greater than zero for '{self.name}'")
        if self.unit_price < 0:
            raise ValidationError(f"Price cannot be negative for '{self.name}'")

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.unit_price

    @classmethod
    def from_payload(cls, data: dict) -> "LineItem":
        """data: {name, qty, price}"""
        if not isinstance(data, dict):
            raise ValidationError("Each item must be an object with name, qty and price")
        return cls(
            name=str(data.get("name") or ""),
            quantity=to_decimal(data.get("qty"), "qty"),
            unit_price=to_decimal(data.get("price"), "price"),
        )


@dataclass(frozen=True)
class Order:
    order_no: str
    date_time: str
    items: tuple[LineItem, ...] = ()

    @property
    def total_quantity(self) -> Decimal:
        return sum((it.quantity for it in self.items), Decimal(0))

    @property
    def total_amount(self) -> Decimal:
        return sum((it.amount for it in self.items), Decimal(0))

    @classmethod
    def from_payload(cls, data: dict) -> "Order":
        """data: {items: [{name, qty, price}, ...], orderNo, dateTime}"""
        items = data.get("items") or []
        if not isinstance(items, list):
            raise ValidationError("'items' must be a list")
        return cls(
            order_no=str(data.get("orderNo") or "").strip(),
            date_time=str(data.get("dateTime") or ""),
            items=tuple(LineItem.from_payload(it) for it in items),
        )


@dataclass(frozen=True)
class PrinterTarget:
    # connection_type queda como texto: el transporte decide si es soportado
    connection_type: str = PRINTER_CONNECTION
    host: str = PRINTER_IP
    port: int = PRINTER_PORT
    device_path: str = ""
    usb_vendor: int = USB_VENDOR_ID
    usb_product: int = USB_PRODUCT_ID

    def __post_init__(self):
        if not 1 <= self.port <= 65535:
            raise ValidationError(f"Invalid printer port: {self.port}")

    @property
    def serial_device(self) -> str:
        return self.device_path or SERIAL_DEVICE

    @property
    def usb_ids(self) -> tuple[int, int]:
        """device_path "04b8:0202" tiene prioridad sobre los ids configurados."""
        if self.device_path and ":" in self.device_path:
            vendor, _, product = self.device_path.partition(":")
            try:
                return int(vendor, 16), int(product, 16)
            except ValueError:
                raise ValidationError(f"Invalid USB device id: {self.device_path!r}") from None
        return self.usb_vendor, self.usb_product

    def describe(self) -> str:
        if self.connection_type == ConnectionType.NETWORK.value:
            return f"{self.host}:{self.port}"
        if self.connection_type == ConnectionType.SERIAL.value:
            return self.serial_device
        if self.connection_type == ConnectionType.USB.value:
            return f"usb {self.device_path or f'{self.usb_vendor:04x}:{self.usb_product:04x}'}"
        return self.connection_type

    @classmethod
    def from_payload(cls, data: dict) -> "PrinterTarget":
        """data: {printerIP?, printerPort?, connectionType?, devicePath?}"""
        raw_port = data.get("printerPort")
        try:
            port = int(raw_port) if raw_port not in (None, "") else PRINTER_PORT
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid printer port: {raw_port!r}") from None
        return cls(
            connection_type=str(data.get("connectionType") or PRINTER_CONNECTION).strip().lower(),
            host=str(data.get("printerIP") or PRINTER_IP),
            port=port,
            device_path=str(data.get("devicePath") or ""),
        )
