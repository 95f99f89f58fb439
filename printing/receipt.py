# printing/receipt.py
"""
Formato de ticket de ancho fijo.

El resultado es una lista de segmentos de texto, cada uno con su estilo
(negrita, doble alto, alineación). No hay estado de impresora oculto: el
serializador ESC/POS (printing/escpos_print.py) recorre los segmentos en orden.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

from config import (
    RECEIPT_CUT, RECEIPT_FEED_LINES, RECEIPT_FOOTER, RECEIPT_INSTITUTION,
    RECEIPT_LOCATION, RECEIPT_PAID_MARKER,
)
from .errors import ValidationError
from .models import Order

ITEM_WIDTH = 20
QTY_WIDTH = 4
PRICE_WIDTH = 8
AMOUNT_WIDTH = 10
RULE_WIDTH = 48
RULE = "-" * RULE_WIDTH

CENTS = Decimal("0.01")


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class Cut(str, Enum):
    PARTIAL = "partial"
    FULL = "full"


@dataclass(frozen=True)
class Style:
    bold: bool = False
    double_height: bool = False
    align: Align = Align.LEFT


NORMAL = Style()
BOLD = Style(bold=True)


@dataclass(frozen=True)
class Segment:
    text: str
    style: Style = NORMAL


@dataclass(frozen=True)
class FormattedReceipt:
    segments: tuple[Segment, ...]
    feed_lines: int = RECEIPT_FEED_LINES
    cut: Cut = Cut.PARTIAL

    def text(self) -> str:
        return "".join(s.text for s in self.segments)

    def text_lines(self) -> list[str]:
        return self.text().splitlines()


def money(value) -> str:
    """2 decimales, sin separador de miles."""
    return f"{Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP):.2f}"


def quantity(value: Decimal) -> str:
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def center(text: str, width: int) -> str:
    # str.center() pone el relleno impar a la izquierda; aquí va a la derecha
    left = (width - len(text)) // 2
    return " " * left + text + " " * (width - left - len(text))


def format_line(item: str, qty: str, price: str, amount: str) -> str:
    """Renglón de 44 columnas: nombre(20) cant(4) ' ' precio(8) ' ' importe(10).

    Solo el nombre se recorta; las cifras deben caber (ver fit()).
    """
    return (
        f"{item[:ITEM_WIDTH]:<{ITEM_WIDTH}}"
        f"{center(qty, QTY_WIDTH)}"
        f" {price:>{PRICE_WIDTH}}"
        f" {amount:>{AMOUNT_WIDTH}}"
    )


def fit(text: str, width: int, label: str) -> str:
    """Una cifra recortada imprimiría un importe falso: se rechaza antes de formatear."""
    if len(text) > width:
        raise ValidationError(f"{label} {text} does not fit in {width} columns")
    return text


def format_receipt(
    order: Order,
    institution: str = RECEIPT_INSTITUTION,
    location: str = RECEIPT_LOCATION,
    footer: str = RECEIPT_FOOTER,
    paid_marker: str = RECEIPT_PAID_MARKER,
    feed_lines: int = RECEIPT_FEED_LINES,
    cut: str = RECEIPT_CUT,
) -> FormattedReceipt:
    if not order.items:
        raise ValidationError("Missing required data: items")
    if not order.order_no.strip():
        raise ValidationError("Missing required data: orderNo")
    try:
        cut_mode = Cut(cut)
    except ValueError:
        raise ValidationError(f"Invalid cut mode: {cut!r}") from None

    segs: list[Segment] = []

    def add(text: str, style: Style = NORMAL):
        segs.append(Segment(text, style))

    # Encabezado
    add(f"{paid_marker}\n", Style(bold=True, align=Align.RIGHT))
    add(f"{institution}\n", Style(bold=True, double_height=True, align=Align.CENTER))
    add(f"{location}\n", Style(align=Align.CENTER))
    add(RULE + "\n")
    add(f"Date: {order.date_time}\n")
    add(f"Order No: {order.order_no}\n", BOLD)
    add(RULE + "\n")
    add(format_line("Item", "Qty", "Pr.", "Amt(Rs.)") + "\n")
    add(RULE + "\n")

    for it in order.items:
        line = format_line(
            it.name,
            fit(quantity(it.quantity), QTY_WIDTH, f"Quantity for '{it.name}'"),
            fit(money(it.unit_price), PRICE_WIDTH, f"Price for '{it.name}'"),
            fit(money(it.amount), AMOUNT_WIDTH, f"Amount for '{it.name}'"),
        )
        add(line[:ITEM_WIDTH], BOLD)
        add(line[ITEM_WIDTH:] + "\n")

    add(RULE + "\n")
    add(format_line(
        "Total",
        fit(quantity(order.total_quantity), QTY_WIDTH, "Total quantity"),
        "",
        fit(money(order.total_amount), AMOUNT_WIDTH, "Total amount"),
    ) + "\n")
    add(RULE + "\n")
    add(f"{footer}\n", Style(align=Align.CENTER))

    return FormattedReceipt(segments=tuple(segs), feed_lines=feed_lines, cut=cut_mode)
