from escpos.constants import ESC, HW_INIT, PAPER_FULL_CUT, PAPER_PART_CUT, TXT_STYLE

from config import RECEIPT_ENCODING
from .models import Order
from .receipt import Align, Cut, FormattedReceipt, Style, format_receipt

# ESC ! n  (bit 3: enfatizado, bit 4: doble alto)
MODE_EMPHASIZED = 0x08
MODE_DOUBLE_HEIGHT = 0x10

ALIGN_CODES = {
    Align.LEFT: TXT_STYLE["align"]["left"],
    Align.CENTER: TXT_STYLE["align"]["center"],
    Align.RIGHT: TXT_STYLE["align"]["right"],
}
CUT_CODES = {
    Cut.PARTIAL: PAPER_PART_CUT,
    Cut.FULL: PAPER_FULL_CUT,
}


def print_mode(style: Style) -> bytes:
    n = 0
    if style.bold:
        n |= MODE_EMPHASIZED
    if style.double_height:
        n |= MODE_DOUBLE_HEIGHT
    return ESC + b"!" + bytes([n])


def serialize(receipt: FormattedReceipt, encoding: str = RECEIPT_ENCODING) -> bytes:
    """Convierte los segmentos en un solo buffer ESC/POS listo para enviar.

    Solo se emite justificación o modo de impresión cuando cambian respecto al
    segmento anterior; después de ESC @ el estado se considera desconocido.
    """
    buf = bytearray(HW_INIT)
    align = mode = None
    for seg in receipt.segments:
        if seg.style.align != align:
            align = seg.style.align
            buf += ALIGN_CODES[align]
        m = print_mode(seg.style)
        if m != mode:
            mode = m
            buf += m
        buf += seg.text.encode(encoding, errors="replace")
    buf += b"\n" * receipt.feed_lines
    buf += CUT_CODES[receipt.cut]
    return bytes(buf)


def render_receipt(order: Order, encoding: str = RECEIPT_ENCODING, **options) -> bytes:
    return serialize(format_receipt(order, **options), encoding=encoding)
