import logging
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env", override=True)


def _csv(value: str) -> tuple[str, ...]:
    return tuple(v.strip().lower() for v in value.split(",") if v.strip())


# Encabezado / pie del ticket
RECEIPT_INSTITUTION = os.getenv("RECEIPT_INSTITUTION", "Rajalakshmi Engineering College")
RECEIPT_LOCATION = os.getenv("RECEIPT_LOCATION", "REC_CAFE_KIOSK_5")
RECEIPT_FOOTER = os.getenv("RECEIPT_FOOTER", "Billing powered by POSITEASY.in")
RECEIPT_PAID_MARKER = os.getenv("RECEIPT_PAID_MARKER", "PAID")
RECEIPT_FEED_LINES = int(os.getenv("RECEIPT_FEED_LINES", "3"))
RECEIPT_CUT = os.getenv("RECEIPT_CUT", "partial").lower()  # partial | full
RECEIPT_ENCODING = os.getenv("RECEIPT_ENCODING", "cp437")

# Impresora por defecto
PRINTER_IP = os.getenv("PRINTER_IP", "192.168.1.100")
PRINTER_PORT = int(os.getenv("PRINTER_PORT", "9100"))
PRINTER_CONNECTION = os.getenv("PRINTER_CONNECTION", "network").lower()
PRINTER_TIMEOUT = float(os.getenv("PRINTER_TIMEOUT", "10"))
# En entornos sin acceso a dispositivos locales dejar solo "network"
PRINTER_ALLOWED_CONNECTIONS = _csv(os.getenv("PRINTER_ALLOWED_CONNECTIONS", "network,usb,serial"))

USB_VENDOR_ID = int(os.getenv("USB_VENDOR_ID", "0x04b8"), 16)
USB_PRODUCT_ID = int(os.getenv("USB_PRODUCT_ID", "0x0202"), 16)
USB_IN_EP = int(os.getenv("USB_IN_EP", "0x82"), 16)
USB_OUT_EP = int(os.getenv("USB_OUT_EP", "0x01"), 16)

SERIAL_DEVICE = os.getenv("SERIAL_DEVICE", "/dev/ttyUSB0")
SERIAL_BAUD = int(os.getenv("SERIAL_BAUD", "19200"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
