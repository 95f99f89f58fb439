# cli.py
import json
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from config import PRINTER_CONNECTION, PRINTER_IP, PRINTER_PORT, setup_logging
from printing.errors import PrintError
from printing.escpos_print import render_receipt
from printing.models import Order
from printing.receipt import format_receipt
from services.print_service import print_from_request

app = typer.Typer(help="Tickets ESC/POS: vista previa, volcado a archivo e impresión")

SAMPLE_ORDER = {
    "orderNo": "101",
    "items": [
        {"name": "Tea", "qty": 2, "price": 10.00},
        {"name": "Bun", "qty": 1, "price": 15.00},
    ],
}


def _load_order(order_file: Optional[Path]) -> dict:
    if order_file is None:
        return {**SAMPLE_ORDER, "dateTime": f"{datetime.now():%d/%m/%Y %H:%M}"}
    if not order_file.exists():
        typer.secho(f"No existe: {order_file}", fg="red")
        raise typer.Exit(code=1)
    try:
        return json.loads(order_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        typer.secho(f"JSON inválido en {order_file}: {e}", fg="red")
        raise typer.Exit(code=1)


def _parse_order(data: dict) -> Order:
    try:
        return Order.from_payload(data)
    except PrintError as e:
        typer.secho(f"Pedido inválido: {e}", fg="red")
        raise typer.Exit(code=1)


def _send(data: dict) -> None:
    result = print_from_request(data)
    if not result.success:
        typer.secho(f"ERROR [{result.error_kind.value}]: {result.message}", fg="red")
        raise typer.Exit(code=1)
    typer.secho(f"OK: ticket {result.order_no} impreso ({result.timestamp})", fg=typer.colors.GREEN)


@app.callback()
def main(log_level: str = typer.Option("WARNING", help="Nivel de logging")):
    setup_logging(log_level.upper())


@app.command("preview")
def preview(order: Optional[Path] = typer.Option(None, help="JSON del pedido; si se omite usa un ejemplo")):
    """Muestra el ticket como texto plano"""
    try:
        receipt = format_receipt(_parse_order(_load_order(order)))
    except PrintError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(code=1)
    for line in receipt.text_lines():
        typer.echo(line)


@app.command("dump")
def dump(
    order: Optional[Path] = typer.Option(None, help="JSON del pedido; si se omite usa un ejemplo"),
    out: Path = typer.Option(Path("receipt.bin"), help="Archivo destino con los bytes ESC/POS"),
):
    """Escribe los bytes ESC/POS del ticket a un archivo"""
    try:
        payload = render_receipt(_parse_order(_load_order(order)))
    except PrintError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(code=1)
    out.write_bytes(payload)
    typer.secho(f"OK: {len(payload)} bytes en {out}", fg=typer.colors.GREEN)


@app.command("send")
def send(
    order: Path = typer.Option(..., help="JSON del pedido"),
    ip: Optional[str] = typer.Option(None, help="IP de la impresora (red)"),
    port: Optional[int] = typer.Option(None, help="Puerto TCP de la impresora"),
    connection: Optional[str] = typer.Option(None, help="network | usb | serial"),
    device: Optional[str] = typer.Option(None, help="Dispositivo serial o VVVV:PPPP para USB"),
):
    """Imprime un pedido desde un archivo JSON"""
    data = _load_order(order)
    overrides = {"printerIP": ip, "printerPort": port, "connectionType": connection, "devicePath": device}
    data.update({k: v for k, v in overrides.items() if v is not None})
    _send(data)


@app.command("test-print")
def test_print(
    ip: str = typer.Option(PRINTER_IP),
    port: int = typer.Option(PRINTER_PORT),
    connection: str = typer.Option(PRINTER_CONNECTION),
    device: Optional[str] = typer.Option(None),
):
    """Imprime un ticket de prueba (Tea x2, Bun x1)"""
    data = _load_order(None)
    data.update(printerIP=ip, printerPort=port, connectionType=connection, devicePath=device)
    _send(data)


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0"),
    port: int = typer.Option(8000),
    debug: bool = typer.Option(False),
):
    """Levanta el endpoint HTTP /api/print"""
    from app import create_app
    create_app().run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    app()
