# orders/services/printing.py

"""
INVOICE PRINT JOB

Flow:
1) Resolve the default printer owned by an active admin/manager.
   None configured -> print_status stays "pending", nothing printed.
2) print_status = "printing"
3) Render the plain-text invoice and pipe it to PRINT_COMMAND (lp)
4) Success -> print_status "completed", printed_at, PrintHistory(completed)
   Failure -> print_status "failed", print_error, PrintHistory(failed),
              then PrintJobError is raised to the caller

Callers:
- checkout post-commit dispatch (swallows + logs PrintJobError)
- staff reprint endpoint (surfaces it as 502)
"""

from __future__ import annotations

import logging
import subprocess

from django.conf import settings
from django.utils import timezone

from orders.models import Order, PrinterSetting, PrintHistory
from orders.services.invoice import render_invoice_text
from users.models import STAFF_ROLES

logger = logging.getLogger(__name__)


class PrintJobError(Exception):
    pass


def get_default_printer() -> PrinterSetting | None:
    return (
        PrinterSetting.objects.filter(
            is_default=True,
            user__role__in=STAFF_ROLES,
            user__is_active=True,
        )
        .order_by("-created_at")
        .first()
    )


def build_print_command(printer: PrinterSetting) -> list[str]:
    command = [getattr(settings, "PRINT_COMMAND", "lp") or "lp"]
    if printer.connection_type == PrinterSetting.CONNECTION_NETWORK and printer.printer_address:
        command += ["-h", printer.printer_address]
    command += ["-d", printer.printer_name, "-t", "invoice"]
    return command


def _send_to_printer(*, printer: PrinterSetting, document: str) -> None:
    timeout = int(getattr(settings, "PRINT_TIMEOUT", 30) or 30)
    try:
        subprocess.run(
            build_print_command(printer),
            input=document.encode("utf-8"),
            check=True,
            capture_output=True,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or b"").decode("utf-8", "replace").strip()
        raise PrintJobError(stderr or f"Print command exited with status {exc.returncode}") from exc
    except subprocess.TimeoutExpired as exc:
        raise PrintJobError(f"Print command timed out after {timeout}s") from exc
    except OSError as exc:
        raise PrintJobError(f"Print command unavailable: {exc}") from exc


def print_order_invoice(*, order_id: int) -> str:
    """
    Print one order's invoice. Returns the resulting print_status.
    """
    order = Order.objects.prefetch_related("items").get(id=order_id)

    printer = get_default_printer()
    if printer is None:
        logger.info(
            "No default printer configured, skipping invoice print",
            extra={"order_id": order.id},
        )
        Order.objects.filter(id=order.id).update(print_status=Order.PRINT_PENDING)
        return Order.PRINT_PENDING

    Order.objects.filter(id=order.id).update(print_status=Order.PRINT_PRINTING)

    try:
        _send_to_printer(printer=printer, document=render_invoice_text(order))
    except PrintJobError as exc:
        Order.objects.filter(id=order.id).update(
            print_status=Order.PRINT_FAILED,
            print_error=str(exc),
        )
        PrintHistory.objects.create(
            order=order,
            status=PrintHistory.STATUS_FAILED,
            printer_name=printer.printer_name,
            printer_address=printer.printer_address,
            error_message=str(exc),
        )
        logger.error(
            "Invoice print failed",
            extra={"order_id": order.id, "printer": printer.printer_name, "error": str(exc)},
        )
        raise

    Order.objects.filter(id=order.id).update(
        print_status=Order.PRINT_COMPLETED,
        print_error="",
        printed_at=timezone.now(),
    )
    PrintHistory.objects.create(
        order=order,
        status=PrintHistory.STATUS_COMPLETED,
        printer_name=printer.printer_name,
        printer_address=printer.printer_address,
    )
    logger.info(
        "Invoice printed",
        extra={"order_id": order.id, "printer": printer.printer_name},
    )
    return Order.PRINT_COMPLETED
