"""CLI utility to audit locations, devices and tickets for broken invariants."""

from __future__ import annotations

import argparse
import logging
from typing import Optional

from ..database import session_scope
from ..services.data_consistency import InventoryConsistencyService

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Verifica la consistencia entre ubicaciones, dispositivos y tickets; "
            "termina con código 1 si encuentra anomalías."
        )
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Muestra el detalle de cada anomalía detectada.",
    )
    return parser.parse_args(argv)


def _log_findings(label: str, items: list) -> None:
    if not items:
        LOGGER.info("%s: sin hallazgos", label)
        return
    LOGGER.warning("%s: %s hallazgos", label, len(items))
    for item in items:
        LOGGER.debug("%s detalle: %s", label, item)


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    _configure_logging(args.verbose)

    with session_scope() as db:
        snapshot = InventoryConsistencyService.snapshot(db)

    _log_findings(
        "Ubicaciones con habitación de otra área", snapshot.locations_with_foreign_room
    )
    _log_findings(
        "Dispositivos con modelo de otra marca", snapshot.devices_with_mismatched_model
    )
    _log_findings(
        "Tickets con salida anterior al ingreso", snapshot.tickets_closed_before_intake
    )
    _log_findings(
        "Dispositivos con varios tickets pendientes", snapshot.devices_with_multiple_pending
    )

    LOGGER.info("Chequeo de integridad finalizado (%s anomalías)", snapshot.issue_count)
    return 1 if snapshot.issue_count else 0


if __name__ == "__main__":
    raise SystemExit(main())
