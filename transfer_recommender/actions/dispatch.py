"""
Transfer request dispatch — hands a chosen recommendation back to the host.

The host exposes five independent value sinks and one follow-on trigger.
``dispatch_transfer`` emits, in order::

    shortage_key   <- rec.shortage_store_key
    excess_key     <- rec.excess_store_key
    transfer_qty   <- rec.recommended_transfer_qty
    transfer_id    <- generate_transfer_id()      e.g. "TR-1760870400123-0042"
    status         <- "Warehouse Review"

then calls ``trigger()``.

Failures are contained here: an exception from any sink or the trigger is
logged and ``None`` is returned.  Sinks that were already set stay set —
there is no rollback.

Transfer ids are best-effort unique (millisecond timestamp + 4 random
digits); two requests in the same millisecond can collide.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Optional

from transfer_recommender.models.recommendation import TransferRecommendation
from transfer_recommender.utils.time_utils import epoch_millis

logger = logging.getLogger(__name__)

DEFAULT_STATUS_LABEL = "Warehouse Review"

Sink = Callable[[Any], Any]


def generate_transfer_id(prefix: str = "TR") -> str:
    """Return ``<prefix>-<epoch ms>-<0000..9999>``."""
    return f"{prefix}-{epoch_millis()}-{random.randrange(10_000):04d}"


@dataclass(frozen=True)
class TransferSinks:
    """The five host-side value setters a transfer request writes to.

    Attributes:
        shortage_key: Receives the shortage store key.
        excess_key:   Receives the excess store key.
        transfer_qty: Receives the recommended transfer quantity.
        transfer_id:  Receives the freshly generated transfer id.
        status:       Receives the status label.
    """

    shortage_key: Sink
    excess_key:   Sink
    transfer_qty: Sink
    transfer_id:  Sink
    status:       Sink


def dispatch_transfer(
    rec:          TransferRecommendation,
    sinks:        TransferSinks,
    trigger:      Callable[[], Any],
    status_label: str = DEFAULT_STATUS_LABEL,
    id_factory:   Callable[[], str] = generate_transfer_id,
) -> Optional[str]:
    """Emit the transfer request values to the sinks, then fire the trigger.

    Args:
        rec:          The recommendation the user chose.
        sinks:        Host value setters.
        trigger:      Zero-argument follow-on action.
        status_label: Value written to the status sink.
        id_factory:   Transfer id generator.

    Returns:
        The transfer id on success, ``None`` if any step raised.
    """
    logger.info(
        "Initiating transfer | product=%s from=%s to=%s qty=%s",
        rec.product_name, rec.excess_store_name, rec.shortage_store_name,
        rec.recommended_transfer_qty,
    )
    try:
        transfer_id = id_factory()

        sinks.shortage_key(rec.shortage_store_key)
        sinks.excess_key(rec.excess_store_key)
        sinks.transfer_qty(rec.recommended_transfer_qty)
        sinks.transfer_id(transfer_id)
        sinks.status(status_label)
        logger.debug("Transfer %s: all sink values set", transfer_id)

        trigger()
    except Exception:
        logger.exception(
            "Transfer dispatch failed | product=%s shortage_store=%s",
            rec.product_name, rec.shortage_store_key,
        )
        return None

    logger.info("Transfer %s triggered", transfer_id)
    return transfer_id
