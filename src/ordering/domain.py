"""Ordering bounded context — Carts, seller Orders and Payment reconciliation.

Splits a buyer's multi-seller cart into one order per seller, opens gateway
payment sessions, reconciles payment outcomes arriving from the browser
redirect and the IPN, and tracks seller fulfillment.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
