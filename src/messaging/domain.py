"""Messaging bounded context — order-scoped chat between buyer and seller.

Hosts the free-text conversation attached to every order and consumes
Ordering events to post lifecycle messages into it.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

messaging = Domain(name="messaging")

logger = structlog.get_logger(__name__)
