"""Gateway transaction identifiers.

Format: ``{prefix}_{order_id}_{epoch_ms}``. The underscore is the field
delimiter, so neither the prefix nor the order id may contain one. Parsing
is only a fallback: the order id is normally looked up from the persisted
transaction record.
"""

import time

DELIMITER = "_"


def build_transaction_id(prefix: str, order_id: str, epoch_ms: int | None = None) -> str:
    order_id = str(order_id)
    if not order_id or DELIMITER in order_id:
        raise ValueError(f"Order id {order_id!r} cannot be embedded in a transaction id")
    if not prefix or DELIMITER in prefix:
        raise ValueError(f"Transaction prefix {prefix!r} is invalid")

    if epoch_ms is None:
        epoch_ms = int(time.time() * 1000)
    return f"{prefix}{DELIMITER}{order_id}{DELIMITER}{epoch_ms}"


def parse_order_id(tran_id: str | None) -> str | None:
    """Extract the order id from a transaction id, or None when malformed."""
    if not tran_id:
        return None

    parts = tran_id.split(DELIMITER)
    if len(parts) != 3:
        return None

    prefix, order_id, epoch_ms = parts
    if not prefix or not order_id or not epoch_ms.isdigit():
        return None
    return order_id
