"""FIFO matching of fills into realized P&L."""

import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Sequence

from tradelog.models import TradeRecord

logger = logging.getLogger(__name__)


@dataclass
class _Lot:
    """Open quantity left by an unmatched fill."""

    side: str
    quantity: int
    price: float


def attach_realized_pnl(
    records: Sequence[TradeRecord],
    fee_per_trade: float = 0.0,
    fee_per_share: float = 0.0,
) -> list[TradeRecord]:
    """Match opposite-side fills per symbol and attach realized P&L.

    Fills are processed in entry-date order. Each fill first closes
    open lots of the opposite side (oldest first); anything left over
    opens a new lot. A fill that closes quantity gets ``net_pnl`` set
    to the realized amount minus fees; opening fills keep None. Records
    that already carry a net P&L are passed through untouched.

    Args:
        records: Parsed fills.
        fee_per_trade: Flat fee charged on each closing fill.
        fee_per_share: Per-share fee on the closed quantity.

    Returns:
        New list in the same order as ``records``.
    """
    result = list(records)
    order = sorted(range(len(result)), key=lambda i: result[i].entry_date)
    open_lots: dict[str, deque[_Lot]] = defaultdict(deque)
    closed_fills = 0

    for index in order:
        fill = result[index]
        if fill.net_pnl is not None:
            continue

        lots = open_lots[fill.symbol]
        remaining = fill.quantity
        closed_qty = 0
        realized = 0.0

        while remaining and lots and lots[0].side != fill.side:
            lot = lots[0]
            matched = min(remaining, lot.quantity)
            if lot.side == "BUY":
                realized += (fill.price - lot.price) * matched
            else:
                realized += (lot.price - fill.price) * matched
            lot.quantity -= matched
            remaining -= matched
            closed_qty += matched
            if lot.quantity == 0:
                lots.popleft()

        if remaining:
            lots.append(_Lot(side=fill.side, quantity=remaining, price=fill.price))

        if closed_qty:
            fees = fee_per_trade + fee_per_share * closed_qty
            result[index] = fill.model_copy(update={"net_pnl": realized - fees})
            closed_fills += 1

    logger.info("Matched %d closing fills across %d symbols", closed_fills, len(open_lots))
    return result
