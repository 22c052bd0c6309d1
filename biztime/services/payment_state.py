"""
BizTime Backend — Invoice Payment State Transition
====================================================

What:  The rule that derives an invoice's `paid_date` on update.
How:   Pure function over the stored payment state and the requested
       (amt, paid) pair. The current date comes from an injectable clock so
       the rule can be exercised without a database or a real calendar.
Who:   InvoiceService.update_invoice(), between fetching the stored state
       and persisting the result.

Transition rule (first match wins):
    ┌────────────────────────────┬────────────────┬────────────────────────┐
    │ stored paid_date           │ requested paid │ new paid_date          │
    ├────────────────────────────┼────────────────┼────────────────────────┤
    │ NULL                       │ True           │ clock()                │
    │ any                        │ False          │ NULL                   │
    │ set                        │ True           │ stored paid_date       │
    └────────────────────────────┴────────────────┴────────────────────────┘

Invariant of every result: (paid_date is not None) == paid.
Marking an already-paid invoice as paid again keeps its original date.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Protocol

Clock = Callable[[], date]


@dataclass(frozen=True)
class PaymentState:
    """Payment columns of an invoice as currently stored."""
    paid: bool
    paid_date: Optional[date]


@dataclass(frozen=True)
class PaymentUpdate:
    """Values to write back: the requested amt/paid plus the derived paid_date."""
    amt: Decimal
    paid: bool
    paid_date: Optional[date]


class RequestedPayment(Protocol):
    # Satisfied by biztime.schemas.invoice.InvoiceUpdate
    amt: Decimal
    paid: bool


def resolve_payment_update(
    current: PaymentState,
    requested: RequestedPayment,
    clock: Clock = date.today,
) -> PaymentUpdate:
    """
    Compute the (amt, paid, paid_date) triple to persist for an invoice update.

    Args:
        current:   Stored payment state of the invoice. Only `paid_date` takes
                   part in the decision.
        requested: Caller-supplied amount and paid flag; `amt` is passed
                   through unchanged.
        clock:     Returns today's date. Called at most once, and only when
                   the invoice becomes paid.

    Returns:
        PaymentUpdate ready to hand to the persistence gateway.
    """
    if current.paid_date is None and requested.paid:
        paid_date: Optional[date] = clock()
    elif not requested.paid:
        paid_date = None
    else:
        paid_date = current.paid_date

    return PaymentUpdate(amt=requested.amt, paid=requested.paid, paid_date=paid_date)
