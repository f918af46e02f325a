"""Pure aggregation of a project's ledger into its financial summary."""

from collections import OrderedDict
from datetime import date
from typing import Iterable, List

from components.core.money import ZERO, months_between, to_money
from components.item.schemas import Item
from components.payment import schemas
from components.payment.schemas import InstallmentStatus


def summarize_ledger(
    payments: Iterable[schemas.Payment],
    installments: Iterable[schemas.Installment],
    items: Iterable[Item],
    today: date,
) -> schemas.FinancialSummary:
    """
    Compute totals, progress and schedule horizon of one project.

    Items already referenced by a payment are left out of the cost because
    the payment carries that cost.
    """
    payments = list(payments)
    installments = list(installments)

    items_with_payment = {p.item_id for p in payments if p.item_id is not None}
    total_payments_cost = sum((p.payable_amount for p in payments), ZERO)
    total_items_without_payment = sum(
        (item.estimated_total for item in items if item.id not in items_with_payment),
        ZERO,
    )
    total_cost = total_payments_cost + total_items_without_payment

    total_paid = sum(
        (i.amount for i in installments if i.status == InstallmentStatus.PAID.value),
        ZERO,
    )
    total_remaining = max(ZERO, total_cost - total_paid)
    percent_paid = total_paid / total_cost * 100 if total_cost > 0 else ZERO

    pending = [i for i in installments if i.status == InstallmentStatus.PENDING.value]
    next_due_date = min((i.due_date for i in pending), default=None)
    # Overdue is derived here; stored statuses are not transitioned
    overdue_count = sum(1 for i in pending if i.due_date < today)

    last_due_date = max((i.due_date for i in installments), default=None)
    months_remaining = max(0, months_between(last_due_date, today)) if last_due_date else 0

    return schemas.FinancialSummary(
        total_cost=to_money(total_cost),
        total_paid=to_money(total_paid),
        total_remaining=to_money(total_remaining),
        percent_paid=to_money(percent_paid),
        next_due_date=next_due_date,
        overdue_count=overdue_count,
        months_remaining=months_remaining,
        last_due_date=last_due_date,
    )


def group_by_month(installments: Iterable[schemas.Installment]) -> List[schemas.MonthlyPaymentData]:
    """Sum due and paid installment amounts per due month, oldest month first."""
    months = OrderedDict()
    for installment in sorted(installments, key=lambda i: i.due_date):
        key = installment.due_date.strftime("%Y-%m")
        due, paid = months.get(key, (ZERO, ZERO))
        due += installment.amount
        if installment.status == InstallmentStatus.PAID.value:
            paid += installment.amount
        months[key] = (due, paid)

    return [
        schemas.MonthlyPaymentData(month=month, due=to_money(due), paid=to_money(paid))
        for month, (due, paid) in months.items()
    ]
