"""
Installment scheduling.

Turns one payment into its list of monthly installments. Amounts are
Decimal cents rounded half up; the last installment takes whatever is left
of the payable amount so the schedule always sums to it exactly.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from components.core.exceptions import ValidationError
from components.core.money import ZERO, add_months, to_money
from components.payment import schemas


def compute_total_with_interest(
    total_amount: Decimal,
    monthly_rate: Decimal,
    num_installments: int,
) -> Optional[Decimal]:
    """
    Total after compounding `monthly_rate` percent over the installments.

    Returns None when no interest applies, which callers store as "no
    total with interest".
    """
    if not monthly_rate or monthly_rate <= 0 or not total_amount:
        return None
    factor = (Decimal(1) + Decimal(monthly_rate) / Decimal(100)) ** max(1, num_installments)
    return to_money(Decimal(total_amount) * factor)


def generate_installments(
    payment: schemas.Payment,
    first_due_date: date,
    owner_id: int,
) -> List[schemas.InstallmentCreate]:
    """
    Build the installment schedule of a payment.

    The result is not persisted; calling this twice for the same payment
    yields two identical schedules, so callers must create it only once.
    """
    count = payment.num_installments
    if count is None or count < 1:
        raise ValidationError(f"Payment {payment.id} must have at least one installment (got {count})")

    payable = to_money(payment.payable_amount)
    if payable < ZERO:
        raise ValidationError(f"Payment {payment.id} has a negative payable amount ({payable})")

    base_amount = to_money(payable / count)
    last_amount = to_money(payable - base_amount * (count - 1))
    # A non-zero payable amount never yields an empty installment
    if last_amount < ZERO or (payable > ZERO and (base_amount == ZERO or last_amount == ZERO)):
        raise ValidationError(
            f"Payable amount {payable} is too small to split into {count} installments"
        )

    installments = []
    remaining = payable
    for number in range(1, count + 1):
        amount = base_amount if number < count else to_money(remaining)
        remaining -= amount
        installments.append(
            schemas.InstallmentCreate(
                payment_id=payment.id,
                owner_id=owner_id,
                installment_number=number,
                amount=amount,
                due_date=add_months(first_due_date, number - 1),
            )
        )
    return installments
