"""Repository for item operations."""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, List

from components.core.exceptions import NotFoundError
from components.core.money import ZERO, to_money
from components.ledger.store import NOT_NULL, LedgerStore
from components.item import schemas
from components.payment.schemas import InstallmentStatus, Payment


class ItemRepository:
    """Repository for item operations."""

    def __init__(self, store: LedgerStore):
        """Initialize repository with a ledger store."""
        self.store = store

    async def create(self, project_id: int, item: schemas.ItemCreate) -> schemas.Item:
        """Create a new item; the total defaults to quantity times unit price."""
        projects, _ = await self.store.query("projects", {"id": project_id}, limit=1)
        if not projects:
            raise NotFoundError("project", project_id)

        data = item.model_dump()
        if data["estimated_total"] is None:
            data["estimated_total"] = to_money(item.quantity * item.estimated_unit_price)
        data["project_id"] = project_id

        rows = await self.store.insert("items", [data])
        return schemas.Item.model_validate(rows[0])

    async def get_by_project(self, project_id: int) -> List[schemas.Item]:
        """Get the items of a project in creation order."""
        rows, _ = await self.store.query(
            "items", {"project_id": project_id}, order_by=["created_at", "id"]
        )
        return [schemas.Item.model_validate(row) for row in rows]

    async def _paid_by_payment(self, payment_ids: List[int]) -> Dict[int, Decimal]:
        """Sum of paid installment amounts per payment id."""
        paid = defaultdict(lambda: ZERO)
        if not payment_ids:
            return paid
        rows, _ = await self.store.query(
            "installments",
            {"payment_id": payment_ids, "status": InstallmentStatus.PAID.value},
        )
        for row in rows:
            paid[row["payment_id"]] += row["amount"]
        return paid

    async def get_items_with_payment_summary(self, project_id: int) -> List[schemas.ItemPaymentSummary]:
        """
        Get every item of a project with a summary of its linked payments.

        For each item:
        - number of payments referencing it
        - total payable amount of those payments
        - how much of that has been paid through installments
        - unpaid / partial / paid status

        Items without payments are included as unpaid with zero amounts.
        """
        projects, _ = await self.store.query("projects", {"id": project_id}, limit=1)
        if not projects:
            raise NotFoundError("project", project_id)

        items = await self.get_by_project(project_id)

        payment_rows, _ = await self.store.query(
            "payments", {"project_id": project_id, "item_id": NOT_NULL}
        )
        payments = [Payment.model_validate(row) for row in payment_rows]
        paid_by_payment = await self._paid_by_payment([p.id for p in payments])

        payments_by_item = defaultdict(list)
        for payment in payments:
            payments_by_item[payment.item_id].append(payment)

        summaries = []
        for item in items:
            item_payments = payments_by_item.get(item.id, [])
            payment_count = len(item_payments)
            total_payment_amount = sum((p.payable_amount for p in item_payments), ZERO)
            total_paid = sum((paid_by_payment[p.id] for p in item_payments), ZERO)

            if payment_count == 0 or total_paid == 0:
                status = schemas.ItemPaymentStatus.UNPAID
            elif total_paid >= total_payment_amount:
                status = schemas.ItemPaymentStatus.PAID
            else:
                status = schemas.ItemPaymentStatus.PARTIAL

            summaries.append(
                schemas.ItemPaymentSummary(
                    **item.model_dump(),
                    payment_count=payment_count,
                    total_payment_amount=to_money(total_payment_amount),
                    total_paid=to_money(total_paid),
                    payment_status=status,
                )
            )
        return summaries
