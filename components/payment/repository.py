"""Repository for payment and installment operations."""

from datetime import date
from typing import List, Optional

from components.core.exceptions import NotFoundError, StoreError, ValidationError
from components.core.log import get_logger
from components.item.schemas import Item
from components.ledger.store import LedgerStore
from components.payment import schemas
from components.payment.scheduler import compute_total_with_interest, generate_installments
from components.payment.schemas import InstallmentStatus
from components.payment.summary import group_by_month, summarize_ledger

logger = get_logger(__name__)


class PaymentRepository:
    """Repository for payment operations."""

    def __init__(self, store: LedgerStore):
        """Initialize repository with a ledger store."""
        self.store = store

    async def _ensure_project(self, project_id: int) -> dict:
        rows, _ = await self.store.query("projects", {"id": project_id}, limit=1)
        if not rows:
            raise NotFoundError("project", project_id)
        return rows[0]

    async def get_by_id(self, payment_id: int) -> schemas.Payment:
        """Get payment by ID."""
        rows, _ = await self.store.query("payments", {"id": payment_id}, limit=1)
        if not rows:
            raise NotFoundError("payment", payment_id)
        return schemas.Payment.model_validate(rows[0])

    async def get_payments_by_project(self, project_id: int) -> List[schemas.Payment]:
        """Get all payments of a project, newest first."""
        rows, _ = await self.store.query(
            "payments", {"project_id": project_id}, order_by=["-created_at", "-id"]
        )
        return [schemas.Payment.model_validate(row) for row in rows]

    async def get_payments_by_item(self, item_id: int) -> List[schemas.Payment]:
        """Get all payments referencing an item, newest first."""
        rows, _ = await self.store.query("items", {"id": item_id}, limit=1)
        if not rows:
            raise NotFoundError("item", item_id)
        rows, _ = await self.store.query(
            "payments", {"item_id": item_id}, order_by=["-created_at", "-id"]
        )
        return [schemas.Payment.model_validate(row) for row in rows]

    async def create_payment(
        self,
        project_id: int,
        payment: schemas.PaymentCreate,
    ) -> schemas.PaymentWithInstallments:
        """
        Create a payment and immediately materialize its installments.

        When interest applies and no total with interest is given, it is
        computed by compounding the monthly rate over the installments. The
        payment and its installments belong to the project owner.
        """
        project = await self._ensure_project(project_id)
        owner_id = project["owner_id"]
        if payment.item_id is not None:
            items, _ = await self.store.query("items", {"id": payment.item_id}, limit=1)
            if not items or items[0]["project_id"] != project_id:
                raise ValidationError(f"Item {payment.item_id} does not belong to project {project_id}")

        data = payment.model_dump(exclude={"first_due_date"})
        if not data["has_interest"]:
            data["interest_rate"] = 0
            data["total_with_interest"] = None
        elif data["total_with_interest"] is None:
            data["total_with_interest"] = compute_total_with_interest(
                payment.total_amount, payment.interest_rate, payment.num_installments
            )
        data["is_installment"] = payment.num_installments > 1 or payment.is_installment
        data.update(project_id=project_id, owner_id=owner_id)

        rows = await self.store.insert("payments", [data])
        created = schemas.Payment.model_validate(rows[0])
        logger.info("payment_created", payment_id=created.id, project_id=project_id)

        try:
            installments = await self._insert_schedule(created, payment.first_due_date, owner_id)
        except StoreError as exc:
            # The payment row is committed; its schedule can be generated again
            logger.error("installments_missing", payment_id=created.id, project_id=project_id)
            raise StoreError(f"Payment {created.id} was stored without installments: {exc}") from exc
        return schemas.PaymentWithInstallments(
            **created.model_dump(), installments=installments
        )

    async def generate_installments(
        self,
        payment_id: int,
        first_due_date: date,
        owner_id: Optional[int] = None,
    ) -> List[schemas.Installment]:
        """Materialize the schedule of an existing payment, once."""
        payment = await self.get_by_id(payment_id)
        _, existing = await self.store.query("installments", {"payment_id": payment_id}, limit=1)
        if existing:
            raise ValidationError(f"Payment {payment_id} already has {existing} installments")
        owner = payment.owner_id if owner_id is None else owner_id
        return await self._insert_schedule(payment, first_due_date, owner)

    async def _insert_schedule(
        self,
        payment: schemas.Payment,
        first_due_date: date,
        owner_id: int,
    ) -> List[schemas.Installment]:
        schedule = generate_installments(payment, first_due_date, owner_id)
        rows = await self.store.insert("installments", [i.model_dump() for i in schedule])
        logger.info(
            "installments_generated",
            payment_id=payment.id,
            count=len(rows),
            first_due_date=first_due_date.isoformat(),
        )
        return sorted(
            (schemas.Installment.model_validate(row) for row in rows),
            key=lambda i: i.installment_number,
        )

    async def get_installments_by_payment(self, payment_id: int) -> List[schemas.Installment]:
        """Get the installments of a payment in schedule order."""
        await self.get_by_id(payment_id)
        rows, _ = await self.store.query(
            "installments", {"payment_id": payment_id}, order_by=["installment_number"]
        )
        return [schemas.Installment.model_validate(row) for row in rows]

    async def get_installments_by_project(self, project_id: int) -> List[schemas.Installment]:
        """Get every installment of every payment of a project, by due date."""
        payments, _ = await self.store.query("payments", {"project_id": project_id})
        payment_ids = [p["id"] for p in payments]
        if not payment_ids:
            return []
        rows, _ = await self.store.query(
            "installments", {"payment_id": payment_ids}, order_by=["due_date", "installment_number"]
        )
        return [schemas.Installment.model_validate(row) for row in rows]

    async def update_installment(
        self,
        installment_id: int,
        changes: schemas.InstallmentUpdate,
    ) -> schemas.Installment:
        """Update status, paid date, method, receipt or note of an installment."""
        patch = changes.model_dump(exclude_unset=True)
        if not patch:
            raise ValidationError("Nothing to update")

        rows, _ = await self.store.query("installments", {"id": installment_id}, limit=1)
        if not rows:
            raise NotFoundError("installment", installment_id)
        current = schemas.Installment.model_validate(rows[0])

        status = patch.get("status", current.status)
        if patch.get("payment_method_used") and status != InstallmentStatus.PAID.value:
            raise ValidationError("Payment method can only be recorded on a paid installment")
        if status == InstallmentStatus.PAID.value:
            if patch.get("paid_date") is None and current.paid_date is None:
                patch["paid_date"] = date.today()
        elif "status" in patch:
            # Leaving the paid state clears what only a payment sets
            patch["paid_date"] = None
            patch["payment_method_used"] = None

        row = await self.store.update("installments", installment_id, patch)
        logger.info("installment_updated", installment_id=installment_id, status=status)
        return schemas.Installment.model_validate(row)

    async def mark_installment_paid(
        self,
        installment_id: int,
        paid_date: Optional[date] = None,
        payment_method_used: Optional[str] = None,
    ) -> schemas.Installment:
        """Mark an installment as paid, today unless told otherwise."""
        changes = {"status": InstallmentStatus.PAID, "paid_date": paid_date or date.today()}
        if payment_method_used:
            changes["payment_method_used"] = payment_method_used
        return await self.update_installment(installment_id, schemas.InstallmentUpdate(**changes))

    async def get_financial_summary(
        self,
        project_id: int,
        today: Optional[date] = None,
    ) -> schemas.FinancialSummary:
        """
        Get the financial summary of a project.

        Loads payments, their installments and the project's items, then
        aggregates them. Any failed read aborts the whole computation.
        """
        await self._ensure_project(project_id)

        payment_rows, _ = await self.store.query("payments", {"project_id": project_id})
        payments = [schemas.Payment.model_validate(row) for row in payment_rows]

        installments = []
        if payments:
            installment_rows, _ = await self.store.query(
                "installments", {"payment_id": [p.id for p in payments]}
            )
            installments = [schemas.Installment.model_validate(row) for row in installment_rows]

        item_rows, _ = await self.store.query("items", {"project_id": project_id})
        items = [Item.model_validate(row) for row in item_rows]

        summary = summarize_ledger(payments, installments, items, today or date.today())
        logger.info(
            "financial_summary_computed",
            project_id=project_id,
            total_cost=str(summary.total_cost),
            total_paid=str(summary.total_paid),
        )
        return summary

    async def get_monthly_payment_data(self, project_id: int) -> List[schemas.MonthlyPaymentData]:
        """Get due and paid amounts per month for charting."""
        await self._ensure_project(project_id)
        return group_by_month(await self.get_installments_by_project(project_id))
