"""Script to seed a demo renovation project into the database."""

from datetime import date, timedelta
from decimal import Decimal
import asyncio

from components.core.init_db import get_db_manager
from components.core.log import configure_logging
from components.item.repository import ItemRepository
from components.item.schemas import ItemCreate
from components.ledger.store import SqlLedgerStore
from components.payment.repository import PaymentRepository
from components.payment.schemas import PaymentCreate
from components.project.repository import ProjectRepository
from components.project.schemas import ProjectCreate
from components.quote.repository import QuoteRepository
from components.quote.schemas import QuoteCreate


async def seed_data():
    """Seed a project with items, payments, installments and quotes."""
    manager = get_db_manager()
    await manager.create_tables()

    async with manager.get_db() as db:
        store = SqlLedgerStore(db)

        project = await ProjectRepository(store).create(
            ProjectCreate(name="Kitchen renovation", owner_id=1)
        )

        items = ItemRepository(store)
        tiles = await items.create(
            project.id,
            ItemCreate(name="Floor tiles", quantity=Decimal("24"), unit="m2",
                       estimated_unit_price=Decimal("45.90")),
        )
        await items.create(
            project.id,
            ItemCreate(name="Cabinet installation", category="labor",
                       estimated_unit_price=Decimal("1800.00")),
        )

        payments = PaymentRepository(store)
        first_due = date.today().replace(day=10)
        tiles_payment = await payments.create_payment(
            project.id,
            PaymentCreate(
                description="Floor tiles",
                total_amount=tiles.estimated_total,
                num_installments=3,
                payment_method="credit_card",
                item_id=tiles.id,
                first_due_date=first_due,
            ),
        )
        await payments.create_payment(
            project.id,
            PaymentCreate(
                description="Plumber",
                category="labor",
                total_amount=Decimal("1000.00"),
                num_installments=6,
                has_interest=True,
                interest_rate=Decimal("1.99"),
                first_due_date=first_due - timedelta(days=31),
            ),
        )
        await payments.mark_installment_paid(
            tiles_payment.installments[0].id, payment_method_used="credit_card"
        )

        quotes = QuoteRepository(store)
        for supplier_id, price in ((1, "5200.00"), (2, "4890.00")):
            await quotes.create(project.id, QuoteCreate(supplier_id=supplier_id, total_price=Decimal(price)))

        print(await payments.get_financial_summary(project.id))

    await manager.dispose()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed_data())
