"""Repository for quote operations."""

from typing import List

from components.core.exceptions import NotFoundError, ValidationError
from components.core.log import get_logger
from components.ledger.store import CHOOSE_QUOTE, LedgerStore
from components.quote import schemas

logger = get_logger(__name__)


class QuoteRepository:
    """Repository for quote operations."""

    def __init__(self, store: LedgerStore):
        """Initialize repository with a ledger store."""
        self.store = store

    async def get_by_id(self, quote_id: int) -> schemas.Quote:
        """Get quote by ID."""
        rows, _ = await self.store.query("quotes", {"id": quote_id}, limit=1)
        if not rows:
            raise NotFoundError("quote", quote_id)
        return schemas.Quote.model_validate(rows[0])

    async def get_by_project(self, project_id: int) -> List[schemas.Quote]:
        """Get the quotes of a project, cheapest first."""
        rows, _ = await self.store.query(
            "quotes", {"project_id": project_id}, order_by=["total_price", "id"]
        )
        return [schemas.Quote.model_validate(row) for row in rows]

    async def create(self, project_id: int, quote: schemas.QuoteCreate) -> schemas.Quote:
        """Create a new, not chosen, quote."""
        projects, _ = await self.store.query("projects", {"id": project_id}, limit=1)
        if not projects:
            raise NotFoundError("project", project_id)

        data = quote.model_dump()
        data.update(project_id=project_id, owner_id=projects[0]["owner_id"], chosen=False)
        rows = await self.store.insert("quotes", [data])
        return schemas.Quote.model_validate(rows[0])

    async def update(self, quote_id: int, changes: schemas.QuoteUpdate) -> schemas.Quote:
        """Update price, expiry or note. The chosen flag is not reachable here."""
        patch = changes.model_dump(exclude_unset=True)
        if not patch:
            raise ValidationError("Nothing to update")
        row = await self.store.update("quotes", quote_id, patch)
        return schemas.Quote.model_validate(row)

    async def choose_quote(self, quote_id: int, project_id: int) -> schemas.Quote:
        """
        Make a quote the single chosen quote of its project.

        The flip happens in one store-side atomic operation; running it as
        separate "unset all" and "set one" calls could leave two chosen
        quotes under concurrent requests.
        """
        quote = await self.get_by_id(quote_id)
        if quote.project_id != project_id:
            raise ValidationError(f"Quote {quote_id} does not belong to project {project_id}")

        await self.store.atomic_select(CHOOSE_QUOTE, {"quote_id": quote_id, "project_id": project_id})
        logger.info("quote_chosen", quote_id=quote_id, project_id=project_id)
        return await self.get_by_id(quote_id)
