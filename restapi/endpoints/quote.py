"""Quote endpoints for the API."""

from typing import List

from fastapi import APIRouter, Depends, status

from components.core.init_db import get_store
from components.ledger.store import LedgerStore
from components.quote import schemas
from components.quote.repository import QuoteRepository

router = APIRouter(
    tags=["quotes"],
    responses={404: {"description": "Not found"}},
)


@router.post(
    "/projects/{project_id}/quotes",
    response_model=schemas.Quote,
    status_code=status.HTTP_201_CREATED,
)
async def create_quote(
    project_id: int,
    quote: schemas.QuoteCreate,
    store: LedgerStore = Depends(get_store),
):
    """Register a supplier quote for a project."""
    return await QuoteRepository(store).create(project_id, quote)


@router.get("/projects/{project_id}/quotes", response_model=List[schemas.Quote])
async def read_quotes(
    project_id: int,
    store: LedgerStore = Depends(get_store),
):
    """Get the quotes of a project, cheapest first."""
    return await QuoteRepository(store).get_by_project(project_id)


@router.patch("/quotes/{quote_id}", response_model=schemas.Quote)
async def update_quote(
    quote_id: int,
    changes: schemas.QuoteUpdate,
    store: LedgerStore = Depends(get_store),
):
    """Update price, expiry or note of a quote."""
    return await QuoteRepository(store).update(quote_id, changes)


@router.post("/projects/{project_id}/quotes/{quote_id}/choose", response_model=schemas.Quote)
async def choose_quote(
    project_id: int,
    quote_id: int,
    store: LedgerStore = Depends(get_store),
):
    """Choose a quote for the project; every other quote of the project is unchosen."""
    return await QuoteRepository(store).choose_quote(quote_id, project_id)
