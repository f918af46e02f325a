"""Project endpoints for the API."""

from fastapi import APIRouter, Depends, status

from components.core.init_db import get_store
from components.ledger.store import LedgerStore
from components.project import schemas
from components.project.repository import ProjectRepository

router = APIRouter(
    prefix="/projects",
    tags=["projects"],
    responses={404: {"description": "Not found"}},
)


@router.post("/", response_model=schemas.Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    project: schemas.ProjectCreate,
    store: LedgerStore = Depends(get_store),
):
    """Create a new project."""
    return await ProjectRepository(store).create(project)


@router.get("/{project_id}", response_model=schemas.Project)
async def read_project(
    project_id: int,
    store: LedgerStore = Depends(get_store),
):
    """Get a specific project by ID."""
    return await ProjectRepository(store).get_by_id(project_id)
