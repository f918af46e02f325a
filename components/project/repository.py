"""Repository for project operations."""

from components.core.exceptions import NotFoundError
from components.ledger.store import LedgerStore
from components.project import schemas


class ProjectRepository:
    """Repository for project operations."""

    def __init__(self, store: LedgerStore):
        """Initialize repository with a ledger store."""
        self.store = store

    async def create(self, project: schemas.ProjectCreate) -> schemas.Project:
        """Create a new project."""
        rows = await self.store.insert("projects", [project.model_dump()])
        return schemas.Project.model_validate(rows[0])

    async def get_by_id(self, project_id: int) -> schemas.Project:
        """Get project by ID."""
        rows, _ = await self.store.query("projects", {"id": project_id}, limit=1)
        if not rows:
            raise NotFoundError("project", project_id)
        return schemas.Project.model_validate(rows[0])
