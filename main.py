"""Run the ledger API with uvicorn."""

import uvicorn

from components.core.config import get_settings
from restapi.router import create_app

app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=get_settings().DEBUG)
