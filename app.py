# app.py
"""
Thin entrypoint for the API.

Usage example:
    uvicorn app:app --reload
or
    python app.py
"""

import uvicorn

from knight_service.config import get_settings
from knight_service.main import app  # re-export FastAPI instance

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
