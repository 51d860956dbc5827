"""
Name: ASGI Entrypoint (userauth.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Keep the import path used by uvicorn stable (userauth.main:app)

Notes/Constraints:
  - No configuration or IO should live here
"""

from userauth.api.main import app

__all__ = ["app"]
