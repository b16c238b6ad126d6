"""FastAPI application setup for the weather core."""

from fastapi import FastAPI

from .api import router as api_router

app = FastAPI(title="Weather Core")


@app.get("/health")
def health():
    """Liveness probe; does not touch upstream APIs."""
    return {"status": "ok"}


# API routes
app.include_router(api_router, prefix="/v1")
