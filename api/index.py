"""
Vercel Serverless Function wrapper for the FastAPI app
"""
import sys
from pathlib import Path

# Add backend to Python path
backend_path = Path(__file__).parent.parent / "backend"
sys.path.insert(0, str(backend_path))

from github_searcher.main import app

# Vercel's @vercel/python builder expects a Lambda-style handler, Mangum adapts ASGI to it.
# lifespan must run: it creates the DB engine and the GitHub client.
from mangum import Mangum

mangum_handler = Mangum(app, lifespan="auto")


def handler(event, context=None):
    """Vercel serverless function handler"""
    return mangum_handler(event, context)
