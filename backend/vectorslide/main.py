"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vectorslide.config import settings
from vectorslide.engine.registry import load_builtin_rules

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.vectorslide_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="VectorSlide",
        description="SVG/EMF to slide conversion — sanitization, normalization and layout fitting",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all rule modules to trigger registration
    load_builtin_rules()

    from vectorslide.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
