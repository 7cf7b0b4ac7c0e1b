import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from timesplit.routes import distribute


def create_app() -> FastAPI:
    app = FastAPI(title="Timesplit Distribution API", version="0.1.0")

    logging.basicConfig(level=os.getenv("TIMESPLIT_LOG_LEVEL", "INFO").upper())

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:5173", "http://127.0.0.1:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(distribute.router, prefix="/api")

    return app


app = create_app()
