import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fatoora.app.api.v1.api import api_router
from fatoora.app.core.config import settings
from fatoora.app.middleware.language import LanguageMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title=settings.APP_NAME)

# ─── CORS — restrict to the configured invoice front-end origins ─────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Accept", "Accept-Language"],
)

app.add_middleware(LanguageMiddleware)

app.include_router(api_router)
