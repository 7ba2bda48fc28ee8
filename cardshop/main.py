import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from cardshop.db import engine
from cardshop.observability import RequestLoggingMiddleware
from cardshop.schema import ensure_schema
from cardshop.routers import (
    cards_admin,
    catalog_admin,
    config_admin,
    reviews_admin,
)

app = FastAPI(title="Cardshop Admin API")

ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _parse_env_list(name: str) -> list[str]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


cors_origins = _parse_env_list("CORS_ALLOWED_ORIGINS") or ALLOWED_ORIGINS
trusted_hosts = _parse_env_list("TRUSTED_HOSTS")

if trusted_hosts:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=trusted_hosts)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_methods=["*"], allow_headers=["*"], allow_credentials=True,
)
app.add_middleware(RequestLoggingMiddleware)


@app.on_event("startup")
def prepare_schema():
    ensure_schema(engine)


@app.get("/health")
def health(): return {"ok": True}


app.include_router(catalog_admin.router)
app.include_router(cards_admin.router)
app.include_router(config_admin.router)
app.include_router(reviews_admin.router)
