import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers.admin import router as admin_router

# Routers
from routers.division import router as division_router
from routers.health import router as health_router
from routers.progress import router as progress_router

logger = logging.getLogger("mathly")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Mathly – Long Division API")

# Vite dev server and production site
_DEFAULT_ORIGINS = "http://localhost:5175,http://127.0.0.1:5175,https://mathly.app"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", _DEFAULT_ORIGINS).split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "x-api-key", "x-admin-token"],
)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(division_router)  # /tiers, /division/...
app.include_router(progress_router)  # /progress/...
app.include_router(admin_router)  # /admin/...
app.include_router(health_router)  # /health/...
