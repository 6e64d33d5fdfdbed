import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from longevity_chef.config import get_settings
from longevity_chef.routers import ai, kitchen

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Longevity Chef API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Build allowed origins list (supports comma-separated FRONTEND_URL for multiple domains)
_origins = ["http://localhost:3000"]
for origin in settings.FRONTEND_URL.split(","):
    origin = origin.strip()
    if origin and origin not in _origins:
        _origins.append(origin)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ai.router, prefix="/api/v1/ai", tags=["AI"])
app.include_router(kitchen.router, prefix="/api/v1/kitchen", tags=["Kitchen"])


@app.get("/health")
def health():
    return {"status": "ok"}
