import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tipsheet.core.config import settings
from tipsheet.routers import admin, auth, places, reports, venues

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Tipsheet API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth.router)
app.include_router(venues.router)
app.include_router(reports.router)
app.include_router(places.router)
app.include_router(admin.router)


@app.get("/health")
def health():
    return {"status": "ok"}
