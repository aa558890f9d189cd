# path: archroute-api/app/main.py

from fastapi import FastAPI
from app.api.routes.routes import router as routes_router
from app.core.logging_config import configure_logging

configure_logging()

app = FastAPI(title="archroute-api")

app.include_router(routes_router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "service": "archroute-api"}
