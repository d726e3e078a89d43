import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.http_hardening import REQUEST_ID_HEADER, install_http_hardening
from app.api.admin.router import router as admin_router
from app.api.admin.grid_modules.router import CONTENT_RANGE_HEADER, install_grid_error_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title=settings.APP_NAME, version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CONTENT_RANGE_HEADER, REQUEST_ID_HEADER],
)
install_http_hardening(app)
install_grid_error_handlers(app)

app.include_router(admin_router, prefix=settings.GRID_API_PREFIX)

@app.get("/", include_in_schema=False)
def landing():
    return JSONResponse({"service": settings.APP_NAME, "status": "ok"})

@app.get("/health")
def health():
    return {"status": "ok"}
