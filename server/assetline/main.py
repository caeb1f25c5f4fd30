# assetline/main.py
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, APIRouter, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assetline.config import SERVICE_NAME, CORS_ORIGINS
from assetline.logging_setup import configure_logging
from assetline.errors import AssetlineError, NoDataError, InvalidRangeError
from assetline.models.common import ApiError

from assetline.routers.health import router as health_router
from assetline.routers.charts import router as charts_router
from assetline.routers.crypto import router as crypto_router
from assetline.routers.finance import router as finance_router

from assetline.db import engine
from assetline.orm_models import Base

configure_logging()

app = FastAPI(title=SERVICE_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS, allow_methods=["*"], allow_headers=["*"],
)

_STATUS = {
    NoDataError: 404,
    InvalidRangeError: 422,
}

@app.exception_handler(AssetlineError)
def _assetline_error(request: Request, exc: AssetlineError):
    code = next((c for t, c in _STATUS.items() if isinstance(exc, t)), 500)
    return JSONResponse(status_code=code, content=ApiError(code=exc.code, message=str(exc)).model_dump())

@app.on_event("startup")
def _startup():
    Base.metadata.create_all(bind=engine)

@app.get("/")
def root():
    return {"service": SERVICE_NAME, "message": "OK"}

app.include_router(health_router, prefix="/api/health", tags=["health"])

v1 = APIRouter(prefix="/api/v1", tags=["v1"])
v1.include_router(charts_router)
v1.include_router(crypto_router)
v1.include_router(finance_router)

app.include_router(v1)
