import os
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, Response
from contextlib import asynccontextmanager
import google.generativeai as genai
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
import uvicorn
from edge_functions.routers.geo import router as geo_router
from edge_functions.routers.weather import router as weather_router
from edge_functions.routers.fx import router as fx_router
from .config import CONFIG
from .errors import EdgeError
from .gateway import ModelGateway
from .schemas import EXCHANGE_SCHEMA, GEO_SCHEMA, WEATHER_SCHEMA


# --- Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler()
    ]
)
# --------------------------

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}

limiter = Limiter(key_func=get_remote_address, default_limits=[CONFIG.rate_limit])


def build_gateways() -> dict[str, ModelGateway]:
    return {
        "geocode": ModelGateway("geocode", GEO_SCHEMA),
        "weather": ModelGateway("weather", WEATHER_SCHEMA),
        "exchange": ModelGateway("exchange", EXCHANGE_SCHEMA),
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not CONFIG.gemini_api_key:
        raise RuntimeError("GEMINI_API_KEY environment variable is not set.")
    genai.configure(api_key=CONFIG.gemini_api_key)
    app.state.gateways = build_gateways()
    yield


app = FastAPI(title="Weather Dashboard Edge Functions", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=512)
app.include_router(geo_router)
app.include_router(weather_router)
app.include_router(fx_router)


@app.middleware("http")
async def cors(request: Request, call_next):
    # Pre-flight probes never reach routing or the model
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(EdgeError)
async def edge_error_handler(_: Request, exc: EdgeError) -> JSONResponse:
    if exc.status_code >= 500:
        logging.error("Handler failed: %s", exc.response_message())
    return JSONResponse(status_code=exc.status_code, content={"error": exc.response_message()})


@app.get("/")
async def root(_: Request):
    return {"status": "ok"}


if __name__ == "__main__":
    port = int(os.getenv("PORT", "3001"))
    uvicorn.run(app, host="0.0.0.0", port=port)
