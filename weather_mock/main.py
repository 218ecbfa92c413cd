# weather_mock/main.py

import os
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pythonjsonlogger import jsonlogger

from .readings import (
    DEFAULT_SIZE,
    error_message,
    generate_weather_readings,
    is_success,
    parse_size,
    pick_delay_ms,
    pick_status_code,
    success_message,
)

# config
HOST = os.getenv("WEATHER_MOCK_HOST", "0.0.0.0")
PORT = int(os.getenv("WEATHER_MOCK_PORT", 8080))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logger = logging.getLogger()
logger.setLevel(LOG_LEVEL)

formatter = jsonlogger.JsonFormatter(
    fmt='%(levelname)s %(asctime)s %(filename)s %(funcName)s %(lineno)d %(message)s',
    json_ensure_ascii=False
)

# console handle with json formatter
logHandler = logging.StreamHandler()
logHandler.setFormatter(formatter)

# clear any existing handlers especially from uvicorn
if logger.hasHandlers():
    logger.handlers.clear()
logger.addHandler(logHandler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Mock weather API server listening on port {PORT}", extra={"host": HOST, "port": PORT})
    logger.info(f"Access weather data at http://localhost:{PORT}/weather")
    logger.info(f"Access health check at http://localhost:{PORT}/health")
    yield


app = FastAPI(title="Mock Weather Service", lifespan=lifespan)


@app.api_route("/health", methods=["GET", "HEAD"])
async def health():
    """Liveness probe, never randomized"""
    return PlainTextResponse("Healthy")


@app.get("/weather")
async def get_weather(size: Optional[str] = None):
    """
    Simulates an unreliable upstream: random delay of 0-5s, then a
    weighted random 2xx/4xx/5xx status with a matching JSON body
    """
    effective_size, defaulted = parse_size(size)
    if defaulted:
        logger.warning(f"Invalid or missing 'size' parameter, defaulting to {DEFAULT_SIZE}. Received: {size}",
                       extra={"size_received": size})

    delay_ms = pick_delay_ms()
    logger.info(f"Introducing a delay of {delay_ms}ms for this request.", extra={"delay_ms": delay_ms})
    await asyncio.sleep(delay_ms / 1000)

    status_code = pick_status_code()

    if is_success(status_code):
        readings = generate_weather_readings(effective_size)
        logger.info(f"Responding with {status_code} status code and {len(readings)} weather readings.", extra={
            "status_code": status_code,
            "readings_count": len(readings),
            "delay_ms": delay_ms
        })
        # 204 can't carry a body
        if status_code == status.HTTP_204_NO_CONTENT:
            return Response(status_code=status_code, media_type="application/json")
        return JSONResponse(
            status_code=status_code,
            content={"readings": readings, "message": success_message(len(readings))}
        )

    message = error_message(status_code)
    logger.info(f"Responding with {status_code} status code and error message: {message}", extra={
        "status_code": status_code,
        "delay_ms": delay_ms
    })
    return JSONResponse(status_code=status_code, content={"message": message})


if __name__ == "__main__":
    # log_config=None keeps uvicorn's loggers on the json root handler
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower(), log_config=None)
