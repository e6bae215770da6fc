# stocktask/main.py
import logging
from typing import Any, Dict

from fastapi import Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .endpoint import MockResourceEndpoint
from .errors import StockTaskError

logger = logging.getLogger(__name__)

app = FastAPI(title="stocktask (in-memory demo)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# In-memory stores (process lifetime)
# ---------------------------
endpoint = MockResourceEndpoint.from_fixture()


@app.exception_handler(StockTaskError)
async def stocktask_error_handler(request: Request, exc: StockTaskError):
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all():
    endpoint.reset()
    return {"status": "reset"}


# ---------------------------
# Resource endpoints
# ---------------------------
@app.get("/{resource}")
async def list_records(resource: str, request: Request):
    return await endpoint.get(f"/{resource}", params=dict(request.query_params))


@app.get("/{resource}/{record_id}")
async def get_record(resource: str, record_id: str):
    return await endpoint.get(f"/{resource}/{record_id}")


@app.post("/{resource}", status_code=201)
async def create_record(resource: str, payload: Dict[str, Any] = Body(...)):
    return await endpoint.post(f"/{resource}", payload)


@app.put("/{resource}/{record_id}")
async def update_record(resource: str, record_id: str, payload: Dict[str, Any] = Body(...)):
    return await endpoint.put(f"/{resource}/{record_id}", payload)


@app.delete("/{resource}/{record_id}")
async def delete_record(resource: str, record_id: str):
    return await endpoint.delete(f"/{resource}/{record_id}")


def run():
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
