import logging
import time
from uuid import uuid4

from fastapi import Request

logger = logging.getLogger("hcl_catalog.api")

REQUEST_ID_HEADER = "x-request-id"


async def add_request_id(request: Request, call_next):
    """Propagates the caller's request id, or mints one, onto the response."""
    rid = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
    request.state.request_id = rid
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = rid
    return response


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    status = "error"
    rid = request.headers.get(REQUEST_ID_HEADER)
    try:
        response = await call_next(request)
        status = response.status_code
        rid = response.headers.get(REQUEST_ID_HEADER, rid)
        return response
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        query = f"?{request.url.query}" if request.url.query else ""
        line = f"{request.method} {request.url.path}{query} -> {status} in {duration_ms:.2f}ms [{rid or '-'}]"
        if status == "error" or status >= 500:
            logger.warning(line)
        else:
            logger.info(line)
