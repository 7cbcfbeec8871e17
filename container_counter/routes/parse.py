import logging

from fastapi import APIRouter, HTTPException, Request

from container_counter.dictation.extract import parse_batch
from container_counter.ratelimit import PARSE_RATE_LIMIT, limiter
from container_counter.schemas import ParseTextIn
from container_counter.serializers import serialize_parsed_line

logger = logging.getLogger("container_counter")

router = APIRouter()


@router.post("/parse")
@limiter.limit(PARSE_RATE_LIMIT)
def parse_text(request: Request, data: ParseTextIn):
    if not data.text.strip():
        raise HTTPException(status_code=400, detail="text is required")

    lines = parse_batch(data.text)
    logger.info("Dictation parsed", extra={"extra_data": {"chars": len(data.text), "lines_count": len(lines)}})
    return {"lines": [serialize_parsed_line(l) for l in lines]}
