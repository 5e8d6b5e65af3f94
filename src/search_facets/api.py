# src/search_facets/api.py
import logging
from typing import Dict, List

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from .aggregates import extract_aggregates
from .errors import DecodeError

logger = logging.getLogger(__name__)

app = FastAPI(title="search-facets")


class Bucket(BaseModel):
    name: str
    key_count: Dict[str, int]


class ExtractResponse(BaseModel):
    count: int
    buckets: List[Bucket]


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/aggregations/extract", response_model=ExtractResponse)
async def extract(request: Request):
    """
    ex)
    POST /aggregations/extract
    {"tags": {"buckets": [{"key": "bass", "doc_count": 1}]}}
    """
    raw = await request.body()
    try:
        buckets = extract_aggregates(raw)
    except DecodeError as e:
        logger.info("잘못된 aggregations 요청: %s", e)
        raise HTTPException(status_code=400, detail=str(e)) from e

    return ExtractResponse(
        count=len(buckets),
        buckets=[Bucket(name=b.name, key_count=dict(b.key_count)) for b in buckets],
    )
