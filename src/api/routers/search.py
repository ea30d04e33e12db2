"""POST /customers/{customer_id}/googleAds:search -- GAQL search endpoint."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from fastapi import APIRouter, Depends

from src.gaql.service import search
from src.store.repository import RecordRepository, load_repository
from src.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()



class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=1, description="GAQL query text")
    page_size: int | None = Field(None, alias="pageSize", description="Rows per page (default 10)")
    page_token: str | None = Field(None, alias="pageToken", description="Offset token from a previous page")


class SearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    results: list[dict[str, Any]]
    next_page_token: str | None = Field(None, alias="nextPageToken")
    total_results_count: str = Field(..., alias="totalResultsCount")
    field_mask: str = Field(..., alias="fieldMask")



def get_repository() -> RecordRepository:
    return load_repository()


@router.post(
    "/customers/{customer_id}/googleAds:search",
    response_model=SearchResponse,
    response_model_exclude_none=True,
)
def search_endpoint(
    customer_id: str,
    req: SearchRequest,
    repository: RecordRepository = Depends(get_repository),
):
    """Parse the GAQL query, filter the mock account and return one page."""
    page = search(
        req.query,
        repository,
        page_size=req.page_size,
        page_token=req.page_token,
    )
    logger.debug("googleAds:search for customer %s returned %d rows", customer_id, len(page.results))

    return SearchResponse(
        results=page.results,
        next_page_token=page.next_page_token,
        total_results_count=str(page.total_results_count),
        field_mask=page.field_mask,
    )
