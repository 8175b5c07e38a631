"""
Search API endpoint for finding universities by degree.

The endpoint validates the degree, serves fresh cached results when it can,
and otherwise fetches from the search provider.
"""

import structlog
from fastapi import APIRouter, Depends

from src.application.use_cases import SearchOutcome, SearchUniversitiesUseCase
from src.interfaces.api.dependencies import (
    enforce_search_rate_limit,
    get_search_universities_use_case,
)
from src.interfaces.api.v1.schemas.search import (
    SearchData,
    SearchRequest,
    SearchResponse,
    UniversityResultSchema,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


def _convert_outcome_to_response(outcome: SearchOutcome) -> SearchResponse:
    return SearchResponse(
        data=SearchData(
            degree=outcome.degree,
            results=[UniversityResultSchema.from_domain(r) for r in outcome.results],
            cached=outcome.cached,
        )
    )


@router.post(
    "/search",
    response_model=SearchResponse,
    response_model_by_alias=True,
    summary="Search universities by degree",
    description=(
        "Find ranked universities offering a degree, with post-study work, "
        "visa and funding details. Results are cached for 24 hours per degree."
    ),
    dependencies=[Depends(enforce_search_rate_limit)],
)
async def search_universities(
    request: SearchRequest,
    use_case: SearchUniversitiesUseCase = Depends(  # noqa: B008
        get_search_universities_use_case
    ),
) -> SearchResponse:
    """
    Search universities for the requested degree.

    Args:
        request: Search request carrying the degree
        use_case: Injected search use case

    Returns:
        SearchResponse: Ranked results and whether they came from the cache

    Raises:
        QueryValidationError: Rendered as 400 by the exception handlers
        FetchError: Rendered as 502 by the exception handlers
    """
    outcome = await use_case.execute(request.degree)

    logger.info(
        "degree_search_completed",
        degree=outcome.degree,
        result_count=len(outcome.results),
        cached=outcome.cached,
    )

    return _convert_outcome_to_response(outcome)
