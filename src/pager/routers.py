from typing import Annotated

from fastapi import APIRouter, Depends

from src.pager.schemas import PageRequest, PageResult
from src.pager.usecases.paginate import (
    PaginateTableUseCase,
    get_paginate_table_use_case,
)

router = APIRouter()


@router.post("/", response_model=PageResult)
async def paginate_table(
    page_request: PageRequest,
    use_case: Annotated[PaginateTableUseCase, Depends(get_paginate_table_use_case)],
) -> PageResult:
    """
    Returns one forward page of the table scan as a Relay connection.
    """
    return await use_case.execute(page_request)
