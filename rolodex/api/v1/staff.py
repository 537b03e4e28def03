"""Staff directory search (live, not cached)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from rolodex.api.v1.auth import get_current_user
from rolodex.core.dependencies import get_account_resolver
from rolodex.schemas.account import StaffSearchResponse
from rolodex.schemas.auth import CurrentUser
from rolodex.services.account_resolver import AccountResolver
from rolodex.services.staff_directory import StaffDirectoryError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=StaffSearchResponse)
def search_staff(
    prefix: Annotated[str, Query(min_length=1, max_length=255)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> StaffSearchResponse:
    try:
        staff = resolver.search_by_prefix(prefix)
    except StaffDirectoryError as e:
        logger.warning("Staff search failed: %s", e.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Staff directory unavailable.",
        )
    return StaffSearchResponse(staff=staff)
