"""Account endpoints: CRUD pass-through plus cached role, handler and account-view queries."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from rolodex.api.v1.auth import get_current_user, require_handler
from rolodex.core.dependencies import get_account_resolver
from rolodex.schemas.account import (
    Account,
    AccountCreateRequest,
    AccountListResponse,
    AccountRecordItem,
    AccountUpdateRequest,
    HandlerCheckResponse,
    RoleResponse,
)
from rolodex.schemas.auth import CurrentUser
from rolodex.schemas.result import ResultStatus
from rolodex.services.account_resolver import AccountResolver
from rolodex.services.account_store import AccountStoreError

logger = logging.getLogger(__name__)
router = APIRouter()

# ResultStatus -> HTTP status for failed CRUD outcomes.
RESULT_HTTP_STATUS = {
    ResultStatus.DUPLICATE_RESOURCE: status.HTTP_409_CONFLICT,
    ResultStatus.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ResultStatus.BACKING_STORE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _raise_for_result(result: ResultStatus) -> None:
    if result.ok:
        return
    raise HTTPException(
        status_code=RESULT_HTTP_STATUS[result],
        detail={"code": result.code, "message": result.message},
    )


def _store_unavailable(e: AccountStoreError) -> HTTPException:
    logger.error("Account store read failed: %s", e.message)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "code": ResultStatus.BACKING_STORE_ERROR.code,
            "message": ResultStatus.BACKING_STORE_ERROR.message,
        },
    )


@router.get("", response_model=AccountListResponse)
def list_accounts(
    _handler: Annotated[CurrentUser, Depends(require_handler)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> AccountListResponse:
    """List all stored accounts (handlers only). Reads the store directly."""
    try:
        records = resolver.list_all()
    except AccountStoreError as e:
        raise _store_unavailable(e)
    return AccountListResponse(
        accounts=[AccountRecordItem.model_validate(r) for r in records]
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=AccountRecordItem)
def create_account(
    body: AccountCreateRequest,
    _handler: Annotated[CurrentUser, Depends(require_handler)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> AccountRecordItem:
    """Create an account. The new role is served from cache after the next refresh."""
    _raise_for_result(resolver.create(body.username, body.password, body.role))
    return AccountRecordItem(username=body.username, role=body.role.value)


@router.get("/{username}", response_model=AccountRecordItem)
def get_account(
    username: str,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> AccountRecordItem:
    try:
        record = resolver.get_one(username)
    except AccountStoreError as e:
        raise _store_unavailable(e)
    if record is None:
        _raise_for_result(ResultStatus.RESOURCE_NOT_FOUND)
    return AccountRecordItem.model_validate(record)


@router.put("/{username}", status_code=status.HTTP_204_NO_CONTENT)
def update_account(
    username: str,
    body: AccountUpdateRequest,
    _handler: Annotated[CurrentUser, Depends(require_handler)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> Response:
    """Update role and/or password; omitted fields keep their stored values."""
    _raise_for_result(resolver.update(username, body.role, body.password))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{username}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    username: str,
    _handler: Annotated[CurrentUser, Depends(require_handler)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> Response:
    _raise_for_result(resolver.delete(username))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{username}/view", response_model=Account)
def get_account_view(
    username: str,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> Account:
    """Resolved account (cached role + directory display name). Unknown users resolve as NORMAL."""
    return resolver.resolve_account(username)


@router.get("/{username}/role", response_model=RoleResponse)
def get_account_role(
    username: str,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> RoleResponse:
    return RoleResponse(username=username, role=resolver.role_of(username))


@router.get("/{username}/handler", response_model=HandlerCheckResponse)
def get_account_handler(
    username: str,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> HandlerCheckResponse:
    return HandlerCheckResponse(
        username=username,
        is_handler=resolver.is_handler(username),
        is_operator=resolver.is_operator(username),
    )
