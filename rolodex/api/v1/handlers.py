"""Order handler endpoints: handler accounts and the configured allow-list."""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from rolodex.api.v1.auth import get_current_user, require_handler
from rolodex.core.dependencies import get_account_resolver, get_config_store
from rolodex.schemas.account import HandlerAllowListBody, HandlerListResponse
from rolodex.schemas.auth import CurrentUser
from rolodex.services.account_resolver import AccountResolver
from rolodex.services.config_store import ConfigStore, ConfigStoreError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=HandlerListResponse)
def list_handlers(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> HandlerListResponse:
    """Allow-listed handler accounts, or all OP accounts when no allow-list is configured."""
    return HandlerListResponse(handlers=resolver.list_handler_accounts())


@router.get("/allow-list", response_model=HandlerAllowListBody)
def get_allow_list(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    config_store: Annotated[ConfigStore, Depends(get_config_store)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> HandlerAllowListBody:
    """Configured allow-list as stored (not the cached copy)."""
    try:
        usernames = config_store.get_string_array(resolver.handler_config_key)
    except ConfigStoreError as e:
        logger.error("Reading handler allow-list failed: %s", e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Configuration store unavailable.",
        )
    return HandlerAllowListBody(usernames=usernames or [])


@router.put("/allow-list", response_model=HandlerAllowListBody)
def put_allow_list(
    body: HandlerAllowListBody,
    _handler: Annotated[CurrentUser, Depends(require_handler)],
    config_store: Annotated[ConfigStore, Depends(get_config_store)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> HandlerAllowListBody:
    """Replace the allow-list. Takes effect on the next scheduled refresh."""
    usernames = [u.strip() for u in body.usernames if u and u.strip()]
    try:
        config_store.set_value(
            resolver.handler_config_key,
            json.dumps(usernames),
            description="Usernames allowed to handle admin orders",
        )
    except ConfigStoreError as e:
        logger.error("Writing handler allow-list failed: %s", e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Configuration store unavailable.",
        )
    return HandlerAllowListBody(usernames=usernames)
