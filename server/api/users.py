# server/api/users.py

from fastapi import APIRouter, HTTPException, Depends

from api.auth import get_accounts, get_current_user
from core.accounts import AccountService
from core.errors import AccountError, AccountErrorReason
from models.user import TokenClaims, UserPublic, UserUpdate


# -------------------------------
# Router Configuration
# -------------------------------

# Every route here requires a valid bearer token
router = APIRouter(dependencies=[Depends(get_current_user)])

_STATUS_BY_REASON = {
    AccountErrorReason.NOT_FOUND: 404,
    AccountErrorReason.ALREADY_EXISTS: 400,
}


def _http_error(e: AccountError) -> HTTPException:
    return HTTPException(status_code=_STATUS_BY_REASON.get(e.reason, 400), detail=e.message)


# -------------------------------
# User Endpoints
# -------------------------------

@router.get("/users", response_model=list[UserPublic])
def list_users(accounts: AccountService = Depends(get_accounts)):
    """
    Lists every registered user without their password hashes.
    """
    return accounts.list_users()


@router.get("/users/me", response_model=UserPublic)
def read_users_me(
    current_user: TokenClaims = Depends(get_current_user),
    accounts: AccountService = Depends(get_accounts),
):
    """
    Returns the account the presented token was issued for.
    """
    try:
        return accounts.current_user(current_user)
    except AccountError as e:
        raise _http_error(e)


@router.get("/users/{user_id}", response_model=UserPublic)
def get_user(user_id: int, accounts: AccountService = Depends(get_accounts)):
    try:
        return accounts.get_user(user_id)
    except AccountError as e:
        raise _http_error(e)


@router.put("/users/{user_id}")
def update_user(user_id: int, body: UserUpdate, accounts: AccountService = Depends(get_accounts)):
    """
    Overwrites the fields present in the body and keeps the others.
    A username already used by another account is rejected with 400.
    """
    try:
        user = accounts.update_user(user_id, username=body.username, email=body.email)
    except AccountError as e:
        raise _http_error(e)
    return {"message": "User updated successfully", "user": user.model_dump()}


@router.delete("/users/{user_id}")
def delete_user(user_id: int, accounts: AccountService = Depends(get_accounts)):
    try:
        accounts.delete_user(user_id)
    except AccountError as e:
        raise _http_error(e)
    return {"message": "User deleted successfully"}
