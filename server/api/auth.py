# server/api/auth.py

import logging
from fastapi import APIRouter, HTTPException, Request, status, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.accounts import AccountService
from core.errors import AccountError, TokenError
from core.security import TokenService
from models.user import LoginRequest, RegisterRequest, Token, TokenClaims


logger = logging.getLogger(__name__)

router = APIRouter()
bearer_scheme = HTTPBearer(auto_error=False)


def get_accounts(request: Request) -> AccountService:
    return request.app.state.accounts


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    result = tokens.validate(credentials.credentials)
    if isinstance(result, TokenError):
        logger.debug("Rejected token: %s", result.reason.value)
        raise credentials_exception
    return result


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, accounts: AccountService = Depends(get_accounts)):
    try:
        user = accounts.register(body.username, body.password, body.email)
    except AccountError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return {"message": "User registered successfully", "id": user.id}


@router.post("/login", response_model=Token)
def login(body: LoginRequest, accounts: AccountService = Depends(get_accounts)):
    try:
        token = accounts.login(body.username, body.password)
    except AccountError:
        raise HTTPException(status_code=400, detail="Invalid credentials")
    return {"token": token, "token_type": "bearer"}
