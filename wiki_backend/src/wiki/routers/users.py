from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..deps import get_repo
from ..repositories import Repository
from ..schemas import UserCreate, UserOut

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"],
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    responses={
        201: {"description": "User created"},
        409: {"description": "Username already exists"},
    },
)
def create_user(payload: UserCreate, repo: Repository = Depends(get_repo)) -> UserOut:
    """Create a user. Duplicate usernames are rejected by the store."""
    user = repo.create_user(payload)
    return UserOut(id=user["id"], username=user["username"])


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=UserOut,
    summary="Find User",
    description="Look up a user by exact username.",
    responses={404: {"description": "User not found"}},
)
def find_user(
    username: str = Query(..., min_length=1, description="Exact username"),
    repo: Repository = Depends(get_repo),
) -> UserOut:
    user = repo.get_user_by_username(username)
    if user is None:
        raise _not_found()
    return UserOut(id=user["id"], username=user["username"])


# PUBLIC_INTERFACE
@router.get(
    "/{user_id}",
    response_model=UserOut,
    summary="Get User",
    responses={404: {"description": "User not found"}},
)
def get_user(user_id: str, repo: Repository = Depends(get_repo)) -> UserOut:
    user = repo.get_user(user_id)
    if user is None:
        raise _not_found()
    return UserOut(id=user["id"], username=user["username"])
