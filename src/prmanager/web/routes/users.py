"""User endpoints for PR Manager.

Routes:
    POST /users/setIsActive - Toggle reviewer availability (admin)
    GET /users/getReview - Pull requests a user reviews (own id, or admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from prmanager.engine.dto import GetUserReviewsInput, SetUserActiveInput
from prmanager.engine.service import ReviewService
from prmanager.web.auth import AuthError, Caller, require_admin, require_any_auth
from prmanager.web.dependencies import get_service
from prmanager.web.routes.pull_requests import PullRequestShortSchema


class SetIsActiveRequest(BaseModel):
    user_id: str = ""
    is_active: bool = False


class UserSchema(BaseModel):
    """A user with the team they belong to ("" when none)."""

    user_id: str
    username: str
    team_name: str
    is_active: bool


class UserResponse(BaseModel):
    user: UserSchema


class UserReviewsResponse(BaseModel):
    user_id: str
    pull_requests: list[PullRequestShortSchema] = Field(default_factory=list)


def create_users_router() -> APIRouter:
    """Create the user router.

    Returns:
        Configured APIRouter with user endpoints.
    """
    router = APIRouter(prefix="/users", tags=["users"])

    @router.post("/setIsActive", response_model=UserResponse)
    async def set_is_active(
        body: SetIsActiveRequest,
        caller: Caller = Depends(require_admin),  # noqa: B008
        service: ReviewService = Depends(get_service),  # noqa: B008
    ) -> UserResponse:
        out = await service.set_user_active(
            SetUserActiveInput(user_id=body.user_id, is_active=body.is_active)
        )
        return UserResponse(
            user=UserSchema(
                user_id=out.user_id,
                username=out.username,
                team_name=out.team_name,
                is_active=out.is_active,
            )
        )

    @router.get("/getReview", response_model=UserReviewsResponse)
    async def get_review(
        user_id: str = "",
        caller: Caller = Depends(require_any_auth),  # noqa: B008
        service: ReviewService = Depends(get_service),  # noqa: B008
    ) -> UserReviewsResponse:
        """Only admins may list reviews of other users."""
        if not caller.is_admin and caller.user_id != user_id:
            raise AuthError("forbidden for this user_id")

        out = await service.get_user_reviews(GetUserReviewsInput(user_id=user_id))
        return UserReviewsResponse(
            user_id=out.user_id,
            pull_requests=[
                PullRequestShortSchema(
                    pull_request_id=pr.pull_request_id,
                    pull_request_name=pr.pull_request_name,
                    author_id=pr.author_id,
                    status=pr.status,
                )
                for pr in out.pull_requests
            ],
        )

    return router
