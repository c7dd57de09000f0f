"""Pull request endpoints for PR Manager.

All routes require an admin token.

Routes:
    POST /pullRequest/create - Create a pull request and assign reviewers
    POST /pullRequest/merge - Mark a pull request as merged (idempotent)
    POST /pullRequest/reassign - Replace one reviewer with a teammate
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi import status as http_status
from pydantic import BaseModel, Field

from prmanager.engine.dto import (
    CreatePullRequestInput,
    MergePullRequestInput,
    PullRequestDTO,
    ReassignReviewerInput,
)
from prmanager.engine.service import ReviewService
from prmanager.web.auth import require_admin
from prmanager.web.dependencies import get_service


class PullRequestCreate(BaseModel):
    pull_request_id: str = ""
    pull_request_name: str = ""
    author_id: str = ""


class PullRequestMerge(BaseModel):
    pull_request_id: str = ""


class ReviewerReassign(BaseModel):
    pull_request_id: str = ""
    old_user_id: str = ""


class PullRequestShortSchema(BaseModel):
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str


class PullRequestSchema(BaseModel):
    """Full pull request view.

    Attributes:
        status: "OPEN" or "MERGED"
        assigned_reviewers: Reviewer ids in slot order (0 to 2 entries)
    """

    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str
    assigned_reviewers: list[str] = Field(default_factory=list)

    @classmethod
    def from_dto(cls, dto: PullRequestDTO) -> PullRequestSchema:
        return cls(
            pull_request_id=dto.pull_request_id,
            pull_request_name=dto.pull_request_name,
            author_id=dto.author_id,
            status=dto.status,
            assigned_reviewers=list(dto.assigned_reviewers),
        )


class PullRequestResponse(BaseModel):
    pr: PullRequestSchema


class ReassignResponse(BaseModel):
    pr: PullRequestSchema
    replaced_by: str


def create_pull_requests_router() -> APIRouter:
    """Create the pull request router.

    Returns:
        Configured APIRouter with pull request endpoints.
    """
    router = APIRouter(
        prefix="/pullRequest",
        tags=["pull_requests"],
        dependencies=[Depends(require_admin)],
    )

    @router.post(
        "/create",
        response_model=PullRequestResponse,
        status_code=http_status.HTTP_201_CREATED,
    )
    async def create_pull_request(
        body: PullRequestCreate,
        service: ReviewService = Depends(get_service),  # noqa: B008
    ) -> PullRequestResponse:
        out = await service.create_pull_request(
            CreatePullRequestInput(
                pull_request_id=body.pull_request_id,
                pull_request_name=body.pull_request_name,
                author_id=body.author_id,
            )
        )
        return PullRequestResponse(pr=PullRequestSchema.from_dto(out.pr))

    @router.post("/merge", response_model=PullRequestResponse)
    async def merge_pull_request(
        body: PullRequestMerge,
        service: ReviewService = Depends(get_service),  # noqa: B008
    ) -> PullRequestResponse:
        out = await service.merge_pull_request(
            MergePullRequestInput(pull_request_id=body.pull_request_id)
        )
        return PullRequestResponse(pr=PullRequestSchema.from_dto(out.pr))

    @router.post("/reassign", response_model=ReassignResponse)
    async def reassign_reviewer(
        body: ReviewerReassign,
        service: ReviewService = Depends(get_service),  # noqa: B008
    ) -> ReassignResponse:
        out = await service.reassign_reviewer(
            ReassignReviewerInput(
                pull_request_id=body.pull_request_id,
                old_user_id=body.old_user_id,
            )
        )
        return ReassignResponse(pr=PullRequestSchema.from_dto(out.pr), replaced_by=out.replaced_by)

    return router
