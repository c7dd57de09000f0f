"""Team endpoints for PR Manager.

Routes:
    POST /team/add - Create a team and upsert its members (no auth)
    GET /team/get - Fetch a team with its members (any auth)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi import status as http_status
from pydantic import BaseModel, Field

from prmanager.engine.dto import (
    CreateTeamInput,
    CreateTeamOutput,
    GetTeamInput,
    GetTeamOutput,
    TeamMemberDTO,
)
from prmanager.engine.service import ReviewService
from prmanager.web.auth import Caller, require_any_auth
from prmanager.web.dependencies import get_service


class TeamMemberSchema(BaseModel):
    """A team member as sent and returned over the wire.

    Attributes:
        user_id: Unique user id
        username: Display name
        is_active: Whether the user may be picked as a reviewer
    """

    user_id: str = ""
    username: str = ""
    is_active: bool = False


class TeamSchema(BaseModel):
    """A team with its members; also the body of POST /team/add."""

    team_name: str = ""
    members: list[TeamMemberSchema] = Field(default_factory=list)

    @classmethod
    def from_output(cls, out: CreateTeamOutput | GetTeamOutput) -> TeamSchema:
        return cls(
            team_name=out.team_name,
            members=[
                TeamMemberSchema(
                    user_id=member.user_id,
                    username=member.username,
                    is_active=member.is_active,
                )
                for member in out.members
            ],
        )


class TeamResponse(BaseModel):
    team: TeamSchema


def create_teams_router() -> APIRouter:
    """Create the team router.

    Returns:
        Configured APIRouter with team endpoints.
    """
    router = APIRouter(prefix="/team", tags=["teams"])

    @router.post("/add", response_model=TeamResponse, status_code=http_status.HTTP_201_CREATED)
    async def add_team(
        body: TeamSchema,
        service: ReviewService = Depends(get_service),  # noqa: B008
    ) -> TeamResponse:
        out = await service.create_team(
            CreateTeamInput(
                team_name=body.team_name,
                members=[
                    TeamMemberDTO(
                        user_id=member.user_id,
                        username=member.username,
                        is_active=member.is_active,
                    )
                    for member in body.members
                ],
            )
        )
        return TeamResponse(team=TeamSchema.from_output(out))

    @router.get("/get", response_model=TeamResponse)
    async def get_team(
        team_name: str = "",
        caller: Caller = Depends(require_any_auth),  # noqa: B008
        service: ReviewService = Depends(get_service),  # noqa: B008
    ) -> TeamResponse:
        out = await service.get_team(GetTeamInput(team_name=team_name))
        return TeamResponse(team=TeamSchema.from_output(out))

    return router
