"""Error taxonomy for PR Manager.

Every failure surfaced by the service façade is one of the exceptions below.
Each carries a stable ``kind`` string so transport adapters can map it to an
outward status without inspecting messages:

    validation          ValidationError
    not_found           NotFoundError
    already_exists      AlreadyExistsError (TeamExistsError, PullRequestExistsError)
    already_merged      AlreadyMergedError
    not_assigned        ReviewerNotAssignedError
    no_candidate        NoAvailableCandidatesError
    invalid_transition  InvalidTransitionError
    storage             StorageError

Cancellation is not part of this hierarchy: ``asyncio.CancelledError``
propagates unchanged and open transactions roll back as it unwinds.
"""

from __future__ import annotations


class PRManagerError(Exception):
    """Base class for all PR Manager errors.

    Attributes:
        kind: Stable machine-readable error kind.
    """

    kind: str = "error"


class ValidationError(PRManagerError):
    """Raised when a required input field is missing or empty.

    Attributes:
        field: Name of the offending input field.
    """

    kind = "validation"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")


class NotFoundError(PRManagerError):
    """Raised when a referenced entity does not exist.

    Attributes:
        entity: Entity type ("team", "user", "pull_request", ...).
        key: Identifier that was looked up.
    """

    kind = "not_found"

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key!r} not found")


class AlreadyExistsError(PRManagerError):
    """Raised when creating an entity whose identifier is already taken.

    Attributes:
        entity: Entity type.
        key: Conflicting identifier.
    """

    kind = "already_exists"
    entity = "entity"

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"{self.entity} {key!r} already exists")


class TeamExistsError(AlreadyExistsError):
    """Raised when a team with the same name already exists."""

    entity = "team"


class PullRequestExistsError(AlreadyExistsError):
    """Raised when a pull request with the same id already exists."""

    entity = "pull_request"


class ConflictError(PRManagerError):
    """Base class for operations rejected by the current pull request state."""

    kind = "conflict"

    def __init__(self, pull_request_id: str, message: str):
        self.pull_request_id = pull_request_id
        super().__init__(message)


class AlreadyMergedError(ConflictError):
    """Raised when mutating the reviewers of a merged pull request."""

    kind = "already_merged"

    def __init__(self, pull_request_id: str):
        super().__init__(
            pull_request_id,
            f"cannot edit pull request {pull_request_id!r}: it is already merged",
        )


class ReviewerNotAssignedError(ConflictError):
    """Raised when the reviewer to replace does not occupy any slot.

    Attributes:
        user_id: The user that was expected to be a reviewer.
    """

    kind = "not_assigned"

    def __init__(self, pull_request_id: str, user_id: str):
        self.user_id = user_id
        super().__init__(
            pull_request_id,
            f"user {user_id!r} is not assigned to pull request {pull_request_id!r}",
        )


class NoAvailableCandidatesError(ConflictError):
    """Raised when no active team member is eligible as a replacement.

    Attributes:
        team_name: Team whose active members were considered.
    """

    kind = "no_candidate"

    def __init__(self, pull_request_id: str, team_name: str):
        self.team_name = team_name
        super().__init__(
            pull_request_id,
            f"no available candidates in team {team_name!r} "
            f"for pull request {pull_request_id!r}",
        )


class InvalidTransitionError(ConflictError):
    """Raised when a status change is not allowed by the transition table.

    Attributes:
        current: Status label before the change.
        target: Requested status label.
    """

    kind = "invalid_transition"

    def __init__(self, pull_request_id: str, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            pull_request_id,
            f"invalid transition for pull request {pull_request_id!r}: {current} -> {target}",
        )


class StorageError(PRManagerError):
    """Opaque failure of the persistence layer.

    The original driver exception is chained as ``__cause__``.

    Attributes:
        operation: Repository operation that failed.
    """

    kind = "storage"

    def __init__(self, operation: str, detail: str | None = None):
        self.operation = operation
        msg = f"storage error during {operation}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
