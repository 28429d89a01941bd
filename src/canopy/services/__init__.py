from .check_connections import (
    CheckConnectionsOutcome,
    CheckConnectionsService,
    ConnectionCheck,
)
from .create_branch import CreateBranchOutcome, CreateBranchRequest, CreateBranchService
from .create_pull_request import (
    CreatePullRequestOutcome,
    CreatePullRequestRequest,
    CreatePullRequestService,
)
from .errors import (
    CanopyError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    TransportError,
    UnexpectedError,
)
from .reconcile_tickets import (
    ReconcileOutcome,
    ReconcileTicketsRequest,
    ReconcileTicketsService,
)
from .result import (
    ServiceFailure,
    ServiceResult,
    ServiceSuccess,
    failure_from_error,
    service_failure,
    service_success,
)
from .switch_branch import SwitchBranchOutcome, SwitchBranchRequest, SwitchBranchService

__all__ = [
    "CanopyError",
    "CheckConnectionsOutcome",
    "CheckConnectionsService",
    "ConfigurationError",
    "ConflictError",
    "ConnectionCheck",
    "CreateBranchOutcome",
    "CreateBranchRequest",
    "CreateBranchService",
    "CreatePullRequestOutcome",
    "CreatePullRequestRequest",
    "CreatePullRequestService",
    "NotFoundError",
    "ReconcileOutcome",
    "ReconcileTicketsRequest",
    "ReconcileTicketsService",
    "ServiceFailure",
    "ServiceResult",
    "ServiceSuccess",
    "SwitchBranchOutcome",
    "SwitchBranchRequest",
    "SwitchBranchService",
    "TransportError",
    "UnexpectedError",
    "failure_from_error",
    "service_failure",
    "service_success",
]
