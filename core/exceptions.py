from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger(__name__)


# ---- Ledger error taxonomy ---------------------------------------------


class LedgerError(APIException):
    """
    Base for every error the ledger services raise on purpose.

    `kind` is the machine-checkable name callers branch on; the HTTP
    status comes from `status_code` like any other DRF exception.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request."
    kind = "invalid_input"

    def __init__(self, detail=None):
        super().__init__(detail=detail, code=self.kind)


class InvalidInput(LedgerError):
    default_detail = "Invalid input."
    kind = "invalid_input"


class InvalidRole(LedgerError):
    default_detail = "Invalid role."
    kind = "invalid_role"


class InvalidToken(LedgerError):
    default_detail = "Invalid invite token."
    kind = "invalid_token"


class InvalidSignature(LedgerError):
    default_detail = "Invalid invite signature."
    kind = "invalid_signature"


class NotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    kind = "not_found"


class CategoryNotFound(LedgerError):
    default_detail = "Some categories not found or invalid."
    kind = "category_not_found"


class Forbidden(LedgerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    kind = "forbidden"


class AlreadyExists(LedgerError):
    default_detail = "Already exists."
    kind = "already_exists"


class AlreadyJoined(AlreadyExists):
    default_detail = "Already joined."
    kind = "already_joined"


class AlreadyOnTeam(AlreadyExists):
    default_detail = "You already belong to a team."
    kind = "already_on_team"


class InsufficientBalance(LedgerError):
    default_detail = "Insufficient VR balance."
    kind = "insufficient_balance"


class ExceedsTeamCap(LedgerError):
    default_detail = "Exceeds VR per-team limit."
    kind = "exceeds_team_cap"


class RewardAlreadyAssigned(LedgerError):
    default_detail = "Rewards already given to other teams."
    kind = "reward_already_assigned"

    def __init__(self, reward_names=None):
        self.reward_names = list(reward_names or [])
        detail = None
        if self.reward_names:
            detail = f"Rewards already given to other teams: {', '.join(self.reward_names)}"
        super().__init__(detail)


class EventNotActive(LedgerError):
    default_detail = "Event is not active."
    kind = "event_not_active"


class CapacityReached(LedgerError):
    default_detail = "Capacity reached."
    kind = "capacity_reached"


# ---- DRF hook -----------------------------------------------------------


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into a consistent response format.

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        if isinstance(exc, LedgerError):
            kind = exc.kind
        elif response.status_code == status.HTTP_404_NOT_FOUND:
            kind = NotFound.kind
        elif response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
            kind = Forbidden.kind
        else:
            kind = InvalidInput.kind
        return Response(
            {
                "success": False,
                "status_code": response.status_code,
                "kind": kind,
                "errors": response.data,
            },
            status=response.status_code,
        )

    # Unhandled exceptions (storage errors included) -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "success": False,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "kind": "internal",
            "errors": {"detail": "Internal server error."},
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
