"""V1 public configuration routes."""

from fastapi import APIRouter, Depends

from ...api.dependencies.services import get_window_policy
from ...schemas.eligibility_responses import WindowPolicyResponse
from ...services.window_policy import WindowPolicy

# V1 router - mounted at /api/v1/config
router = APIRouter(tags=["config"])


@router.get("/windows", response_model=WindowPolicyResponse)
def get_window_policy_config(
    policy: WindowPolicy = Depends(get_window_policy),
) -> WindowPolicyResponse:
    """Return the booking window offsets currently enforced."""

    return WindowPolicyResponse(**policy.to_payload())
