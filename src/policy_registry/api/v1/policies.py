"""Policy CRUD endpoints with soft delete and restore.

Every route requires an authenticated user; the check runs as a router
dependency, before any handler touches the store.
"""

from beartype import beartype
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from ...models.policy import PolicyPayload, PolicyRecord
from ...services.policy_service import PolicyService
from ..dependencies import get_current_user, get_policy_service
from ..response_patterns import Envelope, handle_result

router = APIRouter(dependencies=[Depends(get_current_user)])


@beartype
def _or_empty(payload: PolicyPayload | None) -> PolicyPayload:
    # A missing body reads as an object with every field absent
    return payload if payload is not None else PolicyPayload()


@beartype
def _rows(records: list[PolicyRecord]) -> Envelope:
    return Envelope(success=True, data=records)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=None)
@beartype
async def create_policy(
    payload: PolicyPayload | None = Body(default=None),
    service: PolicyService = Depends(get_policy_service),
) -> JSONResponse:
    """Create a new insurance policy.

    Derived charges (documentary stamps, e-VAT, LGT, total) are computed
    from the premium; any values the client sends for them are ignored.
    """
    result = await service.create(_or_empty(payload))
    return handle_result(
        result,
        lambda policy_id: Envelope(
            success=True,
            message="Policy created successfully",
            policy_id=policy_id,
            data={"id": policy_id},
        ),
        success_status=status.HTTP_201_CREATED,
    )


@router.get("/", response_model=None)
@beartype
async def list_policies(
    service: PolicyService = Depends(get_policy_service),
) -> JSONResponse:
    """List active policies, newest first."""
    return handle_result(await service.list_active(), _rows)


@router.get("/deleted/list", response_model=None)
@beartype
async def list_deleted_policies(
    service: PolicyService = Depends(get_policy_service),
) -> JSONResponse:
    """List soft-deleted policies, most recently deleted first."""
    return handle_result(await service.list_deleted(), _rows)


@router.get("/{policy_id}", response_model=None)
@beartype
async def get_policy(
    policy_id: str,
    service: PolicyService = Depends(get_policy_service),
) -> JSONResponse:
    """Retrieve an active policy by id."""
    return handle_result(
        await service.get(policy_id),
        lambda record: Envelope(success=True, data=record),
    )


@router.put("/{policy_id}", response_model=None)
@beartype
async def update_policy(
    policy_id: str,
    payload: PolicyPayload | None = Body(default=None),
    service: PolicyService = Depends(get_policy_service),
) -> JSONResponse:
    """Replace every field of a policy.

    ``assured``, ``coc_number`` and ``or_number`` are mandatory. Derived
    charges are stored exactly as sent.
    """
    return handle_result(
        await service.update(policy_id, _or_empty(payload)),
        lambda _: Envelope(success=True, message="Policy updated successfully"),
    )


@router.delete("/{policy_id}", response_model=None)
@beartype
async def delete_policy(
    policy_id: str,
    service: PolicyService = Depends(get_policy_service),
) -> JSONResponse:
    """Soft delete a policy by stamping ``deleted_at``."""
    return handle_result(
        await service.soft_delete(policy_id),
        lambda _: Envelope(success=True, message="Policy deleted successfully"),
    )


@router.put("/{policy_id}/restore", response_model=None)
@beartype
async def restore_policy(
    policy_id: str,
    service: PolicyService = Depends(get_policy_service),
) -> JSONResponse:
    """Clear ``deleted_at`` so the policy is active again."""
    return handle_result(
        await service.restore(policy_id),
        lambda _: Envelope(success=True, message="Policy restored successfully"),
    )
