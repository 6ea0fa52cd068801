"""Branch endpoints; reads need a session, mutations need the admin role."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from branchgate.core.deps import get_current_claims, require_admin
from branchgate.db.session import get_db
from branchgate.schemas.branch import BranchCreate, BranchDetailOut, BranchSummaryOut, BranchUpdate
from branchgate.services import branches as branch_service

router = APIRouter(dependencies=[Depends(get_current_claims)])


@router.get("", response_model=list[BranchSummaryOut])
def get_branches(db: Session = Depends(get_db)) -> list[BranchSummaryOut]:
    return [BranchSummaryOut.model_validate(b) for b in branch_service.list_active(db)]


@router.get("/{branch_id}", response_model=BranchDetailOut)
def get_branch(branch_id: int, db: Session = Depends(get_db)) -> BranchDetailOut:
    return BranchDetailOut.model_validate(branch_service.get_detail(db, branch_id))


@router.post(
    "",
    response_model=BranchDetailOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_branch(payload: BranchCreate, db: Session = Depends(get_db)) -> BranchDetailOut:
    return BranchDetailOut.model_validate(branch_service.create_branch(db, payload))


@router.patch("/{branch_id}", response_model=BranchDetailOut, dependencies=[Depends(require_admin)])
def patch_branch(branch_id: int, payload: BranchUpdate, db: Session = Depends(get_db)) -> BranchDetailOut:
    return BranchDetailOut.model_validate(branch_service.update_branch(db, branch_id, payload))


@router.delete(
    "/{branch_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    dependencies=[Depends(require_admin)],
)
def delete_branch(branch_id: int, db: Session = Depends(get_db)) -> Response:
    branch_service.delete_branch(db, branch_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
