"""Repository selection endpoints used by the repo picker."""

from dataclasses import asdict
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from backend.web.core.dependencies import get_repo_selection
from backend.web.models.requests import RepoRequest
from bridge.repo_selection import RepoSelection
from bridge.types import RepoTarget

router = APIRouter(prefix="/api/repo", tags=["repo"])


@router.get("")
async def get_selected_repo(
    selection: Annotated[RepoSelection, Depends(get_repo_selection)] = None,
) -> dict[str, Any]:
    return asdict(selection.snapshot())


@router.put("")
async def select_repo(
    payload: RepoRequest,
    selection: Annotated[RepoSelection, Depends(get_repo_selection)] = None,
) -> dict[str, Any]:
    """Select the repo for runs started from now on."""
    target = selection.select(RepoTarget(url=payload.url, src_folder=payload.src_folder, branch=payload.branch))
    return asdict(target)


@router.delete("")
async def clear_repo(
    selection: Annotated[RepoSelection, Depends(get_repo_selection)] = None,
) -> dict[str, Any]:
    selection.clear()
    return asdict(selection.snapshot())
