import asyncio

from fastapi import APIRouter, Depends

from builder_ide.api.dependencies import get_issue_collector, get_issue_store
from builder_ide.api.schemas import IssuesRequest, IssuesResponse, IssuesSavedResponse, OkResponse
from builder_ide.core.issues import IssueCollector, IssueStore, merge_issues

router = APIRouter(prefix="/issues", tags=["issues"])


@router.get("", response_model=IssuesResponse, response_model_exclude_none=True)
async def list_issues(
    collector: IssueCollector = Depends(get_issue_collector),
    store: IssueStore = Depends(get_issue_store),
) -> IssuesResponse:
    """Fresh linter and compiler findings followed by the stored AI findings."""
    issues = merge_issues(await collector.collect(), await asyncio.to_thread(store.load))
    return IssuesResponse(issues=issues, count=len(issues))


@router.post("", response_model=IssuesSavedResponse)
async def add_issues(
    body: IssuesRequest,
    store: IssueStore = Depends(get_issue_store),
) -> IssuesSavedResponse:
    merged = await asyncio.to_thread(store.add, body.issues)
    return IssuesSavedResponse(count=len(merged))


@router.delete("", response_model=OkResponse)
async def clear_issues(store: IssueStore = Depends(get_issue_store)) -> OkResponse:
    await asyncio.to_thread(store.clear)
    return OkResponse()
