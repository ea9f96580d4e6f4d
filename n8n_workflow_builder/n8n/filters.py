"""Client-side filtering and pagination of workflow listings."""
from typing import Optional, Sequence

DEFAULT_LIST_LIMIT = 50


def _tag_names(workflow: dict) -> list[str]:
    tags = workflow.get("tags")
    if not isinstance(tags, list):
        return []
    # n8n returns tag objects; older exports use plain strings
    return [
        tag if isinstance(tag, str) else tag.get("name")
        for tag in tags
        if isinstance(tag, (str, dict))
    ]


def filter_workflows(
    workflows: Sequence[dict],
    search: Optional[str] = None,
    active: Optional[bool] = None,
    tags: Optional[Sequence[str]] = None,
    offset: int = 0,
    limit: int = DEFAULT_LIST_LIMIT,
) -> dict:
    """Filter workflows then slice one page out of the matches.

    Args:
        search: Case-insensitive substring of the workflow name
        active: Keep only workflows with this active flag
        tags: Keep workflows carrying at least one of these tags
        offset: Number of matches to skip
        limit: Maximum number of matches to return

    Returns:
        ``{"data", "count", "total", "offset", "limit"}`` where ``total``
        counts matches before slicing.
    """
    matches = list(workflows)

    if search:
        term = search.lower()
        matches = [wf for wf in matches if term in (wf.get("name") or "").lower()]

    if active is not None:
        matches = [wf for wf in matches if wf.get("active") == active]

    if tags:
        wanted = set(tags)
        matches = [wf for wf in matches if wanted.intersection(_tag_names(wf))]

    offset = max(offset or 0, 0)
    limit = limit or DEFAULT_LIST_LIMIT
    page = matches[offset:offset + limit]

    return {
        "data": page,
        "count": len(page),
        "total": len(matches),
        "offset": offset,
        "limit": limit,
    }
