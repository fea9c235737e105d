"""Tag parsing, tag filtering and text search over fetched project rows."""

from typing import Any, Dict, Iterable, List, Optional

Project = Dict[str, Any]


def split_tags(tags: Optional[str]) -> List[str]:
    """Comma-split and trim a tags string, dropping empty entries."""
    if not tags:
        return []
    return [t.strip() for t in tags.split(",") if t.strip()]


def normalize_tags(raw: Optional[str]) -> str:
    """Canonical stored form: trimmed tags joined by a bare comma."""
    return ",".join(split_tags(raw))


def collect_tags(projects: Iterable[Project]) -> List[str]:
    """Deduplicated, sorted union of every tag across the projects."""
    tag_set = set()
    for project in projects:
        tag_set.update(split_tags(project.get("tags")))
    return sorted(tag_set)


def filter_by_tags(projects: List[Project], selected: Optional[Iterable[str]]) -> List[Project]:
    """Keep projects having ANY of the selected tags (case-insensitive).

    No selection keeps everything.
    """
    wanted = {t.strip().lower() for t in (selected or []) if t and t.strip()}
    if not wanted:
        return list(projects)
    return [
        p for p in projects
        if any(tag.lower() in wanted for tag in split_tags(p.get("tags")))
    ]


def search_projects(projects: List[Project], query: Optional[str]) -> List[Project]:
    """Case-insensitive substring match on title or description. Blank query keeps everything."""
    q = (query or "").strip().lower()
    if not q:
        return list(projects)
    return [
        p for p in projects
        if q in (p.get("title") or "").lower() or q in (p.get("description") or "").lower()
    ]


def explore(
    projects: List[Project],
    selected_tags: Optional[Iterable[str]] = None,
    query: Optional[str] = None,
) -> List[Project]:
    return search_projects(filter_by_tags(projects, selected_tags), query)
