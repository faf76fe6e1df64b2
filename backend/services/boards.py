"""Board and sprint listing."""

from datetime import datetime, timezone
from typing import Optional

from services.jira_client import JiraClient

RECENT_SPRINT_LIMIT = 26
SPRINT_STATES = "active,closed,future"

# Safety caps against broken pagination metadata
BOARD_MAX_OFFSET = 1000
SPRINT_MAX_PAGES = 200

_DATE_FORMATS = [
    "%Y-%m-%dT%H:%M:%S.%f%z",  # 2024-10-31T12:11:56.289+0000, ...Z
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
]


def _name_key(item: dict):
    # case-insensitive, lowercase first on ties ("a" before "A")
    name = item.get("name") or ""
    return name.casefold(), name.swapcase()


def list_boards(client: JiraClient) -> list:
    """All boards visible to the user, sorted by name."""
    boards = client.paginate("/rest/agile/1.0/board", max_offset=BOARD_MAX_OFFSET)
    return sorted(boards, key=_name_key)


def parse_jira_date(value) -> Optional[datetime]:
    """Parse a Jira date string; naive values are taken as UTC."""
    if not value or not isinstance(value, str):
        return None

    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    return None


def sprint_recency_key(sprint: dict) -> float:
    """Epoch milliseconds of the first parseable sprint date.

    Falls back to the numeric sprint id when none of startDate,
    completeDate or createdDate parse.
    """
    for field in ("startDate", "completeDate", "createdDate"):
        parsed = parse_jira_date(sprint.get(field))
        if parsed is not None:
            return parsed.timestamp() * 1000

    sprint_id = sprint.get("id")
    if isinstance(sprint_id, (int, float)) and not isinstance(sprint_id, bool):
        return sprint_id
    try:
        return int(str(sprint_id).strip())
    except (TypeError, ValueError):
        return 0


def list_recent_sprints(client: JiraClient, board_id,
                        limit: int = RECENT_SPRINT_LIMIT) -> dict:
    """Most recent sprints of a board.

    Picks the ``limit`` latest sprints by date, then orders that
    selection by name, descending, for display.
    """
    sprints = client.paginate(
        f"/rest/agile/1.0/board/{board_id}/sprint",
        params={"state": SPRINT_STATES},
        max_pages=SPRINT_MAX_PAGES
    )

    latest = sorted(sprints, key=sprint_recency_key, reverse=True)[:limit]
    latest.sort(key=_name_key, reverse=True)

    return {"sprints": latest, "totalFetched": len(sprints)}
