"""Sprint report construction.

Two upstream sources feed the report:

1. The Greenhopper sprint report that backs the Jira UI. It knows which
   issues were completed, left open or removed, which were added after the
   sprint started, and how estimates changed. It is undocumented and not
   always available.
2. A plain JQL search over the sprint. Always available, but only carries
   the current state of each issue.

The rich report is preferred; the search is the fallback whenever it
produces no rows.
"""

import logging
import math
import re
from typing import Optional

from services.jira_client import FetchResult, JiraClient

logger = logging.getLogger(__name__)

DEFAULT_STORY_POINT_FIELD = "customfield_10016"
SEARCH_MAX_RESULTS = 200
SEARCH_FIELDS = ["summary", "status", "assignee", "issuetype", "priority",
                 DEFAULT_STORY_POINT_FIELD]

COMPLETED = "Completed"
NOT_COMPLETED = "NotCompleted"
REMOVED = "Removed"

# Rich report bucket -> row action, in output order
REPORT_BUCKETS = [
    ("completedIssues", COMPLETED),
    ("issuesNotCompletedInCurrentSprint", NOT_COMPLETED),
    ("puntedIssues", REMOVED),
]

SOURCE_SPRINT_REPORT = "sprintreport"
SOURCE_SEARCH = "search"

_STORY_POINTS_NAME = re.compile(r"story\s*points", re.IGNORECASE)


def to_points(value) -> Optional[float]:
    """Numeric story point value, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def points_change(initial, final):
    if initial is None or final is None:
        return None
    return abs(final - initial)


def normalize_added_keys(raw) -> set:
    """Keys of issues added mid-sprint.

    Jira sends either a list of keys or an object keyed by issue key.
    """
    if isinstance(raw, list):
        return {key for key in raw if isinstance(key, str)}
    if isinstance(raw, dict):
        return set(raw.keys())
    return set()


def _stat_value(issue: dict, stat_name: str):
    stat = issue.get(stat_name) or {}
    return (stat.get("statFieldValue") or {}).get("value")


def resolve_report_field(report: dict) -> str:
    """Story point field id the rich report was computed with."""
    linked_pages = ((report.get("sprintState") or {}).get("linkedPages") or {})
    contents = report.get("contents") or {}
    return (linked_pages.get("estimateStatisticFieldId")
            or contents.get("estimateFieldId")
            or DEFAULT_STORY_POINT_FIELD)


def map_report_issue(issue: dict, action: str, added_keys: set) -> dict:
    """Row for one issue of the rich report."""
    initial = to_points(_stat_value(issue, "estimateStatistic"))
    final = to_points(_stat_value(issue, "currentEstimateStatistic"))
    key = issue.get("key")

    return {
        "Action": action,
        "Key": key,
        "Added": "*" if key in added_keys else "",
        "Summary": issue.get("summary"),
        "IssueType": issue.get("typeName"),
        "Priority": issue.get("priorityName"),
        "Status": issue.get("statusName"),
        "Assignee": (issue.get("assigneeDisplayName")
                     or issue.get("assigneeName")
                     or issue.get("assignee")
                     or ""),
        "PointsInitial": initial,
        "PointsFinal": final,
        "PointsChange": points_change(initial, final),
    }


def rows_from_sprint_report(report: dict) -> dict:
    """Rows, totals and meta from a rich sprint report payload."""
    contents = report.get("contents") or {}
    added_keys = normalize_added_keys(contents.get("issueKeysAddedDuringSprint"))

    rows = []
    counts = {}
    for bucket, action in REPORT_BUCKETS:
        issues = contents.get(bucket) or []
        rows.extend(map_report_issue(issue, action, added_keys) for issue in issues)
        counts[action] = len(issues)

    return {
        "rows": rows,
        "totals": {
            "completed": counts[COMPLETED],
            "notCompleted": counts[NOT_COMPLETED],
            "removed": counts[REMOVED],
        },
        "meta": {
            "storyPointField": resolve_report_field(report),
            "source": SOURCE_SPRINT_REPORT,
        },
    }


def is_done(fields: dict) -> bool:
    status = fields.get("status") or {}
    if (status.get("name") or "").lower() == "done":
        return True
    return (status.get("statusCategory") or {}).get("key") == "done"


def map_search_issue(issue: dict, story_point_field: str) -> dict:
    """Row for one issue of a JQL search result.

    Scope change and initial estimates are not available from search.
    """
    fields = issue.get("fields") or {}
    points = fields.get(story_point_field)
    # only JSON numbers count here, numeric strings do not
    points = to_points(points) if isinstance(points, (int, float)) else None

    return {
        "Action": COMPLETED if is_done(fields) else NOT_COMPLETED,
        "Key": issue.get("key"),
        "Added": None,
        "Summary": fields.get("summary"),
        "IssueType": (fields.get("issuetype") or {}).get("name"),
        "Priority": (fields.get("priority") or {}).get("name"),
        "Status": (fields.get("status") or {}).get("name"),
        "Assignee": (fields.get("assignee") or {}).get("displayName") or "",
        "PointsInitial": None,
        "PointsFinal": points,
        "PointsChange": None,
    }


def find_story_points_field(fields: list) -> Optional[str]:
    """Id of the first catalog field named like "Story Points"."""
    for field in fields:
        if _STORY_POINTS_NAME.search(field.get("name") or ""):
            return field.get("id")
    return None


def choose_source(primary: Optional[dict]) -> str:
    """Which source the report should come from.

    ``primary`` is the rich report outcome, or None when it could not be
    fetched at all.
    """
    if primary and primary["rows"]:
        return SOURCE_SPRINT_REPORT
    return SOURCE_SEARCH


class SprintReportBuilder:
    """Builds the report for one sprint using a user's Jira client."""

    def __init__(self, client: JiraClient):
        self.client = client

    def _origin_board_id(self, sprint_id):
        """Board the sprint was created on, when Jira tells us."""
        result = self.client.fetch(f"/rest/agile/1.0/sprint/{sprint_id}")
        if not result.ok or not isinstance(result.data, dict):
            return None
        return result.data.get("originBoardId") or result.data.get("rapidViewId") or None

    def _fetch_sprint_report(self, board_id, sprint_id) -> FetchResult:
        return self.client.fetch(
            "/rest/greenhopper/1.0/rapid/charts/sprintreport",
            params={"rapidViewId": board_id, "sprintId": sprint_id}
        )

    def primary_report(self, sprint_id) -> Optional[dict]:
        """Report from the rich sprint report, or None if unavailable."""
        board_id = self._origin_board_id(sprint_id)
        if not board_id:
            logger.info(f"No origin board for sprint {sprint_id}, using search")
            return None

        result = self._fetch_sprint_report(board_id, sprint_id)
        if not result.ok or not isinstance(result.data, dict):
            return None

        return rows_from_sprint_report(result.data)

    def _resolve_search_field(self, issues: list) -> str:
        """Story point field for search results.

        Only consults the field catalog when no issue carries the default
        field. The issues are not fetched again with the field found there,
        so their PointsFinal stays None in that case.
        """
        if any(DEFAULT_STORY_POINT_FIELD in (issue.get("fields") or {})
               for issue in issues):
            return DEFAULT_STORY_POINT_FIELD

        result = self.client.fetch("/rest/api/3/field")
        if result.ok and isinstance(result.data, list):
            found = find_story_points_field(result.data)
            if found:
                return found

        return DEFAULT_STORY_POINT_FIELD

    def search_report(self, sprint_id) -> dict:
        """Report from a JQL search over the sprint.

        Raises:
            UpstreamError: the search itself failed.
        """
        data = self.client.get("/rest/api/3/search", params={
            "jql": f"sprint = {sprint_id} ORDER BY status, priority, key",
            "maxResults": SEARCH_MAX_RESULTS,
            "fields": ",".join(SEARCH_FIELDS),
        })
        issues = data.get("issues") or []
        field = self._resolve_search_field(issues)

        rows = [map_search_issue(issue, field) for issue in issues]
        completed = sum(1 for row in rows if row["Action"] == COMPLETED)

        return {
            "rows": rows,
            "totals": {
                "completed": completed,
                "notCompleted": len(rows) - completed,
                "removed": 0,
            },
            "meta": {"storyPointField": field, "source": SOURCE_SEARCH},
        }

    def build(self, sprint_id) -> dict:
        """Full report for ``sprint_id``."""
        primary = self.primary_report(sprint_id)

        if choose_source(primary) == SOURCE_SPRINT_REPORT:
            report = primary
        else:
            report = self.search_report(sprint_id)

        return {"sprintId": sprint_id, **report}
