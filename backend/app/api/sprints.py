"""Sprint report API endpoint."""

from flask import Blueprint, current_app, jsonify
import requests

from app.sessions import jira_client, require_session
from services.errors import UpstreamError
from services.sprint_report import SprintReportBuilder

bp = Blueprint("sprints", __name__, url_prefix="/api/sprints")


@bp.route("/<int:sprint_id>/report", methods=["GET"])
@require_session
def get_report(sprint_id):
    """Sprint report: issues grouped by outcome, with story points.

    Returns:
        - sprintId
        - rows: one per issue (Completed, NotCompleted, then Removed)
        - totals: count per outcome
        - meta: story point field used and which source the rows came from
    """
    try:
        report = SprintReportBuilder(jira_client()).build(sprint_id)
    except UpstreamError as e:
        return jsonify({"error": "Failed to fetch sprint issues", "details": e.details}), e.status_code
    except requests.exceptions.Timeout:
        return jsonify({"error": "Connection to Jira timed out"}), 504
    except Exception as e:
        current_app.logger.exception(f"Error building sprint report {sprint_id}")
        return jsonify({"error": "Error building sprint report", "details": str(e)}), 500

    return jsonify(report)
