"""Board and sprint API endpoints."""

from flask import Blueprint, current_app, jsonify
import requests

from app.sessions import jira_client, require_session
from services.boards import list_boards, list_recent_sprints
from services.errors import UpstreamError

bp = Blueprint("boards", __name__, url_prefix="/api/boards")


@bp.route("", methods=["GET"])
@require_session
def get_boards():
    """List all boards accessible to the user, sorted by name."""
    try:
        boards = list_boards(jira_client())
    except UpstreamError as e:
        return jsonify({"error": "Failed to fetch boards", "details": e.details}), e.status_code
    except requests.exceptions.Timeout:
        return jsonify({"error": "Connection to Jira timed out"}), 504
    except Exception as e:
        current_app.logger.exception("Error fetching boards")
        return jsonify({"error": "Error fetching boards", "details": str(e)}), 500

    return jsonify({"boards": boards})


@bp.route("/<int:board_id>/sprints", methods=["GET"])
@require_session
def get_sprints(board_id):
    """Get the 26 most recent sprints of a board.

    Sprints of every state are considered; the selection is returned
    ordered by name, descending.
    """
    try:
        result = list_recent_sprints(jira_client(), board_id)
    except UpstreamError as e:
        return jsonify({"error": "Failed to fetch sprints", "details": e.details}), e.status_code
    except requests.exceptions.Timeout:
        return jsonify({"error": "Connection to Jira timed out"}), 504
    except Exception as e:
        current_app.logger.exception(f"Error fetching sprints for board {board_id}")
        return jsonify({"error": "Error fetching sprints", "details": str(e)}), 500

    return jsonify(result)
