"""Authentication API endpoints."""

from flask import Blueprint, current_app, g, jsonify, request
import requests

from app.sessions import end_session, require_session, start_session
from services.base_url import host_of, normalize_base_url
from services.errors import AuthFailure, ValidationError
from services.jira_client import JiraClient

bp = Blueprint("auth", __name__, url_prefix="/api")

LOGIN_FIELDS = ("domain", "email", "apiToken")


def read_login_payload():
    """Required login fields from the JSON body.

    Raises:
        ValidationError: body missing or any field empty.
    """
    data = request.get_json(silent=True) or {}
    values = [data.get(field) for field in LOGIN_FIELDS]
    if not all(values):
        raise ValidationError("domain, email, and apiToken are required")
    return values


@bp.route("/login", methods=["POST"])
def login():
    """Validate Jira credentials and start a session.

    Expects JSON body with:
        - domain: Jira site ("acme", "acme.atlassian.net" or a full URL)
        - email: User's Jira email
        - apiToken: Jira API token
    """
    try:
        domain, email, api_token = read_login_payload()
    except ValidationError as e:
        return jsonify(e.to_dict()), e.status_code

    base_url = normalize_base_url(domain)
    client = JiraClient(base_url, email, api_token,
                        timeout=current_app.config["JIRA_TIMEOUT"])

    try:
        user = client.login()
    except AuthFailure as e:
        current_app.logger.info(f"Jira rejected login for {email} on {base_url}")
        return jsonify(e.to_dict()), e.status_code
    except requests.exceptions.Timeout:
        return jsonify({"error": "Connection to Jira timed out"}), 504
    except Exception as e:
        current_app.logger.exception("Login failed")
        return jsonify({"error": "Login failed", "details": str(e)}), 500

    start_session({
        "baseUrl": base_url,
        "host": host_of(base_url),
        "email": email,
        "apiToken": api_token,
        "accountId": user["accountId"],
        "displayName": user["displayName"],
    })

    return jsonify({"ok": True, "user": user, "baseUrl": base_url})


@bp.route("/me", methods=["GET"])
@require_session
def me():
    """Current session info, without the token."""
    return jsonify({
        "baseUrl": g.jira["baseUrl"],
        "host": g.jira["host"],
        "email": g.jira["email"],
        "displayName": g.jira["displayName"],
    })


@bp.route("/logout", methods=["POST"])
@require_session
def logout():
    try:
        end_session()
    except Exception:
        current_app.logger.exception("Failed to destroy session")
        return jsonify({"error": "Failed to logout"}), 500
    return jsonify({"ok": True})
