"""Session guard shared by the API blueprints."""

from functools import wraps

from flask import current_app, g, jsonify, session

from services.jira_client import JiraClient

SESSION_ID_KEY = "sid"


def get_store():
    return current_app.extensions["session_store"]


def start_session(record):
    """Store ``record`` server-side and point the cookie at it."""
    old_sid = session.get(SESSION_ID_KEY)
    if old_sid:
        get_store().destroy(old_sid)

    session.clear()
    session.permanent = True
    session[SESSION_ID_KEY] = get_store().create(record)


def end_session():
    """Forget the current session on both sides."""
    sid = session.get(SESSION_ID_KEY)
    if sid:
        get_store().destroy(sid)
    session.clear()


def current_record():
    """Credential record of the current request, or None."""
    sid = session.get(SESSION_ID_KEY)
    if not sid:
        return None
    return get_store().get(sid)


def require_session(view):
    """Reject the request with 401 unless a Jira session exists.

    The record is exposed as ``g.jira`` for the view.
    """
    @wraps(view)
    def wrapper(*args, **kwargs):
        record = current_record()
        if record is None:
            session.pop(SESSION_ID_KEY, None)
            return jsonify({"error": "Not authenticated"}), 401
        g.jira = record
        return view(*args, **kwargs)

    return wrapper


def jira_client():
    """JiraClient for the authenticated user of this request."""
    return JiraClient.from_session(g.jira, timeout=current_app.config["JIRA_TIMEOUT"])
