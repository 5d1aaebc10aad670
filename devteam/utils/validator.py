"""Input validation: checks user requests and project types before an iteration starts."""

from devteam.config import get_config


def validate_request(request: str) -> str:
    """Validate that the user request is a non-empty string within the size limit.

    Returns the stripped request on success.
    Raises ValueError if input is empty, whitespace-only, or too long.
    """
    if not isinstance(request, str) or not request.strip():
        raise ValueError("Request must be a non-empty string.")

    limit = get_config().get("max_request_chars")
    request = request.strip()
    if limit and len(request) > limit:
        raise ValueError(f"Request is {len(request)} characters; the limit is {limit}.")
    return request


def validate_project_type(project_type: str) -> str:
    """Return *project_type* if it is one of the configured project types."""
    allowed = get_config().get("project_types", [])
    if project_type not in allowed:
        raise ValueError(f"Unknown project type '{project_type}'. Must be one of: {allowed}")
    return project_type
