# SPDX-FileCopyrightText: 2025 Todoist Completed Contributors
# SPDX-License-Identifier: MPL-2.0

"""Error types raised while fetching completed tasks."""


class TodoistError(Exception):
    """Base class for every failure in the completed-tasks pipeline."""


class ConfigurationError(TodoistError):
    """Missing or invalid configuration, such as an unset API token."""


# The credential check is the only configuration failure a fetch can hit.
AuthenticationError = ConfigurationError


class RemoteServiceError(TodoistError):
    """Todoist answered with a non-success HTTP status."""

    def __init__(self, endpoint: str, status_code: int, body: str):
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body
        super().__init__(f"Todoist {endpoint} API error: {status_code} - {body}")


class NetworkError(TodoistError):
    """The request never produced an HTTP response."""


class MalformedResponseError(TodoistError):
    """The response parsed but lacks the expected structure."""


class TruncatedResultError(TodoistError):
    """More results exist than the service returned."""
