"""
HTTP client for the Buildsy API.

Wraps the chat, project and community endpoints for scripts and other Python
callers. Failures surface as `BuildsyClientError` with a message suitable for
showing to an end user.
"""

import logging
import uuid
from collections.abc import Callable, Sequence
from typing import Any

import httpx

from app.agent.idea_extractor import draft_from_response

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 60.0

LOGIN_REQUIRED_MESSAGE = "Please log in to continue."
NOT_FOUND_MESSAGE = "Service not found."
SERVER_ERROR_MESSAGE = "Server error. Please try again later."
CONNECTION_ERROR_MESSAGE = "Unable to connect. Please check your connection."


class BuildsyClientError(Exception):
    def __init__(
        self,
        user_message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
    ):
        self.user_message = user_message
        self.status_code = status_code
        self.body = body
        super().__init__(user_message)


def user_message_for(status_code: int, body: Any = None) -> str:
    if status_code == 401:
        return LOGIN_REQUIRED_MESSAGE
    if status_code == 404:
        return NOT_FOUND_MESSAGE
    if status_code >= 500:
        return SERVER_ERROR_MESSAGE
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Request failed with status {status_code}."


class BuildsyClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        token: str | Callable[[], str | None] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self._token = token
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BuildsyClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _auth_headers(self) -> dict[str, str]:
        token = self._token() if callable(self._token) else self._token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the envelope's `data`, or the whole body when it has none."""
        try:
            response = self._client.request(method, path, headers=self._auth_headers(), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise BuildsyClientError(CONNECTION_ERROR_MESSAGE) from exc

        try:
            body = response.json()
        except ValueError:
            body = response.text

        if response.is_error:
            logger.info("%s %s returned %s", method, path, response.status_code)
            raise BuildsyClientError(
                user_message_for(response.status_code, body),
                status_code=response.status_code,
                body=body,
            )
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    # Chat

    def send_message(
        self,
        message: str,
        context: str = "general",
        additional_params: dict[str, Any] | None = None,
        session_id: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "message": message,
            "context": context,
            "additionalParams": additional_params or {},
        }
        if session_id:
            payload["sessionId"] = session_id
        return self._request("POST", "/api/chat/message", json=payload)

    def send_conversation(
        self,
        messages: Sequence[dict[str, str]],
        context: str = "general",
        additional_params: dict[str, Any] | None = None,
        session_id: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "messages": list(messages),
            "context": context,
            "additionalParams": additional_params or {},
        }
        if session_id:
            payload["sessionId"] = session_id
        return self._request("POST", "/api/chat/conversation", json=payload)

    def get_contexts(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/chat/contexts")["contexts"]

    # Projects

    def create_project(self, project: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/projects", json=project)

    def list_projects(self, page: int = 1, limit: int = 10) -> dict[str, Any]:
        return self._request("GET", "/api/projects", params={"page": page, "limit": limit})

    def get_project(self, project_id: uuid.UUID | str) -> dict[str, Any]:
        return self._request("GET", f"/api/projects/{project_id}")

    def update_project(self, project_id: uuid.UUID | str, changes: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/api/projects/{project_id}", json=changes)

    def delete_project(self, project_id: uuid.UUID | str) -> dict[str, Any]:
        return self._request("DELETE", f"/api/projects/{project_id}")

    def search_projects(
        self,
        *,
        category: str | None = None,
        difficulty: str | None = None,
        search: str | None = None,
        tech_stack: Sequence[str] | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if category:
            params["category"] = category
        if difficulty:
            params["difficulty"] = difficulty
        if search:
            params["search"] = search
        if tech_stack:
            params["techStack"] = ",".join(tech_stack)
        return self._request("GET", "/api/projects/search", params=params)

    def save_idea_from_response(self, text: str) -> dict[str, Any]:
        """Turn an assistant reply into a saved project."""
        draft = draft_from_response(text)
        logger.info("Saving extracted idea %r", draft.name)
        return self.create_project(draft.to_project_payload())

    # Community

    def get_community_projects(
        self,
        *,
        page: int = 1,
        limit: int = 12,
        category: str | None = None,
        difficulty: str | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "page": page,
            "limit": limit,
            "sortBy": sort_by,
            "sortOrder": sort_order,
        }
        for key, value in (("category", category), ("difficulty", difficulty), ("search", search)):
            if value:
                params[key] = value
        return self._request("GET", "/api/community/projects", params=params)

    def get_project_details(self, project_id: uuid.UUID | str) -> dict[str, Any]:
        return self._request("GET", f"/api/community/projects/{project_id}")

    def vote(self, project_id: uuid.UUID | str, vote_type: int) -> dict[str, Any]:
        return self._request(
            "POST", f"/api/community/projects/{project_id}/vote", json={"voteType": vote_type}
        )

    def add_comment(
        self,
        project_id: uuid.UUID | str,
        content: str,
        parent_id: uuid.UUID | str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": content}
        if parent_id:
            payload["parentId"] = str(parent_id)
        return self._request("POST", f"/api/community/projects/{project_id}/comments", json=payload)

    def get_comments(
        self, project_id: uuid.UUID | str, page: int = 1, limit: int = 20
    ) -> dict[str, Any]:
        return self._request(
            "GET",
            f"/api/community/projects/{project_id}/comments",
            params={"page": page, "limit": limit},
        )
