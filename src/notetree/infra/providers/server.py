from __future__ import annotations

"""
HTTP Server Storage Provider.

Client for the notebook backend REST API. Notes are stored centrally per
user and requests are authenticated with a bearer JWT obtained from the
password login endpoint.
"""

import logging
import os
import time
from typing import Any, Dict, List, Optional, Tuple

import requests
from jose import JWTError, jwt

from notetree.domain import constants as const
from notetree.domain.errors import (
    BackendConnectionError,
    DuplicateError,
    InvalidCredentialsError,
    InvalidPathError,
    NoteStoreError,
    NotFoundError,
)
from notetree.domain.node_models import DirectoryNode, FileNode, Node, node_to_dict
from notetree.domain.tree_models import Path
from notetree.infra.fs import get_user_data_dir
from notetree.infra.providers.base import StorageProvider

logger = logging.getLogger(__name__)

USER_AGENT = "NoteTree-Client/1.0.0"

# HTTP status to error class mapping for non-2xx responses
_STATUS_ERRORS = {
    401: InvalidCredentialsError,
    404: NotFoundError,
    409: DuplicateError,
}


class ServerProvider(StorageProvider):
    """
    Storage provider backed by the notebook HTTP API.

    Attributes:
        base_url: Server origin, e.g. ``https://notes.example.org``.
    """

    def __init__(
            self,
            base_url: str,
            token_file: Optional[str] = None,
            timeout: int = const.HTTP_TIMEOUT
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._api_url = self.base_url + const.API_BASE_PATH
        self._timeout = timeout
        self._token_file = token_file or os.path.join(get_user_data_dir(), const.TOKEN_FILENAME)
        self._token: Optional[str] = self._read_token()
        self.description = f"Login at {self.base_url}"

    # -------------------------------------------------------------------------
    # AUTHENTICATION
    # -------------------------------------------------------------------------

    def auth(self, username: str, password: str) -> None:
        """
        Authenticate and persist the returned token for later sessions.

        Raises:
            InvalidCredentialsError: If the credentials are rejected.
            BackendConnectionError: If the server is unreachable.
        """
        data = self._request("POST", "/user/auth", {"username": username, "password": password},
                             authenticated=False)
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise NoteStoreError("Authentication response carried no token.")

        self._token = str(token)
        self._write_token(self._token)
        logger.info(f"ServerProvider: Authenticated as '{username}'.")

    def is_valid(self) -> bool:
        """Return True if a token is present and its ``exp`` claim is in the future."""
        if not self._token:
            return False

        try:
            claims = jwt.get_unverified_claims(self._token)
        except JWTError:
            return False

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)):
            return False
        return exp > time.time()

    def logout(self) -> None:
        self._token = None
        if os.path.exists(self._token_file):
            os.remove(self._token_file)

    # -------------------------------------------------------------------------
    # PROVIDER API
    # -------------------------------------------------------------------------

    def fetch_nodes(self) -> List[Node]:
        api_nodes = self._request("GET", "/node")
        if not isinstance(api_nodes, list):
            raise NoteStoreError("Malformed node list received from server.")
        return build_tree_from_api_nodes(api_nodes)

    def add_node(self, parent: Path, node: Node) -> Tuple[Path, Node]:
        api_node = self._request("POST", "/node", {"parent": parent, "node": node_to_dict(node)})
        return list(parent), convert_api_node(api_node)

    def change_node_name(self, path: Path, new_name: str) -> Tuple[Path, str]:
        api_node = self._request("PUT", "/node/name", {"path": path, "newName": new_name})
        return list(path), str(api_node.get("nodeName", new_name))

    def delete_node(self, path: Path) -> Path:
        self._request("DELETE", "/node", {"path": path})
        return list(path)

    def set_page_content(self, path: Path, content: str) -> None:
        self._request("PUT", "/node/content", {"path": path, "newContent": content})

    def move_node(self, node_path: Path, new_parent_path: Path) -> Tuple[Path, Path]:
        data = self._request("PUT", "/node/parent", {
            "nodePath": node_path,
            "newParentPath": new_parent_path,
        })
        if not isinstance(data, dict) or "oldPath" not in data or "newPath" not in data:
            raise NoteStoreError("Malformed move response.")
        return list(data["oldPath"]), list(data["newPath"])

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _request(
            self,
            method: str,
            endpoint: str,
            payload: Optional[Dict[str, Any]] = None,
            authenticated: bool = True
    ) -> Any:
        headers = {"User-Agent": USER_AGENT, "Content-Type": "application/json"}
        if authenticated:
            headers["Authorization"] = f"Bearer {self._token}"

        url = self._api_url + endpoint
        logger.debug(f"ServerProvider: {method} {url}")

        try:
            response = requests.request(
                method, url, json=payload, headers=headers, timeout=self._timeout
            )
        except requests.exceptions.RequestException as e:
            raise BackendConnectionError(str(e)) from e

        if not response.ok:
            raise response_to_error(response)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise NoteStoreError(f"Invalid JSON from {endpoint}: {e}") from e

    def _read_token(self) -> Optional[str]:
        if not os.path.exists(self._token_file):
            return None
        try:
            with open(self._token_file, "r", encoding="utf-8") as f:
                return f.read().strip() or None
        except OSError as e:
            logger.warning(f"ServerProvider: Cannot read stored token: {e}")
            return None

    def _write_token(self, token: str) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self._token_file)), exist_ok=True)
            with open(self._token_file, "w", encoding="utf-8") as f:
                f.write(token)
        except OSError as e:
            logger.warning(f"ServerProvider: Token not persisted: {e}")


# -----------------------------------------------------------------------------
# WIRE CONVERSION
# -----------------------------------------------------------------------------

def response_to_error(response: requests.Response) -> NoteStoreError:
    """Map a failed HTTP response to the matching store error."""
    error_cls = _STATUS_ERRORS.get(response.status_code)
    if error_cls is not None:
        return error_cls()
    return NoteStoreError(f"Status {response.status_code} {response.reason}")


def convert_api_node(api_node: Dict[str, Any]) -> Node:
    """Build a childless document node from one API node record."""
    name = str(api_node["nodeName"])
    if api_node.get("isDirectory"):
        return DirectoryNode(name=name)
    return FileNode(name=name, content=api_node.get("content") or "")


def build_tree_from_api_nodes(api_nodes: List[Dict[str, Any]]) -> List[Node]:
    """
    Assemble the flat API node list into top-level nodes with subtrees.

    Args:
        api_nodes: Records with ``nodeId``, ``nodeName``, ``parentId``,
            ``isDirectory`` and ``content``.

    Returns:
        List[Node]: Nodes whose ``parentId`` is null.

    Raises:
        InvalidPathError: If a record references a missing or file parent.
    """
    lookup: Dict[Any, Node] = {
        api_node["nodeId"]: convert_api_node(api_node) for api_node in api_nodes
    }

    root_nodes: List[Node] = []
    for api_node in api_nodes:
        node = lookup[api_node["nodeId"]]
        parent_id = api_node.get("parentId")
        if parent_id is None:
            root_nodes.append(node)
            continue

        parent = lookup.get(parent_id)
        if parent is None:
            raise InvalidPathError(f"Parent of node '{node.name}' not found.")
        if not isinstance(parent, DirectoryNode):
            raise InvalidPathError(f"Parent of node '{node.name}' is not a directory.")
        parent.children[node.name] = node

    return root_nodes
