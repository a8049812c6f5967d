"""WebHDFS API Client"""

import logging
import posixpath
from typing import List, Dict, Any, Optional
from urllib.parse import quote, urlparse

import requests
from requests.exceptions import ConnectionError, Timeout

from .version import WEBHDFS_API_VERSION

logger = logging.getLogger(__name__)

WEBHDFS_PREFIX = f"/webhdfs/{WEBHDFS_API_VERSION}"


class DFSClientError(Exception):
    """Custom exception for DFS client errors"""

    def __init__(self, message, exception=None, status_code=None):
        super().__init__(message)
        # Java class name from the server's RemoteException, if any
        self.exception = exception
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.exception == "FileNotFoundException" or self.status_code == 404


def _file_info(status: Dict[str, Any], path: str) -> Dict[str, Any]:
    """Convert a WebHDFS FileStatus object into the shell's file info dict"""
    return {
        "name": posixpath.basename(path.rstrip("/")) or "/",
        "path": path,
        "isDir": status.get("type") == "DIRECTORY",
        "size": status.get("length", 0),
        "mode": int(status.get("permission") or "0", 8),
        "modTime": status.get("modificationTime", 0),
        "accessTime": status.get("accessTime", 0),
        "owner": status.get("owner", ""),
        "group": status.get("group", ""),
        "replication": status.get("replication", 0),
        "blockSize": status.get("blockSize", 0),
    }


def _remote_exception(response) -> Optional[Dict[str, Any]]:
    try:
        return response.json().get("RemoteException")
    except ValueError:
        return None


class WebHDFSClient:
    """Client for the Hadoop WebHDFS REST API"""

    def __init__(self, base_url, user=None, timeout=10):
        """
        Initialize WebHDFS client.

        Args:
            base_url: Namenode HTTP address, e.g., "http://localhost:9870"
            user: User name for simple authentication (sent as user.name)
            timeout: Request timeout in seconds (default: 10)
        """
        self.base_url = base_url.rstrip("/")
        self.user = user
        self.session = requests.Session()
        self.timeout = timeout

    def close(self):
        self.session.close()

    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{WEBHDFS_PREFIX}{quote(path)}"

    def _params(self, op: str, **extra) -> Dict[str, str]:
        params = {"op": op}
        if self.user:
            params["user.name"] = self.user
        for key, value in extra.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[key] = str(value)
        return params

    def _handle_request_error(self, e: Exception) -> None:
        """Convert request exceptions to user-friendly error messages"""
        if isinstance(e, DFSClientError):
            raise e
        # ConnectTimeout is both a Timeout and a ConnectionError
        if isinstance(e, Timeout):
            raise DFSClientError(f"Request timeout after {self.timeout}s") from e
        elif isinstance(e, ConnectionError):
            host_port = urlparse(self.base_url).netloc or "namenode"
            raise DFSClientError(
                f"Connection refused - namenode not reachable at {host_port}"
            ) from e
        elif isinstance(e, requests.exceptions.HTTPError):
            if e.response is None:
                raise DFSClientError("HTTP error") from e
            status_code = e.response.status_code
            remote = _remote_exception(e.response)
            if remote and remote.get("message"):
                raise DFSClientError(
                    remote["message"],
                    exception=remote.get("exception"),
                    status_code=status_code,
                ) from e

            # Handle specific status codes
            if status_code == 404:
                message = "No such file or directory"
            elif status_code == 403:
                message = "Permission denied"
            elif status_code == 401:
                message = "Authentication required"
            elif status_code == 500:
                message = "Internal server error"
            elif status_code == 503:
                message = "Service unavailable"
            else:
                message = f"HTTP error {status_code}"
            raise DFSClientError(message, status_code=status_code) from e
        else:
            raise DFSClientError(str(e)) from e

    def _request(self, method: str, path: str, op: str, allow_redirects=True, **params):
        logger.debug("%s %s op=%s %s", method, path, op, params)
        try:
            response = self.session.request(
                method,
                self._url(path),
                params=self._params(op, **params),
                timeout=self.timeout,
                allow_redirects=allow_redirects,
            )
            response.raise_for_status()
            return response
        except Exception as e:
            self._handle_request_error(e)

    def _send_to_datanode(self, method: str, path: str, op: str, data: bytes, **params):
        """Two-step data upload: ask the namenode where to write, then send the bytes"""
        response = self._request(method, path, op, allow_redirects=False, **params)
        location = response.headers.get("Location")
        if not location:
            raise DFSClientError(f"{op}: namenode did not return a datanode location")
        logger.debug("%s %s -> %s (%d bytes)", op, path, location, len(data))
        try:
            response = self.session.request(
                method,
                location,
                data=data,
                headers={"Content-Type": "application/octet-stream"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except Exception as e:
            self._handle_request_error(e)

    def _json(self, response, key: str):
        try:
            return response.json()[key]
        except (ValueError, KeyError) as e:
            raise DFSClientError(f"Malformed response from namenode: missing {key}") from e

    def home_directory(self) -> str:
        """Get the home directory of the current user"""
        response = self._request("GET", "/", "GETHOMEDIRECTORY")
        return self._json(response, "Path")

    def ls(self, path: str = "/") -> List[Dict[str, Any]]:
        """List directory contents (a file lists as itself)"""
        response = self._request("GET", path, "LISTSTATUS")
        statuses = self._json(response, "FileStatuses").get("FileStatus") or []
        files = []
        for status in statuses:
            suffix = status.get("pathSuffix", "")
            files.append(_file_info(status, posixpath.join(path, suffix) if suffix else path))
        files.sort(key=lambda f: f["name"])
        return files

    def stat(self, path: str) -> Dict[str, Any]:
        """Get file/directory information"""
        response = self._request("GET", path, "GETFILESTATUS")
        return _file_info(self._json(response, "FileStatus"), path)

    def exists(self, path: str) -> bool:
        try:
            self.stat(path)
        except DFSClientError as e:
            if e.not_found:
                return False
            raise
        return True

    def mkdir(self, path: str, permission: Optional[int] = None) -> bool:
        """Create a directory and any missing parents"""
        response = self._request(
            "PUT",
            path,
            "MKDIRS",
            permission=f"{permission:o}" if permission is not None else None,
        )
        return self._json(response, "boolean")

    def rm(self, path: str, recursive: bool = False) -> bool:
        """Remove a file or directory"""
        response = self._request("DELETE", path, "DELETE", recursive=recursive)
        return self._json(response, "boolean")

    def mv(self, old_path: str, new_path: str) -> bool:
        """Rename/move a file or directory"""
        response = self._request("PUT", old_path, "RENAME", destination=new_path)
        return self._json(response, "boolean")

    def cat(self, path: str, offset: int = 0, length: Optional[int] = None) -> bytes:
        """Read file content with optional offset and length

        Args:
            path: File path
            offset: Starting position (default: 0)
            length: Number of bytes to read (default: None, read to the end)
        """
        response = self._request(
            "GET",
            path,
            "OPEN",
            offset=offset if offset > 0 else None,
            length=length,
        )
        return response.content

    def write(self, path: str, data: bytes, overwrite: bool = False) -> None:
        """Create a file with the given content"""
        self._send_to_datanode("PUT", path, "CREATE", data, overwrite=overwrite)

    def append(self, path: str, data: bytes) -> None:
        """Append data to an existing file"""
        self._send_to_datanode("POST", path, "APPEND", data)

    def chmod(self, path: str, mode: int) -> None:
        """Change file permissions"""
        self._request("PUT", path, "SETPERMISSION", permission=f"{mode:o}")

    def setrep(self, path: str, replication: int) -> bool:
        """Set the replication factor of a file"""
        response = self._request("PUT", path, "SETREPLICATION", replication=replication)
        return self._json(response, "boolean")

    def content_summary(self, path: str) -> Dict[str, Any]:
        """Get directory/file/byte counts and quotas under a path"""
        response = self._request("GET", path, "GETCONTENTSUMMARY")
        return self._json(response, "ContentSummary")
