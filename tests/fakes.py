"""In-memory stand-ins for the WebHDFS client and the console"""

import io
import posixpath

from rich.console import Console

from dfsshell.client import DFSClientError

MOD_TIME = 1700000000000


def make_console():
    return Console(
        file=io.StringIO(), highlight=False, markup=False, emoji=False, soft_wrap=True
    )


def output(console):
    return console.file.getvalue()


def not_found(path):
    return DFSClientError(
        f"File does not exist: {path}",
        exception="FileNotFoundException",
        status_code=404,
    )


class FakeClient:
    """Filesystem tree kept in a dict of path -> entry"""

    def __init__(self, home="/user/alice"):
        self.home = home
        self.entries = {"/": {"isDir": True, "data": b"", "mode": 0o755, "replication": 0}}
        self.mkdir(home)

    def add_file(self, path, data=b"", replication=3):
        self.mkdir(posixpath.dirname(path))
        self.entries[path] = {"isDir": False, "data": data, "mode": 0o644, "replication": replication}

    def _entry(self, path):
        if path not in self.entries:
            raise not_found(path)
        return self.entries[path]

    def _info(self, path):
        entry = self.entries[path]
        return {
            "name": posixpath.basename(path) or "/",
            "path": path,
            "isDir": entry["isDir"],
            "size": 0 if entry["isDir"] else len(entry["data"]),
            "mode": entry["mode"],
            "modTime": MOD_TIME,
            "accessTime": MOD_TIME,
            "owner": "alice",
            "group": "supergroup",
            "replication": entry["replication"],
            "blockSize": 134217728,
        }

    def _children(self, path):
        return sorted(p for p in self.entries if p != path and posixpath.dirname(p) == path)

    def _descendants(self, path):
        prefix = path.rstrip("/") + "/"
        return [p for p in self.entries if p.startswith(prefix)]

    def close(self):
        pass

    def home_directory(self):
        return self.home

    def ls(self, path="/"):
        entry = self._entry(path)
        if not entry["isDir"]:
            return [self._info(path)]
        return [self._info(p) for p in self._children(path)]

    def stat(self, path):
        self._entry(path)
        return self._info(path)

    def exists(self, path):
        return path in self.entries

    def mkdir(self, path, permission=None):
        parts = [p for p in path.split("/") if p]
        current = "/"
        for part in parts:
            current = posixpath.join(current, part)
            entry = self.entries.get(current)
            if entry is None:
                self.entries[current] = {
                    "isDir": True,
                    "data": b"",
                    "mode": permission if permission is not None else 0o755,
                    "replication": 0,
                }
            elif not entry["isDir"]:
                raise DFSClientError(
                    f"Parent path is not a directory: {current}",
                    exception="ParentNotDirectoryException",
                    status_code=403,
                )
        return True

    def rm(self, path, recursive=False):
        if path not in self.entries:
            return False
        descendants = self._descendants(path)
        if descendants and not recursive:
            raise DFSClientError(
                f"`{path} is non empty': Directory is not empty",
                exception="PathIsNotEmptyDirectoryException",
                status_code=403,
            )
        for p in descendants + [path]:
            del self.entries[p]
        return True

    def mv(self, old_path, new_path):
        if old_path not in self.entries or posixpath.dirname(new_path) not in self.entries:
            return False
        for p in [old_path] + self._descendants(old_path):
            self.entries[new_path + p[len(old_path):]] = self.entries.pop(p)
        return True

    def cat(self, path, offset=0, length=None):
        entry = self._entry(path)
        if entry["isDir"]:
            raise DFSClientError(f"Path is not a file: {path}", exception="FileNotFoundException")
        end = None if length is None else offset + length
        return entry["data"][offset:end]

    def write(self, path, data, overwrite=False):
        if path in self.entries and not overwrite:
            raise DFSClientError(
                f"{path} for client 127.0.0.1 already exists",
                exception="FileAlreadyExistsException",
                status_code=403,
            )
        self.add_file(path, data)

    def append(self, path, data):
        self._entry(path)["data"] += data

    def chmod(self, path, mode):
        self._entry(path)["mode"] = mode

    def setrep(self, path, replication):
        entry = self._entry(path)
        if entry["isDir"]:
            return False
        entry["replication"] = replication
        return True

    def content_summary(self, path):
        entry = self._entry(path)
        paths = [path] + self._descendants(path)
        files = [self.entries[p] for p in paths if not self.entries[p]["isDir"]]
        length = sum(len(f["data"]) for f in files)
        return {
            "directoryCount": len(paths) - len(files) if entry["isDir"] else 0,
            "fileCount": len(files),
            "length": length,
            "quota": -1,
            "spaceConsumed": sum(len(f["data"]) * f["replication"] for f in files),
            "spaceQuota": -1,
        }
