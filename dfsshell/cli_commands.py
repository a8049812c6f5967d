"""Output formatting and file transfer helpers used by the fs commands"""

import os
import posixpath
import sys
from collections import deque
from datetime import datetime, timezone
from typing import Any, Dict, List

from rich.console import Console

console = Console(highlight=False, markup=False, emoji=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, markup=False, emoji=False, soft_wrap=True)

UNITS = ["K", "M", "G", "T", "P", "E"]


def format_permissions(mode: int, is_dir: bool) -> str:
    """Format permissions in Unix style"""
    result = "d" if is_dir else "-"
    result += "r" if mode & 0o400 else "-"
    result += "w" if mode & 0o200 else "-"
    result += "x" if mode & 0o100 else "-"
    result += "r" if mode & 0o040 else "-"
    result += "w" if mode & 0o020 else "-"
    result += "x" if mode & 0o010 else "-"
    result += "r" if mode & 0o004 else "-"
    result += "w" if mode & 0o002 else "-"
    result += "x" if mode & 0o001 else "-"
    if mode & 0o1000:
        # sticky bit replaces the last execute slot
        result = result[:-1] + ("t" if mode & 0o001 else "T")
    return result


def format_size(size: int, human: bool = False) -> str:
    """Format a byte count, optionally with binary unit prefixes (1.5 K, 128 M)"""
    if not human or abs(size) < 1024:
        return str(size)
    value = float(size)
    unit = ""
    for unit in UNITS:
        value /= 1024
        if abs(value) < 1024:
            break
    text = f"{value:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text} {unit}"


def format_time(millis: int) -> str:
    """Format a modification time for listings (local time, minute precision)"""
    return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M")


def write_bytes(out: Console, data: bytes):
    """Write raw file content to a console's underlying stream"""
    stream = out.file
    stream.flush()
    buffer = getattr(stream, "buffer", None)
    if buffer is not None:
        buffer.write(data)
        buffer.flush()
    else:
        stream.write(data.decode("utf-8", errors="replace"))
        stream.flush()


def print_listing(out: Console, entries: List[Dict[str, Any]], human: bool = False, header: bool = True):
    """Print entries in `ls` long format with columns aligned across the listing"""
    if header:
        out.print(f"Found {len(entries)} items")
    if not entries:
        return

    def replication(f):
        return "-" if f["isDir"] else str(f["replication"])

    repl_width = max(len(replication(f)) for f in entries)
    owner_width = max(len(f["owner"]) for f in entries)
    group_width = max(len(f["group"]) for f in entries)
    size_width = max(len(format_size(f["size"], human)) for f in entries)

    for f in entries:
        out.print(
            f"{format_permissions(f['mode'], f['isDir'])} "
            f"{replication(f):>{repl_width + 3}} "
            f"{f['owner']:<{owner_width}} "
            f"{f['group']:<{group_width}} "
            f"{format_size(f['size'], human):>{size_width}} "
            f"{format_time(f['modTime'])} "
            f"{f['path']}"
        )


def format_stat(fmt: str, info: Dict[str, Any]) -> str:
    """Expand a `stat` format string for one file

    Supported specifiers: %a (octal permissions), %A (symbolic permissions),
    %b (length), %F (type), %g (group), %n (name), %o (block size),
    %r (replication), %u (owner), %y (UTC date), %Y (milliseconds), %%.
    """
    mtime = datetime.fromtimestamp(info["modTime"] / 1000, tz=timezone.utc)
    values = {
        "a": f"{info['mode']:o}",
        "A": format_permissions(info["mode"], info["isDir"])[1:],
        "b": str(info["size"]),
        "F": "directory" if info["isDir"] else "regular file",
        "g": info["group"],
        "n": info["name"],
        "o": str(info["blockSize"]),
        "r": str(info["replication"]),
        "u": info["owner"],
        "y": mtime.strftime("%Y-%m-%d %H:%M:%S"),
        "Y": str(info["modTime"]),
        "%": "%",
    }
    result = []
    i = 0
    while i < len(fmt):
        char = fmt[i]
        if char == "%" and i + 1 < len(fmt) and fmt[i + 1] in values:
            result.append(values[fmt[i + 1]])
            i += 2
        else:
            result.append(char)
            i += 1
    return "".join(result)


def format_du_line(size: int, consumed: int, path: str, human: bool = False) -> str:
    return f"{format_size(size, human):<10}  {format_size(consumed, human):<10}  {path}"


def _quota(value: int, human: bool = False, inf: str = "none") -> str:
    if value is None or value < 0:
        return inf
    return format_size(value, human)


def format_count_line(summary: Dict[str, Any], path: str, quotas: bool = False, human: bool = False) -> str:
    """Format one `count` line: DIR_COUNT FILE_COUNT CONTENT_SIZE PATHNAME"""
    line = (
        f"{summary.get('directoryCount', 0):>12} "
        f"{summary.get('fileCount', 0):>12} "
        f"{format_size(summary.get('length', 0), human):>18} "
        f"{path}"
    )
    if not quotas:
        return line

    quota = summary.get("quota", -1)
    space_quota = summary.get("spaceQuota", -1)
    used = summary.get("directoryCount", 0) + summary.get("fileCount", 0)
    remaining = quota - used if quota is not None and quota >= 0 else -1
    remaining_space = (
        space_quota - summary.get("spaceConsumed", 0)
        if space_quota is not None and space_quota >= 0
        else -1
    )
    prefix = (
        f"{_quota(quota):>12} "
        f"{_quota(remaining, inf='inf'):>15} "
        f"{_quota(space_quota, human):>15} "
        f"{_quota(remaining_space, human, inf='inf'):>15} "
    )
    return prefix + line


def read_local(local_path: str) -> bytes:
    """Read a local file, or stdin when the path is "-" """
    if local_path == "-":
        return sys.stdin.buffer.read()
    with open(local_path, "rb") as f:
        return f.read()


def upload_file(client, local_path: str, remote_path: str, overwrite: bool = False) -> int:
    """Upload a single file and return its size"""
    content = read_local(local_path)
    client.write(remote_path, content, overwrite=overwrite)
    return len(content)


def upload_directory(client, local_dir: str, remote_dir: str, overwrite: bool = False) -> int:
    """Upload a directory recursively and return the number of files sent"""
    client.mkdir(remote_dir)
    total_files = 0

    # Walk through the local directory
    for root, dirs, files in os.walk(local_dir):
        rel_path = os.path.relpath(root, local_dir)
        if rel_path == ".":
            current_remote_dir = remote_dir
        else:
            # Convert Windows paths to Unix-style
            rel_path = rel_path.replace("\\", "/")
            current_remote_dir = posixpath.join(remote_dir, rel_path)

        for dir_name in dirs:
            client.mkdir(posixpath.join(current_remote_dir, dir_name))

        for file_name in files:
            upload_file(
                client,
                os.path.join(root, file_name),
                posixpath.join(current_remote_dir, file_name),
                overwrite=overwrite,
            )
            total_files += 1

    return total_files


def download_file(client, remote_path: str, local_path: str) -> int:
    """Download a single file and return its size"""
    content = client.cat(remote_path)

    # Create parent directory if needed
    local_dir = os.path.dirname(local_path)
    if local_dir and not os.path.exists(local_dir):
        os.makedirs(local_dir)

    with open(local_path, "wb") as f:
        f.write(content)
    return len(content)


def download_directory(client, remote_dir: str, local_dir: str) -> int:
    """Download a directory recursively and return the number of files fetched"""
    os.makedirs(local_dir, exist_ok=True)
    total_files = 0

    # Queue for BFS traversal
    queue = deque([(remote_dir, local_dir)])
    while queue:
        current_remote_dir, current_local_dir = queue.popleft()
        for file_info in client.ls(current_remote_dir):
            local_file_path = os.path.join(current_local_dir, file_info["name"])
            if file_info["isDir"]:
                os.makedirs(local_file_path, exist_ok=True)
                queue.append((file_info["path"], local_file_path))
            else:
                download_file(client, file_info["path"], local_file_path)
                total_files += 1

    return total_files


def copy_file(client, source: str, destination: str, overwrite: bool = False):
    """Copy a remote file by reading it through the client"""
    content = client.cat(source)
    client.write(destination, content, overwrite=overwrite)


def copy_directory(client, src_dir: str, dst_dir: str, overwrite: bool = False) -> int:
    """Copy a remote directory tree; returns the number of files copied"""
    client.mkdir(dst_dir)
    total_files = 0
    queue = deque([(src_dir, dst_dir)])
    while queue:
        current_src, current_dst = queue.popleft()
        for file_info in client.ls(current_src):
            target = posixpath.join(current_dst, file_info["name"])
            if file_info["isDir"]:
                client.mkdir(target)
                queue.append((file_info["path"], target))
            else:
                copy_file(client, file_info["path"], target, overwrite=overwrite)
                total_files += 1
    return total_files
