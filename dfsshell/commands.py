"""fs Commands and the Command Factory"""

import fnmatch
import glob
import os
import posixpath
import re
from typing import Any, Dict, List, Optional

from . import cli_commands
from .client import DFSClientError

GLOB_CHARS = re.compile(r"[*?\[]")


class UsageError(Exception):
    """Raised when a command is given bad options or the wrong number of arguments"""


class PathError(Exception):
    """A failure tied to one path argument, reported as "`path': reason" """

    def __init__(self, path: str, reason: str):
        super().__init__(f"`{path}': {reason}")
        self.path = path
        self.reason = reason


# Failures reported against one argument; the command moves on to the next
PATH_ERRORS = (PathError, DFSClientError, OSError)


def has_glob(path: str) -> bool:
    return GLOB_CHARS.search(path) is not None


class CommandFormat:
    """Parses leading single-dash flags and checks the argument count.

    Example:
        opts, args = CommandFormat(1, None, "p").parse(["-p", "/a/b"])
        # opts == {"p": True}, args == ["/a/b"]
    """

    def __init__(self, min_args: int, max_args: Optional[int], *flags: str):
        self.min_args = min_args
        self.max_args = max_args
        self.flags = flags

    def parse(self, args: List[str]):
        opts = {flag: False for flag in self.flags}
        rest = list(args)
        while rest and rest[0].startswith("-") and rest[0] != "-":
            arg = rest.pop(0)
            if arg == "--":
                break
            if arg[1:] not in opts:
                raise UsageError(f"Illegal option {arg}")
            opts[arg[1:]] = True

        if len(rest) < self.min_args:
            raise UsageError(
                f"Not enough arguments: expected {self.min_args} but got {len(rest)}"
            )
        if self.max_args is not None and len(rest) > self.max_args:
            raise UsageError(
                f"Too many arguments: expected {self.max_args} but got {len(rest)}"
            )
        return opts, rest


class Command:
    """Base class for fs commands.

    Subclasses set NAME, USAGE and DESCRIPTION, parse their options in
    process_options() and handle each expanded path in process_path().
    Errors on one path are reported and counted; the remaining paths are
    still processed.
    """

    NAME = ""
    USAGE = ""
    DESCRIPTION = ""

    def __init__(self, shell):
        self.shell = shell
        # Name as registered in the factory, e.g. "-ls"
        self.name = None
        self.exit_code = 0
        self.num_errors = 0

    @property
    def client(self):
        return self.shell.client

    @property
    def out(self):
        return self.shell.out

    @property
    def err(self):
        return self.shell.err

    def get_name(self) -> str:
        name = self.name or self.NAME
        return name[1:] if name.startswith("-") else name

    def get_usage(self) -> str:
        return self.USAGE

    def get_description(self) -> str:
        return self.DESCRIPTION

    def run(self, args: List[str]) -> int:
        """Run the command; returns 0 on success and 1 if any argument failed"""
        self.exit_code = 0
        self.num_errors = 0
        self.process_arguments(self.process_options(list(args)))
        return 1 if self.num_errors else self.exit_code

    def process_options(self, args: List[str]) -> List[str]:
        return args

    def process_arguments(self, args: List[str]):
        for arg in args:
            try:
                self.process_argument(arg)
            except PATH_ERRORS as e:
                self.display_error(self.path_error(arg, e))

    def process_argument(self, arg: str):
        for item in self.expand_argument(arg):
            try:
                self.process_path(item)
            except PATH_ERRORS as e:
                self.display_error(self.path_error(item["path"], e))

    def process_path(self, item: Dict[str, Any]):
        raise NotImplementedError

    def display_error(self, error: Exception):
        self.num_errors += 1
        self.err.print(f"{self.get_name()}: {error}")

    @staticmethod
    def path_error(path: str, error: Exception) -> Exception:
        if isinstance(error, DFSClientError) and error.not_found:
            return PathError(path, "No such file or directory")
        if isinstance(error, OSError):
            # local file system failure, e.g. get into a read-only directory
            return PathError(error.filename or path, error.strerror or str(error))
        return error

    def resolve(self, path: str) -> str:
        return self.shell.resolve_path(path)

    def stat_or_none(self, path: str) -> Optional[Dict[str, Any]]:
        try:
            return self.client.stat(path)
        except DFSClientError as e:
            if e.not_found:
                return None
            raise

    def expand_argument(self, arg: str) -> List[Dict[str, Any]]:
        """Resolve one argument to file infos, expanding * ? [..] patterns"""
        path = self.resolve(arg)
        if not has_glob(path):
            try:
                return [self.client.stat(path)]
            except DFSClientError as e:
                raise self.path_error(arg, e)

        matches = self.glob(path)
        if not matches:
            raise PathError(arg, "No such file or directory")
        return matches

    def glob(self, pattern: str) -> List[Dict[str, Any]]:
        parts = [p for p in pattern.split("/") if p]
        candidates = [("/", None)]
        for i, part in enumerate(parts):
            last = i == len(parts) - 1
            next_candidates = []
            for base, _ in candidates:
                if not has_glob(part):
                    next_candidates.append((posixpath.join(base, part), None))
                    continue
                try:
                    entries = self.client.ls(base)
                except DFSClientError:
                    continue
                for entry in entries:
                    if fnmatch.fnmatchcase(entry["name"], part) and (last or entry["isDir"]):
                        next_candidates.append((entry["path"], entry))
            candidates = next_candidates

        results = []
        for path, info in candidates:
            if info is None:
                info = self.stat_or_none(path)
                if info is None:
                    continue
            results.append(info)
        results.sort(key=lambda f: f["path"])
        return results

    def walk_files(self, item: Dict[str, Any]):
        """Yield every file under item (item itself if it is a file)"""
        if not item["isDir"]:
            yield item
            return
        for entry in self.client.ls(item["path"]):
            yield from self.walk_files(entry)


class Ls(Command):
    NAME = "ls"
    USAGE = "[-d] [-h] [-R] [<path> ...]"
    DESCRIPTION = (
        "List the contents that match the specified file pattern. If path is not "
        "specified, the contents of the working directory are listed.\n"
        "  -d  Directories are listed as plain files.\n"
        "  -h  Formats the sizes of files in a human-readable fashion.\n"
        "  -R  Recursively list the contents of directories."
    )

    def process_options(self, args):
        opts, paths = CommandFormat(0, None, "d", "h", "R").parse(args)
        self.dir_only = opts["d"]
        self.human = opts["h"]
        self.recursive = opts["R"]
        return paths or [self.shell.working_directory]

    def process_path(self, item):
        if not item["isDir"] or self.dir_only:
            cli_commands.print_listing(self.out, [item], self.human, header=False)
            return
        entries = self.client.ls(item["path"])
        cli_commands.print_listing(self.out, entries, self.human, header=not self.recursive)
        if self.recursive:
            for entry in entries:
                if entry["isDir"]:
                    self.process_path(entry)


class Mkdir(Command):
    NAME = "mkdir"
    USAGE = "[-p] <path> ..."
    DESCRIPTION = (
        "Create a directory in specified location.\n"
        "  -p  Do not fail if the directory already exists; create missing parents."
    )

    def process_options(self, args):
        opts, paths = CommandFormat(1, None, "p").parse(args)
        self.create_parents = opts["p"]
        return paths

    def process_argument(self, arg):
        path = self.resolve(arg)
        info = self.stat_or_none(path)
        if info is not None:
            if not info["isDir"]:
                raise PathError(arg, "Is not a directory")
            if not self.create_parents:
                raise PathError(arg, "File exists")
            return

        if not self.create_parents:
            parent = posixpath.dirname(path)
            if self.stat_or_none(parent) is None:
                raise PathError(posixpath.dirname(arg.rstrip("/")) or parent, "No such file or directory")
        if not self.client.mkdir(path):
            raise PathError(arg, "Could not create directory")


class Rm(Command):
    NAME = "rm"
    USAGE = "[-f] [-r|-R] <src> ..."
    DESCRIPTION = (
        "Delete all files that match the specified file pattern.\n"
        "  -f     Do not report an error if the file does not exist.\n"
        "  -[rR]  Recursively deletes directories."
    )

    def process_options(self, args):
        opts, paths = CommandFormat(0, None, "f", "r", "R").parse(args)
        self.force = opts["f"]
        self.recursive = opts["r"] or opts["R"]
        if not paths and not self.force:
            raise UsageError("Not enough arguments: expected 1 but got 0")
        return paths

    def process_argument(self, arg):
        try:
            items = self.expand_argument(arg)
        except PathError:
            if self.force:
                return
            raise
        for item in items:
            try:
                self.process_path(item)
            except PATH_ERRORS as e:
                self.display_error(self.path_error(item["path"], e))

    def process_path(self, item):
        if item["isDir"] and not self.recursive:
            raise PathError(item["path"], "Is a directory")
        if not self.client.rm(item["path"], recursive=self.recursive):
            raise PathError(item["path"], "Delete failed")
        self.out.print(f"Deleted {item['path']}")


class Rmdir(Command):
    NAME = "rmdir"
    USAGE = "[--ignore-fail-on-non-empty] <dir> ..."
    DESCRIPTION = (
        "Removes the directory entry specified by each directory argument, "
        "provided it is empty."
    )

    def process_options(self, args):
        opts, paths = CommandFormat(1, None, "-ignore-fail-on-non-empty").parse(args)
        self.ignore_non_empty = opts["-ignore-fail-on-non-empty"]
        return paths

    def process_path(self, item):
        if not item["isDir"]:
            raise PathError(item["path"], "Is not a directory")
        if self.client.ls(item["path"]):
            if self.ignore_non_empty:
                return
            raise PathError(item["path"], "Directory is not empty")
        self.client.rm(item["path"])


class CopyCommand(Command):
    """Shared source/destination handling for mv, cp, put and get"""

    def split_destination(self, args):
        return args[:-1], args[-1]

    def target_for(self, name: str, dst: str, dst_info) -> str:
        if dst_info is not None and dst_info["isDir"]:
            return posixpath.join(dst, name)
        return dst

    def check_sources(self, sources, dst_arg, dst_info):
        if len(sources) > 1 and (dst_info is None or not dst_info["isDir"]):
            if dst_info is None:
                raise PathError(dst_arg, "No such file or directory")
            raise PathError(dst_arg, "Is not a directory")

    def expand_sources(self, args):
        items = []
        for arg in args:
            try:
                items.extend(self.expand_argument(arg))
            except PATH_ERRORS as e:
                self.display_error(self.path_error(arg, e))
        return items

    def process_arguments(self, args):
        srcs, dst_arg = self.split_destination(args)
        items = self.expand_sources(srcs)
        if not items:
            return
        dst = self.resolve(dst_arg)
        try:
            dst_info = self.stat_or_none(dst)
            self.check_sources(items, dst_arg, dst_info)
        except PATH_ERRORS as e:
            self.display_error(self.path_error(dst_arg, e))
            return
        for item in items:
            target = self.target_for(item["name"], dst, dst_info)
            try:
                self.copy(item, target)
            except PATH_ERRORS as e:
                self.display_error(self.path_error(item["path"], e))

    def copy(self, item, target: str):
        raise NotImplementedError


class Mv(CopyCommand):
    NAME = "mv"
    USAGE = "<src> ... <dst>"
    DESCRIPTION = (
        "Move files that match the specified file pattern <src> to a destination "
        "<dst>. When moving multiple files, the destination must be a directory."
    )

    def process_options(self, args):
        _, paths = CommandFormat(2, None).parse(args)
        return paths

    def copy(self, item, target):
        if item["path"] == target:
            raise PathError(item["path"], "Is the same file")
        if self.stat_or_none(target) is not None:
            raise PathError(target, "File exists")
        if not self.client.mv(item["path"], target):
            raise PathError(item["path"], f"Rename to `{target}' failed")


class Cp(CopyCommand):
    NAME = "cp"
    USAGE = "[-f] <src> ... <dst>"
    DESCRIPTION = (
        "Copy files that match the file pattern <src> to a destination. When "
        "copying multiple files, the destination must be a directory.\n"
        "  -f  Overwrites the destination if it already exists."
    )

    def process_options(self, args):
        opts, paths = CommandFormat(2, None, "f").parse(args)
        self.overwrite = opts["f"]
        return paths

    def copy(self, item, target):
        if item["path"] == target:
            raise PathError(item["path"], "Is the same file")
        existing = self.stat_or_none(target)
        if existing is not None and not self.overwrite:
            raise PathError(target, "File exists")
        if item["isDir"]:
            cli_commands.copy_directory(self.client, item["path"], target, overwrite=self.overwrite)
        else:
            cli_commands.copy_file(self.client, item["path"], target, overwrite=self.overwrite)


class Cat(Command):
    NAME = "cat"
    USAGE = "<src> ..."
    DESCRIPTION = "Fetch all files that match the file pattern <src> and display their content on stdout."

    def process_options(self, args):
        _, paths = CommandFormat(1, None).parse(args)
        return paths

    def process_path(self, item):
        if item["isDir"]:
            raise PathError(item["path"], "Is a directory")
        cli_commands.write_bytes(self.out, self.client.cat(item["path"]))


class Tail(Command):
    NAME = "tail"
    USAGE = "<file>"
    DESCRIPTION = "Show the last 1KB of the file."

    TAIL_BYTES = 1024

    def process_options(self, args):
        _, paths = CommandFormat(1, 1).parse(args)
        return paths

    def process_path(self, item):
        if item["isDir"]:
            raise PathError(item["path"], "Is a directory")
        offset = max(0, item["size"] - self.TAIL_BYTES)
        if item["size"] == 0:
            return
        cli_commands.write_bytes(self.out, self.client.cat(item["path"], offset=offset))


class Put(CopyCommand):
    NAME = "put"
    USAGE = "[-f] <localsrc> ... <dst>"
    DESCRIPTION = (
        "Copy files from the local file system into fs. Reads from stdin when "
        "<localsrc> is \"-\".\n"
        "  -f  Overwrites the destination if it already exists."
    )

    def process_options(self, args):
        opts, paths = CommandFormat(1, None, "f").parse(args)
        self.overwrite = opts["f"]
        if len(paths) == 1:
            paths.append(".")
        return paths

    def expand_sources(self, args):
        items = []
        for arg in args:
            if arg == "-":
                items.append({"name": "-", "path": "-", "isDir": False})
                continue
            matches = sorted(glob.glob(arg)) if has_glob(arg) else [arg]
            if not matches or not os.path.exists(matches[0]):
                self.display_error(PathError(arg, "No such file or directory"))
                continue
            for match in matches:
                items.append({
                    "name": os.path.basename(os.path.normpath(match)),
                    "path": match,
                    "isDir": os.path.isdir(match),
                })
        return items

    def check_sources(self, sources, dst_arg, dst_info):
        super().check_sources(sources, dst_arg, dst_info)
        if sources[0]["path"] == "-" and dst_info is not None and dst_info["isDir"]:
            raise PathError(dst_arg, "Is a directory")

    def copy(self, item, target):
        if self.stat_or_none(target) is not None and not self.overwrite:
            raise PathError(target, "File exists")
        if item["isDir"]:
            cli_commands.upload_directory(self.client, item["path"], target, overwrite=self.overwrite)
        else:
            cli_commands.upload_file(self.client, item["path"], target, overwrite=self.overwrite)


class CopyFromLocal(Put):
    NAME = "copyFromLocal"
    DESCRIPTION = "Identical to the -put command."


class Get(CopyCommand):
    NAME = "get"
    USAGE = "[-f] <src> ... <localdst>"
    DESCRIPTION = (
        "Copy files that match the file pattern <src> to the local name.\n"
        "  -f  Overwrites the destination if it already exists."
    )

    def process_options(self, args):
        opts, paths = CommandFormat(1, None, "f").parse(args)
        self.overwrite = opts["f"]
        if len(paths) == 1:
            paths.append(".")
        return paths

    def process_arguments(self, args):
        srcs, local_dst = self.split_destination(args)
        items = self.expand_sources(srcs)
        if not items:
            return
        dst_is_dir = os.path.isdir(local_dst)
        if len(items) > 1 and not dst_is_dir:
            self.display_error(PathError(local_dst, "Is not a directory"))
            return
        for item in items:
            target = os.path.join(local_dst, item["name"]) if dst_is_dir else local_dst
            try:
                self.copy(item, target)
            except PATH_ERRORS as e:
                self.display_error(self.path_error(item["path"], e))

    def copy(self, item, target):
        if os.path.exists(target) and not (self.overwrite and not item["isDir"]):
            raise PathError(target, "File exists")
        if item["isDir"]:
            cli_commands.download_directory(self.client, item["path"], target)
        else:
            cli_commands.download_file(self.client, item["path"], target)


class CopyToLocal(Get):
    NAME = "copyToLocal"
    DESCRIPTION = "Identical to the -get command."


class AppendToFile(Put):
    NAME = "appendToFile"
    USAGE = "<localsrc> ... <dst>"
    DESCRIPTION = (
        "Appends the contents of all the given local files to the given dst file. "
        "The dst file will be created if it does not exist. If <localsrc> is -, "
        "then the input is read from stdin."
    )

    def process_options(self, args):
        _, paths = CommandFormat(2, None).parse(args)
        return paths

    def process_arguments(self, args):
        srcs, dst_arg = self.split_destination(args)
        items = self.expand_sources(srcs)
        if not items:
            return
        dst = self.resolve(dst_arg)
        try:
            dst_info = self.stat_or_none(dst)
            if dst_info is not None and dst_info["isDir"]:
                raise PathError(dst_arg, "Is a directory")
            for item in items:
                if item["isDir"]:
                    raise PathError(item["path"], "Is a directory")
                data = cli_commands.read_local(item["path"])
                if dst_info is None:
                    self.client.write(dst, data)
                    dst_info = self.client.stat(dst)
                else:
                    self.client.append(dst, data)
        except PATH_ERRORS as e:
            self.display_error(self.path_error(dst_arg, e))


class Touchz(Command):
    NAME = "touchz"
    USAGE = "<path> ..."
    DESCRIPTION = (
        "Creates a file of zero length at <path> with current time as the timestamp "
        "of that <path>. An error is returned if the file exists with non-zero length."
    )

    def process_options(self, args):
        _, paths = CommandFormat(1, None).parse(args)
        return paths

    def process_argument(self, arg):
        path = self.resolve(arg)
        info = self.stat_or_none(path)
        if info is not None:
            if info["isDir"]:
                raise PathError(arg, "Is a directory")
            if info["size"] != 0:
                raise PathError(arg, "Not a zero-length file")
            return
        parent = posixpath.dirname(path)
        if self.stat_or_none(parent) is None:
            raise PathError(posixpath.dirname(arg.rstrip("/")) or parent, "No such file or directory")
        self.client.write(path, b"")


class Stat(Command):
    NAME = "stat"
    USAGE = "[format] <path> ..."
    DESCRIPTION = (
        "Print statistics about the file/directory at <path> in the specified format. "
        "Format accepts permissions in octal (%a) and symbolic (%A), filesize in "
        "bytes (%b), type (%F), group name of owner (%g), name (%n), block size (%o), "
        "replication (%r), user name of owner (%u), modification date (%y, %Y). "
        "%y shows UTC date as \"yyyy-MM-dd HH:mm:ss\" and %Y shows milliseconds since "
        "January 1, 1970 UTC. If the format is not specified, %y is used by default."
    )

    DEFAULT_FORMAT = "%y"

    def process_options(self, args):
        _, paths = CommandFormat(1, None).parse(args)
        self.format = self.DEFAULT_FORMAT
        if len(paths) > 1 and "%" in paths[0]:
            self.format = paths.pop(0)
        return paths

    def process_path(self, item):
        self.out.print(cli_commands.format_stat(self.format, item))


class Du(Command):
    NAME = "du"
    USAGE = "[-s] [-h] <path> ..."
    DESCRIPTION = (
        "Show the amount of space, in bytes, used by the files that match the "
        "specified file pattern. The output columns are size, disk space consumed "
        "with all replicas, and path.\n"
        "  -s  Rather than showing the size of each individual file that matches "
        "the pattern, shows the total (summary) size.\n"
        "  -h  Formats the sizes of files in a human-readable fashion."
    )

    def process_options(self, args):
        opts, paths = CommandFormat(0, None, "s", "h").parse(args)
        self.summary = opts["s"]
        self.human = opts["h"]
        return paths or [self.shell.working_directory]

    def process_path(self, item):
        if item["isDir"] and not self.summary:
            for entry in self.client.ls(item["path"]):
                self._print_usage(entry)
        else:
            self._print_usage(item)

    def _print_usage(self, item):
        summary = self.client.content_summary(item["path"])
        self.out.print(
            cli_commands.format_du_line(
                summary.get("length", 0),
                summary.get("spaceConsumed", 0),
                item["path"],
                self.human,
            )
        )


class Count(Command):
    NAME = "count"
    USAGE = "[-q] [-h] <path> ..."
    DESCRIPTION = (
        "Count the number of directories, files and bytes under the paths that match "
        "the specified file pattern. The output columns are:\n"
        "DIR_COUNT FILE_COUNT CONTENT_SIZE PATHNAME\n"
        "or, with the -q option:\n"
        "QUOTA REM_QUOTA SPACE_QUOTA REM_SPACE_QUOTA DIR_COUNT FILE_COUNT CONTENT_SIZE PATHNAME\n"
        "  -h  Shows file sizes in human readable format."
    )

    def process_options(self, args):
        opts, paths = CommandFormat(1, None, "q", "h").parse(args)
        self.quotas = opts["q"]
        self.human = opts["h"]
        return paths

    def process_path(self, item):
        summary = self.client.content_summary(item["path"])
        self.out.print(
            cli_commands.format_count_line(summary, item["path"], self.quotas, self.human)
        )


class Chmod(Command):
    NAME = "chmod"
    USAGE = "[-R] <MODE> <path> ..."
    DESCRIPTION = (
        "Changes permissions of a file. MODE is an octal mode such as 755 or 1777.\n"
        "  -R  Modifies the files recursively."
    )

    MODE_PATTERN = re.compile(r"^[0-7]{3,4}$")

    def process_options(self, args):
        opts, paths = CommandFormat(2, None, "R").parse(args)
        self.recursive = opts["R"]
        mode = paths.pop(0)
        if not self.MODE_PATTERN.match(mode):
            raise UsageError(f"chmod : mode '{mode}' does not match the expected pattern.")
        self.mode = int(mode, 8)
        return paths

    def process_path(self, item):
        self.client.chmod(item["path"], self.mode)
        if self.recursive and item["isDir"]:
            for entry in self.client.ls(item["path"]):
                self.process_path(entry)


class SetReplication(Command):
    NAME = "setrep"
    USAGE = "<rep> <path> ..."
    DESCRIPTION = (
        "Set the replication level of a file. If <path> is a directory then the "
        "command recursively changes the replication factor of all files under the "
        "directory tree rooted at <path>."
    )

    def process_options(self, args):
        _, paths = CommandFormat(2, None).parse(args)
        rep = paths.pop(0)
        try:
            self.replication = int(rep)
        except ValueError:
            raise UsageError(f"Invalid replication factor: {rep}")
        if self.replication < 1:
            raise UsageError(f"Invalid replication factor: {rep}")
        return paths

    def process_path(self, item):
        for file_info in self.walk_files(item):
            if self.client.setrep(file_info["path"], self.replication):
                self.out.print(f"Replication {self.replication} set: {file_info['path']}")
            else:
                raise PathError(file_info["path"], "Could not set replication")


class Test(Command):
    NAME = "test"
    USAGE = "-[defsz] <path>"
    DESCRIPTION = (
        "Answer various questions about <path>, with result via exit status.\n"
        "  -d  return 0 if <path> is a directory.\n"
        "  -e  return 0 if <path> exists.\n"
        "  -f  return 0 if <path> is a file.\n"
        "  -s  return 0 if file <path> is greater than zero bytes in size.\n"
        "  -z  return 0 if file <path> is zero bytes in size, else return 1."
    )

    def process_options(self, args):
        opts, paths = CommandFormat(1, 1, "d", "e", "f", "s", "z").parse(args)
        flags = [flag for flag, enabled in opts.items() if enabled]
        if not flags:
            raise UsageError("No test flag given")
        if len(flags) > 1:
            raise UsageError("Only one test flag is allowed")
        self.flag = flags[0]
        return paths

    def process_argument(self, arg):
        info = self.stat_or_none(self.resolve(arg))
        if info is None:
            self.exit_code = 1
            return
        checks = {
            "e": True,
            "d": info["isDir"],
            "f": not info["isDir"],
            "s": info["size"] > 0,
            "z": info["size"] == 0,
        }
        self.exit_code = 0 if checks[self.flag] else 1


class Help(Command):
    NAME = "help"
    USAGE = "[cmd ...]"
    DESCRIPTION = "Displays help for given command or all commands if none is specified."

    def process_arguments(self, args):
        for name in self.shell.print_help(self.out, args):
            self.display_error(f"Unknown command: {name}")


class Usage(Command):
    NAME = "usage"
    USAGE = "[cmd ...]"
    DESCRIPTION = "Displays the usage for given command or all commands if none is specified."

    def process_arguments(self, args):
        for name in self.shell.print_usage(self.out, args):
            self.display_error(f"Unknown command: {name}")


class InteractiveShellCommand(Command):
    NAME = "shell"
    USAGE = ""
    DESCRIPTION = (
        "Start an interactive shell that reads fs commands one line at a time, "
        "with tab completion and persistent history."
    )

    def run(self, args):
        CommandFormat(0, 0).parse(args)
        from .interactive import InteractiveShell

        if isinstance(self.shell, InteractiveShell):
            self.err.print(f"{self.get_name()}: already running an interactive shell")
            return 1
        shell = InteractiveShell(
            self.client, out=self.out, err=self.err, history_file=self.shell.history_file
        )
        return shell.run([])


class CommandFactory:
    """Registry mapping command names ("-ls") to Command classes"""

    def __init__(self, shell):
        self.shell = shell
        self.classes = {}

    def add_class(self, cls, *names: str):
        for name in names:
            self.classes[name] = cls

    def get_instance(self, name: str) -> Optional[Command]:
        """Return a new command for name, or None if no such command is registered"""
        cls = self.classes.get(name)
        if cls is None:
            return None
        instance = cls(self.shell)
        instance.name = name
        return instance

    def get_names(self) -> List[str]:
        return sorted(self.classes)


def register_commands(factory: CommandFactory):
    """Register the fs command set"""
    factory.add_class(Ls, "-ls")
    factory.add_class(Mkdir, "-mkdir")
    factory.add_class(Rm, "-rm")
    factory.add_class(Rmdir, "-rmdir")
    factory.add_class(Mv, "-mv")
    factory.add_class(Cp, "-cp")
    factory.add_class(Cat, "-cat")
    factory.add_class(Tail, "-tail")
    factory.add_class(Put, "-put")
    factory.add_class(CopyFromLocal, "-copyFromLocal")
    factory.add_class(Get, "-get")
    factory.add_class(CopyToLocal, "-copyToLocal")
    factory.add_class(AppendToFile, "-appendToFile")
    factory.add_class(Touchz, "-touchz")
    factory.add_class(Stat, "-stat")
    factory.add_class(Du, "-du")
    factory.add_class(Count, "-count")
    factory.add_class(Chmod, "-chmod")
    factory.add_class(SetReplication, "-setrep")
    factory.add_class(Test, "-test")
    factory.add_class(Help, "-help")
    factory.add_class(Usage, "-usage")
