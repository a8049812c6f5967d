"""Command Dispatcher for the fs Command Set"""

import posixpath
from typing import List, Optional
from urllib.parse import urlparse

from rich.console import Console

from .cli_commands import console, err_console
from .client import DFSClientError
from .commands import (
    Command,
    CommandFactory,
    InteractiveShellCommand,
    UsageError,
    register_commands,
)

GENERIC_OPTIONS = [
    ("--namenode URL", "WebHDFS address of the namenode (env DFS_NAMENODE_URL)"),
    ("--user NAME", "user name for simple authentication (env HADOOP_USER_NAME)"),
    ("--timeout SECONDS", "request timeout (env DFS_TIMEOUT)"),
    ("-v, --verbose", "log every WebHDFS request"),
]


class FsShell:
    """Runs one fs command given as an argv vector, e.g. ``["-ls", "/tmp"]``"""

    def __init__(
        self,
        client,
        out: Optional[Console] = None,
        err: Optional[Console] = None,
        history_file: Optional[str] = None,
    ):
        self.client = client
        # Used by -shell when it starts an interactive session
        self.history_file = history_file
        self.out = out or console
        self.err = err or err_console
        self._working_directory = None
        self.command_factory = CommandFactory(self)
        self.register_commands(self.command_factory)

    def register_commands(self, factory: CommandFactory):
        register_commands(factory)
        factory.add_class(InteractiveShellCommand, "-shell")

    @property
    def working_directory(self) -> str:
        """The user's home directory; relative paths resolve against it"""
        if self._working_directory is None:
            self._working_directory = self.client.home_directory()
        return self._working_directory

    def resolve_path(self, path: str) -> str:
        """Resolve a command-line path to an absolute, normalized fs path"""
        if "://" in path:
            # hdfs://namenode:8020/user/x -> /user/x
            path = urlparse(path).path or "/"
        if not path.startswith("/"):
            path = posixpath.join(self.working_directory, path)
        normalized = posixpath.normpath(path)
        # normpath keeps a leading "//"
        if normalized.startswith("//"):
            normalized = "/" + normalized.lstrip("/")
        return normalized

    def get_usage_prefix(self) -> str:
        return "Usage: dfs [generic options]"

    def make_usage_string(self, command: Command) -> str:
        usage = command.get_usage()
        return f"[-{command.get_name()} {usage}]" if usage else f"[-{command.get_name()}]"

    def print_additional_info(self, out: Console):
        out.print("Generic options supported are:")
        for option, description in GENERIC_OPTIONS:
            out.print(f"{option:<22} {description}")
        out.print()

    def usage_line(self, command: Command) -> str:
        return f"{self.get_usage_prefix()} {self.make_usage_string(command)}".strip()

    def _lookup(self, names: List[str]):
        """Map command names (with or without the leading "-") to instances"""
        found, unknown = [], []
        for name in names:
            instance = self.command_factory.get_instance("-" + name.lstrip("-"))
            if instance is None:
                unknown.append(name)
            else:
                found.append(instance)
        return found, unknown

    def print_usage(self, out: Console, names: Optional[List[str]] = None) -> List[str]:
        """Print usage for the named commands (all when empty); returns unknown names"""
        if names:
            found, unknown = self._lookup(names)
            for command in found:
                out.print(self.usage_line(command))
            return unknown

        prefix = self.get_usage_prefix()
        if prefix:
            out.print(prefix)
        for name in self.command_factory.get_names():
            command = self.command_factory.get_instance(name)
            out.print(f"    {self.make_usage_string(command)}")
        out.print()
        self.print_additional_info(out)
        return []

    def print_help(self, out: Console, names: Optional[List[str]] = None) -> List[str]:
        """Print usage and description for the named commands (all when empty)"""
        if names:
            found, unknown = self._lookup(names)
        else:
            self.print_usage(out)
            found = [self.command_factory.get_instance(name) for name in self.command_factory.get_names()]
            unknown = []

        for command in found:
            out.print(self.make_usage_string(command) + " :")
            for line in command.get_description().splitlines():
                out.print(f"  {line}")
            out.print()
        return unknown

    def run(self, argv: List[str]) -> int:
        """Dispatch argv to its command and return the exit code.

        Returns -1 for an unknown command or a usage error and 1 when the
        filesystem reports an error outside per-path processing.
        """
        if not argv:
            self.print_usage(self.err)
            return -1

        cmd = argv[0]
        instance = self.command_factory.get_instance(cmd)
        if instance is None:
            self.err.print(f"{cmd}: Unknown command")
            self.print_usage(self.err)
            return -1

        try:
            return instance.run(argv[1:])
        except UsageError as e:
            self.err.print(f"{cmd}: {e}")
            self.err.print(self.usage_line(instance))
            return -1
        except DFSClientError as e:
            self.err.print(f"{cmd}: {e}")
            return 1
