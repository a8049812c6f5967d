"""Interactive fs Shell: read a line, dispatch it, repeat"""

import atexit
import os
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import FileHistory, InMemoryHistory
from rich.console import Console

from .client import DFSClientError
from .commands import Command
from .config import HISTORY_FILE_NAME
from .fsshell import FsShell

SHELL_COMMAND = "-shell"


def parse_command_line(line: str) -> Optional[List[str]]:
    """Split a console line into an fs argv: ``"ls /tmp"`` -> ``["-ls", "/tmp"]``.

    Blank lines and ``#`` comments give None.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    command = stripped.split()
    command[0] = "-" + command[0]
    return command


class ShellHistory(FileHistory):
    """File history that keeps new entries in memory until flush()"""

    def __init__(self, filename):
        super().__init__(filename)
        self._pending = []

    def store_string(self, string: str) -> None:
        self._pending.append(string)

    def flush(self):
        pending, self._pending = self._pending, []
        for string in pending:
            super().store_string(string)


def flush_history(history: ShellHistory, err: Console):
    try:
        history.flush()
    except OSError as e:
        err.print(f"WARNING: Failed to write command history file: {e}")


class DFSCompleter(Completer):
    """Completes command names, then remote paths for the arguments"""

    def __init__(self, shell):
        self.shell = shell
        self.command_names = [
            name[1:] for name in shell.command_factory.get_names() if name != SHELL_COMMAND
        ]

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        words = text.split()
        at_word_boundary = not text or text[-1].isspace()

        # If we're at the start or only typing the command
        if len(words) == 0 or (len(words) == 1 and not at_word_boundary):
            word = words[0] if words else ""
            for cmd in self.command_names:
                if cmd.startswith(word):
                    yield Completion(cmd, start_position=-len(word))
            return

        current_word = "" if at_word_boundary else words[-1]
        if current_word.startswith("-"):
            # options, not paths
            return

        if "/" in current_word:
            last_slash = current_word.rfind("/")
            dir_part = current_word[: last_slash + 1]
            file_part = current_word[last_slash + 1 :]
        else:
            dir_part = ""
            file_part = current_word

        try:
            files = self.shell.client.ls(self.shell.resolve_path(dir_part or "."))
        except DFSClientError:
            # no suggestions when the directory can't be listed
            return

        for f in files:
            name = f["name"]
            if name.startswith(file_part):
                display_name = name + "/" if f["isDir"] else name
                yield Completion(
                    dir_part + display_name,
                    start_position=-len(current_word),
                    display=display_name,
                )


class InteractiveShell(FsShell):
    """fs shell that reads commands from the console one line at a time"""

    def __init__(self, client, out=None, err=None, history_file: Optional[str] = None):
        super().__init__(client, out=out, err=err, history_file=history_file)
        if self.history_file is None:
            self.history_file = os.path.join(os.path.expanduser("~"), HISTORY_FILE_NAME)
        self.session = None

    def get_usage_prefix(self) -> str:
        return ""

    def make_usage_string(self, command: Command) -> str:
        return f"{command.get_name()} {command.get_usage()}".rstrip()

    def print_additional_info(self, out):
        pass

    def setup_history(self):
        history_dir = os.path.dirname(self.history_file)
        try:
            if os.path.isdir(history_dir):
                # create the file up front so a missing one is noticed now
                with open(self.history_file, "a"):
                    pass
                history = ShellHistory(self.history_file)
                atexit.register(flush_history, history, self.err)
                return history
            self.err.print(
                f"WARNING: Directory for history file: {history_dir} does not exist. "
                "History will not be available during this session."
            )
        except OSError as e:
            self.err.print(
                "WARNING: Encountered an error while trying to initialize history file. "
                "History will not be available during this session."
            )
            self.err.print(str(e))
        return InMemoryHistory()

    def create_session(self) -> PromptSession:
        return PromptSession(
            history=self.setup_history(),
            auto_suggest=AutoSuggestFromHistory(),
            completer=DFSCompleter(self),
            complete_while_typing=False,
            enable_history_search=False,
        )

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the read-eval-print loop until EOF.

        Returns the exit code of the last dispatched command, or 0 when none ran.
        Ctrl-C during a command abandons it with exit code 130. Any other
        exception escaping a command ends the session after its traceback is
        printed to stderr.
        """
        ret = 0
        try:
            self.session = self.create_session()
            cur_path = self.working_directory
            cur_prompt = cur_path

            while True:
                try:
                    line = self.session.prompt(f"{cur_prompt}> ")
                except KeyboardInterrupt:
                    # discard the current line
                    continue
                except EOFError:
                    break

                command = parse_command_line(line)
                if command is None:
                    continue
                if self.command_factory.get_instance(command[0]) is None:
                    self.err.print(f"{command[0]}: command not found")
                    continue
                try:
                    ret = super().run(command)
                except KeyboardInterrupt:
                    # abandon the running command, keep the session
                    self.err.print(f"{command[0]}: Interrupted")
                    ret = 130
        except Exception:
            # TODO: report command failures separately from console errors
            self.err.print_exception()
        return ret
