import unittest
from unittest import mock

from dfsshell.client import DFSClientError
from dfsshell.fsshell import FsShell
from dfsshell.interactive import InteractiveShell

from fakes import FakeClient, make_console, output


class TestFsShell(unittest.TestCase):
    def setUp(self):
        self.client = FakeClient()
        self.out = make_console()
        self.err = make_console()
        self.shell = FsShell(self.client, out=self.out, err=self.err)

    def test_registers_shell_command(self):
        names = self.shell.command_factory.get_names()
        self.assertIn("-shell", names)
        self.assertIn("-ls", names)

    def test_empty_argv_prints_usage(self):
        self.assertEqual(self.shell.run([]), -1)
        self.assertTrue(output(self.err).startswith("Usage: dfs [generic options]\n"))
        self.assertIn("    [-ls [-d] [-h] [-R] [<path> ...]]", output(self.err))
        self.assertIn("Generic options supported are:", output(self.err))

    def test_unknown_command(self):
        self.assertEqual(self.shell.run(["-frobnicate"]), -1)
        self.assertTrue(output(self.err).startswith("-frobnicate: Unknown command\n"))

    def test_usage_error_prints_command_usage(self):
        self.assertEqual(self.shell.run(["-ls", "-x"]), -1)
        self.assertEqual(
            output(self.err),
            "-ls: Illegal option -x\n"
            "Usage: dfs [generic options] [-ls [-d] [-h] [-R] [<path> ...]]\n",
        )

    def test_client_error_outside_path_processing(self):
        self.client.home_directory = mock.Mock(
            side_effect=DFSClientError("Connection refused - namenode not reachable at nn:9870")
        )

        self.assertEqual(self.shell.run(["-ls"]), 1)
        self.assertEqual(
            output(self.err), "-ls: Connection refused - namenode not reachable at nn:9870\n"
        )

    def test_returns_command_exit_code(self):
        self.client.add_file("/f")
        self.assertEqual(self.shell.run(["-test", "-e", "/f"]), 0)
        self.assertEqual(self.shell.run(["-test", "-d", "/f"]), 1)

    def test_resolve_path(self):
        self.assertEqual(self.shell.resolve_path("data"), "/user/alice/data")
        self.assertEqual(self.shell.resolve_path("../bob/./x"), "/user/bob/x")
        self.assertEqual(self.shell.resolve_path("/tmp/"), "/tmp")
        self.assertEqual(self.shell.resolve_path("."), "/user/alice")
        self.assertEqual(self.shell.resolve_path("hdfs://nn:8020/tmp/x"), "/tmp/x")
        self.assertEqual(self.shell.resolve_path("//double"), "/double")

    def test_working_directory_is_looked_up_once(self):
        self.client.home_directory = mock.Mock(return_value="/user/alice")
        self.shell.resolve_path("a")
        self.shell.resolve_path("b")
        self.client.home_directory.assert_called_once_with()

    def test_help_for_one_command(self):
        self.assertEqual(self.shell.run(["-help", "mkdir"]), 0)
        self.assertEqual(
            output(self.out).splitlines()[:2],
            ["[-mkdir [-p] <path> ...] :", "  Create a directory in specified location."],
        )

    def test_help_unknown_command(self):
        self.assertEqual(self.shell.run(["-help", "nope"]), 1)
        self.assertEqual(output(self.err), "help: Unknown command: nope\n")

    def test_usage_for_commands(self):
        self.assertEqual(self.shell.run(["-usage", "cat", "-rm"]), 0)
        self.assertEqual(
            output(self.out),
            "Usage: dfs [generic options] [-cat <src> ...]\n"
            "Usage: dfs [generic options] [-rm [-f] [-r|-R] <src> ...]\n",
        )

    def test_shell_command_from_fs_starts_interactive_shell(self):
        with mock.patch.object(InteractiveShell, "run", return_value=7) as run:
            self.assertEqual(self.shell.run(["-shell"]), 7)
        run.assert_called_once_with([])

    def test_shell_command_uses_configured_history_file(self):
        shell = FsShell(self.client, out=self.out, err=self.err, history_file="/tmp/dfs-history")
        with mock.patch.object(InteractiveShell, "run", autospec=True, return_value=0) as run:
            self.assertEqual(shell.run(["-shell"]), 0)
        interactive = run.call_args.args[0]
        self.assertEqual(interactive.history_file, "/tmp/dfs-history")
        self.assertIs(interactive.client, self.client)


class TestInteractiveUsageHooks(unittest.TestCase):
    def setUp(self):
        self.out = make_console()
        self.shell = InteractiveShell(FakeClient(), out=self.out, err=make_console())

    def test_usage_without_prefix(self):
        self.assertEqual(FsShell.run(self.shell, ["-usage", "ls"]), 0)
        self.assertEqual(output(self.out), "ls [-d] [-h] [-R] [<path> ...]\n")

    def test_full_usage_has_no_generic_options(self):
        self.shell.print_usage(self.out)
        text = output(self.out)
        self.assertFalse(text.startswith("Usage:"))
        self.assertIn("    mkdir [-p] <path> ...\n", text)
        self.assertIn("    shell\n", text)
        self.assertNotIn("Generic options", text)

    def test_nested_shell_is_refused(self):
        err = self.shell.err
        self.assertEqual(FsShell.run(self.shell, ["-shell"]), 1)
        self.assertEqual(output(err), "shell: already running an interactive shell\n")


if __name__ == "__main__":
    unittest.main()
