"""Main CLI Entry Point"""

import logging

import click

from .client import WebHDFSClient
from .config import Config, DEFAULT_NAMENODE_URL
from .fsshell import FsShell
from .interactive import InteractiveShell
from .version import get_version_string

logger = logging.getLogger(__name__)


def start_shell(obj) -> int:
    """Start interactive REPL session"""
    config = obj["config"]
    logger.debug("Starting interactive shell against %s", config.namenode_url)
    shell = InteractiveShell(obj["client"], history_file=config.history_file)
    return shell.run([])


@click.group(invoke_without_command=True)
@click.version_option(version=get_version_string(), prog_name="dfs")
@click.option(
    "--namenode",
    "namenode_url",
    default=None,
    help="WebHDFS address of the namenode (can also set via DFS_NAMENODE_URL)",
    show_default=DEFAULT_NAMENODE_URL,
)
@click.option(
    "--user",
    default=None,
    help="User name for simple authentication (can also set via HADOOP_USER_NAME)",
)
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds")
@click.option("-v", "--verbose", is_flag=True, help="Log every WebHDFS request")
@click.pass_context
def main(ctx, namenode_url, user, timeout, verbose):
    """dfs - interactive shell for the Hadoop fs command set

    With no subcommand, starts the interactive shell.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    config = Config.from_args(namenode_url=namenode_url, user=user, timeout=timeout)
    logger.debug("Using %r", config)

    client = WebHDFSClient(config.namenode_url, user=config.user, timeout=config.timeout)
    ctx.call_on_close(client.close)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["client"] = client

    if ctx.invoked_subcommand is None:
        ctx.exit(start_shell(ctx.obj))


@main.command()
@click.pass_context
def sh(ctx):
    """Start interactive REPL shell"""
    ctx.exit(start_shell(ctx.obj))


@main.command()
@click.pass_context
def shell(ctx):
    """Start interactive REPL shell (alias for sh)"""
    ctx.exit(start_shell(ctx.obj))


@main.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@click.argument("argv", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def fs(ctx, argv):
    """Run one fs command, e.g. `dfs fs -ls /tmp`"""
    shell = FsShell(ctx.obj["client"], history_file=ctx.obj["config"].history_file)
    ctx.exit(shell.run(list(argv)))


if __name__ == "__main__":
    main()
