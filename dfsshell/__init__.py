"""dfs-shell - interactive shell for the Hadoop fs command set over WebHDFS"""

from .version import __version__
