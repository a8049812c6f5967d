"""Configuration management for dfs-shell"""

import os

DEFAULT_NAMENODE_URL = "http://localhost:9870"
DEFAULT_TIMEOUT = 10
HISTORY_FILE_NAME = ".dfsshellhistory"


class Config:
    """Configuration for the DFS shell"""

    def __init__(self):
        # WebHDFS endpoint of the namenode
        self.namenode_url = os.getenv("DFS_NAMENODE_URL", DEFAULT_NAMENODE_URL)
        # Simple-auth user, sent as user.name
        self.user = os.getenv("HADOOP_USER_NAME") or None
        self.timeout = _parse_timeout(os.getenv("DFS_TIMEOUT"))
        self.history_file = os.path.join(os.path.expanduser("~"), HISTORY_FILE_NAME)

    @classmethod
    def from_env(cls):
        """Create configuration from environment variables"""
        return cls()

    @classmethod
    def from_args(cls, namenode_url: str = None, user: str = None, timeout: float = None):
        """Create configuration from command line arguments"""
        config = cls()
        if namenode_url:
            config.namenode_url = namenode_url
        if user:
            config.user = user
        if timeout is not None:
            config.timeout = timeout
        return config

    def __repr__(self):
        return (
            f"Config(namenode_url={self.namenode_url}, user={self.user}, "
            f"timeout={self.timeout})"
        )


def _parse_timeout(value):
    if not value:
        return DEFAULT_TIMEOUT
    try:
        return float(value)
    except ValueError:
        return DEFAULT_TIMEOUT
