"""Version information for dfs-shell"""

__version__ = "1.0.0"

# WebHDFS REST API version the client speaks
WEBHDFS_API_VERSION = "v1"


def get_version_string():
    """Version line shown by ``dfs --version``"""
    return f"dfs-shell {__version__} (WebHDFS {WEBHDFS_API_VERSION})"
