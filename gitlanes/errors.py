"""Provides exception classes used by git-lanes"""


class GitLanesError(Exception):
    """The base class of all git-lanes exceptions"""


class GraphConfigError(GitLanesError):
    """Exception class for invalid graph configuration values."""

    def __init__(self, key, message):
        GitLanesError.__init__(self, message)
        self.key = key
        self.message = message
