# svc_urls/errors.py


class SvcUrlsError(Exception):
    """Base class for every fatal error; the CLI maps these to exit code 1."""


class UsageError(SvcUrlsError):
    pass


class AuthenticationError(SvcUrlsError):
    pass


class ApiConnectionError(SvcUrlsError, ConnectionError):
    pass


class ApiPermissionError(SvcUrlsError, PermissionError):
    pass


class ClusterError(SvcUrlsError):
    pass


class InvalidPatternError(SvcUrlsError):
    pass


class PartialDataWarning(UserWarning):
    """
    A single endpoint address could not be used.
    Logged and dropped; never raised.
    """
