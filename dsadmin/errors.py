"""Exceptions raised by the administrative data model."""


class DirectoryAdminError(Exception):
    """Base class for all dsadmin errors."""

    def __init__(self, message=None):
        Exception.__init__(self, message)
        self.message = message

    def __str__(self):
        if self.message:
            return "%s: %s" % (self.__class__.__name__, self.message)
        return self.__class__.__name__


class UsageError(DirectoryAdminError, ValueError):
    """
    A typed constructor was called with invalid arguments.

    This is a programming error: a required argument was None, a
    required list was empty or two arguments contradict each other.
    """


class TaskError(DirectoryAdminError):
    """
    A task entry or property map could not be turned into a task.

    The message names the offending attribute or property.
    """


class DecodeError(DirectoryAdminError):
    """A control, extended operation or JSON object could not be decoded."""


class LogParseError(DirectoryAdminError):
    """An access log line is malformed."""

    def __init__(self, message=None, line=None):
        DirectoryAdminError.__init__(self, message)
        self.line = line
