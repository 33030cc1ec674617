"""
Access log messages.

A message is one line of the server's text access log::

    [17/Mar/2024:10:11:12.345 -0500] CONNECT conn=1 from="1.2.3.4" ...

that is, a bracketed timestamp followed by unnamed tokens and
C{name=value} pairs. Values may be double-quoted, in which case they may
contain spaces and backslash escapes.
"""

import datetime
import re

from twisted.python import log
from zope.interface import implementer

from dsadmin import errors, interfaces, timeutil

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_TIMESTAMP = re.compile(
    r"^\[(?P<day>[0-9]{2})/(?P<month>[A-Za-z]{3})/(?P<year>[0-9]{4})"
    r":(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<millis>[0-9]{3}))?\s+(?P<zone>[+-][0-9]{4})\]"
)

_TRUE = ("true", "t", "yes", "y", "on", "1")
_FALSE = ("false", "f", "no", "n", "off", "0")


def _parseTimestamp(line):
    m = _TIMESTAMP.match(line)
    if m is None:
        raise errors.LogParseError("Line does not start with a timestamp", line)
    month = MONTHS.get(m.group("month").lower())
    if month is None:
        raise errors.LogParseError(
            "Unknown month %r in timestamp" % m.group("month"), line
        )
    zone = m.group("zone")
    offset = datetime.timedelta(hours=int(zone[1:3]), minutes=int(zone[3:5]))
    if zone[0] == "-":
        offset = -offset
    try:
        timestamp = datetime.datetime(
            int(m.group("year")),
            month,
            int(m.group("day")),
            int(m.group("hour")),
            int(m.group("minute")),
            int(m.group("second")),
            int(m.group("millis") or 0) * 1000,
            tzinfo=datetime.timezone(offset),
        )
    except ValueError as e:
        raise errors.LogParseError("Malformed timestamp: %s" % e, line)
    return timestamp, line[m.end() :]


def _tokenize(text, line):
    """
    Split the text after the timestamp into unnamed tokens and named
    values.
    """
    unnamed = []
    named = {}
    i = 0
    n = len(text)
    while i < n:
        if text[i].isspace():
            i += 1
            continue

        start = i
        while i < n and not text[i].isspace() and text[i] not in '="':
            i += 1

        if i < n and text[i] == "=":
            name = text[start:i]
            i += 1
            if i < n and text[i] == '"':
                value, i = _quoted(text, i + 1, line)
            else:
                vstart = i
                while i < n and not text[i].isspace():
                    i += 1
                value = text[vstart:i]
            named[name] = value
        elif i < n and text[i] == '"':
            prefix = text[start:i]
            value, i = _quoted(text, i + 1, line)
            unnamed.append(prefix + value)
        else:
            unnamed.append(text[start:i])
    return unnamed, named


def _quoted(text, i, line):
    """Read a quoted value starting after its opening quote."""
    buf = []
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\\":
            if i + 1 >= n:
                break
            buf.append(text[i + 1])
            i += 2
        elif c == '"':
            return "".join(buf), i + 1
        else:
            buf.append(c)
            i += 1
    raise errors.LogParseError("Unterminated quoted value", line)


@implementer(interfaces.ILogMessage)
class LogMessage:
    """
    A parsed log line.

    @ivar line: the line as read, without its line terminator.
    """

    def __init__(self, line):
        """
        @raise errors.LogParseError: if C{line} does not start with a
        timestamp or has an unterminated quoted value.
        """
        self.line = line.rstrip("\r\n")
        self.timestamp, rest = _parseTimestamp(self.line)
        self.unnamedValues, self.namedValues = _tokenize(rest, self.line)

    def getTimestamp(self):
        """Return the timestamp, an aware datetime in the logged zone."""
        return self.timestamp

    def getNamedValues(self):
        return dict(self.namedValues)

    def getUnnamedValues(self):
        return list(self.unnamedValues)

    def hasUnnamedValue(self, value):
        return value in self.unnamedValues

    def getNamedValue(self, name):
        return self.namedValues.get(name)

    def getNamedValueAsInteger(self, name):
        """
        Return the named value as an int, or None if it is missing or is
        not an integer.
        """
        value = self.namedValues.get(name)
        if value is None:
            return None
        try:
            return timeutil.parseInteger(value)
        except ValueError:
            return None

    def getNamedValueAsFloat(self, name):
        value = self.namedValues.get(name)
        if value is None:
            return None
        try:
            return float(value)
        except ValueError:
            return None

    def getNamedValueAsBoolean(self, name):
        value = self.namedValues.get(name)
        if value is None:
            return None
        value = value.lower()
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        return None

    def toString(self):
        return self.line

    def __str__(self):
        return self.line

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.line)

    def __eq__(self, other):
        if not isinstance(other, LogMessage):
            return NotImplemented
        return self.line == other.line

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.line)


MESSAGE_TYPE_CONNECT = "CONNECT"
MESSAGE_TYPE_DISCONNECT = "DISCONNECT"
MESSAGE_TYPE_REQUEST = "REQUEST"
MESSAGE_TYPE_RESULT = "RESULT"

OPERATION_TYPES = (
    "ABANDON",
    "ADD",
    "BIND",
    "COMPARE",
    "DELETE",
    "EXTENDED",
    "MODIFY",
    "MODDN",
    "SEARCH",
    "UNBIND",
)


class AccessLogMessage(LogMessage):
    """
    A message from the access log. Use L{AccessLogMessage.parse} to get
    an instance of the matching subclass.
    """

    messageType = None

    @classmethod
    def parse(klass, line):
        """
        Parse a line into a connect, disconnect, operation request or
        operation result message.

        @raise errors.LogParseError: if the line is malformed or is of a
        message type that is not supported.
        """
        m = LogMessage(line)
        tokens = m.unnamedValues
        if not tokens:
            raise errors.LogParseError("The message has no type", m.line)

        messageClass = MessageTypes.get(tokens[0])
        if messageClass is None and tokens[0] in OPERATION_TYPES and len(tokens) > 1:
            messageClass = OperationMessageTypes.get(tokens[1])
        if messageClass is None:
            raise errors.LogParseError(
                "Unsupported access log message type %r" % " ".join(tokens[:2]),
                m.line,
            )
        return messageClass(line)

    def getMessageType(self):
        return self.messageType

    def getInstanceName(self):
        return self.getNamedValue("instanceName")

    def getStartupID(self):
        return self.getNamedValue("startupID")

    def getConnectionID(self):
        return self.getNamedValueAsInteger("conn")


class ConnectAccessLogMessage(AccessLogMessage):
    messageType = MESSAGE_TYPE_CONNECT

    def getSourceAddress(self):
        return self.getNamedValue("from")

    def getTargetAddress(self):
        return self.getNamedValue("to")

    def getProtocolName(self):
        return self.getNamedValue("protocol")

    def getClientConnectionPolicy(self):
        return self.getNamedValue("clientConnectionPolicy")


class DisconnectAccessLogMessage(AccessLogMessage):
    messageType = MESSAGE_TYPE_DISCONNECT

    def getDisconnectReason(self):
        return self.getNamedValue("reason")

    def getMessage(self):
        return self.getNamedValue("msg")


class OperationRequestAccessLogMessage(AccessLogMessage):
    """A message logged when the server receives an operation request."""

    messageType = MESSAGE_TYPE_REQUEST

    def getOperationType(self):
        """Return the operation type, e.g. C{"ADD"} or C{"SEARCH"}."""
        return self.unnamedValues[0]

    def getOperationID(self):
        return self.getNamedValueAsInteger("op")

    def getMessageID(self):
        return self.getNamedValueAsInteger("msgID")

    def getOrigin(self):
        return self.getNamedValue("origin")

    def getRequesterIPAddress(self):
        return self.getNamedValue("requesterIP")

    def getRequesterDN(self):
        return self.getNamedValue("requesterDN")

    def getIntermediateClientRequest(self):
        return self.getNamedValue("via")

    def getOperationPurpose(self):
        return self.getNamedValue("opPurpose")

    def getDN(self):
        """Return the target DN of the operation, if it has one."""
        return self.getNamedValue("dn")


class OperationResultAccessLogMessage(OperationRequestAccessLogMessage):
    """A message logged when the server sends an operation result."""

    messageType = MESSAGE_TYPE_RESULT

    def getResultCode(self):
        return self.getNamedValueAsInteger("resultCode")

    def getDiagnosticMessage(self):
        return self.getNamedValue("message")

    def getAdditionalInformation(self):
        return self.getNamedValue("additionalInfo")

    def getMatchedDN(self):
        return self.getNamedValue("matchedDN")

    def getReferralURLs(self):
        value = self.getNamedValue("referralURLs")
        if not value:
            return []
        return value.split(",")

    def getProcessingTime(self):
        """Return the processing time in milliseconds, as a float."""
        return self.getNamedValueAsFloat("etime")

    def getQueueTime(self):
        return self.getNamedValueAsFloat("qtime")

    def getIntermediateClientResult(self):
        return self.getNamedValue("from")

    def getAlternateAuthorizationDN(self):
        return self.getNamedValue("authzDN")


MessageTypes = {
    MESSAGE_TYPE_CONNECT: ConnectAccessLogMessage,
    MESSAGE_TYPE_DISCONNECT: DisconnectAccessLogMessage,
}

OperationMessageTypes = {
    MESSAGE_TYPE_REQUEST: OperationRequestAccessLogMessage,
    MESSAGE_TYPE_RESULT: OperationResultAccessLogMessage,
}


class AccessLogReader:
    """
    Read access log messages from a file.

    Iterating yields one L{AccessLogMessage} per line. Blank lines and
    lines starting with C{#} are skipped.
    """

    def __init__(self, fileobj):
        """
        @param fileobj: an open file, in text or binary mode, or any
        iterable of lines. Binary lines are decoded as UTF-8.
        """
        self.fileobj = fileobj
        self._lines = iter(fileobj)

    def __iter__(self):
        return self

    def __next__(self):
        for line in self._lines:
            if isinstance(line, bytes):
                line = line.decode("utf-8")
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                log.msg("Skipping access log line %r" % line, debug=True)
                continue
            return AccessLogMessage.parse(line)
        raise StopIteration

    def read(self):
        """
        Return the next message, or None at the end of the file.

        @raise errors.LogParseError: if the next line is malformed.
        """
        return next(self, None)

    def close(self):
        close = getattr(self.fileobj, "close", None)
        if close is not None:
            close()
