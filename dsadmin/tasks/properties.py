"""
Task property descriptors, and the helpers that turn the values of a
property map into typed field values.

A property map is a dict from L{TaskProperty} to a list of values. It is
what generic administration tools build when they do not know the
concrete task type they are editing.
"""

import datetime

from dsadmin import errors, timeutil

SUPPORTED_TYPES = (str, bool, int, datetime.datetime)


class TaskProperty:
    """
    Describes one configurable field of a task type.

    Properties are compared by attribute name, ignoring case.
    """

    def __init__(
        self,
        attributeName,
        displayName,
        description,
        dataType,
        required=False,
        multiValued=False,
        advanced=False,
        allowedValues=None,
    ):
        if attributeName is None:
            raise errors.UsageError("A task property needs an attribute name")
        if dataType is None:
            raise errors.UsageError(
                "Task property %s needs a data type" % attributeName
            )
        if dataType not in SUPPORTED_TYPES:
            raise errors.UsageError(
                "Unsupported data type %r for task property %s"
                % (dataType, attributeName)
            )
        self.attributeName = attributeName
        self.displayName = displayName
        self.description = description
        self.dataType = dataType
        self.required = bool(required)
        self.multiValued = bool(multiValued)
        self.advanced = bool(advanced)
        if allowedValues is not None:
            allowedValues = tuple(allowedValues)
        self.allowedValues = allowedValues

    def getAttributeName(self):
        return self.attributeName

    def getDisplayName(self):
        return self.displayName

    def getDescription(self):
        return self.description

    def getDataType(self):
        return self.dataType

    def isRequired(self):
        return self.required

    def isMultiValued(self):
        return self.multiValued

    def isAdvanced(self):
        return self.advanced

    def getAllowedValues(self):
        return self.allowedValues

    def __eq__(self, other):
        if not isinstance(other, TaskProperty):
            return NotImplemented
        return self.attributeName.lower() == other.attributeName.lower()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.attributeName.lower())

    def __repr__(self):
        l = [
            "attributeName=%r" % self.attributeName,
            "displayName=%r" % self.displayName,
            "dataType=%s" % self.dataType.__name__,
        ]
        if self.required:
            l.append("required=True")
        if self.multiValued:
            l.append("multiValued=True")
        if self.advanced:
            l.append("advanced=True")
        if self.allowedValues is not None:
            l.append("allowedValues=%r" % (self.allowedValues,))
        return self.__class__.__name__ + "(" + ", ".join(l) + ")"


def _checkCount(p, values):
    """
    @return: True if there are values to parse, False if the default
    should be used.
    """
    if not values:
        if p.isRequired():
            raise errors.TaskError(
                "No values were provided for required property %s"
                % p.getDisplayName()
            )
        return False
    if len(values) > 1 and not p.isMultiValued():
        raise errors.TaskError(
            "Property %s only accepts a single value" % p.getDisplayName()
        )
    return True


def _checkAllowed(p, value):
    allowed = p.getAllowedValues()
    if allowed is None:
        return value
    for a in allowed:
        if isinstance(a, str) and isinstance(value, str):
            if a.lower() == value.lower():
                return a
        elif a == value:
            return a
    raise errors.TaskError(
        "Value %r is not allowed for property %s" % (value, p.getDisplayName())
    )


def _toString(p, o):
    if not isinstance(o, str):
        raise errors.TaskError(
            "Value %r for property %s is not a string" % (o, p.getDisplayName())
        )
    return _checkAllowed(p, o)


def parseString(p, values, default=None):
    if not _checkCount(p, values):
        return default
    return _toString(p, values[0])


def parseStrings(p, values, default=None):
    if not _checkCount(p, values):
        return default
    return [_toString(p, o) for o in values]


def parseBoolean(p, values, default=None):
    if not _checkCount(p, values):
        return default
    o = values[0]
    if isinstance(o, bool):
        return o
    if isinstance(o, str):
        if o.lower() == "true":
            return True
        if o.lower() == "false":
            return False
    raise errors.TaskError(
        "Value %r for property %s is not a boolean" % (o, p.getDisplayName())
    )


def parseLong(p, values, default=None):
    if not _checkCount(p, values):
        return default
    o = values[0]
    if isinstance(o, bool):
        value = None
    elif isinstance(o, int):
        value = o
    elif isinstance(o, str):
        try:
            value = timeutil.parseInteger(o)
        except ValueError:
            value = None
    else:
        value = None
    if value is None:
        raise errors.TaskError(
            "Value %r for property %s is not an integer" % (o, p.getDisplayName())
        )
    return _checkAllowed(p, value)


def parseDate(p, values, default=None):
    if not _checkCount(p, values):
        return default
    o = values[0]
    if isinstance(o, datetime.datetime):
        return timeutil.normalizeTime(o)
    if isinstance(o, str):
        try:
            return timeutil.decodeGeneralizedTime(o)
        except ValueError:
            pass
    raise errors.TaskError(
        "Value %r for property %s is not a timestamp" % (o, p.getDisplayName())
    )
