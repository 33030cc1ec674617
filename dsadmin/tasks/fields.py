"""
Declarative task fields.

Each task type lists its fields; a L{TaskField} ties a constructor
keyword to an entry attribute, an optional L{TaskProperty} and a syntax.
The syntax knows how to read the field from an entry or a property map,
how to write it back, and how to check a value passed to a typed
constructor.

Errors raised while reading entries or property maps are
L{errors.TaskError}; errors raised by L{Syntax.check} are
L{errors.UsageError}.
"""

import datetime

from dsadmin import errors, timeutil
from dsadmin.entry import getAttributeValues
from dsadmin.tasks import properties


class Syntax:
    dataType = str
    multiValued = False

    def fromEntry(self, e, attributeName):
        raise NotImplementedError

    def toEntry(self, value):
        """Return the list of attribute values for C{value}."""
        if value is None:
            return []
        return [self.encode(value)]

    def encode(self, value):
        return value

    def fromProperty(self, p, values):
        raise NotImplementedError

    def toProperty(self, value):
        if value is None:
            return []
        return [value]

    def check(self, value, name):
        return value

    def empty(self, value):
        return value is None


def _firstValue(e, attributeName):
    values = getAttributeValues(e, attributeName)
    if values:
        return values[0]
    return None


class Text(Syntax):
    def fromEntry(self, e, attributeName):
        return _firstValue(e, attributeName)

    def fromProperty(self, p, values):
        return properties.parseString(p, values)

    def check(self, value, name):
        if value is not None and not isinstance(value, str):
            raise errors.UsageError("%s must be a string, not %r" % (name, value))
        return value


class TextList(Syntax):
    multiValued = True

    def fromEntry(self, e, attributeName):
        return getAttributeValues(e, attributeName)

    def toEntry(self, value):
        return list(value)

    def fromProperty(self, p, values):
        return properties.parseStrings(p, values, default=[])

    def toProperty(self, value):
        return list(value)

    def check(self, value, name):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        l = list(value)
        for v in l:
            if not isinstance(v, str):
                raise errors.UsageError(
                    "%s must only contain strings, not %r" % (name, v)
                )
        return l

    def empty(self, value):
        return not value


class Flag(Syntax):
    """
    A boolean attribute. Only C{true} and C{false} are accepted, in any
    case.
    """

    dataType = bool

    def fromEntry(self, e, attributeName):
        value = _firstValue(e, attributeName)
        if value is None:
            return None
        if value.lower() == "true":
            return True
        if value.lower() == "false":
            return False
        raise errors.TaskError(
            "Cannot parse value %r of attribute %s as a boolean"
            % (value, attributeName)
        )

    def encode(self, value):
        if value:
            return "true"
        return "false"

    def fromProperty(self, p, values):
        return properties.parseBoolean(p, values)

    def check(self, value, name):
        if value is not None and not isinstance(value, bool):
            raise errors.UsageError("%s must be a boolean, not %r" % (name, value))
        return value


class Integer(Syntax):
    dataType = int

    def __init__(self, minimum=None, maximum=None):
        self.minimum = minimum
        self.maximum = maximum

    def _inRange(self, value):
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True

    def fromEntry(self, e, attributeName):
        text = _firstValue(e, attributeName)
        if text is None:
            return None
        try:
            value = timeutil.parseInteger(text)
        except ValueError:
            raise errors.TaskError(
                "Cannot parse value %r of attribute %s as an integer"
                % (text, attributeName)
            )
        if not self._inRange(value):
            raise errors.TaskError(
                "Value %d of attribute %s is out of range" % (value, attributeName)
            )
        return value

    def encode(self, value):
        return str(value)

    def fromProperty(self, p, values):
        value = properties.parseLong(p, values)
        if value is not None and not self._inRange(value):
            raise errors.TaskError(
                "Value %d of property %s is out of range"
                % (value, p.getDisplayName())
            )
        return value

    def check(self, value, name):
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise errors.UsageError("%s must be an integer, not %r" % (name, value))
        if not self._inRange(value):
            raise errors.UsageError("%s is out of range: %d" % (name, value))
        return value


class Timestamp(Syntax):
    dataType = datetime.datetime

    def fromEntry(self, e, attributeName):
        text = _firstValue(e, attributeName)
        if text is None:
            return None
        try:
            return timeutil.decodeGeneralizedTime(text)
        except ValueError:
            raise errors.TaskError(
                "Cannot parse value %r of attribute %s as a generalized time"
                % (text, attributeName)
            )

    def encode(self, value):
        return timeutil.encodeGeneralizedTime(value)

    def fromProperty(self, p, values):
        return properties.parseDate(p, values)

    def check(self, value, name):
        if value is None:
            return None
        if not isinstance(value, datetime.datetime):
            raise errors.UsageError("%s must be a datetime, not %r" % (name, value))
        return timeutil.normalizeTime(value)


class Choice(Syntax):
    """
    One of the named constants of C{constants}, optionally restricted
    to C{allowed}.
    """

    def __init__(self, constants, allowed=None):
        self.constants = constants
        self.allowed = allowed

    def fromEntry(self, e, attributeName):
        text = _firstValue(e, attributeName)
        if text is None:
            return None
        value = self.constants.forName(text)
        if value is None:
            raise errors.TaskError(
                "Unrecognized value %r for attribute %s" % (text, attributeName)
            )
        return value

    def encode(self, value):
        return value.getName()

    def fromProperty(self, p, values):
        text = properties.parseString(p, values)
        if text is None:
            return None
        value = self.constants.forName(text)
        if value is None:
            raise errors.TaskError(
                "Unrecognized value %r for property %s" % (text, p.getDisplayName())
            )
        return value

    def toProperty(self, value):
        if value is None:
            return []
        return [value.getName()]

    def allowedNames(self):
        if self.allowed is not None:
            return [c.getName() for c in self.allowed]
        return sorted(c.getName() for c in self.constants.values())

    def check(self, value, name):
        if value is None:
            return None
        if isinstance(value, str):
            converted = self.constants.forName(value)
            if converted is None:
                raise errors.UsageError("Unrecognized %s %r" % (name, value))
            value = converted
        if not isinstance(value, self.constants):
            raise errors.UsageError(
                "%s must be a %s, not %r" % (name, self.constants.__name__, value)
            )
        return value


class Duration(Syntax):
    """
    A duration such as C{"30 days"}, held as a number of milliseconds.
    """

    def __init__(self, minimum=None):
        self.minimum = minimum

    def _parse(self, text, what):
        try:
            value = timeutil.parseDuration(text)
        except ValueError:
            raise errors.TaskError("Cannot parse %r of %s as a duration" % (text, what))
        if self.minimum is not None and value < self.minimum:
            raise errors.TaskError("Duration %r of %s is too short" % (text, what))
        return value

    def fromEntry(self, e, attributeName):
        text = _firstValue(e, attributeName)
        if text is None:
            return None
        return self._parse(text, "attribute " + attributeName)

    def encode(self, value):
        return timeutil.formatDuration(value)

    def fromProperty(self, p, values):
        text = properties.parseString(p, values)
        if text is None:
            return None
        return self._parse(text, "property " + p.getDisplayName())

    def toProperty(self, value):
        if value is None:
            return []
        return [timeutil.formatDuration(value)]

    def check(self, value, name):
        return Integer(self.minimum).check(value, name)


class DurationMillis(Duration):
    """
    A duration written to entries as text but exposed in property maps
    as a number of milliseconds.
    """

    dataType = int

    def fromProperty(self, p, values):
        value = properties.parseLong(p, values)
        if value is not None and self.minimum is not None and value < self.minimum:
            raise errors.TaskError(
                "Duration %d of property %s is too short" % (value, p.getDisplayName())
            )
        return value

    def toProperty(self, value):
        if value is None:
            return []
        return [value]


class TaskField:
    """
    One typed field of a task type.

    @param name: the constructor keyword and instance attribute name.

    @param syntax: a L{Syntax} instance.

    @param property: the L{properties.TaskProperty} exposing this field
    to property maps, or None for fields only the server sets.

    @param attributeName: the entry attribute; defaults to the
    attribute name of C{property}.

    @param required: whether entries must carry the attribute; defaults
    to C{property.isRequired()}.

    @param default: the value used when the field is absent.
    """

    def __init__(
        self,
        name,
        syntax,
        property=None,
        attributeName=None,
        required=None,
        default=None,
    ):
        self.name = name
        self.syntax = syntax
        self.property = property
        if attributeName is None:
            attributeName = property.getAttributeName()
        self.attributeName = attributeName
        if required is None:
            required = property is not None and property.isRequired()
        self.required = required
        self.default = default

    def _default(self):
        if self.syntax.multiValued:
            return list(self.default or [])
        return self.default

    def fromEntry(self, e):
        value = self.syntax.fromEntry(e, self.attributeName)
        if self.syntax.empty(value):
            if self.required:
                raise errors.TaskError(
                    "Task entry %s is missing required attribute %s"
                    % (e.dn.getText(), self.attributeName)
                )
            return self._default()
        return value

    def fromProperties(self, props):
        values = props.get(self.property)
        if values is None:
            values = []
        value = self.syntax.fromProperty(self.property, list(values))
        if self.syntax.empty(value):
            return self._default()
        return value

    def check(self, value):
        value = self.syntax.check(value, self.name)
        if self.syntax.empty(value):
            if self.required:
                raise errors.UsageError("%s is required" % self.name)
            return self._default()
        return value

    def toEntry(self, value):
        return self.syntax.toEntry(value)

    def toProperty(self, value):
        return self.syntax.toProperty(value)

    def __repr__(self):
        return "%s(%r, %s)" % (
            self.__class__.__name__,
            self.name,
            self.attributeName,
        )


def stringProperty(attributeName, displayName, description, **kw):
    return properties.TaskProperty(attributeName, displayName, description, str, **kw)


def booleanProperty(attributeName, displayName, description, **kw):
    return properties.TaskProperty(attributeName, displayName, description, bool, **kw)


def integerProperty(attributeName, displayName, description, **kw):
    return properties.TaskProperty(attributeName, displayName, description, int, **kw)


def dateProperty(attributeName, displayName, description, **kw):
    return properties.TaskProperty(
        attributeName, displayName, description, datetime.datetime, **kw
    )
