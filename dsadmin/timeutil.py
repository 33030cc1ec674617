"""
Generalized time, duration and integer helpers.

Task timestamps travel in generalized time (RFC 4517 section 3.3.13),
durations in the server's "<integer> <unit>" syntax.
"""

import datetime
import re

_GENERALIZED_TIME = re.compile(
    r"^(?P<year>[0-9]{4})(?P<month>[0-9]{2})(?P<day>[0-9]{2})(?P<hour>[0-9]{2})"
    r"(?P<minute>[0-9]{2})?(?P<second>[0-9]{2})?"
    r"(?:[.,](?P<fraction>[0-9]+))?"
    r"(?P<zone>Z|[+-][0-9]{2}(?:[0-9]{2})?)\Z"
)

_INTEGER = re.compile(r"^[+-]?[0-9]+\Z")


def parseInteger(text):
    """
    Parse a decimal integer, optionally signed and surrounded by
    whitespace.

    Unlike C{int()}, digit group separators and non-ASCII digits are
    rejected.

    @raise ValueError: if C{text} is not an integer.
    """
    text = text.strip()
    if _INTEGER.match(text) is None:
        raise ValueError("Malformed integer %r" % text)
    return int(text)


def now():
    """Return the current time, normalized."""
    return normalizeTime(datetime.datetime.now(datetime.timezone.utc))


def normalizeTime(dt):
    """
    Return C{dt} as an aware UTC datetime truncated to milliseconds.

    Naive datetimes are taken to be in UTC already.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    else:
        dt = dt.astimezone(datetime.timezone.utc)
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def encodeGeneralizedTime(dt):
    """
    Format a datetime as generalized time in UTC.

    Milliseconds are included only when they are not zero.

    @rtype: str
    """
    dt = normalizeTime(dt)
    text = "%04d%02d%02d%02d%02d%02d" % (
        dt.year,
        dt.month,
        dt.day,
        dt.hour,
        dt.minute,
        dt.second,
    )
    millis = dt.microsecond // 1000
    if millis:
        text += ".%03d" % millis
    return text + "Z"


def decodeGeneralizedTime(text):
    """
    Parse a generalized time value.

    @param text: a value like C{20240102030405Z},
    C{20240102030405.123Z} or C{202401020304-0500}.

    @return: an aware datetime in UTC.

    @raise ValueError: if C{text} is not a generalized time value.
    """
    m = _GENERALIZED_TIME.match(text.strip())
    if m is None:
        raise ValueError("Malformed generalized time value %r" % text)

    fraction = m.group("fraction")
    if fraction is None:
        micros = 0
    else:
        micros = int((fraction + "000000")[:6])

    zone = m.group("zone")
    if zone == "Z":
        tz = datetime.timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset = datetime.timedelta(
            hours=int(zone[1:3]), minutes=int(zone[3:5] or 0)
        )
        tz = datetime.timezone(sign * offset)

    dt = datetime.datetime(
        int(m.group("year")),
        int(m.group("month")),
        int(m.group("day")),
        int(m.group("hour")),
        int(m.group("minute") or 0),
        int(m.group("second") or 0),
        micros,
        tzinfo=tz,
    )
    return normalizeTime(dt)


NANOS_PER_MILLI = 1000000

_UNITS = {}
for _names, _nanos in [
    (("ns", "nano", "nanos", "nanosecond", "nanoseconds"), 1),
    (("us", "micro", "micros", "microsecond", "microseconds"), 1000),
    (("ms", "milli", "millis", "millisecond", "milliseconds"), NANOS_PER_MILLI),
    (("s", "sec", "secs", "second", "seconds"), 1000 * NANOS_PER_MILLI),
    (("m", "min", "mins", "minute", "minutes"), 60 * 1000 * NANOS_PER_MILLI),
    (("h", "hr", "hrs", "hour", "hours"), 3600 * 1000 * NANOS_PER_MILLI),
    (("d", "day", "days"), 86400 * 1000 * NANOS_PER_MILLI),
]:
    for _name in _names:
        _UNITS[_name] = _nanos
del _names, _nanos, _name

_DURATION = re.compile(r"^(?P<count>[0-9]+)\s*(?P<unit>[a-z]+)\Z")


def parseDurationNanos(text):
    """
    Parse a duration like C{"30 days"} or C{"500ms"} into nanoseconds.

    @raise ValueError: if there is no integer part or the unit is not
    recognized.
    """
    m = _DURATION.match(text.strip().lower())
    if m is None:
        raise ValueError("Malformed duration %r" % text)
    unit = _UNITS.get(m.group("unit"))
    if unit is None:
        raise ValueError("Unrecognized duration unit in %r" % text)
    return int(m.group("count")) * unit


def parseDuration(text):
    """
    Parse a duration into milliseconds. Sub-millisecond parts are dropped.
    """
    return parseDurationNanos(text) // NANOS_PER_MILLI


_NAMED_UNITS = [
    (86400 * 1000 * NANOS_PER_MILLI, "day"),
    (3600 * 1000 * NANOS_PER_MILLI, "hour"),
    (60 * 1000 * NANOS_PER_MILLI, "minute"),
    (1000 * NANOS_PER_MILLI, "second"),
    (NANOS_PER_MILLI, "millisecond"),
    (1000, "microsecond"),
]


def formatDurationNanos(nanos):
    """
    Format nanoseconds using the largest unit that divides them evenly.
    """
    for size, name in _NAMED_UNITS:
        if nanos and nanos % size == 0:
            count = nanos // size
            break
    else:
        count, name = nanos, "nanosecond"
    if count == 1:
        return "1 %s" % name
    return "%d %ss" % (count, name)


def formatDuration(millis):
    """
    Format milliseconds as a duration, e.g. C{formatDuration(86400000)}
    gives C{"1 day"}.
    """
    return formatDurationNanos(millis * NANOS_PER_MILLI)
