"""
Helpers for decoding control and extended operation values with
ldaptor's BER codec.

ldaptor's decoder skips elements with unknown tags and signals
truncated input with assertions. Values decoded here must be complete
and fully understood, so both turn into L{errors.DecodeError}.
"""

from dsadmin import errors
from ldaptor._encoder import to_unicode
from ldaptor.protocols import pureber


class UnknownElement(pureber.BEROctetString):
    """An element whose tag the decoder context does not know."""


class StrictDecoderContext(pureber.BERDecoderContext):
    """
    A decoder context that never skips elements.

    Subclasses list the accepted tags in C{Identities}; any other tag
    decodes as an L{UnknownElement}.
    """

    Identities = {
        pureber.BEROctetString.tag: pureber.BEROctetString,
        pureber.BERSequence.tag: pureber.BERSequence,
    }

    def lookup_id(self, id):
        klass = pureber.BERDecoderContext.lookup_id(self, id)
        if klass is None:
            return UnknownElement
        return klass


def decodeValue(value, context, what):
    """
    Decode exactly one BER element from C{value}.

    @param value: the encoded bytes.

    @param context: a L{StrictDecoderContext}.

    @param what: a description of the value, for error messages.

    @raise errors.DecodeError: if the value is missing, truncated, has
    trailing data or holds an element of an unknown type.
    """
    if value is None:
        raise errors.DecodeError("The %s is missing" % what)
    try:
        obj, used = pureber.berDecodeObject(context, value)
    except (
        pureber.BERExceptionInsufficientData,
        AssertionError,
        IndexError,
        KeyError,
        ValueError,
    ) as e:
        raise errors.DecodeError("Cannot decode the %s: %r" % (what, e))
    if obj is None or used != len(value):
        raise errors.DecodeError("Cannot decode the %s: unexpected data" % what)
    _checkKnown(obj, what)
    return obj


def _checkKnown(obj, what):
    if isinstance(obj, UnknownElement):
        raise errors.DecodeError(
            "Cannot decode the %s: unexpected element with tag 0x%02x"
            % (what, obj.tag)
        )
    if isinstance(obj, pureber.BERSequence):
        for child in obj:
            _checkKnown(child, what)


def expect(obj, klass, what):
    if not isinstance(obj, klass):
        raise errors.DecodeError(
            "Cannot decode the %s: expected %s, got %r"
            % (what, klass.__name__, obj)
        )
    return obj


def octetStrings(seq, what):
    """Return the values of a sequence of octet strings as text."""
    expect(seq, pureber.BERSequence, what)
    return [to_unicode(expect(e, pureber.BEROctetString, what).value) for e in seq]
