"""
Request controls.

Each control is an ldaptor L{pureldap.LDAPControl}, so it can be passed
to ldaptor requests as is, with typed accessors for the contents of its
value. Controls also have a JSON form: an object with the fields
C{oid}, C{control-name}, C{criticality} and at most one of
C{value-base64} and C{value-json}.
"""

import base64
import binascii
import json

from twisted.python import log
from zope.interface import implementer

from dsadmin import asn1, errors, interfaces
from ldaptor._encoder import to_bytes, to_unicode
from ldaptor.protocols import pureber, pureldap

JSON_OID = "oid"
JSON_CONTROL_NAME = "control-name"
JSON_CRITICALITY = "criticality"
JSON_VALUE_BASE64 = "value-base64"
JSON_VALUE_JSON = "value-json"

JSON_FIELDS = (
    JSON_OID,
    JSON_CONTROL_NAME,
    JSON_CRITICALITY,
    JSON_VALUE_BASE64,
    JSON_VALUE_JSON,
)


@implementer(interfaces.IControl)
class Control(pureldap.LDAPControl):
    """
    A control with an opaque value.

    Subclasses set C{oid} and C{controlName}, build the value in their
    constructor and implement L{fromValue}. Those with a JSON value
    form also implement L{getValueJSON} and L{fromValueJSON}.
    """

    oid = None
    controlName = None

    def __init__(self, controlType=None, criticality=False, controlValue=None, tag=None):
        if controlType is None:
            controlType = self.oid
        if controlType is None:
            raise errors.UsageError("A control OID is required")
        if controlValue is not None:
            controlValue = to_bytes(controlValue)
        pureldap.LDAPControl.__init__(
            self,
            controlType=to_unicode(controlType),
            criticality=criticality or None,
            controlValue=controlValue,
            tag=tag,
        )

    def getOID(self):
        return to_unicode(self.controlType)

    def isCritical(self):
        return bool(self.criticality)

    def hasValue(self):
        return self.controlValue is not None

    def getValue(self):
        return self.controlValue

    def getControlName(self):
        if self.controlName is None:
            return self.getOID()
        return self.controlName

    def getValueJSON(self):
        """
        Return the value as a dict, or None if this control has no JSON
        value form.
        """
        return None

    def toJSON(self):
        d = {
            JSON_OID: self.getOID(),
            JSON_CONTROL_NAME: self.getControlName(),
            JSON_CRITICALITY: self.isCritical(),
        }
        valueJSON = self.getValueJSON()
        if valueJSON is not None:
            d[JSON_VALUE_JSON] = valueJSON
        elif self.controlValue is not None:
            d[JSON_VALUE_BASE64] = to_unicode(base64.b64encode(self.controlValue))
        return d

    @classmethod
    def fromValue(klass, criticality, value):
        """
        Build a control of this type from its criticality and encoded
        value.

        @raise errors.DecodeError: if the value is missing or malformed.
        """
        return klass(criticality=criticality, controlValue=value)

    @classmethod
    def fromValueJSON(klass, criticality, obj, strict=True):
        raise errors.DecodeError(
            "Control %s does not have a JSON value form" % klass.__name__
        )

    def __eq__(self, other):
        if not isinstance(other, Control):
            return NotImplemented
        return (
            self.getOID() == other.getOID()
            and self.isCritical() == other.isCritical()
            and self.controlValue == other.controlValue
        )

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.getOID(), self.controlValue))

    def __repr__(self):
        l = ["oid=%r" % self.getOID()]
        if self.isCritical():
            l.append("criticality=True")
        if self.controlValue is not None:
            l.append("controlValue=%r" % self.controlValue)
        return "%s(%s)" % (self.__class__.__name__, ", ".join(l))


def _checkFields(obj, known, what, strict):
    if not isinstance(obj, dict):
        raise errors.DecodeError("The %s must be a JSON object" % what)
    if strict:
        unknown = sorted(set(obj) - set(known))
        if unknown:
            raise errors.DecodeError(
                "Unrecognized fields in the %s: %s" % (what, ", ".join(unknown))
            )


def _jsonString(obj, name, what, required=False):
    value = obj.get(name)
    if value is None:
        if required:
            raise errors.DecodeError("The %s is missing field %s" % (what, name))
        return None
    if not isinstance(value, str):
        raise errors.DecodeError("Field %s of the %s must be a string" % (name, what))
    return value


class GetEffectiveRightsRequestControl(Control):
    """
    Ask the server to return the rights a user has on each returned
    entry, through the C{aclRights} and C{aclRightsInfo} operational
    attributes.
    """

    oid = "1.3.6.1.4.1.42.2.27.9.5.2"
    controlName = "Get Effective Rights Request Control"

    def __init__(self, authzID=None, attributes=None, criticality=False):
        """
        @param authzID: the authorization ID of the user whose rights
        are wanted, such as C{dn:uid=jdoe,ou=People,dc=example,dc=com}.
        The bound user is used when None.

        @param attributes: names of attributes to return rights for.
        """
        if attributes is None:
            attributes = []
        self.authzID = authzID
        self.attributes = list(attributes)

        value = None
        if authzID is not None or self.attributes:
            l = [pureber.BEROctetString(authzID or "")]
            if self.attributes:
                l.append(
                    pureber.BERSequence(
                        [pureber.BEROctetString(a) for a in self.attributes]
                    )
                )
            value = pureber.BERSequence(l).toWire()
        Control.__init__(self, criticality=criticality, controlValue=value)

    def getAuthzID(self):
        return self.authzID

    def getAttributes(self):
        return list(self.attributes)

    def getValueJSON(self):
        if self.controlValue is None:
            return None
        d = {}
        if self.authzID is not None:
            d["authorization-id"] = self.authzID
        if self.attributes:
            d["attributes"] = list(self.attributes)
        return d

    @classmethod
    def fromValue(klass, criticality, value):
        if value is None:
            return klass(criticality=criticality)
        what = "get effective rights request control value"
        seq = asn1.expect(
            asn1.decodeValue(value, asn1.StrictDecoderContext(), what),
            pureber.BERSequence,
            what,
        )
        if not 1 <= len(seq.data) <= 2:
            raise errors.DecodeError("Cannot decode the %s: wrong length" % what)
        authzID = seq.data[0]
        authzID = to_unicode(asn1.expect(authzID, pureber.BEROctetString, what).value)
        attributes = []
        if len(seq.data) == 2:
            attributes = asn1.octetStrings(seq.data[1], what)
        return klass(authzID=authzID, attributes=attributes, criticality=criticality)

    @classmethod
    def fromValueJSON(klass, criticality, obj, strict=True):
        what = "get effective rights request control value"
        _checkFields(obj, ("authorization-id", "attributes"), what, strict)
        authzID = _jsonString(obj, "authorization-id", what)
        attributes = obj.get("attributes", [])
        if not isinstance(attributes, list) or not all(
            isinstance(a, str) for a in attributes
        ):
            raise errors.DecodeError(
                "Field attributes of the %s must be a list of strings" % what
            )
        return klass(authzID=authzID, attributes=attributes, criticality=criticality)


class _OperationPurposeElement(pureber.BEROctetString):
    pass


class _ApplicationName(_OperationPurposeElement):
    tag = pureber.CLASS_CONTEXT | 0


class _ApplicationVersion(_OperationPurposeElement):
    tag = pureber.CLASS_CONTEXT | 1


class _CodeLocation(_OperationPurposeElement):
    tag = pureber.CLASS_CONTEXT | 2


class _RequestPurpose(_OperationPurposeElement):
    tag = pureber.CLASS_CONTEXT | 3


class OperationPurposeDecoderContext(asn1.StrictDecoderContext):
    Identities = {
        pureber.BERSequence.tag: pureber.BERSequence,
        _ApplicationName.tag: _ApplicationName,
        _ApplicationVersion.tag: _ApplicationVersion,
        _CodeLocation.tag: _CodeLocation,
        _RequestPurpose.tag: _RequestPurpose,
    }


class OperationPurposeRequestControl(Control):
    """
    Tell the server which application sent a request and why, for
    inclusion in its access log.
    """

    oid = "1.3.6.1.4.1.30221.2.5.19"
    controlName = "Operation Purpose Request Control"

    _elements = [
        ("applicationName", _ApplicationName, "application-name"),
        ("applicationVersion", _ApplicationVersion, "application-version"),
        ("codeLocation", _CodeLocation, "code-location"),
        ("requestPurpose", _RequestPurpose, "request-purpose"),
    ]

    def __init__(
        self,
        applicationName=None,
        applicationVersion=None,
        codeLocation=None,
        requestPurpose=None,
        criticality=False,
    ):
        """
        @raise errors.UsageError: if none of the four values is given.
        """
        self.applicationName = applicationName
        self.applicationVersion = applicationVersion
        self.codeLocation = codeLocation
        self.requestPurpose = requestPurpose

        l = []
        for name, klass, _ in self._elements:
            value = getattr(self, name)
            if value is not None:
                l.append(klass(value))
        if not l:
            raise errors.UsageError(
                "At least one of applicationName, applicationVersion, "
                "codeLocation and requestPurpose is required"
            )
        Control.__init__(
            self, criticality=criticality, controlValue=pureber.BERSequence(l).toWire()
        )

    def getApplicationName(self):
        return self.applicationName

    def getApplicationVersion(self):
        return self.applicationVersion

    def getCodeLocation(self):
        return self.codeLocation

    def getRequestPurpose(self):
        return self.requestPurpose

    def getValueJSON(self):
        d = {}
        for name, _, jsonName in self._elements:
            value = getattr(self, name)
            if value is not None:
                d[jsonName] = value
        return d

    @classmethod
    def fromValue(klass, criticality, value):
        what = "operation purpose request control value"
        seq = asn1.expect(
            asn1.decodeValue(value, OperationPurposeDecoderContext(), what),
            pureber.BERSequence,
            what,
        )
        if not seq.data:
            raise errors.DecodeError("The %s is an empty sequence" % what)
        kw = {}
        for element in seq.data:
            for name, elementClass, _ in klass._elements:
                if isinstance(element, elementClass):
                    kw[name] = to_unicode(element.value)
                    break
            else:
                raise errors.DecodeError(
                    "Cannot decode the %s: unexpected element %r" % (what, element)
                )
        try:
            return klass(criticality=criticality, **kw)
        except errors.UsageError as e:
            raise errors.DecodeError(e.message)

    @classmethod
    def fromValueJSON(klass, criticality, obj, strict=True):
        what = "operation purpose request control value"
        _checkFields(obj, [e[2] for e in klass._elements], what, strict)
        kw = {}
        for name, _, jsonName in klass._elements:
            kw[name] = _jsonString(obj, jsonName, what)
        try:
            return klass(criticality=criticality, **kw)
        except errors.UsageError as e:
            raise errors.DecodeError(e.message)


class TransactionSpecificationRequestControl(Control):
    """
    Mark a request as part of a transaction started with the start
    transaction extended operation. The control is always critical.
    """

    oid = "1.3.6.1.1.21.2"
    controlName = "Transaction Specification Request Control"

    def __init__(self, transactionID):
        """
        @param transactionID: the transaction ID returned by the server,
        as bytes.
        """
        if transactionID is None:
            raise errors.UsageError("A transaction ID is required")
        self.transactionID = to_bytes(transactionID)
        Control.__init__(self, criticality=True, controlValue=self.transactionID)

    def getTransactionID(self):
        return self.transactionID

    def getValueJSON(self):
        return {
            "transaction-id": to_unicode(base64.b64encode(self.transactionID)),
        }

    @classmethod
    def fromValue(klass, criticality, value):
        if value is None:
            raise errors.DecodeError(
                "The transaction specification request control has no value"
            )
        return klass(value)

    @classmethod
    def fromValueJSON(klass, criticality, obj, strict=True):
        what = "transaction specification request control value"
        _checkFields(obj, ("transaction-id",), what, strict)
        text = _jsonString(obj, "transaction-id", what, required=True)
        return klass(_b64decode(text, what))


class NameWithEntryUUIDRequestControl(Control):
    """
    Ask the server to name an added entry after its entryUUID, replacing
    the RDN given in the add request.
    """

    oid = "1.3.6.1.4.1.30221.2.5.44"
    controlName = "Name With entryUUID Request Control"

    def __init__(self, criticality=False):
        Control.__init__(self, criticality=criticality)

    @classmethod
    def fromValue(klass, criticality, value):
        if value is not None:
            raise errors.DecodeError(
                "The name with entryUUID request control must not have a value"
            )
        return klass(criticality=criticality)


class ControlDecoderContext:
    """Map control OIDs to control types."""

    Identities = {
        GetEffectiveRightsRequestControl.oid: GetEffectiveRightsRequestControl,
        OperationPurposeRequestControl.oid: OperationPurposeRequestControl,
        TransactionSpecificationRequestControl.oid: TransactionSpecificationRequestControl,
        NameWithEntryUUIDRequestControl.oid: NameWithEntryUUIDRequestControl,
    }

    def __init__(self, fallback=None):
        self.fallback = fallback

    def lookup_id(self, oid):
        try:
            return self.Identities[oid]
        except KeyError:
            if self.fallback:
                return self.fallback.lookup_id(oid)
            else:
                return None


def decodeControl(oid, criticality=False, value=None, context=None):
    """
    Build the control for an OID, criticality and encoded value.

    Controls of unknown types are returned as a generic L{Control}.

    @raise errors.DecodeError: if the value does not suit the control
    type.
    """
    if context is None:
        context = ControlDecoderContext()
    oid = to_unicode(oid)
    klass = context.lookup_id(oid)
    if klass is None:
        log.msg(
            "No control type for OID %s, decoding as a generic control" % oid,
            debug=True,
        )
        return Control(oid, criticality=criticality, controlValue=value)
    return klass.fromValue(bool(criticality), value)


def fromLDAPControl(c, context=None):
    """
    Convert an ldaptor L{pureldap.LDAPControl}, or a
    C{(controlType, criticality, controlValue)} tuple as found in
    L{pureldap.LDAPMessage.controls}, to a typed control.
    """
    if isinstance(c, pureldap.LDAPControl):
        c = (c.controlType, c.criticality, c.controlValue)
    controlType, criticality, controlValue = c
    return decodeControl(controlType, bool(criticality), controlValue, context)


def _b64decode(text, what):
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError):
        raise errors.DecodeError("The %s is not valid base64" % what)


def decodeJSONControl(obj, strict=True, context=None):
    """
    Decode the JSON form of a control.

    @param obj: a dict, or a str holding a JSON object.

    @param strict: whether to reject fields this module does not know,
    at the top level and inside C{value-json}.

    @raise errors.DecodeError: if the object is not a valid control.
    """
    what = "JSON control"
    if isinstance(obj, str):
        try:
            obj = json.loads(obj)
        except ValueError as e:
            raise errors.DecodeError("The %s is not valid JSON: %s" % (what, e))
    _checkFields(obj, JSON_FIELDS, what, strict)

    oid = _jsonString(obj, JSON_OID, what, required=True)
    criticality = obj.get(JSON_CRITICALITY)
    if not isinstance(criticality, bool):
        raise errors.DecodeError(
            "Field %s of the %s must be a boolean" % (JSON_CRITICALITY, what)
        )
    _jsonString(obj, JSON_CONTROL_NAME, what)

    if JSON_VALUE_BASE64 in obj and JSON_VALUE_JSON in obj:
        raise errors.DecodeError(
            "The %s has both %s and %s" % (what, JSON_VALUE_BASE64, JSON_VALUE_JSON)
        )

    if context is None:
        context = ControlDecoderContext()

    if JSON_VALUE_JSON in obj:
        klass = context.lookup_id(oid)
        if klass is None:
            raise errors.DecodeError(
                "Control %s does not have a JSON value form" % oid
            )
        return klass.fromValueJSON(criticality, obj[JSON_VALUE_JSON], strict)

    value = None
    if JSON_VALUE_BASE64 in obj:
        value = _b64decode(
            _jsonString(obj, JSON_VALUE_BASE64, what, required=True), what
        )
    return decodeControl(oid, criticality, value, context)
