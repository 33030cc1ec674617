"""
Extended operations.

The requests and results here are ldaptor L{pureldap.LDAPExtendedRequest}
and L{pureldap.LDAPExtendedResponse} subclasses. They encode their value
when constructed, and the C{fromExtendedRequest} and
C{fromExtendedResponse} class methods decode the generic objects
ldaptor produces when reading from the wire.
"""

from dsadmin import asn1, errors, timeutil
from dsadmin.controls import fromLDAPControl
from ldaptor._encoder import to_unicode
from ldaptor.protocols import pureber, pureldap

MULTI_UPDATE_REQUEST_OID = "1.3.6.1.4.1.30221.2.6.17"
MULTI_UPDATE_RESULT_OID = "1.3.6.1.4.1.30221.2.6.18"
PASSWORD_POLICY_STATE_OID = "1.3.6.1.4.1.30221.2.6.1"

ERROR_BEHAVIOR_ATOMIC = 0
ERROR_BEHAVIOR_ABORT_ON_ERROR = 1
ERROR_BEHAVIOR_CONTINUE_ON_ERROR = 2

CHANGES_APPLIED_NONE = 0
CHANGES_APPLIED_ALL = 1
CHANGES_APPLIED_PARTIAL = 2

ERROR_BEHAVIORS = {
    ERROR_BEHAVIOR_ATOMIC: "ATOMIC",
    ERROR_BEHAVIOR_ABORT_ON_ERROR: "ABORT_ON_ERROR",
    ERROR_BEHAVIOR_CONTINUE_ON_ERROR: "CONTINUE_ON_ERROR",
}

CHANGES_APPLIED = {
    CHANGES_APPLIED_NONE: "NONE",
    CHANGES_APPLIED_ALL: "ALL",
    CHANGES_APPLIED_PARTIAL: "PARTIAL",
}

UPDATE_REQUEST_TYPES = (
    pureldap.LDAPAddRequest,
    pureldap.LDAPDelRequest,
    pureldap.LDAPModifyRequest,
    pureldap.LDAPModifyDNRequest,
    pureldap.LDAPExtendedRequest,
)

UPDATE_RESPONSE_TYPES = (
    pureldap.LDAPAddResponse,
    pureldap.LDAPDelResponse,
    pureldap.LDAPModifyResponse,
    pureldap.LDAPModifyDNResponse,
    pureldap.LDAPExtendedResponse,
)


class ExtendedValueDecoderContext(asn1.StrictDecoderContext):
    """
    Decode values holding LDAP protocol operations, as well as the
    universal types.
    """

    Identities = dict(pureldap.LDAPBERDecoderContext.Identities)
    Identities.update(
        {
            pureber.BERBoolean.tag: pureber.BERBoolean,
            pureber.BERNull.tag: pureber.BERNull,
            pureber.BERInteger.tag: pureber.BERInteger,
            pureber.BEREnumerated.tag: pureber.BEREnumerated,
            pureber.BEROctetString.tag: pureber.BEROctetString,
            pureber.BERSequence.tag: pureber.BERSequence,
            pureber.BERSet.tag: pureber.BERSet,
            pureldap.LDAPControls.tag: pureldap.LDAPControls,
        }
    )


def _checkOID(name, expected, what):
    if name is None or to_unicode(name) != expected:
        raise errors.DecodeError(
            "Cannot decode %r as a %s: expected OID %s" % (name, what, expected)
        )


def _updateElements(updates, types, what):
    """
    Split the (operation, controls) sequences of a multi-update value.
    """
    asn1.expect(updates, pureber.BERSequence, what)
    l = []
    for element in updates:
        asn1.expect(element, pureber.BERSequence, what)
        if not 1 <= len(element.data) <= 2:
            raise errors.DecodeError(
                "Cannot decode the %s: wrong number of elements in %r"
                % (what, element)
            )
        op = element.data[0]
        if not isinstance(op, types):
            raise errors.DecodeError(
                "Cannot decode the %s: unsupported operation %r" % (what, op)
            )
        controls = []
        if len(element.data) == 2:
            asn1.expect(element.data[1], pureldap.LDAPControls, what)
            controls = [fromLDAPControl(c) for c in element.data[1]]
        l.append((op, controls))
    return l


def _encodeUpdates(updates):
    l = []
    for op, controls in updates:
        elements = [op]
        if controls:
            elements.append(pureldap.LDAPControls(list(controls)))
        l.append(pureber.BERSequence(elements))
    return pureber.BERSequence(l)


def _normalizeUpdates(updates, types, what):
    l = []
    for u in updates:
        if isinstance(u, tuple):
            op, controls = u
        else:
            op, controls = u, None
        if not isinstance(op, types):
            raise errors.UsageError("Unsupported %s: %r" % (what, op))
        l.append((op, list(controls or [])))
    return l


class MultiUpdateExtendedRequest(pureldap.LDAPExtendedRequest):
    """
    Send several add, delete, modify, modify DN and extended requests
    to be processed together.

    @ivar requests: a list of (request, controls) tuples.
    """

    oid = MULTI_UPDATE_REQUEST_OID

    def __init__(self, errorBehavior=ERROR_BEHAVIOR_ATOMIC, requests=(), tag=None):
        """
        @param errorBehavior: one of the C{ERROR_BEHAVIOR_*} constants.

        @param requests: ldaptor requests, or (request, controls) tuples
        where controls is a list of L{pureldap.LDAPControl}. At least
        one is required.

        @raise errors.UsageError: if the error behavior is unknown, a
        request is of an unsupported type, or there are no requests.
        """
        if errorBehavior not in ERROR_BEHAVIORS:
            raise errors.UsageError("Unknown error behavior %r" % (errorBehavior,))
        self.errorBehavior = errorBehavior
        self.requests = _normalizeUpdates(requests, UPDATE_REQUEST_TYPES, "request")
        if not self.requests:
            raise errors.UsageError("A multi-update request needs requests")

        value = pureber.BERSequence(
            [pureber.BEREnumerated(errorBehavior), _encodeUpdates(self.requests)]
        )
        pureldap.LDAPExtendedRequest.__init__(
            self, requestName=self.oid, requestValue=value.toWire(), tag=tag
        )

    def getErrorBehavior(self):
        return self.errorBehavior

    def getRequests(self):
        return [op for op, _ in self.requests]

    def getControls(self, index):
        return list(self.requests[index][1])

    @classmethod
    def fromExtendedRequest(klass, req):
        """
        @raise errors.DecodeError: if C{req} is not a valid multi-update
        request.
        """
        what = "multi-update request value"
        _checkOID(req.requestName, klass.oid, "multi-update request")
        seq = asn1.expect(
            asn1.decodeValue(req.requestValue, ExtendedValueDecoderContext(), what),
            pureber.BERSequence,
            what,
        )
        if len(seq.data) != 2:
            raise errors.DecodeError("Cannot decode the %s: wrong length" % what)
        errorBehavior = asn1.expect(seq.data[0], pureber.BEREnumerated, what).value
        if errorBehavior not in ERROR_BEHAVIORS:
            raise errors.DecodeError(
                "Cannot decode the %s: unknown error behavior %d" % (what, errorBehavior)
            )
        requests = _updateElements(seq.data[1], UPDATE_REQUEST_TYPES, what)
        if not requests:
            raise errors.DecodeError("The %s holds no requests" % what)
        return klass(errorBehavior=errorBehavior, requests=requests, tag=req.tag)

    def __repr__(self):
        return "%s(errorBehavior=%s, requests=%r)" % (
            self.__class__.__name__,
            ERROR_BEHAVIORS[self.errorBehavior],
            self.getRequests(),
        )


class MultiUpdateExtendedResult(pureldap.LDAPExtendedResponse):
    """
    The result of a multi-update request.

    @ivar responses: a list of (response, controls) tuples, one for each
    request the server processed.
    """

    oid = MULTI_UPDATE_RESULT_OID

    def __init__(
        self,
        resultCode=None,
        matchedDN=None,
        errorMessage=None,
        changesApplied=None,
        responses=(),
        tag=None,
    ):
        self.changesApplied = changesApplied
        self.responses = _normalizeUpdates(responses, UPDATE_RESPONSE_TYPES, "response")
        if changesApplied is not None and changesApplied not in CHANGES_APPLIED:
            raise errors.UsageError("Unknown changes applied value %r" % (changesApplied,))

        responseName = None
        response = None
        if changesApplied is not None:
            responseName = self.oid
            response = pureber.BERSequence(
                [pureber.BEREnumerated(changesApplied), _encodeUpdates(self.responses)]
            ).toWire()
        pureldap.LDAPExtendedResponse.__init__(
            self,
            resultCode=resultCode,
            matchedDN=matchedDN,
            errorMessage=errorMessage,
            responseName=responseName,
            response=response,
            tag=tag,
        )

    def getChangesApplied(self):
        """
        Return one of the C{CHANGES_APPLIED_*} constants, or None if the
        server sent no value.
        """
        return self.changesApplied

    def getResponses(self):
        return [op for op, _ in self.responses]

    def getControls(self, index):
        return list(self.responses[index][1])

    @classmethod
    def fromExtendedResponse(klass, resp):
        what = "multi-update result value"
        kw = dict(
            resultCode=resp.resultCode,
            matchedDN=resp.matchedDN,
            errorMessage=resp.errorMessage,
            tag=resp.tag,
        )
        if resp.response is None:
            return klass(**kw)
        seq = asn1.expect(
            asn1.decodeValue(resp.response, ExtendedValueDecoderContext(), what),
            pureber.BERSequence,
            what,
        )
        if len(seq.data) != 2:
            raise errors.DecodeError("Cannot decode the %s: wrong length" % what)
        changesApplied = asn1.expect(seq.data[0], pureber.BEREnumerated, what).value
        if changesApplied not in CHANGES_APPLIED:
            raise errors.DecodeError(
                "Cannot decode the %s: unknown changes applied value %d"
                % (what, changesApplied)
            )
        responses = _updateElements(seq.data[1], UPDATE_RESPONSE_TYPES, what)
        return klass(changesApplied=changesApplied, responses=responses, **kw)


# Password policy state operation types.
OP_TYPE_GET_PW_POLICY_DN = 0
OP_TYPE_GET_ACCOUNT_DISABLED_STATE = 1
OP_TYPE_SET_ACCOUNT_DISABLED_STATE = 2
OP_TYPE_CLEAR_ACCOUNT_DISABLED_STATE = 3
OP_TYPE_GET_ACCOUNT_EXPIRATION_TIME = 4
OP_TYPE_SET_ACCOUNT_EXPIRATION_TIME = 5
OP_TYPE_CLEAR_ACCOUNT_EXPIRATION_TIME = 6
OP_TYPE_GET_SECONDS_UNTIL_ACCOUNT_EXPIRATION = 7
OP_TYPE_GET_PW_CHANGED_TIME = 8
OP_TYPE_SET_PW_CHANGED_TIME = 9
OP_TYPE_CLEAR_PW_CHANGED_TIME = 10
OP_TYPE_GET_PW_EXPIRATION_WARNED_TIME = 11
OP_TYPE_SET_PW_EXPIRATION_WARNED_TIME = 12
OP_TYPE_CLEAR_PW_EXPIRATION_WARNED_TIME = 13
OP_TYPE_GET_SECONDS_UNTIL_PW_EXPIRATION = 14
OP_TYPE_GET_SECONDS_UNTIL_PW_EXPIRATION_WARNING = 15
OP_TYPE_GET_AUTH_FAILURE_TIMES = 16
OP_TYPE_ADD_AUTH_FAILURE_TIME = 17
OP_TYPE_SET_AUTH_FAILURE_TIMES = 18
OP_TYPE_CLEAR_AUTH_FAILURE_TIMES = 19
OP_TYPE_GET_SECONDS_UNTIL_AUTH_FAILURE_UNLOCK = 20
OP_TYPE_GET_REMAINING_AUTH_FAILURE_COUNT = 21
OP_TYPE_GET_LAST_LOGIN_TIME = 22
OP_TYPE_SET_LAST_LOGIN_TIME = 23
OP_TYPE_CLEAR_LAST_LOGIN_TIME = 24
OP_TYPE_GET_SECONDS_UNTIL_IDLE_LOCKOUT = 25
OP_TYPE_GET_PW_RESET_STATE = 26
OP_TYPE_SET_PW_RESET_STATE = 27
OP_TYPE_CLEAR_PW_RESET_STATE = 28
OP_TYPE_GET_SECONDS_UNTIL_PW_RESET_LOCKOUT = 29
OP_TYPE_GET_GRACE_LOGIN_USE_TIMES = 30
OP_TYPE_ADD_GRACE_LOGIN_USE_TIME = 31
OP_TYPE_SET_GRACE_LOGIN_USE_TIMES = 32
OP_TYPE_CLEAR_GRACE_LOGIN_USE_TIMES = 33
OP_TYPE_GET_REMAINING_GRACE_LOGIN_COUNT = 34
OP_TYPE_GET_PW_CHANGED_BY_REQUIRED_TIME = 35
OP_TYPE_SET_PW_CHANGED_BY_REQUIRED_TIME = 36
OP_TYPE_CLEAR_PW_CHANGED_BY_REQUIRED_TIME = 37
OP_TYPE_GET_SECONDS_UNTIL_REQUIRED_CHANGE_TIME = 38
OP_TYPE_GET_PW_HISTORY = 39
OP_TYPE_CLEAR_PW_HISTORY = 40
OP_TYPE_HAS_RETIRED_PASSWORD = 41
OP_TYPE_GET_PASSWORD_RETIRED_TIME = 42
OP_TYPE_GET_RETIRED_PASSWORD_EXPIRATION_TIME = 43
OP_TYPE_PURGE_RETIRED_PASSWORD = 44


class PasswordPolicyStateOperation:
    """
    One get, set or clear operation on the password policy state of a
    user.

    Values are kept as bytes, as sent on the wire.
    """

    def __init__(self, opType, values=()):
        if isinstance(opType, bool) or not isinstance(opType, int):
            raise errors.UsageError("opType must be an integer, not %r" % (opType,))
        self.opType = opType
        self.values = [_valueBytes(v) for v in values]

    def getOperationType(self):
        return self.opType

    def getRawValues(self):
        return list(self.values)

    def getStringValue(self):
        """Return the first value as text, or None if there are none."""
        if not self.values:
            return None
        return to_unicode(self.values[0])

    def getStringValues(self):
        return [to_unicode(v) for v in self.values]

    def getBooleanValue(self):
        """
        @raise ValueError: unless there is exactly one value, and it is
        C{true} or C{false} in any case.
        """
        if len(self.values) != 1:
            raise ValueError(
                "Expected a single boolean value, got %d values" % len(self.values)
            )
        s = to_unicode(self.values[0]).lower()
        if s == "true":
            return True
        if s == "false":
            return False
        raise ValueError("Value %r is not a boolean" % self.values[0])

    def getIntValue(self):
        """
        @raise ValueError: if there are no values or the first one is
        not an integer.
        """
        if not self.values:
            raise ValueError("The operation has no values")
        return timeutil.parseInteger(to_unicode(self.values[0]))

    def getGeneralizedTimeValue(self):
        if not self.values:
            return None
        return timeutil.decodeGeneralizedTime(to_unicode(self.values[0]))

    def getGeneralizedTimeValues(self):
        return [timeutil.decodeGeneralizedTime(to_unicode(v)) for v in self.values]

    def toBER(self):
        l = [pureber.BEREnumerated(self.opType)]
        if self.values:
            l.append(
                pureber.BERSequence([pureber.BEROctetString(v) for v in self.values])
            )
        return pureber.BERSequence(l)

    def toWire(self):
        return self.toBER().toWire()

    @classmethod
    def fromBER(klass, element):
        """
        @raise errors.DecodeError: if C{element} is not a valid encoded
        operation.
        """
        what = "password policy state operation"
        asn1.expect(element, pureber.BERSequence, what)
        if not 1 <= len(element.data) <= 2:
            raise errors.DecodeError(
                "Cannot decode the %s: wrong number of elements" % what
            )
        opType = asn1.expect(element.data[0], pureber.BEREnumerated, what).value
        values = []
        if len(element.data) == 2:
            asn1.expect(element.data[1], pureber.BERSequence, what)
            values = [
                asn1.expect(v, pureber.BEROctetString, what).value
                for v in element.data[1]
            ]
        return klass(opType, values)

    def __eq__(self, other):
        if not isinstance(other, PasswordPolicyStateOperation):
            return NotImplemented
        return self.opType == other.opType and self.values == other.values

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.opType, tuple(self.values)))

    def __repr__(self):
        return "%s(opType=%d, values=%r)" % (
            self.__class__.__name__,
            self.opType,
            self.getStringValues(),
        )


def _valueBytes(value):
    if isinstance(value, bytes):
        return value
    if isinstance(value, bool):
        return b"true" if value else b"false"
    if isinstance(value, int):
        return str(value).encode("ascii")
    if hasattr(value, "tzinfo"):
        return timeutil.encodeGeneralizedTime(value).encode("ascii")
    return value.encode("utf-8")


def _op(opType, *values):
    return PasswordPolicyStateOperation(opType, values)


def createGetPasswordPolicyDNOperation():
    return _op(OP_TYPE_GET_PW_POLICY_DN)


def createGetAccountDisabledStateOperation():
    return _op(OP_TYPE_GET_ACCOUNT_DISABLED_STATE)


def createSetAccountDisabledStateOperation(isDisabled):
    return _op(OP_TYPE_SET_ACCOUNT_DISABLED_STATE, bool(isDisabled))


def createClearAccountDisabledStateOperation():
    return _op(OP_TYPE_CLEAR_ACCOUNT_DISABLED_STATE)


def createGetAccountExpirationTimeOperation():
    return _op(OP_TYPE_GET_ACCOUNT_EXPIRATION_TIME)


def createSetAccountExpirationTimeOperation(expirationTime):
    """
    @param expirationTime: a datetime, or None to use the current time.
    """
    return _op(OP_TYPE_SET_ACCOUNT_EXPIRATION_TIME, _timeOrNow(expirationTime))


def createClearAccountExpirationTimeOperation():
    return _op(OP_TYPE_CLEAR_ACCOUNT_EXPIRATION_TIME)


def createGetSecondsUntilAccountExpirationOperation():
    return _op(OP_TYPE_GET_SECONDS_UNTIL_ACCOUNT_EXPIRATION)


def createGetPasswordChangedTimeOperation():
    return _op(OP_TYPE_GET_PW_CHANGED_TIME)


def createSetPasswordChangedTimeOperation(passwordChangedTime):
    return _op(OP_TYPE_SET_PW_CHANGED_TIME, _timeOrNow(passwordChangedTime))


def createClearPasswordChangedTimeOperation():
    return _op(OP_TYPE_CLEAR_PW_CHANGED_TIME)


def createGetPasswordExpirationWarnedTimeOperation():
    return _op(OP_TYPE_GET_PW_EXPIRATION_WARNED_TIME)


def createSetPasswordExpirationWarnedTimeOperation(warnedTime):
    return _op(OP_TYPE_SET_PW_EXPIRATION_WARNED_TIME, _timeOrNow(warnedTime))


def createClearPasswordExpirationWarnedTimeOperation():
    return _op(OP_TYPE_CLEAR_PW_EXPIRATION_WARNED_TIME)


def createGetSecondsUntilPasswordExpirationOperation():
    return _op(OP_TYPE_GET_SECONDS_UNTIL_PW_EXPIRATION)


def createGetSecondsUntilPasswordExpirationWarningOperation():
    return _op(OP_TYPE_GET_SECONDS_UNTIL_PW_EXPIRATION_WARNING)


def createGetAuthenticationFailureTimesOperation():
    return _op(OP_TYPE_GET_AUTH_FAILURE_TIMES)


def createAddAuthenticationFailureTimeOperation(failureTimes=None):
    """
    @param failureTimes: datetimes to record, or None to record the
    current time.
    """
    if not failureTimes:
        failureTimes = [timeutil.now()]
    return _op(OP_TYPE_ADD_AUTH_FAILURE_TIME, *failureTimes)


def createSetAuthenticationFailureTimesOperation(failureTimes):
    return _op(OP_TYPE_SET_AUTH_FAILURE_TIMES, *(failureTimes or []))


def createClearAuthenticationFailureTimesOperation():
    return _op(OP_TYPE_CLEAR_AUTH_FAILURE_TIMES)


def createGetSecondsUntilAuthenticationFailureUnlockOperation():
    return _op(OP_TYPE_GET_SECONDS_UNTIL_AUTH_FAILURE_UNLOCK)


def createGetRemainingAuthenticationFailureCountOperation():
    return _op(OP_TYPE_GET_REMAINING_AUTH_FAILURE_COUNT)


def createGetLastLoginTimeOperation():
    return _op(OP_TYPE_GET_LAST_LOGIN_TIME)


def createSetLastLoginTimeOperation(lastLoginTime):
    return _op(OP_TYPE_SET_LAST_LOGIN_TIME, _timeOrNow(lastLoginTime))


def createClearLastLoginTimeOperation():
    return _op(OP_TYPE_CLEAR_LAST_LOGIN_TIME)


def createGetSecondsUntilIdleLockoutOperation():
    return _op(OP_TYPE_GET_SECONDS_UNTIL_IDLE_LOCKOUT)


def createGetPasswordResetStateOperation():
    return _op(OP_TYPE_GET_PW_RESET_STATE)


def createSetPasswordResetStateOperation(isReset):
    return _op(OP_TYPE_SET_PW_RESET_STATE, bool(isReset))


def createClearPasswordResetStateOperation():
    return _op(OP_TYPE_CLEAR_PW_RESET_STATE)


def createGetSecondsUntilPasswordResetLockoutOperation():
    return _op(OP_TYPE_GET_SECONDS_UNTIL_PW_RESET_LOCKOUT)


def createGetGraceLoginUseTimesOperation():
    return _op(OP_TYPE_GET_GRACE_LOGIN_USE_TIMES)


def createAddGraceLoginUseTimeOperation(useTimes=None):
    if not useTimes:
        useTimes = [timeutil.now()]
    return _op(OP_TYPE_ADD_GRACE_LOGIN_USE_TIME, *useTimes)


def createSetGraceLoginUseTimesOperation(useTimes):
    return _op(OP_TYPE_SET_GRACE_LOGIN_USE_TIMES, *(useTimes or []))


def createClearGraceLoginUseTimesOperation():
    return _op(OP_TYPE_CLEAR_GRACE_LOGIN_USE_TIMES)


def createGetRemainingGraceLoginCountOperation():
    return _op(OP_TYPE_GET_REMAINING_GRACE_LOGIN_COUNT)


def createGetPasswordChangedByRequiredTimeOperation():
    return _op(OP_TYPE_GET_PW_CHANGED_BY_REQUIRED_TIME)


def createSetPasswordChangedByRequiredTimeOperation(requiredTime=None):
    if requiredTime is None:
        return _op(OP_TYPE_SET_PW_CHANGED_BY_REQUIRED_TIME)
    return _op(OP_TYPE_SET_PW_CHANGED_BY_REQUIRED_TIME, requiredTime)


def createClearPasswordChangedByRequiredTimeOperation():
    return _op(OP_TYPE_CLEAR_PW_CHANGED_BY_REQUIRED_TIME)


def createGetSecondsUntilRequiredChangeTimeOperation():
    return _op(OP_TYPE_GET_SECONDS_UNTIL_REQUIRED_CHANGE_TIME)


def createGetPasswordHistoryCountOperation():
    return _op(OP_TYPE_GET_PW_HISTORY)


def createClearPasswordHistoryOperation():
    return _op(OP_TYPE_CLEAR_PW_HISTORY)


def createHasRetiredPasswordOperation():
    return _op(OP_TYPE_HAS_RETIRED_PASSWORD)


def createGetPasswordRetiredTimeOperation():
    return _op(OP_TYPE_GET_PASSWORD_RETIRED_TIME)


def createGetRetiredPasswordExpirationTimeOperation():
    return _op(OP_TYPE_GET_RETIRED_PASSWORD_EXPIRATION_TIME)


def createPurgeRetiredPasswordOperation():
    return _op(OP_TYPE_PURGE_RETIRED_PASSWORD)


def _timeOrNow(t):
    if t is None:
        return timeutil.now()
    return t


def _encodeState(userDN, operations):
    l = [pureber.BEROctetString(userDN)]
    if operations:
        l.append(pureber.BERSequence([op.toBER() for op in operations]))
    return pureber.BERSequence(l).toWire()


def _decodeState(value, what):
    seq = asn1.expect(
        asn1.decodeValue(value, ExtendedValueDecoderContext(), what),
        pureber.BERSequence,
        what,
    )
    if not 1 <= len(seq.data) <= 2:
        raise errors.DecodeError("Cannot decode the %s: wrong length" % what)
    userDN = to_unicode(asn1.expect(seq.data[0], pureber.BEROctetString, what).value)
    operations = []
    if len(seq.data) == 2:
        asn1.expect(seq.data[1], pureber.BERSequence, what)
        operations = [PasswordPolicyStateOperation.fromBER(e) for e in seq.data[1]]
    return userDN, operations


class _OperationLookup:
    def getOperations(self):
        return list(self.operations)

    def getOperation(self, opType):
        """
        Return the first operation of the given type, or None.
        """
        for op in self.operations:
            if op.opType == opType:
                return op
        return None


class PasswordPolicyStateExtendedRequest(
    _OperationLookup, pureldap.LDAPExtendedRequest
):
    """
    Read or change the password policy state of a user.

    With no operations, the server returns the full state of the user.
    """

    oid = PASSWORD_POLICY_STATE_OID

    def __init__(self, userDN=None, operations=(), tag=None):
        if userDN is None:
            raise errors.UsageError("A user DN is required")
        self.userDN = to_unicode(userDN)
        self.operations = list(operations)
        pureldap.LDAPExtendedRequest.__init__(
            self,
            requestName=self.oid,
            requestValue=_encodeState(self.userDN, self.operations),
            tag=tag,
        )

    def getUserDN(self):
        return self.userDN

    @classmethod
    def fromExtendedRequest(klass, req):
        _checkOID(req.requestName, klass.oid, "password policy state request")
        userDN, operations = _decodeState(
            req.requestValue, "password policy state request value"
        )
        return klass(userDN=userDN, operations=operations, tag=req.tag)

    def __repr__(self):
        return "%s(userDN=%r, operations=%r)" % (
            self.__class__.__name__,
            self.userDN,
            self.operations,
        )


class PasswordPolicyStateExtendedResult(
    _OperationLookup, pureldap.LDAPExtendedResponse
):
    oid = PASSWORD_POLICY_STATE_OID

    def __init__(
        self,
        resultCode=None,
        matchedDN=None,
        errorMessage=None,
        userDN=None,
        operations=(),
        tag=None,
    ):
        self.userDN = to_unicode(userDN)
        self.operations = list(operations)
        responseName = None
        response = None
        if userDN is not None:
            responseName = self.oid
            response = _encodeState(self.userDN, self.operations)
        pureldap.LDAPExtendedResponse.__init__(
            self,
            resultCode=resultCode,
            matchedDN=matchedDN,
            errorMessage=errorMessage,
            responseName=responseName,
            response=response,
            tag=tag,
        )

    def getUserDN(self):
        return self.userDN

    @classmethod
    def fromExtendedResponse(klass, resp):
        kw = dict(
            resultCode=resp.resultCode,
            matchedDN=resp.matchedDN,
            errorMessage=resp.errorMessage,
            tag=resp.tag,
        )
        if resp.response is None:
            return klass(**kw)
        userDN, operations = _decodeState(
            resp.response, "password policy state result value"
        )
        return klass(userDN=userDN, operations=operations, **kw)
