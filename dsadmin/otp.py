"""
One-time passwords.

HMAC-based (RFC 4226) and time-based (RFC 6238) one-time passwords, as
generated by the server for its one-time password authentication
mechanisms.
"""

import hashlib
import hmac
import struct
import time as _time

from dsadmin import errors
from ldaptor._encoder import to_bytes

DEFAULT_NUM_DIGITS = 6
DEFAULT_INTERVAL_SECONDS = 30

ALGORITHMS = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
    "sha512": hashlib.sha512,
}


def _checkDigits(numDigits):
    if not 6 <= numDigits <= 8:
        raise errors.UsageError(
            "The number of digits must be between 6 and 8, not %r" % (numDigits,)
        )


def hotp(sharedSecret, counter, numDigits=DEFAULT_NUM_DIGITS, algorithm="sha1"):
    """
    Generate an HMAC-based one-time password.

    @param sharedSecret: the secret key, as bytes. Text is encoded as
    UTF-8.

    @param counter: the moving factor, a non-negative integer.

    @param numDigits: the length of the password, 6 to 8.

    @param algorithm: C{sha1}, C{sha256} or C{sha512}.

    @return: the password, left-padded with zeros to C{numDigits}.
    @rtype: str

    @raise errors.UsageError: if C{numDigits} or C{algorithm} is not
    supported, or C{counter} is negative.
    """
    _checkDigits(numDigits)
    try:
        digestmod = ALGORITHMS[algorithm.lower()]
    except KeyError:
        raise errors.UsageError("Unsupported HMAC algorithm %r" % (algorithm,))
    if counter < 0:
        raise errors.UsageError("The counter must not be negative")

    digest = hmac.new(
        to_bytes(sharedSecret), struct.pack(">Q", counter), digestmod
    ).digest()
    offset = digest[-1] & 0x0F
    code = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF
    return "%0*d" % (numDigits, code % 10 ** numDigits)


def totp(
    sharedSecret,
    time=None,
    intervalSeconds=DEFAULT_INTERVAL_SECONDS,
    numDigits=DEFAULT_NUM_DIGITS,
    algorithm="sha1",
):
    """
    Generate a time-based one-time password.

    @param time: seconds since the epoch; the current time if None.

    @param intervalSeconds: the length of each time step.

    @raise errors.UsageError: if C{intervalSeconds} is not positive, or
    as for L{hotp}.
    """
    if intervalSeconds <= 0:
        raise errors.UsageError(
            "The interval must be positive, not %r" % (intervalSeconds,)
        )
    if time is None:
        time = _time.time()
    return hotp(
        sharedSecret,
        int(time) // intervalSeconds,
        numDigits=numDigits,
        algorithm=algorithm,
    )
