import datetime
import math
import re
from typing import Dict, Optional, Union
from urllib.parse import quote, urlencode

from .errors import NumericParseError

MAX_UINT64 = 2**64 - 1
MAX_INT64 = 2**63 - 1
MIN_INT64 = -(2**63)

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT = re.compile(r"[0-9]+")


def build_uri(
    otp_type: str,
    label: str,
    secret: str,
    algorithm: str,
    digits: int,
    period: Optional[int] = None,
    counter: Optional[int] = None,
    issuer: Optional[str] = None,
) -> str:
    """
    Returns a key URI; works for either TOTP or HOTP.

    For module-internal use. Every query parameter is written out, even when
    it holds the default value, and the keys are emitted in ascending order
    so the output is deterministic.

    The label is written without any issuer prefix.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param otp_type: "totp" or "hotp"
    :param label: account label, percent-encoded into the path
    :param secret: the base32 secret, as supplied
    :param algorithm: SHA1, SHA256 or SHA512
    :param digits: the length of the OTP generated code
    :param period: TOTP time slot width in seconds
    :param counter: HOTP counter
    :param issuer: included only when non-empty
    :returns: key uri
    """
    url_args: Dict[str, Union[int, str]] = {
        "secret": secret,
        "algorithm": algorithm,
        "digits": digits,
    }
    if period is not None:
        url_args["period"] = period
    if counter is not None:
        url_args["counter"] = counter
    if issuer:
        url_args["issuer"] = issuer

    query = urlencode(sorted(url_args.items())).replace("+", "%20")
    return "otpauth://{0}/{1}?{2}".format(otp_type, quote(label, safe=""), query)


def parse_int(param: str, value: str) -> int:
    """
    Parses a signed decimal integer that must fit in 64 bits.
    """
    if not _SIGNED_INT.fullmatch(value):
        raise NumericParseError(param, value, "not a decimal integer")
    n = int(value)
    if not MIN_INT64 <= n <= MAX_INT64:
        raise NumericParseError(param, value, "value out of range")
    return n


def parse_uint64(param: str, value: str) -> int:
    """
    Parses an unsigned decimal integer that must fit in 64 bits.
    """
    if not _UNSIGNED_INT.fullmatch(value):
        raise NumericParseError(param, value, "not an unsigned decimal integer")
    n = int(value)
    if n > MAX_UINT64:
        raise NumericParseError(param, value, "value out of range")
    return n


def unix_seconds(for_time: Union[int, float, datetime.datetime]) -> int:
    """
    Whole unix seconds for a timestamp or a datetime.

    Naive datetimes are taken as local time, like ``datetime.timestamp``.
    """
    if isinstance(for_time, datetime.datetime):
        return math.floor(for_time.timestamp())
    return math.floor(for_time)
