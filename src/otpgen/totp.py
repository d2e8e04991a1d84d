import datetime
import logging
import time
from typing import Union

from . import utils
from .hotp import HOTP
from .keyuri import Algorithm, KeyURI, OTPType

logger = logging.getLogger(__name__)

TimeLike = Union[int, float, datetime.datetime]


class TOTP(object):
    """
    Handler for time-based OTP counters.

    Codes are computed from ``floor(unix_time / period)`` through the wrapped
    HOTP handler's truncation; the HOTP handler's own counter is never read
    or changed, so :meth:`generate` and :meth:`expires` are safe to call from
    several threads.
    """

    def __init__(
        self,
        secret: bytes,
        digits: int = 6,
        algorithm: Algorithm = Algorithm.SHA1,
        period: int = 30,
    ) -> None:
        """
        :param secret: decoded secret bytes
        :param digits: number of integers in the OTP
        :param algorithm: hash function to use in the HMAC
        :param period: the time slot width in seconds
        """
        if period < 1:
            raise ValueError("period must be a positive integer")
        self.hotp = HOTP(secret, digits=digits, algorithm=algorithm)
        self.period = period

    @classmethod
    def from_key_uri(cls, key: KeyURI) -> "TOTP":
        if key.type is not OTPType.TOTP:
            raise ValueError("expected a totp key uri, got {}".format(key.type.value))
        totp = cls(key.byte_secret(), digits=key.digits, algorithm=key.algorithm, period=key.period)
        logger.debug("created totp handler (algorithm=%s, digits=%d, period=%d)", key.algorithm.value, key.digits, totp.period)
        return totp

    @property
    def digits(self) -> int:
        return self.hotp.digits

    def timecode(self, for_time: TimeLike) -> int:
        return utils.unix_seconds(for_time) // self.period

    def generate(self, for_time: TimeLike) -> str:
        """
        Generates the OTP for the time slot containing ``for_time``.

        Times before the unix epoch are rejected with ``ValueError``.

        :param for_time: unix seconds, or a datetime
        :returns: OTP
        """
        return self.hotp.generate_otp(self.timecode(for_time))

    def now(self) -> str:
        return self.generate(time.time())

    def expires(self, for_time: TimeLike) -> datetime.datetime:
        """
        Returns the start of the next time slot, as an aware UTC datetime.

        A ``for_time`` sitting exactly on a slot boundary expires one full
        period later, not at ``for_time`` itself. Expiries past the year 9999
        cannot be represented as a datetime and raise ``ValueError``, even
        where :meth:`generate` still works.
        """
        ts = utils.unix_seconds(for_time)
        return datetime.datetime.fromtimestamp(ts + self.period - ts % self.period, tz=datetime.timezone.utc)
