import logging

from . import utils
from .keyuri import Algorithm, KeyURI
from .otp import OTP

logger = logging.getLogger(__name__)


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.

    ``counter`` is plain instance state with no locking. Share an instance
    between threads only under an external lock, or give each thread its own.
    """

    def __init__(
        self,
        secret: bytes,
        digits: int = 6,
        algorithm: Algorithm = Algorithm.SHA1,
        counter: int = 0,
    ) -> None:
        """
        :param secret: decoded secret bytes
        :param digits: number of integers in the OTP. Some apps expect this to be 6 digits, others support more.
        :param algorithm: hash function to use in the HMAC
        :param counter: starting HMAC counter value, defaults to 0
        """
        if not 0 <= counter <= utils.MAX_UINT64:
            raise ValueError("counter must be an unsigned 64-bit integer")
        self.counter = counter
        super().__init__(secret, digits=digits, algorithm=algorithm)

    @classmethod
    def from_key_uri(cls, key: KeyURI) -> "HOTP":
        """
        Builds a handler from a key URI. This is where the secret is decoded,
        so an invalid secret surfaces here as ``SecretDecodeError``.
        """
        hotp = cls(key.byte_secret(), digits=key.digits, algorithm=key.algorithm, counter=key.counter or 0)
        logger.debug("created hotp handler (algorithm=%s, digits=%d)", hotp.algorithm.value, hotp.digits)
        return hotp

    def generate(self, count: int) -> str:
        """
        Generates the OTP for the given count, and moves the stored counter to it.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        code = self.generate_otp(count)
        self.counter = count
        return code

    def next(self) -> str:
        """
        Advances the stored counter by one and returns the OTP for the new value.
        """
        self.counter = (self.counter + 1) & utils.MAX_UINT64
        return self.generate_otp(self.counter)
