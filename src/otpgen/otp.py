import hmac
import struct
from typing import Any, Callable

from . import utils
from .keyuri import Algorithm


class OTP(object):
    """
    Base class for OTP handlers.

    Holds the decoded secret, the hash constructor and the code length, and
    implements the RFC 4226 truncation shared by HOTP and TOTP.
    """

    def __init__(self, secret: bytes, digits: int = 6, algorithm: Algorithm = Algorithm.SHA1) -> None:
        if digits < 1:
            raise ValueError("digits must be a positive integer")
        if digits > 10:
            raise ValueError("digits must be no greater than 10")
        self.digits = digits
        self.algorithm = Algorithm(algorithm)
        self.digest: Callable[..., Any] = self.algorithm.digest
        self.secret = secret

    def generate_otp(self, input: int) -> str:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        """
        # Implements RFC 4226
        if not 0 <= input <= utils.MAX_UINT64:
            raise ValueError("input must be an unsigned 64-bit integer")
        hmac_hash = hmac.new(self.secret, self.int_to_bytestring(input), self.digest).digest()
        offset = hmac_hash[-1] & 0xF
        code = struct.unpack(">I", hmac_hash[offset : offset + 4])[0] & 0x7FFFFFFF
        return str(code % 10**self.digits).zfill(self.digits)

    @staticmethod
    def int_to_bytestring(i: int) -> bytes:
        """
        Turns an integer to the OATH specified
        bytestring, which is fed to the HMAC
        along with the secret
        """
        return struct.pack(">Q", i)
