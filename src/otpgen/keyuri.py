import base64
import hashlib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional
from urllib.parse import parse_qs, unquote, urlsplit

from . import utils
from .errors import (
    EmptyCounterError,
    EmptySecretError,
    InvalidAlgorithmError,
    InvalidOTPTypeError,
    InvalidSchemeError,
    InvalidURIError,
    NumericParseError,
    SecretDecodeError,
)

logger = logging.getLogger(__name__)

SCHEME = "otpauth"
DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30


class OTPType(str, Enum):
    TOTP = "totp"
    HOTP = "hotp"


class Algorithm(str, Enum):
    """
    HMAC hash functions allowed in a key URI.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digest(self) -> Callable[..., Any]:
        return _DIGESTS[self]


_DIGESTS: Dict[Algorithm, Callable[..., Any]] = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


@dataclass(frozen=True)
class KeyURI:
    """
    OTP configuration read from, or written to, an ``otpauth://`` URI.

    ``period`` only applies to TOTP and ``counter`` only to HOTP; the field
    that does not apply is always ``None``. An empty ``issuer`` is stored as
    ``None``.

    The secret is kept exactly as supplied. It is decoded by
    :meth:`byte_secret`, which engines call once when they are built.
    """

    type: OTPType
    secret: str
    account_label: str = ""
    issuer: Optional[str] = None
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = DEFAULT_DIGITS
    period: Optional[int] = None
    counter: Optional[int] = None

    def __post_init__(self) -> None:
        # frozen, so normalise through object.__setattr__
        try:
            object.__setattr__(self, "type", OTPType(self.type))
        except ValueError:
            raise InvalidOTPTypeError(str(self.type)) from None
        try:
            object.__setattr__(self, "algorithm", Algorithm(self.algorithm))
        except ValueError:
            raise InvalidAlgorithmError(str(self.algorithm)) from None
        if not self.secret:
            raise EmptySecretError()
        if not self.issuer:
            object.__setattr__(self, "issuer", None)

        if self.type is OTPType.TOTP:
            if self.period is None:
                object.__setattr__(self, "period", DEFAULT_PERIOD)
            object.__setattr__(self, "counter", None)
        else:
            if self.counter is None:
                raise EmptyCounterError()
            if not 0 <= self.counter <= utils.MAX_UINT64:
                raise NumericParseError("counter", str(self.counter), "value out of range")
            object.__setattr__(self, "period", None)

    @classmethod
    def parse(cls, uri: str) -> "KeyURI":
        """
        Parses a key URI; works for either TOTP or HOTP.

        Any issuer prefix in the label (``Issuer:alice``) is dropped and is
        not compared with the ``issuer`` query parameter.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format

        :param uri: the hotp/totp URI to parse
        :returns: KeyURI
        """
        try:
            parsed_uri = urlsplit(uri)
        except ValueError as e:
            raise InvalidURIError(str(e)) from e

        if parsed_uri.scheme != SCHEME:
            raise InvalidSchemeError(parsed_uri.scheme)
        # userinfo is not part of the type; the host stays case-sensitive
        host = parsed_uri.netloc.rpartition("@")[2]
        try:
            otp_type = OTPType(host)
        except ValueError:
            raise InvalidOTPTypeError(host) from None

        # Only what follows the first colon is the account label
        label = unquote(parsed_uri.path)
        if label.startswith("/"):
            label = label[1:]
        label = label.split(":", 1)[-1].strip()

        # the first value of a repeated parameter wins
        params = {k: v[0] for k, v in parse_qs(parsed_uri.query, keep_blank_values=True).items()}

        secret = params.get("secret")
        if not secret:
            raise EmptySecretError()

        algorithm = Algorithm.SHA1
        if params.get("algorithm"):
            try:
                algorithm = Algorithm(params["algorithm"])
            except ValueError:
                raise InvalidAlgorithmError(params["algorithm"]) from None

        digits = DEFAULT_DIGITS
        if params.get("digits"):
            digits = utils.parse_int("digits", params["digits"])

        period = None
        counter = None
        if otp_type is OTPType.TOTP:
            period = DEFAULT_PERIOD
            if params.get("period"):
                period = utils.parse_int("period", params["period"])
        else:
            if not params.get("counter"):
                raise EmptyCounterError()
            counter = utils.parse_uint64("counter", params["counter"])

        logger.debug("parsed %s key uri (algorithm=%s, digits=%d)", otp_type.value, algorithm.value, digits)
        return cls(
            type=otp_type,
            secret=secret,
            account_label=label,
            issuer=params.get("issuer") or None,
            algorithm=algorithm,
            digits=digits,
            period=period,
            counter=counter,
        )

    def to_uri(self) -> str:
        """
        Returns the key URI for this configuration.

        Query keys come out in ascending order. An issuer prefix that was
        part of the parsed label is not written back; the ``issuer``
        parameter is the only place the issuer appears.
        """
        return utils.build_uri(
            self.type.value,
            self.account_label,
            self.secret,
            algorithm=self.algorithm.value,
            digits=self.digits,
            period=self.period,
            counter=self.counter,
            issuer=self.issuer,
        )

    def __str__(self) -> str:
        return self.to_uri()

    def byte_secret(self) -> bytes:
        secret = self.secret.upper()
        missing_padding = len(secret) % 8
        if missing_padding != 0:
            secret += "=" * (8 - missing_padding)
        try:
            return base64.b32decode(secret)
        except ValueError as e:
            raise SecretDecodeError("secret is not valid base32: {}".format(e)) from e


def parse_key_uri(uri: str) -> KeyURI:
    return KeyURI.parse(uri)
