from typing import Union

from . import errors as errors
from .hotp import HOTP as HOTP
from .keyuri import Algorithm as Algorithm
from .keyuri import KeyURI as KeyURI
from .keyuri import OTPType as OTPType
from .keyuri import parse_key_uri as parse_key_uri
from .otp import OTP as OTP
from .totp import TOTP as TOTP

# otpauth://totp/FooCorp:alice@example.com?secret=JBSWY3DPEHPK3PXP&issuer=FooCorp&period=30
#            |        |              |                          |
#            |        |              |                          +-- query parameters
#            |        |              +-- account label
#            |        +-- issuer prefix, dropped on parse
#            +-- otp type (totp or hotp)


def new_engine(key: KeyURI) -> Union[HOTP, TOTP]:
    """
    Returns the handler matching the key URI type: TOTP or HOTP.

    :param key: parsed key URI
    :raises errors.SecretDecodeError: if the secret is not valid base32
    """
    if key.type is OTPType.TOTP:
        return TOTP.from_key_uri(key)
    return HOTP.from_key_uri(key)


def parse_uri(uri: str) -> Union[HOTP, TOTP]:
    """
    Parses the key URI for the OTP; works for either TOTP or HOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :returns: OTP handler
    """
    return new_engine(KeyURI.parse(uri))
