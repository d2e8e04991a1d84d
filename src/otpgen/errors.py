from typing import Optional


class KeyURIError(ValueError):
    """
    Base class for every failure raised while reading a key URI.
    """


class InvalidURIError(KeyURIError):
    pass


class InvalidSchemeError(KeyURIError):
    def __init__(self, scheme: str) -> None:
        super().__init__("invalid scheme {!r}, expected 'otpauth'".format(scheme))
        self.scheme = scheme


class InvalidOTPTypeError(KeyURIError):
    def __init__(self, otp_type: str) -> None:
        super().__init__("invalid otp type {!r}, expected 'totp' or 'hotp'".format(otp_type))
        self.otp_type = otp_type


class EmptySecretError(KeyURIError):
    def __init__(self) -> None:
        super().__init__("secret param is required")


class InvalidAlgorithmError(KeyURIError):
    def __init__(self, algorithm: str) -> None:
        super().__init__("invalid algorithm {!r}, must be SHA1, SHA256 or SHA512".format(algorithm))
        self.algorithm = algorithm


class EmptyCounterError(KeyURIError):
    def __init__(self) -> None:
        super().__init__("counter param is required for HOTP")


class NumericParseError(KeyURIError):
    """
    Raised when ``digits``, ``period`` or ``counter`` is present but is not
    a valid integer of the expected range.
    """

    def __init__(self, param: str, value: str, reason: Optional[str] = None) -> None:
        message = "invalid {} param {!r}".format(param, value)
        if reason:
            message += ": " + reason
        super().__init__(message)
        self.param = param
        self.value = value


class SecretDecodeError(KeyURIError):
    """
    The secret is not valid base32. Only raised when an engine decodes it,
    never while parsing.
    """
