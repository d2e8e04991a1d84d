import pytest

import otpgen
from otpgen import KeyURI, parse_key_uri
from otpgen.errors import (
    EmptyCounterError,
    EmptySecretError,
    InvalidAlgorithmError,
    InvalidOTPTypeError,
    InvalidSchemeError,
    KeyURIError,
    NumericParseError,
    SecretDecodeError,
)
from otpgen.keyuri import Algorithm, OTPType

SECRET = "4ezxc3dfa4y645bdxbdebbzzb733xdwfzda56zdda5fd4zcdaczx"


def test_parse_without_label_issuer_uses_defaults():
    key = parse_key_uri("otpauth://totp/test%40example.com?secret=" + SECRET)
    assert key == KeyURI(
        type=OTPType.TOTP,
        secret=SECRET,
        account_label="test@example.com",
        algorithm=Algorithm.SHA1,
        digits=6,
        period=30,
    )
    assert key.issuer is None
    assert key.counter is None


def test_parse_all_params_for_totp():
    key = KeyURI.parse(
        "otpauth://totp/Example%3A%20test%40example.com?secret={}"
        "&algorithm=SHA256&digits=8&period=15&issuer=Example".format(SECRET)
    )
    assert key.type is OTPType.TOTP
    assert key.account_label == "test@example.com"
    assert key.secret == SECRET
    assert key.algorithm is Algorithm.SHA256
    assert key.digits == 8
    assert key.period == 15
    assert key.issuer == "Example"


def test_parse_all_params_for_hotp():
    key = KeyURI.parse(
        "otpauth://hotp/Example%3A%20test%40example.com?secret={}"
        "&algorithm=SHA512&digits=8&counter=1&issuer=Example".format(SECRET)
    )
    assert key.type is OTPType.HOTP
    assert key.account_label == "test@example.com"
    assert key.algorithm is Algorithm.SHA512
    assert key.counter == 1
    assert key.period is None
    assert key.issuer == "Example"


def test_parse_keeps_secret_case():
    key = KeyURI.parse("otpauth://totp/a?secret=" + SECRET)
    assert key.secret == SECRET
    assert key.byte_secret() == KeyURI.parse("otpauth://totp/a?secret=" + SECRET.upper()).byte_secret()


def test_parse_params_in_any_order():
    key = KeyURI.parse("otpauth://hotp/bob?counter=42&issuer=Acme&digits=7&secret=" + SECRET)
    assert (key.counter, key.issuer, key.digits) == (42, "Acme", 7)


@pytest.mark.parametrize(
    "path, label",
    [
        ("alice", "alice"),
        ("Acme:alice", "alice"),
        ("Acme%3Aalice", "alice"),
        ("Acme:%20alice%20", "alice"),
        ("Acme:alice:extra", "alice:extra"),
        ("", ""),
    ],
)
def test_parse_label(path, label):
    assert KeyURI.parse("otpauth://totp/{}?secret={}".format(path, SECRET)).account_label == label


def test_label_issuer_is_not_checked_against_param():
    key = KeyURI.parse("otpauth://totp/Acme:alice?issuer=Other&secret=" + SECRET)
    assert key.account_label == "alice"
    assert key.issuer == "Other"


def test_parse_counter_max_uint64():
    key = KeyURI.parse("otpauth://hotp/a?counter=18446744073709551615&secret=" + SECRET)
    assert key.counter == 2**64 - 1


@pytest.mark.parametrize(
    "uri, error",
    [
        ("https://example.com", InvalidSchemeError),
        ("otpauth://xotp/test%40example.com?secret=" + SECRET, InvalidOTPTypeError),
        ("otpauth://TOTP/test%40example.com?secret=" + SECRET, InvalidOTPTypeError),
        ("otpauth://totp/test%40example.com?secret={}&algorithm=SHA2".format(SECRET), InvalidAlgorithmError),
        ("otpauth://totp/test%40example.com?secret={}&algorithm=sha1".format(SECRET), InvalidAlgorithmError),
        ("otpauth://totp/Example%3Atest%40example.com", EmptySecretError),
        ("otpauth://totp/Example%3Atest%40example.com?secret=", EmptySecretError),
        ("otpauth://hotp/Example%3Atest%40example.com?secret=" + SECRET, EmptyCounterError),
        ("otpauth://totp/a?digits=six&secret=" + SECRET, NumericParseError),
        ("otpauth://totp/a?period=1.5&secret=" + SECRET, NumericParseError),
        ("otpauth://totp/a?period=%2030&secret=" + SECRET, NumericParseError),
        ("otpauth://hotp/a?counter=-1&secret=" + SECRET, NumericParseError),
        ("otpauth://hotp/a?counter=18446744073709551616&secret=" + SECRET, NumericParseError),
        ("otpauth://hotp/a?counter=1_000&secret=" + SECRET, NumericParseError),
    ],
)
def test_parse_errors(uri, error):
    with pytest.raises(error):
        KeyURI.parse(uri)


def test_parse_errors_are_value_errors():
    with pytest.raises(ValueError):
        KeyURI.parse("https://example.com")
    assert issubclass(NumericParseError, KeyURIError)


def test_numeric_parse_error_names_param():
    with pytest.raises(NumericParseError) as excinfo:
        KeyURI.parse("otpauth://totp/a?digits=x&secret=" + SECRET)
    assert excinfo.value.param == "digits"
    assert excinfo.value.value == "x"


def test_secret_is_not_decoded_while_parsing():
    key = KeyURI.parse("otpauth://totp/a?secret=not-base32")
    with pytest.raises(SecretDecodeError):
        key.byte_secret()


def test_digits_and_period_are_not_bounded():
    key = KeyURI.parse("otpauth://totp/a?digits=-3&period=0&secret=" + SECRET)
    assert key.digits == -3
    assert key.period == 0


def test_to_uri_totp():
    key = KeyURI(
        type="totp",
        account_label="test@example.com",
        secret=SECRET,
        algorithm="SHA256",
        digits=8,
        period=15,
        issuer="Example",
    )
    assert key.to_uri() == (
        "otpauth://totp/test%40example.com?algorithm=SHA256&digits=8&issuer=Example"
        "&period=15&secret=" + SECRET
    )
    assert str(key) == key.to_uri()


def test_to_uri_hotp():
    key = KeyURI(
        type="hotp",
        account_label="test@example.com",
        secret=SECRET,
        algorithm="SHA256",
        digits=8,
        counter=1,
        issuer="Example",
    )
    assert key.to_uri() == (
        "otpauth://hotp/test%40example.com?algorithm=SHA256&counter=1&digits=8"
        "&issuer=Example&secret=" + SECRET
    )


def test_to_uri_always_writes_defaults_and_skips_empty_issuer():
    key = KeyURI(type="totp", account_label="alice", secret="JBSWY3DPEHPK3PXP", issuer="")
    assert key.to_uri() == "otpauth://totp/alice?algorithm=SHA1&digits=6&period=30&secret=JBSWY3DPEHPK3PXP"


def test_to_uri_escapes_label_and_params():
    key = KeyURI(type="totp", account_label="a b/c", secret="JBSWY3DPEHPK3PXP", issuer="Acme & Co")
    uri = key.to_uri()
    assert uri.startswith("otpauth://totp/a%20b%2Fc?")
    assert "issuer=Acme%20%26%20Co" in uri
    assert KeyURI.parse(uri) == key


@pytest.mark.parametrize(
    "key",
    [
        KeyURI(type="totp", account_label="alice@example.com", secret=SECRET),
        KeyURI(type="totp", account_label="", secret=SECRET, algorithm="SHA512", digits=8, period=60, issuer="Acme"),
        KeyURI(type="hotp", account_label="bob", secret=SECRET, counter=0),
        KeyURI(type="hotp", account_label="bob", secret=SECRET, algorithm="SHA256", digits=7, counter=2**64 - 1, issuer="Acme"),
    ],
)
def test_round_trip(key):
    assert KeyURI.parse(key.to_uri()) == key


def test_round_trip_drops_label_issuer_prefix():
    key = KeyURI.parse("otpauth://totp/Acme:alice?issuer=Acme&secret=" + SECRET)
    uri = key.to_uri()
    assert "Acme%3Aalice" not in uri
    assert uri.startswith("otpauth://totp/alice?")
    assert KeyURI.parse(uri) == key


def test_constructor_normalises_type_specific_fields():
    totp = KeyURI(type="totp", secret=SECRET, counter=5)
    assert totp.counter is None
    assert totp.period == 30
    hotp = KeyURI(type="hotp", secret=SECRET, period=60, counter=5)
    assert hotp.period is None


def test_constructor_requires_hotp_counter():
    with pytest.raises(EmptyCounterError):
        KeyURI(type="hotp", secret=SECRET)


def test_key_uri_is_immutable():
    key = KeyURI(type="totp", secret=SECRET)
    with pytest.raises(AttributeError):
        key.digits = 8


def test_parse_uri_returns_matching_handler():
    totp = otpgen.parse_uri("otpauth://totp/a?secret=" + SECRET)
    assert isinstance(totp, otpgen.TOTP)
    assert totp.generate(31) == "873671"
    hotp = otpgen.parse_uri("otpauth://hotp/a?counter=1&secret=" + SECRET)
    assert isinstance(hotp, otpgen.HOTP)
    assert hotp.next() == "539540"


@pytest.mark.parametrize(
    "kwargs, error",
    [
        ({"type": "xotp"}, InvalidOTPTypeError),
        ({"type": "TOTP"}, InvalidOTPTypeError),
        ({"type": "totp", "algorithm": "MD5"}, InvalidAlgorithmError),
        ({"type": "hotp", "algorithm": "sha1", "counter": 0}, InvalidAlgorithmError),
    ],
)
def test_constructor_raises_typed_errors(kwargs, error):
    with pytest.raises(error):
        KeyURI(secret=SECRET, **kwargs)


def test_parse_ignores_userinfo_before_type():
    key = KeyURI.parse("otpauth://user@totp/alice?secret=" + SECRET)
    assert key.type is OTPType.TOTP
    assert key.account_label == "alice"
    with pytest.raises(InvalidOTPTypeError):
        KeyURI.parse("otpauth://user@TOTP/alice?secret=" + SECRET)
