import pytest

from spotics.core.config import DEFAULT_TOTP_SECRET
from spotics.core.totp import TimeCodeGenerator, derive_secret, totp

RFC6238_KEY = b"12345678901234567890"


@pytest.mark.parametrize(
    "timestamp,code",
    [
        (59, "287082"),
        (1111111109, "081804"),
        (1111111111, "050471"),
        (1234567890, "005924"),
        (2000000000, "279037"),
    ],
)
def test_totp_rfc6238_sha1_vectors(timestamp, code):
    assert totp(RFC6238_KEY, timestamp) == code


def test_derive_secret_xor_masks_by_position():
    # 12^9, 56^10, 76^11
    assert derive_secret([12, 56, 76]) == "55071"


def test_derive_secret_mask_wraps_every_33_bytes():
    secret = derive_secret([0] * 34)
    assert secret == "".join(str(i % 33 + 9) for i in range(34))
    assert secret.endswith("419")


def test_derive_secret_rejects_non_bytes():
    with pytest.raises(ValueError):
        derive_secret([12, 256])


def test_default_secret_unmasks_to_known_text():
    assert derive_secret(DEFAULT_TOTP_SECRET) == "5507145853487499592248630329347"


def test_generator_is_deterministic():
    ts = 1720000000
    a = TimeCodeGenerator(DEFAULT_TOTP_SECRET)
    b = TimeCodeGenerator(list(DEFAULT_TOTP_SECRET))
    code = a.generate(ts)
    assert code == a.generate(ts) == b.generate(ts)
    assert len(code) == 6 and code.isdigit()
    assert code == totp(b"5507145853487499592248630329347", ts)


def test_generator_code_is_stable_within_period():
    gen = TimeCodeGenerator(DEFAULT_TOTP_SECRET)
    # 1719999990 starts a 30 second window
    assert gen.generate(1719999990) == gen.generate(1720000019)


def test_generator_requires_secret():
    with pytest.raises(ValueError):
        TimeCodeGenerator([])
