import pytest

from hybridseal.aes import (
    aes_decrypt,
    aes_encrypt,
    generate_aes_iv,
    generate_aes_key,
    generate_random_aes_key,
)
from hybridseal.context import (
    AES_GCM_TAG_BYTES,
    AES_IV_BYTES,
    AES_KEY_BYTES,
    AES_MAX_MESSAGE_BYTES,
    ContextStateError,
    CryptoContext,
    CryptoError,
    PlainMessage,
    Status,
)

EXAMPLE_MSG = bytes(range(1, 17))


def _counting(n):
    return bytes(i % 256 for i in range(n))


def _broken(n):
    raise OSError("no entropy")


def _ready(message=EXAMPLE_MSG):
    ctx = CryptoContext()
    ctx.msg = PlainMessage(message, Status.OK)
    generate_random_aes_key(ctx)
    generate_aes_iv(ctx)
    return ctx


def _encrypted():
    ctx = _ready()
    aes_encrypt(ctx)
    return ctx


GENERATORS = [
    pytest.param(
        lambda ctx: generate_aes_key(0xA5, ctx),
        "aes_key",
        "key",
        bytes([0xA5]) + _counting(AES_KEY_BYTES - 1),
        id="key-with-ok-bits",
    ),
    pytest.param(
        generate_random_aes_key, "aes_key", "key", _counting(AES_KEY_BYTES), id="random-key"
    ),
    pytest.param(generate_aes_iv, "aes_iv", "iv", _counting(AES_IV_BYTES), id="iv"),
]


@pytest.mark.parametrize("generate, part_name, value_name, expected", GENERATORS)
def test_generation_uses_random_source(generate, part_name, value_name, expected):
    ctx = CryptoContext(random_bytes=_counting)
    generate(ctx)
    part = getattr(ctx, part_name)
    assert getattr(part, value_name) == expected
    assert part.status == Status.OK


@pytest.mark.parametrize("generate, part_name, value_name, expected", GENERATORS)
def test_generation_with_system_random(generate, part_name, value_name, expected):
    ctx = CryptoContext()
    generate(ctx)
    part = getattr(ctx, part_name)
    assert len(getattr(part, value_name)) == len(expected)
    assert part.status == Status.OK


@pytest.mark.parametrize("generate, part_name, value_name, expected", GENERATORS)
@pytest.mark.parametrize(
    "failed, source, error",
    [(False, _broken, CryptoError), (True, _counting, ContextStateError)],
    ids=["random-failure", "failed-context"],
)
def test_generation_failure(generate, part_name, value_name, expected, failed, source, error):
    ctx = CryptoContext(random_bytes=source)
    if failed:
        ctx.fail()
    with pytest.raises(error):
        generate(ctx)
    assert getattr(ctx, part_name).status == Status.ERR
    assert ctx.status == Status.ERR


def test_generate_aes_key_random_failure_leaves_no_key():
    ctx = CryptoContext(random_bytes=_broken)
    with pytest.raises(CryptoError):
        generate_aes_key(1, ctx)
    assert ctx.aes_key.key == b""


@pytest.mark.parametrize("bad", [-1, 256])
def test_generate_aes_key_rejects_wide_ok_bits(bad):
    with pytest.raises(ValueError):
        generate_aes_key(bad, CryptoContext())


def test_generate_random_aes_key_short_random():
    ctx = CryptoContext(random_bytes=lambda n: b"\x01")
    with pytest.raises(CryptoError):
        generate_random_aes_key(ctx)
    assert ctx.status == Status.ERR


@pytest.mark.parametrize(
    "message",
    [EXAMPLE_MSG, _counting(AES_MAX_MESSAGE_BYTES)],
    ids=["example", "maximum"],
)
def test_encrypt_decrypt_round_trip(message):
    ctx = _ready(message)
    aes_encrypt(ctx)
    assert ctx.encrypted_msg.status == Status.OK
    assert ctx.aes_iv.status == Status.USED
    assert len(ctx.encrypted_msg.data) == len(message)
    assert len(ctx.encrypted_msg.tag) == AES_GCM_TAG_BYTES
    assert ctx.encrypted_msg.data != message
    ctx.msg = PlainMessage()
    aes_decrypt(ctx)
    assert ctx.msg.data == message
    assert ctx.msg.status == Status.OK
    assert ctx.status == Status.OK


def _without_key():
    ctx = CryptoContext()
    ctx.msg = PlainMessage(EXAMPLE_MSG, Status.OK)
    generate_aes_iv(ctx)
    return ctx


@pytest.mark.parametrize(
    "build",
    [
        lambda: _ready(b"x" * (AES_MAX_MESSAGE_BYTES + 1)),
        _without_key,
        lambda: _ready(b""),
        _encrypted,
    ],
    ids=["oversized", "no-key", "empty", "iv-reused"],
)
def test_encrypt_rejects_bad_state(build):
    ctx = build()
    with pytest.raises(ContextStateError):
        aes_encrypt(ctx)
    assert ctx.status == Status.ERR


@pytest.mark.parametrize(
    "build",
    [lambda: _ready(b"x" * (AES_MAX_MESSAGE_BYTES + 1)), lambda: _ready(b"")],
    ids=["oversized", "empty"],
)
def test_encrypt_failure_marks_encrypted_message(build):
    ctx = build()
    with pytest.raises(ContextStateError):
        aes_encrypt(ctx)
    assert ctx.encrypted_msg.status == Status.ERR


def _flip_tag(ctx):
    tag = bytearray(ctx.encrypted_msg.tag)
    tag[0] ^= 0xFF
    ctx.encrypted_msg.tag = bytes(tag)


def _reset_iv(ctx):
    ctx.aes_iv.status = Status.OK


@pytest.mark.parametrize(
    "spoil, error",
    [
        (_flip_tag, CryptoError),
        (generate_random_aes_key, CryptoError),
        (_reset_iv, ContextStateError),
        (CryptoContext.fail, ContextStateError),
    ],
    ids=["tampered-tag", "wrong-key", "unused-iv", "failed-context"],
)
def test_decrypt_failures(spoil, error):
    ctx = _encrypted()
    spoil(ctx)
    with pytest.raises(error):
        aes_decrypt(ctx)
    assert ctx.msg.status == Status.ERR
    assert ctx.status == Status.ERR


def test_decrypt_tampered_tag_leaves_no_plaintext():
    ctx = _encrypted()
    _flip_tag(ctx)
    with pytest.raises(CryptoError):
        aes_decrypt(ctx)
    assert ctx.msg.data == b""