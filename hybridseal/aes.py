"""AES-256-GCM key and IV generation, encryption and decryption on a context."""

from __future__ import annotations

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from hybridseal.context import (
    AES_GCM_TAG_BYTES,
    AES_IV_BYTES,
    AES_KEY_BYTES,
    AES_MAX_MESSAGE_BYTES,
    AES_OK_OFFSET_BYTES,
    AesIv,
    AesKey,
    ContextStateError,
    CryptoContext,
    CryptoError,
    EncryptedMessage,
    PlainMessage,
    Status,
)


def _random(ctx: CryptoContext, size: int) -> bytes:
    try:
        block = bytes(ctx.random_bytes(size))
    except OSError as exc:
        raise CryptoError("random generator failed") from exc
    if len(block) != size:
        raise CryptoError(f"random generator returned {len(block)} bytes, wanted {size}")
    return block


def generate_aes_key(ok_bits: int, ctx: CryptoContext) -> None:
    """Store a new AES key whose first byte is ok_bits and the rest random."""
    if not 0 <= ok_bits <= 0xFF:
        raise ValueError(f"ok_bits must fit in one byte, got {ok_bits}")
    try:
        ctx.require_ok()
        ctx.aes_key = AesKey()
        body = _random(ctx, AES_KEY_BYTES - AES_OK_OFFSET_BYTES)
    except CryptoError:
        ctx.aes_key.status = Status.ERR
        ctx.fail()
        raise
    ctx.aes_key = AesKey(bytes([ok_bits]) + body, Status.OK)


def generate_random_aes_key(ctx: CryptoContext) -> None:
    """Store a fully random AES key."""
    try:
        ctx.require_ok()
        ctx.aes_key = AesKey()
        key = _random(ctx, AES_KEY_BYTES)
    except CryptoError:
        ctx.aes_key.status = Status.ERR
        ctx.fail()
        raise
    ctx.aes_key = AesKey(key, Status.OK)


def generate_aes_iv(ctx: CryptoContext) -> None:
    """Store a fresh random IV."""
    try:
        ctx.require_ok()
        ctx.aes_iv = AesIv()
        iv = _random(ctx, AES_IV_BYTES)
    except CryptoError:
        ctx.aes_iv.status = Status.ERR
        ctx.fail()
        raise
    ctx.aes_iv = AesIv(iv, Status.OK)


def aes_encrypt(ctx: CryptoContext) -> None:
    """Encrypt the context's message with its key and IV; the IV is then spent."""
    try:
        ctx.require_ok()
        if (
            ctx.aes_key.status != Status.OK
            or ctx.aes_iv.status != Status.OK
            or ctx.msg.status != Status.OK
            or not ctx.msg.data
        ):
            raise ContextStateError("key, fresh IV and a non-empty message are required")
        if len(ctx.msg.data) > AES_MAX_MESSAGE_BYTES:
            raise ContextStateError(
                f"message longer than {AES_MAX_MESSAGE_BYTES} bytes"
            )
        ctx.encrypted_msg = EncryptedMessage()
        try:
            sealed = AESGCM(ctx.aes_key.key).encrypt(ctx.aes_iv.iv, ctx.msg.data, None)
        except (ValueError, OverflowError) as exc:
            raise CryptoError(f"AES-GCM encryption failed: {exc}") from exc
    except CryptoError:
        ctx.encrypted_msg.status = Status.ERR
        ctx.fail()
        raise
    ctx.encrypted_msg = EncryptedMessage(
        data=sealed[:-AES_GCM_TAG_BYTES],
        tag=sealed[-AES_GCM_TAG_BYTES:],
        status=Status.OK,
    )
    ctx.aes_iv.status = Status.USED


def aes_decrypt(ctx: CryptoContext) -> None:
    """Decrypt and authenticate the context's encrypted message into its message."""
    try:
        ctx.require_ok()
        if (
            ctx.aes_key.status != Status.OK
            or ctx.aes_iv.status != Status.USED
            or ctx.encrypted_msg.status != Status.OK
            or not ctx.encrypted_msg.data
        ):
            raise ContextStateError("key, used IV and a non-empty ciphertext are required")
        ctx.msg = PlainMessage()
        try:
            plain = AESGCM(ctx.aes_key.key).decrypt(
                ctx.aes_iv.iv,
                ctx.encrypted_msg.data + ctx.encrypted_msg.tag,
                None,
            )
        except InvalidTag as exc:
            raise CryptoError("AES-GCM authentication failed") from exc
        except (ValueError, OverflowError) as exc:
            raise CryptoError(f"AES-GCM decryption failed: {exc}") from exc
    except CryptoError:
        ctx.msg.status = Status.ERR
        ctx.fail()
        raise
    ctx.msg = PlainMessage(plain, Status.OK)