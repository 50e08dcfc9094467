"""Wire format for a sealed message.

Layout: 4-byte big-endian ciphertext length, GCM tag, RSA-wrapped AES key,
IV, signature, then the ciphertext itself.
"""

from __future__ import annotations

import struct

from hybridseal.context import (
    AES_GCM_TAG_BYTES,
    AES_IV_BYTES,
    AES_MAX_MESSAGE_BYTES,
    LENGTH_PREFIX_BYTES,
    RSA_MODULUS_BYTES,
    SERIALIZED_HEADER_SIZE,
    AesIv,
    ContextStateError,
    CryptoContext,
    CryptoError,
    EncryptedMessage,
    RsaBlock,
    Status,
)

_LENGTH = struct.Struct(">I")


def serialize(ctx: CryptoContext) -> bytes:
    """Pack the context's sealed parts into the wire format."""
    ctx.require_ok()
    if (
        ctx.encrypted_msg.status != Status.OK
        or ctx.encrypted_aes_key.status != Status.OK
        or ctx.aes_iv.status != Status.USED
        or ctx.signature.status != Status.OK
    ):
        raise ContextStateError(
            "ciphertext, wrapped key, used IV and signature are required"
        )
    body = ctx.encrypted_msg.data
    if len(body) > AES_MAX_MESSAGE_BYTES:
        raise CryptoError(f"ciphertext longer than {AES_MAX_MESSAGE_BYTES} bytes")
    fixed = (
        ("tag", ctx.encrypted_msg.tag, AES_GCM_TAG_BYTES),
        ("wrapped key", ctx.encrypted_aes_key.data, RSA_MODULUS_BYTES),
        ("IV", ctx.aes_iv.iv, AES_IV_BYTES),
        ("signature", ctx.signature.data, RSA_MODULUS_BYTES),
    )
    for name, part, size in fixed:
        if len(part) != size:
            raise CryptoError(f"{name} is {len(part)} bytes, {size} are required")
    return b"".join(
        [_LENGTH.pack(len(body)), *(part for _, part, _ in fixed), body]
    )


def deserialize(data: bytes, ctx: CryptoContext) -> None:
    """Unpack wire-format data into the context, ready for unsealing."""
    try:
        ctx.require_ok()
        data = bytes(data)
        if len(data) <= SERIALIZED_HEADER_SIZE:
            raise CryptoError(
                f"input of {len(data)} bytes is too short for a sealed message"
            )
        (length,) = _LENGTH.unpack_from(data)
        if length > AES_MAX_MESSAGE_BYTES:
            raise CryptoError(
                f"declared ciphertext length {length} exceeds {AES_MAX_MESSAGE_BYTES}"
            )
        if len(data) < SERIALIZED_HEADER_SIZE + length:
            raise CryptoError("input is truncated")
        fields = []
        offset = LENGTH_PREFIX_BYTES
        for size in (
            AES_GCM_TAG_BYTES,
            RSA_MODULUS_BYTES,
            AES_IV_BYTES,
            RSA_MODULUS_BYTES,
            length,
        ):
            fields.append(data[offset : offset + size])
            offset += size
        tag, wrapped_key, iv, signature, body = fields
    except CryptoError:
        ctx.encrypted_msg.status = Status.ERR
        ctx.encrypted_aes_key.status = Status.ERR
        ctx.aes_iv.status = Status.ERR
        ctx.signature.status = Status.ERR
        ctx.fail()
        raise
    ctx.encrypted_msg = EncryptedMessage(data=body, tag=tag, status=Status.OK)
    ctx.encrypted_aes_key = RsaBlock(wrapped_key, Status.OK)
    ctx.aes_iv = AesIv(iv, Status.USED)
    ctx.signature = RsaBlock(signature, Status.OK)
    ctx.status = Status.OK