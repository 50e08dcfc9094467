"""RSA signatures over the SHA-256 digest of a context's plain message.

The digest is signed bare with PKCS#1 v1.5 type-1 padding, without a
DigestInfo wrapper, so a verified signature recovers exactly the 32-byte digest.
"""

from __future__ import annotations

import hashlib
import hmac

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from hybridseal.context import (
    RSA_MODULUS_BYTES,
    SHA256_SIGNATURE_BYTES,
    ContextStateError,
    CryptoContext,
    CryptoError,
    RsaBlock,
    Status,
)

_MIN_PADDING_BYTES = 8


def _check_modulus(key: RSAPublicKey | RSAPrivateKey) -> None:
    size = (key.key_size + 7) // 8
    if size != RSA_MODULUS_BYTES:
        raise CryptoError(
            f"RSA modulus is {size} bytes, {RSA_MODULUS_BYTES} are required"
        )


def _pad(payload: bytes, size: int) -> bytes:
    filler = size - 3 - len(payload)
    if filler < _MIN_PADDING_BYTES:
        raise CryptoError("payload too long for the RSA modulus")
    return b"\x00\x01" + b"\xff" * filler + b"\x00" + payload


def _unpad(block: bytes) -> bytes:
    if block[:2] != b"\x00\x01":
        raise CryptoError("signature padding is invalid")
    separator = block.find(b"\x00", 2)
    if separator < 0:
        raise CryptoError("signature padding is invalid")
    filler = block[2:separator]
    if len(filler) < _MIN_PADDING_BYTES or filler.strip(b"\xff"):
        raise CryptoError("signature padding is invalid")
    return block[separator + 1 :]


def _raw_sign(key: RSAPrivateKey, block: bytes) -> bytes:
    numbers = key.private_numbers()
    message = int.from_bytes(block, "big")
    m1 = pow(message, numbers.dmp1, numbers.p)
    m2 = pow(message, numbers.dmq1, numbers.q)
    h = (numbers.iqmp * (m1 - m2)) % numbers.p
    signature = m2 + h * numbers.q
    public = numbers.public_numbers
    if pow(signature, public.e, public.n) != message:
        raise CryptoError("RSA signing produced an inconsistent result")
    return signature.to_bytes(RSA_MODULUS_BYTES, "big")


def _raw_recover(key: RSAPublicKey, signature: bytes) -> bytes:
    numbers = key.public_numbers()
    value = int.from_bytes(signature, "big")
    if value >= numbers.n:
        raise CryptoError("signature is out of range for the modulus")
    return pow(value, numbers.e, numbers.n).to_bytes(RSA_MODULUS_BYTES, "big")


def sign_message(ctx: CryptoContext) -> None:
    """Sign the SHA-256 digest of the context's message with its private key."""
    try:
        ctx.require_ok()
        if (
            ctx.private_key is None
            or ctx.msg.status != Status.OK
            or not ctx.msg.data
        ):
            raise ContextStateError("a private key and a non-empty message are required")
        _check_modulus(ctx.private_key)
        digest = hashlib.sha256(ctx.msg.data).digest()
        ctx.signature = RsaBlock()
        signature = _raw_sign(ctx.private_key, _pad(digest, RSA_MODULUS_BYTES))
    except CryptoError:
        ctx.signature.status = Status.ERR
        ctx.fail()
        raise
    ctx.signature = RsaBlock(signature, Status.OK)


def verify_signature(ctx: CryptoContext) -> None:
    """Check the context's signature against its message; raise CryptoError if it fails."""
    try:
        ctx.require_ok()
        if ctx.signature.status != Status.OK:
            raise ContextStateError("no valid signature to verify")
        if (
            ctx.public_key is None
            or ctx.msg.status != Status.OK
            or not ctx.msg.data
        ):
            raise ContextStateError("a public key and a non-empty message are required")
        _check_modulus(ctx.public_key)
        digest = hashlib.sha256(ctx.msg.data).digest()
        if len(ctx.signature.data) != RSA_MODULUS_BYTES:
            raise CryptoError(
                f"signature is {len(ctx.signature.data)} bytes, "
                f"{RSA_MODULUS_BYTES} are required"
            )
        recovered = _unpad(_raw_recover(ctx.public_key, ctx.signature.data))
        if len(recovered) != SHA256_SIGNATURE_BYTES:
            raise CryptoError("signature does not carry a SHA-256 digest")
        if not hmac.compare_digest(recovered, digest):
            raise CryptoError("signature does not match the message")
    except CryptoError:
        ctx.fail()
        raise