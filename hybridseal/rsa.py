"""RSA-OAEP wrapping and unwrapping of the AES key held in a context."""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from hybridseal.context import (
    AES_KEY_BYTES,
    RSA_MODULUS_BYTES,
    AesKey,
    ContextStateError,
    CryptoContext,
    CryptoError,
    RsaBlock,
    Status,
)

_OAEP = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA256()),
    algorithm=hashes.SHA256(),
    label=None,
)


def _check_modulus(key: RSAPublicKey | RSAPrivateKey) -> None:
    size = (key.key_size + 7) // 8
    if size != RSA_MODULUS_BYTES:
        raise CryptoError(
            f"RSA modulus is {size} bytes, {RSA_MODULUS_BYTES} are required"
        )


def rsa_encrypt_aes_key(ctx: CryptoContext) -> None:
    """Wrap the context's AES key with its RSA public key (OAEP, SHA-256)."""
    try:
        ctx.require_ok()
        if ctx.public_key is None or ctx.aes_key.status != Status.OK:
            raise ContextStateError("a public key and a valid AES key are required")
        _check_modulus(ctx.public_key)
        ctx.encrypted_aes_key = RsaBlock()
        try:
            block = ctx.public_key.encrypt(ctx.aes_key.key, _OAEP)
        except ValueError as exc:
            raise CryptoError(f"RSA encryption failed: {exc}") from exc
        if len(block) != RSA_MODULUS_BYTES:
            raise CryptoError(f"RSA encryption produced {len(block)} bytes")
    except CryptoError:
        ctx.encrypted_aes_key.status = Status.ERR
        ctx.fail()
        raise
    ctx.encrypted_aes_key = RsaBlock(block, Status.OK)


def rsa_decrypt_aes_key(ctx: CryptoContext) -> None:
    """Unwrap the context's encrypted AES key with its RSA private key."""
    try:
        ctx.require_ok()
        if ctx.private_key is None or ctx.encrypted_aes_key.status != Status.OK:
            raise ContextStateError(
                "a private key and a valid encrypted AES key are required"
            )
        _check_modulus(ctx.private_key)
        ctx.aes_key = AesKey()
        try:
            key = ctx.private_key.decrypt(ctx.encrypted_aes_key.data, _OAEP)
        except ValueError as exc:
            raise CryptoError("RSA decryption failed") from exc
        if len(key) != AES_KEY_BYTES:
            raise CryptoError(
                f"decrypted key is {len(key)} bytes, {AES_KEY_BYTES} are required"
            )
    except CryptoError:
        ctx.aes_key.status = Status.ERR
        ctx.fail()
        raise
    ctx.aes_key = AesKey(key, Status.OK)