"""Shared state, limits and status codes for the hybrid sealing pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, make_dataclass
from enum import IntEnum
from typing import Callable

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

RSA_MODULUS_BYTES = 256
RSA_MAX_PUB_DER_KEY_BYTES = 512
RSA_MAX_PRV_DER_KEY_BYTES = 2048

SHA256_SIGNATURE_BYTES = 32

AES_KEY_BYTES = 32
AES_OK_OFFSET_BYTES = 1
AES_IV_BYTES = 16
AES_GCM_TAG_BYTES = 16
AES_BLOCK_BYTES = 16
AES_MAX_MESSAGE_BYTES = 16 * AES_BLOCK_BYTES

LENGTH_PREFIX_BYTES = 4

SERIALIZED_HEADER_SIZE = (
    LENGTH_PREFIX_BYTES
    + AES_GCM_TAG_BYTES
    + RSA_MODULUS_BYTES  # encrypted AES key
    + AES_IV_BYTES
    + RSA_MODULUS_BYTES  # signature
)
SERIALIZED_DATA_SIZE = SERIALIZED_HEADER_SIZE + AES_MAX_MESSAGE_BYTES


class Status(IntEnum):
    """State of a context or of one of its parts, and the pipeline's error codes."""

    NULL = 0
    OK = 1
    ERR = 2
    USED = 3

    INIT_ERR = 10
    SET_MSG_ERR = 11
    SET_PUB_KEY_ERR = 12
    SET_PRV_KEY_ERR = 13
    GEN_AES_KEY_ERR = 14
    GEN_AES_IV_ERR = 15
    AES_ENCRYPT_ERR = 16
    AES_DECRYPT_ERR = 17
    RSA_ENCRYPT_ERR = 18
    RSA_DECRYPT_ERR = 19
    SIGN_MSG_ERR = 20
    VERIFY_MSG_ERR = 21
    SERIALIZE_ERR = 22
    DESERIALIZE_ERR = 23


class CryptoError(Exception):
    """A cryptographic step failed."""

    def __init__(self, message: str, status: Status = Status.ERR) -> None:
        super().__init__(message)
        self.status = status


class ContextStateError(CryptoError):
    """The context, or a part it needs, is not in the state a step requires."""


def _part(name: str, doc: str, *byte_fields: str) -> type:
    """Build a dataclass holding the given byte fields followed by a status."""
    spec = [(f, bytes, field(default=b"")) for f in byte_fields]
    spec.append(("status", Status, field(default=Status.NULL)))
    cls = make_dataclass(name, spec)
    cls.__doc__ = doc
    cls.__module__ = __name__
    return cls


AesKey = _part("AesKey", "An AES-256 key.", "key")
AesIv = _part("AesIv", "An AES-GCM initialisation vector.", "iv")
PlainMessage = _part("PlainMessage", "A message in the clear.", "data")
EncryptedMessage = _part(
    "EncryptedMessage", "An AES-GCM ciphertext and its tag.", "data", "tag"
)
RsaBlock = _part(
    "RsaBlock", "A block the size of the RSA modulus: an encrypted key or a signature.", "data"
)


@dataclass
class CryptoContext:
    """Everything one sealing or unsealing run works on."""

    msg: PlainMessage = field(default_factory=PlainMessage)
    encrypted_msg: EncryptedMessage = field(default_factory=EncryptedMessage)
    signature: RsaBlock = field(default_factory=RsaBlock)
    encrypted_aes_key: RsaBlock = field(default_factory=RsaBlock)
    aes_key: AesKey = field(default_factory=AesKey)
    aes_iv: AesIv = field(default_factory=AesIv)
    public_key: RSAPublicKey | None = field(default=None, repr=False)
    private_key: RSAPrivateKey | None = field(default=None, repr=False)
    status: Status = Status.OK
    random_bytes: Callable[[int], bytes] = field(default=os.urandom, repr=False)

    def fail(self) -> None:
        """Mark the whole context as failed."""
        self.status = Status.ERR

    def require_ok(self) -> None:
        """Raise ContextStateError unless the context is usable."""
        if self.status != Status.OK:
            raise ContextStateError(f"context is not usable (status {self.status.name})")