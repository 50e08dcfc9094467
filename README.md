# hybridseal

Hybrid sealing of short messages: the message is encrypted with AES-256-GCM,
the AES key is wrapped with RSA-OAEP (SHA-256, MGF1-SHA-256), and the plain
message is signed with the sender's RSA private key. The result is laid out
in a fixed binary format that the receiver can take apart again.

All work happens on a `CryptoContext` from `hybridseal.context`, which holds
the message, the keys, the IV, the ciphertext, the tag and the signature,
each with its own `Status`. Every step checks that what it needs is in the
right state. When a step fails it marks the context as failed and raises
`CryptoError`; a context that has already failed refuses further work with
`ContextStateError`.

## Sizes and limits

| Item                           | Size                     |
|--------------------------------|--------------------------|
| RSA modulus                    | 256 bytes (RSA-2048)     |
| Public key, DER                | at most 512 bytes        |
| Private key, DER               | at most 2048 bytes       |
| AES key                        | 32 bytes                 |
| AES-GCM IV                     | 16 bytes                 |
| AES-GCM tag                    | 16 bytes                 |
| Message                        | 1 to 256 bytes           |

## Sealing a message

On the sender's side, with the receiver's public key and the sender's private
key loaded into the context and the message set:

1. `hybridseal.aes.generate_random_aes_key(ctx)` draws a fresh 32-byte key.
   `hybridseal.aes.generate_aes_key(ok_bits, ctx)` does the same but fixes the
   first byte of the key to `ok_bits`.
2. `hybridseal.aes.generate_aes_iv(ctx)` draws a fresh IV.
3. `hybridseal.aes.aes_encrypt(ctx)` encrypts the message and stores the
   ciphertext and tag. The IV is then marked as used and cannot encrypt again.
4. `hybridseal.rsa.rsa_encrypt_aes_key(ctx)` wraps the AES key with the
   public key.
5. `hybridseal.sign.sign_message(ctx)` signs the SHA-256 digest of the
   message with the private key.
6. `hybridseal.serialization.serialize(ctx)` returns the sealed bytes.

## Opening a message

On the receiver's side, with the sender's public key and the receiver's
private key loaded into the context:

1. `hybridseal.serialization.deserialize(data, ctx)` reads the sealed bytes
   into the context.
2. `hybridseal.rsa.rsa_decrypt_aes_key(ctx)` unwraps the AES key.
3. `hybridseal.aes.aes_decrypt(ctx)` decrypts and authenticates the message;
   a wrong key, IV, tag or ciphertext makes it fail.
4. `hybridseal.sign.verify_signature(ctx)` checks the signature against the
   decrypted message.

## Wire format

All fields follow one another with no padding:

| Offset | Length | Field                                 |
|--------|--------|---------------------------------------|
| 0      | 4      | message length, big-endian            |
| 4      | 16     | AES-GCM tag                           |
| 20     | 256    | RSA-wrapped AES key                   |
| 276    | 16     | AES-GCM IV                            |
| 292    | 256    | RSA signature                         |
| 548    | n      | ciphertext, `n` = message length      |

Input of 548 bytes or fewer, or with a declared length above 256, is
rejected.

## Requirements

Python 3.10 or later and the `cryptography` distribution.