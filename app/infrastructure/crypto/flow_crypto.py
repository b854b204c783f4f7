"""
Hybrid encryption for WhatsApp Flows data_exchange endpoints.

Requests carry an AES-128 session key wrapped with the business RSA public key
(OAEP, SHA-256) and a JSON body sealed with AES-GCM. Responses reuse the
session key with the bit-inverted request IV, which the client requires.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.application.exceptions import KeyMismatchError, MalformedPayloadError, PayloadIntegrityError

AES_KEY_SIZE = 16
IV_SIZE = 16
TAG_SIZE = 16
RSA_KEY_SIZE = 2048

_OAEP = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA256()),
    algorithm=hashes.SHA256(),
    label=None,
)


@dataclass(frozen=True)
class DecryptedEnvelope:
    body: dict[str, Any]
    aes_key: bytes
    initial_vector: bytes

    def __repr__(self) -> str:
        return f"DecryptedEnvelope(keys={sorted(self.body)})"


@dataclass(frozen=True)
class KeyPair:
    private_key: str
    public_key: str


def load_private_key(private_key_pem: str, passphrase: str | None = None) -> rsa.RSAPrivateKey:
    try:
        key = serialization.load_pem_private_key(
            private_key_pem.encode("utf-8"),
            password=passphrase.encode("utf-8") if passphrase else None,
        )
    except (ValueError, TypeError) as e:
        raise KeyMismatchError("Stored private key could not be loaded") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyMismatchError("Stored private key is not an RSA key")
    return key


def is_valid_private_key(private_key_pem: str | None, passphrase: str | None = None) -> bool:
    if not private_key_pem:
        return False
    try:
        load_private_key(private_key_pem, passphrase)
    except KeyMismatchError:
        return False
    return True


def derive_public_key(private_key_pem: str, passphrase: str | None = None) -> str:
    """SubjectPublicKeyInfo PEM matching a private key. Raises KeyMismatchError if it cannot be loaded."""
    public_key = load_private_key(private_key_pem, passphrase).public_key()
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")


def generate_key_pair() -> KeyPair:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=RSA_KEY_SIZE)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return KeyPair(private_key=private_pem.decode("utf-8"), public_key=public_pem.decode("utf-8"))


def flip_iv(initial_vector: bytes) -> bytes:
    return bytes(b ^ 0xFF for b in initial_vector)


def decrypt_aes_key(encrypted_aes_key: bytes, private_key: rsa.RSAPrivateKey) -> bytes:
    try:
        aes_key = private_key.decrypt(encrypted_aes_key, _OAEP)
    except ValueError as e:
        raise KeyMismatchError("OAEP unwrap of the session key failed") from e
    if len(aes_key) != AES_KEY_SIZE:
        raise KeyMismatchError("Unwrapped session key has an unexpected size")
    return aes_key


def decrypt_request(
    envelope: dict[str, str],
    private_key_pem: str,
    passphrase: str | None = None,
) -> DecryptedEnvelope:
    """Open a request envelope with the stored private key.

    Raises KeyMismatchError when the session key cannot be unwrapped,
    PayloadIntegrityError when the body fails decoding or authentication and
    MalformedPayloadError when the plaintext is not a JSON object.
    """
    encrypted_flow_data = _b64decode(envelope.get("encrypted_flow_data"))
    encrypted_aes_key = _b64decode(envelope.get("encrypted_aes_key"))
    initial_vector = _b64decode(envelope.get("initial_vector"))

    private_key = load_private_key(private_key_pem, passphrase)
    aes_key = decrypt_aes_key(encrypted_aes_key, private_key)

    if len(initial_vector) != IV_SIZE:
        raise PayloadIntegrityError("Initial vector has an unexpected size")
    if len(encrypted_flow_data) <= TAG_SIZE:
        raise PayloadIntegrityError("Encrypted flow data is too short")

    try:
        plaintext = AESGCM(aes_key).decrypt(initial_vector, encrypted_flow_data, None)
    except (InvalidTag, ValueError) as e:
        raise PayloadIntegrityError("Flow data failed authentication") from e

    try:
        body = json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedPayloadError("Decrypted flow data is not valid JSON") from e
    if not isinstance(body, dict):
        raise MalformedPayloadError("Decrypted flow data is not a JSON object")

    return DecryptedEnvelope(body=body, aes_key=aes_key, initial_vector=initial_vector)


def encrypt_response(payload: dict[str, Any], aes_key: bytes, initial_vector: bytes) -> str:
    """Seal a response with the request's session key and the flipped IV. Returns base64 text."""
    plaintext = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    ciphertext = AESGCM(aes_key).encrypt(flip_iv(initial_vector), plaintext, None)
    return base64.b64encode(ciphertext).decode("ascii")


def _b64decode(value: str | None) -> bytes:
    if not value:
        raise PayloadIntegrityError("Envelope field is empty")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PayloadIntegrityError("Envelope field is not valid base64") from e
