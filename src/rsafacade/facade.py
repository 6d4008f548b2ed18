"""The RSA façade: lazy key management and chunked encryption, decryption, signing and verification.

Callers hand over PEM key material (or let the façade generate a key) and then encrypt arbitrarily long text without
caring about RSA block sizes. Plaintext is split into blocks of exactly the capacity the modulus allows, each block is
PKCS#1 v1.5 encrypted on its own, and the ciphertext blocks are concatenated in order.

Typical usage example:

    rf = RSAFacade({"default_key_size": "1024"})
    c = rf.encrypt("Hi there!")
    r = rf.decrypt(c)
    s = rf.sign("Hi there!", hexdigest("sha256"), "sha256")
    rf.verify("Hi there!", s, hexdigest("sha256"))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import binascii
import concurrent.futures
import enum
import hashlib
import logging
import threading
import typing
import warnings

from rsafacade import __version__
from rsafacade.config import Options
from rsafacade.errors import KeyAbsentError
from rsafacade.errors import KeyPendingError
from rsafacade.errors import MalformedInputError
from rsafacade.errors import PaddingError
from rsafacade.rsa import b64tohex
from rsafacade.rsa import DigestFn
from rsafacade.rsa import hex2b64
from rsafacade.rsa import PADDING_OVERHEAD
from rsafacade.rsa import RSAKey

logger = logging.getLogger(__name__)


class KeyState(enum.Enum):
    ABSENT = "absent"
    GENERATING = "generating"
    READY = "ready"


def block_length(modulus_bits: int) -> int:
    """Length in bytes of one ciphertext block for a modulus of `modulus_bits`."""
    return (modulus_bits + 7) // 8


def block_capacity(modulus_bits: int) -> int:
    """Maximum plaintext bytes one PKCS#1 v1.5 block can carry for a modulus of `modulus_bits`."""
    return block_length(modulus_bits) - PADDING_OVERHEAD


def split_chunks(data: bytes, size: int) -> list[bytes]:
    """Splits `data` into consecutive chunks of at most `size` bytes.

    Empty input yields a single empty chunk, so that empty messages still produce one block.

    Raises:
        PaddingError: If `size` leaves no room for payload.
    """
    if size < 1:
        raise PaddingError("Key too small to carry any payload.")
    if not data:
        return [b""]
    return [data[i:i + size] for i in range(0, len(data), size)]


def hexdigest(name: str) -> DigestFn:
    """Returns a digest function for `sign` and `verify` backed by hashlib.

    Args:
        name: A hashlib algorithm name, e.g. "sha256".

    Returns:
        A function mapping a message to the hex digest of its UTF-8 encoding.
    """
    hashlib.new(name)  # Fail fast on unknown names.

    def digest_fn(message: str) -> str:
        return hashlib.new(name, message.encode("utf-8")).hexdigest()

    return digest_fn


class RSAFacade:
    """Owns at most one RSA key and runs every codec operation against it.

    The key is absent until set or generated. Blocking acquisition (`get_key`) and non-blocking generation
    (`generate_key_async`) are separate calls; whichever runs first decides the key, later ones reuse it.

    Attributes:
        options: The immutable configuration.
        version: Version of the library, for diagnostics.
    """
    version: typing.ClassVar[str] = __version__

    def __init__(self, options: Options | typing.Mapping[str, typing.Any] | None = None) -> None:
        self.options = options if isinstance(options, Options) else Options.from_mapping(options)
        self._key: RSAKey | None = None
        self._pending: concurrent.futures.Future | None = None
        self._lock = threading.RLock()

    @property
    def state(self) -> KeyState:
        with self._lock:
            if self._key is not None:
                return KeyState.READY
            if self._pending is not None:
                return KeyState.GENERATING
            return KeyState.ABSENT

    def set_key(self, key: str | bytes) -> None:
        """Replaces the current key with one parsed from PEM text.

        One method is enough for both private and public keys, as a private key carries the public parameters.
        Parse failures propagate and leave the current key untouched.

        Args:
            key: PEM text, with or without header and footer.
        """
        handle = RSAKey.from_pem(key)
        with self._lock:
            if self.options.log and self._key is not None:
                warnings.warn("A key was already set, overriding existing.", RuntimeWarning, stacklevel=2)
            self._key = handle
            self._pending = None
        logger.debug("Installed %d-bit %s key", handle.bit_length(), "private" if handle.has_private else "public")

    def set_private_key(self, privkey: str | bytes) -> None:
        self.set_key(privkey)

    def set_public_key(self, pubkey: str | bytes) -> None:
        self.set_key(pubkey)

    def get_key(self, timeout: float | None = None) -> RSAKey:
        """Returns the current key, generating one with the configured defaults if needed.

        Args:
            timeout: How long to wait for a generation started by another call, None to wait indefinitely.

        Returns:
            The key.

        Raises:
            KeyAbsentError: If there is no key and on-demand generation is disabled.
            KeyPendingError: If a pending generation did not finish within `timeout`.
        """
        owner = False
        with self._lock:
            key, pending = self._key, self._pending
            if key is not None:
                return key
            if pending is None:
                if not self.options.generate_on_demand:
                    raise KeyAbsentError("No key has been set and on-demand generation is disabled.")
                # Generation runs inline but is published as pending, so concurrent requests join it.
                pending = concurrent.futures.Future()
                pending.set_running_or_notify_cancel()
                pending.add_done_callback(self._install)
                self._pending = pending
                owner = True
        if owner:
            try:
                pending.set_result(RSAKey.generate(self.options.default_key_size,
                                                   self.options.default_public_exponent))
            except Exception as exc:  # pylint: disable=broad-exception-caught
                pending.set_exception(exc)
                raise
            return pending.result()
        try:
            return pending.result(timeout)
        except concurrent.futures.TimeoutError as exc:
            raise KeyPendingError("Key generation is still running.") from exc

    def generate_key_async(self, callback: typing.Callable[[], typing.Any] | None = None) -> concurrent.futures.Future:
        """Requests key generation without blocking.

        If a key is already present or being generated no new generation starts; the returned future resolves to
        that key instead.

        Args:
            callback: Called without arguments once the key is installed (or generation failed).

        Returns:
            A future resolving to the key.
        """
        with self._lock:
            if self._key is not None:
                future: concurrent.futures.Future = concurrent.futures.Future()
                future.set_result(self._key)
            elif self._pending is not None:
                future = self._pending
            else:
                future = RSAKey.generate_async(self.options.default_key_size, self.options.default_public_exponent)
                self._pending = future
                future.add_done_callback(self._install)
        if callback is not None:
            future.add_done_callback(lambda _: callback())
        return future

    def _install(self, future: concurrent.futures.Future) -> None:
        with self._lock:
            if self._pending is not future or self._key is not None:
                return
            self._pending = None
            if future.cancelled() or future.exception() is not None:
                logger.debug("Asynchronous key generation did not complete")
                return
            self._key = future.result()

    def encrypt(self, text: str | bytes, with_private: bool = False) -> str:
        """Encrypts text of any length.

        The UTF-8 encoded text is split into blocks of the key's capacity; each is encrypted independently and the
        ciphertext blocks are concatenated in order.

        Args:
            text: The message to encrypt.
            with_private: Encrypt with the private exponent instead of the public one.

        Returns:
            The base64 encoded ciphertext.
        """
        key = self.get_key()
        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        chunks = split_chunks(data, block_capacity(key.bit_length()))
        logger.debug("Encrypting %d bytes in %d block(s)", len(data), len(chunks))
        return hex2b64("".join(key.encrypt_block(chunk, with_private) for chunk in chunks))

    @typing.overload
    def decrypt(self, text: str | bytes, with_private: bool = True, raw: typing.Literal[False] = False) -> str:
        ...

    @typing.overload
    def decrypt(self, text: str | bytes, with_private: bool = True, raw: typing.Literal[True] = False) -> bytes:
        ...

    def decrypt(self, text: str | bytes, with_private: bool = True, raw: bool = False) -> str | bytes:
        """Decrypts ciphertext produced by `encrypt`.

        Args:
            text: The base64 encoded ciphertext.
            with_private: Decrypt with the private exponent instead of the public one.
            raw: Return the plaintext bytes instead of decoding them as UTF-8.

        Returns:
            The plaintext.

        Raises:
            MalformedInputError: If the ciphertext is not base64, not a whole number of blocks, or not UTF-8.
            PaddingError: If any block fails to unpad.
        """
        key = self.get_key()
        hexed = _b64_to_hex(text, "Ciphertext")
        blen = 2 * block_length(key.bit_length())
        if not hexed or len(hexed) % blen:
            raise MalformedInputError("Ciphertext is not a whole number of blocks.")
        logger.debug("Decrypting %d block(s)", len(hexed) // blen)
        data = b"".join(key.decrypt_block(hexed[i:i + blen], with_private) for i in range(0, len(hexed), blen))
        if raw:
            return data
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedInputError("Plaintext is not valid UTF-8.") from exc

    def sign(self, text: str, digest_fn: DigestFn, digest_name: str) -> str:
        """Signs `text` with the private key.

        Args:
            text: The message to sign.
            digest_fn: Maps the message to its hex digest.
            digest_name: The digest algorithm name recorded in the signature.

        Returns:
            The base64 encoded signature.
        """
        return hex2b64(self.get_key().sign(text, digest_fn, digest_name))

    def verify(self, text: str, signature: str | bytes, digest_fn: DigestFn) -> bool:
        """Verifies a base64 signature of `text`.

        A well-formed signature that does not match returns False; only an undecodable signature raises.

        Raises:
            MalformedInputError: If the signature is not base64.
        """
        key = self.get_key()
        return key.verify(text, _b64_to_hex(signature, "Signature"), digest_fn)

    def get_private_key(self) -> str:
        """PEM encoded private key WITH header and footer."""
        return self.get_key().private_pem()

    def get_private_key_b64(self) -> str:
        """Base64 encoded private key WITHOUT header, footer or line breaks."""
        return self.get_key().private_b64()

    def get_public_key(self) -> str:
        """PEM encoded public key WITH header and footer."""
        return self.get_key().public_pem()

    def get_public_key_b64(self) -> str:
        """Base64 encoded public key WITHOUT header, footer or line breaks."""
        return self.get_key().public_b64()


def _b64_to_hex(text: typing.Any, what: str) -> str:
    if isinstance(text, bytes):
        text = text.decode("ascii", errors="replace")
    if not isinstance(text, str):
        raise MalformedInputError(f"{what} must be a base64 string.")
    try:
        return b64tohex(text)
    except (binascii.Error, ValueError) as exc:
        raise MalformedInputError(f"{what} is not valid base64.") from exc
