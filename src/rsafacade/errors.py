"""Failure kinds raised by the façade and its RSA primitives.

Every class carries a stable `kind` string so that callers catching `RSAFacadeError` can still branch on what went
wrong without string-matching messages.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSAFacadeError(Exception):
    """Base class of all façade failures."""
    kind: str = "error"


class KeyAbsentError(RSAFacadeError):
    """No usable key, or the key lacks the component an operation needs."""
    kind = "key_absent"


class KeyPendingError(RSAFacadeError):
    """Asynchronous key generation has not finished yet."""
    kind = "key_pending"


class PaddingError(RSAFacadeError):
    """PKCS#1 v1.5 block padding could not be applied or removed."""
    kind = "padding"


class MalformedInputError(RSAFacadeError):
    """The caller supplied data that cannot be decoded."""
    kind = "malformed_input"


class KeyFormatError(RSAFacadeError, ValueError):
    """Key material is not a recognized PEM/DER RSA key."""
    kind = "key_format"
