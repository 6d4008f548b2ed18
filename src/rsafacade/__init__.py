"""RSA façade with transparent chunking.

Provides RSA key management, encryption, decryption, signing and verification for callers that deal in PEM key
material and plain text, without exposing RSA block-size constraints. Keys are generated on demand (synchronously or
on a worker thread) when none has been set.

Typical usage example:

    rf = RSAFacade({"default_key_size": 2048})
    c = rf.encrypt("A message longer than any single RSA block can carry...")
    r = rf.decrypt(c)
    pem = rf.get_public_key()
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
__version__ = "1.0.0"

# pylint: disable=wrong-import-position
from rsafacade.config import Options
from rsafacade.errors import KeyAbsentError
from rsafacade.errors import KeyFormatError
from rsafacade.errors import KeyPendingError
from rsafacade.errors import MalformedInputError
from rsafacade.errors import PaddingError
from rsafacade.errors import RSAFacadeError
from rsafacade.facade import block_capacity
from rsafacade.facade import hexdigest
from rsafacade.facade import KeyState
from rsafacade.facade import RSAFacade
from rsafacade.rsa import RSAKey

__all__ = [
    "RSAFacade",
    "RSAKey",
    "Options",
    "KeyState",
    "block_capacity",
    "hexdigest",
    "RSAFacadeError",
    "KeyAbsentError",
    "KeyFormatError",
    "KeyPendingError",
    "MalformedInputError",
    "PaddingError",
]
