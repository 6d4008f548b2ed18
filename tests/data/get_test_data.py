"""Generates the PEM key fixtures for Unit Testing."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import os

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

e = 65537
targets = {"rsa_1024": 1024, "rsa_other_1024": 1024, "rsa_2048": 2048}


def dump(name: str, payload: bytes) -> None:
    with open(name, "wb") as f:
        f.write(payload)


for name, size in targets.items():
    if os.path.isfile(name):
        continue
    print(f"Generating new {size} bit key {name}.")
    pk = rsa.generate_private_key(public_exponent=e, key_size=size)
    dump(name, pk.private_bytes(serialization.Encoding.PEM, serialization.PrivateFormat.TraditionalOpenSSL,
                                serialization.NoEncryption()))

with open("rsa_1024", "rb") as f:
    base = serialization.load_pem_private_key(f.read(), None)
if not os.path.isfile("rsa_1024.p8"):
    dump("rsa_1024.p8", base.private_bytes(serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8,
                                           serialization.NoEncryption()))
if not os.path.isfile("rsa_1024.pub"):
    dump("rsa_1024.pub", base.public_key().public_bytes(serialization.Encoding.PEM,
                                                        serialization.PublicFormat.SubjectPublicKeyInfo))
if not os.path.isfile("rsa_1024.rsapub"):
    dump("rsa_1024.rsapub", base.public_key().public_bytes(serialization.Encoding.PEM,
                                                           serialization.PublicFormat.PKCS1))

print("Unit test data up to date.")
