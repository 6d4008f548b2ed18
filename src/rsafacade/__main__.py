"""The Command Line Interface for the façade.

Every subcommand works on PEM key files. Messages may be given inline or, when prefixed with `P:`, read from a file.

Typical usage example:

    rsafacade keygen -P key.pem -p key.pub --keysize 2048
    rsafacade encrypt -p key.pub --message "Hi there!"
    python -m rsafacade decrypt -P key.pem --message P:ciphertext.txt
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import pathlib
import sys
import typing

import rsafacade


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None


help_dict: dict[str, HelpData] = {
    "keygen": HelpData("Key generation utility."),
    "encrypt": HelpData("Chunked encryption utility."),
    "decrypt": HelpData("Chunked decryption utility."),
    "sign": HelpData("Signing utility."),
    "verify": HelpData("Signature verification utility."),
    "public_key": HelpData(description="Location of the public key file.", format=pathlib.Path),
    "private_key": HelpData(description="Location of the private key file.", format=pathlib.Path),
    "message": HelpData(description="Message or path to file containing payload. If Path start with `P:`"),
    "keysize": HelpData(description="Key size (in bits).", format=int, default=1024),
    "pub_exponent": HelpData(description="Hexadecimal exponent for the public key.", default="010001"),
    "sha": HelpData(description="Digest algorithm to use.",
                    choices=["md5", "sha1", "sha224", "sha256", "sha384", "sha512"],
                    default="sha256"),
    "signature": HelpData(description="The base64 signature to validate against the payload."),
    "overwrite": HelpData(description="Overwrite specified destination files if they exist."),
}


def _add(parser: argparse.ArgumentParser, arg: str, *flags: str, required: bool = False) -> None:
    data = help_dict[arg]
    parser.add_argument(*flags,
                        dest=arg,
                        type=data.format,
                        choices=data.choices,
                        default=data.default,
                        required=required,
                        help=data.description)


corep = argparse.ArgumentParser(prog="rsafacade")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {rsafacade.__version__}")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands", required=True)

keygen = commands.add_parser("keygen", help=help_dict["keygen"].description)
_add(keygen, "private_key", "--private_key", "-P", required=True)
_add(keygen, "public_key", "--public_key", "-p", required=True)
_add(keygen, "keysize", "--keysize")
_add(keygen, "pub_exponent", "--pub-exponent")
keygen.add_argument("--overwrite", "-o", action="store_true", help=help_dict["overwrite"].description)

encrypt = commands.add_parser("encrypt", help=help_dict["encrypt"].description)
_add(encrypt, "public_key", "--public_key", "-p", required=True)
_add(encrypt, "message", "--message", "-m", required=True)

decrypt = commands.add_parser("decrypt", help=help_dict["decrypt"].description)
_add(decrypt, "private_key", "--private_key", "-P", required=True)
_add(decrypt, "message", "--message", "-m", required=True)

sign = commands.add_parser("sign", help=help_dict["sign"].description)
_add(sign, "private_key", "--private_key", "-P", required=True)
_add(sign, "message", "--message", "-m", required=True)
_add(sign, "sha", "--sha", "-s")

verify = commands.add_parser("verify", help=help_dict["verify"].description)
_add(verify, "public_key", "--public_key", "-p", required=True)
_add(verify, "message", "--message", "-m", required=True)
_add(verify, "signature", "--signature", "-S", required=True)
_add(verify, "sha", "--sha", "-s")


def check_message(mess: str) -> str:
    """Parse message for path-notice."""
    if mess.startswith("P:"):
        with open(mess[2:], "r", encoding="utf-8") as f:
            mess = f.read()
    return mess


def load_facade(keyfile: pathlib.Path) -> rsafacade.RSAFacade:
    rf = rsafacade.RSAFacade({"generate_on_demand": False})
    rf.set_key(keyfile.read_text(encoding="ascii"))
    return rf


def run(args: argparse.Namespace) -> int:
    """Executes a parsed command line, returning the exit status."""
    match args.subcommand:
        case "keygen":
            if not args.overwrite and (args.private_key.exists() or args.public_key.exists()):
                print("Destination private or public key already exists!", file=sys.stderr)
                return 1
            rf = rsafacade.RSAFacade({"default_key_size": args.keysize, "default_public_exponent": args.pub_exponent})
            args.private_key.write_text(rf.get_private_key() + "\n", encoding="ascii")
            args.public_key.write_text(rf.get_public_key() + "\n", encoding="ascii")
            print("Key pair generated!")
        case "encrypt":
            print(load_facade(args.public_key).encrypt(check_message(args.message)))
        case "decrypt":
            print(load_facade(args.private_key).decrypt(check_message(args.message).strip()))
        case "sign":
            print(load_facade(args.private_key).sign(check_message(args.message), rsafacade.hexdigest(args.sha),
                                                     args.sha))
        case "verify":
            rf = load_facade(args.public_key)
            if not rf.verify(check_message(args.message), args.signature, rsafacade.hexdigest(args.sha)):
                print("Signature Verification Failed!", file=sys.stderr)
                return 1
            print("Signature Verified!")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point of the `rsafacade` console script."""
    args = corep.parse_args(argv)
    try:
        return run(args)
    except rsafacade.RSAFacadeError as exc:
        print(f"{exc.kind}: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
