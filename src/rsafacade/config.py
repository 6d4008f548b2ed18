"""Immutable façade configuration, built once from whatever loosely typed options the caller hands over."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import re
import typing

DEFAULT_KEY_SIZE = 1024
DEFAULT_PUBLIC_EXPONENT = "010001"  # 65537, the OpenSSL default.
_LEADING_INT = re.compile(r"\s*[+-]?\d+")  # Leading decimal integer, trailing text ignored.


class Options(typing.NamedTuple):
    """Configuration held by a façade for its whole lifetime.

    Attributes:
        default_key_size: Modulus size in bits for keys generated on demand.
        default_public_exponent: Hexadecimal public exponent for generated keys.
        log: Whether user-facing warnings (such as overriding a key) are emitted.
        generate_on_demand: Whether a missing key is generated when first needed.
    """
    default_key_size: int = DEFAULT_KEY_SIZE
    default_public_exponent: str = DEFAULT_PUBLIC_EXPONENT
    log: bool = False
    generate_on_demand: bool = True

    @classmethod
    def from_mapping(cls, options: typing.Mapping[str, typing.Any] | None = None) -> "Options":
        """Build options from a plain mapping, silently falling back to defaults.

        Key sizes are read from their leading decimal integer ("2048bits" is 2048). Unset, unparsable or non-positive
        sizes become `DEFAULT_KEY_SIZE`; an empty exponent becomes `DEFAULT_PUBLIC_EXPONENT`. Unknown keys are ignored.

        Args:
            options: The caller's options, may be None.

        Returns:
            The parsed options.
        """
        options = options or {}
        return cls(
            default_key_size=_parse_key_size(options.get("default_key_size")),
            default_public_exponent=_parse_exponent(options.get("default_public_exponent")),
            log=bool(options.get("log", False)),
            generate_on_demand=bool(options.get("generate_on_demand", True)),
        )


def _parse_key_size(value: typing.Any) -> int:
    if isinstance(value, bool) or value is None:
        return DEFAULT_KEY_SIZE
    match = _LEADING_INT.match(str(value))
    if match is None:
        return DEFAULT_KEY_SIZE
    size = int(match.group(), 10)
    return size if size > 0 else DEFAULT_KEY_SIZE


def _parse_exponent(value: typing.Any) -> str:
    if not value:
        return DEFAULT_PUBLIC_EXPONENT
    value = str(value).strip()
    try:
        int(value, 16)
    except ValueError:
        return DEFAULT_PUBLIC_EXPONENT
    return value
