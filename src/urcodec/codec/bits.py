"""
Bit-width conversion.

Repacks a sequence of fixed-width integers into another width, MSB first.
Used 8 -> 5 when producing text symbols from bytes and 5 -> 8 when
recovering bytes from symbols.
"""

from typing import Iterable, List

from ..runtime.errors import BitPackingViolation


def convert_bits(data: Iterable[int], from_bits: int, to_bits: int, pad: bool = True) -> List[int]:
    """
    Regroup ``data`` from ``from_bits``-wide values into ``to_bits``-wide values.

    Args:
        data: Input values, each fitting in ``from_bits`` bits
        from_bits: Width of each input value
        to_bits: Width of each output value
        pad: Left-justify and zero-fill a trailing partial group if True;
            otherwise reject any leftover that would be dropped

    Returns:
        List of ``to_bits``-wide integers

    Raises:
        BitPackingViolation: If an input value does not fit, or if strict
            conversion leaves non-zero or over-long residual bits
    """
    acc = 0
    bits = 0
    ret: List[int] = []
    maxv = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1
    for position, value in enumerate(data):
        if value < 0 or value >> from_bits:
            raise BitPackingViolation(
                f"Value {value} does not fit in {from_bits} bits",
                details={"position": position, "value": value, "fromBits": from_bits}
            )
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            ret.append((acc >> bits) & maxv)

    if pad:
        if bits:
            ret.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits:
        raise BitPackingViolation(
            f"Excess padding: {bits} leftover bits",
            details={"leftoverBits": bits, "fromBits": from_bits, "toBits": to_bits}
        )
    elif (acc << (to_bits - bits)) & maxv:
        raise BitPackingViolation(
            "Non-zero padding bits",
            details={"leftoverBits": bits, "fromBits": from_bits, "toBits": to_bits}
        )
    return ret


def bytes_to_symbols(data: bytes) -> List[int]:
    """Convert bytes to 5-bit symbols, zero-padding the last symbol."""
    return convert_bits(data, 8, 5, pad=True)


def symbols_to_bytes(symbols: Iterable[int]) -> bytes:
    """Convert 5-bit symbols back to bytes, rejecting non-zero padding."""
    return bytes(convert_bits(symbols, 5, 8, pad=False))
