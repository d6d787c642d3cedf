"""Number formatting and parsing with the exact conventions of workflow expressions."""

from __future__ import annotations

import math
import re
import struct
from decimal import Decimal

_MANT_BITS = 52
_BIAS = -1023
_MASK64 = (1 << 64) - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_DEC_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+"
)
_SPECIAL_RE = re.compile(r"(?:[+-]?(?:inf|infinity)|nan)", re.IGNORECASE)

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def _decimal_digits(text: str) -> tuple[str, int]:
    """Digits and decimal point position (value = 0.digits * 10**dp)."""
    _, digits, exponent = Decimal(text).as_tuple()
    ds = "".join(map(str, digits))
    dp = len(ds) + exponent
    ds = ds.rstrip("0")
    return (ds, dp) if ds else ("", 0)


def _round(ds: str, dp: int, n: int) -> tuple[str, int]:
    if n < 0 or n >= len(ds):
        return ds, dp
    digit = ds[n]
    if digit == "5" and n + 1 == len(ds):
        up = n > 0 and int(ds[n - 1]) % 2 == 1
    else:
        up = digit >= "5"
    if not up:
        return ds[:n].rstrip("0"), dp
    kept = ds[:n].rstrip("9")
    if not kept:
        return "1", dp + 1
    return kept[:-1] + str(int(kept[-1]) + 1), dp


def _fmt_e(neg: bool, ds: str, dp: int, prec: int, ch: str) -> str:
    out = ["-" if neg else "", ds[0] if ds else "0"]
    if prec > 0:
        frac = ds[1 : prec + 1]
        out.append("." + frac + "0" * (prec - len(frac)))
    exp = dp - 1 if ds else 0
    out.append(ch + ("-" if exp < 0 else "+"))
    out.append(f"{abs(exp):02d}")
    return "".join(out)


def _fmt_f(neg: bool, ds: str, dp: int, prec: int) -> str:
    out = ["-" if neg else ""]
    if dp > 0:
        head = ds[:dp]
        out.append(head + "0" * (dp - len(head)))
    else:
        out.append("0")
    if prec > 0:
        frac = "".join(ds[j] if 0 <= j < len(ds) else "0" for j in range(dp, dp + prec))
        out.append("." + frac)
    return "".join(out)


def _bits(value: float) -> tuple[int, int]:
    raw = struct.unpack(">Q", struct.pack(">d", value))[0]
    exp = (raw >> _MANT_BITS) & 0x7FF
    mant = raw & ((1 << _MANT_BITS) - 1)
    if exp == 0:
        exp += 1
    else:
        mant |= 1 << _MANT_BITS
    return mant, exp + _BIAS


def _fmt_b(neg: bool, mant: int, exp: int) -> str:
    exp -= _MANT_BITS
    return f"{'-' if neg else ''}{mant}p{'+' if exp >= 0 else ''}{exp}"


def _fmt_x(neg: bool, mant: int, exp: int, prec: int, ch: str) -> str:
    if mant == 0:
        exp = 0
    mant = (mant << (60 - _MANT_BITS)) & _MASK64
    while mant and not mant & (1 << 60):
        mant = (mant << 1) & _MASK64
        exp -= 1
    if 0 <= prec < 15:
        shift = prec * 4
        extra = (mant << shift) & ((1 << 60) - 1)
        mant >>= 60 - shift
        if extra | (mant & 1) > 1 << 59:
            mant += 1
        mant = (mant << (60 - shift)) & _MASK64
        if mant & (1 << 61):
            mant >>= 1
            exp += 1
    digits = "0123456789abcdef" if ch == "x" else "0123456789ABCDEF"
    out = ["-" if neg else "", "0", ch, str((mant >> 60) & 1)]
    mant = (mant << 4) & _MASK64
    if prec < 0 and mant:
        out.append(".")
        while mant:
            out.append(digits[(mant >> 60) & 15])
            mant = (mant << 4) & _MASK64
    elif prec > 0:
        out.append(".")
        for _ in range(prec):
            out.append(digits[(mant >> 60) & 15])
            mant = (mant << 4) & _MASK64
    out.append("p" if ch == "x" else "P")
    out.append("-" if exp < 0 else "+")
    out.append(f"{abs(exp):02d}")
    return "".join(out)


def format_float(value: float, fmt: str, precision: int) -> str:
    """Format a float with one of the directives b, e, E, f, g, G, x, X.

    A negative precision selects the fewest digits that represent the value exactly.
    """
    if not fmt or fmt[0] not in "beEfgGxX":
        raise ValueError(f"unsupported float format {fmt!r}")
    ch = fmt[0]
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    neg = math.copysign(1.0, value) < 0
    absolute = abs(value)

    if ch == "b":
        return _fmt_b(neg, *_bits(absolute))
    if ch in "xX":
        return _fmt_x(neg, *_bits(absolute), precision, ch)

    shortest = precision < 0
    prec = precision
    if shortest:
        ds, dp = _decimal_digits(repr(absolute)) if absolute else ("", 0)
        if ch in "eE":
            prec = max(len(ds) - 1, 0)
        elif ch == "f":
            prec = max(len(ds) - dp, 0)
        else:
            prec = len(ds)
    else:
        ds, dp = _decimal_digits(str(Decimal(absolute))) if absolute else ("", 0)
        if ch in "eE":
            ds, dp = _round(ds, dp, prec + 1)
        elif ch == "f":
            ds, dp = _round(ds, dp, dp + prec)
        else:
            if prec == 0:
                prec = 1
            ds, dp = _round(ds, dp, prec)

    if ch in "eE":
        return _fmt_e(neg, ds, dp, prec, ch)
    if ch == "f":
        return _fmt_f(neg, ds, dp, prec)

    eprec = prec
    if eprec > len(ds) and len(ds) >= dp:
        eprec = len(ds)
    if shortest:
        eprec = 6
    exp = dp - 1
    if exp < -4 or exp >= eprec:
        if prec > len(ds):
            prec = len(ds)
        return _fmt_e(neg, ds, dp, prec - 1, "e" if ch == "g" else "E")
    if prec > dp:
        prec = len(ds)
    return _fmt_f(neg, ds, dp, max(prec - dp, 0))


def parse_int(text: str) -> int:
    """Parse a base-10 signed 64-bit integer."""
    if not isinstance(text, str) or not _INT_RE.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    value = int(text)
    if not -(1 << 63) <= value < (1 << 63):
        raise ValueError(f"parsing {text!r}: value out of range")
    return value


def parse_float(text: str) -> float:
    """Parse a decimal or hexadecimal floating-point literal, or inf/infinity/nan."""
    if not isinstance(text, str):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    if _SPECIAL_RE.fullmatch(text):
        return float(text)
    if _HEX_FLOAT_RE.fullmatch(text):
        try:
            return float.fromhex(text)
        except OverflowError as exc:
            raise ValueError(f"parsing {text!r}: value out of range") from exc
    if _DEC_FLOAT_RE.fullmatch(text):
        value = float(text)
        if math.isinf(value):
            raise ValueError(f"parsing {text!r}: value out of range")
        return value
    raise ValueError(f"parsing {text!r}: invalid syntax")


def parse_bool(text: str) -> bool:
    """Parse 1, t, T, TRUE, true, True, 0, f, F, FALSE, false or False."""
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"parsing {text!r}: invalid syntax")