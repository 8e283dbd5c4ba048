"""Transform list simplification.

Transforms are simplified one function at a time and consecutive functions
of the same kind are merged, but a list is never fused into a single
``matrix()``: several renderers mishandle fused matrices.
"""

from __future__ import annotations

import math
import re

from vectorslide.svg.parser import format_number

Transform = tuple[str, list[float]]

_FUNC_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)")
_NUM_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_EPS = 1e-9


def parse_transform(value: str) -> list[Transform]:
    items: list[Transform] = []
    rest = value
    for m in _FUNC_RE.finditer(value):
        items.append((m.group(1), [float(n) for n in _NUM_RE.findall(m.group(2))]))
        rest = rest.replace(m.group(0), "", 1)
    if rest.strip(" \t\r\n,"):
        raise ValueError(f"Unrecognized transform syntax: {value!r}")
    return items


def _canonical(name: str, args: list[float]) -> Transform | None:
    """Normalize one function; None means it is the identity."""
    if name == "translate":
        tx = args[0] if args else 0.0
        ty = args[1] if len(args) > 1 else 0.0
        if tx == 0 and ty == 0:
            return None
        return ("translate", [tx] if ty == 0 else [tx, ty])
    if name == "scale":
        sx = args[0] if args else 1.0
        sy = args[1] if len(args) > 1 else sx
        if sx == 1 and sy == 1:
            return None
        return ("scale", [sx] if sx == sy else [sx, sy])
    if name == "rotate":
        angle = args[0] if args else 0.0
        if angle % 360 == 0:
            return None
        if len(args) >= 3 and (args[1] != 0 or args[2] != 0):
            return ("rotate", [angle, args[1], args[2]])
        return ("rotate", [angle])
    if name in ("skewX", "skewY"):
        angle = args[0] if args else 0.0
        if angle == 0:
            return None
        return (name, [angle])
    if name == "matrix" and len(args) == 6:
        return _matrix_to_simple(args)
    return (name, args)


def _matrix_to_simple(m: list[float]) -> Transform | None:
    a, b, c, d, e, f = m
    if abs(b) < _EPS and abs(c) < _EPS:
        if abs(a - 1) < _EPS and abs(d - 1) < _EPS:
            return _canonical("translate", [e, f])
        if abs(e) < _EPS and abs(f) < _EPS:
            return _canonical("scale", [a, d])
    if abs(e) < _EPS and abs(f) < _EPS and abs(a - d) < _EPS and abs(b + c) < _EPS:
        if abs(a * a + b * b - 1) < 1e-6:
            return _canonical("rotate", [math.degrees(math.atan2(b, a))])
    return ("matrix", m)


def _merge(prev: Transform, cur: Transform) -> Transform | None | bool:
    """Merge two adjacent transforms of one kind. False when not mergeable."""
    pname, pargs = prev
    cname, cargs = cur
    if pname != cname:
        return False
    if pname == "translate":
        ptx, pty = pargs[0], pargs[1] if len(pargs) > 1 else 0.0
        ntx, nty = cargs[0], cargs[1] if len(cargs) > 1 else 0.0
        return _canonical("translate", [ptx + ntx, pty + nty])
    if pname == "scale":
        psx, psy = pargs[0], pargs[1] if len(pargs) > 1 else pargs[0]
        csx, csy = cargs[0], cargs[1] if len(cargs) > 1 else cargs[0]
        return _canonical("scale", [psx * csx, psy * csy])
    if pname == "rotate" and len(pargs) == 1 and len(cargs) == 1:
        return _canonical("rotate", [pargs[0] + cargs[0]])
    return False


def simplify_transform(value: str, precision: int) -> str:
    """Return the simplified transform list ('' when it is the identity)."""
    items: list[Transform] = []
    for name, args in parse_transform(value):
        item = _settle(_canonical(name, _round_args(name, args, precision)), precision)
        if item is None:
            continue
        if items:
            merged = _merge(items[-1], item)
            if merged is not False:
                items.pop()
                merged = _settle(merged, precision)
                if merged is not None:
                    items.append(merged)
                continue
        items.append(item)
    return " ".join(_format(name, args, precision) for name, args in items)


def _settle(item: Transform | None, precision: int) -> Transform | None:
    """Re-round a derived transform so sums and angles stay at fixed digits."""
    if item is None:
        return None
    name, args = item
    return _canonical(name, _round_args(name, args, precision)) if name != "matrix" else item


def _round_args(name: str, args: list[float], precision: int) -> list[float]:
    """Translations use the profile precision; scales and angles keep more digits."""
    if not args:
        return args
    if name == "translate":
        return [round(v, precision) for v in args]
    if name in ("rotate", "skewX", "skewY"):
        return [round(args[0], precision + 1)] + [round(v, precision) for v in args[1:]]
    if name == "matrix" and len(args) == 6:
        return [round(v, precision + 3) for v in args[:4]] + [round(v, precision) for v in args[4:]]
    return [round(v, precision + 3) for v in args]


def _format(name: str, args: list[float], precision: int) -> str:
    # Values are already rounded; the extra digits only keep them exact
    return f"{name}({' '.join(format_number(v, precision + 3) for v in args)})"
