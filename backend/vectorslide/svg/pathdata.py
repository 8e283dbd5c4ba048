"""SVG path data: parsing to absolute segments and compact re-serialization.

Parsing is done by ``svgelements``, which resolves relative commands and
expands ``H``/``V``/``S``/``T`` into full segments while keeping subpath
moves and closepaths. ``simplify_path`` rounds to a fixed precision and
applies the lossless shorthands on the way back out:

- zero-length lines dropped (unless they are the only drawing in a subpath)
- ``L`` → ``H`` / ``V`` for axis-aligned lines
- cubic/quadratic curves whose control points lie on the chord → ``L``
- ``C`` → ``S`` and ``Q`` → ``T`` when the first control point is the
  reflection of the previous one
- repeated command letters collapsed
"""

from __future__ import annotations

from math import pi

from svgelements import Arc, Close, CubicBezier, Line, Move, Path, QuadraticBezier

from vectorslide.svg.parser import format_number

Segment = tuple[str, list[float]]


class PathSyntaxError(ValueError):
    pass


def parse_path(d: str) -> list[Segment]:
    """Parse path data into absolute ``M``/``L``/``C``/``Q``/``A``/``Z`` segments."""
    try:
        path = Path(d)
    except (ValueError, TypeError, IndexError, ArithmeticError) as e:
        raise PathSyntaxError(f"Unparseable path data: {e}") from e

    segments: list[Segment] = []
    for seg in path.segments():
        if isinstance(seg, Move):
            segments.append(("M", [seg.end.x, seg.end.y]))
        elif isinstance(seg, Close):
            segments.append(("Z", []))
        elif not segments:
            raise PathSyntaxError("Path data must start with a moveto")
        elif isinstance(seg, Line):
            segments.append(("L", [seg.end.x, seg.end.y]))
        elif isinstance(seg, CubicBezier):
            segments.append((
                "C",
                [seg.control1.x, seg.control1.y, seg.control2.x, seg.control2.y, seg.end.x, seg.end.y],
            ))
        elif isinstance(seg, QuadraticBezier):
            segments.append(("Q", [seg.control.x, seg.control.y, seg.end.x, seg.end.y]))
        elif isinstance(seg, Arc):
            segments.append(_arc_segment(seg))
        else:
            raise PathSyntaxError(f"Unsupported path segment {type(seg).__name__}")
    if not segments or segments[0][0] != "M":
        raise PathSyntaxError("Path data must start with a moveto")
    return segments


def _arc_segment(arc: Arc) -> Segment:
    # Zero radii (or no sweep) draw a straight line to the end point
    if not arc.sweep or not arc.rx or not arc.ry:
        return "L", [arc.end.x, arc.end.y]
    large = 1.0 if abs(arc.sweep) > pi else 0.0
    sweep = 1.0 if arc.sweep >= 0 else 0.0
    rotation = arc.get_rotation().as_degrees
    return "A", [arc.rx, arc.ry, rotation, large, sweep, arc.end.x, arc.end.y]


def simplify_path(d: str, precision: int) -> str:
    """Rewrite path data compactly at ``precision`` fractional digits."""
    segments = [(cmd, _round_args(cmd, args, precision)) for cmd, args in parse_path(d)]
    return _serialize(_shorten(segments, precision), precision)


def _round_args(cmd: str, args: list[float], precision: int) -> list[float]:
    # Arc flags are not coordinates
    return [v if cmd == "A" and i in (3, 4) else round(v, precision) for i, v in enumerate(args)]


def _reflect(ctrl, cx: float, cy: float, q) -> tuple[float, float]:
    if ctrl is None:
        return cx, cy
    return q(2 * cx - ctrl[0]), q(2 * cy - ctrl[1])


def _on_chord(p0, p3, ctrls, tol: float) -> bool:
    """True when every control point lies on the segment p0→p3."""
    dx, dy = p3[0] - p0[0], p3[1] - p0[1]
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return all(abs(c[0] - p0[0]) <= tol and abs(c[1] - p0[1]) <= tol for c in ctrls)
    length = length_sq ** 0.5
    for c in ctrls:
        vx, vy = c[0] - p0[0], c[1] - p0[1]
        if abs(dx * vy - dy * vx) / length > tol:
            return False
        t = (vx * dx + vy * dy) / length_sq
        if t < 0 or t > 1:
            return False
    return True


def _shorten(segments: list[Segment], precision: int) -> list[Segment]:
    tol = 0.5 * 10 ** (-precision)

    def q(v: float) -> float:
        return round(v, precision)

    out: list[Segment] = []
    cx = cy = sx = sy = 0.0
    prev_cubic = prev_quad = None
    drawn = False  # anything drawn since the last moveto
    for cmd, args in segments:
        cubic = quad = None
        if cmd == "M":
            cx, cy = sx, sy = args
            out.append(("M", args))
            drawn = False
            prev_cubic = prev_quad = None
            continue
        if cmd == "Z":
            out.append(("Z", []))
            cx, cy = sx, sy
            prev_cubic = prev_quad = None
            continue

        if cmd == "C" and _on_chord((cx, cy), (args[4], args[5]), [(args[0], args[1]), (args[2], args[3])], tol):
            cmd, args = "L", args[4:]
        elif cmd == "Q" and _on_chord((cx, cy), (args[2], args[3]), [(args[0], args[1])], tol):
            cmd, args = "L", args[2:]
        elif cmd == "A" and (args[0] == 0 or args[1] == 0):
            cmd, args = "L", args[5:]
        elif cmd == "A" and (args[5], args[6]) == (cx, cy):
            # Arc to the current point draws nothing
            continue

        if cmd == "L":
            x, y = args
            if (x, y) == (cx, cy) and drawn:
                continue
            if y == cy and x != cx:
                out.append(("H", [x]))
            elif x == cx and y != cy:
                out.append(("V", [y]))
            else:
                out.append(("L", [x, y]))
        elif cmd == "C":
            if (args[0], args[1]) == _reflect(prev_cubic, cx, cy, q):
                out.append(("S", args[2:]))
            else:
                out.append(("C", args))
            cubic = (args[2], args[3])
        elif cmd == "Q":
            if (args[0], args[1]) == _reflect(prev_quad, cx, cy, q):
                out.append(("T", args[2:]))
            else:
                out.append(("Q", args))
            quad = (args[0], args[1])
        else:
            out.append((cmd, args))
        cx, cy = args[-2], args[-1]
        drawn = True
        prev_cubic, prev_quad = cubic, quad
    return out


def _serialize(segments: list[Segment], precision: int) -> str:
    parts: list[str] = []
    prev = None
    for cmd, args in segments:
        nums = " ".join(
            str(int(v)) if cmd == "A" and i in (3, 4) else format_number(v, precision)
            for i, v in enumerate(args)
        )
        if cmd == prev and cmd != "M" and cmd != "Z":
            parts.append(" " + nums)
        else:
            parts.append(cmd + nums)
        prev = cmd
    return "".join(parts)
