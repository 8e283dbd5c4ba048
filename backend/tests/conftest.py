"""Shared test fixtures."""

from __future__ import annotations

import struct

import pytest


SIMPLE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100" viewBox="0 0 100 100">
  <rect x="10" y="10" width="80" height="80" fill="#FF0000"/>
</svg>'''

SCRIPT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" width="50" height="50" onload="alert(1)">
  <script>alert(1)</script>
  <a href="javascript:alert(1)"><rect width="10" height="10" onclick="alert(2)"/></a>
  <foreignObject width="10" height="10"><div xmlns="http://www.w3.org/1999/xhtml">hi</div></foreignObject>
  <image width="5" height="5" xlink:href="http://evil.example/track.png"/>
  <image width="5" height="5" href="data:image/png;base64,iVBORw0KGgo="/>
  <circle cx="25" cy="25" r="10" fill="blue"/>
</svg>'''

STYLED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 100">
  <style>
    .cls-1 { fill: #00ff00; stroke: black !important; }
    g .inner { stroke-width: 3; }
  </style>
  <defs>
    <clipPath id="clip0"><rect width="100" height="100"/></clipPath>
  </defs>
  <g clip-path="url(#clip0)">
    <rect class="cls-1" x="0" y="0" width="50" height="50"/>
    <rect class="cls-1 inner" x="60" y="0" width="50" height="50" fill="#0000ff"/>
  </g>
  <rect class="inner" x="120" y="0" width="50" height="50"/>
</svg>'''

COMPLEX_ID_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 100 100">
  <defs>
    <linearGradient id="SVGID_1_gradient_long">
      <stop offset="0" stop-color="#ffffff"/>
      <stop offset="1" stop-color="#000000"/>
    </linearGradient>
    <path id="aGVsbG8=" d="M0 0L10 10"/>
    <circle id="keep-me" cx="5" cy="5" r="5"/>
  </defs>
  <rect width="100" height="100" fill="url(#SVGID_1_gradient_long)"/>
  <use xlink:href="#aGVsbG8="/>
  <use href="#keep-me"/>
</svg>'''

INKSCAPE_SVG = '''<?xml version="1.0" encoding="UTF-8"?>
<!-- Created with Inkscape -->
<svg xmlns="http://www.w3.org/2000/svg"
     xmlns:inkscape="http://www.inkscape.org/namespaces/inkscape"
     xmlns:sodipodi="http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd"
     width="64" height="32" viewBox="0 0 64 32">
  <sodipodi:namedview id="base" pagecolor="#ffffff"/>
  <metadata>editor data</metadata>
  <!-- layer -->
  <g inkscape:label="Layer 1" inkscape:groupmode="layer">
    <rect x="1" y="1" width="30" height="30" fill="#336699"/>
  </g>
</svg>'''

NOISY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="120.123456px" height="60px" viewBox="0 0 120.123456 60">
  <rect x="1.23456" y="2.5" width="10px" height="10" fill="rgb(255, 255, 255)" stroke="#AABBCC"/>
  <path d="M 0 0 L 10 0 L 10 10 L 0 10 Z" transform="translate(10 0) translate(5 5)"/>
  <g transform="matrix(1 0 0 1 0 0)" color="#ffffff"><circle r="3" fill="currentColor"/></g>
  <text font-family="Liberation Sans">x</text>
</svg>'''

NO_NAMESPACE_SVG = '<svg width="10" height="20"><rect width="10" height="20"/></svg>'

TRUNCATED_SVG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10"><rect x="1"'

WIDE_SVG = '<svg xmlns="http://www.w3.org/2000/svg" width="2000" height="900"><rect width="2000" height="900"/></svg>'

NO_SIZE_SVG = '<svg xmlns="http://www.w3.org/2000/svg"><rect width="5" height="5"/></svg>'


def make_emf(frame: tuple[int, int, int, int] = (0, 0, 2540, 1270), size: int = 108) -> bytes:
    """Minimal EMF: an EMR_HEADER record with the given rclFrame (0.01 mm)."""
    header = struct.pack("<II4i4i4s", 1, size, 0, 0, 100, 50, *frame, b" EMF")
    return header + b"\x00" * (size - len(header))


ALL_MARKUP = [SIMPLE_SVG, SCRIPT_SVG, STYLED_SVG, COMPLEX_ID_SVG, INKSCAPE_SVG, NOISY_SVG, WIDE_SVG]


@pytest.fixture
def emf_bytes() -> bytes:
    return make_emf()
