"""Shared fixtures: sample files and a straightforward reference decoder."""

from __future__ import annotations

import struct
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest

FOOTER = struct.Struct("<IHHHH")


def _make_file(
    width: int,
    height: int,
    logical: tuple[int, int] | None = None,
    tag: int = 0,
    surplus: int = 0,
    seed: int = 0,
) -> bytes:
    rng = np.random.default_rng(seed)
    body = rng.integers(0, 256, width * height * 3 + surplus, dtype=np.uint8)
    lw, lh = logical or (width, height)
    return body.tobytes() + FOOTER.pack(tag, width, height, lw, lh)


def _reference_decode(data: bytes) -> tuple[np.ndarray, np.ndarray]:
    """Decode pixel by pixel, one loop per unscrambling step."""
    _, width, height, lw, lh = FOOTER.unpack(data[-FOOTER.size:])
    body = data[:-FOOTER.size]

    pixels = []
    for i in range(len(body) - 1, 1, -3):
        pixels.append((body[i], body[i - 1], body[i - 2]))

    img = [[(0, 0, 0)] * width for _ in range(height)]
    i = 0
    for ty in range(height // 8):
        for tx in range(width // 8):
            g = [[(0, 0, 0)] * 8 for _ in range(8)]
            for col in range(8):
                for row in range(8):
                    g[col][row] = pixels[i]
                    i += 1

            for col in range(0, 8, 2):
                for row in range(0, 8, 2):
                    ul = g[col][row]
                    ur = g[col + 1][row]
                    dr = g[col + 1][row + 1]
                    dl = g[col][row + 1]
                    g[col][row] = ur
                    g[col + 1][row] = dr
                    g[col + 1][row + 1] = dl
                    g[col][row + 1] = ul

            for col in range(4, 8):
                for row in range(4):
                    other_col, other_row = col - 4, row + 4
                    g[col][row], g[other_col][other_row] = (
                        g[other_col][other_row],
                        g[col][row],
                    )

            for row in range(8):
                p2, p3, p4, p5 = g[2][row], g[3][row], g[4][row], g[5][row]
                g[2][row], g[3][row], g[4][row], g[5][row] = p4, p5, p2, p3

            for col in range(8):
                r = g[col]
                g[col] = [r[1], r[3], r[0], r[2], r[5], r[7], r[4], r[6]]

            for col in range(8):
                for row in range(8):
                    img[ty * 8 + row][tx * 8 + col] = g[col][row]

    full = np.array(img, dtype=np.uint8)[:, ::-1]
    logical = full[: min(lh, height), : min(lw, width)]
    return full, logical


@pytest.fixture
def make_file() -> Callable[..., bytes]:
    """Factory building file contents with random pixel bytes."""
    return _make_file


@pytest.fixture
def reference_decode() -> Callable[[bytes], tuple[np.ndarray, np.ndarray]]:
    """Slow scalar decoder returning (full, logical) arrays."""
    return _reference_decode


@pytest.fixture
def sample_bytes() -> bytes:
    """A 32x16 image with a 24x12 logical region."""
    return _make_file(32, 16, logical=(24, 12), tag=0xDEADBEEF, seed=7)


@pytest.fixture
def sample_file(tmp_path: Path, sample_bytes: bytes) -> Path:
    path = tmp_path / "title.bin"
    path.write_bytes(sample_bytes)
    return path


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user config files and OOTW_CONFIG out of tests."""
    monkeypatch.delenv("OOTW_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
