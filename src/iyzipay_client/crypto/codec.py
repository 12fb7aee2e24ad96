"""Base64 codecs with graceful degradation across runtimes.

Resolution order:

1. the byte-buffer primitive (:mod:`binascii`), when importable;
2. a host text codec exposing ``btoa``/``atob`` over binary strings (for
   example Pyodide's ``js`` module);
3. :class:`UnavailableCodec`, which raises on use.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from importlib import import_module
from typing import Protocol, cast

from iyzipay_client.errors import UnsupportedOperationError

__all__ = [
    "AsciiCodec",
    "Base64Codec",
    "BufferCodec",
    "UnavailableCodec",
    "decode_text",
    "encode_text",
    "load_buffer_module",
    "resolve_codec",
]

ENCODE_UNAVAILABLE = "Base64 encoding not available in this environment"
DECODE_UNAVAILABLE = "Base64 decoding not available in this environment"


class Base64Codec(Protocol):
    """Protocol for base64 codecs operating on raw bytes."""

    name: str

    def encode(self, raw: bytes) -> str: ...

    def decode(self, text: str) -> bytes: ...


class BufferModule(Protocol):
    """Subset of :mod:`binascii` used by :class:`BufferCodec`."""

    def b2a_base64(self, data: bytes, /, *, newline: bool = True) -> bytes: ...

    def a2b_base64(self, data: str | bytes, /) -> bytes: ...


def load_buffer_module() -> BufferModule | None:
    """Attempt to import the byte-buffer base64 primitive."""
    try:
        module = import_module("binascii")
    except ModuleNotFoundError:
        return None
    return cast(BufferModule, module)


@dataclass(frozen=True, slots=True)
class BufferCodec:
    """Codec backed by the runtime's byte-buffer primitive."""

    module: BufferModule
    name: str = "buffer"

    def encode(self, raw: bytes) -> str:
        return self.module.b2a_base64(raw, newline=False).decode("ascii")

    def decode(self, text: str) -> bytes:
        return self.module.a2b_base64(text)


@dataclass(frozen=True, slots=True)
class AsciiCodec:
    """Codec backed by host ``btoa``/``atob`` functions.

    The host functions work on binary strings where each character carries
    one byte, so UTF-8 text is widened through latin-1 on the way in and
    narrowed on the way out. Either direction may be missing.
    """

    btoa: Callable[[str], str] | None = None
    atob: Callable[[str], str] | None = None
    name: str = "ascii"

    def encode(self, raw: bytes) -> str:
        if self.btoa is None:
            raise UnsupportedOperationError(ENCODE_UNAVAILABLE)
        return str(self.btoa(raw.decode("latin-1")))

    def decode(self, text: str) -> bytes:
        if self.atob is None:
            raise UnsupportedOperationError(DECODE_UNAVAILABLE)
        return str(self.atob(text)).encode("latin-1")


@dataclass(frozen=True, slots=True)
class UnavailableCodec:
    """Terminal codec used when the runtime offers no base64 primitive."""

    name: str = "unavailable"

    def encode(self, raw: bytes) -> str:
        raise UnsupportedOperationError(ENCODE_UNAVAILABLE)

    def decode(self, text: str) -> bytes:
        raise UnsupportedOperationError(DECODE_UNAVAILABLE)


def resolve_codec(
    host: object | None = None,
    *,
    load_buffer: Callable[[], BufferModule | None] = load_buffer_module,
) -> Base64Codec:
    """Return the best base64 codec available.

    Args:
        host: Optional host namespace exposing ``btoa`` and/or ``atob``.
        load_buffer: Loader for the byte-buffer primitive.

    Returns:
        A codec; :class:`UnavailableCodec` when nothing usable exists.
    """

    module = load_buffer()
    if module is not None:
        return BufferCodec(module)

    btoa = getattr(host, "btoa", None) if host is not None else None
    atob = getattr(host, "atob", None) if host is not None else None
    if callable(btoa) or callable(atob):
        return AsciiCodec(
            btoa=btoa if callable(btoa) else None,
            atob=atob if callable(atob) else None,
        )
    return UnavailableCodec()


def encode_text(codec: Base64Codec, data: str) -> str:
    """Encode UTF-8 text with ``codec``."""

    return codec.encode(data.encode("utf-8"))


def decode_text(codec: Base64Codec, data: str) -> str:
    """Decode base64 ``data`` with ``codec`` into UTF-8 text."""

    return codec.decode(data).decode("utf-8")
