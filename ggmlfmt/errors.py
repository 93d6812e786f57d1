"""Errors raised while loading or saving GGML files."""

from __future__ import annotations

from typing import Any


def format_magic(magic: int) -> str:
    """Render a file magic number as hex followed by its little-endian bytes as text."""
    text = (magic & 0xFFFFFFFF).to_bytes(4, "little").decode("utf-8", errors="replace")
    return f"{magic:x} ({text})"


class LoadError(Exception):
    """An error that occurred while loading a model."""


class InvalidMagicError(LoadError):
    """The file magic number is not one of the known GGML magics."""

    def __init__(self, magic: int) -> None:
        self.magic = magic
        super().__init__(f"invalid file magic number: {format_magic(magic)}")


class InvalidFormatVersionError(LoadError):
    """The container has a version that is not supported."""

    def __init__(self, container_type: Any) -> None:
        self.container_type = container_type
        super().__init__(f"invalid ggml format: format={container_type}")


class UnsupportedElementTypeError(LoadError):
    """A tensor uses an element type id that is not known."""

    def __init__(self, tensor_name: str, ftype: int) -> None:
        self.tensor_name = tensor_name
        self.ftype = ftype
        super().__init__(f"unsupported tensor type {ftype} for tensor {tensor_name}")


class LoadInvariantBrokenError(LoadError):
    """A structural invariant of the file was violated."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"invariant broken: {detail}")


class LoadImplementationError(LoadError):
    """The load handler raised an error; the original is the ``__cause__``."""

    def __init__(self, source: BaseException) -> None:
        self.source = source
        super().__init__("implementation error")


class SaveError(Exception):
    """An error that occurred while saving a model."""


class SaveInvariantBrokenError(SaveError):
    """The data to be saved violates a structural invariant."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"invariant broken: {detail}")


class SaveImplementationError(SaveError):
    """The save handler raised an error; the original is the ``__cause__``."""

    def __init__(self, source: BaseException) -> None:
        self.source = source
        super().__init__("implementation error")


class VocabularyScoringNotSupportedError(SaveError):
    """The container cannot store scores but the vocabulary has non-zero scores."""

    def __init__(self) -> None:
        super().__init__("container type does not support vocabulary scoring")