"""Loading GGML model files through a callback handler."""

from __future__ import annotations

import abc
import math
from dataclasses import dataclass
from typing import BinaryIO, Callable, TypeVar

from ggmlfmt.binio import has_data_left, read_bytes, read_f32, read_i32, read_u32
from ggmlfmt.errors import (
    InvalidFormatVersionError,
    InvalidMagicError,
    LoadError,
    LoadImplementationError,
    LoadInvariantBrokenError,
    UnsupportedElementTypeError,
)
from ggmlfmt.types import (
    ContainerKind,
    ContainerType,
    ElementType,
    blck_size,
    type_size,
)

_T = TypeVar("_T")

_MAX_DIMS = 2

_SUPPORTED_VERSIONS = {
    ContainerKind.GGML: {None},
    ContainerKind.GGMF: {1},
    ContainerKind.GGJT: {1, 2, 3},
    ContainerKind.GGLA: {1},
}


def data_size(element_type: ElementType, n_elements: int) -> int:
    """Bytes occupied by ``n_elements`` elements of ``element_type``."""
    return type_size(element_type) * n_elements // blck_size(element_type)


@dataclass
class TensorLoadInfo:
    """Information about a tensor that is being read."""

    name: str
    n_dims: int
    dims: tuple[int, int]
    n_elements: int
    element_type: ElementType
    start_offset: int

    def active_dims(self) -> tuple[int, ...]:
        """The dimensions actually used by the tensor."""
        return tuple(self.dims[: self.n_dims])

    def calc_size(self) -> int:
        """Size of the tensor's values in bytes."""
        return data_size(self.element_type, math.prod(self.active_dims()))

    def read_data(self, reader: BinaryIO) -> bytes:
        """Read the tensor's data from a seekable reader over the same file."""
        n_bytes = self.n_elements * type_size(self.element_type)
        reader.seek(self.start_offset)
        return read_bytes(reader, n_bytes)


@dataclass
class PartialHyperparameters:
    """Hyperparameter values needed to continue loading."""

    n_vocab: int


class LoadHandler(abc.ABC):
    """Receives the parts of a model as :func:`load` reads them."""

    @abc.abstractmethod
    def container_type(self, container_type: ContainerType) -> None:
        """Called once the container type is known."""

    @abc.abstractmethod
    def vocabulary_token(self, i: int, token: bytes, score: float) -> None:
        """Called for each vocabulary token, in order."""

    @abc.abstractmethod
    def read_hyperparameters(self, reader: BinaryIO) -> PartialHyperparameters:
        """Read the model's hyperparameters from ``reader``."""

    @abc.abstractmethod
    def tensor_buffer(self, info: TensorLoadInfo) -> None:
        """Called for each tensor header that is read."""


def read_container_type(reader: BinaryIO) -> ContainerType:
    """Read a magic number and, for versioned containers, the version."""
    magic = read_u32(reader)
    try:
        kind = ContainerKind(magic)
    except ValueError:
        raise InvalidMagicError(magic) from None
    version = read_u32(reader) if kind.is_versioned else None
    return ContainerType(kind, version)


def _call(fn: Callable[..., _T], *args: object) -> _T:
    try:
        return fn(*args)
    except Exception as err:
        raise LoadImplementationError(err) from err


def _non_negative(value: int) -> int:
    if value < 0:
        raise LoadError("invalid integer conversion")
    return value


def load(reader: BinaryIO, handler: LoadHandler) -> None:
    """Load a GGML model from ``reader``, reporting its parts to ``handler``."""
    container_type = read_container_type(reader)
    kind = container_type.kind
    if container_type.version not in _SUPPORTED_VERSIONS[kind]:
        raise InvalidFormatVersionError(container_type)

    _call(handler.container_type, container_type)
    hparams = _call(handler.read_hyperparameters, reader)

    scored = kind in (ContainerKind.GGMF, ContainerKind.GGJT)
    for i in range(hparams.n_vocab):
        length = read_u32(reader)
        token = read_bytes(reader, length)
        score = read_f32(reader) if scored else 0.0
        _call(handler.vocabulary_token, i, token, score)

    align = kind in (ContainerKind.GGJT, ContainerKind.GGLA)
    _load_weights(reader, handler, align)


def _load_weights(reader: BinaryIO, handler: LoadHandler, align: bool) -> None:
    while has_data_left(reader):
        n_dims = _non_negative(read_i32(reader))
        name_len = read_i32(reader)
        ftype = read_u32(reader)

        if n_dims > _MAX_DIMS:
            raise LoadInvariantBrokenError(f"{n_dims} <= {_MAX_DIMS}")

        dims = [1] * _MAX_DIMS
        for axis in range(n_dims):
            dims[axis] = _non_negative(read_i32(reader))
        n_elements = math.prod(dims[:n_dims])

        raw_name = read_bytes(reader, _non_negative(name_len))
        try:
            name = raw_name.decode("utf-8")
        except UnicodeDecodeError:
            raise LoadError("could not convert bytes to a UTF-8 string") from None

        try:
            element_type = ElementType(ftype)
        except ValueError:
            raise UnsupportedElementTypeError(name, ftype) from None

        if element_type in (ElementType.Q4_0, ElementType.Q4_1) and dims[0] % 64 != 0:
            raise LoadInvariantBrokenError(f"{dims}[0] % 64 == 0")

        offset = reader.tell()
        if align:
            offset = (offset + 31) & ~31

        info = TensorLoadInfo(
            name=name,
            n_dims=n_dims,
            dims=(dims[0], dims[1]),
            n_elements=n_elements,
            element_type=element_type,
            start_offset=offset,
        )
        n_bytes = info.calc_size()
        _call(handler.tensor_buffer, info)
        reader.seek(offset + n_bytes)