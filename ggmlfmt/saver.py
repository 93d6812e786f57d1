"""Saving GGML model files through a callback handler."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterable, Sequence, TypeVar

from ggmlfmt.binio import write_f32, write_i32, write_u32
from ggmlfmt.errors import (
    SaveError,
    SaveImplementationError,
    SaveInvariantBrokenError,
    VocabularyScoringNotSupportedError,
)
from ggmlfmt.types import ContainerKind, ContainerType, ElementType

_T = TypeVar("_T")

_I32_MAX = 2**31 - 1
_U32_MAX = 2**32 - 1


@dataclass
class TensorSaveInfo:
    """A tensor to be written to disk."""

    n_dims: int
    dims: tuple[int, int]
    element_type: ElementType
    data: bytes


class SaveContainerType(enum.Enum):
    """Container formats a model can be saved in."""

    GGML = "ggml"
    GGJT_V3 = "ggjt-v3"

    def container_type(self) -> ContainerType:
        """The full container type written for this choice."""
        if self is SaveContainerType.GGML:
            return ContainerType(ContainerKind.GGML)
        return ContainerType(ContainerKind.GGJT, 3)


class SaveHandler(abc.ABC):
    """Supplies the parts of a model as :func:`save` writes them."""

    @abc.abstractmethod
    def write_hyperparameters(self, writer: BinaryIO) -> None:
        """Write the model's hyperparameters to ``writer``."""

    @abc.abstractmethod
    def tensor_data(self, tensor_name: str) -> TensorSaveInfo:
        """Return the tensor with the given name."""


def _call(fn: Callable[..., _T], *args: object) -> _T:
    try:
        return fn(*args)
    except Exception as err:
        raise SaveImplementationError(err) from err


def _checked(value: int, maximum: int) -> int:
    if not 0 <= value <= maximum:
        raise SaveError("invalid integer conversion")
    return value


def save(
    writer: BinaryIO,
    handler: SaveHandler,
    container_type: SaveContainerType,
    vocabulary: Sequence[tuple[bytes, float]],
    tensor_names: Iterable[str],
) -> None:
    """Save a model to a seekable writer.

    With the GGML container every vocabulary score must be 0.0.
    """
    container_type.container_type().write(writer)

    is_ggml = container_type is SaveContainerType.GGML
    if is_ggml and any(score != 0.0 for _, score in vocabulary):
        raise VocabularyScoringNotSupportedError()

    _call(handler.write_hyperparameters, writer)

    for token, score in vocabulary:
        write_u32(writer, _checked(len(token), _U32_MAX))
        writer.write(token)
        if not is_ggml:
            write_f32(writer, score)

    for name in tensor_names:
        info = _call(handler.tensor_data, name)
        dims = info.dims

        if info.element_type in (ElementType.Q4_0, ElementType.Q4_1) and dims[0] % 64 != 0:
            raise SaveInvariantBrokenError(f"{list(dims)}[0] % 64 == 0")

        encoded_name = name.encode("utf-8")
        write_i32(writer, _checked(info.n_dims, _I32_MAX))
        write_i32(writer, _checked(len(encoded_name), _I32_MAX))
        write_u32(writer, int(info.element_type))
        for dim in dims[: info.n_dims]:
            write_i32(writer, _checked(dim, _I32_MAX))

        writer.write(encoded_name)

        if not is_ggml:
            offset = writer.tell()
            aligned = (offset + 31) & ~31
            writer.write(bytes(aligned - offset))

        writer.write(info.data)