"""Element types, container types and related GGML definitions."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import BinaryIO, Optional

from ggmlfmt.binio import write_u32

FILE_MAGIC_GGML = 0x67676D6C
"""Magic constant for unversioned ``ggml`` files."""
FILE_MAGIC_GGMF = 0x67676D66
"""Magic constant for versioned ``ggmf`` files."""
FILE_MAGIC_GGJT = 0x67676A74
"""Magic constant for mmap-able ``ggjt`` files."""
FILE_MAGIC_GGLA = 0x67676C61
"""Magic constant for ``ggla`` LoRA adapter files."""

QNT_VERSION = 2
"""The current quantization version."""
QNT_VERSION_FACTOR = 1000
"""The factor by which ``ftype`` is divided to get the quantization version."""


class ElementType(enum.IntEnum):
    """The type of a tensor element, valued by its on-disk type id."""

    F32 = 0
    F16 = 1
    Q4_0 = 2
    Q4_1 = 3
    Q5_0 = 6
    Q5_1 = 7
    Q8_0 = 8
    Q8_1 = 9
    Q2_K = 10
    Q3_K = 11
    Q4_K = 12
    Q5_K = 13
    Q6_K = 14
    I8 = 16
    I32 = 18

    def __str__(self) -> str:
        return self.name.lower()

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    def is_quantized(self) -> bool:
        """Whether this type is a quantized block format."""
        return self not in _UNQUANTIZED

    @classmethod
    def default(cls) -> "ElementType":
        """The default element type."""
        return cls.Q4_0


_UNQUANTIZED = frozenset(
    {ElementType.I32, ElementType.F16, ElementType.F32, ElementType.I8}
)

# (bytes per block, elements per block)
_LAYOUT: dict[ElementType, tuple[int, int]] = {
    ElementType.F32: (4, 1),
    ElementType.F16: (2, 1),
    ElementType.Q4_0: (18, 32),
    ElementType.Q4_1: (20, 32),
    ElementType.Q5_0: (22, 32),
    ElementType.Q5_1: (24, 32),
    ElementType.Q8_0: (34, 32),
    ElementType.Q8_1: (40, 32),
    ElementType.Q2_K: (84, 256),
    ElementType.Q3_K: (110, 256),
    ElementType.Q4_K: (144, 256),
    ElementType.Q5_K: (176, 256),
    ElementType.Q6_K: (210, 256),
    ElementType.I8: (1, 1),
    ElementType.I32: (4, 1),
}


def type_size(element_type: ElementType) -> int:
    """Size in bytes of one block of ``element_type``."""
    return _LAYOUT[ElementType(element_type)][0]


def blck_size(element_type: ElementType) -> int:
    """Number of elements in one block of ``element_type``."""
    return _LAYOUT[ElementType(element_type)][1]


def type_sizef(element_type: ElementType) -> float:
    """Average number of bytes per element of ``element_type``."""
    size, block = _LAYOUT[ElementType(element_type)]
    return size / block


class ContainerKind(enum.Enum):
    """The family of a GGML file container, valued by its magic number."""

    GGML = FILE_MAGIC_GGML
    GGMF = FILE_MAGIC_GGMF
    GGJT = FILE_MAGIC_GGJT
    GGLA = FILE_MAGIC_GGLA

    @property
    def magic(self) -> int:
        return self.value

    @property
    def is_versioned(self) -> bool:
        return self is not ContainerKind.GGML


@dataclass(frozen=True)
class ContainerType:
    """The format of a model file: a container kind plus, if versioned, its version."""

    kind: ContainerKind
    version: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind.is_versioned and self.version is None:
            raise ValueError(f"{self.kind.name} containers require a version")
        if not self.kind.is_versioned and self.version is not None:
            raise ValueError("GGML containers are unversioned")

    def __str__(self) -> str:
        name = self.kind.name.capitalize()
        return name if self.version is None else f"{name}({self.version})"

    def supports_mmap(self) -> bool:
        """Whether tensor data in this container can be memory-mapped."""
        return self.kind is ContainerKind.GGJT

    def write(self, writer: BinaryIO) -> None:
        """Write the magic number and, if versioned, the version."""
        write_u32(writer, self.kind.magic)
        if self.version is not None:
            write_u32(writer, self.version)


@dataclass
class RoPEOverrides:
    """Value overrides for rotary positional encoding."""

    frequency_scale: float = 1.0
    frequency_base: int = 10_000


class Backend(enum.IntEnum):
    """Backend on which a tensor lives."""

    CPU = 0
    GPU = 10
    GPU_SPLIT = 20

    @classmethod
    def default(cls) -> "Backend":
        return cls.CPU


class Accelerator(enum.Enum):
    """Hardware accelerators GGML can be built with."""

    CUBLAS = "cublas"
    CLBLAST = "clblast"
    METAL = "metal"
    NONE = "none"