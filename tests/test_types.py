import io
import struct

import pytest

from ggmlfmt import types
from ggmlfmt.binio import read_u32
from ggmlfmt.types import (
    Backend,
    ContainerKind,
    ContainerType,
    ElementType,
    RoPEOverrides,
)


@pytest.mark.parametrize(
    "kind, version, magic",
    [
        (ContainerKind.GGML, None, 0x67676D6C),
        (ContainerKind.GGMF, 1, 0x67676D66),
        (ContainerKind.GGJT, 3, 0x67676A74),
        (ContainerKind.GGLA, 1, 0x67676C61),
    ],
)
def test_magic_constants(kind, version, magic):
    container = ContainerType(kind) if version is None else ContainerType(kind, version)
    buf = io.BytesIO()
    container.write(buf)
    buf.seek(0)
    assert read_u32(buf) == magic


def test_magic_constant_values():
    buf = io.BytesIO()
    ContainerType(ContainerKind.GGML).write(buf)
    assert buf.getvalue() == struct.pack("<I", 0x67676D6C)
    assert types.FILE_MAGIC_GGML == 0x67676D6C
    assert types.FILE_MAGIC_GGMF == 0x67676D66
    assert types.FILE_MAGIC_GGJT == 0x67676A74
    assert types.FILE_MAGIC_GGLA == 0x67676C61


@pytest.mark.parametrize(
    "element_type, name",
    [
        (ElementType.Q4_0, "q4_0"),
        (ElementType.Q8_1, "q8_1"),
        (ElementType.Q6_K, "q6_k"),
        (ElementType.F16, "f16"),
        (ElementType.I32, "i32"),
    ],
)
def test_element_type_display(element_type, name):
    assert str(element_type) == name
    assert f"{element_type}" == name


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Q4_0", True),
        ("Q4_1", True),
        ("Q5_0", True),
        ("Q5_1", True),
        ("Q8_0", True),
        ("Q8_1", True),
        ("Q2_K", True),
        ("Q3_K", True),
        ("Q4_K", True),
        ("Q5_K", True),
        ("Q6_K", True),
        ("I32", False),
        ("F16", False),
        ("F32", False),
        ("I8", False),
    ],
)
def test_is_quantized_matches_kind(name, expected):
    assert ElementType[name].is_quantized() is expected


def test_element_type_default():
    assert ElementType.default() is ElementType.Q4_0


def test_element_type_from_unknown_id_raises():
    with pytest.raises(ValueError):
        ElementType(4)


@pytest.mark.parametrize("element_type", list(ElementType))
def test_sizef_is_ratio(element_type):
    assert types.type_sizef(element_type) == pytest.approx(
        types.type_size(element_type) / types.blck_size(element_type)
    )


@pytest.mark.parametrize("element_type", list(ElementType))
def test_unquantized_have_unit_blocks(element_type):
    if element_type.is_quantized():
        assert types.blck_size(element_type) > 1
    else:
        assert types.blck_size(element_type) == 1


def test_f32_and_f16_sizes():
    assert types.type_size(ElementType.F32) == 4
    assert types.type_size(ElementType.F16) == 2


def test_supports_mmap():
    assert ContainerType(ContainerKind.GGJT, 3).supports_mmap() is True
    assert ContainerType(ContainerKind.GGML).supports_mmap() is False
    assert ContainerType(ContainerKind.GGMF, 1).supports_mmap() is False
    assert ContainerType(ContainerKind.GGLA, 1).supports_mmap() is False


def test_write_ggml_is_magic_only():
    buf = io.BytesIO()
    ContainerType(ContainerKind.GGML).write(buf)
    assert buf.getvalue() == struct.pack("<I", types.FILE_MAGIC_GGML)


@pytest.mark.parametrize(
    "kind", [ContainerKind.GGMF, ContainerKind.GGJT, ContainerKind.GGLA]
)
def test_write_versioned_writes_magic_and_version(kind):
    buf = io.BytesIO()
    ContainerType(kind, 3).write(buf)
    buf.seek(0)
    assert read_u32(buf) == kind.magic
    assert read_u32(buf) == 3
    assert buf.read() == b""


def test_versioned_kind_requires_version():
    with pytest.raises(ValueError):
        ContainerType(ContainerKind.GGJT)


def test_ggml_rejects_version():
    with pytest.raises(ValueError):
        ContainerType(ContainerKind.GGML, 1)


def test_container_type_equality_and_display():
    assert ContainerType(ContainerKind.GGJT, 3) == ContainerType(ContainerKind.GGJT, 3)
    assert ContainerType(ContainerKind.GGJT, 3) != ContainerType(ContainerKind.GGJT, 2)
    assert str(ContainerType(ContainerKind.GGJT, 3)) == "Ggjt(3)"
    assert str(ContainerType(ContainerKind.GGML)) == "Ggml"


def test_rope_overrides_defaults():
    overrides = RoPEOverrides()
    assert overrides.frequency_scale == 1.0
    assert overrides.frequency_base == 10_000


def test_backend_default():
    assert Backend.default() is Backend.CPU