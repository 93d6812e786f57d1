"""Command-line option helpers: quantization targets, RoPE overrides and prompt loading."""

from __future__ import annotations

import enum
from typing import Optional, Union

from ggmlfmt.prompts import PathLike, PromptError, process_prompt, read_prompt_file
from ggmlfmt.saver import SaveContainerType
from ggmlfmt.types import ElementType, RoPEOverrides


class QuantizationTarget(enum.Enum):
    """Element formats a model can be quantized to."""

    Q4_0 = "q4_0"
    Q4_1 = "q4_1"
    Q5_0 = "q5_0"
    Q5_1 = "q5_1"
    Q8_0 = "q8_0"

    def __str__(self) -> str:
        return self.value

    def element_type(self) -> ElementType:
        """The tensor element type this target produces."""
        return ElementType[self.name]


def container_type_label(container_type: Union[SaveContainerType, str]) -> str:
    """The command-line label of a save container type (``ggml`` or ``ggjt-v3``)."""
    return SaveContainerType(container_type).value


def rope_overrides(
    frequency_base: Optional[int], frequency_scale: Optional[float]
) -> Optional[RoPEOverrides]:
    """Build RoPE overrides, or return None if neither value is given.

    A value that is not given falls back to the RoPE default.
    """
    if frequency_base is None and frequency_scale is None:
        return None
    default = RoPEOverrides()
    return RoPEOverrides(
        frequency_scale=(
            default.frequency_scale if frequency_scale is None else frequency_scale
        ),
        frequency_base=default.frequency_base if frequency_base is None else frequency_base,
    )


def load_prompt(prompt_file: Optional[PathLike], prompt: Optional[str]) -> str:
    """Combine an optional prompt file and an optional prompt into the final prompt.

    With both, the file is a template whose ``{{PROMPT}}`` placeholders are
    replaced with ``prompt``. With neither, PromptError is raised.
    """
    contents = None if prompt_file is None else read_prompt_file(prompt_file)
    if contents is not None and prompt is None:
        return contents
    if contents is None and prompt is not None:
        return prompt
    if contents is not None and prompt is not None:
        return process_prompt(contents, prompt)
    raise PromptError("No prompt or prompt file was provided. See --help")