"""Prompt templating and prompt-file helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

PLACEHOLDER = "{{PROMPT}}"

_MESSAGE_PROMPT_PREFIX_ERROR = (
    "Message prompt prefix must not contain a `{{PROMPT}}` placeholder. "
    "The prompt will be automatically appended to the prefix."
)

PathLike = Union[str, "os.PathLike[str]"]


class PromptError(Exception):
    """A prompt or prompt file could not be used."""


def process_prompt(raw_prompt: str, prompt: str) -> str:
    """Replace every ``{{PROMPT}}`` placeholder in ``raw_prompt`` with ``prompt``."""
    return raw_prompt.replace(PLACEHOLDER, prompt)


def read_prompt_file(path: PathLike) -> str:
    """Read a prompt file as UTF-8 text."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise PromptError(f"Could not read prompt file at {str(path)!r}") from err


def message_prompt_prefix(
    prefix: Optional[str], prefix_file: Optional[PathLike]
) -> str:
    """Resolve the per-message prompt prefix from exactly one of a string or a file.

    The prefix must not contain the ``{{PROMPT}}`` placeholder, since the
    message is appended to it automatically.
    """
    if prefix is None and prefix_file is None:
        raise PromptError(
            "Must specify either --message-prompt-prefix or --message-prompt-prefix-file"
        )
    if prefix is not None and prefix_file is not None:
        raise PromptError(
            "Cannot specify both --message-prompt-prefix and --message-prompt-prefix-file"
        )
    text = prefix if prefix is not None else read_prompt_file(prefix_file)
    if PLACEHOLDER in text:
        raise PromptError(_MESSAGE_PROMPT_PREFIX_ERROR)
    return text