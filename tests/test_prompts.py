import pytest

from ggmlfmt.prompts import (
    PromptError,
    message_prompt_prefix,
    process_prompt,
    read_prompt_file,
)


def test_process_prompt_replaces_placeholder():
    assert process_prompt("Q: {{PROMPT}}\nA:", "why?") == "Q: why?\nA:"


def test_process_prompt_replaces_every_occurrence():
    result = process_prompt("{{PROMPT}} and {{PROMPT}}", "x")
    assert result == "x and x"
    assert "{{PROMPT}}" not in result


def test_process_prompt_without_placeholder_is_unchanged():
    assert process_prompt("no placeholder", "ignored") == "no placeholder"


def test_read_prompt_file_round_trip(tmp_path):
    path = tmp_path / "prompt.txt"
    path.write_text("hello {{PROMPT}}\n", encoding="utf-8")
    assert read_prompt_file(path) == "hello {{PROMPT}}\n"
    assert read_prompt_file(str(path)) == "hello {{PROMPT}}\n"


def test_read_prompt_file_missing(tmp_path):
    path = tmp_path / "missing.txt"
    with pytest.raises(PromptError) as info:
        read_prompt_file(path)
    assert "Could not read prompt file at" in str(info.value)
    assert isinstance(info.value.__cause__, OSError)


def test_message_prompt_prefix_requires_one():
    with pytest.raises(PromptError) as info:
        message_prompt_prefix(None, None)
    assert str(info.value) == (
        "Must specify either --message-prompt-prefix or --message-prompt-prefix-file"
    )


def test_message_prompt_prefix_rejects_both(tmp_path):
    path = tmp_path / "prefix.txt"
    path.write_text("User: ", encoding="utf-8")
    with pytest.raises(PromptError) as info:
        message_prompt_prefix("User: ", path)
    assert str(info.value) == (
        "Cannot specify both --message-prompt-prefix and --message-prompt-prefix-file"
    )


def test_message_prompt_prefix_from_string():
    assert message_prompt_prefix("User: ", None) == "User: "


def test_message_prompt_prefix_string_with_placeholder():
    with pytest.raises(PromptError) as info:
        message_prompt_prefix("User: {{PROMPT}}", None)
    assert "must not contain a `{{PROMPT}}` placeholder" in str(info.value)


def test_message_prompt_prefix_from_file(tmp_path):
    path = tmp_path / "prefix.txt"
    path.write_text("### Human: ", encoding="utf-8")
    assert message_prompt_prefix(None, path) == "### Human: "


def test_message_prompt_prefix_file_with_placeholder(tmp_path):
    path = tmp_path / "prefix.txt"
    path.write_text("### Human: {{PROMPT}}", encoding="utf-8")
    with pytest.raises(PromptError) as info:
        message_prompt_prefix(None, path)
    assert "must not contain a `{{PROMPT}}` placeholder" in str(info.value)


def test_message_prompt_prefix_missing_file(tmp_path):
    with pytest.raises(PromptError) as info:
        message_prompt_prefix(None, tmp_path / "nope.txt")
    assert "Could not read prompt file at" in str(info.value)