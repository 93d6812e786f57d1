"""Reading and writing of GGML-family model container files, with prompt and option helpers."""

__version__ = "0.1.0"

__all__ = ["binio", "types", "errors", "loader", "saver", "prompts", "precommit", "options"]