# ggmlfmt

A small, dependency-free library for reading and writing GGML-family model
containers: the unversioned GGML format, the versioned GGMF and GGJT formats,
and GGLA LoRA adapters.

The library knows nothing about particular model architectures. Loading and
saving are driven by handler objects: you decide how hyperparameters are
encoded and where tensor data comes from or goes to, and `ggmlfmt` takes care
of the magic number and version, the vocabulary section, the tensor headers
and the 32-byte alignment of tensor data used by GGJT and GGLA.

## Installation

```
pip install ggmlfmt
```

Python 3.10 or newer is required. There are no runtime dependencies.

## Loading a model

Subclass `ggmlfmt.loader.LoadHandler` and pass an instance to
`ggmlfmt.loader.load` together with a binary, seekable file object:

```python
from ggmlfmt.binio import read_u32
from ggmlfmt.loader import LoadHandler, PartialHyperparameters, load


class Collector(LoadHandler):
    def __init__(self):
        self.vocabulary = []
        self.tensors = {}

    def container_type(self, container_type):
        print("container:", container_type)

    def read_hyperparameters(self, reader):
        n_vocab = read_u32(reader)
        return PartialHyperparameters(n_vocab=n_vocab)

    def vocabulary_token(self, i, token, score):
        self.vocabulary.append((token, score))

    def tensor_buffer(self, info):
        self.tensors[info.name] = info


with open("model.bin", "rb") as f:
    handler = Collector()
    load(f, handler)
```

Supported containers are GGML, GGMF version 1, GGJT versions 1 to 3 and GGLA
version 1. Vocabulary scores are read for GGMF and GGJT; for GGML and GGLA
every score is reported as `0.0`.

Each tensor is reported as a `TensorLoadInfo` with its `name`, `n_dims`,
`dims`, `n_elements`, `element_type` and `start_offset`. `active_dims()` gives
the dimensions actually used, `calc_size()` the size of its data in bytes, and
`read_data(reader)` seeks to the data and reads it. `read_container_type`
reads just the magic number and version, and `data_size(element_type,
n_elements)` computes the byte size of tensor data.

Problems with the file are raised as `LoadError` or one of its subclasses
from `ggmlfmt.errors`: `InvalidMagicError`, `InvalidFormatVersionError`,
`UnsupportedElementTypeError` and `LoadInvariantBrokenError`. An exception
raised by your handler is wrapped in `LoadImplementationError`, with the
original as its cause. A stream that ends early raises `EOFError`.

## Saving a model

Subclass `ggmlfmt.saver.SaveHandler` and call `ggmlfmt.saver.save` with a
writable, seekable binary file, a `SaveContainerType` (`GGML` or `GGJT_V3`),
the vocabulary as `(token_bytes, score)` pairs and the names of the tensors to
write:

```python
from ggmlfmt.binio import write_u32
from ggmlfmt.saver import SaveContainerType, SaveHandler, save


class Exporter(SaveHandler):
    def __init__(self, n_vocab, tensors):
        self.n_vocab = n_vocab
        self.tensors = tensors  # name -> TensorSaveInfo

    def write_hyperparameters(self, writer):
        write_u32(writer, self.n_vocab)

    def tensor_data(self, tensor_name):
        return self.tensors[tensor_name]


with open("out.bin", "wb") as f:
    save(f, Exporter(len(vocab), tensors), SaveContainerType.GGJT_V3, vocab, list(tensors))
```

Each tensor is supplied as a `TensorSaveInfo` (`n_dims`, `dims`,
`element_type`, `data`). Plain GGML containers cannot store vocabulary
scores; saving a vocabulary with any non-zero score to one raises
`VocabularyScoringNotSupportedError`. Other problems are raised as
`SaveError`, `SaveInvariantBrokenError` or `SaveImplementationError`.

## Types and binary helpers

`ggmlfmt.types` holds `ElementType` (with `is_quantized()`),
`ContainerKind` and `ContainerType` (with `supports_mmap()` and
`write(writer)`), `RoPEOverrides`, `Backend` and `Accelerator`, the magic
number constants, and `type_size`, `blck_size` and `type_sizef` for the block
layout of each element type.

`ggmlfmt.binio` reads and writes little-endian `i32`, `u32`, `f32` and
`i32`-encoded booleans, reads exact byte counts with `read_bytes`, and checks
for remaining input with `has_data_left`.

## Prompt and option helpers

`ggmlfmt.prompts` provides `process_prompt`, which substitutes a prompt into
every `{{PROMPT}}` placeholder of a template, `read_prompt_file`, and
`message_prompt_prefix`, which takes exactly one of a prefix string or a
prefix file and rejects a prefix containing the placeholder. Invalid input
raises `PromptError`.

`ggmlfmt.options` adds `load_prompt` (combining an optional prompt file and
an optional prompt), `rope_overrides` (filling in defaults, or `None` if
nothing is given), `container_type_label` and `QuantizationTarget`, whose
`element_type()` gives the matching `ElementType`.

## Pre-commit checks

The package installs a command that runs `cargo check`, `cargo test --all`,
`cargo fmt --check --all`, `cargo doc --workspace --exclude llm-cli` (with
`RUSTDOCFLAGS=-Dwarnings`) and `cargo clippy --workspace -- -Dclippy::all`
in order, stopping with exit status 1 at the first one that fails:

```
ggmlfmt-precommit
```

## What this package does not do

`ggmlfmt` only handles the container layout. It does not run models, compute
tensors, quantize data or interpret any architecture's hyperparameters;
`QuantizationTarget` and the element-type size functions describe formats but
do not convert between them. There is no command for inference, chat or
quantization.