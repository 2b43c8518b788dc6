"""
Output helpers: JSON encoding of the final document, writing it to disk and
estimating how many prompt tokens the generated tool definitions occupy.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any
import tiktoken

FALLBACK_ENCODING = "cl100k_base"


def encode_document(
    document: Any,
    pretty_print: bool = False,
    indent: int = 2,
    sort_keys: bool = True,
) -> str:
    """
    Serialize the output document to JSON text.

    Parameters
    ----------
    document : list or dict
        The formatted output document.
    pretty_print : bool, default=False
        Indent nested structures when True; compact separators otherwise.
    indent : int, default=2
        Indentation width used with ``pretty_print``.
    sort_keys : bool, default=True
        Sort object keys so repeated runs give byte-identical output.

    Returns
    -------
    str
        JSON text terminated by a newline.
    """
    if pretty_print:
        text = json.dumps(document, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
    else:
        text = json.dumps(
            document, separators=(",", ":"), sort_keys=sort_keys, ensure_ascii=False
        )
    return text + "\n"


def write_output_file(output_path: Path, content: str) -> Path:
    """
    Write ``content`` to ``output_path``, creating parent directories.

    Returns
    -------
    pathlib.Path
        The path written.
    """
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as f:
            f.write(content)
        return output_path
    except OSError as e:
        raise IOError(f"Failed to write file {output_path}: {e}") from e


def estimate_tokens(document: Any, model: str) -> int:
    """
    Count the tokens the document adds to a prompt.

    Tool definitions are sent as part of the prompt, so their encoded
    size is what a request pays for them.

    Parameters
    ----------
    document : list or dict
        The formatted output document.
    model : str
        Model identifier used to select the tokenizer.

    Returns
    -------
    int
        Token count of the compact JSON encoding.
    """
    try:
        encoding = tiktoken.encoding_for_model(model)
    except KeyError:
        # Unknown model name, use a generic encoding.
        encoding = tiktoken.get_encoding(FALLBACK_ENCODING)

    text = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    return len(encoding.encode(text))


__all__: list[str] = ["encode_document", "write_output_file", "estimate_tokens"]
