"""Reading values files and turning JSON or YAML values into CUE source."""

from __future__ import annotations

import datetime
import json
import math
import re
import sys
from collections.abc import Iterable, Mapping
from typing import IO, Any

import yaml

_IDENTIFIER = re.compile(r"[A-Za-z$][A-Za-z0-9_$]*\Z")
_RESERVED = frozenset(
    {"if", "for", "in", "let", "true", "false", "null", "import", "package", "func"}
)


class ValuesFileError(ValueError):
    """A values file could not be read or converted to CUE."""


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _label(key: Any) -> str:
    if isinstance(key, bool):
        key = "true" if key else "false"
    elif key is None:
        key = "null"
    else:
        key = str(key)
    if _IDENTIFIER.match(key) and key not in _RESERVED:
        return key
    return _quote(key)


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (Mapping, list, tuple))


def _fields(mapping: Mapping, depth: int) -> list[str]:
    pad = "\t" * depth
    return [f"{pad}{_label(key)}: {_value(val, depth)}" for key, val in mapping.items()]


def _value(value: Any, depth: int) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TypeError(f"cannot represent {value!r} in CUE")
        return repr(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        return _quote(value.isoformat())
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        inner = "\n".join(_fields(value, depth + 1))
        return "{\n" + inner + "\n" + "\t" * depth + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        if all(_is_scalar(item) for item in value):
            return "[" + ", ".join(_value(item, depth) for item in value) + "]"
        pad = "\t" * (depth + 1)
        items = "".join(f"{pad}{_value(item, depth + 1)},\n" for item in value)
        return "[\n" + items + "\t" * depth + "]"
    raise TypeError(f"cannot represent value of type {type(value).__name__} in CUE")


def to_cue(data: Any) -> str:
    """Render plain data (as loaded from JSON or YAML) as CUE source text.

    A top-level mapping becomes a list of fields; any other value is
    written as a single expression. Raises TypeError for values CUE
    cannot hold.
    """
    if isinstance(data, Mapping):
        return "".join(line + "\n" for line in _fields(data, 0))
    return _value(data, 0) + "\n"


def _extension(path: str) -> str:
    name = re.split(r"[\\/]", path)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def _read_stream(stream: IO) -> bytes:
    data = stream.read()
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def convert_to_cue(paths: Iterable[str], stdin: IO | None = None) -> list[bytes]:
    """Read values files and return their contents as CUE, in the given order.

    The path '-' reads CUE from ``stdin``. Files ending in .cue are returned
    as they are; .json, .yaml and .yml files are converted to CUE.
    """
    results: list[bytes] = []
    for path in paths:
        try:
            if path == "-":
                ext = ".cue"
                raw = _read_stream(stdin if stdin is not None else sys.stdin.buffer)
            else:
                ext = _extension(path)
                with open(path, "rb") as handle:
                    raw = handle.read()
        except OSError as err:
            raise ValuesFileError(f"could not read values file at {path}: {err}") from err

        if ext == ".cue":
            results.append(raw)
            continue
        if ext == ".json":
            try:
                data = json.loads(raw.decode("utf-8"))
            except (ValueError, UnicodeDecodeError) as err:
                raise ValuesFileError(f"could not extract JSON from {path}: {err}") from err
        elif ext in (".yaml", ".yml"):
            try:
                data = yaml.safe_load(raw)
            except yaml.YAMLError as err:
                raise ValuesFileError(f"could not extract YAML from {path}: {err}") from err
        else:
            raise ValuesFileError(f"unknown values file format for {path}")

        try:
            results.append(to_cue(data).encode("utf-8"))
        except TypeError as err:
            raise ValuesFileError(
                f"could not serialise value from file at {path} to cue: {err}"
            ) from err
    return results