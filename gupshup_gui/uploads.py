"""Local storage of uploaded and copied files."""

from __future__ import annotations

import os
import re
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO

DEFAULT_UPLOAD_DIR = Path("internal", "app", "tmp")

_SEPARATORS = re.compile(r"[\\/]")


class UploadError(Exception):
    """A file could not be stored, copied or removed."""


def _split_ext(name: str) -> tuple[str, str]:
    """Split off the extension: everything from the last dot of the final path element."""
    last = _SEPARATORS.split(name)[-1]
    dot = last.rfind(".")
    if dot < 0:
        return name, ""
    ext = last[dot:]
    return name[: len(name) - len(ext)], ext


def unique_name(filename: str) -> str:
    """``name.ext`` becomes ``name_<uuid4>.ext``; directories are dropped."""
    stem, ext = _split_ext(filename)
    base = _SEPARATORS.split(stem)[-1]
    return f"{base}_{uuid.uuid4()}{ext}"


def _store(source: BinaryIO, name: str, directory: str | os.PathLike[str]) -> str:
    target_dir = Path(directory)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise UploadError(f"erro ao criar diretório tmp: {exc}") from exc

    destination = target_dir / unique_name(name)
    try:
        target = destination.open("wb")
    except OSError as exc:
        raise UploadError(f"erro ao criar arquivo no destino: {exc}") from exc
    with target:
        try:
            shutil.copyfileobj(source, target)
        except OSError as exc:
            raise UploadError(f"erro ao copiar conteúdo do arquivo: {exc}") from exc
    return str(destination)


def save_uploaded_file(
    filename: str,
    stream: BinaryIO,
    directory: str | os.PathLike[str] = DEFAULT_UPLOAD_DIR,
) -> str:
    """Write ``stream`` under a unique name in ``directory`` and return its path."""
    return _store(stream, filename, directory)


def copy_local_file_to_tmp(
    original_path: str | os.PathLike[str],
    directory: str | os.PathLike[str] = DEFAULT_UPLOAD_DIR,
) -> str:
    """Copy a local file under a unique name into ``directory`` and return the new path."""
    try:
        source = open(original_path, "rb")
    except OSError as exc:
        raise UploadError(f"erro ao abrir arquivo original: {exc}") from exc
    with source:
        return _store(source, os.fspath(original_path), directory)


def remove_file(file_path: str | os.PathLike[str]) -> None:
    """Delete ``file_path``."""
    try:
        os.remove(file_path)
    except OSError as exc:
        raise UploadError(f"erro ao remover arquivo: {exc}") from exc