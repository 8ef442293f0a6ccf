"""
File system utilities: text, YAML, JSON and CSV files. Every write goes
through a temporary file in the target directory that then replaces the
target, so a crash never leaves a truncated file behind.
"""

import csv
import json
import tempfile
from datetime import datetime, timezone
from hashlib import sha256
from pathlib import Path
from typing import Any
import yaml


def to_path(path: str | Path) -> Path:
    return path if isinstance(path, Path) else Path(path)


def ensure_dir(directory: str | Path) -> Path:
    """
    Create a directory (and its parents) if missing and return it.
    """
    directory_path = to_path(directory)
    directory_path.mkdir(parents=True, exist_ok=True)
    return directory_path


def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def read_text(path: str | Path) -> str:
    return to_path(path).read_text(encoding="utf-8")


def write_text(path: str | Path, text: str) -> None:
    """
    Write a str to a text file, creating the parent directory if needed.
    """
    path_ = to_path(path)
    ensure_dir(path_.parent)
    _atomic_write_bytes(path_, text.encode("utf-8"))


def read_yaml(path: str | Path) -> dict:
    """
    Read a YAML file and return its contents as a dict (empty for an empty
    file).
    """
    path_ = to_path(path)
    with path_.open("r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML at {path_}: {e}") from e


def read_json(path: str | Path) -> Any:
    with to_path(path).open("r", encoding="utf-8") as file:
        return json.load(file)


def write_json(path: str | Path, data: Any, *, indent: int = 2) -> None:
    path_ = to_path(path)
    ensure_dir(path_.parent)
    payload = json.dumps(data, ensure_ascii=False, indent=indent)
    _atomic_write_bytes(path_, payload.encode("utf-8"))


def write_csv_rows(
    path: str | Path,
    rows: list[dict[str, Any]],
    fieldnames: list[str] | None = None,
) -> None:
    """
    Write a list of dicts to a CSV file. Without explicit field names, the
    keys of the first row are used as header.
    """
    path_ = to_path(path)
    ensure_dir(path_.parent)
    if not rows and not fieldnames:
        raise ValueError("rows is empty and fieldnames not provided")
    fns = fieldnames or list(rows[0].keys())
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            delete=False,
            dir=str(path_.parent)) as tmp:
            tmp_path = Path(tmp.name)
            writer = csv.DictWriter(tmp, fieldnames=fns)
            writer.writeheader()
            for r in rows:
                writer.writerow({k: r.get(k) for k in fns})
    except Exception:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise
    tmp_path.replace(path_)


def file_sha256(path: str | Path, chunk_size: int = 1 << 20) -> str:
    """
    SHA-256 hex digest of a file, read in chunks.
    """
    digest = sha256()
    with to_path(path).open("rb") as file:
        while chunk := file.read(chunk_size):
            digest.update(chunk)
    return digest.hexdigest()


def make_run_id(
    instance: str,
    seed: int | str | None = None,
    params: dict[str, Any] | None = None,
) -> str:
    """
    Build a run ID of the form <instance>[__seed<seed>]__<key><value>__...,
    with parameters sorted by key. Used to name solution and metrics folders.
    """
    base = _normalize_str(instance)
    if seed is not None:
        base += f"__seed{seed}"
    if not params:
        return base
    kv = [f"{_normalize_str(k)}{_format_value(params[k])}" for k in sorted(params)]
    return base + "__" + "__".join(kv)


def write_manifest(path: str | Path, meta: dict[str, Any]) -> None:
    """
    Write a JSON manifest stamped with the current UTC time.
    """
    write_json(path, {"created_at_utc": now_utc_iso(), **meta})


def _atomic_write_bytes(path: Path, content: bytes) -> None:
    with tempfile.NamedTemporaryFile(
        "wb", delete=False, dir=str(path.parent)
    ) as tmp:
        tmp.write(content)
        tmp_path = Path(tmp.name)
    tmp_path.replace(path)


def _normalize_str(s: Any) -> str:
    out = []
    for ch in str(s):
        if ch.isalnum():
            out.append(ch.lower())
        elif ch in ("-", "_"):
            out.append(ch)
        elif ch.isspace() or ch == ".":
            out.append("_")
    return "".join(out).strip("_") or "x"


def _format_value(v: Any) -> str:
    if isinstance(v, bool):
        return "1" if v else "0"
    if isinstance(v, float):
        return f"{v:.6g}"
    return str(v)
