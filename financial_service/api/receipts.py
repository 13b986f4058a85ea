"""
Receipt upload handling
"""

from pathlib import Path
from typing import Optional
import shutil
import uuid

from fastapi import UploadFile


def store_receipt(upload: UploadFile, directory: str) -> str:
    """Write an uploaded receipt under a generated name and return its path"""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(upload.filename or "").suffix
    target = target_dir / f"{uuid.uuid4().hex}{suffix}"
    with target.open("wb") as out:
        shutil.copyfileobj(upload.file, out)
    return str(target)


def discard_receipt(receipt_path: str) -> None:
    """Remove a stored receipt whose transference was refused"""
    Path(receipt_path).unlink(missing_ok=True)


def resolve_receipt(filename: str, directory: str) -> Optional[Path]:
    """Path of a stored receipt by its generated name, None if there is no such file"""
    if not filename or Path(filename).name != filename:
        return None
    target = Path(directory) / filename
    if not target.is_file():
        return None
    return target
