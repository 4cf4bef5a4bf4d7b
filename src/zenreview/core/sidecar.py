"""Sidecar file I/O - YAML storage for review state"""

import hashlib
from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from zenreview.models.review import ReviewState


class SidecarError(ValueError):
    """Raised when a sidecar file cannot be read back"""

    pass


def get_sidecar_path(source_file: Path) -> Path:
    """Get the sidecar file path for a source file"""
    return source_file.with_suffix(source_file.suffix + ".zen.yaml")


def compute_file_hash(file_path: Path) -> str:
    """Compute SHA256 hash of file contents"""
    return hashlib.sha256(file_path.read_bytes()).hexdigest()[:16]


def load_review(source_file: Path) -> Optional[ReviewState]:
    """Load review state from sidecar file, or None if doesn't exist"""
    sidecar_path = get_sidecar_path(source_file)
    if not sidecar_path.exists():
        return None

    try:
        with open(sidecar_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return ReviewState.model_validate(data)
    except (yaml.YAMLError, ValidationError) as e:
        raise SidecarError(f"Invalid sidecar file: {e}")


def save_review(source_file: Path, state: ReviewState) -> Path:
    """Save review state to sidecar file"""
    sidecar_path = get_sidecar_path(source_file)
    state = state.model_copy(update={"modified_at": datetime.now()})

    # Convert to dict with datetime and enum serialization
    data = state.model_dump(mode="json")

    with open(sidecar_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    return sidecar_path


def check_source_changed(source_file: Path, state: ReviewState) -> bool:
    """Check if source file has changed since the review was created"""
    return compute_file_hash(source_file) != state.source_hash


def get_raw_output_path(source_file: Path) -> Path:
    """Path where the raw model output for a source file is kept"""
    return source_file.with_suffix(source_file.suffix + ".zen.raw.txt")


def save_raw_output(source_file: Path, raw: str) -> Path:
    """Keep the raw model output so the review can be rebuilt later"""
    raw_path = get_raw_output_path(source_file)
    raw_path.write_text(raw, encoding="utf-8")
    return raw_path
