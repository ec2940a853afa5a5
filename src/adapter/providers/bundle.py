"""
Packing of a generated application instance for upload to a hosting
provider, either as inline base64 files or as a zip archive.
"""

import base64
import io
import zipfile
from pathlib import Path
from typing import Dict, List

# Rebuilt by the host; never uploaded
EXCLUDED_DIRS = frozenset({"node_modules", ".git", ".next"})


def instance_files(app_path: Path) -> List[Path]:
    """Paths relative to `app_path` of every file to upload, in a stable order"""
    files = [
        path.relative_to(app_path)
        for path in sorted(app_path.rglob("*"))
        if path.is_file()
    ]
    files = [path for path in files if not EXCLUDED_DIRS.intersection(path.parts[:-1])]
    if not files:
        raise FileNotFoundError(f"No application files found in {app_path}")
    return files


def inline_files(app_path: Path) -> List[Dict[str, str]]:
    return [
        {
            "file": path.as_posix(),
            "data": base64.b64encode((app_path / path).read_bytes()).decode("ascii"),
            "encoding": "base64",
        }
        for path in instance_files(app_path)
    ]


def zip_archive(app_path: Path) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for path in instance_files(app_path):
            archive.write(app_path / path, path.as_posix())
    return buffer.getvalue()
