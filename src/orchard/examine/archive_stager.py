"""Per-run staging of uploaded diagnostic bundles.

Every analysis gets its own uniquely named directory below the configured
staging root. The archive is written there, extracted into ``extracted/``,
and the whole directory is removed when the ``with`` block exits, whatever
the outcome.
"""

from __future__ import annotations

import re
import shutil
import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from orchard.examine.errors import ExtractionError
from orchard.util.logger import get_logger

logger = get_logger("archive_stager")

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_bundle_name(bundle_name: str) -> str:
    """Return a file-system safe version of an uploaded file name."""
    name = _UNSAFE_NAME_CHARS.sub("_", Path(bundle_name).name).strip("._")
    return name or "bundle.zip"


def extract_bundle(archive_path: Path, destination: Path) -> Path:
    """Extract ``archive_path`` into ``destination``.

    Raises
    ------
    ExtractionError
        If the archive is corrupt or the destination cannot be written.
    """
    try:
        destination.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path) as archive:
            # zipfile.extractall strips absolute paths and ".." components
            archive.extractall(destination)
    except zipfile.BadZipFile as exc:
        raise ExtractionError(f"The file is not a valid ZIP archive ({exc})") from exc
    except (OSError, RuntimeError, ValueError) as exc:
        raise ExtractionError(f"Could not extract the archive: {exc}") from exc
    return destination


@contextmanager
def staged_bundle(bundle_bytes: bytes, bundle_name: str, staging_root: Path) -> Iterator[Path]:
    """Write and extract a bundle in an isolated directory, yielding the extraction root.

    Parameters
    ----------
    bundle_bytes:
        Raw archive content.
    bundle_name:
        Name of the uploaded file, used for the on-disk archive name.
    staging_root:
        Parent directory for run directories; created if missing.

    Raises
    ------
    ExtractionError
        If the staging directory cannot be created or the archive is unusable.
    """
    try:
        staging_root.mkdir(parents=True, exist_ok=True)
        run_dir = Path(tempfile.mkdtemp(prefix="examine-", dir=staging_root))
    except OSError as exc:
        raise ExtractionError(f"Could not create staging directory: {exc}") from exc

    try:
        archive_path = run_dir / safe_bundle_name(bundle_name)
        try:
            archive_path.write_bytes(bundle_bytes)
        except OSError as exc:
            raise ExtractionError(f"Could not write the archive to disk: {exc}") from exc
        logger.debug("[STAGING] Saved %s (%d bytes) to %s", bundle_name, len(bundle_bytes), archive_path)

        extract_path = extract_bundle(archive_path, run_dir / "extracted")
        logger.info("[STAGING] Extracted %s to %s", bundle_name, extract_path)
        yield extract_path
    finally:
        shutil.rmtree(run_dir, ignore_errors=True)
        logger.debug("[STAGING] Removed %s", run_dir)
