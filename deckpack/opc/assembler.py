"""Stage rendered parts on disk and compress them into the package archive."""

from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional
from zipfile import ZIP_DEFLATED, ZIP_STORED, ZipFile, ZipInfo

from ..errors import PackagingIOError
from ..models.package import PartDescriptor
from .constants import CONTENT_TYPES_PART

# Fixed entry timestamp keeps archives byte-identical across runs.
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)

SLIDE_SIZE_ESTIMATE = 50_000
# 20% headroom, as (numerator, denominator)
SIZE_BUFFER = (6, 5)


@dataclass(frozen=True)
class StagedPart:
    descriptor: PartDescriptor
    data: bytes


def estimate_export_size(slide_count: int, image_bytes: int = 0) -> int:
    """Rough upper bound on staging + archive bytes for a deck."""
    numerator, denominator = SIZE_BUFFER
    return (slide_count * SLIDE_SIZE_ESTIMATE + image_bytes) * numerator // denominator


class PackageAssembler:
    def __init__(self, staging_root: Optional[Path] = None, compression: str = "deflated") -> None:
        self.staging_root = staging_root
        self.compression = ZIP_STORED if compression == "stored" else ZIP_DEFLATED

    @contextmanager
    def staging(self) -> Iterator[Path]:
        """Yield a fresh staging directory and always remove it afterwards."""
        try:
            if self.staging_root is not None:
                self.staging_root.mkdir(parents=True, exist_ok=True)
            root_dir = Path(
                tempfile.mkdtemp(
                    prefix="deckpack-",
                    dir=str(self.staging_root) if self.staging_root else None,
                )
            )
        except OSError as exc:
            raise PackagingIOError(
                f"cannot create staging directory: {exc.strerror or exc}",
                str(self.staging_root) if self.staging_root else None,
            ) from exc
        try:
            yield root_dir
        finally:
            self.cleanup(root_dir)

    def check_free_space(self, directory: Path, needed: int) -> None:
        try:
            free = shutil.disk_usage(str(directory)).free
        except OSError as exc:
            raise PackagingIOError(f"cannot read free space: {exc}", str(directory)) from exc
        if free < needed:
            raise PackagingIOError(
                f"insufficient disk space: {needed} bytes needed, {free} available",
                str(directory),
            )

    def stage(self, root_dir: Path, parts: Iterable[StagedPart]) -> List[Path]:
        written: List[Path] = []
        for part in parts:
            destination = root_dir / part.descriptor.member_name
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                self._write_part(destination, part.data)
            except OSError as exc:
                raise PackagingIOError(
                    f"{exc.strerror or exc} while writing {part.descriptor.path}",
                    str(destination),
                ) from exc
            written.append(destination)
        return written

    def _write_part(self, destination: Path, data: bytes) -> None:
        with open(destination, "wb") as handle:
            handle.write(data)

    def archive(self, root_dir: Path, output_path: Path) -> None:
        """Zip the contents of ``root_dir`` so its files sit at the archive root.

        The archive is built beside ``output_path`` and moved into place only
        once complete, so a failure never leaves a partial file there.
        """
        members = self._member_order(root_dir)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".deckpack-", suffix=".tmp", dir=str(output_path.parent)
            )
            os.close(fd)
        except OSError as exc:
            raise PackagingIOError(
                f"cannot write archive: {exc.strerror or exc}", str(output_path)
            ) from exc

        tmp_path = Path(tmp_name)
        try:
            with ZipFile(tmp_path, "w") as zf:
                for member in members:
                    info = ZipInfo(member, date_time=ZIP_EPOCH)
                    info.compress_type = self.compression
                    info.external_attr = 0o644 << 16
                    zf.writestr(info, (root_dir / member).read_bytes())
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, output_path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise PackagingIOError(
                f"cannot write archive: {exc.strerror or exc}", str(output_path)
            ) from exc

    def cleanup(self, root_dir: Path) -> None:
        shutil.rmtree(root_dir, ignore_errors=True)

    def _member_order(self, root_dir: Path) -> List[str]:
        names = sorted(
            path.relative_to(root_dir).as_posix()
            for path in root_dir.rglob("*")
            if path.is_file()
        )
        manifest = CONTENT_TYPES_PART.lstrip("/")
        if manifest in names:
            names.remove(manifest)
            names.insert(0, manifest)
        return names
