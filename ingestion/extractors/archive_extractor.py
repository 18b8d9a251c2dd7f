"""
Archive extractor: unpack a staged .tar.gz into the working tree
"""

import tarfile
import zlib
from pathlib import Path
from typing import List
from core.exceptions import ExtractError
import logging

logger = logging.getLogger(__name__)


class ArchiveExtractor:
    """
    Extract a gzip-compressed tar archive.

    The archive is read in stream mode ("r|gz"): gzip decompression feeds
    the tar reader directly and members are unpacked in archive order,
    so the whole archive is never held in memory. Members go through the
    "data" extraction filter, which rejects absolute paths, parent-dir
    traversal and links that escape the target directory.
    """

    def extract(self, archive_path: Path, target_dir: Path) -> List[Path]:
        """
        Unpack archive_path under target_dir.

        Args:
            archive_path: Path to a .tar.gz file
            target_dir: Existing directory to unpack into

        Returns:
            Paths of the regular files that were extracted

        Raises:
            ExtractError: If the archive is missing, corrupt, or cannot be
                unpacked. Files extracted before the failure are left in
                place; the tree must not be consumed.
        """
        archive_path = Path(archive_path)
        target_dir = Path(target_dir)
        context = {"archive_path": archive_path, "target_dir": target_dir}

        if not archive_path.is_file():
            raise ExtractError("Archive not found", context=context)
        if not target_dir.is_dir():
            raise ExtractError("Extraction directory does not exist", context=context)

        logger.info(f"Extracting {archive_path} into {target_dir}")

        extracted: List[Path] = []
        try:
            with tarfile.open(archive_path, mode="r|gz") as tar:
                for member in tar:
                    tar.extract(member, path=target_dir, filter="data")
                    if member.isfile():
                        extracted.append(target_dir / member.name)

        except (tarfile.TarError, EOFError, zlib.error) as e:
            raise ExtractError(
                "Corrupt or unreadable archive",
                context=context,
                original_exception=e
            )

        except OSError as e:
            raise ExtractError(
                "Failed to unpack archive",
                context=context,
                original_exception=e
            )

        logger.info(f"Extracted {len(extracted)} files from {archive_path}")
        return extracted
