"""Distribution archive extraction — gzip/DEFLATE stream + tar walk."""

from __future__ import annotations

import io
import tarfile
import zlib

from autotypings.exceptions import ExtractionError
from autotypings.models import DECLARATION_SUFFIX, ArchiveFile

# 32 + MAX_WBITS: accept both gzip and zlib headers
_AUTO_HEADER_WBITS = 32 + zlib.MAX_WBITS


def unpack(compressed: bytes) -> list[ArchiveFile]:
    """Decompress and untar *compressed* into a list of regular files.

    Raises :class:`ExtractionError` for empty input or a corrupt stream.
    """
    if not compressed:
        raise ExtractionError("extraction failed: response content is empty")

    try:
        raw = zlib.decompress(compressed, _AUTO_HEADER_WBITS)
        files: list[ArchiveFile] = []
        with tarfile.open(fileobj=io.BytesIO(raw), mode="r:") as tar:
            for member in tar:
                if not member.isfile():
                    continue
                handle = tar.extractfile(member)
                if handle is None:
                    continue
                files.append(ArchiveFile(path=member.name, data=handle.read()))
    except (zlib.error, tarfile.TarError, EOFError) as exc:
        raise ExtractionError(f"extraction failed: {exc}") from exc

    return files


def filter_declarations(files: list[ArchiveFile]) -> list[ArchiveFile]:
    return [f for f in files if f.path.endswith(DECLARATION_SUFFIX)]
