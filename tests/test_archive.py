"""Tests for archive extraction (no network)."""

from __future__ import annotations

import gzip
import io
import tarfile

import pytest

from autotypings.engines.registry.archive import filter_declarations, unpack
from autotypings.exceptions import ExtractionError, ResolutionError
from autotypings.models import ArchiveFile


class TestUnpack:
    def test_gzip_tarball(self, make_tgz):
        data = make_tgz(
            {
                "package/index.d.ts": "export declare const a: number;",
                "package/package.json": '{"name": "a"}',
            }
        )
        files = unpack(data)
        assert [f.path for f in files] == ["package/index.d.ts", "package/package.json"]
        assert files[0].text() == "export declare const a: number;"

    def test_zlib_header_accepted(self, make_tgz):
        files = unpack(make_tgz({"package/a.d.ts": "x"}, gzip_header=False))
        assert files == [ArchiveFile(path="package/a.d.ts", data=b"x")]

    def test_directories_and_symlinks_skipped(self):
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode="w") as tar:
            d = tarfile.TarInfo("package/lib")
            d.type = tarfile.DIRTYPE
            tar.addfile(d)
            link = tarfile.TarInfo("package/link.d.ts")
            link.type = tarfile.SYMTYPE
            link.linkname = "lib/real.d.ts"
            tar.addfile(link)
            body = b"declare const x: 1;"
            f = tarfile.TarInfo("package/lib/real.d.ts")
            f.size = len(body)
            tar.addfile(f, io.BytesIO(body))
        files = unpack(gzip.compress(buf.getvalue()))
        assert [f.path for f in files] == ["package/lib/real.d.ts"]

    def test_empty_input_raises(self):
        with pytest.raises(ExtractionError, match="empty"):
            unpack(b"")

    def test_corrupt_stream_raises(self):
        with pytest.raises(ExtractionError, match="extraction failed") as exc_info:
            unpack(b"definitely not gzip")
        assert exc_info.value.__cause__ is not None

    def test_valid_gzip_invalid_tar_raises(self):
        with pytest.raises(ExtractionError):
            unpack(gzip.compress(b"not a tar archive at all" * 10))

    def test_extraction_error_is_resolution_error(self):
        with pytest.raises(ResolutionError):
            unpack(b"")

    def test_invalid_utf8_decoded_with_replacement(self, make_tgz):
        files = unpack(make_tgz({"package/a.d.ts": b"ok \xff"}))
        assert files[0].text() == "ok \ufffd"


class TestFilterDeclarations:
    def test_keeps_only_declaration_files(self):
        files = [
            ArchiveFile("package/index.d.ts", b""),
            ArchiveFile("package/index.js", b""),
            ArchiveFile("package/types.ts", b""),
            ArchiveFile("package/sub/x.d.ts", b""),
        ]
        assert [f.path for f in filter_declarations(files)] == [
            "package/index.d.ts",
            "package/sub/x.d.ts",
        ]
