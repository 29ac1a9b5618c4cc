import io
import zipfile
from pathlib import Path

import pytest

MANIFEST_NAME = "META-INF/MANIFEST.MF"

LOCAL_MANIFEST = (
    "Manifest-Version: 1.0\r\n"
    "Bundle-SymbolicName: com.acme.core;singleton:=true\r\n"
    "Bundle-Version: 1.2.0\r\n"
    "Export-Package: com.acme.core;version=\"1.2.0\",com.acme.core.spi;version\r\n"
    " =\"1.2.0\"\r\n"
    "Import-Package: org.slf4j;version=\"[1.7,2)\"\r\n"
    "Bnd-LastModified: 1700000000000\r\n"
    "\r\n"
    "Name: com/acme/core/Api.class\r\n"
    "SHA-256-Digest: abc\r\n"
)

BASELINE_MANIFEST = (
    "Manifest-Version: 1.0\r\n"
    "Bundle-SymbolicName: com.acme.core;singleton:=true\r\n"
    "Bundle-Version: 1.1.0\r\n"
    "Export-Package: com.acme.core.spi;version=\"1.2.0\",com.acme.core;version=\"1.1.0\"\r\n"
    "Import-Package: org.slf4j;version=\"[1.7,2)\"\r\n"
    "Bnd-LastModified: 1600000000000\r\n"
    "Require-Capability: osgi.ee;filter:=\"(osgi.ee=JavaSE)\"\r\n"
    "\r\n"
)


@pytest.fixture
def manifest_dir(tmp_path: Path):
    """Factory: directory holding META-INF/MANIFEST.MF with the given text."""
    def _make(text: str, name: str = "bundle") -> Path:
        root = tmp_path / name
        manifest = root / MANIFEST_NAME
        manifest.parent.mkdir(parents=True)
        manifest.write_bytes(text.encode("utf-8"))
        return root
    return _make


@pytest.fixture
def jar_bytes():
    """Factory: in-memory jar archive bytes, optionally with a manifest entry."""
    def _make(text=None) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            if text is not None:
                archive.writestr(MANIFEST_NAME, text)
            archive.writestr("com/acme/core/Api.class", b"\xca\xfe\xba\xbe")
        return buffer.getvalue()
    return _make


@pytest.fixture
def jar_file(tmp_path: Path, jar_bytes):
    """Factory: jar archive on disk."""
    def _make(text=None, name: str = "bundle.jar") -> Path:
        path = tmp_path / name
        path.write_bytes(jar_bytes(text))
        return path
    return _make


@pytest.fixture
def local_manifest_text() -> str:
    return LOCAL_MANIFEST


@pytest.fixture
def baseline_manifest_text() -> str:
    return BASELINE_MANIFEST
