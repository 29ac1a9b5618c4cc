import httpx
import pytest

from config import Settings
from core.exceptions import DescriptorLoadError, DescriptorNotFoundError
from services.loader import DescriptorLoader, LoadedDescriptor, load_main_section

JAR_URL = "https://repo.acme.com/releases/com.acme.core-1.1.0.jar"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestLocalStrategies:

    def test_manifest_file(self, manifest_dir, local_manifest_text):
        root = manifest_dir(local_manifest_text)
        loaded = DescriptorLoader().load(str(root / "META-INF" / "MANIFEST.MF"))
        assert isinstance(loaded, LoadedDescriptor)
        assert loaded.source.startswith("file '")
        assert loaded.headers["Bundle-Version"] == "1.2.0"

    def test_directory(self, manifest_dir, local_manifest_text):
        root = manifest_dir(local_manifest_text)
        headers = DescriptorLoader().load_main_section(str(root))
        assert headers["Bundle-SymbolicName"] == "com.acme.core;singleton:=true"

    def test_jar(self, jar_file, baseline_manifest_text):
        path = jar_file(baseline_manifest_text)
        loaded = DescriptorLoader().load(str(path))
        assert loaded.source == f"jar '{path}'"
        assert loaded.headers["Bundle-Version"] == "1.1.0"

    def test_module_level_function(self, jar_file, baseline_manifest_text):
        path = jar_file(baseline_manifest_text)
        assert load_main_section(str(path))["Manifest-Version"] == "1.0"

    def test_other_file_named_like_manifest_is_not_a_descriptor(self, tmp_path):
        path = tmp_path / "MANIFEST.MF"
        path.write_text("A: 1\n")
        with pytest.raises(DescriptorNotFoundError):
            DescriptorLoader().load(str(path))

    def test_directory_without_manifest(self, tmp_path):
        with pytest.raises(DescriptorNotFoundError) as info:
            DescriptorLoader().load(str(tmp_path))
        assert info.value.locator == str(tmp_path)

    def test_jar_without_manifest(self, jar_file):
        with pytest.raises(DescriptorNotFoundError):
            DescriptorLoader().load(str(jar_file(None)))

    def test_missing_path(self, tmp_path):
        with pytest.raises(DescriptorNotFoundError):
            DescriptorLoader().load(str(tmp_path / "nope.jar"))

    def test_corrupt_jar(self, tmp_path):
        path = tmp_path / "broken.jar"
        path.write_bytes(b"not a zip archive")
        with pytest.raises(DescriptorLoadError) as info:
            DescriptorLoader().load(str(path))
        assert info.value.source == f"jar '{path}'"

    def test_malformed_manifest_text(self, manifest_dir):
        root = manifest_dir("A: 1\nnot a header\n")
        with pytest.raises(DescriptorLoadError, match="line 2"):
            DescriptorLoader().load(str(root))

    def test_custom_archive_suffix(self, jar_file, local_manifest_text):
        path = jar_file(local_manifest_text, name="bundle.zip")
        with pytest.raises(DescriptorNotFoundError):
            DescriptorLoader().load(str(path))
        loader = DescriptorLoader(settings=Settings(ARCHIVE_SUFFIXES=[".jar", ".zip"]))
        assert loader.load_main_section(str(path))["Bundle-Version"] == "1.2.0"


class TestUrlStrategy:

    def test_downloads_jar(self, jar_bytes, baseline_manifest_text):
        requested = []

        def handler(request):
            requested.append(str(request.url))
            return httpx.Response(200, content=jar_bytes(baseline_manifest_text))

        loader = DescriptorLoader(client=_client(handler))
        loaded = loader.load(JAR_URL)
        assert requested == [JAR_URL]
        assert loaded.source == f"jar '{JAR_URL}'"
        assert loaded.headers["Bundle-Version"] == "1.1.0"

    def test_http_error(self):
        loader = DescriptorLoader(client=_client(lambda request: httpx.Response(404)))
        with pytest.raises(DescriptorLoadError) as info:
            loader.load(JAR_URL)
        assert isinstance(info.value.__cause__, httpx.HTTPStatusError)

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        loader = DescriptorLoader(client=_client(handler))
        with pytest.raises(DescriptorLoadError, match="connection refused"):
            loader.load(JAR_URL)

    def test_downloaded_jar_without_manifest(self, jar_bytes):
        loader = DescriptorLoader(client=_client(lambda request: httpx.Response(200, content=jar_bytes(None))))
        with pytest.raises(DescriptorNotFoundError):
            loader.load(JAR_URL)

    def test_downloaded_content_is_not_a_jar(self):
        loader = DescriptorLoader(client=_client(lambda request: httpx.Response(200, content=b"<html>")))
        with pytest.raises(DescriptorLoadError):
            loader.load(JAR_URL)

    @pytest.mark.parametrize("locator", [
        "https://repo.acme.com/releases/index.html",
        "ftp://repo.acme.com/releases/com.acme.core-1.1.0.jar",
    ])
    def test_unsupported_urls_are_not_fetched(self, locator):
        def handler(request):
            raise AssertionError("no request expected")

        loader = DescriptorLoader(client=_client(handler))
        with pytest.raises(DescriptorNotFoundError):
            loader.load(locator)
