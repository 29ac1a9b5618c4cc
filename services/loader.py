"""
Descriptor Loader for Bundlediff.

Resolves a locator (manifest file, directory, jar archive or http(s) URL
of a jar) to the main-section headers of its manifest. Resolution
strategies are tried in order; each returns None when it does not apply,
and the first result wins.
"""
import io
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Callable, Optional
from urllib.parse import urlparse

import httpx

from config import Settings, settings as default_settings
from core.exceptions import DescriptorLoadError, DescriptorNotFoundError, ManifestSyntaxError
from core.manifest_parser import parse_manifest_bytes

logger = logging.getLogger(__name__)


@dataclass
class LoadedDescriptor:
    """Headers of a resolved descriptor and a description of where they came from."""
    source: str
    headers: dict[str, str]


class DescriptorLoader:
    """
    Loads manifest main sections from local paths and URLs.

    Usage:
        loader = DescriptorLoader()
        headers = loader.load_main_section("build/libs/bundle.jar")
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.Client] = None):
        """
        Initialize the loader.

        Args:
            settings: Resolution settings, defaults to the global settings
            client: HTTP client used for URL locators; a short-lived client
                is created per download when omitted
        """
        self.settings = settings or default_settings
        self._client = client
        self.strategies: list[Callable[[str], Optional[LoadedDescriptor]]] = [
            self._from_manifest_file,
            self._from_directory,
            self._from_archive,
            self._from_url,
        ]

    @property
    def manifest_parts(self) -> tuple[str, ...]:
        return PurePosixPath(self.settings.MANIFEST_NAME).parts

    def load(self, locator: str) -> LoadedDescriptor:
        """
        Resolve a locator with the first strategy that applies.

        Raises:
            DescriptorNotFoundError: no strategy found a manifest
            DescriptorLoadError: a manifest was found but could not be read
        """
        for strategy in self.strategies:
            loaded = strategy(locator)
            if loaded is not None:
                logger.info(f"Loaded manifest from {loaded.source}")
                return loaded
            logger.debug(f"{strategy.__name__} does not apply to {locator}")

        raise DescriptorNotFoundError(locator)

    def load_main_section(self, locator: str) -> dict[str, str]:
        return self.load(locator).headers

    # ------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------

    def _from_manifest_file(self, locator: str) -> Optional[LoadedDescriptor]:
        path = Path(locator)
        parts = self.manifest_parts
        if path.is_file() and path.parts[-len(parts):] == parts:
            return self._read_file(path)
        return None

    def _from_directory(self, locator: str) -> Optional[LoadedDescriptor]:
        path = Path(locator)
        if not path.is_dir():
            return None
        manifest = path.joinpath(*self.manifest_parts)
        if manifest.is_file():
            return self._read_file(manifest)
        return None

    def _from_archive(self, locator: str) -> Optional[LoadedDescriptor]:
        path = Path(locator)
        if not (path.is_file() and self._is_archive_name(path.name)):
            return None

        source = f"jar '{path}'"
        try:
            with zipfile.ZipFile(path) as archive:
                return self._read_archive_entry(archive, source)
        except (OSError, zipfile.BadZipFile) as e:
            raise DescriptorLoadError(source, str(e)) from e

    def _from_url(self, locator: str) -> Optional[LoadedDescriptor]:
        url = urlparse(locator)
        if url.scheme.lower() not in self.settings.URL_SCHEMES or not self._is_archive_name(url.path):
            return None

        source = f"jar '{locator}'"
        content = self._download(locator, source)
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as archive:
                return self._read_archive_entry(archive, source)
        except zipfile.BadZipFile as e:
            raise DescriptorLoadError(source, str(e)) from e

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    def _is_archive_name(self, name: str) -> bool:
        return name.lower().endswith(tuple(s.lower() for s in self.settings.ARCHIVE_SUFFIXES))

    def _download(self, url: str, source: str) -> bytes:
        logger.info(f"Downloading {url}")
        try:
            if self._client is not None:
                response = self._client.get(url, follow_redirects=True)
                response.raise_for_status()
                return response.content

            with httpx.Client(timeout=self.settings.HTTP_TIMEOUT, follow_redirects=True) as client:
                response = client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            raise DescriptorLoadError(source, str(e)) from e

    def _read_file(self, path: Path) -> LoadedDescriptor:
        source = f"file '{path}'"
        try:
            data = path.read_bytes()
        except OSError as e:
            raise DescriptorLoadError(source, str(e)) from e
        return LoadedDescriptor(source=source, headers=self._parse(data, source))

    def _read_archive_entry(self, archive: zipfile.ZipFile, source: str) -> Optional[LoadedDescriptor]:
        try:
            data = archive.read(self.settings.MANIFEST_NAME)
        except KeyError:
            logger.debug(f"No {self.settings.MANIFEST_NAME} entry in {source}")
            return None
        return LoadedDescriptor(source=source, headers=self._parse(data, source))

    def _parse(self, data: bytes, source: str) -> dict[str, str]:
        try:
            return parse_manifest_bytes(data, source)
        except ManifestSyntaxError as e:
            raise DescriptorLoadError(source, str(e)) from e


def load_main_section(locator: str) -> dict[str, str]:
    """Load the main-section headers for a locator with default settings."""
    return DescriptorLoader().load_main_section(locator)
