"""
Retrieve configuration artifacts from HTTPS URLs or local paths.

The configuration file, plus any companion files, are written into a
working directory; the configuration file is then parsed into a
ConfigurationRecord.
"""

import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Union
from urllib.parse import urlparse

import requests

from hostprep.config.loader import load_record
from hostprep.config.record import ConfigurationRecord
from hostprep.errors import ConfigurationLoadError
from hostprep.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30


class Bootstrapper:
    """
    Fetches artifacts into a working directory.

    Example:
        boot = Bootstrapper("~/.hostprep/work")
        record = boot.bootstrap(
            "https://example.com/lab/config.yaml",
            extra_sources=["https://example.com/lab/README.txt"],
        )
    """

    def __init__(
        self,
        work_dir: Union[str, Path],
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            work_dir: Directory that receives fetched files (created if needed)
            timeout: HTTP timeout in seconds
            session: requests session to reuse (a new one if None)
        """
        self.work_dir = Path(work_dir).expanduser()
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, source: str) -> Path:
        """
        Copy or download one artifact into the working directory.

        Args:
            source: https:// URL or local file path

        Returns:
            Path of the written file

        Raises:
            ConfigurationLoadError: If the artifact cannot be retrieved
        """
        try:
            self.work_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationLoadError(f"Could not create {self.work_dir}: {e}") from e

        parsed = urlparse(source)

        if parsed.scheme in ("http", "https"):
            return self._download(source, parsed.path)
        if parsed.scheme not in ("", "file") and len(parsed.scheme) > 1:
            raise ConfigurationLoadError(f"Unsupported source scheme: {parsed.scheme}")

        local = Path(parsed.path if parsed.scheme == "file" else source).expanduser()
        return self._copy(local)

    def _download(self, url: str, url_path: str) -> Path:
        if not url.lower().startswith("https://"):
            raise ConfigurationLoadError(f"Refusing to download over plain HTTP: {url}")

        name = Path(url_path).name
        if not name:
            raise ConfigurationLoadError(f"URL has no file name: {url}")

        target = self.work_dir / name
        logger.info("Downloading %s", url)

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ConfigurationLoadError(f"Download failed for {url}: {e}") from e

        try:
            target.write_bytes(response.content)
        except OSError as e:
            raise ConfigurationLoadError(f"Could not write {target}: {e}") from e

        logger.info("Saved %s (%d bytes)", target, len(response.content))
        return target

    def _copy(self, local: Path) -> Path:
        if not local.is_file():
            raise ConfigurationLoadError(f"Configuration artifact not found: {local}")

        target = self.work_dir / local.name
        if local.resolve() == target.resolve():
            return target

        try:
            shutil.copyfile(local, target)
        except OSError as e:
            raise ConfigurationLoadError(f"Could not copy {local}: {e}") from e

        logger.info("Copied %s to %s", local, target)
        return target

    def bootstrap(
        self,
        config_source: str,
        extra_sources: Iterable[str] = (),
    ) -> ConfigurationRecord:
        """
        Fetch the configuration artifact and companions, then load the record.

        Raises:
            ConfigurationLoadError: If any artifact fails or the record is invalid
        """
        config_path = self.fetch(config_source)

        fetched: List[Path] = [config_path]
        for source in extra_sources:
            fetched.append(self.fetch(source))

        logger.debug("Fetched %d artifact(s) into %s", len(fetched), self.work_dir)
        return load_record(config_path)


def fetch(source: str, dest_dir: Union[str, Path]) -> Path:
    """Fetch a single artifact into dest_dir."""
    return Bootstrapper(dest_dir).fetch(source)


def bootstrap(
    config_source: str,
    dest_dir: Union[str, Path],
    extra_sources: Iterable[str] = (),
) -> ConfigurationRecord:
    """Fetch artifacts into dest_dir and load the record."""
    return Bootstrapper(dest_dir).bootstrap(config_source, extra_sources)
