"""
Downloads a series' full record archive from TheTVDB and unpacks it into the
series cache directory, with per-series failures classified as transient or
timeout.
"""

import asyncio
import logging
import os
import zipfile
import zlib
from pathlib import Path
from typing import Protocol

import aiofiles
import aiohttp

from tvdb_sync.exceptions import ProviderTimeoutError, TransientProviderError

from .request_pool import RequestPool

log = logging.getLogger(__name__)


class ItemFetchService(Protocol):
    """Fetches one series in one language into its cache directory."""

    async def fetch_and_unpack(
        self, series_id: str, target_dir: Path, since: str | None, language: str
    ) -> None: ...


class TvdbSeriesFetcher:
    """
    Fetches `<base_url>/api/<api_key>/series/<id>/all/<language>.zip`.

    With no watermark every archive member is written. With a watermark only the
    members that differ from what is already on disk are rewritten.
    """

    ARCHIVE_URL = "{base_url}/api/{api_key}/series/{series_id}/all/{language}.zip"
    CHUNK_SIZE = 65536

    def __init__(self, pool: RequestPool, base_url: str, api_key: str):
        self.pool = pool
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    def archive_url(self, series_id: str, language: str) -> str:
        return self.ARCHIVE_URL.format(
            base_url=self.base_url,
            api_key=self.api_key,
            series_id=series_id,
            language=language,
        )

    async def fetch_and_unpack(
        self, series_id: str, target_dir: Path, since: str | None, language: str
    ) -> None:
        """
        Raises:
            ProviderTimeoutError: If the download exceeded its deadline.
            TransientProviderError: For HTTP errors, connection failures and
                corrupt archives.
        """
        log.info(f"Updating series from TheTVDB {series_id}, language {language}")
        archive_path = target_dir / f".{language}.zip.part"
        try:
            async with self.pool.get(self.archive_url(series_id, language)) as response:
                async with aiofiles.open(archive_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                        await f.write(chunk)

            written = await asyncio.to_thread(
                unpack_archive, archive_path, target_dir, since is None
            )
            log.debug(f"Series {series_id} ({language}): {written} files written")
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(series_id, language, "request timed out") from e
        except aiohttp.ClientResponseError as e:
            raise TransientProviderError(
                series_id, language, f"HTTP {e.status} {e.message}"
            ) from e
        except aiohttp.ClientError as e:
            raise TransientProviderError(series_id, language, str(e)) from e
        except (zipfile.BadZipFile, zlib.error, EOFError) as e:
            raise TransientProviderError(
                series_id, language, f"corrupt archive: {e}"
            ) from e
        finally:
            archive_path.unlink(missing_ok=True)


def _file_crc32(path: Path) -> int:
    crc = 0
    with open(path, "rb") as f:
        while block := f.read(65536):
            crc = zlib.crc32(block, crc)
    return crc


def _is_unchanged(info: zipfile.ZipInfo, destination: Path) -> bool:
    try:
        if destination.stat().st_size != info.file_size:
            return False
    except FileNotFoundError:
        return False
    return _file_crc32(destination) == info.CRC


def unpack_archive(archive_path: Path, target_dir: Path, full: bool) -> int:
    """
    Extracts a series archive into `target_dir`, flattening member paths.

    Args:
        archive_path: The downloaded zip file.
        target_dir: The series cache directory.
        full: Rewrite every member instead of only the changed ones.

    Returns:
        The number of files written.
    """
    written = 0
    with zipfile.ZipFile(archive_path) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            # Members are written by base name only, never outside the series dir
            name = Path(info.filename).name
            if not name or name.startswith("."):
                continue
            destination = target_dir / name
            if not full and _is_unchanged(info, destination):
                continue

            tmp_path = destination.with_name(destination.name + ".tmp")
            try:
                with archive.open(info) as src, open(tmp_path, "wb") as dst:
                    while block := src.read(65536):
                        dst.write(block)
            except BaseException:
                tmp_path.unlink(missing_ok=True)
                raise
            os.replace(tmp_path, destination)
            written += 1
    return written
