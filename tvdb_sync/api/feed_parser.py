"""
Incremental parser for TheTVDB update documents (Updates.php).

A document looks like::

    <Items>
        <Time>1385483624</Time>
        <Series>79126</Series>
        <Series>121361</Series>
        <Episode>4185563</Episode>
    </Items>

Only the direct children of the root element are considered. `Time` and `Series`
may appear in any order; any other element is skipped along with its subtree.
"""

import logging
import xml.etree.ElementTree as ET

from tvdb_sync.exceptions import FeedError
from tvdb_sync.models.sync import UpdateFeedResult

log = logging.getLogger(__name__)

TIME_TAG = "Time"
SERIES_TAG = "Series"


class UpdateFeedParser:
    """
    Feed it raw response chunks as they arrive; it keeps the `Time` value and the
    `Series` ids seen so far. Parsed elements are dropped as soon as they are read,
    so memory use does not grow with the document.
    """

    def __init__(self) -> None:
        self._parser = ET.XMLPullParser(events=("start", "end"))
        self._depth = 0
        self._root: ET.Element | None = None
        self.server_time: str | None = None
        self.series_ids: list[str] = []
        self.skipped_elements = 0

    def feed(self, data: bytes) -> None:
        """Parses the next chunk of the document."""
        try:
            self._parser.feed(data)
        except ET.ParseError as e:
            raise FeedError(f"Malformed update feed: {e}") from e
        self._drain()

    def close(self) -> UpdateFeedResult:
        """
        Signals the end of the document and returns the parsed result.

        Raises:
            FeedError: If the document is incomplete or has no `Time` element.
        """
        try:
            self._parser.close()
        except ET.ParseError as e:
            raise FeedError(f"Malformed update feed: {e}") from e
        self._drain()
        return self.result()

    def result(self) -> UpdateFeedResult:
        if not self.server_time:
            raise FeedError("Update feed did not contain a non-empty <Time> element.")
        return UpdateFeedResult(
            server_time=self.server_time, changed_ids=list(self.series_ids)
        )

    def _drain(self) -> None:
        for event, elem in self._parser.read_events():
            if event == "start":
                self._depth += 1
                if self._depth == 1:
                    self._root = elem
                continue

            if self._depth == 2:
                self._handle_field(elem)
                if self._root is not None:
                    self._root.remove(elem)
            self._depth -= 1

    def _handle_field(self, elem: ET.Element) -> None:
        text = "".join(elem.itertext()).strip()
        if elem.tag == TIME_TAG:
            self.server_time = text
        elif elem.tag == SERIES_TAG:
            self.series_ids.append(text)
        else:
            self.skipped_elements += 1
