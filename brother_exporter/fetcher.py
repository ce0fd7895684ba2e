"""Client for the Brother maintenance information CSV document."""

import csv
import io
import logging
import re
from typing import Optional

import httpx

from brother_exporter.errors import MalformedDocumentError, TransportError

logger = logging.getLogger(__name__)


DOCUMENT_PATH = "/etc/mnt_info.csv"

# ASCII only, so accented header characters collapse like punctuation
NON_WORD_PATTERN = re.compile(r"\W+", re.ASCII)


def normalize_field_name(header: str) -> str:
    """Turn a CSV header into a metric-safe field name.

    The first "%" becomes the word "percent", then every run of non-word
    characters is collapsed into a single underscore. Underscores left at
    either end are dropped.

    Args:
        header: Raw header cell, e.g. "Toner (%)"

    Returns:
        Normalized name, e.g. "toner_percent"
    """
    name = header.lower().replace("%", " percent ", 1)
    return NON_WORD_PATTERN.sub("_", name).strip("_")


def document_url(target: str) -> str:
    """Build the maintenance document URL for a printer address."""
    return f"http://{target}{DOCUMENT_PATH}"


def parse_information(text: str, target: str = "") -> dict[str, str]:
    """Parse the two-row maintenance CSV into normalized fields.

    Args:
        text: CSV document body
        target: Printer address, used for error reporting

    Returns:
        Mapping of normalized field name to raw string value

    Raises:
        MalformedDocumentError: If the body is not valid CSV, has no data
            row, or the data row does not line up with the header row
    """
    try:
        rows = [row for row in csv.reader(io.StringIO(text, newline=""), strict=True) if row]
    except csv.Error as e:
        raise MalformedDocumentError(target, f"invalid CSV: {e}", e) from e

    if len(rows) < 2:
        raise MalformedDocumentError(
            target, f"expected a header row and a data row, got {len(rows)} row(s)"
        )

    header, values = rows[0], rows[1]
    if len(header) != len(values):
        raise MalformedDocumentError(
            target,
            f"header has {len(header)} columns but data row has {len(values)}",
        )

    return {normalize_field_name(name): value for name, value in zip(header, values)}


class PrinterClient:
    """HTTP client reading maintenance information from Brother printers."""

    def __init__(self):
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        """Get HTTP client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.Client()
        return self._client

    def fetch(self, target: str) -> dict[str, str]:
        """Fetch and parse the maintenance document of one printer.

        Args:
            target: Printer address, "host" or "host:port"

        Returns:
            Mapping of normalized field name to raw string value

        Raises:
            TransportError: If the request fails or the printer answers non-2xx
            MalformedDocumentError: If the body is not the expected CSV
        """
        url = document_url(target)
        logger.debug(f"Fetching {url}")
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                target, f"HTTP {e.response.status_code} from {url}", e
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(target, f"request to {url} failed: {e!r}", e) from e
        except Exception as e:
            raise TransportError(target, f"request to {url} failed: {e!r}", e) from e

        return parse_information(response.text, target)

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "PrinterClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
