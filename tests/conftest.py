"""Pytest configuration and fixtures."""

from unittest.mock import MagicMock

import pytest


# Sample maintenance document as served by a Brother printer
SAMPLE_MNT_INFO = (
    '"Node Name","Model Name","Serial No.","Page Counter",'
    '"Drum Count","Toner Remaining(%)","Drum Remaining Life(%)"\r\n'
    '"BRN001","HL-L2350DW","E78123","1520","340","45.5","82"\r\n'
)

SAMPLE_FIELDS = {
    "node_name": "BRN001",
    "model_name": "HL-L2350DW",
    "serial_no": "E78123",
    "page_counter": "1520",
    "drum_count": "340",
    "toner_remaining_percent": "45.5",
    "drum_remaining_life_percent": "82",
}


@pytest.fixture
def sample_mnt_info():
    """Return a sample maintenance CSV document."""
    return SAMPLE_MNT_INFO


@pytest.fixture
def sample_fields():
    """Return the normalized fields of the sample document."""
    return dict(SAMPLE_FIELDS)


@pytest.fixture
def fake_client():
    """Return a printer client stub serving documents per target.

    Set ``fake_client.documents[target]`` to a dict of fields or to a
    FetchError instance.
    """
    client = MagicMock()
    client.documents = {}

    def fetch(target):
        result = client.documents[target]
        if isinstance(result, Exception):
            raise result
        return dict(result)

    client.fetch.side_effect = fetch
    client.__enter__.return_value = client
    client.__exit__.return_value = False
    return client
