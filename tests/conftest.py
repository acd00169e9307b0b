from pathlib import Path
from xml.etree import ElementTree as ET

import pytest

GPX = "http://www.topografix.com/GPX/1/1"


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "sample.gpx"


@pytest.fixture
def gpx_fragment():
    """Parse a snippet of GPX markup (default namespace = GPX) into its element."""

    def _parse(xml: str) -> ET.Element:
        return ET.fromstring(f'<wrap xmlns="{GPX}">{xml}</wrap>')[0]

    return _parse


@pytest.fixture
def gpx_document():
    """Wrap top-level GPX children in a <gpx> root and return the document bytes."""

    def _doc(body: str = "", attrs: str = 'version="1.1" creator="tests"') -> bytes:
        return f'<?xml version="1.0"?><gpx xmlns="{GPX}" {attrs}>{body}</gpx>'.encode("utf-8")

    return _doc
