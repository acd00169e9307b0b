import datetime as dt
from xml.etree import ElementTree as ET

import pytest

from gpxmax.errors import RangeViolationError, SchemaViolationError
from gpxmax.formats.gpx import local_name, qn
from gpxmax.model.bounds import BoundingBox
from gpxmax.model.links import Email, WebLink
from gpxmax.model.metadata import Copyright, Metadata, Person
from gpxmax.model.route import Route
from gpxmax.model.scalars import Degrees, DgpsStationId, FixKind, Latitude, Longitude
from gpxmax.model.track import Track, TrackSegment
from gpxmax.model.waypoint import Waypoint
from gpxmax.settings import ReaderSettings, WriterSettings


def child_names(element):
    return [local_name(c.tag) for c in element]


def saved(entity, tag, *args):
    element = ET.Element(qn(tag))
    entity.save(element, *args)
    return element


# ---------------------------------------------------------------------------
# BoundingBox
# ---------------------------------------------------------------------------
def test_bounds_scenario(gpx_fragment):
    el = gpx_fragment('<bounds minlat="1.5" minlon="-2.25" maxlat="3.5" maxlon="4.25"/>')
    box = BoundingBox.load(el)

    assert box == BoundingBox(
        min_longitude=Longitude(-2.25),
        min_latitude=Latitude(1.5),
        max_longitude=Longitude(4.25),
        max_latitude=Latitude(3.5),
    )

    out = saved(box, "bounds")
    assert list(out.attrib.items()) == [
        ("minlat", "1.5"),
        ("minlon", "-2.25"),
        ("maxlat", "3.5"),
        ("maxlon", "4.25"),
    ]


@pytest.mark.parametrize("missing", ["minlat", "minlon", "maxlat", "maxlon"])
def test_bounds_missing_attribute(gpx_fragment, missing):
    attrs = {"minlat": "1", "minlon": "2", "maxlat": "3", "maxlon": "4"}
    del attrs[missing]
    xml = "<bounds " + " ".join(f'{k}="{v}"' for k, v in attrs.items()) + "/>"
    with pytest.raises(SchemaViolationError, match=missing):
        BoundingBox.load(gpx_fragment(xml))


def test_bounds_load_none():
    assert BoundingBox.load(None) is None


def test_bounds_out_of_range(gpx_fragment):
    with pytest.raises(RangeViolationError):
        BoundingBox.load(gpx_fragment('<bounds minlat="1" minlon="181" maxlat="3" maxlon="4"/>'))


def test_bounds_min_greater_than_max_is_kept(gpx_fragment):
    box = BoundingBox.load(gpx_fragment('<bounds minlat="10" minlon="20" maxlat="-10" maxlon="-20"/>'))
    assert box.min_latitude == Latitude(10)
    assert box.max_latitude == Latitude(-10)


def test_bounds_world():
    assert BoundingBox.WORLD.min_longitude == Longitude(-180)
    assert BoundingBox.WORLD.max_latitude == Latitude(90)


def test_bounds_str_lists_fields():
    box = BoundingBox(Longitude(-2.25), Latitude(1.5), Longitude(4.25), Latitude(3.5))
    assert str(box) == "[min_longitude: -2.25, min_latitude: 1.5, max_longitude: 4.25, max_latitude: 3.5]"


# ---------------------------------------------------------------------------
# Person / Email / WebLink / Copyright
# ---------------------------------------------------------------------------
def test_person_scenario(gpx_fragment):
    person = Person.load(gpx_fragment("<author><name>Jane</name></author>"))
    assert person == Person(name="Jane", email=None, link=None)

    out = saved(person, "author")
    assert child_names(out) == ["name"]
    assert out[0].text == "Jane"


def test_person_full_order(gpx_fragment):
    el = gpx_fragment(
        '<author><link href="http://x.org"/><email id="j" domain="x.org"/><name>J</name></author>'
    )
    person = Person.load(el)
    assert person.email == Email("j", "x.org")
    assert person.link == WebLink("http://x.org")
    assert child_names(saved(person, "author")) == ["name", "email", "link"]


def test_person_ignores_foreign_children(gpx_fragment):
    person = Person.load(gpx_fragment('<author><x:name xmlns:x="urn:other">Nope</x:name></author>'))
    assert person.name is None


def test_email_requires_both_attributes(gpx_fragment):
    with pytest.raises(SchemaViolationError, match="email element must have domain attribute"):
        Email.load(gpx_fragment('<email id="jane"/>'))


def test_email_save_order():
    out = saved(Email("jane", "example.com"), "email")
    assert list(out.attrib) == ["id", "domain"]


def test_weblink_empty_text_differs_from_absent(gpx_fragment):
    link = WebLink.load(gpx_fragment('<link href="http://x.org"><text/></link>'))
    assert link.text == ""
    assert link.content_type is None
    assert child_names(saved(link, "link")) == ["text"]

    bare = WebLink.load(gpx_fragment('<link href="http://x.org"/>'))
    assert bare.text is None
    assert bare != link
    assert child_names(saved(bare, "link")) == []


def test_weblink_requires_href(gpx_fragment):
    with pytest.raises(SchemaViolationError, match="href"):
        WebLink.load(gpx_fragment("<link><text>x</text></link>"))


def test_weblink_rejects_malformed_href(gpx_fragment):
    with pytest.raises(SchemaViolationError):
        WebLink.load(gpx_fragment('<link href="http://[::1"/>'))


def test_copyright(gpx_fragment):
    c = Copyright.load(
        gpx_fragment('<copyright author="Jane"><year>-0044</year><license>http://l.org/1</license></copyright>')
    )
    assert c == Copyright(author="Jane", year=-44, license="http://l.org/1")

    out = saved(c, "copyright")
    assert out.get("author") == "Jane"
    assert child_names(out) == ["year", "license"]
    assert out[0].text == "-0044"


def test_copyright_requires_author(gpx_fragment):
    with pytest.raises(SchemaViolationError):
        Copyright.load(gpx_fragment("<copyright><year>2020</year></copyright>"))


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------
def test_metadata_is_trivial():
    assert Metadata(creator="me").is_trivial
    assert not Metadata(creator="me", keywords="").is_trivial
    assert not Metadata(creator="me", links=[WebLink("http://x")]).is_trivial


def test_metadata_child_order(gpx_fragment):
    el = gpx_fragment(
        "<metadata>"
        '<bounds minlat="1" minlon="2" maxlat="3" maxlon="4"/>'
        "<keywords>k</keywords>"
        "<time>2024-01-01T00:00:00Z</time>"
        '<link href="http://a"/><link href="http://b"/>'
        '<copyright author="c"/>'
        "<author><name>a</name></author>"
        "<desc>d</desc>"
        "<name>n</name>"
        "</metadata>"
    )
    md = Metadata.load(el, ReaderSettings(), "creator-x")
    assert md.creator == "creator-x"
    assert [link.href for link in md.links] == ["http://a", "http://b"]
    assert md.creation_time == dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc)

    out = saved(md, "metadata", WriterSettings())
    assert child_names(out) == [
        "name", "desc", "author", "copyright", "link", "link", "time", "keywords", "bounds",
    ]


def test_metadata_requires_utc_time():
    naive = dt.datetime(2024, 1, 1)
    with pytest.raises(ValueError):
        Metadata(creator="x", creation_time=naive)


# ---------------------------------------------------------------------------
# Waypoint
# ---------------------------------------------------------------------------
FULL_WPT = (
    '<wpt lat="47.6101" lon="-122.3401">'
    '<extensions><x:c xmlns:x="urn:x">red</x:c></extensions>'
    "<dgpsid>42</dgpsid><ageofdgpsdata>2.5</ageofdgpsdata><pdop>1.5</pdop><vdop>1.2</vdop>"
    "<hdop>0.9</hdop><sat>9</sat><fix>dgps</fix><type>Parking</type><sym>Flag</sym>"
    '<link href="http://t"/><src>eTrex</src><desc>D</desc><cmt>C</cmt><name>N</name>'
    "<geoidheight>-19.1</geoidheight><magvar>15.25</magvar>"
    "<time>2024-05-04T08:00:00Z</time><ele>12.5</ele>"
    "</wpt>"
)


def test_waypoint_load_all_fields(gpx_fragment):
    settings = ReaderSettings()
    wpt = Waypoint.load(gpx_fragment(FULL_WPT), settings, settings.extension_reader.convert_waypoint_extension)

    assert wpt.latitude == Latitude(47.6101)
    assert wpt.longitude == Longitude(-122.3401)
    assert wpt.elevation == 12.5
    assert wpt.timestamp == dt.datetime(2024, 5, 4, 8, tzinfo=dt.timezone.utc)
    assert wpt.magnetic_variation == Degrees(15.25)
    assert wpt.geoid_height == -19.1
    assert (wpt.name, wpt.comment, wpt.description, wpt.source) == ("N", "C", "D", "eTrex")
    assert wpt.links == (WebLink("http://t"),)
    assert (wpt.symbol, wpt.classification) == ("Flag", "Parking")
    assert wpt.fix_kind is FixKind.DGPS
    assert wpt.satellites == 9
    assert (wpt.hdop, wpt.vdop, wpt.pdop) == (0.9, 1.2, 1.5)
    assert wpt.dgps_age == 2.5
    assert wpt.dgps_station_id == DgpsStationId(42)
    assert len(wpt.extensions) == 1


def test_waypoint_save_schema_order(gpx_fragment):
    reader, writer = ReaderSettings(), WriterSettings()
    wpt = Waypoint.load(gpx_fragment(FULL_WPT), reader, reader.extension_reader.convert_waypoint_extension)
    out = saved(wpt, "wpt", writer, writer.extension_writer.convert_waypoint_extension)

    assert list(out.attrib) == ["lat", "lon"]
    assert child_names(out) == [
        "ele", "time", "magvar", "geoidheight", "name", "cmt", "desc", "src", "link",
        "sym", "type", "fix", "sat", "hdop", "vdop", "pdop", "ageofdgpsdata", "dgpsid",
        "extensions",
    ]


def test_waypoint_absent_fields_write_nothing():
    wpt = Waypoint(longitude=Longitude(1), latitude=Latitude(2))
    out = saved(wpt, "wpt", WriterSettings(), None)
    assert out.attrib == {"lat": "2", "lon": "1"}
    assert len(out) == 0


@pytest.mark.parametrize("missing", ["lat", "lon"])
def test_waypoint_requires_coordinates(gpx_fragment, missing):
    attrs = {"lat": "1", "lon": "2"}
    del attrs[missing]
    xml = "<wpt " + " ".join(f'{k}="{v}"' for k, v in attrs.items()) + "/>"
    settings = ReaderSettings()
    with pytest.raises(SchemaViolationError, match=f"wpt element must have {missing} attribute"):
        Waypoint.load(gpx_fragment(xml), settings, settings.extension_reader.convert_waypoint_extension)


def test_waypoint_bad_time_can_be_ignored(gpx_fragment):
    el = gpx_fragment('<wpt lat="1" lon="2"><time>soon</time></wpt>')
    strict = ReaderSettings()
    with pytest.raises(SchemaViolationError):
        Waypoint.load(el, strict, strict.extension_reader.convert_waypoint_extension)

    lenient = ReaderSettings(ignore_bad_datetime=True)
    wpt = Waypoint.load(el, lenient, lenient.extension_reader.convert_waypoint_extension)
    assert wpt.timestamp is None


def test_waypoint_rejects_non_finite_elevation():
    with pytest.raises(ValueError):
        Waypoint(longitude=Longitude(0), latitude=Latitude(0), elevation=float("inf"))


def test_waypoint_str_skips_absent_fields():
    wpt = Waypoint(longitude=Longitude(1.5), latitude=Latitude(2), name="x")
    assert str(wpt) == "[longitude: 1.5, latitude: 2, name: x]"


# ---------------------------------------------------------------------------
# Route / Track
# ---------------------------------------------------------------------------
def test_route_load_and_save(gpx_fragment):
    el = gpx_fragment(
        '<rte><rtept lat="1" lon="2"/><name>R</name><number>3</number>'
        '<rtept lat="3" lon="4"><name>B</name></rtept></rte>'
    )
    route = Route.load(el, ReaderSettings())
    assert route.name == "R"
    assert route.number == 3
    assert [p.name for p in route.waypoints] == [None, "B"]

    out = saved(route, "rte", WriterSettings())
    assert child_names(out) == ["name", "number", "rtept", "rtept"]


def test_track_load_and_save(gpx_fragment):
    el = gpx_fragment(
        "<trk><name>T</name>"
        '<trkseg><trkpt lat="1" lon="2"/><trkpt lat="1.5" lon="2.5"/></trkseg>'
        '<trkseg><trkpt lat="3" lon="4"/></trkseg>'
        "<type>hike</type></trk>"
    )
    track = Track.load(el, ReaderSettings())
    assert track.classification == "hike"
    assert [len(s.waypoints) for s in track.segments] == [2, 1]
    assert len(track.points) == 3

    out = saved(track, "trk", WriterSettings())
    assert child_names(out) == ["name", "type", "trkseg", "trkseg"]
    assert child_names(out[2]) == ["trkpt", "trkpt"]


def test_track_segment_extensions_come_last(gpx_fragment):
    el = gpx_fragment(
        '<trkseg><extensions><x:s xmlns:x="urn:x"/></extensions><trkpt lat="1" lon="2"/></trkseg>'
    )
    seg = TrackSegment.load(el, ReaderSettings())
    out = saved(seg, "trkseg", WriterSettings())
    assert child_names(out) == ["trkpt", "extensions"]


def test_entities_are_immutable():
    wpt = Waypoint(longitude=Longitude(1), latitude=Latitude(2), links=[WebLink("http://x")])
    assert isinstance(wpt.links, tuple)
    with pytest.raises(AttributeError):
        wpt.name = "changed"
