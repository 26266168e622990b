"""
Unit tests for the geometry module.

Tests for GeometryNormalizer across every raw encoding, axis order and
the silent-degradation policy.
"""

import json
import logging
from decimal import Decimal

import pytest

from chronicle.configs.config import Config
from chronicle.errors import UnparseableGeometry
from chronicle.normalization.geometry import (
    MALFORMED_COORDINATE_FALLBACK,
    GeometryNormalizer,
    from_geojson,
    normalize,
    parse_wkt,
    to_ewkt,
)
from chronicle.schemas.geo import GeoPoint

LAT = 39.9042
LNG = 116.4074


def assert_point(point, lat=LAT, lng=LNG):
    assert point is not None
    assert point.lat == pytest.approx(lat, abs=1e-6)
    assert point.lng == pytest.approx(lng, abs=1e-6)


class TestEncodingsAgree:
    """All four encodings of the same point normalize identically."""

    @pytest.mark.parametrize(
        "raw",
        [
            {"type": "Point", "coordinates": [LNG, LAT]},
            {"lat": LAT, "lng": LNG},
            json.dumps({"type": "Point", "coordinates": [LNG, LAT]}),
            json.dumps({"lat": LAT, "lng": LNG}),
            f"POINT({LNG} {LAT})",
            f"SRID=4326;POINT({LNG} {LAT})",
        ],
    )
    def test_same_point(self, raw):
        """Every encoding should yield lat=39.9042, lng=116.4074."""
        assert_point(normalize(raw))

    def test_ewkt_scenario(self):
        """SRID-prefixed WKT is lon-first."""
        assert normalize("SRID=4326;POINT(116.4074 39.9042)") == GeoPoint(lat=39.9042, lng=116.4074)

    def test_numeric_string_scenario(self):
        """lat/lng given as numeric strings are parsed as floats."""
        assert normalize({"lat": "39.9042", "lng": "116.4074"}) == GeoPoint(lat=39.9042, lng=116.4074)

    def test_coordinates_scenario(self):
        """Bare coordinates mapping is lon-first."""
        assert normalize({"coordinates": [116.4074, 39.9042]}) == GeoPoint(lat=39.9042, lng=116.4074)


class TestAxisOrder:
    """GeoJSON/WKT are lon-first; the lat/lng mapping is read by name."""

    def test_geojson_is_not_swapped_into_lat_first(self):
        """coordinates[0] must become lng, never lat."""
        point = normalize({"coordinates": [10.0, 20.0]})
        assert point.lng == 10.0
        assert point.lat == 20.0

    def test_lat_lng_mapping_is_not_swapped(self):
        """lat/lng keys are used as-is."""
        point = normalize({"lat": 10.0, "lng": 20.0})
        assert point.lat == 10.0
        assert point.lng == 20.0

    def test_wkt_first_token_is_longitude(self):
        """POINT(x y) -> lng=x, lat=y."""
        point = parse_wkt("POINT(10 20)")
        assert point.lng == 10.0
        assert point.lat == 20.0

    def test_coordinates_win_over_lat_lng(self):
        """When both shapes are present the coordinates rule applies first."""
        point = normalize({"coordinates": [1.0, 2.0], "lat": 50.0, "lng": 60.0})
        assert point == GeoPoint(lat=2.0, lng=1.0)

    def test_extra_coordinate_members_ignored(self):
        """A third (altitude) member is ignored."""
        assert normalize({"coordinates": [LNG, LAT, 44.5]}) == GeoPoint(lat=LAT, lng=LNG)


class TestAbsentAndMalformed:
    """Inputs that carry no usable point normalize to None and never raise."""

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "",
            "not a geometry",
            "POINT(1)",
            "LINESTRING(0 0, 1 1)",
            "[116.4, 39.9]",
            "42",
            {},
            {"coordinates": [1.0]},
            {"coordinates": "1 2"},
            {"lat": 1.0},
            {"lat": None, "lng": 2.0},
            [116.4, 39.9],
            42,
            object(),
        ],
    )
    def test_returns_none(self, raw):
        """Unsupported or incomplete values mean 'no location'."""
        assert normalize(raw) is None

    def test_out_of_range_is_absent(self):
        """A point outside WGS84 bounds cannot be represented."""
        assert normalize({"lat": 95.0, "lng": 10.0}) is None
        assert normalize("POINT(200 10)") is None

    def test_logs_debug_on_failure(self, caplog):
        """Degradation is logged at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="chronicle.normalization.geometry"):
            normalize("garbage")
        assert any("absent" in r.message for r in caplog.records)


class TestMalformedTokenFallback:
    """Malformed numeric tokens become 0.0 per field."""

    def test_fallback_constant(self):
        """The fallback value is documented as 0.0."""
        assert MALFORMED_COORDINATE_FALLBACK == 0.0

    def test_non_numeric_lat_string(self):
        """Only the bad field is zeroed."""
        point = normalize({"lat": "abc", "lng": "116.4074"})
        assert point == GeoPoint(lat=0.0, lng=116.4074)

    def test_nan_token_in_wkt(self):
        """NaN tokens in WKT are zeroed."""
        point = normalize("POINT(NaN 39.9042)")
        assert point == GeoPoint(lat=39.9042, lng=0.0)

    def test_non_numeric_wkt_tokens(self):
        """Both tokens malformed -> (0, 0)."""
        assert normalize("SRID=4326;POINT(x y)") == GeoPoint(lat=0.0, lng=0.0)

    def test_nan_in_coordinates(self):
        """float('nan') in a coordinates array is zeroed."""
        point = normalize({"coordinates": [float("nan"), 10.0]})
        assert point == GeoPoint(lat=10.0, lng=0.0)


class TestWkt:
    """Tests for WKT parsing details."""

    def test_case_and_whitespace_tolerant(self):
        """Lowercase keyword and extra spaces are accepted."""
        assert_point(normalize(f"  srid=4326; point( {LNG}   {LAT} ) "))

    def test_negative_coordinates(self):
        """Signed tokens are read correctly."""
        assert normalize("POINT(-73.9965 40.7695)") == GeoPoint(lat=40.7695, lng=-73.9965)

    def test_parse_wkt_raises_on_mismatch(self):
        """The lower-level parser reports failures."""
        with pytest.raises(UnparseableGeometry):
            parse_wkt("POLYGON((0 0, 1 1, 1 0, 0 0))")

    def test_bytes_input(self):
        """Byte strings are decoded before parsing."""
        assert_point(normalize(f"POINT({LNG} {LAT})".encode()))


class TestNamedConversions:
    """Tests for from_geojson and to_ewkt."""

    def test_from_geojson_sequence(self):
        """A bare position is accepted."""
        assert from_geojson([LNG, LAT]) == GeoPoint(lat=LAT, lng=LNG)

    def test_from_geojson_raises_without_coordinates(self):
        """Missing coordinates is an error at this level."""
        with pytest.raises(UnparseableGeometry):
            from_geojson({"type": "Point"})

    def test_to_ewkt(self):
        """EWKT output is lon-first with the default SRID."""
        assert to_ewkt(GeoPoint(lat=LAT, lng=LNG)) == "SRID=4326;POINT(116.4074 39.9042)"

    def test_to_ewkt_custom_srid(self):
        """SRID can be overridden."""
        assert to_ewkt(GeoPoint(lat=1.5, lng=2.5), srid=3857) == "SRID=3857;POINT(2.5 1.5)"

    def test_ewkt_reads_back(self):
        """to_ewkt output normalizes back to the same point."""
        point = GeoPoint(lat=-33.8688, lng=151.2093)
        assert normalize(to_ewkt(point)) == point

    def test_geopoint_passthrough(self):
        """An already-normalized point is returned unchanged."""
        point = GeoPoint(lat=LAT, lng=LNG)
        assert GeometryNormalizer.normalize(point) is point


class TestHostileInput:
    """Oversized or deeply nested values still normalize to None."""

    def test_huge_integer_lat(self):
        """An integer too large for a float is out of range."""
        assert normalize({"lat": 10**400, "lng": 0}) is None

    def test_huge_integer_in_json_coordinates(self):
        """Overflow inside JSON-decoded coordinates is out of range."""
        assert normalize('{"coordinates": [1' + "0" * 400 + ", 0]}") is None

    def test_deeply_nested_json(self):
        """JSON nested past the recursion limit is not a geometry."""
        assert normalize("[" * 100000) is None


class TestNumericTypes:
    """lat/lng accept the numeric types database drivers return."""

    def test_decimal_lat_lng(self):
        """Decimal columns are read like floats."""
        point = normalize({"lat": Decimal("39.9042"), "lng": Decimal("116.4074")})
        assert point == GeoPoint(lat=39.9042, lng=116.4074)

    def test_decimal_coordinates_agree(self):
        """Both mapping rules accept Decimal."""
        assert normalize({"coordinates": [Decimal("116.4074"), Decimal("39.9042")]}) == normalize(
            {"lat": Decimal("39.9042"), "lng": Decimal("116.4074")}
        )

    def test_bool_still_rejected(self):
        """Booleans are not coordinates."""
        assert normalize({"lat": True, "lng": 1.0}) is None


class TestWktExtraMembers:
    """Z/M members after latitude are ignored."""

    def test_three_tokens(self):
        """POINT(x y z) reads x and y."""
        assert normalize("POINT(116.4074 39.9042 44.5)") == GeoPoint(lat=39.9042, lng=116.4074)

    def test_zm_keyword(self):
        """POINT ZM with four tokens reads the first two."""
        assert normalize("SRID=4326;POINT ZM (116.4074 39.9042 44.5 7)") == GeoPoint(lat=39.9042, lng=116.4074)

    def test_five_tokens_rejected(self):
        """More than four members is not a point."""
        assert normalize("POINT(1 2 3 4 5)") is None


class TestEwktSrid:
    """to_ewkt takes its default SRID from projection.yaml."""

    @pytest.fixture(autouse=True)
    def fresh_config(self):
        Config.load_projection_config.cache_clear()
        yield
        Config.load_projection_config.cache_clear()

    def test_yaml_srid(self, monkeypatch, tmp_path):
        """geometry.srid in the YAML file is used."""
        path = tmp_path / "projection.yaml"
        path.write_text("geometry:\n  srid: 3857\n", encoding="utf-8")
        monkeypatch.setattr(Config, "PROJECTION_CONFIG_PATH", path)
        assert to_ewkt(GeoPoint(lat=1.5, lng=2.5)) == "SRID=3857;POINT(2.5 1.5)"

    def test_settings_fallback(self, monkeypatch, tmp_path):
        """Without a geometry section the settings SRID applies."""
        path = tmp_path / "projection.yaml"
        path.write_text("projection: {}\n", encoding="utf-8")
        monkeypatch.setattr(Config, "PROJECTION_CONFIG_PATH", path)
        assert to_ewkt(GeoPoint(lat=1.5, lng=2.5)) == "SRID=4326;POINT(2.5 1.5)"
