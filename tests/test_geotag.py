"""
Unit tests for sidecar geotag decoding (decimal and EXIF rational encodings)
"""

import pytest

from geopap.config import AZIMUTH_UNSET
from geopap.errors import MediaNameError, SidecarError
from geopap.services.media.geotag import (
    decode_coordinate,
    exif_decode,
    exif_encode,
    is_exif,
    load_sidecar,
    parse_media_name,
    read_geotag,
)

# one thousandth of an arc second, in degrees
SECONDS_STEP = 1.0 / 3600000.0


class TestExifCodec:
    """Test cases for exif_encode / exif_decode"""

    def test_encode_truncates(self):
        assert exif_encode(44.1736417) == "44/1,10/1,25110/1000"

    def test_round_trip_loses_truncated_part(self):
        """Decoding an encoded value lands just below it, within one step"""
        value = 44.1736417
        decoded = exif_decode(exif_encode(value))
        assert decoded != value
        assert decoded < value
        assert value - decoded < SECONDS_STEP

    def test_decode_rational_terms(self):
        """44/1,10/1,28110/1000 = 44 + 10/60 + 28.11/3600"""
        assert exif_decode("44/1,10/1,28110/1000") == pytest.approx(44.174475, abs=1e-9)

    def test_truncation_not_rounding(self):
        """Values just under a whole degree never carry over"""
        assert exif_encode(10.99999999) == "10/1,59/1,59999/1000"

    def test_half_degree(self):
        assert exif_encode(0.5) == "0/1,30/1,0/1000"

    def test_negative_values(self):
        encoded = exif_encode(-44.1736417)
        assert encoded == "-44/1,-10/1,-25110/1000"
        assert exif_decode(encoded) == pytest.approx(-44.1736417, abs=SECONDS_STEP)

    @pytest.mark.parametrize("text", ["44/0,10/1,0/1", "44/1,10/1", "a/1,b/1,c/1", "44,10,28"])
    def test_bad_rational(self, text):
        with pytest.raises(SidecarError):
            exif_decode(text)


class TestReadGeotag:
    """Test cases for read_geotag"""

    def test_decimal_and_rational_agree(self):
        """Both encodings of the same point decode to the same lat/lon"""
        decimal = read_geotag({"latitude": "45.51", "longitude": "11.25", "altim": "120"})
        rational = read_geotag({
            "latitude": "45/1,30/1,36000/1000",
            "longitude": "11/1,15/1,0/1000",
            "altim": "120",
        })
        assert rational[0] == pytest.approx(decimal[0], abs=1e-9)
        assert rational[1] == pytest.approx(decimal[1], abs=1e-9)

    def test_encoding_detected_on_latitude(self):
        assert is_exif("44/1,10/1,28110/1000")
        assert not is_exif("44.17")
        assert decode_coordinate("44.5", exif=False) == 44.5

    def test_azimuth(self):
        base = {"latitude": "45.0", "longitude": "11.0", "altim": "100"}
        assert read_geotag(base)[3] == AZIMUTH_UNSET
        assert read_geotag(dict(base, azimuth="north"))[3] == AZIMUTH_UNSET
        assert read_geotag(dict(base, azimuth="123.5"))[3] == 123.5

    def test_values(self):
        lat, lon, altim, azimuth = read_geotag(
            {"latitude": "45.0", "longitude": "11.0", "altim": "98.5", "azimuth": "10"}
        )
        assert (lat, lon, altim, azimuth) == (45.0, 11.0, 98.5, 10.0)

    @pytest.mark.parametrize("missing", ["latitude", "longitude", "altim"])
    def test_required_keys(self, missing):
        props = {"latitude": "45.0", "longitude": "11.0", "altim": "100"}
        del props[missing]
        with pytest.raises(SidecarError):
            read_geotag(props)

    def test_bad_altitude(self):
        with pytest.raises(SidecarError):
            read_geotag({"latitude": "45.0", "longitude": "11.0", "altim": "high"})


class TestMediaName:
    """Test cases for parse_media_name"""

    @pytest.mark.parametrize("name", [
        "IMG_20130312_101533.jpg",
        "AUDIO_20130312_101533.3gp",
        "IMG|20130312|101533.png",
        "IMG_20130312.101533.JPG",
    ])
    def test_date_time_tokens(self, name):
        assert parse_media_name(name) == ("20130312", "101533")

    @pytest.mark.parametrize("name", ["photo.jpg", "IMG_20130312.jpg", "IMG__101533.jpg"])
    def test_defective_names(self, name):
        with pytest.raises(MediaNameError):
            parse_media_name(name)


class TestLoadSidecar:
    """Test cases for load_sidecar"""

    def test_properties_format(self, tmp_path):
        path = tmp_path / "IMG_20130312_101533.properties"
        path.write_text(
            "#Tue Mar 12 10:15:33 CET 2013\n"
            "! another comment\n"
            "azimuth=12.5\n"
            "latitude = 44/1,10/1,28110/1000\n"
            "longitude: 11/1,15/1,0/1000\n"
            "\n"
            "altim=120\n",
            encoding="latin-1",
        )
        props = load_sidecar(path)
        assert props == {
            "azimuth": "12.5",
            "latitude": "44/1,10/1,28110/1000",
            "longitude": "11/1,15/1,0/1000",
            "altim": "120",
        }
