"""Tests for administrative-name normalization."""

import pytest

from imsakiyah.core.types import NameContext
from imsakiyah.matching.normalize import (
    city_type_of,
    normalize,
    normalize_city_name,
    normalize_province_name,
    strip_city_entry,
    strip_province_entry,
)


class TestNormalizeProvince:
    def test_lowercases_and_trims(self):
        assert normalize_province_name("  Jawa   Barat ") == "jawa barat"

    def test_strips_provinsi_prefix(self):
        assert normalize_province_name("Provinsi Jawa Tengah") == "jawa tengah"

    def test_strips_abbreviated_prefix_with_period(self):
        assert normalize_province_name("Prov. Banten") == "banten"

    def test_strips_daerah_istimewa(self):
        assert normalize_province_name("Daerah Istimewa Yogyakarta") == "yogyakarta"

    def test_daerah_khusus_ibukota_keeps_ibukota(self):
        assert normalize_province_name("Daerah Khusus Ibukota Jakarta") == "ibukota jakarta"

    def test_strips_embedded_markers(self):
        assert normalize_province_name("Yogyakarta Daerah Istimewa") == "yogyakarta"

    def test_prefix_must_be_whole_word(self):
        assert normalize_province_name("Provinsial Utara") == "provinsial utara"

    def test_default_context_is_province(self):
        assert normalize("Provinsi Aceh") == "aceh"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_input(self, raw):
        assert normalize_province_name(raw) == ""


class TestNormalizeCity:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Kabupaten Sleman", "sleman"),
            ("Kab. Sleman", "sleman"),
            ("Kab Sleman", "sleman"),
            ("Kota Yogyakarta", "yogyakarta"),
            ("Sleman Regency", "sleman"),
            ("Jakarta Selatan City", "jakarta selatan"),
            ("Kab. Kabupaten Sleman", "sleman"),
        ],
    )
    def test_strips_type_tokens(self, raw, expected):
        assert normalize_city_name(raw) == expected

    def test_keeps_semantic_words(self):
        assert normalize_city_name("Kota Administrasi Jakarta Selatan") == "administrasi jakarta selatan"

    def test_token_inside_a_word_is_kept(self):
        assert normalize_city_name("Kotabaru") == "kotabaru"
        assert normalize_city_name("Kotawaringin Barat") == "kotawaringin barat"

    def test_city_tokens_do_not_apply_to_provinces(self):
        assert normalize("Kota Yogyakarta", NameContext.PROVINCE) == "kota yogyakarta"


class TestIdempotence:
    @pytest.mark.parametrize(
        "raw",
        [
            "Daerah Khusus Ibukota Jakarta",
            "Daerah Istimewa Yogyakarta",
            "Provinsi Khusus Daerah Papua",
            "Prov. Jawa Timur",
            "  Kalimantan   Timur  ",
        ],
    )
    def test_province(self, raw):
        once = normalize_province_name(raw)
        assert normalize_province_name(once) == once

    @pytest.mark.parametrize(
        "raw",
        [
            "Kab. Kabupaten Sleman",
            "Kota Administrasi Jakarta Selatan",
            "Kota Kota Bandung",
            "Municipality District Regency Batam City",
            "Kab. Kepulauan Seribu",
        ],
    )
    def test_city(self, raw):
        once = normalize_city_name(raw)
        assert normalize_city_name(once) == once


class TestStripEntries:
    @pytest.mark.parametrize(
        "entry, expected",
        [
            ("D.I. Yogyakarta", "yogyakarta"),
            ("DKI Jakarta", "jakarta"),
            ("Provinsi Jawa Tengah", "jawa tengah"),
            ("Daerah Istimewa Yogyakarta", "yogyakarta"),
            ("Papua Barat Daya", "papua barat daya"),
        ],
    )
    def test_province_entry(self, entry, expected):
        assert strip_province_entry(entry) == expected

    @pytest.mark.parametrize(
        "entry, expected",
        [
            ("Kab. Sleman", "sleman"),
            ("Kab Sleman", "sleman"),
            ("Kota Yogyakarta", "yogyakarta"),
            ("Kota Administrasi Jakarta Selatan", "administrasi jakarta selatan"),
            ("Kab. Kotabaru", "kotabaru"),
        ],
    )
    def test_city_entry(self, entry, expected):
        assert strip_city_entry(entry) == expected


class TestCityTypeOf:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Kab. Bogor", "Kab."),
            ("Kabupaten Bogor", "Kab."),
            ("kab bogor", "Kab."),
            ("Kota Bogor", "Kota"),
            ("Kab. Kota Bekasi", "Kota"),
            ("Kota Kabupaten Bekasi", "Kab."),
            ("City Batam", "Kota"),
            ("Bogor", None),
            ("Kotabaru", None),
            ("", None),
            (None, None),
        ],
    )
    def test_type_prefix(self, name, expected):
        assert city_type_of(name) == expected
