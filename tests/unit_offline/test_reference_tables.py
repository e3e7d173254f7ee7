import json

import pytest

from hopmap.exceptions import ReferenceDataException
from hopmap.reference.codes import KNOWN_REPLACEMENTS, normalize_code
from hopmap.reference.tables import CityEntry, CityTable, load_reference_tables


def test_normalize_code():
    assert normalize_code("sto") == "arn"
    assert normalize_code("STO") == "arn"
    assert normalize_code(" chi ") == "ord"
    assert normalize_code("hls") == "hel"
    assert normalize_code("kbn") == "cph"
    assert normalize_code("kan") == "mci"
    assert normalize_code("pal") == "pao"
    assert normalize_code("fra") == "fra"
    assert normalize_code("ARN") == "arn"
    assert len(KNOWN_REPLACEMENTS) == 6


def test_city_table_lookup_is_case_insensitive():
    table = CityTable([CityEntry("São Paulo", "Sao Paulo", 23086000, -23.55, -46.63)])
    assert table.get("sao paulo").name == "São Paulo"
    assert table.get("  SAO PAULO ").population == 23086000
    assert table.get("São Paulo") is None


def test_city_table_keeps_last_duplicate_in_index_and_all_in_scan():
    table = CityTable(
        [CityEntry("Springfield", "Springfield", 4000, 1.0, 1.0), CityEntry("Springfield", "Springfield", 169176, 37.2, -93.3)]
    )
    assert len(table) == 2
    assert table.get("springfield").population == 169176
    assert [c.population for c in table] == [4000, 169176]


def test_load_bundled_tables():
    tables = load_reference_tables()
    assert tables.cities.get("stockholm").population > 1000000
    arn = tables.airports.get("ARN")
    assert arn.icao == "ESSA"
    assert arn.city_name == "Stockholm"
    assert "arn" in tables.airports


def test_load_json_and_csv(tmp_path):
    cities_path = tmp_path / "worldcities.csv"
    cities_path.write_text("city,city_ascii,lat,lng,population\nGöteborg,Goteborg,57.7075,11.9675,600473\nNowhere,Nowhere,1,2,\n", encoding="utf-8")
    airports_path = tmp_path / "airports.json"
    airports_path.write_text(
        json.dumps([{"code": "GOT", "icao": "ESGG", "url": "https://www.swedavia.com/landvetter/", "city": "Goteborg", "latitude": "57.6628", "longitude": "12.2798"}])
    )

    tables = load_reference_tables(cities_path, airports_path)
    assert tables.cities.get("goteborg").lat == pytest.approx(57.7075)
    assert tables.cities.get("nowhere").population == 0
    got = tables.airports.get("got")
    assert (got.lat, got.lon) == (pytest.approx(57.6628), pytest.approx(12.2798))


def test_load_missing_or_invalid(tmp_path):
    with pytest.raises(ReferenceDataException):
        load_reference_tables(tmp_path / "missing.json", None)

    bad = tmp_path / "bad.json"
    bad.write_text('{"city": "not a list"}')
    with pytest.raises(ReferenceDataException):
        load_reference_tables(bad, None)
