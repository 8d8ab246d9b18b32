from nearby_tui.cities import CITIES, CityId
from nearby_tui.models import NearbyPlace, Place
from nearby_tui.render import render_center, render_nearby_list, render_place_table


def test_nearby_list_keeps_input_order_and_formats():
    nearby = [
        NearbyPlace("one", 19.0760901, 72.8774, 1.2),
        NearbyPlace("two", 19.1, 72.9, 3.4),
        NearbyPlace("three", 18.92, 72.83, 5.6),
    ]
    view = render_nearby_list(nearby)
    assert view.header == ("S.No.", "Place", "Latitude", "Longitude", "Distance")
    assert [r[0] for r in view.rows] == ["1", "2", "3"]
    assert [r[1] for r in view.rows] == ["one", "two", "three"]
    assert [r[4] for r in view.rows] == ["1.200 KM", "3.400 KM", "5.600 KM"]
    assert view.rows[0][2:4] == ("19.07609", "72.87740")


def test_nearby_list_does_not_sort():
    view = render_nearby_list([NearbyPlace("b", 0, 0, 9.0), NearbyPlace("a", 0, 0, 1.0)])
    assert [r[1] for r in view.rows] == ["b", "a"]


def test_place_table_header_and_order():
    places = [Place("Z", 19.1, 72.9), Place("A", 18.5, 72.1)]
    view = render_place_table(places)
    assert view.header == ("Place Name", "Latitude", "Longitude")
    assert view.rows == (("Z", "19.1", "72.9"), ("A", "18.5", "72.1"))


def test_render_is_deterministic_and_empty_safe():
    places = [Place("A", 1.0, 2.0)]
    assert render_place_table(places) == render_place_table(list(places))
    assert render_nearby_list([]).rows == ()


def test_center_view():
    view = render_center(CITIES[CityId.mum], 19.07, 72.87)
    assert (view.city, view.lat, view.lon) == ("Mumbai", "19.07", "72.87")
