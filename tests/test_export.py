from datetime import date

from backend.app.services.export import export_filename, filter_data, sort_data, to_csv

ROWS = [
    {"name": "bravo", "qty": 5, "tags": ["a", "b"]},
    {"name": "Alpha", "qty": 12, "tags": []},
    {"name": "charlie", "qty": None, "tags": None},
]


def test_filter_matches_text_and_numbers():
    assert filter_data(ROWS, "ALP", ["name"]) == [ROWS[1]]
    assert filter_data(ROWS, "12", ["qty"]) == [ROWS[1]]
    assert filter_data(ROWS, "", ["name"]) == ROWS
    assert filter_data(ROWS, "zzz", ["name"]) == []


def test_sort_is_case_insensitive():
    assert [r["name"] for r in sort_data(ROWS, "name")] == ["Alpha", "bravo", "charlie"]
    assert [r["name"] for r in sort_data(ROWS, "name", "desc")] == ["charlie", "bravo", "Alpha"]


def test_sort_puts_missing_values_last():
    assert [r["name"] for r in sort_data(ROWS, "qty", "desc")] == ["Alpha", "bravo", "charlie"]


def test_csv_flattens_lists_and_blanks():
    text = to_csv(ROWS, ["name", "qty", "tags"])
    assert text.split("\n")[:4] == ["name,qty,tags", 'bravo,5,"a, b"', "Alpha,12,", "charlie,,"]


def test_csv_of_nothing_is_empty():
    assert to_csv([]) == ""


def test_export_filename():
    assert export_filename("suppliers", date(2024, 3, 9)) == "suppliers_2024-03-09.csv"
