from backend.app.api.warehouses import warehouse_formula
from backend.app.schemas.user import UserRole


def test_warehouse_formula_escapes_quotes():
    assert warehouse_formula("General Warehouse") == "{Warehouse} = 'General Warehouse'"
    assert warehouse_formula("Kofi's Store") == "{Warehouse} = 'Kofi\\'s Store'"


def test_filtered_warehouse_with_total_value(client, login, airtable):
    login(UserRole.VIEWER)
    airtable.seed(
        "Finished Goods",
        {"Product Name": "Bottle", "Warehouse": "A-Z Bulk Warehouse", "Current Stock": 10, "Selling Price": 2.5},
        {"Product Name": "Jar", "Warehouse": "A-Z Bulk Warehouse", "Current Stock": 4, "Selling Price": 5},
        {"Product Name": "Cap", "Warehouse": "Oyarifa Retail Store", "Current Stock": 100, "Selling Price": 1},
    )

    response = client.get("/api/warehouses/az-bulk")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert body["warehouse_filter"] == "A-Z Bulk Warehouse"
    assert body["table_name"] == "Finished Goods"
    assert body["total_value"] == 45


def test_unfiltered_raw_material_warehouse(client, login, airtable):
    login(UserRole.VIEWER)
    airtable.seed("Raw Materials", {"Material Name": "Resin"}, {"Material Name": "Caps"})

    body = client.get("/api/warehouses/raw-material").json()
    assert body["count"] == 2
    assert body["warehouse_filter"] == "All"
    assert "total_value" not in body


def test_invalid_warehouse_type(client, login, airtable):
    login(UserRole.VIEWER)
    response = client.get("/api/warehouses/basement")
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid warehouse type: basement"


def test_raw_material_routes_read_raw_materials_table(client, login, airtable):
    login(UserRole.VIEWER)
    airtable.seed(
        "Raw Materials",
        {"Material Name": "Resin", "Warehouse": "General Warehouse"},
        {"Material Name": "Caps", "Warehouse": "Oyarifa Retail Store"},
    )

    assert client.get("/api/raw-materials/").json()["count"] == 2
    assert client.get("/api/warehouses/raw-material").json()["count"] == 2
    general = client.get("/api/warehouses/general").json()
    assert [row["material_name"] for row in general["data"]] == ["Resin"]
    assert general["table_name"] == "Raw Materials"

    assert [call[1] for call in airtable.calls] == ["Raw Materials"] * 3
