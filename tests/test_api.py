"""
Testes da API FastAPI
"""

import unittest

from fastapi.testclient import TestClient

from main import app


class TestApi(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_optimize_bars(self):
        response = self.client.post("/optimize/bars", json={
            "stock": [6000],
            "pieces": [{"length": 1000, "quantity": 10}],
            "options": {"stacking_mode": True},
        })
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["ok"])
        self.assertEqual([b["repeat_count"] for b in data["bars"]], [1, 1])
        self.assertEqual(data["summary"]["purchased_bars_count"], 2)

    def test_optimize_bars_infeasible(self):
        response = self.client.post("/optimize/bars", json={
            "stock": [{"length": 6000}],
            "pieces": [{"length": 7000, "quantity": 1}],
        })
        self.assertEqual(response.status_code, 422)
        self.assertIn("7000", response.json()["detail"])

    def test_optimize_bars_rejects_bad_rows(self):
        response = self.client.post("/optimize/bars", json={
            "stock": [6000],
            "pieces": [{"length": 1000, "quantity": 0}],
        })
        self.assertEqual(response.status_code, 422)

    def test_optimize_sheets(self):
        response = self.client.post("/optimize/sheets", json={
            "stocks": [{"id": "3x6", "name": "3x6", "width": 914, "height": 1829}],
            "rectangles": [{"width": 500, "height": 300, "quantity": 10}],
        })
        self.assertEqual(response.status_code, 200)
        placements = response.json()["placements"]
        self.assertEqual([p["made"] for p in placements], [9, 1])
        self.assertEqual(placements[0]["orientation"], "B")

    def test_estimate_plate(self):
        response = self.client.post("/estimate/plate", json={"width": 500, "height": 300, "quantity": 10})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]["stock_id"], "4x8")

        response = self.client.post("/estimate/plate", json={"width": 0, "height": 300, "quantity": 10})
        self.assertEqual(response.status_code, 422)

    def test_catalogs(self):
        self.assertEqual(self.client.get("/catalog/bars").json()["FB"], [5500, 6000])
        sheets = self.client.get("/catalog/sheets").json()
        self.assertEqual([s["id"] for s in sheets], ["3x6", "4x8", "5x10"])

        response = self.client.post("/catalog/sheets/normalize", json=[
            {"name": "b", "width": 2000, "height": 1000},
            {"name": "a", "width": 100, "height": 100},
        ])
        self.assertEqual([s["name"] for s in response.json()], ["a", "b"])


if __name__ == '__main__':
    unittest.main()
