import unittest
import io
import zipfile

import salesage.api.server as server
from salesage.api.server import app, OUTBOX


class TestForecastAPI(unittest.TestCase):
    def setUp(self):
        app.testing = True
        app.config['API_KEY'] = None
        app.config['RATE_LIMIT_N'] = 0
        app.config['EMAIL_SEND_DELAY_SEC'] = 0
        server._recent.clear()
        OUTBOX.clear()
        self.client = app.test_client()
        self.payload = {"initial_sales": 100000, "growth_rate": 5, "timeframe": 3}

    def test_defaults(self):
        rv = self.client.get("/forecast/defaults")
        self.assertEqual(rv.status_code, 200)
        body = rv.get_json()
        self.assertEqual(body["timeframes"], [3, 6, 12, 24])
        self.assertEqual(body["growth_rate_range"], {"min": -10.0, "max": 50.0, "step": 0.5})
        self.assertEqual(body["timeframe"], 12)

    def test_post_forecast(self):
        rv = self.client.post("/forecast", json=self.payload)
        self.assertEqual(rv.status_code, 200)
        body = rv.get_json()
        self.assertEqual([p["value"] for p in body["result"]["points"]], [105000, 110250, 115763])
        self.assertAlmostEqual(body["result"]["total"], 331012.5)
        self.assertEqual(body["formatted"]["total"], "₹3,31,013")
        self.assertEqual(body["formatted"]["points"][0], {"label": "Month 1", "value": "₹1,05,000"})
        self.assertEqual(body["formatted"]["growth_rate"], "+5%")
        self.assertEqual(body["direction"], "Growth")
        self.assertEqual(body["message"], "Your 3-month sales forecast has been generated.")

    def test_post_forecast_uses_defaults(self):
        rv = self.client.post("/forecast", json={})
        self.assertEqual(rv.status_code, 200)
        self.assertEqual(len(rv.get_json()["result"]["points"]), 12)

    def test_decline_direction(self):
        rv = self.client.post("/forecast", json={"initialSales": 50000, "growthRate": -10, "timeframe": 4})
        self.assertEqual(rv.get_json()["direction"], "Decline")

    def test_invalid_input_400(self):
        rv = self.client.post("/forecast", json={"initial_sales": 0, "growth_rate": 5, "timeframe": 12})
        self.assertEqual(rv.status_code, 400)
        body = rv.get_json()
        self.assertEqual(body["error"], "invalid_input")
        self.assertEqual(body["field"], "initial_sales")
        self.assertEqual(body["message"], "Initial sales must be greater than zero.")

    def test_chart(self):
        rv = self.client.post("/forecast/chart?kind=bar", json=self.payload)
        self.assertEqual(rv.status_code, 200)
        fig = rv.get_json()
        self.assertEqual(fig["data"][0]["type"], "bar")
        rv2 = self.client.post("/forecast/chart?kind=pie", json=self.payload)
        self.assertEqual(rv2.status_code, 400)
        self.assertEqual(rv2.get_json()["error"], "unknown_chart_kind")

    def test_export_pdf(self):
        rv = self.client.post("/forecast/export/pdf", json=self.payload)
        self.assertEqual(rv.status_code, 200)
        self.assertEqual(rv.mimetype, "application/pdf")
        self.assertTrue(rv.data.startswith(b"%PDF"))
        self.assertIn('filename="Sales_Forecast_', rv.headers["Content-Disposition"])

    def test_export_csv_and_md(self):
        rv = self.client.post("/forecast/export/csv", json=self.payload)
        self.assertEqual(rv.status_code, 200)
        self.assertEqual(rv.mimetype, "text/csv")
        self.assertEqual(rv.get_data(as_text=True).splitlines()[0], "period,projected_sales,growth_rate")
        rv_md = self.client.post("/forecast/export/md", json=self.payload)
        self.assertEqual(rv_md.status_code, 200)
        self.assertIn("# Sales Forecast Report", rv_md.get_data(as_text=True))

    def test_export_errors(self):
        rv = self.client.post("/forecast/export/docx", json=self.payload)
        self.assertEqual(rv.status_code, 404)
        self.assertEqual(rv.get_json()["error"], "unknown_format")
        rv2 = self.client.post("/forecast/export/pdf", json={"initial_sales": -5})
        self.assertEqual(rv2.status_code, 400)
        self.assertEqual(rv2.get_json()["error"], "invalid_input")

    def test_export_zip(self):
        rv = self.client.post("/forecast/export.zip", json=self.payload)
        self.assertEqual(rv.status_code, 200)
        self.assertEqual(rv.mimetype, "application/zip")
        names = set(zipfile.ZipFile(io.BytesIO(rv.data)).namelist())
        self.assertEqual(names, {"report.pdf", "report.md", "forecast.csv", "summary.csv"})

    def test_email(self):
        rv = self.client.post("/forecast/email", json={**self.payload, "to": "team@example.com"})
        self.assertEqual(rv.status_code, 200)
        body = rv.get_json()
        self.assertEqual(body["message"], "The forecast report has been sent to team@example.com")
        self.assertEqual(body["subject"], "Your Sales Forecast Report for 3 Months")
        sent = OUTBOX.sent()
        self.assertEqual(len(sent), 1)
        self.assertIn("₹3,31,013", sent[0].request.message)

    def test_email_requires_recipient(self):
        rv = self.client.post("/forecast/email", json=self.payload)
        self.assertEqual(rv.status_code, 400)
        self.assertEqual(rv.get_json()["error"], "invalid_email")
        self.assertEqual(OUTBOX.sent(), [])

    def test_email_invalid_forecast_input(self):
        rv = self.client.post("/forecast/email", json={"to": "a@b.io", "initial_sales": 0})
        self.assertEqual(rv.status_code, 400)
        self.assertEqual(rv.get_json()["error"], "invalid_input")

    def test_email_non_string_recipient(self):
        rv = self.client.post("/forecast/email", json={"to": 123})
        self.assertEqual(rv.status_code, 400)
        self.assertEqual(rv.get_json()["error"], "invalid_email")
        rv2 = self.client.post("/forecast/email", json={"to": "a@b.io", "subject": 7})
        self.assertEqual(rv2.status_code, 400)
        self.assertEqual(OUTBOX.sent(), [])

    def test_non_object_body(self):
        for body in ([1, 2], "text", 42):
            rv = self.client.post("/forecast", json=body)
            self.assertEqual(rv.status_code, 400)
            self.assertEqual(rv.get_json()["error"], "invalid_input")
        rv = self.client.post("/forecast/email", json=["a@b.io"])
        self.assertEqual(rv.status_code, 400)

    def test_boolean_timeframe_rejected(self):
        rv = self.client.post("/forecast", json={"initial_sales": 1000, "growth_rate": 5, "timeframe": True})
        self.assertEqual(rv.status_code, 400)
        self.assertEqual(rv.get_json()["field"], "timeframe")

    def test_large_horizon(self):
        rv = self.client.post("/forecast", json={"initial_sales": 100000, "growth_rate": 50, "timeframe": 150})
        self.assertEqual(rv.status_code, 200)
        body = rv.get_json()
        self.assertEqual(len(body["result"]["points"]), 150)
        self.assertGreater(body["result"]["points"][-1]["value"], 10 ** 28)
        self.assertTrue(body["formatted"]["total"].startswith("₹"))


if __name__ == "__main__":
    unittest.main()
