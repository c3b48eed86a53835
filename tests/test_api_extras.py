import unittest
import salesage.api.server as server
from salesage.api.server import app, OUTBOX

class TestAPIExtras(unittest.TestCase):
    def setUp(self):
        app.testing = True
        # Clear API key and rate limiter state to avoid cross-test leakage
        app.config['API_KEY'] = None
        app.config['EMAIL_SEND_DELAY_SEC'] = 0
        server._recent.clear()
        OUTBOX.clear()
        self.client = app.test_client()

    def tearDown(self):
        app.config['RATE_LIMIT_N'] = 0
        app.config['API_KEY'] = None

    def test_rejections_are_logged(self):
        with self.assertLogs("salesage.api.server", level="INFO") as logs:
            rv = self.client.post('/forecast', json={'initial_sales': 0})
        self.assertEqual(rv.status_code, 400)
        self.assertIn("initial_sales", logs.output[0])

    def test_openapi_endpoint(self):
        rv = self.client.get('/openapi.json')
        self.assertEqual(rv.status_code, 200)
        spec = rv.get_json()
        self.assertIn('openapi', spec)
        self.assertIn('/forecast', spec.get('paths', {}))

    def test_rate_limit_email(self):
        app.config['RATE_LIMIT_N'] = 1
        app.config['RATE_LIMIT_WINDOW_SEC'] = 1.0
        rv1 = self.client.post('/forecast/email', json={'to': 'a@example.com'})
        self.assertEqual(rv1.status_code, 200)
        rv2 = self.client.post('/forecast/email', json={'to': 'b@example.com'})
        self.assertEqual(rv2.status_code, 429)
        self.assertEqual(rv2.get_json().get('error'), 'rate_limited')
        self.assertIn('Retry-After', rv2.headers)
        # calculation itself is not rate limited
        rv3 = self.client.post('/forecast', json={})
        self.assertEqual(rv3.status_code, 200)

    def test_auth_api_key(self):
        app.config['API_KEY'] = 'secret'
        rv = self.client.post('/forecast', json={})
        self.assertEqual(rv.status_code, 401)
        rv2 = self.client.post('/forecast', json={}, headers={'X-API-Key': 'secret'})
        self.assertEqual(rv2.status_code, 200)
        # openapi stays public
        rv3 = self.client.get('/openapi.json')
        self.assertEqual(rv3.status_code, 200)

if __name__ == '__main__':
    unittest.main()
