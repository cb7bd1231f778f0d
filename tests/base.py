import shutil
import tempfile
import unittest

from faker import Faker
from fastapi.testclient import TestClient

from sharehub.core.config import Settings
from sharehub.main import create_app


class ApiTestCase(unittest.TestCase):
    """Fresh app per test: in-memory SQLite and a temporary upload dir."""

    def setUp(self):
        self.upload_dir = tempfile.mkdtemp(prefix="sharehub-uploads-")
        self.settings = Settings(
            DATABASE_URL=self.database_url(),
            UPLOAD_DIR=self.upload_dir,
            SECRET_KEY="test-secret",
        )
        self.app = create_app(self.settings)
        self.client = TestClient(self.app)
        self.fake = Faker()
        Faker.seed(1234)

    def database_url(self):
        return "sqlite://"

    def tearDown(self):
        self.app.state.engine.dispose()
        shutil.rmtree(self.upload_dir, ignore_errors=True)

    def register(self, username=None, email=None):
        response = self.client.post(
            "/api/register",
            json={
                "username": username or self.fake.user_name(),
                "email": email or self.fake.unique.email(),
            },
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def auth(self, token):
        return {"Authorization": f"Bearer {token}"}

    def upload(self, token, author_id, files=None, **fields):
        data = {
            "title": "Pack",
            "description": "A pack",
            "tags": '["art", "3d"]',
            "price": "9.5",
            "authorId": author_id,
            "type": "model",
        }
        data.update(fields)
        if files is None:
            files = [("files", ("model.obj", b"v 0 0 0", "text/plain"))]
        return self.client.post(
            "/api/content", data=data, files=files or None, headers=self.auth(token)
        )
