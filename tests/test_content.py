import os
import unittest
from unittest import mock

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sharehub import models
from sharehub.storage import FileStore

from .base import ApiTestCase


class UploadTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.body = self.register()
        self.user_id = self.body["user"]["id"]
        self.token = self.body["token"]

    def test_upload_stores_files_and_counts(self):
        files = [
            ("files", ("model.obj", b"v 0 0 0", "text/plain")),
            ("files", ("model.mtl", b"newmtl a", "text/plain")),
            ("cover", ("cover.png", b"png-bytes", "image/png")),
            ("screenshots", ("shot1.png", b"s1", "image/png")),
        ]
        response = self.upload(self.token, self.user_id, files=files)
        self.assertEqual(response.status_code, 200, response.text)
        content = response.json()

        self.assertEqual(content["title"], "Pack")
        self.assertEqual(content["tags"], ["art", "3d"])
        self.assertEqual(content["price"], 9.5)
        self.assertEqual(content["type"], "model")
        self.assertEqual(content["authorId"], self.user_id)
        self.assertEqual(content["likes"], 0)
        self.assertEqual(content["downloads"], 0)
        self.assertEqual(content["likedBy"], [])
        self.assertEqual(len(content["filePaths"]), 2)
        self.assertEqual(len(content["screenshots"]), 1)
        self.assertTrue(content["thumbnail"].startswith("/uploads/"))
        self.assertTrue(content["thumbnail"].endswith("_cover.png"))

        served = self.client.get(content["filePaths"][0])
        self.assertEqual(served.status_code, 200)
        self.assertEqual(served.content, b"v 0 0 0")

        profile = self.client.get(f"/api/profile/{self.user_id}").json()
        self.assertEqual(profile["uploads"], 1)

    def test_upload_without_cover(self):
        response = self.upload(self.token, self.user_id)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["thumbnail"], "")
        self.assertEqual(response.json()["screenshots"], [])

    def test_same_filename_gets_distinct_paths(self):
        files = [
            ("files", ("same.bin", b"1", "application/octet-stream")),
            ("files", ("same.bin", b"2", "application/octet-stream")),
        ]
        content = self.upload(self.token, self.user_id, files=files).json()
        first, second = content["filePaths"]
        self.assertNotEqual(first, second)
        self.assertEqual(self.client.get(second).content, b"2")

    def test_invalid_author_creates_nothing(self):
        response = self.upload(self.token, "no-such-user")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "invalid author"})
        self.assertEqual(self.client.get("/api/content").json(), [])
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_files_are_required(self):
        response = self.upload(self.token, self.user_id, files=[])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "files required"})

    def test_tags_must_be_a_json_list(self):
        response = self.upload(self.token, self.user_id, tags="not json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "invalid tags"})

    def assert_nothing_stored(self, response):
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Content upload failed"})
        self.assertEqual(self.client.get("/api/content").json(), [])
        self.assertEqual(self.client.get(f"/api/profile/{self.user_id}").json()["uploads"], 0)
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_storage_failure_removes_written_files(self):
        real_save = FileStore.save
        calls = []

        def fail_on_second_file(store, upload):
            calls.append(upload.filename)
            if len(calls) == 2:
                raise OSError("disk full")
            return real_save(store, upload)

        files = [
            ("files", ("a.bin", b"a", "application/octet-stream")),
            ("files", ("b.bin", b"b", "application/octet-stream")),
        ]
        with mock.patch.object(FileStore, "save", autospec=True, side_effect=fail_on_second_file):
            response = self.upload(self.token, self.user_id, files=files)

        self.assertEqual(len(calls), 2)
        self.assert_nothing_stored(response)

    def test_commit_failure_rolls_back_and_removes_files(self):
        files = [
            ("files", ("a.bin", b"a", "application/octet-stream")),
            ("cover", ("c.png", b"c", "image/png")),
        ]
        with mock.patch.object(Session, "commit", side_effect=SQLAlchemyError("write failed")):
            response = self.upload(self.token, self.user_id, files=files)

        self.assert_nothing_stored(response)

    def test_upload_requires_auth(self):
        response = self.client.post(
            "/api/content",
            data={"authorId": self.user_id},
            files=[("files", ("a.txt", b"a", "text/plain"))],
        )
        self.assertEqual(response.status_code, 401)


class ListAndLikeTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.author = self.register()
        self.fan = self.register()
        response = self.upload(self.author["token"], self.author["user"]["id"])
        self.content = response.json()

    def like(self, token, content_id=None):
        return self.client.post(
            f"/api/content/{content_id or self.content['id']}/like",
            headers=self.auth(token),
        )

    def test_list_resolves_author(self):
        items = self.client.get("/api/content").json()
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["id"], self.content["id"])
        self.assertEqual(items[0]["author"]["id"], self.author["user"]["id"])

    def test_list_keeps_author_key_when_unresolved(self):
        db = self.app.state.session_factory()
        try:
            db.add(models.Content(title="orphan", author_id="gone", file_paths=["/uploads/x"]))
            db.commit()
        finally:
            db.close()

        items = {c["title"]: c for c in self.client.get("/api/content").json()}
        self.assertIn("author", items["orphan"])
        self.assertIsNone(items["orphan"]["author"])
        self.assertIsNotNone(items["Pack"]["author"])

    def test_like_is_idempotent(self):
        first = self.like(self.fan["token"])
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()["likes"], 1)
        self.assertEqual(first.json()["likedBy"], [self.fan["user"]["id"]])

        second = self.like(self.fan["token"])
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json()["likes"], 1)
        self.assertEqual(second.json()["likedBy"], [self.fan["user"]["id"]])

    def test_likes_from_different_users_add_up(self):
        self.like(self.fan["token"])
        response = self.like(self.author["token"])
        self.assertEqual(response.json()["likes"], 2)

    def test_like_unknown_content(self):
        response = self.like(self.fan["token"], content_id="missing")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "not found"})


if __name__ == "__main__":
    unittest.main()
