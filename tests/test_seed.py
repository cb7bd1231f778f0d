import unittest

from faker import Faker

from sharehub import models
from sharehub.seed import chunk_list, seed_demo_data

from .base import ApiTestCase


class SeedTests(ApiTestCase):
    def test_seed_keeps_graph_consistent(self):
        db = self.app.state.session_factory()
        try:
            counts = seed_demo_data(db, num_users=6, posts_per_user=2,
                                    follows_per_user=3, fake=Faker())
            users = db.query(models.User).all()
            self.assertEqual(counts, {"users": 6, "posts": 12, "follows": 18})
            self.assertEqual(db.query(models.Post).count(), 12)
            self.assertEqual(sum(u.followers for u in users), 18)
            self.assertEqual(sum(u.following for u in users), 18)
            for user in users:
                self.assertNotIn(user.id, user.following_list)
                self.assertEqual(user.following, len(user.following_list))
                self.assertEqual(user.followers, len(user.followers_list))
        finally:
            db.close()

        posts = self.client.get("/api/posts").json()
        self.assertTrue(all(p["author"] is not None for p in posts))

    def test_chunk_list(self):
        self.assertEqual(chunk_list([1, 2, 3, 4, 5], 2), [[1, 2], [3, 4], [5]])


if __name__ == "__main__":
    unittest.main()
