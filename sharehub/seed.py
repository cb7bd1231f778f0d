"""
Popula o banco com dados de demonstração (usuários, posts e follows).

    python -m sharehub.seed --users 50 --posts 10 --follows 5
"""
import argparse
import logging
import random
from datetime import datetime, timedelta
from typing import Optional

from faker import Faker
from sqlalchemy.orm import Session

from . import models
from .core.config import get_settings
from .database import make_engine, make_session_factory

logger = logging.getLogger(__name__)

BATCH_SIZE = 1000


def chunk_list(lst, chunk_size):
    """Divide uma lista em chunks de tamanho específico"""
    return [lst[i:i + chunk_size] for i in range(0, len(lst), chunk_size)]


def seed_demo_data(db: Session, num_users: int = 20, posts_per_user: int = 5,
                   follows_per_user: int = 3, fake: Optional[Faker] = None) -> dict:
    fake = fake or Faker()
    base_date = datetime.now() - timedelta(days=365)

    # 1. Usuários, com e-mails únicos
    users_data = [{
        "id": models.new_id(),
        "username": fake.user_name(),
        "email": f"{i}_{fake.unique.email()}",
        "avatar": "",
        "bio": fake.sentence(),
        "links": [fake.url()],
        "uploads": 0,
        "followers": 0,
        "following": 0,
        "total_likes": 0,
        "followers_list": [],
        "following_list": [],
    } for i in range(num_users)]

    # 2. Follows entre usuários distintos, mantendo listas e contadores
    by_id = {u["id"]: u for u in users_data}
    ids = list(by_id)
    total_follows = 0
    for user in users_data:
        others = [uid for uid in ids if uid != user["id"]]
        for target_id in random.sample(others, min(follows_per_user, len(others))):
            target = by_id[target_id]
            user["following_list"].append(target_id)
            user["following"] += 1
            target["followers_list"].append(user["id"])
            target["followers"] += 1
            total_follows += 1

    # 3. Posts
    posts_data = [{
        "id": models.new_id(),
        "text": fake.text(max_nb_chars=200),
        "author_id": user_id,
        "likes": 0,
        "created_at": int((base_date + timedelta(
            days=random.randint(0, 365),
            hours=random.randint(0, 23),
            minutes=random.randint(0, 59)
        )).timestamp() * 1000),
    } for user_id in ids for _ in range(posts_per_user)]

    try:
        for batch in chunk_list(users_data, BATCH_SIZE):
            db.bulk_insert_mappings(models.User, batch)
        for batch in chunk_list(posts_data, BATCH_SIZE):
            db.bulk_insert_mappings(models.Post, batch)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Gerados %d usuários, %d posts, %d follows",
                len(users_data), len(posts_data), total_follows)
    return {"users": len(users_data), "posts": len(posts_data), "follows": total_follows}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Gera dados de demonstração")
    parser.add_argument("--users", type=int, default=20)
    parser.add_argument("--posts", type=int, default=5, help="posts por usuário")
    parser.add_argument("--follows", type=int, default=3, help="follows por usuário")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    engine = make_engine(settings.DATABASE_URL)
    models.Base.metadata.create_all(bind=engine)
    db = make_session_factory(engine)()
    try:
        counts = seed_demo_data(db, args.users, args.posts, args.follows)
    finally:
        db.close()
    print(f"Geração de dados concluída: {counts}")


if __name__ == "__main__":
    main()
