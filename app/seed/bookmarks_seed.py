"""
Dev 환경용 Mock bookmarks 데이터 생성 스크립트.

지정한 사용자(owner)마다 북마크 데이터를 생성합니다.
엔티티 검증(build_new_bookmark)을 그대로 거치므로 API로 만든 것과 같은 형태입니다.
"""
from __future__ import annotations
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Sequence
from pymongo.database import Database
from faker import Faker

from app.core.settings import settings
from app.models.bookmark import build_new_bookmark

logger = logging.getLogger(__name__)

fake = Faker()
NUM_BOOKMARKS_PER_OWNER = 20


def fake_bookmark_payload() -> dict:
    """
    랜덤 북마크 입력값.

    - content: 50% 확률로 생략 (description으로 채워짐)
    - image / published_at: 50% 확률로 null
    """
    domain = fake.domain_name()
    payload = {
        "title": fake.sentence(nb_words=6).rstrip("."),
        "description": fake.paragraph(nb_sentences=2),
        "url": f"https://{domain}/{fake.slug()}",
        "image": fake.image_url() if random.random() > 0.5 else None,
        "published_at": (
            fake.date_time_between(start_date="-180d", tzinfo=timezone.utc)
            if random.random() > 0.5 else None
        ),
        "source": {"name": fake.company(), "url": f"https://{domain}"},
    }
    if random.random() > 0.5:
        payload["content"] = fake.paragraph(nb_sentences=5)
    return payload


def seed_bookmarks(
    db: Database,
    owners: Sequence[str],
    count: int = NUM_BOOKMARKS_PER_OWNER,
) -> int:
    """
    owner별로 count개의 mock bookmarks를 생성합니다.

    Returns:
        생성된 bookmarks 개수
    """
    if not owners:
        logger.error("❌ No owners given. Nothing to seed.")
        return 0

    bookmarks_coll = db[settings.mongo_bookmarks_collection]
    existing_count = bookmarks_coll.count_documents({})
    logger.info(f"Existing bookmarks: {existing_count}")

    bookmarks = []
    now = datetime.now(timezone.utc)

    for owner in owners:
        for _ in range(count):
            # 랜덤 created_at (최근 6개월)
            created_at = now - timedelta(
                days=random.randint(0, 180), hours=random.randint(0, 23)
            )
            bookmarks.append(build_new_bookmark(owner, fake_bookmark_payload(), now=created_at))
        logger.info(f"Generated {count} bookmarks for owner {owner}")

    if bookmarks:
        result = bookmarks_coll.insert_many(bookmarks, ordered=False)
        logger.info(f"✅ Total {len(result.inserted_ids)} bookmarks created!")
        return len(result.inserted_ids)

    return 0
