"""
Dev 환경용 Mock 데이터 생성 CLI 스크립트.

MongoDB bookmarks 컬렉션에 mock 데이터를 삽입합니다.
- dev 환경에서만 실행됩니다.
- --print-token 으로 각 owner의 dev용 Bearer 토큰을 출력할 수 있습니다.

사용 예시:
    python run_seed.py --owners alice bob
    python run_seed.py --owners alice --count 50
    python run_seed.py --owners alice --print-token
    python run_seed.py --owners alice --force  # dev 환경 체크 무시
"""
from __future__ import annotations
import argparse
import logging
import sys

from app.core.logging_config import setup_logging
from app.core.security import create_access_token
from app.core.settings import settings
from app.db.mongodb import close_mongo, ensure_indexes, init_mongo
from app.seed.bookmarks_seed import NUM_BOOKMARKS_PER_OWNER, seed_bookmarks

logger = logging.getLogger(__name__)


def check_environment(force: bool = False) -> None:
    """
    dev 환경인지 확인합니다.
    """
    app_env = settings.app_env.lower()

    if app_env != "dev" and not force:
        logger.error(
            f"❌ Current environment is '{app_env}'. "
            "Mock data seeding is only allowed in 'dev' environment."
        )
        logger.info("If you want to run anyway, use --force flag.")
        sys.exit(1)

    if force and app_env != "dev":
        logger.warning(f"⚠️ Force mode enabled. Seeding in '{app_env}' environment...")
    else:
        logger.info(f"✅ Environment check passed: {app_env}")


def positive_int(value: str) -> int:
    """argparse type: 1 이상의 정수만 허용"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return number


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Dev 환경용 Mock 북마크 생성 CLI"
    )
    parser.add_argument(
        "--owners",
        nargs="+",
        required=True,
        help="북마크를 만들 사용자 식별자 (복수 가능)",
    )
    parser.add_argument(
        "--count",
        type=positive_int,
        default=NUM_BOOKMARKS_PER_OWNER,
        help=f"owner당 생성 개수 (기본값: {NUM_BOOKMARKS_PER_OWNER})",
    )
    parser.add_argument(
        "--print-token",
        action="store_true",
        help="owner별 dev용 Bearer 토큰 출력",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="dev 환경 체크 무시 (위험: 주의해서 사용)",
    )

    args = parser.parse_args(argv)
    setup_logging()

    # 환경 체크
    check_environment(force=args.force)

    client, db = init_mongo(settings)
    try:
        ensure_indexes(db, settings)
        seed_bookmarks(db, args.owners, args.count)
    except Exception as e:
        logger.error(f"❌ Error during MongoDB seeding: {e}")
        raise
    finally:
        close_mongo(client)

    if args.print_token:
        for owner in args.owners:
            print(f"{owner}\t{create_access_token({'sub': owner})}")


if __name__ == "__main__":
    main()
