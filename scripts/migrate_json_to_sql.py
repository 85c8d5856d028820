"""One-off migration script: JSON snapshots (DATA_DIR) -> SQL backend (DATABASE_URL).

Records keep their original timestamps; ids are reassigned by the database.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the eventdesk package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from eventdesk.core.config import get_settings  # noqa: E402
from eventdesk.db.models import FeedbackRow, RegistrationRow  # noqa: E402
from eventdesk.db.session import get_session  # noqa: E402
from eventdesk.domain.records import EntityType, utc_now  # noqa: E402
from eventdesk.repositories.json_storage import JsonRecordStore  # noqa: E402
from eventdesk.repositories.sql_repository import SQLRecordStore  # noqa: E402


def migrate(data_dir: str, database_url: str) -> tuple[int, int]:
    source = JsonRecordStore(data_dir)
    target = SQLRecordStore(database_url)
    target.init_schema()

    registrations = source.find_all(EntityType.REGISTRATIONS)
    feedbacks = source.find_all(EntityType.FEEDBACKS)
    with get_session(database_url) as session:
        for reg in registrations:
            session.add(
                RegistrationRow(
                    first_name=reg.first_name,
                    last_name=reg.last_name,
                    email=reg.email,
                    phone=reg.phone,
                    location=reg.location,
                    gender=reg.gender,
                    channel=reg.channel,
                    interests=list(reg.interests),
                    other_interest=reg.other_interest,
                    consent=reg.consent,
                    timestamp=reg.timestamp or utc_now(),
                )
            )
        for fb in feedbacks:
            session.add(
                FeedbackRow(
                    feedback1=fb.feedback1,
                    feedback2=fb.feedback2,
                    rating=fb.rating,
                    timestamp=fb.timestamp or utc_now(),
                )
            )
        session.commit()
    target.close()
    return len(registrations), len(feedbacks)


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Copy JSON snapshots into the SQL backend.")
    parser.add_argument("--data-dir", default=settings.data_dir)
    parser.add_argument("--database-url", default=settings.database_url)
    args = parser.parse_args()
    if not args.database_url:
        raise SystemExit("DATABASE_URL (or --database-url) is required.")
    regs, fbs = migrate(args.data_dir, args.database_url)
    print(f"Migrated {regs} registrations and {fbs} feedbacks.")


if __name__ == "__main__":
    main()
