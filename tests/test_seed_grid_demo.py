import os
import unittest

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import decode_jwt
from app.data.grid_demo_seed import DEMO_NOTES, DEMO_USERS
from app.models.note import Note
from app.models.user import User
from app.scripts.issue_admin_token import issue_admin_token
from app.scripts.seed_grid_demo import upsert_notes, upsert_users


class GridDemoSeedTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite+pysqlite:///:memory:")
        User.__table__.create(bind=self.engine)
        Note.__table__.create(bind=self.engine)

    def tearDown(self):
        self.engine.dispose()

    def test_seed_is_idempotent(self):
        with Session(self.engine) as db:
            self.assertEqual(upsert_users(db, DEMO_USERS), (len(DEMO_USERS), 0))
            self.assertEqual(upsert_notes(db, DEMO_NOTES), len(DEMO_NOTES))

            self.assertEqual(upsert_users(db, DEMO_USERS), (0, 0))
            self.assertEqual(upsert_notes(db, DEMO_NOTES), 0)
            self.assertEqual(db.query(Note).count(), len(DEMO_NOTES))

    def test_seed_updates_changed_users(self):
        with Session(self.engine) as db:
            upsert_users(db, DEMO_USERS)
            changed = [dict(DEMO_USERS[0], name="Renamed")]
            self.assertEqual(upsert_users(db, changed), (0, 1))
            row = db.query(User).filter(User.username == DEMO_USERS[0]["username"]).one()
            self.assertEqual(row.name, "Renamed")


class IssueAdminTokenTests(unittest.TestCase):
    def test_token_carries_admin_role(self):
        token = issue_admin_token("ops@example.com", ttl_minutes=5)
        claims = decode_jwt(token, settings.ADMIN_JWT_SECRET)
        self.assertEqual(claims["role"], "ADMIN")
        self.assertEqual(claims["email"], "ops@example.com")


if __name__ == "__main__":
    unittest.main()
