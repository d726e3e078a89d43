from __future__ import annotations

from sqlalchemy.orm import Session

from app.data.grid_demo_seed import DEMO_NOTES, DEMO_USERS
from app.db.session import SessionLocal
from app.models.note import Note
from app.models.user import User


def upsert_users(db: Session, users: list[dict]) -> tuple[int, int]:
    created = 0
    updated = 0

    for item in users:
        username = str(item["username"]).strip()
        email = str(item["email"]).strip().lower()
        name = str(item.get("name") or "").strip() or None

        row = db.query(User).filter(User.username == username).first()
        if row is None:
            db.add(User(username=username, email=email, name=name))
            created += 1
            continue

        changed = False
        if row.email != email:
            row.email = email
            changed = True
        if row.name != name:
            row.name = name
            changed = True
        if changed:
            db.add(row)
            updated += 1

    db.commit()
    return created, updated


def upsert_notes(db: Session, notes: list[dict]) -> int:
    owners = {row.username: row.id for row in db.query(User).all()}
    created = 0
    for item in notes:
        owner_id = owners.get(str(item["owner"]))
        if owner_id is None:
            continue
        title = str(item["title"]).strip()
        exists = db.query(Note.id).filter(Note.owner_id == owner_id, Note.title == title).first()
        if exists is not None:
            continue
        db.add(Note(owner_id=owner_id, title=title, content=str(item["content"])))
        created += 1
    db.commit()
    return created


def main() -> None:
    db = SessionLocal()
    try:
        users_created, users_updated = upsert_users(db, DEMO_USERS)
        notes_created = upsert_notes(db, DEMO_NOTES)
    finally:
        db.close()
    print(f"grid demo seed done: users created={users_created} updated={users_updated}, notes created={notes_created}")


if __name__ == "__main__":
    main()
