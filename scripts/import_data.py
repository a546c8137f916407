import argparse
import json
from pathlib import Path

from recipebox import crud
from recipebox.config import configure_logging
from recipebox.db import SessionLocal, init_db
from recipebox.importer import import_recipes
from recipebox.schemas import Actor

DEFAULT_FILE = Path(__file__).resolve().parents[1] / 'data' / 'recipes.json'


def main():
    parser = argparse.ArgumentParser(
        description='Bulk-import a JSON array of recipes as published.'
    )
    parser.add_argument('file', nargs='?', default=str(DEFAULT_FILE))
    parser.add_argument(
        '--admin', default='admin@demo.com',
        help='email of the admin account the import runs as',
    )
    args = parser.parse_args()

    configure_logging()
    init_db()
    p = Path(args.file)
    if not p.exists():
        print(f'{p} not found')
        return 1
    data = json.loads(p.read_text(encoding='utf-8'))

    db = SessionLocal()
    try:
        admin = crud.get_user_by_email(db, args.admin)
        if admin is None:
            print(f'admin {args.admin} not found; run scripts/seed.py first')
            return 1
        actor = Actor(user_id=admin.id, email=admin.email, role=admin.role)
        result = import_recipes(db, actor, data)
    finally:
        db.close()

    print(
        f'Imported {result.imported}/{result.total} recipes '
        f'({result.success_rate}% success, {result.failed} failed)'
    )
    for failure in result.failed_recipes:
        print(f'- {failure.title}: {failure.error}')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
