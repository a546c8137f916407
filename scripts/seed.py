from recipebox import crud, models
from recipebox.db import SessionLocal, init_db

DEMO_USERS = [
    ('admin@demo.com', 'Admin User', models.Role.ADMIN),
    ('user@demo.com', 'Regular User', models.Role.USER),
]

DEMO_RECIPES = [
    {
        'title': 'Classic Spaghetti Carbonara',
        'ingredients': [
            '400g spaghetti',
            '200g pancetta or guanciale',
            '4 large eggs',
            '100g Pecorino Romano cheese',
            'Black pepper',
            'Salt',
        ],
        'steps': [
            'Bring a large pot of salted water to boil',
            'Cook spaghetti according to package directions',
            'While pasta cooks, fry pancetta until crispy',
            'Beat eggs with grated cheese and black pepper',
            'Drain pasta, reserving 1 cup pasta water',
            'Mix hot pasta with pancetta and fat',
            'Remove from heat and quickly stir in egg mixture',
            'Serve immediately with extra cheese and pepper',
        ],
        'prep_time': 30,
        'serving_size': 4,
    },
    {
        'title': 'Chocolate Chip Cookies',
        'ingredients': [
            '2 1/4 cups all-purpose flour',
            '1 tsp baking soda',
            '1 tsp salt',
            '1 cup butter, softened',
            '3/4 cup granulated sugar',
            '3/4 cup brown sugar',
            '2 large eggs',
            '2 tsp vanilla extract',
            '2 cups chocolate chips',
        ],
        'steps': [
            'Preheat oven to 375F (190C)',
            'Mix flour, baking soda, and salt in a bowl',
            'Cream butter and sugars until light and fluffy',
            'Beat in eggs one at a time, then vanilla',
            'Gradually blend in flour mixture',
            'Stir in chocolate chips',
            'Bake 9 to 11 minutes until golden brown',
        ],
        'prep_time': 15,
        'serving_size': 48,
    },
]


def seed_users(db):
    """Create the demo accounts if missing. Returns the number created."""
    created = 0
    for email, name, role in DEMO_USERS:
        exists = (
            db.query(models.User)
            .filter(models.User.email == email)
            .first()
        )
        if exists:
            continue
        db.add(models.User(email=email, name=name, role=role))
        created += 1
    db.commit()
    return created


def seed_recipes(db):
    """Publish the demo recipes under the admin account on an empty database."""
    if crud.count_recipes(db):
        return 0
    admin = crud.get_user_by_email(db, DEMO_USERS[0][0])
    for data in DEMO_RECIPES:
        crud.create_recipe(
            db,
            author_id=admin.id,
            status=models.RecipeStatus.PUBLISHED,
            published_at=models.utcnow(),
            **data,
        )
    return len(DEMO_RECIPES)


def main():
    init_db()
    db = SessionLocal()
    try:
        users = seed_users(db)
        recipes = seed_recipes(db)
    finally:
        db.close()
    print(f'Created {users} demo user(s) and {recipes} recipe(s)')


if __name__ == '__main__':
    main()
