import pytest
from sqlalchemy.exc import DisconnectionError, IntegrityError

from recipebox import crud, errors, models
from recipebox.importer import import_recipes, success_rate
from recipebox.models import decode_list


def record(title="A", **overrides):
    data = {
        "title": title,
        "ingredients": ["x"],
        "instructions": ["y"],
        "author": "Bob Smith",
        "prep_time": "N/A",
        "yield": "2 servings",
    }
    data.update(overrides)
    return data


def test_single_record_scenario(db, admin):
    result = import_recipes(db, admin, [record()])

    assert result.imported == 1
    assert result.failed == 0
    assert result.total == 1
    assert result.success_rate == 100.0
    assert result.failed_recipes == []

    recipe = db.query(models.Recipe).one()
    assert recipe.title == "A"
    assert recipe.author.email == "bob.smith@demo.com"
    assert recipe.prep_time == 30
    assert recipe.serving_size == 2
    assert recipe.status == models.RecipeStatus.PUBLISHED
    assert recipe.published_at is not None
    assert decode_list(recipe.ingredients) == ["x"]
    assert decode_list(recipe.steps) == ["y"]


def test_counts_with_failures(db, admin):
    payload = [
        record("one"),
        {"ingredients": ["x"], "instructions": ["y"]},
        record("three"),
        record("four", ingredients=[]),
        record("five"),
        record("   "),
        record("seven"),
    ]
    result = import_recipes(db, admin, payload)

    assert result.total == 7
    assert result.failed == 3
    assert result.imported == 4
    assert result.success_rate == round(4 / 7 * 100, 1) == 57.1
    assert db.query(models.Recipe).count() == 4


def test_failure_does_not_stop_later_records(db, admin):
    payload = [record("r1"), record("r2"), "not a record", record("r4"), record("r5")]
    result = import_recipes(db, admin, payload)

    assert result.imported == 4
    assert result.failed == 1
    assert result.failed_recipes[0].title is None
    titles = {r.title for r in db.query(models.Recipe).all()}
    assert titles == {"r1", "r2", "r4", "r5"}


def test_failure_captures_title_and_error(db, admin):
    result = import_recipes(db, admin, [record("broken", instructions=None)])
    failure = result.failed_recipes[0]
    assert failure.title == "broken"
    assert "instructions" in failure.error


def test_reported_failures_are_capped(db, admin):
    payload = [record(f"bad {i}", ingredients=[]) for i in range(25)]
    result = import_recipes(db, admin, payload, batch_size=7)

    assert result.failed == 25
    assert len(result.failed_recipes) == 10
    assert result.failed_recipes[0].title == "bad 0"
    assert result.success_rate == 0.0


def test_batching_does_not_change_totals(db, admin):
    payload = [record(f"r{i}") for i in range(12)]
    result = import_recipes(db, admin, payload, batch_size=5)
    assert result.imported == 12
    assert db.query(models.Recipe).count() == 12


def test_reimport_duplicates_recipes_but_not_authors(db, admin):
    payload = [record("A"), record("B", author="Bob  Smith")]
    import_recipes(db, admin, payload)
    import_recipes(db, admin, payload)

    assert db.query(models.Recipe).count() == 4
    assert db.query(models.User).filter(models.User.email == "bob.smith@demo.com").count() == 1


def test_author_object_and_missing_author(db, admin):
    payload = [
        record("with object", author={"name": "Ann Lee", "email": "ann.lee@demo.com"}),
        record("anonymous", author=None),
    ]
    result = import_recipes(db, admin, payload)
    assert result.imported == 2
    emails = {r.title: r.author.email for r in db.query(models.Recipe).all()}
    assert emails == {"with object": "ann.lee@demo.com", "anonymous": "unknown@demo.com"}


def test_numeric_fields_and_thumbnail(db, admin):
    import_recipes(db, admin, [record(
        "numbers", prep_time=15, **{"yield": 3.5},
        thumbnail_image="https://img.example/1.jpg", cook_time="2 hours",
    )])
    recipe = db.query(models.Recipe).one()
    assert recipe.prep_time == 15
    assert recipe.serving_size == 4
    assert recipe.image == "https://img.example/1.jpg"


def test_empty_payload(db, admin):
    result = import_recipes(db, admin, [])
    assert result.total == 0
    assert result.success_rate == 0.0


def test_non_array_payload_is_rejected(db, admin):
    with pytest.raises(errors.ValidationError):
        import_recipes(db, admin, {"title": "A"})


@pytest.mark.parametrize("who", ["anonymous", "member"])
def test_requires_admin(db, member, who):
    actor = None if who == "anonymous" else member
    with pytest.raises(errors.AuthorizationError):
        import_recipes(db, actor, [record()])
    assert db.query(models.Recipe).count() == 0


def test_success_rate_rounding():
    assert success_rate(2, 3) == 66.7
    assert success_rate(0, 0) == 0.0


def test_constraint_error_on_one_record_is_captured(db, admin, monkeypatch):
    original = crud.create_recipe

    def create_recipe(db, **fields):
        if fields["title"] == "r3":
            raise IntegrityError("INSERT INTO recipes", {}, Exception("constraint failed"))
        return original(db, **fields)

    monkeypatch.setattr(crud, "create_recipe", create_recipe)
    payload = [record(f"r{i}") for i in range(1, 6)]
    result = import_recipes(db, admin, payload)

    assert result.imported == 4
    assert result.failed == 1
    assert result.failed_recipes[0].title == "r3"
    assert "constraint failed" in result.failed_recipes[0].error
    titles = {r.title for r in db.query(models.Recipe).all()}
    assert titles == {"r1", "r2", "r4", "r5"}


def test_lost_database_connection_aborts_import(db, admin, monkeypatch):
    original = crud.create_recipe

    def create_recipe(db, **fields):
        if fields["title"] == "r2":
            raise DisconnectionError("connection lost")
        return original(db, **fields)

    monkeypatch.setattr(crud, "create_recipe", create_recipe)
    with pytest.raises(errors.StorageError):
        import_recipes(db, admin, [record(f"r{i}") for i in range(1, 5)])
    # records persisted before the outage stay
    assert [r.title for r in db.query(models.Recipe).all()] == ["r1"]
