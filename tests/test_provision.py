import pytest
from sqlalchemy import create_engine, inspect

from app import provision


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'provision.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    return url


def table_names(url):
    engine = create_engine(url)
    try:
        return set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_missing_environment_exits_with_error(monkeypatch, capsys):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("SECRET_KEY", "test-secret")

    with pytest.raises(SystemExit) as exc:
        provision.main(["setup"])

    assert exc.value.code == 1
    assert "DATABASE_URL" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [[], ["migrate"]])
def test_unknown_command_prints_usage(argv, capsys):
    with pytest.raises(SystemExit):
        provision.main(argv)
    assert "academic-provision" in capsys.readouterr().out


def test_setup_and_reset(database_url):
    provision.main(["setup"])
    tables = table_names(database_url)
    assert {"users", "groups", "lessons", "attendance", "final_grades", "survey_responses"} <= tables

    provision.main(["reset"])
    assert table_names(database_url) == set()

    provision.main(["reset-setup"])
    assert "teacher_assignments" in table_names(database_url)
