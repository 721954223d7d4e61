import app.cli as cli


def test_upgrade_refused_in_production_without_opt_in(app, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.delenv("ALLOW_DB_MIGRATIONS", raising=False)
    called = []
    monkeypatch.setattr(cli, "alembic_upgrade", lambda: called.append(True))

    result = app.test_cli_runner().invoke(cli.db_upgrade_safe)
    assert result.exit_code != 0
    assert "ALLOW_DB_MIGRATIONS" in result.output
    assert called == []


def test_upgrade_runs_with_opt_in(app, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("ALLOW_DB_MIGRATIONS", "true")
    called = []
    monkeypatch.setattr(cli, "alembic_upgrade", lambda: called.append(True))

    result = app.test_cli_runner().invoke(cli.db_upgrade_safe)
    assert result.exit_code == 0
    assert "Database upgraded." in result.output
    assert called == [True]
