"""Tests for configuration selection via APP_ENV."""
import importlib

import pytest


@pytest.fixture
def load_config(monkeypatch):
    import app.config as config_module

    def _load(env):
        for key, value in env.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)
        importlib.reload(config_module)
        return config_module
    yield _load
    monkeypatch.undo()
    importlib.reload(config_module)


def test_testing_config_uses_memory_db(load_config):
    cfg = load_config({'APP_ENV': 'testing'}).get_config_class()
    assert cfg.TESTING is True
    assert cfg.SQLALCHEMY_DATABASE_URI.startswith('sqlite://')
    assert cfg.RATELIMIT_ENABLED is False


def test_development_defaults(load_config):
    cfg = load_config({'APP_ENV': 'development', 'DATABASE_URL': None}).get_config_class()
    assert cfg.DEBUG is True
    assert cfg.SQLALCHEMY_DATABASE_URI == 'sqlite:///dev.db'
    assert cfg.CONTRIBUTION_OVERSHOOT_POLICY == 'accept'
    assert cfg.DELIVERY_FEE == 5000
    assert cfg.LEDGER_POLL_INTERVAL == 2.0


def test_production_requires_secrets(load_config):
    module = load_config({
        'APP_ENV': 'production',
        'SECRET_KEY': 's', 'DATABASE_URL': 'postgresql://db/roomcart', 'JWT_SECRET': 'j',
        'CARD_GATEWAY_KEY': None, 'UPI_WEBHOOK_SECRET': 'w',
    })
    with pytest.raises(RuntimeError) as exc:
        module.get_config_class()
    assert 'CARD_GATEWAY_KEY' in str(exc.value)


def test_production_rejects_unknown_overshoot_policy(load_config):
    module = load_config({
        'APP_ENV': 'production',
        'SECRET_KEY': 's', 'DATABASE_URL': 'postgresql://db/roomcart', 'JWT_SECRET': 'j',
        'CARD_GATEWAY_KEY': 'k', 'UPI_WEBHOOK_SECRET': 'w',
        'CONTRIBUTION_OVERSHOOT_POLICY': 'sometimes',
    })
    with pytest.raises(RuntimeError) as exc:
        module.get_config_class()
    assert 'CONTRIBUTION_OVERSHOOT_POLICY' in str(exc.value)


def test_production_config_selected(load_config):
    module = load_config({
        'APP_ENV': 'production',
        'SECRET_KEY': 's', 'DATABASE_URL': 'postgresql://db/roomcart', 'JWT_SECRET': 'j',
        'CARD_GATEWAY_KEY': 'k', 'UPI_WEBHOOK_SECRET': 'w',
        'CONTRIBUTION_OVERSHOOT_POLICY': 'cap',
    })
    cfg = module.get_config_class()
    assert cfg is module.ProductionConfig
    assert cfg.CONTRIBUTION_OVERSHOOT_POLICY == 'cap'
