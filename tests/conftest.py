import pytest

ENV_VARS = [
    "SHARE_PRIME", "SHARE_PARTIES", "SHARE_THRESHOLD", "SHARE_BACKEND",
    "SHARE_RING_DEGREE", "SHARE_WORKERS", "SHARE_SEED", "SERVER_HOST", "SERVER_PORT",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """no inherited SHARE_* settings and no .env above the working directory"""
    for name in ENV_VARS:
        # setenv first so the var is restored even when a .env file sets it
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
