import pytest

from dshare.config import Settings, load_settings
from dshare.share_core.field import DEFAULT_PRIME
from dshare.share_core.prng import KeyedPRNG, SystemRNG


def test_defaults(clean_env):
    s = load_settings()
    assert s == Settings()
    assert s.prime == DEFAULT_PRIME
    assert isinstance(s.rng(), SystemRNG)


def test_env_overrides(clean_env):
    clean_env.setenv("SHARE_PRIME", "0x40002001")
    clean_env.setenv("SHARE_PARTIES", "20")
    clean_env.setenv("SHARE_THRESHOLD", "15")
    clean_env.setenv("SHARE_BACKEND", " Ring ")
    clean_env.setenv("SHARE_SEED", "lattigo")
    s = load_settings()
    assert (s.prime, s.parties, s.threshold, s.backend) == (0x40002001, 20, 15, "ring")
    assert isinstance(s.rng(), KeyedPRNG)


def test_dotenv_file_is_loaded(clean_env, tmp_path):
    (tmp_path / ".env").write_text("SHARE_PARTIES=42\nSHARE_WORKERS=3\n")
    s = load_settings()
    assert s.parties == 42
    assert s.workers == 3


def test_bad_integer(clean_env):
    clean_env.setenv("SHARE_THRESHOLD", "three")
    with pytest.raises(ValueError):
        load_settings()
