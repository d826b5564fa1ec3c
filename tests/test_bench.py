from datetime import timedelta

import pytest

from dshare import bench
from dshare.config import Settings


def test_run_timed_party_divides_by_party_count():
    calls = []
    elapsed = bench.run_timed_party(lambda: calls.append(1), 4)
    assert calls == [1]
    assert isinstance(elapsed, timedelta)


@pytest.mark.parametrize("backend", ["scalar", "ring", "point"])
def test_bench_round_trip(capsys, backend):
    settings = Settings(parties=4, threshold=3, backend=backend, ring_degree=4, seed="bench")
    assert bench.run_bench(settings) is True
    out = capsys.readouterr().out
    for phase in ("> Setup Phase", "> Share Phase", "> Aggregate Phase",
                  "> Reconstruct Phase", "> Verify Phase", "> Finished"):
        assert phase in out
    assert "matches the global secret" in out


def test_bench_threaded(capsys):
    settings = Settings(parties=5, threshold=3, workers=3, seed="threads")
    assert bench.run_bench(settings) is True


def test_main_reports_bad_parameters(clean_env, capsys):
    clean_env.setenv("SHARE_PARTIES", "2")
    clean_env.setenv("SHARE_THRESHOLD", "3")
    assert bench.main() == 2
    assert "exceeds party count" in capsys.readouterr().out


def test_main_success(clean_env):
    clean_env.setenv("SHARE_PARTIES", "4")
    clean_env.setenv("SHARE_THRESHOLD", "2")
    assert bench.main() == 0


def test_bench_reports_ignored_prime(capsys):
    settings = Settings(parties=3, threshold=2, backend="point", seed="notice")
    assert bench.run_bench(settings) is True
    assert "SHARE_PRIME" in capsys.readouterr().out


def test_bench_scalar_keeps_prime_quietly(capsys):
    settings = Settings(parties=3, threshold=2, seed="quiet")
    assert bench.run_bench(settings) is True
    assert "ignored" not in capsys.readouterr().out


def test_main_rejects_composite_prime(clean_env, capsys):
    clean_env.setenv("SHARE_PRIME", "15")
    clean_env.setenv("SHARE_PARTIES", "3")
    clean_env.setenv("SHARE_THRESHOLD", "2")
    assert bench.main() == 2
    assert "not prime" in capsys.readouterr().out
