# dshare/bench.py
# -*- coding: utf-8 -*-
"""
门限分享基准：N 个参与方各自当 dealer，生成合成 share，再用前 k 个重建并校验。

运行：
  SHARE_PARTIES=20 SHARE_THRESHOLD=15 SHARE_BACKEND=ring python -m dshare.bench
"""
import sys
import time
from datetime import timedelta

from .config import Settings, load_settings
from .share_core.backend import make_backend
from .share_core.errors import ShareError
from .share_core.session import Session, setup, distribute, aggregate, combine


def run_timed(fn) -> timedelta:
    start = time.perf_counter()
    fn()
    return timedelta(seconds=time.perf_counter() - start)


def run_timed_party(fn, n: int) -> timedelta:
    """总耗时按参与方均摊"""
    return run_timed(fn) / n


def run_bench(settings: Settings) -> bool:
    backend = make_backend(settings.backend, settings.prime, settings.ring_degree)
    n, k = settings.parties, settings.threshold
    rng = settings.rng()

    print(f"🧮 [bench] backend={backend.name} N={n} k={k} p={hex(backend.prime)} workers={settings.workers}")
    if backend.prime != settings.prime:
        print(f"⚠️ [bench] {backend.name} backend fixes its own modulus; SHARE_PRIME={hex(settings.prime)} ignored")
    print(f"🎲 [bench] randomness: {'keyed PRNG' if settings.seed else 'system'}")

    state = {}

    print("> Setup Phase")
    elapsed_setup = run_timed_party(
        lambda: state.update(parties=setup(n, k, backend, rng=rng)), n)
    print(f"\tdone (party: {elapsed_setup})")

    print("> Share Phase")
    elapsed_share = run_timed_party(
        lambda: state.update(table=distribute(state["parties"], backend, workers=settings.workers)), n)
    print(f"\tdone (party: {elapsed_share})")

    print("> Aggregate Phase")
    elapsed_agg = run_timed_party(
        lambda: state.update(shares=aggregate(state["table"], backend, workers=settings.workers)), n)
    state.pop("table")
    print(f"\tdone (party: {elapsed_agg})")

    session = Session(prime=backend.prime, threshold=k, backend=backend,
                      parties=combine(state["parties"], state["shares"]))

    print("> Reconstruct Phase")
    elapsed_recon = run_timed(lambda: state.update(recon=session.reconstruct(range(k))))
    print(f"\tdone (cloud: {elapsed_recon})")

    print("> Verify Phase")
    ok = backend.equal(state["recon"], session.global_secret())
    if ok:
        print("✅ [bench] reconstruction matches the global secret")
    else:
        print("❌ [bench] reconstruction does NOT match the global secret")

    print(f"> Finished (total cloud: {elapsed_recon}, total party: {elapsed_setup + elapsed_share + elapsed_agg})")
    return ok


def main() -> int:
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"❌ [bench] bad configuration: {e}")
        return 2
    try:
        ok = run_bench(settings)
    except ShareError as e:
        print(f"❌ [bench] {e}")
        return 2
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
