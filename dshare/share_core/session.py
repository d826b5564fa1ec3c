# share_core/session.py
"""
无可信分发者的 (N, k) 门限分享。

每个参与方都当一次 dealer：随机取 k 个秘密元素作为 k-1 次多项式的系数，
在所有参与方的求值点上求值（Vandermonde 向量加权求和）。每个接收方把
N 个 dealer 给它的份额相加，得到全局秘密（所有 dealer 常数项之和）的
Shamir share。任意 k 份 share 用拉格朗日系数即可重建。

    setup -> distribute -> aggregate -> reconstruct
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence, Tuple

from .backend import Backend
from .errors import PreconditionViolation
from .field import check_modulus
from .prng import SystemRNG
from .vandermonde import generate_vandermonde, generate_vandermonde_inverse, validate_points


@dataclass(frozen=True)
class Party:
    index: int
    eval_point: int
    coeffs: Tuple[Any, ...]          # dealer 多项式系数，低次在前；coeffs[0] 是自己的秘密
    share: Optional[Any] = None      # 聚合后的 Shamir share


@dataclass
class Session:
    prime: int
    threshold: int
    backend: Backend
    parties: List[Party] = field(default_factory=list)

    @property
    def eval_points(self) -> List[int]:
        return [pi.eval_point for pi in self.parties]

    def pairs(self, indices: Sequence[int]) -> List[Tuple[int, Any]]:
        """取若干参与方的 (求值点, share)，供 reconstruct 使用"""
        out = []
        for i in indices:
            pi = self.parties[i]
            if pi.share is None:
                raise PreconditionViolation(f"party {i} has no combined share yet")
            out.append((pi.eval_point, pi.share))
        return out

    def reconstruct(self, indices: Sequence[int]):
        return reconstruct(self.pairs(indices), self.threshold, self.backend)

    def global_secret(self):
        return global_secret(self.parties, self.backend)


# ---------------------------------------------------------------------------
# 校验
# ---------------------------------------------------------------------------
def validate_params(n: int, k: int, p: int):
    check_modulus(p)
    if k < 1:
        raise PreconditionViolation(f"threshold must be >= 1, got {k}")
    if k > n:
        raise PreconditionViolation(f"threshold {k} exceeds party count {n}")


def draw_eval_points(n: int, p: int, rng=None) -> List[int]:
    """n 个两两不同的非零随机点；碰撞或取到 0 就重抽"""
    check_modulus(p)
    if n > p - 1:
        raise PreconditionViolation(f"field of size {p} has fewer than {n} nonzero points")
    rng = rng or SystemRNG()
    points: List[int] = []
    seen = set()
    while len(points) < n:
        x = rng.randbelow(p)
        if x == 0 or x in seen:
            continue
        seen.add(x)
        points.append(x)
    return points


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------
def setup(n: int, k: int, backend: Backend, rng=None,
          eval_points: Optional[Sequence[int]] = None) -> List[Party]:
    p = backend.prime
    validate_params(n, k, p)
    rng = rng or SystemRNG()
    if eval_points is None:
        points = draw_eval_points(n, p, rng)
    else:
        if len(eval_points) != n:
            raise PreconditionViolation(f"got {len(eval_points)} evaluation points for {n} parties")
        points = validate_points(eval_points, p)

    parties: List[Party] = []
    for i in range(n):
        coeffs = tuple(backend.sample(rng) for _ in range(k))
        parties.append(Party(index=i, eval_point=points[i], coeffs=coeffs))
    return parties


# ---------------------------------------------------------------------------
# Distribution / Aggregation
# ---------------------------------------------------------------------------
def share_contribution(coeffs: Sequence, eval_point: int, backend: Backend):
    """dealer 的多项式在 eval_point 处的值：Σ coeffs[m] * x^m"""
    vandermonde = generate_vandermonde(eval_point, len(coeffs), backend.prime)
    return backend.weighted_sum(vandermonde, coeffs)


def distribute(parties: Sequence[Party], backend: Backend, workers: int = 1) -> List[List[Any]]:
    """N×N 份额表，table[dealer][recipient]"""
    n = len(parties)
    jobs = [(i, j) for i in range(n) for j in range(n)]

    def _one(job):
        i, j = job
        return share_contribution(parties[i].coeffs, parties[j].eval_point, backend)

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            flat = list(pool.map(_one, jobs))
    else:
        flat = [_one(job) for job in jobs]
    return [flat[i * n:(i + 1) * n] for i in range(n)]


def aggregate(table: Sequence[Sequence[Any]], backend: Backend, workers: int = 1) -> List[Any]:
    """每个接收方把自己那一列加起来"""
    n = len(table)
    for row in table:
        if len(row) != n:
            raise PreconditionViolation("share table must be N x N")

    def _column(j):
        return backend.sum(table[i][j] for i in range(n))

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(_column, range(n)))
    return [_column(j) for j in range(n)]


def share(dealer_coeffs: Sequence[Sequence], eval_points: Sequence[int], recipient: int, backend: Backend):
    """单个接收方的合成 share：Σ_i f_i(x_recipient)"""
    if len(dealer_coeffs) != len(eval_points):
        raise PreconditionViolation(
            f"got {len(dealer_coeffs)} dealers for {len(eval_points)} evaluation points")
    if not 0 <= recipient < len(eval_points):
        raise PreconditionViolation(f"recipient {recipient} out of range")
    x = eval_points[recipient]
    return backend.sum(share_contribution(c, x, backend) for c in dealer_coeffs)


def combine(parties: Sequence[Party], shares: Sequence[Any]) -> List[Party]:
    if len(parties) != len(shares):
        raise PreconditionViolation(f"got {len(shares)} shares for {len(parties)} parties")
    return [replace(pi, share=s) for pi, s in zip(parties, shares)]


# ---------------------------------------------------------------------------
# Reconstruction
# ---------------------------------------------------------------------------
def reconstruct(pairs: Sequence[Tuple[int, Any]], k: int, backend: Backend):
    """恰好 k 个 (求值点, share) —— Σ λ_i * share_i"""
    if len(pairs) != k:
        raise PreconditionViolation(f"reconstruction needs exactly {k} shares, got {len(pairs)}")
    points = [x for (x, _) in pairs]
    weights = generate_vandermonde_inverse(points, backend.prime)
    return backend.weighted_sum(weights, [s for (_, s) in pairs])


def global_secret(parties: Sequence[Party], backend: Backend):
    """所有 dealer 常数项之和，仅用于校验"""
    return backend.sum(pi.coeffs[0] for pi in parties)


def run_session(n: int, k: int, backend: Backend, rng=None, workers: int = 1,
                eval_points: Optional[Sequence[int]] = None) -> Session:
    parties = setup(n, k, backend, rng=rng, eval_points=eval_points)
    table = distribute(parties, backend, workers=workers)
    shares = aggregate(table, backend, workers=workers)
    return Session(prime=backend.prime, threshold=k, backend=backend,
                   parties=combine(parties, shares))
