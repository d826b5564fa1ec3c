# share_core/vandermonde.py
from typing import List, Sequence

from .errors import PreconditionViolation
from .field import check_modulus, mod_pow, mod_mul, mod_sub, mod_inverse


def validate_points(points: Sequence[int], p: int) -> List[int]:
    """求值点必须非零且两两不同（mod p），否则 Vandermonde 矩阵不可逆"""
    check_modulus(p)
    if len(points) == 0:
        raise PreconditionViolation("need at least one evaluation point")
    reduced = [x % p for x in points]
    seen = set()
    for i, x in enumerate(reduced):
        if x == 0:
            raise PreconditionViolation(f"evaluation point #{i} is 0 mod p")
        if x in seen:
            raise PreconditionViolation(f"evaluation point #{i} collides with an earlier one")
        seen.add(x)
    return reduced


def generate_vandermonde(eval_point: int, k: int, p: int) -> List[int]:
    """[x^0, x^1, ..., x^(k-1)] mod p —— 在 x 处求 k-1 次多项式用的权重"""
    check_modulus(p)
    if k < 1:
        raise PreconditionViolation(f"threshold must be >= 1, got {k}")
    return [mod_pow(eval_point, i, p) for i in range(k)]


def generate_vandermonde_inverse(points: Sequence[int], p: int) -> List[int]:
    """
    计算 x=0 处的拉格朗日系数 λ_i，顺序与 points 一致：
        λ_i = Π_{m≠i} x_m / (x_m - x_i)   (mod p)
    Σ λ_i * f(x_i) = f(0)
    """
    xs = validate_points(points, p)
    weights: List[int] = []
    for i, xi in enumerate(xs):
        w = 1
        for m, xm in enumerate(xs):
            if m == i:
                continue
            term = mod_mul(xm, mod_inverse(mod_sub(xm, xi, p), p), p)
            w = mod_mul(term, w, p)
        weights.append(w)
    return weights
