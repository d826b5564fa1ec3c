# share_core/field.py
"""
素数域 GF(p) 上的标量运算。

Python 的 int 是任意精度的，所以不需要 64 位下的“不溢出乘法”技巧：
mod_mul 直接相乘再取模，契约不变（结果恰好是 a*b mod p）。
"""
from functools import lru_cache

import sympy

from .errors import PreconditionViolation, ArithmeticPrecondition

DEFAULT_PRIME = 0xfffffffffffc001  # 60-bit NTT 友好素数


@lru_cache(maxsize=32)
def _is_prime(p: int) -> bool:
    return bool(sympy.isprime(p))


def check_modulus(p: int) -> int:
    if isinstance(p, bool) or not isinstance(p, int):
        raise PreconditionViolation(f"modulus must be an int, got {type(p).__name__}")
    if p <= 2:
        raise PreconditionViolation(f"modulus must be a prime > 2, got {p}")
    if not _is_prime(p):
        raise PreconditionViolation(f"modulus {p} is not prime")
    return p


def mod_add(a: int, b: int, p: int) -> int:
    return (a + b) % p


def mod_sub(a: int, b: int, p: int) -> int:
    """(a - b) mod p，结果落在 [0, p)。两个操作数先各自约简，调用方无需保证 a < p。"""
    return (a % p - b % p) % p


def mod_mul(a: int, b: int, p: int) -> int:
    return ((a % p) * (b % p)) % p


def mod_pow(base: int, exponent: int, p: int) -> int:
    """base^exponent mod p；exponent == 0 时恒为 1（与 base 无关）"""
    if exponent < 0:
        raise PreconditionViolation(f"exponent must be >= 0, got {exponent}")
    res = 1
    b = base % p
    e = exponent
    while e > 0:
        if e & 1:
            res = mod_mul(res, b, p)
        b = mod_mul(b, b, p)
        e >>= 1
    return res


def mod_inverse(x: int, p: int) -> int:
    """扩展欧几里得求 x^{-1} mod p，返回 [1, p-1]"""
    x = x % p
    if x == 0:
        raise ArithmeticPrecondition("0 has no multiplicative inverse mod p")
    r0, r1 = p, x
    t0, t1 = 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        t0, t1 = t1, t0 - q * t1
    if r0 != 1:
        raise ArithmeticPrecondition(f"{x} is not invertible mod {p} (gcd={r0})")
    return t0 % p
