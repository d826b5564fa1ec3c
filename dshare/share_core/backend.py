# share_core/backend.py
"""
“秘密元素”的代数后端。

分享核心只依赖一个加法群：zero / add / mul_scalar（域标量乘群元素）。
这里给出三种实现：
  - ScalarBackend: 元素就是 GF(p) 里的标量
  - RingBackend:   元素是 GF(p) 上长度为 degree 的系数向量（格密码私钥的形状）
  - PointBackend:  元素是 secp256k1 上的点，在指数上做分享（p 必须是曲线阶 n）
"""
from typing import Optional, Sequence, Tuple

from coincurve import PublicKey

from .errors import PreconditionViolation
from .field import check_modulus, mod_add, mod_mul
from .prng import SystemRNG

# secp256k1 曲线阶
SECP_N = int("0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16)


class Backend:
    """Additive group over GF(prime). Subclasses implement the four primitives."""
    name = "abstract"

    def __init__(self, prime: int):
        self.prime = check_modulus(prime)

    def zero(self):
        raise NotImplementedError

    def add(self, a, b):
        raise NotImplementedError

    def mul_scalar(self, scalar: int, a):
        raise NotImplementedError

    def sample(self, rng=None):
        raise NotImplementedError

    def equal(self, a, b) -> bool:
        return a == b

    def sum(self, elements):
        acc = self.zero()
        for e in elements:
            acc = self.add(acc, e)
        return acc

    def weighted_sum(self, scalars: Sequence[int], elements: Sequence):
        """Σ scalars[i] * elements[i]"""
        if len(scalars) != len(elements):
            raise PreconditionViolation(
                f"got {len(scalars)} scalars for {len(elements)} elements")
        acc = self.zero()
        for s, e in zip(scalars, elements):
            acc = self.add(acc, self.mul_scalar(s, e))
        return acc


class ScalarBackend(Backend):
    name = "scalar"

    def zero(self) -> int:
        return 0

    def add(self, a: int, b: int) -> int:
        return mod_add(a, b, self.prime)

    def mul_scalar(self, scalar: int, a: int) -> int:
        return mod_mul(scalar, a, self.prime)

    def sample(self, rng=None) -> int:
        rng = rng or SystemRNG()
        return rng.randbelow(self.prime)


class RingPoly:
    """GF(p)[X] 里的多项式，只存系数（低次在前），不可变"""
    __slots__ = ("coeffs",)

    def __init__(self, coeffs):
        self.coeffs: Tuple[int, ...] = tuple(coeffs)

    def __eq__(self, other):
        return isinstance(other, RingPoly) and self.coeffs == other.coeffs

    def __hash__(self):
        return hash(self.coeffs)

    def __len__(self):
        return len(self.coeffs)

    def __repr__(self):
        head = ", ".join(str(c) for c in self.coeffs[:4])
        more = ", ..." if len(self.coeffs) > 4 else ""
        return f"RingPoly([{head}{more}], degree={len(self.coeffs)})"


class RingBackend(Backend):
    name = "ring"

    def __init__(self, prime: int, degree: int = 64):
        super().__init__(prime)
        if degree < 1:
            raise PreconditionViolation(f"ring degree must be >= 1, got {degree}")
        self.degree = degree

    def _check(self, a: RingPoly):
        if len(a) != self.degree:
            raise PreconditionViolation(f"poly has {len(a)} coefficients, ring degree is {self.degree}")

    def zero(self) -> RingPoly:
        return RingPoly([0] * self.degree)

    def add(self, a: RingPoly, b: RingPoly) -> RingPoly:
        self._check(a)
        self._check(b)
        p = self.prime
        return RingPoly((x + y) % p for x, y in zip(a.coeffs, b.coeffs))

    def mul_scalar(self, scalar: int, a: RingPoly) -> RingPoly:
        self._check(a)
        p = self.prime
        s = scalar % p
        return RingPoly((s * x) % p for x in a.coeffs)

    def sample(self, rng=None) -> RingPoly:
        """三值私钥：每个系数取 {-1, 0, 1} mod p"""
        rng = rng or SystemRNG()
        p = self.prime
        return RingPoly((rng.randbelow(3) - 1) % p for _ in range(self.degree))


class PointBackend(Backend):
    """secp256k1 点；单位元用 None 表示（coincurve 无法表示无穷远点）"""
    name = "point"

    def __init__(self, prime: int = SECP_N):
        super().__init__(prime)
        if prime != SECP_N:
            raise PreconditionViolation("point backend only works over the secp256k1 group order")

    def zero(self) -> Optional[PublicKey]:
        return None

    def add(self, a: Optional[PublicKey], b: Optional[PublicKey]) -> Optional[PublicKey]:
        if a is None:
            return b
        if b is None:
            return a
        ca, cb = a.format(compressed=True), b.format(compressed=True)
        # 同一 x 坐标、y 奇偶相反：b == -a，和为无穷远点
        if ca[1:] == cb[1:] and ca[0] != cb[0]:
            return None
        return PublicKey.combine_keys([a, b])

    def mul_scalar(self, scalar: int, a: Optional[PublicKey]) -> Optional[PublicKey]:
        s = scalar % SECP_N
        if a is None or s == 0:
            return None
        return a.multiply(s.to_bytes(32, "big"))

    def lift(self, scalar: int) -> Optional[PublicKey]:
        """s -> s*G"""
        s = scalar % SECP_N
        if s == 0:
            return None
        return PublicKey.from_secret(s.to_bytes(32, "big"))

    def sample(self, rng=None) -> PublicKey:
        rng = rng or SystemRNG()
        return self.lift(rng.randbelow(SECP_N - 1) + 1)

    def equal(self, a, b) -> bool:
        if a is None or b is None:
            return a is None and b is None
        return a.format(compressed=True) == b.format(compressed=True)


# name -> factory(prime, ring_degree)；point 后端固定使用曲线阶，忽略传入的 prime
BACKENDS = {
    "scalar": lambda prime, ring_degree: ScalarBackend(prime),
    "ring": lambda prime, ring_degree: RingBackend(prime, ring_degree),
    "point": lambda prime, ring_degree: PointBackend(),
}


def make_backend(name: str, prime: int, ring_degree: int = 64) -> Backend:
    key = (name or "").strip().lower()
    factory = BACKENDS.get(key)
    if factory is None:
        raise PreconditionViolation(f"unknown backend {name!r}; expected one of {sorted(BACKENDS)}")
    return factory(prime, ring_degree)
