# share_core/prng.py
import os
import secrets

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives import hashes

from .errors import PreconditionViolation

# ---- 带密钥的确定性随机源（HKDF + AES-CTR 密钥流） ----

def _kdf(seed: bytes, info: bytes = b"dshare-keyed-prng", length: int = 32) -> bytes:
    hkdf = HKDF(algorithm=hashes.SHA256(), length=length, salt=None, info=info)
    return hkdf.derive(seed)


class _RandBelow:
    def read(self, n: int) -> bytes:
        raise NotImplementedError

    def randbelow(self, bound: int) -> int:
        """[0, bound) 上的均匀整数；按位掩码后拒绝采样，无偏"""
        if bound <= 0:
            raise PreconditionViolation(f"bound must be positive, got {bound}")
        bits = bound.bit_length()
        nbytes = (bits + 7) // 8
        mask = (1 << bits) - 1
        while True:
            v = int.from_bytes(self.read(nbytes), "big") & mask
            if v < bound:
                return v


class KeyedPRNG(_RandBelow):
    """
    同一个 key 永远产生同一条字节流，用于可复现的基准会话。
    key 可以是 bytes 或 str（str 按 utf-8 编码）。
    """
    def __init__(self, key):
        if isinstance(key, str):
            key = key.encode("utf-8")
        if not key:
            raise PreconditionViolation("PRNG key must be non-empty")
        aes_key = _kdf(bytes(key))
        cipher = Cipher(algorithms.AES(aes_key), modes.CTR(b"\x00" * 16))
        self._stream = cipher.encryptor()

    def read(self, n: int) -> bytes:
        return self._stream.update(b"\x00" * n)


class SystemRNG(_RandBelow):
    """操作系统随机源"""
    def read(self, n: int) -> bytes:
        return os.urandom(n)

    def randbelow(self, bound: int) -> int:
        if bound <= 0:
            raise PreconditionViolation(f"bound must be positive, got {bound}")
        return secrets.randbelow(bound)
