# dshare/config.py
# -*- coding: utf-8 -*-
"""
环境变量配置（.env 由 python-dotenv 加载，已存在的环境变量优先）

  SHARE_PRIME=0xfffffffffffc001   # 素数域模数（十进制或 0x 十六进制）
  SHARE_PARTIES=10                # 参与方数量 N
  SHARE_THRESHOLD=7               # 重建门限 k
  SHARE_BACKEND=scalar            # scalar|ring|point
  SHARE_RING_DEGREE=64            # ring 后端多项式长度
  SHARE_WORKERS=1                 # 分发/聚合线程数
  SHARE_SEED=                     # 留空用系统随机源；否则使用带密钥 PRNG（可复现）
  SERVER_HOST=127.0.0.1
  SERVER_PORT=8000
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv, find_dotenv

from .share_core.field import DEFAULT_PRIME
from .share_core.prng import KeyedPRNG, SystemRNG


def _load_dotenv():
    path = find_dotenv(usecwd=True)
    if path:
        load_dotenv(path)
    return path


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise ValueError(f"env {name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    prime: int = DEFAULT_PRIME
    parties: int = 10
    threshold: int = 7
    backend: str = "scalar"
    ring_degree: int = 64
    workers: int = 1
    seed: Optional[str] = None
    host: str = "127.0.0.1"
    port: int = 8000

    def rng(self):
        return KeyedPRNG(self.seed) if self.seed else SystemRNG()


def load_settings() -> Settings:
    _load_dotenv()
    return Settings(
        prime=_int_env("SHARE_PRIME", DEFAULT_PRIME),
        parties=_int_env("SHARE_PARTIES", 10),
        threshold=_int_env("SHARE_THRESHOLD", 7),
        backend=os.getenv("SHARE_BACKEND", "scalar").strip().lower() or "scalar",
        ring_degree=_int_env("SHARE_RING_DEGREE", 64),
        workers=_int_env("SHARE_WORKERS", 1),
        seed=os.getenv("SHARE_SEED", "").strip() or None,
        host=os.getenv("SERVER_HOST", "127.0.0.1"),
        port=_int_env("SERVER_PORT", 8000),
    )
