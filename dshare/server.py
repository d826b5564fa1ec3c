# dshare/server.py
# -*- coding: utf-8 -*-
"""
门限分享服务（无状态，标量后端）：
- GET  /health
- POST /vandermonde  { "point": "0x..", "threshold": k }       -> { "powers": ["0x..", ...] }
- POST /lagrange     { "points": ["0x..", ...] }               -> { "weights": ["0x..", ...] }
- POST /session      { "parties": N, "threshold": k, "seed"? } -> { "points": [...], "shares": [...] }
- POST /reconstruct  { "threshold": k, "shares": [{"x": "0x..", "y": "0x.."}] } -> { "secret": "0x.." }

所有域元素都以 0x 十六进制字符串收发。

运行：
  uvicorn dshare.server:app --host 127.0.0.1 --port 8000
"""
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .config import load_settings
from .share_core.backend import ScalarBackend
from .share_core.errors import ShareError
from .share_core.prng import KeyedPRNG
from .share_core.session import run_session, reconstruct
from .share_core.vandermonde import generate_vandermonde, generate_vandermonde_inverse

settings = load_settings()

# 单次请求的规模上限（session 的开销是 N*N*k）
MAX_PARTIES = 256

app = FastAPI(title="Threshold Share Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"],
)


def _strip0x(s: str) -> str:
    return s[2:] if s.lower().startswith("0x") else s


def _h2i(h: str) -> int:
    try:
        return int(_strip0x(h.strip()), 16)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"invalid hex field element: {h!r}")


def _i2h(x: int) -> str:
    return hex(x)


# 请求/响应模型
class VandermondeReq(BaseModel):
    point: str
    threshold: int = Field(..., ge=1, le=MAX_PARTIES)

class VandermondeResp(BaseModel):
    powers: List[str]

class LagrangeReq(BaseModel):
    points: List[str] = Field(..., min_length=1, max_length=MAX_PARTIES)

class LagrangeResp(BaseModel):
    weights: List[str]

class SessionReq(BaseModel):
    parties: int = Field(..., ge=1, le=MAX_PARTIES)
    threshold: int = Field(..., ge=1, le=MAX_PARTIES)
    seed: Optional[str] = None

class SessionResp(BaseModel):
    prime: str
    threshold: int
    points: List[str]
    shares: List[str]

class SharePoint(BaseModel):
    x: str
    y: str

class ReconstructReq(BaseModel):
    threshold: int = Field(..., ge=1, le=MAX_PARTIES)
    shares: List[SharePoint] = Field(..., max_length=MAX_PARTIES)

class ReconstructResp(BaseModel):
    secret: str


@app.get("/health")
def health():
    return {"ok": True, "prime": _i2h(settings.prime)}


@app.post("/vandermonde", response_model=VandermondeResp)
def vandermonde(req: VandermondeReq):
    try:
        powers = generate_vandermonde(_h2i(req.point), req.threshold, settings.prime)
    except ShareError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return VandermondeResp(powers=[_i2h(v) for v in powers])


@app.post("/lagrange", response_model=LagrangeResp)
def lagrange(req: LagrangeReq):
    points = [_h2i(x) for x in req.points]
    try:
        weights = generate_vandermonde_inverse(points, settings.prime)
    except ShareError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return LagrangeResp(weights=[_i2h(w) for w in weights])


@app.post("/session", response_model=SessionResp)
def session(req: SessionReq):
    rng = KeyedPRNG(req.seed) if req.seed else settings.rng()
    try:
        backend = ScalarBackend(settings.prime)
        s = run_session(req.parties, req.threshold, backend, rng=rng, workers=settings.workers)
    except ShareError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SessionResp(
        prime=_i2h(backend.prime),
        threshold=s.threshold,
        points=[_i2h(pi.eval_point) for pi in s.parties],
        shares=[_i2h(pi.share) for pi in s.parties],
    )


@app.post("/reconstruct", response_model=ReconstructResp)
def reconstruct_secret(req: ReconstructReq):
    pairs = [(_h2i(sp.x), _h2i(sp.y)) for sp in req.shares]
    try:
        backend = ScalarBackend(settings.prime)
        secret = reconstruct([(x, y % backend.prime) for (x, y) in pairs], req.threshold, backend)
    except ShareError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ReconstructResp(secret=_i2h(secret))


@app.on_event("startup")
async def startup_event():
    print("🚀 Threshold Share Service starting...")
    print(f"🔢 Prime: {_i2h(settings.prime)}")
    print(f"🎲 Randomness: {'keyed PRNG' if settings.seed else 'system'}  workers={settings.workers}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
