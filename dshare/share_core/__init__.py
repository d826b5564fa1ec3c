# share_core/__init__.py
from .errors import ShareError, PreconditionViolation, ArithmeticPrecondition
from .field import DEFAULT_PRIME, mod_pow, mod_mul, mod_add, mod_sub, mod_inverse
from .vandermonde import generate_vandermonde, generate_vandermonde_inverse, validate_points
from .backend import Backend, ScalarBackend, RingBackend, RingPoly, PointBackend, SECP_N, make_backend
from .prng import KeyedPRNG, SystemRNG
from .session import Party, Session, setup, distribute, aggregate, share, reconstruct, run_session
