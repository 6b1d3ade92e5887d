# layergraph/helpers/Backend.py
import os
import numpy as np

VERBOSE_STARTUP = False  # set True to print device details on import

try:
    import cupy as cp
    # Quick runtime check: an installed CuPy without a usable driver is common
    try:
        _ = (cp.array([1, 2, 3]) + 1).sum()
        CUPY_AVAILABLE = True
        if VERBOSE_STARTUP:
            print("CuPy:", cp.__version__)
            print("GPU count:", cp.cuda.runtime.getDeviceCount())
    except Exception as e:
        print(f"CuPy installed but CUDA runtime error: {e}")
        print("Falling back to CPU (NumPy)")
        cp = None
        CUPY_AVAILABLE = False
except ImportError:
    cp = None
    CUPY_AVAILABLE = False


class Backend:
    """Array backend shared by every tensor: CuPy on GPU, NumPy otherwise."""
    def __init__(self, use_gpu=True, default_float=np.float32):
        self.use_gpu = bool(use_gpu and CUPY_AVAILABLE)
        self.default_float = default_float
        self.xp = cp if self.use_gpu else np
        if VERBOSE_STARTUP:
            print("Using GPU backend (CuPy)" if self.use_gpu else "Using CPU backend (NumPy)")

    # -------- device transfer --------
    def to_cpu(self, x):
        """Move array to CPU (NumPy)."""
        if self.use_gpu and x is not None:
            return cp.asnumpy(x)
        return x

    def ensure_array(self, x, dtype=None):
        """
        Ensure 'x' is an array of the current backend.
        Accepts list/tuple/scalars and NumPy or CuPy arrays.
        """
        if self.use_gpu and isinstance(x, np.ndarray):
            x = cp.asarray(x)
        elif (not self.use_gpu) and cp is not None and isinstance(x, cp.ndarray):
            x = cp.asnumpy(x)
        arr = self.xp.asarray(x)
        if dtype is not None and arr.dtype != dtype:
            arr = arr.astype(dtype, copy=False)
        return arr

    def _fallback_to_cpu(self, err):
        print(f"GPU operation failed, falling back to CPU: {err}")
        self.use_gpu = False
        self.xp = np

    # -------- array creation --------
    def zeros(self, shape, dtype=None):
        dtype = self.default_float if dtype is None else dtype
        try:
            return self.xp.zeros(shape, dtype=dtype)
        except Exception as e:
            if self.use_gpu:
                self._fallback_to_cpu(e)
                return np.zeros(shape, dtype=dtype)
            raise

    def zeros_like(self, x):
        return self.xp.zeros_like(x)

    # -------- numeric limits --------
    def eps(self, dtype=None):
        """Machine epsilon of `dtype` (default float when omitted)."""
        return float(np.finfo(self.default_float if dtype is None else dtype).eps)

    # -------- randomness --------
    def default_rng(self, seed=None):
        """Generator on the active device; `seed=None` draws fresh OS entropy."""
        return self.xp.random.default_rng(seed)

    def seed(self, seed=42):
        """Seed the legacy global RNGs for reproducibility."""
        if self.use_gpu:
            cp.random.seed(seed)
        np.random.seed(seed)

    # -------- delegate unknown attrs to xp --------
    def __getattr__(self, name):
        return getattr(self.xp, name)


# Global backend instance; LAYERGRAPH_CPU=1 forces NumPy even when CuPy works
backend = Backend(use_gpu=os.environ.get("LAYERGRAPH_CPU", "0") != "1")
