# File: tests/conftest.py
# Register and load a fast Hypothesis profile for everyday runs, and expose
# every backend through one parametrized fixture.
import os

os.environ.setdefault("PMCRYPT_PBKDF2_TEST", "1")

import pytest
from hypothesis import settings

from pmcrypt import NativeCryptoService, WebCryptoService

try:
    settings.register_profile(
        "fast",
        max_examples=12,   # reduce randomized cases
        deadline=None,     # disable per-example timing
        derandomize=True,  # stable runs
    )
except Exception:
    # profile may be registered during re-import; ignore
    pass

settings.load_profile("fast")

BACKENDS = {
    "native": NativeCryptoService,
    "webcrypto": WebCryptoService,
}


@pytest.fixture(params=sorted(BACKENDS))
def service(request):
    return BACKENDS[request.param]()
