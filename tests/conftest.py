import pytest

from qrshield.protection import ProtectionParams, ProtectionRotator

SATOSHI_ADDRESS = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"
ETH_ADDRESS = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"


@pytest.fixture
def address():
    return SATOSHI_ADDRESS


@pytest.fixture
def mask_rotator():
    """Rotator cycling four mask variations at 10 switches per second."""
    return ProtectionRotator(ProtectionParams(refresh_rate=10, variation_count=4), seed=7)


@pytest.fixture
def noisy_rotator():
    """Rotator with every variation technique turned on, at the strongest setting."""
    params = ProtectionParams(
        refresh_rate=10, variation_count=8, randomize_function_patterns=True,
        reduce_ecc=True, alternate_encoding=True, custom_ecc_level="L",
        invert_modules=True, invert_percentage=20)
    return ProtectionRotator(params, seed=1234)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers added by setup_logging so tests stay independent."""
    import logging

    logger = logging.getLogger("qrshield")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
