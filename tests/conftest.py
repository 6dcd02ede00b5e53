import pytest

from helpers import make_id


@pytest.fixture
def dec_id():
    return make_id('dec')


@pytest.fixture
def device_id():
    return make_id('device')


@pytest.fixture
def miner_dec_id():
    return make_id('miner-dec')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
