import asyncio
import pytest

import dsgminer
from dsgminer.protocol import envelope
from dsgminer.protocol import registry
from dsgminer.protocol.errors import DecodingError, NotSupported, TransportError
from dsgminer.protocol.payload import MinerStat, SetDMCAccount
from dsgminer.transport import Loopback, ObjectInfo

from helpers import make_id


STAT = MinerStat('3', '3', '1024', '512', '256')


def miner(miner_dec_id, device_id):
    """ A service answering the same calls as a real miner, backed by a
        dictionary.
    """

    state = dict()
    state['account'] = ''
    state['domain'] = None

    service = dsgminer.Service(miner_dec_id, device_id)

    def set_account(value):
        assert isinstance(value, SetDMCAccount)
        state['account'] = value.dmc_account
        return ''

    async def get_account(value):
        assert value is None
        return state['account']

    def set_domain(value):
        state['domain'] = value
        return ''

    service.on(registry.GET_STAT, lambda value: STAT)
    service.on(registry.SET_DMC_ACCOUNT, set_account)
    service.on(registry.GET_DMC_ACCOUNT, get_account)
    service.on(registry.GET_DMC_KEY, lambda account: 'key-for-' + account)
    service.on(registry.SET_HTTP_DOMAIN, set_domain)

    return service, state


def test_loopback(dec_id, device_id, miner_dec_id):

    service, state = miner(miner_dec_id, device_id)
    client = dsgminer.Client(Loopback(device_id, service), dec_id)

    async def scenario():
        stat = await client.get_stat()
        await client.set_dmc_account('alice', 'secret')
        account = await client.get_dmc_account()
        key = await client.get_dmc_key('alice')
        await client.set_http_domain('miner.example.com')
        return stat, account, key

    stat, account, key = asyncio.run(scenario())

    assert stat == STAT
    assert account == 'alice'
    assert key == 'key-for-alice'
    assert state['domain'] == 'miner.example.com'


def test_concurrent(dec_id, device_id, miner_dec_id):

    service, state = miner(miner_dec_id, device_id)
    client = dsgminer.Client(Loopback(device_id, service), dec_id)

    async def scenario():
        calls = [client.get_stat() for count in range(10)]
        return await asyncio.gather(*calls)

    results = asyncio.run(scenario())

    assert len(results) == 10
    for result in results:
        assert result == STAT


def test_reply_envelope(dec_id, device_id, miner_dec_id):

    service, state = miner(miner_dec_id, device_id)

    object_id, raw = envelope.encode(dec_id, device_id, registry.GET_DMC_KEY, b'"alice"')
    reply = asyncio.run(service.handle(ObjectInfo(object_id, raw)))

    obj_type, body, metadata = envelope.decode(reply.object_raw)

    assert obj_type == registry.GET_DMC_KEY_RESP
    assert body == b'"key-for-alice"'
    assert metadata.creator_id == miner_dec_id
    assert metadata.owner_id == device_id
    assert metadata.object_id == reply.object_id


def test_unhandled(dec_id, device_id, miner_dec_id):

    service, state = miner(miner_dec_id, device_id)

    assert service.handles(registry.GET_STAT)
    assert not service.handles(300)

    object_id, raw = envelope.encode(dec_id, device_id, 300, b'')

    with pytest.raises(NotSupported):
        asyncio.run(service.handle(ObjectInfo(object_id, raw)))

    client = dsgminer.Client(Loopback(device_id, service), dec_id)

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(client.request(300))

    assert isinstance(excinfo.value.__cause__, NotSupported)


def test_mismatched_object_id(dec_id, device_id, miner_dec_id):

    service, state = miner(miner_dec_id, device_id)

    object_id, raw = envelope.encode(dec_id, device_id, registry.GET_STAT, b'')

    with pytest.raises(DecodingError):
        asyncio.run(service.handle(ObjectInfo(make_id('wrong'), raw)))


def test_routing(dec_id, device_id, miner_dec_id):

    service, state = miner(miner_dec_id, device_id)

    client = dsgminer.Client(Loopback(device_id, service), dec_id)

    with pytest.raises(TransportError):
        asyncio.run(client.get_stat(make_id('elsewhere')))

    stat = asyncio.run(client.get_stat(device_id))
    assert stat == STAT

    client = dsgminer.Client(Loopback(device_id, service), dec_id, req_path='other_commands')

    with pytest.raises(TransportError):
        asyncio.run(client.get_stat())

    client = dsgminer.Client(Loopback(device_id), dec_id)

    with pytest.raises(TransportError):
        asyncio.run(client.get_stat())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
