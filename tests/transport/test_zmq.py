import asyncio
import itertools
import pytest
import zmq
import zmq.asyncio

import dsgminer
from dsgminer.protocol import envelope
from dsgminer.protocol import registry
from dsgminer.protocol.errors import IdentityResolutionError, TransportError
from dsgminer.protocol.payload import MinerStat
from dsgminer.transport import ObjectInfo, PostObjectRequest
from dsgminer.transport.zmq import Client, Server, framing

from helpers import make_id


STAT = MinerStat('3', '3', '1024', '512', '256')

_endpoints = itertools.count()


def inproc():
    return 'inproc://dsgminer-test-%d' % (next(_endpoints))


def test_post_frames(dec_id, device_id):

    object_id, raw = envelope.encode(dec_id, device_id, 12, b'')
    info = ObjectInfo(object_id, raw)
    post = PostObjectRequest('dsg_local_commands', dec_id, info, target=device_id)

    frames = framing.to_post_frames(b'00000001', post)
    request_id, command, decoded = framing.from_request_frames(frames)

    assert request_id == b'00000001'
    assert command == framing.POST
    assert decoded == post

    untargeted = PostObjectRequest('dsg_local_commands', dec_id, info)
    request_id, command, decoded = framing.from_request_frames(framing.to_post_frames(b'2', untargeted))
    assert decoded.target is None


def test_bad_frames():

    with pytest.raises(ValueError):
        framing.from_request_frames((framing.PROTOCOL_VERSION, b'1'))

    with pytest.raises(ValueError):
        framing.from_request_frames((b'z', b'1', framing.DEVICE))

    with pytest.raises(ValueError):
        framing.from_request_frames((framing.PROTOCOL_VERSION, b'1', b'BOGUS'))

    with pytest.raises(ValueError):
        framing.from_request_frames((framing.PROTOCOL_VERSION, b'1', framing.POST, b'path'))

    with pytest.raises(ValueError):
        framing.from_reply_frames((framing.PROTOCOL_VERSION, b'1', b'MAYBE'))

    error = framing.error_from_reply((b'not json',))
    assert error['type'] == 'RuntimeError'


def test_next_id():

    first = framing.next_id()
    second = framing.next_id()

    assert first != second
    assert len(first) == 8


def test_end_to_end(dec_id, device_id, miner_dec_id):

    address = inproc()

    async def scenario():
        context = zmq.asyncio.Context()

        service = dsgminer.Service(miner_dec_id, device_id)
        service.on(registry.GET_STAT, lambda value: STAT)

        server = Server(service, device_id, endpoint=address, context=context)
        server.start()

        transport = Client(address, context=context)
        client = dsgminer.Client(transport, dec_id)

        try:
            resolved = await transport.resolve_local_device()
            stats = await asyncio.gather(*[client.get_stat() for count in range(5)])
            targeted = await client.get_stat(device_id)

            with pytest.raises(TransportError) as unhandled:
                await client.get_dmc_account()

            with pytest.raises(TransportError):
                await client.get_stat(make_id('elsewhere'))
        finally:
            await transport.close()
            await server.close()
            context.destroy(linger=0)

        return resolved, stats, targeted, unhandled.value

    resolved, stats, targeted, unhandled = asyncio.run(scenario())

    assert resolved == device_id
    assert stats == [STAT] * 5
    assert targeted == STAT
    assert 'NotSupported' in str(unhandled)


def test_closed_transport(dec_id, device_id):

    address = inproc()

    async def scenario():
        context = zmq.asyncio.Context()

        # Bound, but nothing answers: the request stays outstanding until the
        # transport is closed underneath it.

        silent = context.socket(zmq.ROUTER)
        silent.bind(address)

        transport = Client(address, context=context)

        try:
            pending = asyncio.ensure_future(transport.resolve_local_device())
            await asyncio.sleep(0.05)
            await transport.close()

            with pytest.raises(IdentityResolutionError) as excinfo:
                await pending
        finally:
            silent.close(linger=0)
            context.destroy(linger=0)

        return excinfo.value

    error = asyncio.run(scenario())
    assert isinstance(error.__cause__, dsgminer.transport.TransportConnectionError)


def test_port_in_use(device_id, miner_dec_id):

    async def scenario():
        context = zmq.asyncio.Context()
        service = dsgminer.Service(miner_dec_id, device_id)

        first = Server(service, device_id, address='127.0.0.1', context=context)

        try:
            with pytest.raises(dsgminer.transport.TransportPortError):
                Server(service, device_id, address='127.0.0.1', port=first.port, context=context)
        finally:
            await first.close()
            context.destroy(linger=0)

        return first.port

    port = asyncio.run(scenario())
    assert port is not None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
