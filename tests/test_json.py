import json
import dsgminer

from dsgminer.protocol.payload import MinerStat


def test_json_encode_and_decode():
    encode_and_decode(json.dumps, json.loads, dump_is_bytes=False)


def test_dsgminer_encode_and_decode():
    encode_and_decode(dsgminer.json.dumps, dsgminer.json.loads)


def encode_and_decode(dumps, loads, dump_is_bytes=True):

    input_dictionary = dict()
    input_dictionary['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    input_dictionary['dict'] = {'one': 1, 'two': 2}
    input_dictionary['none'] = None
    input_dictionary['true'] = True
    input_dictionary['false'] = False

    encoded = dumps(input_dictionary)

    if dump_is_bytes:
        assert isinstance(encoded, bytes)
    else:
        assert isinstance(encoded, str)

    # It won't do to compare the encoded JSON against a pre-set notion of
    # what the encoded output should look like, as there is variance in
    # the handling of whitespace between the different modules.

    decoded = loads(encoded)
    assert decoded == input_dictionary


def test_loads_as():

    encoded = dsgminer.json.dumps(MinerStat('1', '2', '3', '4', '5'))

    stat = dsgminer.json.loads_as(encoded, MinerStat)
    assert stat == MinerStat('1', '2', '3', '4', '5')

    untyped = dsgminer.json.loads_as(encoded, None)
    assert untyped['used_space'] == '5'

    assert dsgminer.json.loads_as(b'"text"', str) == 'text'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
