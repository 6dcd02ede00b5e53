import pytest

from dsgminer.protocol.objectid import ObjectId


def test_string_form():

    raw = bytes(range(32))
    oid = ObjectId(raw)

    assert bytes(oid) == raw
    assert str(oid) == raw.hex()
    assert ObjectId.from_string(str(oid)) == oid
    assert hash(ObjectId(raw)) == hash(oid)
    assert oid != ObjectId(bytes(32))


def test_invalid():

    with pytest.raises(ValueError):
        ObjectId(b'\x00' * 31)

    with pytest.raises(ValueError):
        ObjectId.from_string('zz' * 32)

    with pytest.raises(ValueError):
        ObjectId.from_string('00' * 33)

    with pytest.raises(TypeError):
        ObjectId(32)


def test_immutable():

    oid = ObjectId(bytes(32))

    with pytest.raises(AttributeError):
        oid.raw = bytes(32)


def test_calculate():

    first = ObjectId.calculate(b'content')
    second = ObjectId.calculate(b'content')
    third = ObjectId.calculate(b'other content')

    assert first == second
    assert first != third


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
