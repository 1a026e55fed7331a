import pytest

import sqs


def test_encode_and_decode():

    input_dictionary = dict()
    input_dictionary['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    input_dictionary['dict'] = {'one': 1, 'two': 2}
    input_dictionary['none'] = None
    input_dictionary['true'] = True
    input_dictionary['false'] = False

    encoded = sqs.json.dumps(input_dictionary)
    assert isinstance(encoded, bytes)

    decoded = sqs.json.loads(encoded)
    assert isinstance(decoded, dict)
    assert decoded == input_dictionary


def test_structured_body_keys():

    # Content keys must be strings; anything else fails to encode rather
    # than being quietly converted.

    codec = sqs.JsonCodec()

    with pytest.raises(sqs.EncodingError) as caught:
        codec.encode(sqs.StructuredBody('order', {7: 'seven'}))

    assert isinstance(caught.value.__cause__, sqs.json.JSONEncodeError)

    with pytest.raises(sqs.EncodingError):
        codec.encode({'type': 'order', 'content': {'nested': {None: 1}}})


def test_structured_body_round_trip():

    codec = sqs.JsonCodec()
    body = codec.decode('{"type":"order","content":{"items":[1,2]}}')

    assert body == sqs.StructuredBody('order', {'items': [1, 2]})
    assert sqs.json.loads(codec.encode(body)) == body.to_dict()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
