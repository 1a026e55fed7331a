''' Wrapper module around :mod:`orjson`, providing the equivalent of
    :func:`json.loads` and :func:`json.dumps` for structured message bodies.
'''

import orjson


# orjson.dumps returns bytes; the wire is text, so decode at the call site
# when a string is required.

dumps = orjson.dumps
loads = orjson.loads
JSONDecodeError = orjson.JSONDecodeError
JSONEncodeError = orjson.JSONEncodeError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
