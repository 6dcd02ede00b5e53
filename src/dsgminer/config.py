""" Client-side configuration: where to find the transport service, and which
    application identity to act as. Values come from, in increasing order of
    precedence, the built-in defaults, the ``client.json`` file in the
    dsgminer home directory, and ``DSGMINER_*`` environment variables.
"""

import os

from . import json
from .protocol import fields
from .protocol.objectid import ObjectId


defaults = dict()
defaults['address'] = 'localhost'
defaults['port'] = 10079
defaults['dec_id'] = None
defaults['req_path'] = fields.REQ_PATH

environment = dict()
environment['address'] = 'DSGMINER_ADDRESS'
environment['port'] = 'DSGMINER_PORT'
environment['dec_id'] = 'DSGMINER_DEC_ID'
environment['req_path'] = 'DSGMINER_REQ_PATH'


def directory(default=None):
    """ Return the directory location where we should be loading
        configuration files. This defaults to ``$HOME/.dsgminer``, but can be
        overridden by calling this method with a valid path, or by setting
        the ``DSGMINER_HOME`` environment variable. Note that changes to the
        environment variable will be ignored unless it is set prior to the
        first invocation of this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        if os.path.exists(default):
            pass
        else:
            os.makedirs(default, mode=0o775)

        os.environ['DSGMINER_HOME'] = default
        directory.found = default

    try:
        return directory.found
    except AttributeError:
        pass

    try:
        found = os.environ['DSGMINER_HOME']
    except KeyError:
        found = os.path.join(os.path.expanduser('~'), '.dsgminer')

    directory.found = found
    return found


def load(filename=None):
    """ Return the effective configuration as a dictionary. The *filename*
        defaults to ``client.json`` in :func:`directory`; a missing file is
        not an error, a malformed one is.
    """

    if filename is None:
        filename = os.path.join(directory(), 'client.json')

    config = dict(defaults)

    try:
        with open(filename, 'rb') as file:
            contents = file.read()
    except FileNotFoundError:
        contents = None

    if contents:
        loaded = json.loads(contents)

        if not isinstance(loaded, dict):
            raise ValueError('configuration in %s must be a JSON object' % (filename))

        for key,value in loaded.items():
            if key not in defaults:
                raise ValueError("unknown configuration key %s in %s" % (repr(key), filename))
            config[key] = value

    for key,variable in environment.items():
        try:
            config[key] = os.environ[variable]
        except KeyError:
            pass

    return validate(config)


def validate(config):
    """ Normalize the types of a configuration dictionary in place, and
        return it. Invalid values raise :class:`ValueError`.
    """

    port = config['port']

    try:
        port = int(port)
    except (TypeError, ValueError):
        raise ValueError('port must be an integer, got ' + repr(port))

    if port < 1 or port > 65535:
        raise ValueError('port out of range: ' + str(port))

    config['port'] = port

    dec_id = config['dec_id']

    if dec_id is not None and not isinstance(dec_id, ObjectId):
        config['dec_id'] = ObjectId.from_string(dec_id)

    return config


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
