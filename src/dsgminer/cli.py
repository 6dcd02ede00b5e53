""" Command line access to the miner command channel. Only the read-only
    calls are exposed; anything that changes the miner's configuration is
    left to programmatic use.
"""

import argparse
import asyncio
import logging
import sys

from . import begin
from . import json
from .protocol.errors import ProtocolError
from .protocol.objectid import ObjectId


def parse_arguments(argv=None):

    parser = argparse.ArgumentParser(prog='dsgminer', description='Query a DSG miner.')

    parser.add_argument('--address', help='transport service address')
    parser.add_argument('--port', type=int, help='transport service port')
    parser.add_argument('--dec-id', dest='dec_id', help='application id to act as, in hexadecimal')
    parser.add_argument('--target', help='device to query, in hexadecimal; defaults to the local device')
    parser.add_argument('--verbose', '-v', action='store_true', help='log each exchange')

    parser.add_argument('command', choices=('stat', 'account'), help='what to ask for')

    return parser.parse_args(argv)


async def _run(arguments):

    client = begin.connect(arguments.address, arguments.port, arguments.dec_id)

    target = arguments.target
    if target is not None:
        target = ObjectId.from_string(target)

    try:
        if arguments.command == 'stat':
            result = await client.get_stat(target)
        else:
            result = await client.get_dmc_account(target)
    finally:
        await client.transport.close()

    return result


def main(argv=None):

    arguments = parse_arguments(argv)

    if arguments.verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        result = asyncio.run(_run(arguments))
    except (ProtocolError, ValueError) as e:
        sys.stderr.write('dsgminer: ' + str(e) + '\n')
        return 1

    sys.stdout.write(json.dumps(result).decode() + '\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
