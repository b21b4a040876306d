""" Fetch a resource from an XRAP server, then fetch it again conditionally:
    the second request should come back as 304 Not Modified unless the
    resource changed in between.

    Usage: python time.py tcp://localhost:9999 /time
"""

import sys

import xrap


def main():

    endpoint = sys.argv[1]
    resource = sys.argv[2]

    with xrap.connect(endpoint, timeout=5) as client:

        first = client.send(xrap.GetRequest(resource))
        first.raise_for_status()

        print(first.status_code, first.content_type, first.modified)
        print(first.body.decode('utf-8', errors='replace'))

        again = xrap.GetRequest(resource, if_none_match=first.etag)
        pending = client.send_async(again)
        second = pending.result()

        print(second.status_code)


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
