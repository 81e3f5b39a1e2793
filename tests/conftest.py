import socket
from contextlib import closing

import pytest

from .apps import CONTENT, FIXTURE_PATH


@pytest.fixture(scope='function')
def server_port():
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as sock:
        sock.bind(('localhost', 0))
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return sock.getsockname()[1]


@pytest.fixture(scope='function')
def content():
    return CONTENT


@pytest.fixture(scope='function')
def content_file():
    return FIXTURE_PATH
