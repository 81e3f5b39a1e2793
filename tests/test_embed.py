import asyncio
import os

import httpx
import pytest
from granian._granian import BUILD_GIL
from granian.constants import Interfaces
from granian.server.embed import Server as EmbeddedGranian

from seekable import asgi, rsgi

from .apps import CONTENT


@pytest.fixture(scope='function')
def loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    return loop


@pytest.mark.skipif(not BUILD_GIL, reason='free-threaded Python')
@pytest.mark.skipif(bool(os.environ.get('GITHUB_WORKFLOW')), reason='CI')
@pytest.mark.parametrize(
    ('interface', 'app_cls'),
    [(Interfaces.RSGI, rsgi.SeekableApp), (Interfaces.ASGI, asgi.SeekableApp)],
)
def test_embed_server(loop, server_port, content_file, interface, app_cls):
    server = EmbeddedGranian(
        app_cls(content_file, content_type='text/plain'), port=server_port, interface=interface, websockets=False
    )
    data = {}

    async def client():
        await asyncio.sleep(1.5)

        h = httpx.AsyncClient()
        try:
            base_url = f'http://localhost:{server_port}/'
            data['full'] = await h.get(base_url)
            data['partial'] = await h.get(base_url, headers={'range': 'bytes=27-'})
            data['unsatisfiable'] = await h.get(base_url, headers={'range': 'bytes=50-'})
            data['malformed'] = await h.get(base_url, headers={'range': 'hello'})
        finally:
            await h.aclose()
            server.stop()

    server_task = loop.create_task(server.serve())
    loop.run_until_complete(client())
    loop.run_until_complete(server_task)
    loop.close()

    assert data['full'].status_code == 200
    assert data['full'].headers['accept-ranges'] == 'bytes'
    assert data['full'].content == CONTENT

    assert data['partial'].status_code == 206
    assert data['partial'].headers['content-range'] == 'bytes 27-33/34'
    assert data['partial'].content == CONTENT[27:]

    assert data['unsatisfiable'].status_code == 416
    assert data['unsatisfiable'].headers['content-range'] == '*/34'
    assert data['unsatisfiable'].content == b''

    assert data['malformed'].status_code == 400
    assert data['malformed'].content == b''
