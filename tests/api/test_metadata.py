"""Tests for the URL metadata preview endpoint."""
from unittest.mock import AsyncMock, patch

from httpx import AsyncClient

from services.url_scraper import UrlMetadata


async def test__url_metadata__returns_triple(client: AsyncClient) -> None:
    """The endpoint returns title, description and imageUrl."""
    with patch(
        'services.bookmark_service.fetch_url_metadata',
        new_callable=AsyncMock,
        return_value=UrlMetadata(
            title='Example', description='An example', image_url='https://example.com/i.png',
        ),
    ) as mock:
        response = await client.get('/api/url-metadata', params={'url': 'https://example.com'})

    assert response.status_code == 200
    assert response.json() == {
        'title': 'Example',
        'description': 'An example',
        'imageUrl': 'https://example.com/i.png',
    }
    mock.assert_awaited_once()
    assert mock.call_args.args[0] == 'https://example.com'
    assert mock.call_args.kwargs['timeout'] == 10.0


async def test__url_metadata__missing_url_returns_400(client: AsyncClient) -> None:
    """The url query parameter is required."""
    response = await client.get('/api/url-metadata')
    assert response.status_code == 400
    assert response.json() == {'message': 'URL is required'}


async def test__url_metadata__blank_url_returns_400(client: AsyncClient) -> None:
    """A blank url counts as missing."""
    response = await client.get('/api/url-metadata', params={'url': '  '})
    assert response.status_code == 400


async def test__url_metadata__invalid_url_is_not_an_error(client: AsyncClient) -> None:
    """Malformed URLs degrade to a placeholder title instead of failing."""
    response = await client.get('/api/url-metadata', params={'url': 'not a url'})
    assert response.status_code == 200
    assert response.json() == {'title': 'Invalid URL', 'description': '', 'imageUrl': ''}
