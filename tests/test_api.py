"""
Tests for the Flask JSON API.
"""

import io

import pytest
from PIL import Image

from imagecompare.app import create_app, LOG_QUIET


@pytest.fixture
def client(isolated_config):
    app = create_app(LOG_QUIET)
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


class TestPing:
    def test_ping(self, client):
        response = client.get('/api/ping')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'ok'


class TestGroupingRoutes:
    """Test /api/duplicates and /api/similar."""

    def test_duplicates(self, client, sample_images, red_paths, temp_dir):
        response = client.post('/api/duplicates', json={'directory': str(temp_dir)})
        assert response.status_code == 200
        data = response.get_json()
        assert data['count'] == 1
        assert set(data['groups'][0]) == red_paths

    def test_duplicates_directory_list(self, client, sample_images, temp_dir):
        response = client.post('/api/duplicates', json={
            'directories': [str(temp_dir)],
            'recursive': False,
            'extensions': ['png'],
        })
        assert response.status_code == 200
        assert response.get_json()['count'] == 1

    def test_duplicates_empty_folder(self, client, temp_dir):
        response = client.post('/api/duplicates', json={'directory': str(temp_dir)})
        assert response.status_code == 200
        assert response.get_json() == {'groups': None, 'count': 0}

    def test_missing_body(self, client):
        response = client.post('/api/duplicates')
        assert response.status_code == 400
        assert 'error' in response.get_json()

    def test_missing_directory(self, client, temp_dir):
        response = client.post('/api/duplicates', json={'directory': str(temp_dir / "nowhere")})
        assert response.status_code == 400
        assert "Directory not found" in response.get_json()['error']

    def test_bad_extensions(self, client, temp_dir):
        response = client.post('/api/duplicates', json={'directory': str(temp_dir), 'extensions': 'png'})
        assert response.status_code == 400

    def test_non_string_extensions(self, client, temp_dir):
        response = client.post('/api/duplicates', json={'directory': str(temp_dir), 'extensions': [1]})
        assert response.status_code == 400
        assert "list of strings" in response.get_json()['error']

    @pytest.mark.parametrize("recursive", ["false", 0, None])
    def test_non_boolean_recursive(self, client, temp_dir, recursive):
        response = client.post('/api/similar', json={'directory': str(temp_dir), 'recursive': recursive})
        assert response.status_code == 400
        assert "'recursive'" in response.get_json()['error']

    def test_similar(self, client, sample_images, red_paths, temp_dir):
        response = client.post('/api/similar', json={'directory': str(temp_dir), 'threshold': 95})
        assert response.status_code == 200
        data = response.get_json()
        assert data['threshold'] == 95.0
        assert set(data['groups'][0]) == red_paths

    def test_similar_invalid_threshold(self, client, temp_dir):
        response = client.post('/api/similar', json={'directory': str(temp_dir), 'threshold': 150})
        assert response.status_code == 400

    def test_invalid_workers(self, client, temp_dir):
        response = client.post('/api/similar', json={'directory': str(temp_dir), 'workers': 0})
        assert response.status_code == 400


class TestPairRoutes:
    """Test /api/compare, /api/locate and /api/diff."""

    def test_compare(self, client, sample_images):
        response = client.post('/api/compare', json={
            'first': sample_images['identical1'],
            'second': sample_images['unique'],
        })
        assert response.status_code == 200
        assert response.get_json()['similarity'] == 16.8

    def test_compare_missing_file(self, client, sample_images, temp_dir):
        response = client.post('/api/compare', json={
            'first': sample_images['identical1'],
            'second': str(temp_dir / "gone.png"),
        })
        assert response.status_code == 404
        assert response.get_json()['role'] == 'second'

    def test_compare_undecodable(self, client, sample_images):
        response = client.post('/api/compare', json={
            'first': sample_images['broken'],
            'second': sample_images['unique'],
        })
        assert response.status_code == 422
        assert response.get_json()['role'] == 'first'

    def test_compare_missing_param(self, client, sample_images):
        response = client.post('/api/compare', json={'first': sample_images['unique']})
        assert response.status_code == 400

    def test_locate(self, client, locate_files):
        big, small = locate_files
        response = client.post('/api/locate', json={'big': big, 'small': small})
        assert response.status_code == 200
        assert response.get_json() == {'found': True, 'x': 20, 'y': 30}

    def test_locate_invalid_threshold(self, client, locate_files):
        big, small = locate_files
        response = client.post('/api/locate', json={'big': big, 'small': small, 'threshold': -3})
        assert response.status_code == 400

    def test_diff(self, client, sample_images):
        response = client.post('/api/diff', json={
            'first': sample_images['identical1'],
            'second': sample_images['unique'],
            'color': 'blue',
        })
        assert response.status_code == 200
        assert response.mimetype == 'image/png'
        with Image.open(io.BytesIO(response.data)) as img:
            assert img.size == (100, 100)
            assert img.convert('RGBA').getpixel((5, 5)) == (0, 0, 255, 255)

    def test_diff_bad_color(self, client, sample_images):
        response = client.post('/api/diff', json={
            'first': sample_images['identical1'],
            'second': sample_images['unique'],
            'color': 'not-a-color',
        })
        assert response.status_code == 400


class TestAnalysisRoutes:
    """Test /api/color-range and /api/details."""

    def test_color_range(self, client, sample_images, red_paths, temp_dir):
        response = client.post('/api/color-range', json={
            'directory': str(temp_dir),
            'rgb': [255, 0, 0],
            'range': 2,
        })
        assert response.status_code == 200
        data = response.get_json()
        assert data['count'] == 5
        assert set(data['matches']) == red_paths

    def test_color_range_bad_rgb(self, client, temp_dir):
        response = client.post('/api/color-range', json={'directory': str(temp_dir), 'rgb': [1, 2]})
        assert response.status_code == 400

    def test_details(self, client, sample_images):
        response = client.post('/api/details', json={
            'paths': [sample_images['identical1'], sample_images['unique']],
        })
        assert response.status_code == 200
        images = response.get_json()['images']
        assert images[0]['similarity'] == 100.0
        assert images[1]['average_color'] == [0, 0, 255]
        assert images[1]['similarity'] == 16.8

    def test_details_missing(self, client, sample_images, temp_dir):
        response = client.post('/api/details', json={
            'paths': [sample_images['unique'], str(temp_dir / "gone.png")],
        })
        assert response.status_code == 422

    def test_details_requires_list(self, client):
        response = client.post('/api/details', json={'paths': 'a.png'})
        assert response.status_code == 400
