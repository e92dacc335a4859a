"""
Flask routes for imagecompare.

JSON endpoints wrapping the engine operations. Every route reads its
parameters from the JSON request body and answers with JSON, except
``/api/diff`` which streams back a PNG.
"""

from __future__ import annotations

import io
import logging
from datetime import datetime
from typing import Any, Optional

from flask import Blueprint, jsonify, request, send_file

from ..engine import (
    InputMissingError,
    DecodeError,
    PreconditionError,
    find_duplicate_groups,
    find_similar_groups,
    compare_images,
    find_sub_image_in_files,
    highlight_differences,
    find_images_in_color_range,
    get_image_details_batch,
)
from ..user_config import get_user_config
from ..utils import validators

# Create blueprint for routes
api = Blueprint('api', __name__)

# Module logger
_logger = logging.getLogger(__name__)


class BadRequest(Exception):
    """Invalid request parameters (answered with 400)."""


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        raise BadRequest('Request body required')
    return data


def _check(result: tuple[bool, str]) -> None:
    is_valid, error = result
    if not is_valid:
        raise BadRequest(error)


def _require(data: dict, key: str) -> Any:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise BadRequest(f"'{key}' is required")
    return value.strip() if isinstance(value, str) else value


def _directories(data: dict) -> list[str]:
    """Accept either 'directory' (string) or 'directories' (list)."""
    directories = data.get('directories')
    if directories is None:
        directories = [_require(data, 'directory')]
    if isinstance(directories, str):
        directories = [directories]
    if not isinstance(directories, list):
        raise BadRequest("'directories' must be a list")
    _check(validators.validate_directories(directories))
    return directories


def _scan_options(data: dict) -> dict:
    extensions: Optional[list] = data.get('extensions')
    if extensions is not None and (
            not isinstance(extensions, list)
            or not all(isinstance(ext, str) for ext in extensions)):
        raise BadRequest("'extensions' must be a list of strings")
    recursive = data.get('recursive', True)
    if not isinstance(recursive, bool):
        raise BadRequest("'recursive' must be true or false")
    return {
        'recurse_subfolders': recursive,
        'extensions': extensions,
    }


def _workers(data: dict) -> int:
    workers = data.get('workers', get_user_config().default_workers)
    _check(validators.validate_workers(workers))
    return int(workers)


# =============================================================================
# Error Handlers
# =============================================================================

@api.errorhandler(BadRequest)
def handle_bad_request(e):
    return jsonify({'error': str(e)}), 400


@api.errorhandler(PreconditionError)
def handle_precondition(e):
    return jsonify({'error': str(e)}), 400


@api.errorhandler(InputMissingError)
def handle_missing(e):
    return jsonify({'error': str(e), 'path': e.path, 'role': e.role}), 404


@api.errorhandler(DecodeError)
def handle_decode(e):
    return jsonify({'error': str(e), 'path': e.path, 'role': e.role}), 422


# =============================================================================
# Route Handlers
# =============================================================================

@api.route('/api/ping')
def api_ping():
    """Simple endpoint for connection monitoring."""
    return jsonify({'status': 'ok', 'time': datetime.now().isoformat()})


@api.route('/api/duplicates', methods=['POST'])
def api_duplicates():
    """Group duplicate images in one or more folders."""
    data = _json_body()
    directories = _directories(data)

    groups = find_duplicate_groups(
        directories,
        max_workers=_workers(data),
        **_scan_options(data),
    )
    return jsonify({
        'groups': groups,
        'count': len(groups) if groups else 0,
    })


@api.route('/api/similar', methods=['POST'])
def api_similar():
    """Group similar images in one or more folders."""
    data = _json_body()
    directories = _directories(data)
    threshold = data.get('threshold', get_user_config().default_threshold)
    _check(validators.validate_threshold(threshold))

    groups = find_similar_groups(
        directories,
        threshold=float(threshold),
        max_workers=_workers(data),
        **_scan_options(data),
    )
    return jsonify({
        'groups': groups,
        'count': len(groups) if groups else 0,
        'threshold': float(threshold),
    })


@api.route('/api/compare', methods=['POST'])
def api_compare():
    """Similarity score of two images."""
    data = _json_body()
    first = _require(data, 'first')
    second = _require(data, 'second')

    result = compare_images(first, second)
    return jsonify(result.to_dict())


@api.route('/api/locate', methods=['POST'])
def api_locate():
    """Find a small image inside a bigger one."""
    data = _json_body()
    big = _require(data, 'big')
    small = _require(data, 'small')
    threshold = data.get('threshold', 0)
    _check(validators.validate_channel_tolerance(threshold, 'Threshold'))

    match = find_sub_image_in_files(big, small, threshold=int(threshold))
    return jsonify(match.to_dict())


@api.route('/api/diff', methods=['POST'])
def api_diff():
    """Return a PNG with every differing pixel highlighted."""
    data = _json_body()
    first = _require(data, 'first')
    second = _require(data, 'second')
    color = data.get('color') or get_user_config().highlight_color

    result = highlight_differences(first, second, color)

    buf = io.BytesIO()
    result.to_image().save(buf, format='PNG')
    buf.seek(0)
    return send_file(buf, mimetype='image/png', download_name='diff.png')


@api.route('/api/color-range', methods=['POST'])
def api_color_range():
    """Find images whose average color is close to the given color."""
    data = _json_body()
    directories = _directories(data)
    rgb = data.get('rgb')
    if not isinstance(rgb, list) or len(rgb) != 3:
        raise BadRequest("'rgb' must be a list of three integers")
    _check(validators.validate_rgb(*rgb))
    color_range = data.get('range', 10)
    _check(validators.validate_channel_tolerance(color_range, 'Range'))

    r, g, b = (int(c) for c in rgb)
    matches = find_images_in_color_range(r, g, b, int(color_range), directories, **_scan_options(data))
    return jsonify({
        'matches': matches,
        'count': len(matches) if matches else 0,
    })


@api.route('/api/details', methods=['POST'])
def api_details():
    """Size and average color of images, with similarity to the first one."""
    data = _json_body()
    paths = data.get('paths')
    if not isinstance(paths, list) or not paths:
        raise BadRequest("'paths' must be a non-empty list")

    details = get_image_details_batch(paths)
    if details is None:
        _logger.warning(f"Could not read every image of {len(paths)} paths")
        return jsonify({'error': 'Could not read every image'}), 422
    return jsonify({'images': [info.to_dict() for info in details]})


__all__ = ['api']
