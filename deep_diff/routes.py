"""
Deep Diff Flask Routes
======================
API endpoints for computing and rendering deep diffs.

v1.0.0: compute, render, html, styles and health endpoints
"""

import time
from functools import wraps
from flask import Blueprint, Response, request, jsonify, g

from config_logging import (
    get_logger, StructuredLogger, ValidationError, ProcessingError, VERSION
)
from .renderer import render_with_markers, get_default_styles
from .tracker import compute_deep_diff

logger = get_logger('deep_diff.routes')

dd_blueprint = Blueprint('deep_diff', __name__)


# =============================================================================
# STANDARDIZED ERROR HANDLING DECORATOR
# =============================================================================

def _error_response(code: str, message: str, status: int):
    return jsonify({
        'success': False,
        'error': {
            'code': code,
            'message': message,
            'correlation_id': getattr(g, 'correlation_id', 'unknown')
        }
    }), status


def handle_dd_errors(f):
    """
    Decorator for standardized API error handling in Deep Diff routes.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        start_time = time.time()
        try:
            result = f(*args, **kwargs)

            elapsed = time.time() - start_time
            if elapsed > 5.0:
                logger.warning(f"Slow deep diff API call: {f.__name__} took {elapsed:.1f}s")

            return result

        except ValidationError as e:
            logger.warning(f"Validation error in {f.__name__}: {e}")
            return _error_response('VALIDATION_ERROR', str(e), 400)
        except ProcessingError as e:
            logger.error(f"Processing error in {f.__name__}: {e}")
            return _error_response('PROCESSING_ERROR', str(e), 500)
        except Exception as e:
            logger.exception(f"Unexpected error in {f.__name__}: {e}")
            return _error_response('INTERNAL_ERROR', 'An unexpected error occurred', 500)

    return decorated


@dd_blueprint.before_request
def assign_correlation_id():
    """Tag every request's log lines with a fresh correlation ID."""
    g.correlation_id = StructuredLogger.new_correlation_id()


# =============================================================================
# REQUEST HELPERS
# =============================================================================

def _get_payload() -> dict:
    # Malformed or non-JSON bodies come back as None
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _optional(data: dict, key: str, expected: type, label: str):
    value = data.get(key)
    if value is None:
        return None
    if expected is float and isinstance(value, int) and not isinstance(value, bool):
        value = float(value)
    if not isinstance(value, expected) or (expected is not bool and isinstance(value, bool)):
        raise ValidationError(f"{key} must be {label}", field=key)
    return value


def _compute_options(data: dict) -> dict:
    return {
        'skip_empty': _optional(data, 'skip_empty', bool, 'a boolean'),
        'timeout': _optional(data, 'timeout', float, 'a number'),
    }


def _render_options(data: dict) -> dict:
    return {
        'tag_name': _optional(data, 'tag_name', str, 'a string'),
        'class_name': _optional(data, 'class_name', str, 'a string'),
        'strict': _optional(data, 'strict', bool, 'a boolean'),
    }


# =============================================================================
# API ENDPOINTS
# =============================================================================

@dd_blueprint.route('/compute', methods=['POST'])
@handle_dd_errors
def compute():
    """
    Compute cumulative markers across revisions.

    Request body:
        { revisions: [str, ...], skip_empty?: bool, timeout?: number }

    Returns:
        {
            success: true,
            result: { text, markers: [{start, end, enabled, length}], marker_count, revision_count }
        }
    """
    data = _get_payload()
    if 'revisions' not in data:
        raise ValidationError("revisions is required", field='revisions')

    result = compute_deep_diff(data['revisions'], **_compute_options(data))

    logger.info(f"Computed deep diff: {len(result.markers)} markers over "
                f"{result.revision_count} revisions")

    return jsonify({
        'success': True,
        'result': result.to_dict()
    })


@dd_blueprint.route('/render', methods=['POST'])
@handle_dd_errors
def render():
    """
    Render a text with given markers.

    Request body:
        { text: str, markers: [{start, end, enabled?}], tag_name?, class_name?, strict? }

    Returns:
        { success: true, html }
    """
    data = _get_payload()
    text = data.get('text')
    markers = data.get('markers', [])

    if not isinstance(text, str):
        raise ValidationError("text must be a string", field='text')
    if not isinstance(markers, list):
        raise ValidationError("markers must be a list", field='markers')

    html = render_with_markers(text, markers, **_render_options(data))

    return jsonify({
        'success': True,
        'html': html
    })


@dd_blueprint.route('/html', methods=['POST'])
@handle_dd_errors
def html():
    """
    Compute and render in one call.

    Request body:
        { revisions: [str, ...], skip_empty?, timeout?, tag_name?, class_name?, strict? }

    Returns:
        { success: true, html, marker_count }
    """
    data = _get_payload()
    if 'revisions' not in data:
        raise ValidationError("revisions is required", field='revisions')

    result = compute_deep_diff(data['revisions'], **_compute_options(data))
    rendered = render_with_markers(result.text, result.markers, **_render_options(data))

    return jsonify({
        'success': True,
        'html': rendered,
        'marker_count': len(result.markers)
    })


@dd_blueprint.route('/styles', methods=['GET'])
@handle_dd_errors
def styles():
    """Default CSS for nested markers (?max_depth=5&class_name=deep-diff)."""
    max_depth = request.args.get('max_depth')
    if max_depth is not None:
        try:
            max_depth = int(max_depth)
        except ValueError:
            raise ValidationError("max_depth must be an integer", field='max_depth')
        if not 1 <= max_depth <= 50:
            raise ValidationError("max_depth must be between 1 and 50", field='max_depth')

    css = get_default_styles(max_depth=max_depth,
                             class_name=request.args.get('class_name'))
    return Response(css, mimetype='text/css')


@dd_blueprint.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'success': True,
        'module': 'deep_diff',
        'version': VERSION,
        'status': 'healthy'
    })
