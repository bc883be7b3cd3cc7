# brixxo/uploads/routes.py

from flask import Blueprint, current_app, request, jsonify

from brixxo.api import marketplace
from brixxo.auth.session import current_auth, role_required
from brixxo.errors import BackendError, error_response
from brixxo.uploads.validator import candidate_from_storage, validate_files

bp = Blueprint('uploads', __name__)


@bp.route('/images', methods=['POST'])
@role_required()
def upload_images():
    """Validate ``images`` and forward the accepted ones to image hosting.

    ``selectedCount`` is how many images the page already holds; it counts
    toward the file limit.
    """
    try:
        selected = int(request.form.get('selectedCount', 0))
    except ValueError:
        return jsonify(success=False, message='selectedCount must be a number'), 400

    valid, errors = validate_files(
        [candidate_from_storage(fs) for fs in request.files.getlist('images')],
        max(selected, 0),
        max_files=current_app.config['UPLOAD_MAX_FILES'],
        max_size_mb=current_app.config['UPLOAD_MAX_SIZE_MB'],
    )
    error = errors[0] if errors else None
    if not valid:
        return jsonify(success=False, message=error or 'No images selected', urls=[]), 400

    files = [('images', (f.filename, f.stream, f.content_type)) for f in valid]
    try:
        urls = marketplace.upload_images(
            current_auth().client(), files, multiple=request.args.get('multiple') == '1'
        )
    except BackendError as e:
        return error_response(e, 'Failed to upload images. Please try again.')
    return jsonify(success=True, urls=urls, error=error)
