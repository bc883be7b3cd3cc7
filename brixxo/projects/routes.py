# brixxo/projects/routes.py

"""Company portfolio projects and their reviews.

Anyone may browse projects and read reviews. A company admin manages its own
portfolio; any signed-in user may leave a review.
"""

from flask import Blueprint, request, jsonify, flash

from brixxo.api import marketplace
from brixxo.auth.session import current_auth, reader_client, role_required
from brixxo.errors import BackendError, error_response
from brixxo.projects.forms import project_payload

bp = Blueprint('projects', __name__)

MANAGE_PAGE = '/dashboard/projects/manage'
MAX_REVIEW_IMAGES = 5


def _body():
    return request.get_json(silent=True) or request.form.to_dict()


@bp.route('/')
def search_projects():
    try:
        rows = marketplace.search_projects(reader_client(), request.args.to_dict() or None)
    except BackendError as e:
        return error_response(e, 'Failed to load projects.')
    return jsonify(projects=rows)


@bp.route('/my', methods=['GET'])
@role_required('company_admin')
def my_projects():
    try:
        rows = marketplace.list_my_projects(current_auth().client())
    except BackendError as e:
        return error_response(e, 'Failed to load projects.')
    return jsonify(projects=rows)


@bp.route('/my', methods=['POST'])
@role_required('company_admin')
def create_project():
    payload = project_payload(_body())
    if not payload.get('title'):
        return jsonify(success=False, message='title is required'), 400
    try:
        project = marketplace.create_project(current_auth().client(), payload)
    except BackendError as e:
        return error_response(e, 'Error adding project')
    flash('Project added successfully!', 'success')
    return jsonify(success=True, project=project, redirect=MANAGE_PAGE), 201


@bp.route('/my/<project_id>', methods=['PUT'])
@role_required('company_admin')
def update_project(project_id):
    try:
        project = marketplace.update_project(
            current_auth().client(), project_id, project_payload(_body())
        )
    except BackendError as e:
        return error_response(e, 'Error updating project')
    flash('Project updated successfully!', 'success')
    return jsonify(success=True, project=project, redirect=MANAGE_PAGE)


@bp.route('/my/<project_id>', methods=['DELETE'])
@role_required('company_admin')
def delete_project(project_id):
    try:
        marketplace.delete_project(current_auth().client(), project_id)
    except BackendError as e:
        return error_response(e, 'Failed to delete project')
    flash('Project deleted successfully!', 'success')
    return jsonify(success=True)


@bp.route('/my/<project_id>/images/remove', methods=['POST'])
@role_required('company_admin')
def remove_image(project_id):
    image_url = _body().get('imageUrl')
    if not image_url:
        return jsonify(success=False, message='imageUrl is required'), 400
    try:
        images = marketplace.remove_project_image(current_auth().client(), project_id, image_url)
    except BackendError as e:
        return error_response(e, 'Failed to remove image')
    flash('Image removed successfully!', 'success')
    return jsonify(success=True, images=images)


@bp.route('/<project_id>')
def view_project(project_id):
    try:
        project = marketplace.get_project(reader_client(), project_id)
    except BackendError as e:
        return error_response(e, 'Project not found')
    return jsonify(project=project)


@bp.route('/<project_id>/reviews', methods=['GET'])
def project_reviews(project_id):
    try:
        reviews = marketplace.list_project_reviews(reader_client(), project_id)
    except BackendError as e:
        return error_response(e, 'Failed to load reviews')
    return jsonify(reviews=reviews)


@bp.route('/<project_id>/reviews', methods=['POST'])
@role_required()
def add_review(project_id):
    data = request.get_json(silent=True) or {}
    try:
        rating = int(data.get('rating') or 0)
    except (TypeError, ValueError):
        rating = 0
    comment = str(data.get('comment') or '').strip()
    images = list(data.get('images') or [])
    if not 1 <= rating <= 5:
        return jsonify(success=False, message='Please select a rating'), 400
    if not comment:
        return jsonify(success=False, message='Please enter a comment'), 400
    if len(images) > MAX_REVIEW_IMAGES:
        return jsonify(success=False, message=f'Maximum {MAX_REVIEW_IMAGES} images allowed'), 400
    try:
        review = marketplace.create_project_review(
            current_auth().client(), project_id,
            {'rating': rating, 'comment': comment, 'images': images},
        )
    except BackendError as e:
        return error_response(e, 'Failed to submit review')
    return jsonify(success=True, review=review), 201
