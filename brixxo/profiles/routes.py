# brixxo/profiles/routes.py

"""Company and professional profiles.

Profiles are read-only to browsers; only the owning account creates, edits or
deletes its own record, always through the ``my`` endpoints. Admins set the verification flag.
"""

from flask import Blueprint, request, jsonify, flash

from brixxo.api import marketplace
from brixxo.auth.session import current_auth, reader_client, role_required
from brixxo.errors import BackendError, error_response

bp = Blueprint('profiles', __name__)


def _body():
    return request.get_json(silent=True) or request.form.to_dict()


# -- companies ----------------------------------------------------------------

@bp.route('/companies')
def list_companies():
    try:
        rows = marketplace.list_companies(reader_client(), request.args.to_dict() or None)
    except BackendError as e:
        return error_response(e, 'Failed to load companies.')
    return jsonify(companies=rows)


@bp.route('/companies/<company_id>')
def view_company(company_id):
    try:
        company = marketplace.get_company(reader_client(), company_id)
    except BackendError as e:
        return error_response(e, 'Company not found')
    return jsonify(company=company)


@bp.route('/companies/my', methods=['GET'])
@role_required('company_admin')
def my_company():
    try:
        company = marketplace.get_my_company(current_auth().client())
    except BackendError as e:
        return error_response(e, 'Failed to load company profile.')
    return jsonify(company=company)


@bp.route('/companies/my', methods=['POST'])
@role_required('company_admin')
def create_company():
    try:
        company = marketplace.create_company(current_auth().client(), _body())
    except BackendError as e:
        return error_response(e, 'Failed to create company profile.')
    flash('Company profile created', 'success')
    return jsonify(success=True, company=company), 201


@bp.route('/companies/my', methods=['PUT'])
@role_required('company_admin')
def update_company():
    try:
        company = marketplace.update_my_company(current_auth().client(), _body())
    except BackendError as e:
        return error_response(e, 'Failed to update company profile.')
    flash('Company profile updated', 'success')
    return jsonify(success=True, company=company)


@bp.route('/companies/my', methods=['DELETE'])
@role_required('company_admin')
def delete_company():
    try:
        marketplace.delete_my_company(current_auth().client())
    except BackendError as e:
        return error_response(e, 'Failed to delete company profile.')
    flash('Company profile deleted', 'success')
    return jsonify(success=True)


# -- professionals ------------------------------------------------------------

@bp.route('/professionals')
def list_professionals():
    try:
        rows = marketplace.list_professionals(reader_client(), request.args.to_dict() or None)
    except BackendError as e:
        return error_response(e, 'Failed to load professionals.')
    return jsonify(professionals=rows)


@bp.route('/professionals/<professional_id>')
def view_professional(professional_id):
    try:
        professional = marketplace.get_professional(reader_client(), professional_id)
    except BackendError as e:
        return error_response(e, 'Professional not found')
    return jsonify(professional=professional)


@bp.route('/professionals/my', methods=['GET'])
@role_required('professional')
def my_professional_profile():
    try:
        professional = marketplace.get_my_professional_profile(current_auth().client())
    except BackendError as e:
        return error_response(e, 'Failed to load profile.')
    return jsonify(professional=professional)


@bp.route('/professionals/my', methods=['POST'])
@role_required('professional')
def create_professional_profile():
    try:
        professional = marketplace.create_professional(current_auth().client(), _body())
    except BackendError as e:
        return error_response(e, 'Failed to create profile.')
    flash('Profile created', 'success')
    return jsonify(success=True, professional=professional), 201


@bp.route('/professionals/my', methods=['PUT'])
@role_required('professional')
def update_professional_profile():
    try:
        professional = marketplace.update_my_professional_profile(current_auth().client(), _body())
    except BackendError as e:
        return error_response(e, 'Failed to update profile.')
    flash('Profile updated', 'success')
    return jsonify(success=True, professional=professional)


# -- verification -------------------------------------------------------------

@bp.route('/companies/<company_id>/verify', methods=['POST', 'PUT'])
@role_required('admin')
def verify_company(company_id):
    try:
        company = marketplace.verify_company(current_auth().client(), company_id)
    except BackendError as e:
        return error_response(e, 'Error verifying company')
    flash('Company verified', 'success')
    return jsonify(success=True, company=company)


@bp.route('/professionals/<professional_id>/verify', methods=['POST', 'PUT'])
@role_required('admin')
def verify_professional(professional_id):
    try:
        professional = marketplace.verify_professional(current_auth().client(), professional_id)
    except BackendError as e:
        return error_response(e, 'Error verifying professional')
    flash('Professional verified', 'success')
    return jsonify(success=True, professional=professional)
