"""Feedback report routes"""
from flask import jsonify, request, current_app, abort
from flask_login import current_user
from debttracker import db
from debttracker.reports import reports_bp
from debttracker.reports.forms import ReportForm, ReportStatusForm
from debttracker.models import Report, REPORT_TYPES, REPORT_PRIORITIES, REPORT_CATEGORIES, REPORT_STATUSES
from debttracker.utils.decorators import admin_required
from debttracker.utils.helpers import json_formdata, form_errors, log_activity, commit_or_rollback

REPORT_FILTERS = {
    'status': REPORT_STATUSES,
    'type': REPORT_TYPES,
    'priority': REPORT_PRIORITIES,
    'category': REPORT_CATEGORIES,
}

def _get_report_or_404(id):
    report = db.session.get(Report, id)
    if report is None:
        abort(404, description='Report not found')
    return report

@reports_bp.route('/', methods=['POST'])
def create_report():
    """Submit a report; logging in is optional"""
    form = ReportForm(formdata=json_formdata())
    if not form.validate():
        return jsonify(form_errors(form)), 400

    report = Report(
        user_id=current_user.id if current_user.is_authenticated else None,
        user_agent=request.user_agent.string[:255] if request.user_agent else None,
        ip_address=request.remote_addr,
        **form.report_values()
    )
    db.session.add(report)
    db.session.flush()

    log_activity('create_report', 'report', report.id, f'{report.type} report submitted: {report.title}')

    error = commit_or_rollback('Failed to submit report')
    if error:
        return jsonify(error), 500

    return jsonify({'success': True, 'message': 'Report submitted successfully', 'report': report.to_summary()}), 201

@reports_bp.route('/', methods=['GET'])
@admin_required
def list_reports():
    """List reports, newest first, filtered by status, type, priority and category"""
    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('limit', current_app.config['REPORTS_PER_PAGE'], type=int)

    query = Report.query
    for field, allowed in REPORT_FILTERS.items():
        value = request.args.get(field)
        if value:
            if value not in allowed:
                return jsonify({'success': False, 'errors': {field: ['Not a valid choice.']}}), 400
            query = query.filter(getattr(Report, field) == value)

    reports = query.order_by(Report.created_at.desc(), Report.id.desc()).paginate(
        page=page, per_page=per_page, error_out=False
    )

    return jsonify({
        'success': True,
        'reports': [report.to_dict() for report in reports.items],
        'pagination': {
            'current_page': reports.page,
            'total_pages': reports.pages,
            'total_reports': reports.total,
            'has_next': reports.has_next,
            'has_prev': reports.has_prev
        }
    })

@reports_bp.route('/<int:id>', methods=['GET'])
@admin_required
def view_report(id):
    """View a single report"""
    return jsonify({'success': True, 'report': _get_report_or_404(id).to_dict()})

@reports_bp.route('/<int:id>/status', methods=['PATCH'])
@admin_required
def update_report_status(id):
    """Move a report through open, in-progress, resolved and closed"""
    report = _get_report_or_404(id)

    form = ReportStatusForm(formdata=json_formdata())
    if not form.validate():
        return jsonify(form_errors(form)), 400

    old_status = report.status
    report.status = form.status.data
    log_activity('update_report_status', 'report', report.id,
                 f'Report {report.id} status changed from {old_status} to {report.status}')

    error = commit_or_rollback('Failed to update report status')
    if error:
        return jsonify(error), 500

    return jsonify({'success': True, 'message': 'Report status updated successfully', 'report': report.to_dict()})

@reports_bp.route('/<int:id>', methods=['DELETE'])
@admin_required
def delete_report(id):
    """Delete a report"""
    report = _get_report_or_404(id)

    log_activity('delete_report', 'report', report.id, f'Deleted report: {report.title}')
    db.session.delete(report)

    error = commit_or_rollback('Failed to delete report')
    if error:
        return jsonify(error), 500

    return jsonify({'success': True, 'message': 'Report deleted successfully'})
