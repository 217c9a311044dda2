import os
import logging
from datetime import datetime
from flask import Flask, render_template, request, redirect, url_for, flash, jsonify, send_file
from config import RepoConfig, ConfigError
from github_client import GitHubDocumentClient, RemoteReadError, RemoteWriteError, RevisionConflictError
from editor_session import EditorSession, SaveInProgressError, SaveUnavailableError, LOADING
from excel_handler import ExcelHandler
from record_store import RECORD_FIELDS

# Set up logging
logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO').upper())

logger = logging.getLogger(__name__)


def _apply_form_edits(editor):
    """
    Copy edited cells from the submitted table form into the store.
    Cells are named cell-<position>-<field>; only changed values are written.
    """
    row_count = request.form.get('row_count')
    if row_count is None:
        return 0
    if row_count != str(len(editor.store)):
        flash('The table changed since this page was loaded; your unsaved cell edits were not applied', 'warning')
        return 0

    changed = 0
    for key, value in request.form.items():
        if not key.startswith('cell-'):
            continue
        parts = key.split('-', 2)
        if len(parts) != 3 or not parts[1].isdigit():
            continue
        position, field = int(parts[1]), parts[2]
        if field == 'id':
            continue
        current = editor.store.get_value(position, field, None)
        if current is None and value == '':
            continue
        if current is not None and str(current) == value:
            continue
        if editor.store.update_field(position, field, value):
            changed += 1
    if changed:
        logger.debug(f"Applied {changed} cell edits from form")
    return changed


def create_app(repo_config=None, client=None):
    app = Flask(__name__)
    app.secret_key = os.environ.get("SESSION_SECRET", "dev-secret-key-change-in-production")

    if client is None:
        if repo_config is None:
            repo_config = RepoConfig.from_env()
        client = GitHubDocumentClient(repo_config)

    app.config['EDITOR_SESSION'] = EditorSession(client)
    excel_handler = ExcelHandler()

    def editor():
        return app.config['EDITOR_SESSION']

    @app.route('/')
    def index():
        session = editor()
        if not session.loaded:
            try:
                session.ensure_loaded()
            except RemoteReadError as e:
                flash(str(e), 'error')

        store = session.store
        columns = store.columns()
        return render_template(
            'index.html',
            records=store.records,
            columns=columns,
            extra_columns=columns[len(RECORD_FIELDS):],
            loading=session.state == LOADING,
            state=session.state,
            sha=session.sha,
            can_save=session.can_save,
            conflict=session.conflict,
        )

    @app.route('/add_record', methods=['POST'])
    def add_record():
        session = editor()
        _apply_form_edits(session)
        position = session.store.add_record()
        return redirect(url_for('index') + f'#row-{position}')

    @app.route('/delete_record/<int:position>', methods=['POST'])
    def delete_record(position):
        session = editor()
        _apply_form_edits(session)
        if not session.store.delete_record(position):
            flash('Record not found', 'warning')
        return redirect(url_for('index'))

    @app.route('/update_field', methods=['POST'])
    def update_field():
        """Update a single cell; accepts form or JSON bodies"""
        data = request.get_json(silent=True) or request.form
        field = (data.get('field') or '').strip()
        try:
            position = int(data.get('position'))
        except (TypeError, ValueError):
            return jsonify({'ok': False, 'error': 'position must be an integer'}), 400
        if not field:
            return jsonify({'ok': False, 'error': 'field is required'}), 400

        value = data.get('value', '')
        if not editor().store.update_field(position, field, '' if value is None else str(value)):
            return jsonify({'ok': False, 'error': 'Record not found'}), 404
        return jsonify({'ok': True})

    @app.route('/save', methods=['POST'])
    def save():
        session = editor()
        _apply_form_edits(session)
        try:
            message = request.form.get('message', '').strip() or None
            new_sha = session.save(message)
            flash(f'Records saved to the repository (revision {new_sha[:7]})', 'success')
        except RevisionConflictError as e:
            logger.warning(f"Save rejected: {str(e)}")
            flash(f'{str(e)}. Reload to get the latest version, then reapply your edits.', 'warning')
        except RemoteWriteError as e:
            logger.error(f"Error saving records: {str(e)}")
            flash(str(e), 'error')
        except SaveInProgressError as e:
            flash(str(e), 'warning')
        except SaveUnavailableError as e:
            flash(str(e), 'error')
        return redirect(url_for('index'))

    @app.route('/reload', methods=['POST'])
    def reload():
        try:
            editor().reload()
            flash('Records reloaded from the repository', 'info')
        except RemoteReadError as e:
            flash(str(e), 'error')
        except SaveInProgressError as e:
            flash(str(e), 'warning')
        return redirect(url_for('index'))

    @app.route('/get_records')
    def get_records():
        session = editor()
        return jsonify({
            'records': session.store.records,
            'columns': session.store.columns(),
            'sha': session.sha,
            'state': session.state,
            'conflict': session.conflict,
            'can_save': session.can_save,
        })

    @app.route('/export_records', methods=['POST'])
    def export_records():
        """Export the current records to Excel"""
        session = editor()
        _apply_form_edits(session)
        records = session.store.records
        if not records:
            flash('No records to export', 'warning')
            return redirect(url_for('index'))

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f"students_export_{timestamp}.xlsx"
        try:
            buffer = excel_handler.export_records(records, session.store.columns())
        except Exception as e:
            logger.error(f"Error exporting records: {str(e)}")
            flash('Error exporting records', 'error')
            return redirect(url_for('index'))
        return send_file(
            buffer,
            as_attachment=True,
            download_name=filename,
            mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )

    return app


if __name__ == '__main__':
    try:
        app = create_app()
    except ConfigError as e:
        logger.error(f"Cannot start: {str(e)}")
        raise SystemExit(1)
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)), debug=os.environ.get('FLASK_DEBUG') == '1')
