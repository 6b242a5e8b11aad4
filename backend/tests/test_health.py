"""
Basic health and import tests for the Select Check backend.
"""
import pytest
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


def test_python_version():
    """Ensure Python 3.11+"""
    assert sys.version_info >= (3, 11)


def test_schemas_import():
    import selectcheck.schemas as schemas
    assert hasattr(schemas, 'AnalysisResult')
    assert hasattr(schemas, 'ElementRecord')


def test_analyzer_import():
    from selectcheck.checker.analyzer import SelectAnalyzer
    analyzer = SelectAnalyzer()
    assert analyzer is not None


def test_analyzer_has_required_methods():
    """SelectAnalyzer exposes every check as its own step"""
    from selectcheck.checker.analyzer import SelectAnalyzer
    analyzer = SelectAnalyzer()
    required_methods = [
        'analyze',
        'check_markup_balance',
        'check_duplicate_ids',
        'analyze_select',
        'resolve_references',
        'resolve_label',
        'check_separator',
        'check_optgroups',
        'check_state_attributes',
        'classify_label',
        'check_form_structure',
    ]
    for method in required_methods:
        assert hasattr(analyzer, method), f"SelectAnalyzer missing method: {method}"


def test_checker_modules_importable():
    import selectcheck.checker.balance
    import selectcheck.checker.markup
    import selectcheck.checker.source_lines
    import selectcheck.reports.html_report
    assert True


def test_health_endpoint():
    pytest.importorskip("httpx", reason="httpx not installed")
    from fastapi.testclient import TestClient
    from selectcheck.main import app
    client = TestClient(app)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_root_endpoint():
    pytest.importorskip("httpx", reason="httpx not installed")
    from fastapi.testclient import TestClient
    from selectcheck.main import app
    resp = TestClient(app).get("/")
    assert resp.json()["docs"] == "/docs"
