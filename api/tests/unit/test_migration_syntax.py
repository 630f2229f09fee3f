"""Tests for migration file syntax and structure."""

import importlib.util
from pathlib import Path

from runlist_api.db.models import Base, Organization, Project, Job, JobRun, RUN_STATUSES
from runlist_api.models.runs import RunStatus

API_DIR = Path(__file__).parent.parent.parent


def initial_migration_files():
    return list((API_DIR / "migrations" / "versions").glob("*_initial_schema.py"))


class TestMigrationSyntax:
    """Test that migration files are syntactically correct."""

    def test_initial_migration_imports(self):
        migration_files = initial_migration_files()

        assert len(migration_files) == 1, "Should have exactly one initial schema migration"

        spec = importlib.util.spec_from_file_location("migration", migration_files[0])
        migration_module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(migration_module)

        assert callable(migration_module.upgrade)
        assert callable(migration_module.downgrade)
        assert isinstance(migration_module.revision, str)
        assert len(migration_module.revision) > 0
        assert migration_module.down_revision is None

    def test_alembic_env_syntax(self):
        env_file = API_DIR / "migrations" / "env.py"
        assert env_file.exists(), "env.py should exist in migrations directory"

        content = env_file.read_text()

        assert 'from alembic import context' in content
        assert 'from sqlalchemy import' in content
        assert 'def run_migrations_offline()' in content
        assert 'def run_migrations_online()' in content
        assert 'from runlist_api.db.models import Base' in content

    def test_alembic_ini_points_at_migrations(self):
        content = (API_DIR / "alembic.ini").read_text()

        assert "script_location = migrations" in content

    def test_database_models_import(self):
        assert Organization.__tablename__ == 'organizations'
        assert Project.__tablename__ == 'projects'
        assert Job.__tablename__ == 'jobs'
        assert JobRun.__tablename__ == 'job_runs'
        assert len(Base.metadata.tables) == 4

    def test_model_statuses_match_api_enum(self):
        assert RUN_STATUSES == tuple(status.value for status in RunStatus)
        check = next(c for c in JobRun.__table__.constraints if c.name == "job_runs_status_check")
        for status in RunStatus:
            assert f"'{status.value}'" in str(check.sqltext)

    def test_migration_status_check_matches_api_enum(self):
        content = initial_migration_files()[0].read_text()
        expected = ", ".join(f"'{status.value}'" for status in RunStatus)

        assert f"status IN ({expected})" in content

    def test_migration_creates_all_required_tables(self):
        content = initial_migration_files()[0].read_text()

        for table in ['organizations', 'projects', 'jobs', 'job_runs']:
            assert f"create_table('{table}'" in content, f"Migration should create {table} table"

        assert 'job_runs_job_created_id' in content
        assert 'CREATE EXTENSION IF NOT EXISTS pgcrypto' in content
        assert 'drop_table(' in content
        assert 'drop_index(' in content
