# tests/test_migrations.py
import io
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory

ALEMBIC_DIR = Path(__file__).resolve().parent.parent / "alembic"


def alembic_config(buffer=None) -> Config:
    # no ini file, so env.py leaves the test logging setup alone
    cfg = Config(output_buffer=buffer)
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    return cfg


def test_migrations_form_a_single_chain():
    script = ScriptDirectory.from_config(alembic_config())
    assert script.get_heads() == ["8b41d2e6c5a3"]
    revisions = [rev.revision for rev in script.walk_revisions()]
    assert revisions == ["8b41d2e6c5a3", "3f2a9c1d7e10"]


def test_offline_upgrade_renders_full_schema(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'offline.db'}")
    buffer = io.StringIO()
    command.upgrade(alembic_config(buffer), "head", sql=True)
    sql = buffer.getvalue()
    assert "CREATE TABLE users" in sql
    assert "CREATE TABLE appointments" in sql
    assert "ADD COLUMN otp_attempts" in sql
