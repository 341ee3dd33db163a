
import logging
from sqlalchemy import text, inspect
from scene_prompter.db.session import engine, Base
from scene_prompter.models.all_models import PromptDraft

logger = logging.getLogger(__name__)

# Columns added after the first release of prompt_drafts.
# format: (column_name, sql_type_and_default)
DRAFT_COLUMNS = [
    ("title", "VARCHAR"),
    ("updated_at", "VARCHAR"),
]


def check_and_migrate_tables(bind=None):
    bind = bind or engine
    inspector = inspect(bind)

    if not inspector.has_table(PromptDraft.__tablename__):
        PromptDraft.__table__.create(bind=bind, checkfirst=True)
        logger.info("Created %s table", PromptDraft.__tablename__)
        return

    existing_columns = [c['name'] for c in inspector.get_columns(PromptDraft.__tablename__)]
    columns_to_add = [(name, col_def) for name, col_def in DRAFT_COLUMNS if name not in existing_columns]
    if not columns_to_add:
        return

    with bind.begin() as conn:
        for col_name, col_type in columns_to_add:
            logger.info(f"Adding column {PromptDraft.__tablename__}.{col_name}...")
            conn.execute(text(f"ALTER TABLE {PromptDraft.__tablename__} ADD COLUMN {col_name} {col_type}"))


def init_db(bind=None):
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    check_and_migrate_tables(bind)
